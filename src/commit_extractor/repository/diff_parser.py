"""git unified diff 파싱

`git diff-tree -p` 출력을 unidiff로 읽어 파일 단위 ChangedFile 목록으로 변환합니다.
추가/삭제 길이는 해당 라인의 내용 문자 수(+/- 표시와 개행 제외)의 합입니다.
바이너리 파일은 길이 0으로 기록됩니다.
"""

from typing import List

from unidiff import PatchSet, PatchedFile

from .commit import ChangedFile


def _content_length(value: str) -> int:
    # 라인 내용에는 끝의 '\n'만 제외하고 '\r' 등은 그대로 포함
    if value.endswith('\n'):
        return len(value) - 1
    return len(value)


def _to_changed_file(patched_file: PatchedFile, keep_patch: bool) -> ChangedFile:
    if patched_file.is_binary_file:
        return ChangedFile(path=patched_file.path, binary=True)

    added_length = 0
    removed_length = 0
    for hunk in patched_file:
        for line in hunk:
            if line.is_added:
                added_length += _content_length(line.value)
            elif line.is_removed:
                removed_length += _content_length(line.value)

    return ChangedFile(
        path=patched_file.path,
        added_length=added_length,
        removed_length=removed_length,
        patch=str(patched_file).rstrip('\n') if keep_patch else ''
    )


def parse_patch(patch_text: str, keep_patch: bool = False) -> List[ChangedFile]:
    """unified diff 텍스트를 파일별 변경 정보로 변환

    Args:
        patch_text: `git diff-tree -p` 출력
        keep_patch: 파일별 패치 텍스트 보관 여부

    Returns:
        diff에 나타난 순서대로의 ChangedFile 목록

    Raises:
        UnidiffParseError: diff 형식이 올바르지 않은 경우
    """
    return [
        _to_changed_file(patched_file, keep_patch)
        for patched_file in PatchSet(patch_text)
    ]
