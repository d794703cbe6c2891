import logging
from typing import AbstractSet, Iterable, Optional

from commit_extractor.config.settings import FilterConfig
from commit_extractor.errors import DiffUnavailableError
from commit_extractor.repository.commit import ChangedFile, Commit
from commit_extractor.repository.git_repository import GitRepository
from .extracted_facts import ExtractedFacts, ExtractionResult


def derive_extension(path: str) -> Optional[str]:
    """경로의 확장자 (마지막 `.` 이후 문자열, 소문자)

    디렉토리 이름의 점은 무시합니다. 점이 없거나 점으로 끝나는 경로는 None 입니다.
    """
    name = path.rsplit('/', 1)[-1]
    if '.' not in name:
        return None
    extension = name.rsplit('.', 1)[1]
    return extension.lower() or None


def measure_message(message: str, mode: str = "full") -> str:
    """길이 판정 대상 메시지

    Args:
        message: 원본 커밋 메시지
        mode: "full" 이면 앞뒤 공백을 제거한 전체 메시지, "summary" 이면 첫 줄
    """
    stripped = message.strip()
    if mode == "summary":
        lines = stripped.splitlines()
        return lines[0].strip() if lines else ""
    return stripped


def extract(commit: Commit, requested_extensions: AbstractSet[str],
            files: Iterable[ChangedFile], message_mode: str = "full",
            degraded: bool = False) -> ExtractedFacts:
    """커밋과 변경 파일 목록에서 필터 판정용 정보를 계산 (부수 효과 없음)

    Args:
        commit: 대상 커밋
        requested_extensions: 소문자, 점 없는 확장자 집합
        files: 첫 번째 부모 대비 변경 파일 목록
        message_mode: 메시지 길이 측정 방식 ("full" 또는 "summary")
        degraded: diff 내용 없이 경로만으로 계산하는 경우

    Returns:
        ExtractedFacts: 요청 확장자와 일치하는 파일만 변경 길이에 반영된 결과
    """
    extensions = set()
    changes_length = 0
    unmatched_files = 0
    patches = []

    for changed_file in files:
        extension = derive_extension(changed_file.path)
        if extension is None:
            unmatched_files += 1
            continue

        extensions.add(extension)
        if extension not in requested_extensions:
            unmatched_files += 1
            continue

        changes_length += changed_file.changes_length
        if changed_file.patch:
            patches.append(changed_file.patch)

    message = measure_message(commit.message, message_mode)

    return ExtractedFacts(
        commit_id=commit.id,
        author_name=commit.author_name,
        author_email=commit.author_email,
        authored_at=commit.authored_at,
        summary=commit.summary,
        message=message,
        message_length=len(message),
        extensions=frozenset(extensions),
        matched_extensions=frozenset(extensions & set(requested_extensions)),
        changes_length=changes_length,
        unmatched_files=unmatched_files,
        degraded=degraded,
        changes='\n'.join(patches)
    )


class CommitExtractor:
    """저장소에서 커밋별 diff를 읽어 ExtractedFacts 를 계산하는 클래스"""

    def __init__(self, repository: GitRepository, config: FilterConfig,
                 include_changes: bool = False):
        """
        Args:
            repository: 열린 저장소 핸들
            config: 필터 설정 (요청 확장자, 메시지 측정 방식)
            include_changes: 일치 파일의 패치 텍스트 보관 여부
        """
        self.repository = repository
        self.config = config
        self.include_changes = include_changes
        self.requested_extensions = config.extension_set
        self.logger = logging.getLogger(__name__)

    def extract_commit(self, commit: Commit) -> ExtractionResult:
        """단일 커밋 추출

        diff 내용을 읽지 못하면 변경 경로만으로 길이 0인 결과를 만들고,
        경로 목록조차 읽지 못하면 건너뛰기 결과를 반환합니다.
        """
        degraded = False
        try:
            files = self.repository.diff(commit, keep_patch=self.include_changes)
        except DiffUnavailableError as e:
            self.logger.warning(f"diff 읽기 실패, 경로 정보만 사용합니다: {commit.short_id} - {e.reason}")
            try:
                files = [ChangedFile(path=path) for path in self.repository.changed_paths(commit)]
            except DiffUnavailableError as fallback_error:
                self.logger.warning(f"변경 파일 목록 읽기 실패, 커밋을 건너뜁니다: {commit.short_id}")
                return ExtractionResult(commit_id=commit.id, facts=None, error=str(fallback_error))
            degraded = True

        facts = extract(
            commit,
            self.requested_extensions,
            files,
            message_mode=self.config.message_mode,
            degraded=degraded
        )
        return ExtractionResult(commit_id=commit.id, facts=facts)
