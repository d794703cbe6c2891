"""커밋 추출기 예외 정의

실행 전 단계(설정, 저장소 열기)에서 발생하는 예외는 실행을 중단시키고,
커밋 단위 예외(DiffUnavailableError)는 추출 단계에서 흡수됩니다.
"""


class CommitExtractorError(Exception):
    """커밋 추출기 최상위 예외"""
    pass


class ConfigError(CommitExtractorError):
    """잘못된 필터 설정 (범위 역전, 빈 확장자 목록, 0 이하의 목표 개수 등)"""
    pass


class RepositoryAccessError(CommitExtractorError):
    """저장소를 열거나 읽을 수 없는 경우"""
    pass


class NotFoundError(RepositoryAccessError):
    """저장소 경로가 없거나 저장소 루트가 아닌 경우"""
    pass


class CorruptRepoError(RepositoryAccessError):
    """git이 저장소를 읽지 못하는 경우"""
    pass


class DiffUnavailableError(CommitExtractorError):
    """특정 커밋의 diff 내용을 읽을 수 없는 경우"""

    def __init__(self, commit_id: str, reason: str):
        super().__init__(f"diff unavailable for {commit_id}: {reason}")
        self.commit_id = commit_id
        self.reason = reason


class SinkWriteError(CommitExtractorError):
    """출력 대상에 기록할 수 없는 경우

    부분 출력 상태는 정의되지 않습니다 (원자적 쓰기를 보장하지 않음).
    """
    pass
