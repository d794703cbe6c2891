"""추출 실행 진입점

설정 검증 → 저장소 열기 → 커밋 목록 조회 → 출력 대상 열기 → 순회 순서로 실행합니다.
앞의 세 단계에서 발생한 오류는 어떤 레코드도 출력하기 전에 보고됩니다.
"""

import logging
from typing import Callable, Optional

from commit_extractor.config.settings import ExtractorConfig
from commit_extractor.extraction.output_record import OutputRecord
from commit_extractor.extraction.traversal import TraversalController, TraversalSummary
from commit_extractor.repository.git_command import GitCommandRunner
from commit_extractor.repository.git_repository import GitRepository
from commit_extractor.sinks import create_sink

logger = logging.getLogger(__name__)


def run_extraction(config: ExtractorConfig,
                   on_accept: Optional[Callable[[OutputRecord], None]] = None,
                   command_runner: Optional[GitCommandRunner] = None) -> TraversalSummary:
    """저장소에서 커밋을 추출하여 출력 파일에 기록

    Args:
        config: 검증된 추출 설정
        on_accept: 레코드가 기록될 때마다 호출되는 콜백
        command_runner: git 명령 실행기 (테스트용 주입)

    Returns:
        TraversalSummary: 순회 결과 요약

    Raises:
        RepositoryAccessError: 저장소를 열 수 없는 경우
        SinkWriteError: 출력 파일에 기록할 수 없는 경우
    """
    repository = GitRepository.open(config.repository, runner=command_runner)
    # 히스토리 목록 조회 실패는 출력 파일을 만들기 전에 보고
    commits = repository.walk()

    sink = create_sink(config.output)
    sink.open()
    logger.info(f"출력 파일: {config.output.path} ({config.output.format})")

    controller = TraversalController(
        repository,
        config.filters,
        sink,
        include_changes=config.output.include_changes,
        on_accept=on_accept
    )

    summary: Optional[TraversalSummary] = None
    try:
        summary = controller.run(commits)
    finally:
        sink.close(summary.to_dict() if summary is not None else None)

    return summary
