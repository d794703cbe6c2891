"""커밋 순회 제어

저장소 히스토리를 순서대로 순회하며 커밋별 정보를 추출하고,
필터 조건을 통과한 커밋을 출력 대상으로 전달합니다.
선별 개수가 목표에 도달하면 다음 커밋을 읽지 않고 즉시 종료합니다.
"""

import logging
import time
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Iterable, Optional, Sequence, Tuple

from commit_extractor.config.settings import FilterConfig
from commit_extractor.repository.commit import Commit
from commit_extractor.repository.git_repository import GitRepository
from commit_extractor.sinks.base import RecordSink
from .commit_extractor import CommitExtractor
from .output_record import OutputRecord
from .predicates import PREDICATES, Predicate, first_failing_predicate


class TraversalState(Enum):
    """순회 상태"""
    IDLE = "idle"
    WALKING = "walking"
    DONE = "done"


class StopReason(Enum):
    """순회 종료 사유"""
    TARGET_REACHED = "target_reached"
    HISTORY_EXHAUSTED = "history_exhausted"


@dataclass
class TraversalSummary:
    """순회 결과 요약"""
    visited: int = 0
    accepted: int = 0
    rejected: int = 0
    skipped: int = 0
    degraded: int = 0
    stop_reason: Optional[StopReason] = None
    processing_time_seconds: float = 0.0
    rejections: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """JSON 직렬화를 위한 딕셔너리 변환"""
        return {
            'visited': self.visited,
            'accepted': self.accepted,
            'rejected': self.rejected,
            'skipped': self.skipped,
            'degraded': self.degraded,
            'stop_reason': self.stop_reason.value if self.stop_reason else None,
            'processing_time_seconds': round(self.processing_time_seconds, 3),
            'rejections': dict(self.rejections),
        }


class TraversalController:
    """커밋 순회 및 선별 클래스"""

    def __init__(self, repository: GitRepository, config: FilterConfig, sink: RecordSink,
                 include_changes: bool = False,
                 predicates: Sequence[Tuple[str, Predicate]] = PREDICATES,
                 on_accept: Optional[Callable[[OutputRecord], None]] = None):
        """
        Args:
            repository: 열린 저장소 핸들 (순회 동안 이 컨트롤러가 단독으로 사용)
            config: 필터 설정
            sink: 선별된 레코드 출력 대상 (열린 상태)
            include_changes: 레코드에 패치 텍스트 포함 여부
            predicates: 순서대로 평가할 필터 조건 목록
            on_accept: 레코드 출력 후 호출되는 콜백 (진행률 표시 등)
        """
        self.repository = repository
        self.config = config
        self.sink = sink
        self.predicates = predicates
        self.on_accept = on_accept
        self.extractor = CommitExtractor(repository, config, include_changes=include_changes)
        self.state = TraversalState.IDLE
        self.logger = logging.getLogger(__name__)

    def run(self, commits: Optional[Iterable[Commit]] = None) -> TraversalSummary:
        """히스토리를 순회하며 조건을 만족하는 커밋을 출력

        Args:
            commits: 미리 연 순회 이터레이터 (기본값: repository.walk())

        Returns:
            TraversalSummary: 순회 결과 요약

        Raises:
            RepositoryAccessError: 히스토리를 읽을 수 없는 경우
            SinkWriteError: 출력 대상에 기록할 수 없는 경우
        """
        summary = TraversalSummary()
        rejections: Counter = Counter()
        start_time = time.time()

        self.state = TraversalState.WALKING
        self.logger.info(
            f"커밋 순회 시작: 목표 {self.config.size}개, "
            f"확장자 {','.join(self.config.extensions)}"
        )

        if commits is None:
            commits = self.repository.walk()

        for commit in commits:
            summary.visited += 1
            result = self.extractor.extract_commit(commit)

            if result.skipped:
                summary.skipped += 1
                self.logger.info(f"Skip commit #{commit.short_id} (failed to read commit changes)")
                continue

            facts = result.facts
            if result.degraded:
                summary.degraded += 1

            failed = first_failing_predicate(facts, self.config, self.predicates)
            if failed is not None:
                summary.rejected += 1
                rejections[failed] += 1
                self.logger.debug(f"Skip commit #{commit.short_id} ({failed} predicate failed)")
                continue

            record = OutputRecord.from_facts(facts)
            self.sink.write(record)
            summary.accepted += 1
            self.logger.info(f"Save commit #{commit.short_id}")

            if self.on_accept is not None:
                self.on_accept(record)

            if summary.accepted >= self.config.size:
                summary.stop_reason = StopReason.TARGET_REACHED
                break

        if summary.stop_reason is None:
            summary.stop_reason = StopReason.HISTORY_EXHAUSTED

        self.state = TraversalState.DONE
        summary.rejections = dict(rejections)
        summary.processing_time_seconds = time.time() - start_time

        self.logger.info(
            f"커밋 순회 완료: {summary.accepted}/{summary.visited} 커밋 선별 "
            f"({summary.stop_reason.value}, {summary.processing_time_seconds:.2f}초)"
        )
        return summary
