"""레코드 출력 기본 인터페이스

RecordSink 추상 클래스를 정의합니다.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from commit_extractor.extraction.output_record import OutputRecord


class RecordSink(ABC):
    """모든 출력 대상의 기본 인터페이스

    레코드는 순회 순서대로 write 됩니다.
    쓰기 실패 시 SinkWriteError 를 발생시키며, 그 시점의 부분 출력 상태는 정의되지 않습니다.
    """

    def __init__(self, path: str, include_changes: bool = False):
        self.path = path
        self.include_changes = include_changes
        self.records_written = 0

    @abstractmethod
    def open(self) -> None:
        """출력 대상 열기

        Raises:
            SinkWriteError: 출력 대상을 열 수 없는 경우
        """
        pass

    @abstractmethod
    def write(self, record: OutputRecord) -> None:
        """레코드 한 건 기록

        Raises:
            SinkWriteError: 기록에 실패한 경우
        """
        pass

    @abstractmethod
    def close(self, summary: Optional[Dict[str, Any]] = None) -> None:
        """출력 대상 닫기

        Args:
            summary: 실행 요약 (지원하는 형식에서만 기록)
        """
        pass

    def __enter__(self) -> 'RecordSink':
        self.open()
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()
