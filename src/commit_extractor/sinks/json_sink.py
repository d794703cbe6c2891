import json
import logging
import os
from typing import Any, Dict, IO, List, Optional

from commit_extractor.errors import SinkWriteError
from commit_extractor.extraction.output_record import OutputRecord
from .base import RecordSink


class JsonRecordSink(RecordSink):
    """JSON 파일 출력

    레코드를 모아 두었다가 close 시점에 `{"records": [...], "summary": {...}}`
    형태로 파일 전체를 덮어씁니다.
    """

    def __init__(self, path: str, include_changes: bool = False):
        super().__init__(path, include_changes)
        self._file: Optional[IO[str]] = None
        self._records: List[Dict[str, Any]] = []
        self.logger = logging.getLogger(__name__)

    def open(self) -> None:
        try:
            parent = os.path.dirname(os.path.abspath(self.path))
            os.makedirs(parent, exist_ok=True)
            self._file = open(self.path, 'w', encoding='utf-8')
        except OSError as e:
            raise SinkWriteError(f"failed to open the output file {self.path} ({e})") from e
        self._records = []

    def write(self, record: OutputRecord) -> None:
        if self._file is None:
            raise SinkWriteError(f"output file is not open: {self.path}")
        self._records.append(record.to_dict(self.include_changes))
        self.records_written += 1

    def close(self, summary: Optional[Dict[str, Any]] = None) -> None:
        if self._file is None:
            return
        data = {
            'records': self._records,
            'summary': summary
        }
        try:
            json.dump(data, self._file, indent=2, ensure_ascii=False)
            self._file.write('\n')
            self._file.close()
        except (OSError, TypeError, ValueError) as e:
            raise SinkWriteError(f"failed to write json output ({e})") from e
        finally:
            self._file = None
        self.logger.debug(f"JSON 출력 완료: {self.path} ({len(self._records)}건)")
