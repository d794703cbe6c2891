import csv
import logging
import os
from typing import Any, Dict, IO, Optional

from commit_extractor.errors import SinkWriteError
from commit_extractor.extraction.output_record import OutputRecord
from .base import RecordSink


class CsvRecordSink(RecordSink):
    """CSV 파일 출력

    기존 파일이 있으면 이어서 기록하고, 비어있는 파일에만 헤더를 씁니다.
    """

    def __init__(self, path: str, include_changes: bool = False):
        super().__init__(path, include_changes)
        self._file: Optional[IO[str]] = None
        self._writer = None
        self.logger = logging.getLogger(__name__)

    def open(self) -> None:
        try:
            parent = os.path.dirname(os.path.abspath(self.path))
            os.makedirs(parent, exist_ok=True)
            self._file = open(self.path, 'a', newline='', encoding='utf-8')
            self._file.seek(0, os.SEEK_END)
            write_header = self._file.tell() == 0

            self._writer = csv.writer(self._file)
            if write_header:
                self._writer.writerow(OutputRecord.fieldnames(self.include_changes))
        except (OSError, csv.Error) as e:
            self._abandon()
            raise SinkWriteError(f"failed to open the output file {self.path} ({e})") from e

        self.logger.debug(f"CSV 출력 파일 열기: {self.path} (header={write_header})")

    def write(self, record: OutputRecord) -> None:
        if self._writer is None:
            raise SinkWriteError(f"output file is not open: {self.path}")
        try:
            self._writer.writerow(record.to_row(self.include_changes))
        except (OSError, csv.Error) as e:
            raise SinkWriteError(f"failed to write csv record ({e})") from e
        self.records_written += 1

    def close(self, summary: Optional[Dict[str, Any]] = None) -> None:
        if self._file is None:
            return
        try:
            self._file.flush()
            self._file.close()
        except OSError as e:
            raise SinkWriteError(f"failed to flush the output file {self.path} ({e})") from e
        finally:
            self._file = None
            self._writer = None

    def _abandon(self) -> None:
        file, self._file = self._file, None
        if file is not None:
            file.close()
        self._writer = None
