"""선별된 커밋 레코드 출력 패키지"""

from commit_extractor.config.settings import OutputConfig
from .base import RecordSink
from .csv_sink import CsvRecordSink
from .json_sink import JsonRecordSink


def create_sink(output: OutputConfig) -> RecordSink:
    """출력 설정에 맞는 RecordSink 생성"""
    if output.format == "json":
        return JsonRecordSink(output.path, include_changes=output.include_changes)
    elif output.format == "csv":
        return CsvRecordSink(output.path, include_changes=output.include_changes)
    else:
        raise ValueError(f"Unknown output format: {output.format}")


__all__ = [
    'RecordSink',
    'CsvRecordSink',
    'JsonRecordSink',
    'create_sink',
]
