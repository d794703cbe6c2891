"""커밋 정보 추출 및 필터링 패키지

순회 제어(TraversalController)는 출력 계층에 의존하므로
`commit_extractor.extraction.traversal` 에서 직접 import 합니다.
"""

from .extracted_facts import ExtractedFacts, ExtractionResult
from .commit_extractor import CommitExtractor, derive_extension, extract, measure_message
from .output_record import OutputRecord
from .predicates import PREDICATES, CORE_PREDICATES, accepts, first_failing_predicate

__all__ = [
    'ExtractedFacts',
    'ExtractionResult',
    'CommitExtractor',
    'derive_extension',
    'extract',
    'measure_message',
    'OutputRecord',
    'PREDICATES',
    'CORE_PREDICATES',
    'accepts',
    'first_failing_predicate',
]
