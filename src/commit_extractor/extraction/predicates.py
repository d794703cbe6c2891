"""커밋 필터 조건 모음

각 조건은 `(ExtractedFacts, FilterConfig) -> bool` 형태의 독립 함수이며,
PREDICATES 순서대로 AND 결합되어 왼쪽부터 단락 평가됩니다.
범위 조건은 양 끝을 포함하며, 설정되지 않은 범위는 항상 통과합니다.
"""

from typing import Callable, List, Optional, Sequence, Tuple

from commit_extractor.config.settings import FilterConfig
from .extracted_facts import ExtractedFacts

Predicate = Callable[[ExtractedFacts, FilterConfig], bool]

MERGE_MESSAGE_PREFIXES = ("Merge pull request", "Merge branch")


def has_matching_extension(facts: ExtractedFacts, config: FilterConfig) -> bool:
    return bool(facts.matched_extensions)


def message_length_at_least_min(facts: ExtractedFacts, config: FilterConfig) -> bool:
    if config.message_length_min is None:
        return True
    return facts.message_length >= config.message_length_min


def message_length_at_most_max(facts: ExtractedFacts, config: FilterConfig) -> bool:
    if config.message_length_max is None:
        return True
    return facts.message_length <= config.message_length_max


def changes_length_at_least_min(facts: ExtractedFacts, config: FilterConfig) -> bool:
    if config.changes_length_min is None:
        return True
    return facts.changes_length >= config.changes_length_min


def changes_length_at_most_max(facts: ExtractedFacts, config: FilterConfig) -> bool:
    if config.changes_length_max is None:
        return True
    return facts.changes_length <= config.changes_length_max


def only_target_extensions(facts: ExtractedFacts, config: FilterConfig) -> bool:
    """요청 확장자 외의 파일(확장자 없는 파일 포함)을 변경한 커밋 제외"""
    if not config.only_target_extensions:
        return True
    return facts.unmatched_files == 0


def not_bot_author(facts: ExtractedFacts, config: FilterConfig) -> bool:
    if not config.exclude_bots:
        return True
    return "bot" not in facts.author_name.lower()


def not_merge_message(facts: ExtractedFacts, config: FilterConfig) -> bool:
    if not config.exclude_merge_messages:
        return True
    return not facts.summary.startswith(MERGE_MESSAGE_PREFIXES)


CORE_PREDICATES: List[Tuple[str, Predicate]] = [
    ("extension", has_matching_extension),
    ("message_length_min", message_length_at_least_min),
    ("message_length_max", message_length_at_most_max),
    ("changes_length_min", changes_length_at_least_min),
    ("changes_length_max", changes_length_at_most_max),
]

# 설정으로 켜는 경우에만 동작하는 추가 조건
OPTIONAL_PREDICATES: List[Tuple[str, Predicate]] = [
    ("only_target_extensions", only_target_extensions),
    ("bot_author", not_bot_author),
    ("merge_message", not_merge_message),
]

PREDICATES: List[Tuple[str, Predicate]] = CORE_PREDICATES + OPTIONAL_PREDICATES


def first_failing_predicate(facts: ExtractedFacts, config: FilterConfig,
                            predicates: Sequence[Tuple[str, Predicate]] = PREDICATES) -> Optional[str]:
    """처음으로 실패한 조건의 이름. 모두 통과하면 None"""
    for name, predicate in predicates:
        if not predicate(facts, config):
            return name
    return None


def accepts(facts: ExtractedFacts, config: FilterConfig,
            predicates: Sequence[Tuple[str, Predicate]] = PREDICATES) -> bool:
    """모든 조건을 만족하는지 여부"""
    return first_failing_predicate(facts, config, predicates) is None
