from dataclasses import dataclass, asdict
from datetime import datetime
from typing import Any, Dict, List, Tuple

from .extracted_facts import ExtractedFacts

EXTENSION_SEPARATOR = ","


@dataclass(frozen=True)
class OutputRecord:
    """선별된 커밋 한 건의 출력 레코드"""
    commit_id: str
    author: str
    authored_at: datetime
    message: str
    changes_length: int
    matched_extensions: Tuple[str, ...]
    changes: str = ""

    FIELDNAMES = (
        'commit_id', 'author', 'authored_at', 'message',
        'changes_length', 'matched_extensions'
    )

    @classmethod
    def fieldnames(cls, include_changes: bool = False) -> List[str]:
        """출력 컬럼 순서"""
        names = list(cls.FIELDNAMES)
        if include_changes:
            names.append('changes')
        return names

    @classmethod
    def from_facts(cls, facts: ExtractedFacts) -> 'OutputRecord':
        return cls(
            commit_id=facts.commit_id,
            author=facts.author,
            authored_at=facts.authored_at,
            message=facts.message,
            changes_length=facts.changes_length,
            matched_extensions=tuple(sorted(facts.matched_extensions)),
            changes=facts.changes
        )

    def to_dict(self, include_changes: bool = False) -> Dict[str, Any]:
        """JSON 직렬화를 위한 딕셔너리 변환"""
        data = asdict(self)
        data['authored_at'] = self.authored_at.isoformat()
        data['matched_extensions'] = list(self.matched_extensions)
        if not include_changes:
            data.pop('changes')
        return data

    def to_row(self, include_changes: bool = False) -> List[Any]:
        """CSV 행 변환 (fieldnames 순서)"""
        row = [
            self.commit_id,
            self.author,
            self.authored_at.isoformat(),
            self.message,
            self.changes_length,
            EXTENSION_SEPARATOR.join(self.matched_extensions),
        ]
        if include_changes:
            row.append(self.changes)
        return row
