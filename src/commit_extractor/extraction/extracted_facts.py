from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, FrozenSet, Optional


@dataclass(frozen=True)
class ExtractedFacts:
    """필터 판정에 필요한 커밋별 파생 정보"""
    commit_id: str
    author_name: str
    author_email: str
    authored_at: datetime
    summary: str
    message: str
    message_length: int
    extensions: FrozenSet[str]
    matched_extensions: FrozenSet[str]
    changes_length: int
    unmatched_files: int = 0
    degraded: bool = False
    changes: str = ""

    @property
    def author(self) -> str:
        """`이름 <이메일>` 형식의 작성자"""
        if self.author_email:
            return f"{self.author_name} <{self.author_email}>"
        return self.author_name

    def to_dict(self) -> Dict[str, Any]:
        """JSON 직렬화를 위한 딕셔너리 변환"""
        return {
            'commit_id': self.commit_id,
            'author': self.author,
            'authored_at': self.authored_at.isoformat(),
            'message': self.message,
            'message_length': self.message_length,
            'extensions': sorted(self.extensions),
            'matched_extensions': sorted(self.matched_extensions),
            'changes_length': self.changes_length,
            'unmatched_files': self.unmatched_files,
            'degraded': self.degraded,
        }


@dataclass(frozen=True)
class ExtractionResult:
    """커밋 추출 결과

    facts 가 None 이면 해당 커밋은 건너뜁니다.
    facts.degraded 가 True 이면 diff 내용 없이 경로만으로 계산된 결과입니다.
    """
    commit_id: str
    facts: Optional[ExtractedFacts]
    error: Optional[str] = None

    @property
    def skipped(self) -> bool:
        return self.facts is None

    @property
    def degraded(self) -> bool:
        return self.facts is not None and self.facts.degraded
