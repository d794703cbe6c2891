from dataclasses import dataclass, field
from datetime import datetime
from typing import Tuple


@dataclass(frozen=True)
class Commit:
    """저장소 히스토리의 단일 커밋 (읽기 전용)"""
    id: str
    author_name: str
    author_email: str
    authored_at: datetime
    message: str
    parent_ids: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def short_id(self) -> str:
        """7자리 축약 해시"""
        return self.id[:7]

    @property
    def summary(self) -> str:
        """커밋 메시지 첫 줄"""
        lines = self.message.strip().splitlines()
        return lines[0].strip() if lines else ""

    @property
    def is_root(self) -> bool:
        return not self.parent_ids

    @property
    def is_merge(self) -> bool:
        return len(self.parent_ids) > 1


@dataclass(frozen=True)
class ChangedFile:
    """첫 번째 부모 대비 변경된 파일"""
    path: str
    added_length: int = 0
    removed_length: int = 0
    binary: bool = False
    patch: str = ""

    @property
    def changes_length(self) -> int:
        """추가 + 삭제 내용 길이"""
        return self.added_length + self.removed_length
