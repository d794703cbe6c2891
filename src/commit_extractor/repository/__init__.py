"""로컬 git 저장소 접근 패키지

커밋 히스토리 순회와 커밋별 diff 정보를 읽기 전용으로 제공합니다.
"""

from .command_result import CommandResult
from .commit import ChangedFile, Commit
from .diff_parser import parse_patch
from .git_command import GitCommandRunner
from .git_repository import GitRepository

__all__ = [
    'CommandResult',
    'ChangedFile',
    'Commit',
    'parse_patch',
    'GitCommandRunner',
    'GitRepository',
]
