"""git 명령 실행 결과

CommandResult 클래스 정의입니다.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class CommandResult:
    """git 명령 실행 결과"""
    success: bool
    args: List[str]
    stdout: str = ""
    stderr: str = ""
    returncode: Optional[int] = None
    error_message: Optional[str] = None
    execution_time: float = 0.0
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def lines(self) -> List[str]:
        """비어있지 않은 출력 라인 목록"""
        return [line for line in self.stdout.split('\n') if line.strip()]
