"""읽기 전용 git 명령 실행기

GitCommandRunner 클래스 정의입니다.
화이트리스트 기반으로 저장소를 변경하지 않는 git 하위 명령만 실행합니다.
"""

import logging
import shlex
import subprocess
import time
from typing import List, Optional, Sequence

from .command_result import CommandResult


class GitCommandRunner:
    """읽기 전용 git 명령 실행기"""

    ALLOWED_SUBCOMMANDS = {
        'rev-parse', 'rev-list', 'show', 'diff-tree', 'log', 'cat-file'
    }

    # 원격 접근이나 외부 프로그램 실행으로 이어질 수 있는 옵션
    FORBIDDEN_OPTIONS = (
        '--output', '--exec', '--ext-diff', '--textconv', '--upload-pack'
    )

    # 비ASCII 경로를 따옴표 없이 출력
    CONFIG_OPTIONS = ('-c', 'core.quotePath=false')

    def __init__(self, git_binary: str = "git", timeout: int = 60):
        self.git_binary = git_binary
        self.timeout = timeout
        self.logger = logging.getLogger(__name__)

    def validate_args(self, args: Sequence[str]) -> bool:
        """명령 인자 안전성 검증

        Args:
            args: git 이후의 인자 목록 (예: ["rev-list", "HEAD"])

        Returns:
            bool: 실행 허용 여부
        """
        if not args:
            return False

        if not all(isinstance(arg, str) for arg in args):
            return False

        if args[0] not in self.ALLOWED_SUBCOMMANDS:
            return False

        for arg in args[1:]:
            if arg.startswith(self.FORBIDDEN_OPTIONS):
                return False

        return True

    def run(self, args: Sequence[str], cwd: Optional[str] = None,
            timeout: Optional[int] = None) -> CommandResult:
        """git 명령을 실행합니다

        Args:
            args: git 이후의 인자 목록
            cwd: 명령 실행 디렉토리
            timeout: 타임아웃 (초, 기본값: 생성 시 지정한 값)

        Returns:
            CommandResult: 명령 실행 결과
        """
        command: List[str] = [self.git_binary, *self.CONFIG_OPTIONS, *args]
        start_time = time.time()

        if not self.validate_args(args):
            return CommandResult(
                success=False,
                args=command,
                error_message=f"Command blocked by safety filters: {' '.join(map(str, command))}"
            )

        self.logger.debug(f"git 명령 실행: {shlex.join(command)} (cwd={cwd})")

        try:
            result = subprocess.run(
                command,
                cwd=cwd,
                capture_output=True,
                timeout=timeout or self.timeout
            )
        except subprocess.TimeoutExpired:
            return CommandResult(
                success=False,
                args=command,
                error_message=f"Command timed out after {timeout or self.timeout} seconds",
                execution_time=time.time() - start_time
            )
        except OSError as e:
            return CommandResult(
                success=False,
                args=command,
                error_message=f"Failed to execute command: {e}",
                execution_time=time.time() - start_time
            )

        # 개행 변환 없이 디코딩하여 라인 내용의 '\r'을 보존
        stdout = result.stdout.decode('utf-8', errors='replace') if result.stdout else ""
        stderr = result.stderr.decode('utf-8', errors='replace') if result.stderr else ""

        return CommandResult(
            success=result.returncode == 0,
            args=command,
            stdout=stdout,
            stderr=stderr,
            returncode=result.returncode,
            error_message=stderr.strip() if result.returncode != 0 and stderr else None,
            execution_time=time.time() - start_time
        )
