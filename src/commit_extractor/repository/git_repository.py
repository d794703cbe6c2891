"""git 저장소 접근 계층

로컬 저장소를 읽기 전용으로 열고, 커밋 히스토리 순회와
커밋별 변경 파일(diff) 정보를 제공합니다.

순회 순서는 `git rev-list HEAD`와 동일합니다 (HEAD에서 시작하는 전체 조상,
최신 커밋 우선). diff는 항상 첫 번째 부모를 기준으로 계산하며,
루트 커밋은 빈 트리를 기준으로 계산합니다.
"""

import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Iterator, List, Optional

from unidiff import UnidiffParseError

from commit_extractor.errors import CorruptRepoError, DiffUnavailableError, NotFoundError
from .commit import ChangedFile, Commit
from .diff_parser import parse_patch
from .git_command import GitCommandRunner

logger = logging.getLogger(__name__)

# %H, %an, %ae, %aI, %P, %B 를 NUL 문자로 구분
COMMIT_FORMAT = "%H%x00%an%x00%ae%x00%aI%x00%P%x00%B"

DIFF_OPTIONS = [
    '-r', '--no-commit-id', '--no-renames', '--no-color', '--no-ext-diff',
    '--src-prefix=a/', '--dst-prefix=b/'
]


class GitRepository:
    """로컬 git 저장소 핸들"""

    def __init__(self, path: str, runner: Optional[GitCommandRunner] = None):
        self.path = path
        self.runner = runner or GitCommandRunner()

    @classmethod
    def open(cls, path: str, runner: Optional[GitCommandRunner] = None) -> 'GitRepository':
        """저장소 열기

        Args:
            path: 저장소 루트 경로 (작업 트리 루트 또는 bare 저장소 디렉토리)
            runner: git 명령 실행기

        Returns:
            GitRepository: 열린 저장소 핸들

        Raises:
            NotFoundError: 경로가 없거나 저장소 루트가 아닌 경우
            CorruptRepoError: git이 저장소를 읽지 못하는 경우
        """
        runner = runner or GitCommandRunner()
        repo_path = Path(path).expanduser()

        if not repo_path.is_dir():
            raise NotFoundError(f"Repository path does not exist: {path}")

        resolved = str(repo_path.resolve())
        bare_result = runner.run(['rev-parse', '--is-bare-repository'], cwd=resolved)
        if not bare_result.success:
            message = bare_result.error_message or ""
            if 'not a git repository' in message.lower():
                raise NotFoundError(f"Not a git repository: {path}")
            raise CorruptRepoError(f"Failed to read repository {path}: {message}")

        if bare_result.stdout.strip() == 'true':
            root_result = runner.run(['rev-parse', '--absolute-git-dir'], cwd=resolved)
        else:
            root_result = runner.run(['rev-parse', '--show-toplevel'], cwd=resolved)

        if not root_result.success:
            raise CorruptRepoError(
                f"Failed to resolve repository root {path}: {root_result.error_message}"
            )

        root = os.path.realpath(root_result.stdout.strip())
        if root != os.path.realpath(resolved):
            raise NotFoundError(f"Path is not a repository root: {path} (root: {root})")

        logger.info(f"저장소 열기 완료: {resolved}")
        return cls(resolved, runner)

    def head(self) -> Optional[str]:
        """HEAD 커밋 해시. 커밋이 없는 저장소면 None"""
        result = self.runner.run(
            ['rev-parse', '--verify', '--quiet', 'HEAD^{commit}'], cwd=self.path
        )
        if not result.success:
            return None
        return result.stdout.strip() or None

    def walk(self) -> Iterator[Commit]:
        """커밋 히스토리 순회

        커밋 해시 목록은 호출 시점에 확정되며, 커밋 상세 정보는
        반환된 이터레이터를 소비할 때 하나씩 읽어옵니다.

        Raises:
            CorruptRepoError: 히스토리를 읽을 수 없는 경우
        """
        head = self.head()
        if head is None:
            logger.info(f"커밋이 없는 저장소입니다: {self.path}")
            return iter(())

        result = self.runner.run(['rev-list', head], cwd=self.path)
        if not result.success:
            raise CorruptRepoError(f"Failed to list commits: {result.error_message}")

        commit_ids = result.lines
        logger.debug(f"순회 대상 커밋 수: {len(commit_ids)}")
        return self._iter_commits(commit_ids)

    def _iter_commits(self, commit_ids: List[str]) -> Iterator[Commit]:
        for commit_id in commit_ids:
            commit = self.read_commit(commit_id)
            if commit is None:
                continue
            yield commit

    def read_commit(self, commit_id: str) -> Optional[Commit]:
        """단일 커밋 메타데이터 조회. 읽기 실패 시 None"""
        result = self.runner.run(
            ['show', '-s', '--no-color', f'--format={COMMIT_FORMAT}', commit_id],
            cwd=self.path
        )
        if not result.success:
            logger.warning(f"커밋 정보 조회 실패: {commit_id} - {result.error_message}")
            return None

        parts = result.stdout.split('\x00', 5)
        if len(parts) != 6:
            logger.warning(f"커밋 정보 파싱 실패: {commit_id}")
            return None

        sha, author_name, author_email, date_str, parents, message = parts
        try:
            authored_at = datetime.fromisoformat(date_str.strip().replace('Z', '+00:00'))
        except ValueError:
            logger.warning(f"커밋 날짜 파싱 실패: {commit_id} - {date_str}")
            return None

        return Commit(
            id=sha.strip(),
            author_name=author_name,
            author_email=author_email,
            authored_at=authored_at,
            message=message.rstrip('\n'),
            parent_ids=tuple(parents.split())
        )

    def _diff_targets(self, commit: Commit) -> List[str]:
        if commit.is_root:
            return ['--root', commit.id]
        return [commit.parent_ids[0], commit.id]

    def diff(self, commit: Commit, keep_patch: bool = False) -> List[ChangedFile]:
        """첫 번째 부모 대비 변경 파일 목록

        Args:
            commit: 대상 커밋
            keep_patch: 파일별 패치 텍스트 보관 여부

        Raises:
            DiffUnavailableError: diff를 생성할 수 없는 경우
        """
        result = self.runner.run(
            ['diff-tree', '-p', *DIFF_OPTIONS, *self._diff_targets(commit)],
            cwd=self.path
        )
        if not result.success:
            raise DiffUnavailableError(commit.id, result.error_message or "git diff-tree failed")
        try:
            return parse_patch(result.stdout, keep_patch=keep_patch)
        except UnidiffParseError as e:
            raise DiffUnavailableError(commit.id, f"unparseable diff output ({e})") from e

    def changed_paths(self, commit: Commit) -> List[str]:
        """첫 번째 부모 대비 변경된 경로 목록 (내용 없이)

        Raises:
            DiffUnavailableError: 변경 목록을 읽을 수 없는 경우
        """
        result = self.runner.run(
            ['diff-tree', '--name-only', '-z', *DIFF_OPTIONS, *self._diff_targets(commit)],
            cwd=self.path
        )
        if not result.success:
            raise DiffUnavailableError(commit.id, result.error_message or "git diff-tree failed")
        return [path for path in result.stdout.split('\x00') if path]
