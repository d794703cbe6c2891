"""커밋 추출기 테스트를 위한 pytest 설정"""

import os
import shutil
import subprocess
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Callable, Dict, Iterator, List, Optional, Union

import pytest

from commit_extractor.config.settings import FilterConfig
from commit_extractor.errors import DiffUnavailableError
from commit_extractor.repository.commit import ChangedFile, Commit


def pytest_configure(config):
    """pytest 설정을 구성합니다. 단위/통합 테스트용 마커들을 등록합니다."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line("markers", "integration: marks tests as integration tests")
    config.addinivalue_line("markers", "unit: marks tests as unit tests")


class GitRepoBuilder:
    """테스트용 git 저장소 생성기

    커밋마다 작성 시각을 1시간씩 증가시켜 순회 순서를 고정합니다.
    """

    BASE_DATE = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

    def __init__(self, path: Path):
        self.path = path
        self.commit_count = 0
        self.path.mkdir(parents=True, exist_ok=True)
        self.git("init", "-q")

    def git(self, *args: str, env: Optional[Dict[str, str]] = None) -> str:
        run_env = dict(os.environ)
        run_env.update({
            "GIT_CONFIG_NOSYSTEM": "1",
            "HOME": str(self.path),
            "GIT_AUTHOR_NAME": "Test Author",
            "GIT_AUTHOR_EMAIL": "author@example.com",
            "GIT_COMMITTER_NAME": "Test Author",
            "GIT_COMMITTER_EMAIL": "author@example.com",
        })
        if env:
            run_env.update(env)
        result = subprocess.run(
            ["git", "-c", "commit.gpgsign=false", *args],
            cwd=self.path,
            env=run_env,
            capture_output=True,
            text=True,
            check=True
        )
        return result.stdout

    def commit(self, message: str, files: Dict[str, Union[str, bytes, None]],
               author: str = "Test Author", email: str = "author@example.com") -> str:
        """파일을 쓰고(None 이면 삭제) 커밋한 뒤 커밋 해시를 반환"""
        for name, content in files.items():
            file_path = self.path / name
            if content is None:
                self.git("rm", "-q", name)
                continue
            file_path.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                file_path.write_bytes(content)
            else:
                file_path.write_text(content, encoding="utf-8")
            self.git("add", name)

        date = (self.BASE_DATE + timedelta(hours=self.commit_count)).isoformat()
        self.commit_count += 1
        self.git(
            "commit", "-q", "--allow-empty", "--allow-empty-message", "-m", message,
            env={
                "GIT_AUTHOR_NAME": author,
                "GIT_AUTHOR_EMAIL": email,
                "GIT_AUTHOR_DATE": date,
                "GIT_COMMITTER_DATE": date,
            }
        )
        return self.git("rev-parse", "HEAD").strip()


@pytest.fixture
def git_repo_builder(tmp_path) -> Callable[[str], GitRepoBuilder]:
    """tmp_path 아래에 git 저장소를 만드는 팩토리 (git 이 없으면 건너뜀)"""
    if shutil.which("git") is None:
        pytest.skip("git is not installed")

    def factory(name: str = "repo") -> GitRepoBuilder:
        return GitRepoBuilder(tmp_path / name)
    return factory


@pytest.fixture
def scenario_repo(git_repo_builder):
    """3개 커밋 시나리오 저장소

    - C1: a.rs 추가 ("fix bug", 변경 길이 12)
    - C2: a.py 추가 ("update docs", 변경 길이 40)
    - C3: a.rs 수정 + b.txt 추가 ("refactor rs module", a.rs 변경 길이 300)
    """
    builder = git_repo_builder("scenario")
    c1 = builder.commit("fix bug", {"a.rs": "abcdefghijkl\n"})
    c2 = builder.commit("update docs", {"a.py": "x" * 40 + "\n"})
    c3 = builder.commit("refactor rs module", {"a.rs": "y" * 288 + "\n", "b.txt": "notes\n"})
    return builder, {"C1": c1, "C2": c2, "C3": c3}


class FakeRepository:
    """메모리 기반 저장소 (순회 횟수 기록용)"""

    def __init__(self, entries: List[Dict]):
        self.entries = entries
        self.visited: List[str] = []
        self.diff_failures = set()
        self.path_failures = set()

    def walk(self) -> Iterator[Commit]:
        for entry in self.entries:
            self.visited.append(entry["commit"].id)
            yield entry["commit"]

    def _entry(self, commit: Commit) -> Dict:
        return next(entry for entry in self.entries if entry["commit"].id == commit.id)

    def diff(self, commit: Commit, keep_patch: bool = False) -> List[ChangedFile]:
        if commit.id in self.diff_failures:
            raise DiffUnavailableError(commit.id, "binary content")
        return list(self._entry(commit)["files"])

    def changed_paths(self, commit: Commit) -> List[str]:
        if commit.id in self.path_failures:
            raise DiffUnavailableError(commit.id, "unreadable tree")
        return [changed.path for changed in self._entry(commit)["files"]]


def make_commit(commit_id: str, message: str, author: str = "Test Author",
                hours: int = 0, parents=("parent",)) -> Commit:
    return Commit(
        id=commit_id,
        author_name=author,
        author_email="author@example.com",
        authored_at=datetime(2024, 1, 1, tzinfo=timezone.utc) + timedelta(hours=hours),
        message=message,
        parent_ids=tuple(parents)
    )


@pytest.fixture
def fake_scenario_repository() -> FakeRepository:
    """3개 커밋 시나리오의 메모리 저장소 (순회 순서: C3, C2, C1)"""
    return FakeRepository([
        {
            "commit": make_commit("c3" * 20, "refactor rs module", hours=2),
            "files": [
                ChangedFile(path="a.rs", added_length=288, removed_length=12),
                ChangedFile(path="b.txt", added_length=5),
            ],
        },
        {
            "commit": make_commit("c2" * 20, "update docs", hours=1),
            "files": [ChangedFile(path="a.py", added_length=40)],
        },
        {
            "commit": make_commit("c1" * 20, "fix bug", hours=0, parents=()),
            "files": [ChangedFile(path="a.rs", added_length=12)],
        },
    ])


@pytest.fixture
def rs_config() -> FilterConfig:
    return FilterConfig(extensions=["rs"], size=10)


@pytest.fixture
def commit_factory() -> Callable[..., Commit]:
    return make_commit


@pytest.fixture
def fake_repository_factory() -> Callable[[List[Dict]], FakeRepository]:
    return FakeRepository
