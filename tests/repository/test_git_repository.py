"""git_repository.py 통합 테스트

실제 git 저장소를 만들어 순회 순서와 diff 계산을 검증합니다.
"""

import pytest

from commit_extractor.errors import DiffUnavailableError, NotFoundError
from commit_extractor.repository.command_result import CommandResult
from commit_extractor.repository.git_command import GitCommandRunner
from commit_extractor.repository.git_repository import GitRepository


@pytest.mark.integration
class TestGitRepositoryOpen:
    """저장소 열기 테스트"""

    def test_open_missing_path(self, tmp_path):
        with pytest.raises(NotFoundError):
            GitRepository.open(str(tmp_path / "missing"))

    def test_open_plain_directory(self, tmp_path, git_repo_builder):
        plain = tmp_path / "plain"
        plain.mkdir()
        with pytest.raises(NotFoundError):
            GitRepository.open(str(plain))

    def test_open_subdirectory_is_not_root(self, git_repo_builder):
        builder = git_repo_builder()
        builder.commit("init", {"src/main.rs": "fn main() {}\n"})

        with pytest.raises(NotFoundError):
            GitRepository.open(str(builder.path / "src"))

    def test_open_root(self, git_repo_builder):
        builder = git_repo_builder()
        repository = GitRepository.open(str(builder.path))
        assert repository.path == str(builder.path.resolve())


@pytest.mark.integration
class TestGitRepositoryWalk:
    """히스토리 순회 테스트"""

    def test_walk_newest_first(self, scenario_repo):
        builder, ids = scenario_repo
        repository = GitRepository.open(str(builder.path))

        commits = list(repository.walk())

        assert [c.id for c in commits] == [ids["C3"], ids["C2"], ids["C1"]]
        assert commits[0].message == "refactor rs module"
        assert commits[0].author_name == "Test Author"
        assert commits[0].author_email == "author@example.com"
        assert commits[0].parent_ids == (ids["C2"],)
        assert commits[2].is_root
        assert commits[0].authored_at > commits[2].authored_at

    def test_walk_empty_repository(self, git_repo_builder):
        builder = git_repo_builder("empty")
        repository = GitRepository.open(str(builder.path))

        assert list(repository.walk()) == []

    def test_walk_is_lazy(self, scenario_repo):
        """커밋 상세 정보는 소비할 때 하나씩 읽음"""
        builder, ids = scenario_repo
        repository = GitRepository.open(str(builder.path))

        calls = []
        original = repository.read_commit

        def tracking_read_commit(commit_id):
            calls.append(commit_id)
            return original(commit_id)

        repository.read_commit = tracking_read_commit
        walk = repository.walk()
        first = next(walk)

        assert first.id == ids["C3"]
        assert calls == [ids["C3"]]


@pytest.mark.integration
class TestGitRepositoryDiff:
    """diff 계산 테스트"""

    def test_root_commit_diffs_against_empty_tree(self, scenario_repo):
        builder, ids = scenario_repo
        repository = GitRepository.open(str(builder.path))
        root = repository.read_commit(ids["C1"])

        files = repository.diff(root)

        assert [(f.path, f.added_length, f.removed_length) for f in files] == [("a.rs", 12, 0)]

    def test_diff_against_first_parent(self, scenario_repo):
        builder, ids = scenario_repo
        repository = GitRepository.open(str(builder.path))
        commit = repository.read_commit(ids["C3"])

        files = {f.path: f for f in repository.diff(commit)}

        assert set(files) == {"a.rs", "b.txt"}
        assert files["a.rs"].added_length == 288
        assert files["a.rs"].removed_length == 12
        assert files["a.rs"].changes_length == 300
        assert files["b.txt"].changes_length == len("notes")

    def test_binary_file_has_zero_length(self, git_repo_builder):
        builder = git_repo_builder()
        commit_id = builder.commit("add image", {"logo.png": b"\x89PNG\x00\x01\x02\x00binary"})
        repository = GitRepository.open(str(builder.path))

        files = repository.diff(repository.read_commit(commit_id))

        assert len(files) == 1
        assert files[0].path == "logo.png"
        assert files[0].binary is True
        assert files[0].changes_length == 0

    def test_carriage_return_counts_as_content(self, git_repo_builder):
        builder = git_repo_builder()
        commit_id = builder.commit("add rs", {"a.rs": b"ab\rcd\n", "b.rs": b"crlf\r\n"})
        repository = GitRepository.open(str(builder.path))

        files = {f.path: f for f in repository.diff(repository.read_commit(commit_id))}

        assert files["a.rs"].changes_length == 5
        assert files["b.rs"].changes_length == 5

    def test_non_ascii_path_is_unquoted(self, git_repo_builder):
        builder = git_repo_builder()
        commit_id = builder.commit("add caf\u00e9", {"caf\u00e9.rs": "abc\n"})
        repository = GitRepository.open(str(builder.path))

        files = repository.diff(repository.read_commit(commit_id))

        assert [f.path for f in files] == ["caf\u00e9.rs"]
        assert files[0].changes_length == 3

    def test_merge_commit_diffs_against_first_parent(self, git_repo_builder):
        builder = git_repo_builder()
        builder.commit("base", {"main.rs": "base\n"})
        builder.git("checkout", "-q", "-b", "feature")
        builder.commit("feature work", {"feature.rs": "feature\n"})
        builder.git("checkout", "-q", "-")
        builder.commit("main work", {"main.rs": "base\nmain\n"})
        builder.git("merge", "-q", "--no-ff", "--no-edit", "feature")
        repository = GitRepository.open(str(builder.path))

        merge = next(repository.walk())
        files = repository.diff(merge)

        assert merge.is_merge
        assert [f.path for f in files] == ["feature.rs"]

    def test_changed_paths(self, scenario_repo):
        builder, ids = scenario_repo
        repository = GitRepository.open(str(builder.path))

        paths = repository.changed_paths(repository.read_commit(ids["C3"]))

        assert sorted(paths) == ["a.rs", "b.txt"]

    def test_diff_failure_raises(self, scenario_repo):
        builder, ids = scenario_repo
        repository = GitRepository.open(str(builder.path))
        commit = repository.read_commit(ids["C3"])

        failing_runner = GitCommandRunner()
        failing_runner.run = lambda args, cwd=None, timeout=None: CommandResult(
            success=False, args=["git", *args], error_message="fatal: bad object"
        )
        repository.runner = failing_runner

        with pytest.raises(DiffUnavailableError) as exc_info:
            repository.diff(commit)
        assert exc_info.value.commit_id == ids["C3"]

    def test_unparseable_diff_raises(self, scenario_repo):
        builder, ids = scenario_repo
        repository = GitRepository.open(str(builder.path))
        commit = repository.read_commit(ids["C3"])

        garbled_runner = GitCommandRunner()
        garbled_runner.run = lambda args, cwd=None, timeout=None: CommandResult(
            success=True, args=["git", *args], stdout="@@ -1 +1 @@\n-a\n+b\n"
        )
        repository.runner = garbled_runner

        with pytest.raises(DiffUnavailableError) as exc_info:
            repository.diff(commit)
        assert "unparseable diff output" in exc_info.value.reason
