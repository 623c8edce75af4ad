"""Tests for the status value types."""

import dataclasses

import pytest

from gitmeta.status.models import (
    FileChangeKind,
    NoCommitsError,
    Present,
    RepositoryStatus,
)


class TestIsClean:
    def test_empty_status_is_clean(self):
        status = RepositoryStatus()
        assert status.staged == {}
        assert status.working_dir == {}
        assert status.untracked == ()
        assert status.is_clean is True

    def test_untracked_only_is_clean(self):
        status = RepositoryStatus(untracked=["notes.txt", "scratch/"])
        assert status.is_clean is True

    def test_staged_is_dirty(self):
        status = RepositoryStatus(staged={"a.py": FileChangeKind.ADDED})
        assert status.is_clean is False

    def test_working_dir_is_dirty(self):
        status = RepositoryStatus(working_dir={"a.py": FileChangeKind.MODIFIED})
        assert status.is_clean is False


class TestImmutability:
    def test_fields_frozen(self):
        status = RepositoryStatus(head_commit="abc")
        with pytest.raises(dataclasses.FrozenInstanceError):
            status.head_commit = "def"  # type: ignore[misc]

    def test_mappings_read_only(self):
        status = RepositoryStatus(staged={"a.py": FileChangeKind.ADDED})
        with pytest.raises(TypeError):
            status.staged["b.py"] = FileChangeKind.MODIFIED  # type: ignore[index]

    def test_caller_dict_is_copied(self):
        staged = {"a.py": FileChangeKind.ADDED}
        status = RepositoryStatus(staged=staged)
        staged["b.py"] = FileChangeKind.MODIFIED
        assert list(status.staged) == ["a.py"]

    def test_untracked_path_cannot_be_staged(self):
        with pytest.raises(ValueError, match="a.py"):
            RepositoryStatus(staged={"a.py": FileChangeKind.ADDED}, untracked=["a.py"])

    def test_untracked_path_cannot_be_in_working_dir(self):
        with pytest.raises(ValueError, match="b.py"):
            RepositoryStatus(working_dir={"b.py": FileChangeKind.MODIFIED}, untracked=["b.py"])

    def test_disjoint_paths_accepted(self):
        status = RepositoryStatus(staged={"a.py": FileChangeKind.ADDED}, untracked=["b.py"])
        assert status.untracked == ("b.py",)

    def test_untracked_is_tuple(self):
        status = RepositoryStatus(untracked=["x"])
        assert status.untracked == ("x",)


class TestDetached:
    def test_detached_when_no_branch(self):
        assert RepositoryStatus(head_commit="abc").is_detached is True
        assert RepositoryStatus(current_branch_name="main").is_detached is False


class TestSnapshots:
    def test_present_on_pin(self):
        assert Present(status=RepositoryStatus()).on_pin is True
        assert Present(status=RepositoryStatus(), is_descendant=False).on_pin is False

    def test_no_commits_error_carries_status(self):
        status = RepositoryStatus(current_branch_name="main", untracked=["a"])
        err = NoCommitsError("/tmp/repo", status)
        assert err.status is status
        assert "/tmp/repo" in str(err)
