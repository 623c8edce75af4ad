"""Tests for the terminal and JSON reporters."""

import io
import json

import pytest
from rich.console import Console

from gitmeta.gate.models import GateFailure, Violation
from gitmeta.git.adapter import BackendQueryError
from gitmeta.output import json_report, terminal
from gitmeta.status.models import (
    Failed,
    FileChangeKind,
    NewlyAdded,
    NotVisible,
    Present,
    RepositoryStatus,
    SubmoduleEntry,
    TreeStatus,
    Unborn,
)

PIN = "a" * 40
HEAD = "b" * 40


def _status(**kwargs) -> RepositoryStatus:
    kwargs.setdefault("current_branch_name", "main")
    kwargs.setdefault("head_commit", PIN)
    return RepositoryStatus(**kwargs)


def _entry(snapshot, name="lib", pinned=PIN) -> SubmoduleEntry:
    return SubmoduleEntry(name=name, pinned_sha=pinned, snapshot=snapshot)


def _console() -> Console:
    return Console(file=io.StringIO(), width=200, color_system=None)


class TestFileStatuses:
    def test_clean_is_empty(self):
        assert terminal.file_statuses(_status()).plain == ""

    def test_grouped_sections(self):
        status = _status(
            staged={"b.txt": FileChangeKind.ADDED, "a.txt": FileChangeKind.RENAMED},
            working_dir={"c.txt": FileChangeKind.REMOVED},
            untracked=("d.txt",),
        )
        lines = terminal.file_statuses(status).plain.splitlines()
        assert lines[0] == "Changes staged to be committed:"
        assert "        renamed:      a.txt" in lines
        assert "        new file:     b.txt" in lines
        assert lines.index("        renamed:      a.txt") < lines.index("        new file:     b.txt")
        assert "Changes not staged for commit:" in lines
        assert "        deleted:      c.txt" in lines
        assert "Untracked files:" in lines
        assert "        d.txt" in lines

    def test_untracked_can_be_hidden(self):
        status = _status(untracked=("d.txt",))
        assert terminal.file_statuses(status, show_untracked=False).plain == ""


class TestDescribeSubmodule:
    def test_on_pin_and_clean_is_empty(self):
        entry = _entry(Present(_status()))
        assert terminal.describe_submodule(entry, "main").plain == ""

    def test_new_commits(self):
        entry = _entry(Present(_status(head_commit=HEAD), is_descendant=True))
        assert terminal.describe_submodule(entry, "main").plain == "Has new commits.\n"

    def test_diverged(self):
        entry = _entry(Present(_status(head_commit=HEAD), is_descendant=False))
        assert terminal.describe_submodule(entry, "main").plain == (
            "Head is on bbbbbbbb, which is not a descendant of the expected commit: aaaaaaaa.\n"
        )

    def test_wrong_branch(self):
        entry = _entry(Present(_status(current_branch_name="feature")))
        assert terminal.describe_submodule(entry, "main").plain == "On wrong branch: 'feature'.\n"

    def test_detached_submodule_is_wrong_branch(self):
        entry = _entry(Present(_status(current_branch_name=None)))
        assert "(detached)" in terminal.describe_submodule(entry, "main").plain

    def test_no_expected_branch_skips_comparison(self):
        entry = _entry(Present(_status(current_branch_name="feature")))
        assert terminal.describe_submodule(entry, None).plain == ""

    def test_newly_added(self):
        entry = _entry(NewlyAdded(url="https://example.com/lib.git"), pinned=None)
        assert terminal.describe_submodule(entry, "main").plain == (
            "was added for the url https://example.com/lib.git.\n"
        )

    def test_unborn(self):
        entry = _entry(Unborn(_status(head_commit=None)))
        assert terminal.describe_submodule(entry, "main").plain.startswith("Has no commits.")

    def test_failed(self):
        entry = _entry(Failed(BackendQueryError("boom")))
        assert "could not be inspected: boom" in terminal.describe_submodule(entry, "main").plain

    def test_unknown_snapshot_rejected(self):
        with pytest.raises(TypeError, match="Unknown submodule snapshot"):
            terminal.describe_submodule(_entry(object()), "main")

    def test_dirty_files_listed(self):
        status = _status(working_dir={"x.py": FileChangeKind.MODIFIED})
        text = terminal.describe_submodule(_entry(Present(status)), "main").plain
        assert "        modified:     x.py" in text


class TestRender:
    def test_clean_tree(self):
        console = _console()
        tree = TreeStatus(meta=_status(), submodules=(_entry(Present(_status())),))
        terminal.render(tree, console=console)
        out = console.file.getvalue()
        assert "On branch 'main'." in out
        assert "nothing to commit, working directory clean" in out
        assert "Sub-repos:" not in out

    def test_detached_without_commits(self):
        console = _console()
        tree = TreeStatus(meta=RepositoryStatus())
        terminal.render(tree, console=console)
        out = console.file.getvalue()
        assert "On detached head (none)." in out
        assert "No commits yet." in out

    def test_reports_only_interesting_submodules(self):
        console = _console()
        tree = TreeStatus(
            meta=_status(),
            submodules=(
                _entry(Present(_status()), name="quiet"),
                _entry(NotVisible(), name="hidden"),
                _entry(Present(_status(head_commit=HEAD), is_descendant=True), name="busy"),
            ),
        )
        terminal.render(tree, console=console)
        out = console.file.getvalue()
        assert "Sub-repos:" in out
        assert "busy" in out
        assert "quiet" not in out
        assert "hidden" not in out

    def test_requested_lists_every_name(self):
        console = _console()
        tree = TreeStatus(
            meta=_status(),
            submodules=(_entry(Present(_status()), name="quiet"), _entry(NotVisible(), name="gone")),
        )
        terminal.render_requested(tree, console=console)
        lines = console.file.getvalue().splitlines()
        assert lines == ["quiet", "no changes", "", "gone", "not visible"]

    def test_gate_failure(self):
        console = _console()
        failure = GateFailure([Violation("Sub-repo 'lib'", "not_clean", "is not clean")])
        terminal.render_gate_failure(failure, console=console)
        out = console.file.getvalue()
        assert "1 problem(s) found" in out
        assert "Sub-repo 'lib' is not clean." in out


class TestJsonReport:
    def test_tree_states(self):
        tree = TreeStatus(
            meta=_status(staged={"a.txt": FileChangeKind.TYPE_CHANGED}),
            submodules=(
                _entry(Present(_status()), name="on"),
                _entry(Present(_status(head_commit=HEAD), is_descendant=True), name="ahead"),
                _entry(Present(_status(head_commit=HEAD), is_descendant=False), name="off"),
                _entry(NotVisible(), name="hidden"),
                _entry(NewlyAdded(url="u"), name="new", pinned=None),
                _entry(Unborn(_status(head_commit=None)), name="empty"),
                _entry(Failed(BackendQueryError("boom")), name="broken"),
            ),
        )
        data = json.loads(json_report.render(tree))
        assert data["meta"]["staged"] == {"a.txt": "type_changed"}
        assert data["meta"]["clean"] is False
        states = {s["name"]: s["state"] for s in data["submodules"]}
        assert states == {
            "on": "on_pin",
            "ahead": "ahead",
            "off": "diverged",
            "hidden": "not_visible",
            "new": "added",
            "empty": "unborn",
            "broken": "error",
        }
        assert [s["name"] for s in data["submodules"]][:3] == ["on", "ahead", "off"]
        assert data["submodules"][4]["url"] == "u"
        assert data["submodules"][6]["error"] == "boom"

    def test_gate_passed(self):
        assert json_report.gate_to_dict(None) == {"version": "1.0", "passed": True, "violations": []}

    def test_gate_failed(self):
        failure = GateFailure([Violation("The meta-repository", "no_branch", "is not on a branch")])
        data = json.loads(json_report.render_gate(failure))
        assert data["passed"] is False
        assert data["violations"] == [{
            "subject": "The meta-repository",
            "code": "no_branch",
            "message": "The meta-repository is not on a branch.",
        }]
