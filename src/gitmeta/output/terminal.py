"""Rich terminal reporter for repository, submodule and gate results."""

from __future__ import annotations

from typing import Optional

from rich.console import Console
from rich.text import Text

from gitmeta.gate.models import GateFailure
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

_KIND_LABEL = {
    FileChangeKind.ADDED: "new file:",
    FileChangeKind.MODIFIED: "modified:",
    FileChangeKind.REMOVED: "deleted:",
    FileChangeKind.CONFLICTED: "conflicted:",
    FileChangeKind.RENAMED: "renamed:",
    FileChangeKind.TYPE_CHANGED: "type changed:",
}
_LABEL_WIDTH = 14
_INDENT = "        "


def short_sha(sha: Optional[str]) -> str:
    return sha[:8] if sha else "(none)"


def file_statuses(status: RepositoryStatus, *, show_untracked: bool = True) -> Text:
    """Describe the file changes in *status*; empty Text when there are none."""
    text = Text()

    def _section(title: str) -> None:
        if text:
            text.append("\n")
        text.append(f"{title}\n\n")

    if status.staged:
        _section("Changes staged to be committed:")
        for path in sorted(status.staged):
            label = _KIND_LABEL[status.staged[path]].ljust(_LABEL_WIDTH)
            text.append(_INDENT)
            text.append(f"{label}{path}\n", style="green")

    if status.working_dir:
        _section("Changes not staged for commit:")
        for path in sorted(status.working_dir):
            label = _KIND_LABEL[status.working_dir[path]].ljust(_LABEL_WIDTH)
            text.append(_INDENT)
            text.append(f"{label}{path}\n", style="red")

    if show_untracked and status.untracked:
        _section("Untracked files:")
        for path in status.untracked:
            text.append(_INDENT)
            text.append(f"{path}\n", style="red")

    return text


def describe_submodule(
    entry: SubmoduleEntry,
    expected_branch: Optional[str],
    *,
    show_untracked: bool = True,
) -> Text:
    """Describe one submodule relative to its pin; empty Text if nothing to report."""
    snapshot = entry.snapshot
    text = Text()

    if isinstance(snapshot, NotVisible):
        text.append("not visible\n", style="magenta")
        return text
    if isinstance(snapshot, NewlyAdded):
        text.append("was ")
        text.append("added", style="green")
        text.append(" for the url ")
        text.append(snapshot.url or "(unknown)", style="blue")
        text.append(".\n")
        return text
    if isinstance(snapshot, Failed):
        text.append(f"could not be inspected: {snapshot.message}\n", style="bold red")
        return text

    if isinstance(snapshot, Unborn):
        status = snapshot.status
        text.append("Has no commits.\n", style="magenta")
    elif isinstance(snapshot, Present):
        status = snapshot.status
        if snapshot.is_descendant is True:
            text.append("Has ")
            text.append("new", style="green")
            text.append(" commits.\n")
        elif snapshot.is_descendant is False:
            text.append("Head is on ")
            text.append(short_sha(status.head_commit), style="magenta")
            text.append(", which is not a descendant of the expected commit: ")
            text.append(short_sha(entry.pinned_sha), style="magenta")
            text.append(".\n")
    else:
        raise TypeError(f"Unknown submodule snapshot: {snapshot!r}")

    if expected_branch is not None and status.current_branch_name != expected_branch:
        branch = status.current_branch_name or "(detached)"
        text.append(f"On wrong branch: '{branch}'.\n", style="magenta")

    text.append_text(file_statuses(status, show_untracked=show_untracked))
    return text


def render(
    tree: TreeStatus,
    *,
    console: Optional[Console] = None,
    show_untracked: bool = True,
) -> None:
    """Print the meta-repository status followed by every submodule with something to report."""
    console = console or Console()
    meta = tree.meta

    if not meta.is_detached:
        console.print(f"On branch '{meta.current_branch_name}'.", markup=False, highlight=False)
    else:
        console.print(f"On detached head {short_sha(meta.head_commit)}.", highlight=False)
    if meta.head_commit is None:
        console.print("No commits yet.")

    desc = file_statuses(meta, show_untracked=show_untracked)
    if desc:
        console.print(desc, end="")
    else:
        console.print("nothing to commit, working directory clean")

    sections = []
    for entry in tree.submodules:
        if isinstance(entry.snapshot, NotVisible):
            continue
        body = describe_submodule(entry, tree.branch_name, show_untracked=show_untracked)
        if body:
            sections.append((entry.name, body))

    if sections:
        console.print()
        console.print("Sub-repos:")
        for name, body in sections:
            console.print()
            console.print(Text(name, style="cyan"))
            console.print(body, end="")


def render_requested(
    tree: TreeStatus,
    *,
    console: Optional[Console] = None,
    show_untracked: bool = True,
) -> None:
    """Print each requested submodule in request order, including clean and hidden ones."""
    console = console or Console()
    for i, entry in enumerate(tree.submodules):
        if i:
            console.print()
        console.print(Text(entry.name, style="cyan"))
        body = describe_submodule(entry, tree.branch_name, show_untracked=show_untracked)
        if body:
            console.print(body, end="")
        else:
            console.print("no changes")


def render_gate_failure(failure: GateFailure, *, console: Optional[Console] = None) -> None:
    console = console or Console(stderr=True)
    console.print(f"[bold red]✗ {len(failure.violations)} problem(s) found:[/bold red]")
    for violation in failure.violations:
        console.print(Text(f"  {violation.message}", style="red"))
