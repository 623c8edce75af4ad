"""Status value types: change kinds, repository snapshots, submodule snapshots."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional, Tuple, Union

from gitmeta.git.adapter import BackendQueryError


class FileChangeKind(str, Enum):
    MODIFIED = "modified"
    ADDED = "added"
    REMOVED = "removed"
    CONFLICTED = "conflicted"
    RENAMED = "renamed"
    TYPE_CHANGED = "type_changed"


def _frozen_mapping(value: Mapping[str, FileChangeKind]) -> Mapping[str, FileChangeKind]:
    return MappingProxyType(dict(value))


@dataclass(frozen=True)
class RepositoryStatus:
    """Snapshot of one repository's branch, head and file changes.

    ``staged`` holds index-vs-HEAD differences and ``working_dir`` holds
    working-tree-vs-index differences; a path may appear in both. Untracked
    paths never appear in either mapping and do not affect cleanliness.
    """

    current_branch_name: Optional[str] = None
    head_commit: Optional[str] = None
    staged: Mapping[str, FileChangeKind] = field(default_factory=dict)
    working_dir: Mapping[str, FileChangeKind] = field(default_factory=dict)
    untracked: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "staged", _frozen_mapping(self.staged))
        object.__setattr__(self, "working_dir", _frozen_mapping(self.working_dir))
        object.__setattr__(self, "untracked", tuple(self.untracked))
        overlap = set(self.untracked) & (set(self.staged) | set(self.working_dir))
        if overlap:
            raise ValueError(f"Untracked paths also listed as changes: {sorted(overlap)}")

    @property
    def is_clean(self) -> bool:
        """True if there are no staged or working-tree changes."""
        return not self.staged and not self.working_dir

    @property
    def is_detached(self) -> bool:
        return self.current_branch_name is None


class NoCommitsError(Exception):
    """Raised when a repository has no HEAD commit yet.

    Expected for freshly created repositories; *status* carries everything
    that could be collected (branch name and file changes).
    """

    def __init__(self, path: str, status: RepositoryStatus) -> None:
        super().__init__(f"Repository at {path} has no commits")
        self.path = path
        self.status = status


# ---- submodule snapshots ----


@dataclass(frozen=True)
class NotVisible:
    """The submodule's working tree is not populated."""


@dataclass(frozen=True)
class Present:
    """A visible submodule with its status.

    ``is_descendant`` is None when the head is on the pinned commit; otherwise
    it tells whether the pinned commit is an ancestor of the head.
    """

    status: RepositoryStatus
    is_descendant: Optional[bool] = None

    @property
    def on_pin(self) -> bool:
        return self.is_descendant is None


@dataclass(frozen=True)
class NewlyAdded:
    """Declared in .gitmodules but not yet recorded in the meta-repository's HEAD."""

    url: Optional[str] = None


@dataclass(frozen=True)
class Unborn:
    """A visible submodule whose repository has no commits."""

    status: RepositoryStatus


@dataclass(frozen=True)
class Failed:
    """The submodule could not be queried."""

    error: BackendQueryError

    @property
    def message(self) -> str:
        return str(self.error)


SubmoduleSnapshot = Union[NotVisible, Present, NewlyAdded, Unborn, Failed]


@dataclass(frozen=True)
class SubmoduleEntry:
    """One submodule's snapshot alongside the commit the meta-repository pins."""

    name: str
    pinned_sha: Optional[str]
    snapshot: SubmoduleSnapshot


@dataclass(frozen=True)
class TreeStatus:
    """Status of a meta-repository and the requested submodules, in request order."""

    meta: RepositoryStatus
    submodules: Tuple[SubmoduleEntry, ...] = ()

    @property
    def branch_name(self) -> Optional[str]:
        return self.meta.current_branch_name
