"""Collect a RepositoryStatus for a single repository."""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional

from gitmeta.git.adapter import GitBackend
from gitmeta.git.models import Repo
from gitmeta.status.classifier import classify
from gitmeta.status.models import FileChangeKind, NoCommitsError, RepositoryStatus

logger = logging.getLogger(__name__)

PathFilter = Callable[[str], bool]


def collect(
    backend: GitBackend,
    repo: Repo,
    path_filter: Optional[PathFilter] = None,
) -> RepositoryStatus:
    """Return the status of *repo*, never descending into its submodules.

    Paths for which *path_filter* returns False are skipped entirely.
    Raises NoCommitsError (carrying the partial status) when the repository
    has no HEAD, and BackendQueryError when git cannot answer.
    """
    staged: Dict[str, FileChangeKind] = {}
    working_dir: Dict[str, FileChangeKind] = {}
    untracked: List[str] = []

    for change in backend.raw_changes(repo):
        if path_filter is not None and not path_filter(change.path):
            continue
        kind = classify(change)

        if change.in_index:
            staged[change.path] = kind

        if change.in_working_tree:
            # New and never indexed means untracked; once staged, further
            # edits are reported against the index instead.
            if change.is_new and not change.in_index:
                untracked.append(change.path)
            else:
                working_dir[change.path] = kind

    branch = backend.current_branch_name(repo)
    head = backend.head_commit(repo)
    status = RepositoryStatus(
        current_branch_name=branch,
        head_commit=head,
        staged=staged,
        working_dir=working_dir,
        untracked=tuple(untracked),
    )
    logger.debug(
        "%s: branch=%s head=%s staged=%d working_dir=%d untracked=%d",
        repo, branch, head, len(staged), len(working_dir), len(untracked),
    )
    if head is None:
        raise NoCommitsError(str(repo), status)
    return status
