"""Cleanliness and consistency gates for a meta-repository and its submodules.

Gates only read repository state. Each one returns None when the tree
passes and raises GateFailure listing every violation otherwise.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple

from gitmeta.gate.models import META_SUBJECT, GateFailure, Violation, submodule_subject
from gitmeta.git.adapter import MODULES_FILENAME, BackendQueryError, GitBackend
from gitmeta.git.models import Repo
from gitmeta.status.collector import PathFilter, collect
from gitmeta.status.models import NoCommitsError, RepositoryStatus
from gitmeta.status.submodules import DEFAULT_MAX_WORKERS, map_in_order

logger = logging.getLogger(__name__)


def hide_modules_file(path: str) -> bool:
    """Default meta-repository filter: everything except .gitmodules."""
    return path != MODULES_FILENAME


def _meta_status(backend: GitBackend, meta: Repo, path_filter: PathFilter) -> RepositoryStatus:
    try:
        return collect(backend, meta, path_filter)
    except NoCommitsError as exc:
        return exc.status


def _raise_if_any(violations: List[Violation]) -> None:
    for v in violations:
        logger.debug("gate violation [%s]: %s", v.code, v.message)
    if violations:
        raise GateFailure(violations)


def _check_submodule(
    backend: GitBackend,
    meta: Repo,
    name: str,
    pinned_sha: Optional[str],
) -> Optional[Violation]:
    """Return the violation for one submodule, or None if it is on its pin and clean."""
    subject = submodule_subject(name)
    try:
        if not backend.submodule_visible(meta, name):
            return None
        repo = backend.open_submodule(meta, name)
        status = collect(backend, repo)
    except NoCommitsError:
        return Violation(subject, "unborn", "has no commits")
    except BackendQueryError as exc:
        return Violation(subject, "unreadable", f"could not be inspected: {exc}")

    off_pin = status.head_commit != pinned_sha
    if off_pin and not status.is_clean:
        return Violation(subject, "off_pin", "is not on its pinned commit and is not clean")
    if off_pin:
        return Violation(subject, "off_pin", "is not on its pinned commit")
    if not status.is_clean:
        return Violation(subject, "not_clean", "is not clean")
    return None


def check_clean(
    backend: GitBackend,
    meta: Repo,
    *,
    path_filter: PathFilter = hide_modules_file,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> None:
    """Require a clean meta-repository and clean submodules sitting on their pins.

    Every visible submodule is checked, even after the first violation.
    Paths rejected by *path_filter* (.gitmodules by default) do not count
    against the meta-repository.
    """
    violations: List[Violation] = []

    status = _meta_status(backend, meta, path_filter)
    if not status.is_clean:
        violations.append(Violation(META_SUBJECT, "not_clean", "is not clean"))

    if status.head_commit is None:
        violations.append(Violation(META_SUBJECT, "no_head", "has no head"))
        _raise_if_any(violations)
        return

    names = backend.list_submodule_names(meta)
    pins: Dict[str, Optional[str]] = backend.pinned_commits(meta, names, status.head_commit)

    def _check(item: Tuple[str, Optional[str]]) -> Optional[Violation]:
        return _check_submodule(backend, meta, item[0], item[1])

    results = map_in_order(_check, [(name, pins.get(name)) for name in names], max_workers)
    violations.extend(v for v in results if v is not None)
    _raise_if_any(violations)


def check_consistent(
    backend: GitBackend,
    meta: Repo,
    *,
    path_filter: PathFilter = hide_modules_file,
) -> None:
    """Require the meta-repository to be on a named branch, have a head, and be clean.

    Submodule branch names are not compared with the meta-repository's.
    """
    violations: List[Violation] = []
    status = _meta_status(backend, meta, path_filter)

    if status.is_detached:
        violations.append(Violation(META_SUBJECT, "no_branch", "is not on a branch"))
    if status.head_commit is None:
        violations.append(Violation(META_SUBJECT, "no_head", "has no head"))
    if not status.is_clean:
        violations.append(Violation(META_SUBJECT, "not_clean", "is not clean"))

    _raise_if_any(violations)


def check_clean_and_consistent(
    backend: GitBackend,
    meta: Repo,
    *,
    path_filter: PathFilter = hide_modules_file,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> None:
    """Run check_consistent, then check_clean; the first failure is raised."""
    check_consistent(backend, meta, path_filter=path_filter)
    check_clean(backend, meta, path_filter=path_filter, max_workers=max_workers)
