"""Submodule status resolution and whole-tree status aggregation."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Dict, List, Optional, Sequence, TypeVar

from gitmeta.git.adapter import BackendQueryError, GitBackend
from gitmeta.git.models import Repo
from gitmeta.status.collector import PathFilter, collect
from gitmeta.status.models import (
    Failed,
    NewlyAdded,
    NoCommitsError,
    NotVisible,
    Present,
    SubmoduleEntry,
    SubmoduleSnapshot,
    TreeStatus,
    Unborn,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 8

T = TypeVar("T")
R = TypeVar("R")


def map_in_order(
    func: Callable[[T], R],
    items: Sequence[T],
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> List[R]:
    """Apply *func* to *items* on a bounded thread pool.

    Results come back in the order of *items*, whatever order the calls
    finish in. Exceptions raised by *func* propagate.
    """
    if not items:
        return []
    workers = max(1, min(max_workers, len(items)))
    with ThreadPoolExecutor(max_workers=workers) as executor:
        future_by_index = {executor.submit(func, item): idx for idx, item in enumerate(items)}
        results: List[Optional[R]] = [None] * len(items)
        for future, idx in future_by_index.items():
            results[idx] = future.result()
    return results  # type: ignore[return-value]


def resolve_one(
    backend: GitBackend,
    meta: Repo,
    name: str,
    pinned_sha: Optional[str],
) -> SubmoduleSnapshot:
    """Return the snapshot of submodule *name* relative to *pinned_sha*.

    The ancestry test only runs when the submodule's head differs from the pin.
    """
    if not backend.submodule_visible(meta, name):
        return NotVisible()

    if pinned_sha is None:
        return NewlyAdded(url=backend.submodule_url(meta, name))

    repo = backend.open_submodule(meta, name)
    try:
        status = collect(backend, repo)
    except NoCommitsError as exc:
        return Unborn(status=exc.status)

    if status.head_commit == pinned_sha:
        return Present(status=status)

    is_descendant = backend.is_ancestor(repo, pinned_sha, status.head_commit)
    logger.debug(
        "%s: head %s differs from pin %s (descendant=%s)",
        name, status.head_commit, pinned_sha, is_descendant,
    )
    return Present(status=status, is_descendant=is_descendant)


def resolve_many(
    backend: GitBackend,
    meta: Repo,
    names: Sequence[str],
    pins: Dict[str, Optional[str]],
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> List[SubmoduleEntry]:
    """Resolve every submodule in *names* concurrently, preserving *names* order.

    A submodule whose queries fail yields a Failed snapshot; the others are
    still resolved.
    """

    def _resolve(name: str) -> SubmoduleEntry:
        pinned = pins.get(name)
        try:
            snapshot = resolve_one(backend, meta, name, pinned)
        except BackendQueryError as exc:
            logger.warning("could not resolve submodule %s: %s", name, exc)
            snapshot = Failed(error=exc)
        return SubmoduleEntry(name=name, pinned_sha=pinned, snapshot=snapshot)

    return map_in_order(_resolve, list(names), max_workers)


def build_tree_status(
    backend: GitBackend,
    meta: Repo,
    names: Optional[Sequence[str]] = None,
    *,
    path_filter: Optional[PathFilter] = None,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> TreeStatus:
    """Collect the meta-repository status and the status of its submodules.

    *names* defaults to every submodule in .gitmodules order. Pins are read
    from the meta-repository's HEAD; with no HEAD every submodule is new.
    """
    try:
        meta_status = collect(backend, meta, path_filter)
    except NoCommitsError as exc:
        meta_status = exc.status

    requested = list(names) if names is not None else backend.list_submodule_names(meta)
    if meta_status.head_commit is None:
        pins: Dict[str, Optional[str]] = {name: None for name in requested}
    else:
        pins = backend.pinned_commits(meta, requested, meta_status.head_commit)

    entries = resolve_many(backend, meta, requested, pins, max_workers)
    return TreeStatus(meta=meta_status, submodules=tuple(entries))
