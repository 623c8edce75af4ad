"""Map raw per-path change records onto FileChangeKind."""

from __future__ import annotations

from gitmeta.git.models import RawChange
from gitmeta.status.models import FileChangeKind


def classify(change: RawChange) -> FileChangeKind:
    """Return the kind of *change*; the first matching flag wins.

    Order: new, deleted, conflicted, renamed, type change, then modified.
    """
    if change.is_new:
        return FileChangeKind.ADDED
    if change.is_deleted:
        return FileChangeKind.REMOVED
    if change.is_conflicted:
        return FileChangeKind.CONFLICTED
    if change.is_renamed:
        return FileChangeKind.RENAMED
    if change.is_typechange:
        return FileChangeKind.TYPE_CHANGED
    return FileChangeKind.MODIFIED
