"""Repository status model, change classification, and submodule resolution."""

from gitmeta.status.classifier import classify
from gitmeta.status.collector import PathFilter, collect
from gitmeta.status.models import (
    Failed,
    FileChangeKind,
    NewlyAdded,
    NoCommitsError,
    NotVisible,
    Present,
    RepositoryStatus,
    SubmoduleEntry,
    SubmoduleSnapshot,
    TreeStatus,
    Unborn,
)
from gitmeta.status.submodules import build_tree_status, map_in_order, resolve_many, resolve_one

__all__ = [
    "Failed",
    "FileChangeKind",
    "NewlyAdded",
    "NoCommitsError",
    "NotVisible",
    "PathFilter",
    "Present",
    "RepositoryStatus",
    "SubmoduleEntry",
    "SubmoduleSnapshot",
    "TreeStatus",
    "Unborn",
    "build_tree_status",
    "classify",
    "collect",
    "map_in_order",
    "resolve_many",
    "resolve_one",
]
