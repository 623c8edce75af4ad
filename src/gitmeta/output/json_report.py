"""JSON reporter for tree status and gate results."""

from __future__ import annotations

import json
from typing import Any, Dict, Optional

from gitmeta.gate.models import GateFailure
from gitmeta.status.models import (
    Failed,
    NewlyAdded,
    NotVisible,
    Present,
    RepositoryStatus,
    SubmoduleEntry,
    TreeStatus,
    Unborn,
)


def status_to_dict(status: RepositoryStatus) -> Dict[str, Any]:
    return {
        "branch": status.current_branch_name,
        "head": status.head_commit,
        "clean": status.is_clean,
        "staged": {path: kind.value for path, kind in sorted(status.staged.items())},
        "working_dir": {path: kind.value for path, kind in sorted(status.working_dir.items())},
        "untracked": list(status.untracked),
    }


def entry_to_dict(entry: SubmoduleEntry) -> Dict[str, Any]:
    snapshot = entry.snapshot
    data: Dict[str, Any] = {"name": entry.name, "pinned": entry.pinned_sha}
    if isinstance(snapshot, NotVisible):
        data["state"] = "not_visible"
    elif isinstance(snapshot, NewlyAdded):
        data["state"] = "added"
        data["url"] = snapshot.url
    elif isinstance(snapshot, Unborn):
        data["state"] = "unborn"
        data["status"] = status_to_dict(snapshot.status)
    elif isinstance(snapshot, Failed):
        data["state"] = "error"
        data["error"] = snapshot.message
    elif isinstance(snapshot, Present):
        if snapshot.is_descendant is None:
            data["state"] = "on_pin"
        elif snapshot.is_descendant:
            data["state"] = "ahead"
        else:
            data["state"] = "diverged"
        data["status"] = status_to_dict(snapshot.status)
    return data


def to_dict(tree: TreeStatus) -> Dict[str, Any]:
    """Convert a TreeStatus to a JSON-serialisable dict."""
    return {
        "version": "1.0",
        "meta": status_to_dict(tree.meta),
        "submodules": [entry_to_dict(e) for e in tree.submodules],
    }


def gate_to_dict(failure: Optional[GateFailure]) -> Dict[str, Any]:
    violations = failure.violations if failure is not None else []
    return {
        "version": "1.0",
        "passed": failure is None,
        "violations": [
            {"subject": v.subject, "code": v.code, "message": v.message} for v in violations
        ],
    }


def render(tree: TreeStatus) -> str:
    """Return formatted JSON string."""
    return json.dumps(to_dict(tree), indent=2)


def render_gate(failure: Optional[GateFailure]) -> str:
    return json.dumps(gate_to_dict(failure), indent=2)
