"""Consistency gate: cleanliness and structural checks over the whole tree."""

from gitmeta.gate.engine import check_clean, check_clean_and_consistent, check_consistent
from gitmeta.gate.models import GateFailure, Violation

__all__ = [
    "GateFailure",
    "Violation",
    "check_clean",
    "check_clean_and_consistent",
    "check_consistent",
]
