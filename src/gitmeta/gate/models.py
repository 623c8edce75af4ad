"""Gate violation models."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence

META_SUBJECT = "The meta-repository"


@dataclass(frozen=True)
class Violation:
    """One reason a tree failed a gate."""

    subject: str  # e.g. "The meta-repository" or "Sub-repo 'lib'"
    code: str  # 'not_clean' | 'no_branch' | 'no_head' | 'off_pin' | 'unborn' | 'unreadable'
    reason: str

    @property
    def message(self) -> str:
        return f"{self.subject} {self.reason}."

    def __str__(self) -> str:
        return self.message


def submodule_subject(name: str) -> str:
    return f"Sub-repo '{name}'"


class GateFailure(Exception):
    """Raised when a gate finds one or more violations; carries all of them."""

    def __init__(self, violations: Sequence[Violation]) -> None:
        if not violations:
            raise ValueError("GateFailure requires at least one violation")
        self.violations: List[Violation] = list(violations)
        super().__init__("\n".join(self.messages))

    @property
    def messages(self) -> List[str]:
        return [v.message for v in self.violations]
