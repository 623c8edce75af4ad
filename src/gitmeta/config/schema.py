"""Configuration schema: dataclasses for every config section."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List, Literal

UntrackedMode = Literal["normal", "all", "no"]
OutputFormat = Literal["terminal", "json"]

UNTRACKED_MODES = ("normal", "all", "no")
OUTPUT_FORMATS = ("terminal", "json")


@dataclass
class StatusConfig:
    max_workers: int = 8  # upper bound on concurrent submodule queries
    untracked: UntrackedMode = "normal"
    hidden_paths: List[str] = field(default_factory=lambda: [".gitmodules"])
    git_timeout: int = 30

    def path_filter(self) -> Callable[[str], bool]:
        """Return a predicate accepting every path not listed in hidden_paths."""
        hidden = frozenset(self.hidden_paths)
        return lambda path: path not in hidden


@dataclass
class OutputConfig:
    format: OutputFormat = "terminal"
    show_untracked: bool = True


@dataclass
class GitMetaConfig:
    version: str = "1.0"
    status: StatusConfig = field(default_factory=StatusConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
