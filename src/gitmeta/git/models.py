"""Data models for the git backend."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass(frozen=True)
class Repo:
    """Handle on one repository working tree."""

    root: Path

    def __str__(self) -> str:
        return str(self.root)


@dataclass(frozen=True, slots=True)
class RawChange:
    """One per-path record from ``git status``, before classification."""

    path: str
    is_new: bool = False
    is_deleted: bool = False
    is_conflicted: bool = False
    is_renamed: bool = False
    is_typechange: bool = False
    in_index: bool = False
    in_working_tree: bool = False
    original_path: Optional[str] = None  # set on renames


@dataclass(frozen=True)
class Submodule:
    """A submodule as declared in .gitmodules."""

    name: str
    path: str
    url: Optional[str] = None
