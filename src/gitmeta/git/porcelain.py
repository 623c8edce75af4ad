"""Parser for ``git status --porcelain=v2 -z`` output.

Yields one RawChange per changed or untracked path. Handles ordinary,
rename/copy, unmerged and untracked records; skips headers, ignored
entries and gitlinks (submodule entries are never reported here).
"""

from __future__ import annotations

from typing import Generator, List, Optional

from gitmeta.git.models import RawChange

# Number of space-separated fields preceding the path, per record type.
_FIELDS_BEFORE_PATH = {
    "1": 8,  # 1 XY sub mH mI mW hH hI <path>
    "2": 9,  # 2 XY sub mH mI mW hH hI Xscore <path>\0<origPath>
    "u": 10,  # u XY sub m1 m2 m3 mW h1 h2 h3 <path>
}


class PorcelainError(ValueError):
    """Raised when a porcelain record cannot be parsed."""


def _is_gitlink(sub: str) -> bool:
    return sub.startswith("S")


def _from_xy(path: str, xy: str, original_path: Optional[str] = None) -> RawChange:
    index, worktree = xy[0], xy[1]
    columns = (index, worktree)
    return RawChange(
        path=path,
        is_new="A" in columns or "C" in columns,
        is_deleted="D" in columns,
        is_renamed="R" in columns,
        is_typechange="T" in columns,
        in_index=index != ".",
        in_working_tree=worktree != ".",
        original_path=original_path,
    )


class PorcelainParser:
    """Parse NUL-separated porcelain v2 status output.

    Usage::

        for change in PorcelainParser(output).parse():
            ...
    """

    def __init__(self, output: str) -> None:
        self._records: List[str] = output.split("\0")

    def parse(self) -> Generator[RawChange, None, None]:
        idx = 0
        total = len(self._records)

        while idx < total:
            record = self._records[idx]
            idx += 1
            if not record or record[0] in ("#", "!"):
                continue

            kind = record[0]

            if kind == "?":
                yield RawChange(path=record[2:], is_new=True, in_working_tree=True)
                continue

            if kind not in _FIELDS_BEFORE_PATH:
                raise PorcelainError(f"Unknown status record type: {kind!r}")

            fields = record.split(" ", _FIELDS_BEFORE_PATH[kind])
            if len(fields) != _FIELDS_BEFORE_PATH[kind] + 1:
                raise PorcelainError(f"Truncated status record: {record!r}")
            xy, sub, path = fields[1], fields[2], fields[-1]

            original_path: Optional[str] = None
            if kind == "2":
                # The original path travels in the next NUL-separated slot
                if idx >= total:
                    raise PorcelainError(f"Missing original path for rename: {path!r}")
                original_path = self._records[idx]
                idx += 1

            if _is_gitlink(sub):
                continue

            if kind == "u":
                yield RawChange(path=path, is_conflicted=True, in_index=True)
                continue

            yield _from_xy(path, xy, original_path)
