"""Git interface layer: subprocess backend, porcelain parsing, models."""

from gitmeta.git.adapter import (
    MODULES_FILENAME,
    BackendQueryError,
    GitBackend,
    GitError,
    get_repo_root,
)
from gitmeta.git.models import RawChange, Repo, Submodule
from gitmeta.git.porcelain import PorcelainError, PorcelainParser

__all__ = [
    "BackendQueryError",
    "GitBackend",
    "GitError",
    "MODULES_FILENAME",
    "PorcelainError",
    "PorcelainParser",
    "RawChange",
    "Repo",
    "Submodule",
    "get_repo_root",
]
