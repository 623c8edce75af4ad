"""Shared test fixtures: temp git repos and meta-repositories with submodules."""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

import pytest

from gitmeta.git.adapter import GitBackend
from gitmeta.git.models import Repo

# Identity and transport settings for every test invocation, independent of
# the machine's global git config.
_GIT_CONFIG = [
    "-c", "user.name=Test",
    "-c", "user.email=test@test.com",
    "-c", "init.defaultBranch=main",
    "-c", "commit.gpgsign=false",
    "-c", "protocol.file.allow=always",
]


def run_git(cwd: Path, *args: str) -> str:
    result = subprocess.run(
        ["git", *_GIT_CONFIG, *args],
        cwd=cwd, capture_output=True, text=True, check=True,
    )
    return result.stdout.strip()


def _init_repo(path: Path, *, commit: bool = True) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    run_git(path, "init", str(path))
    if commit:
        (path / "README.md").write_text(f"# {path.name}\n")
        run_git(path, "add", ".")
        run_git(path, "commit", "-m", "init")
    return path


@dataclass
class MetaTree:
    """A meta-repository with submodules 'lib' and 'util' checked out and committed."""

    root: Path
    lib_pin: str
    util_pin: str

    @property
    def repo(self) -> Repo:
        return Repo(self.root)

    def sub(self, name: str) -> Path:
        return self.root / name


@pytest.fixture(autouse=True)
def _isolate_git(tmp_path: Path, monkeypatch) -> None:
    """Keep git from discovering repositories above the test directory."""
    monkeypatch.setenv("GIT_CEILING_DIRECTORIES", str(tmp_path.parent))
    for var in ("GITMETA_FORMAT", "GITMETA_MAX_WORKERS", "GITMETA_GIT_TIMEOUT"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def git() -> Callable[..., str]:
    """Run git in a directory with a fixed test identity: ``git(cwd, "status")``."""
    return run_git


@pytest.fixture
def backend() -> GitBackend:
    return GitBackend(timeout=30)


@pytest.fixture
def tmp_git_repo(tmp_path: Path) -> Path:
    """Create a temporary git repository with one commit."""
    return _init_repo(tmp_path / "repo")


@pytest.fixture
def empty_git_repo(tmp_path: Path) -> Path:
    """Create a temporary git repository with no commits."""
    return _init_repo(tmp_path / "empty", commit=False)


@pytest.fixture
def meta_tree(tmp_path: Path) -> MetaTree:
    """Meta-repository pinning two submodules cloned from local upstreams."""
    upstream = tmp_path / "upstream"
    lib_up = _init_repo(upstream / "lib")
    util_up = _init_repo(upstream / "util")

    meta = _init_repo(tmp_path / "meta")
    run_git(meta, "submodule", "add", str(lib_up), "lib")
    run_git(meta, "submodule", "add", str(util_up), "util")
    run_git(meta, "commit", "-m", "add submodules")

    return MetaTree(
        root=meta,
        lib_pin=run_git(meta / "lib", "rev-parse", "HEAD"),
        util_pin=run_git(meta / "util", "rev-parse", "HEAD"),
    )
