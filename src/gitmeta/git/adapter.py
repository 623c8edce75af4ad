"""Git subprocess backend: read-only status, ref and submodule queries."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence

from gitmeta.git.models import RawChange, Repo, Submodule
from gitmeta.git.porcelain import PorcelainError, PorcelainParser

logger = logging.getLogger(__name__)

MODULES_FILENAME = ".gitmodules"
_GITLINK_MODE = "160000"


class GitError(Exception):
    """Raised when git is unavailable or returns an unexpected error."""


class BackendQueryError(GitError):
    """A repository query could not be performed (I/O failure, corruption, bad ref)."""


def _run_git(
    args: List[str],
    cwd: Path,
    timeout: int = 30,
    ok_codes: Sequence[int] = (0,),
) -> subprocess.CompletedProcess:
    """Run a git command. Raises BackendQueryError unless the exit code is in *ok_codes*."""
    logger.debug("git %s (cwd=%s)", " ".join(args), cwd)
    if not Path(cwd).is_dir():
        raise BackendQueryError(f"not a directory: {cwd}")
    try:
        result = subprocess.run(
            ["git", *args],
            cwd=cwd,
            capture_output=True,
            text=True,
            timeout=timeout,
            encoding="utf-8",
            errors="replace",
        )
    except FileNotFoundError as exc:
        raise BackendQueryError("git is not installed or not on PATH") from exc
    except subprocess.TimeoutExpired as exc:
        raise BackendQueryError(
            f"git command timed out after {timeout}s: git {' '.join(args)}"
        ) from exc

    if result.returncode not in ok_codes:
        stderr = result.stderr.strip() or f"exit status {result.returncode}"
        raise BackendQueryError(f"git {args[0]} failed in {cwd}: {stderr}")
    return result


def get_repo_root(cwd: Optional[Path] = None, timeout: int = 30) -> Path:
    """Return the root of the meta-repository containing *cwd*.

    A repository declaring its own submodules is the meta-repository, even
    when it is itself a submodule of another repository. Otherwise, when
    *cwd* lies inside one of the superproject's declared submodules, the
    superproject is returned.
    """
    cwd = cwd or Path.cwd()
    toplevel = Path(_run_git(["rev-parse", "--show-toplevel"], cwd, timeout).stdout.strip())
    if (toplevel / MODULES_FILENAME).is_file():
        return toplevel

    super_root = _run_git(
        ["rev-parse", "--show-superproject-working-tree"], cwd, timeout
    ).stdout.strip()
    if not super_root:
        return toplevel

    superproject = Path(super_root)
    if not (superproject / MODULES_FILENAME).is_file():
        return toplevel
    declared = _run_git(
        ["config", "-z", "--file", MODULES_FILENAME, "--get-regexp", r"^submodule\."],
        superproject,
        timeout,
        ok_codes=(0, 1),
    ).stdout
    here = toplevel.resolve()
    for sub in _parse_gitmodules(declared):
        if (superproject / sub.path).resolve() == here:
            return superproject
    return toplevel


def _parse_gitmodules(output: str) -> List[Submodule]:
    """Parse ``git config -z --get-regexp`` output into Submodule records."""
    fields: Dict[str, Dict[str, str]] = {}
    for entry in output.split("\0"):
        if not entry:
            continue
        key, _, value = entry.partition("\n")
        if not key.startswith("submodule."):
            continue
        name, _, var = key[len("submodule."):].rpartition(".")
        if name:
            fields.setdefault(name, {})[var] = value

    return [
        Submodule(name=name, path=values["path"], url=values.get("url"))
        for name, values in fields.items()
        if values.get("path")
    ]


class GitBackend:
    """Read-only version-control queries against Repo handles.

    Each query runs one short-lived ``git`` process, so handles hold no
    open resources and may be used from several threads at once.
    """

    def __init__(self, timeout: int = 30, untracked: str = "normal") -> None:
        self.timeout = timeout
        self.untracked = untracked

    def _git(self, repo: Repo, args: List[str], ok_codes: Sequence[int] = (0,)):
        return _run_git(args, repo.root, self.timeout, ok_codes)

    # ---- per-repository state ----

    def raw_changes(self, repo: Repo) -> List[RawChange]:
        """Return every changed or untracked path, excluding submodule entries."""
        result = self._git(
            repo,
            [
                "status",
                "--porcelain=v2",
                "-z",
                "--ignore-submodules=all",
                f"--untracked-files={self.untracked}",
            ],
        )
        try:
            return list(PorcelainParser(result.stdout).parse())
        except PorcelainError as exc:
            raise BackendQueryError(f"unreadable status output in {repo}: {exc}") from exc

    def current_branch_name(self, repo: Repo) -> Optional[str]:
        """Return the checked-out branch name, or None on a detached head."""
        result = self._git(repo, ["symbolic-ref", "--quiet", "--short", "HEAD"], (0, 1))
        if result.returncode != 0:
            return None
        return result.stdout.strip() or None

    def head_commit(self, repo: Repo) -> Optional[str]:
        """Return the hex sha of HEAD, or None if the repository has no commits."""
        return self._resolve_commit(repo, "HEAD")

    def _resolve_commit(self, repo: Repo, rev: str) -> Optional[str]:
        result = self._git(repo, ["rev-parse", "--verify", "--quiet", f"{rev}^{{commit}}"], (0, 1))
        if result.returncode != 0:
            return None
        return result.stdout.strip() or None

    def is_ancestor(self, repo: Repo, ancestor: str, descendant: str) -> bool:
        """Return True if *ancestor* is reachable from *descendant*.

        A commit missing from the object store cannot be part of the history
        and yields False.
        """
        if self._resolve_commit(repo, ancestor) is None:
            logger.debug("%s: commit %s not found, treating as unrelated", repo, ancestor)
            return False
        result = self._git(repo, ["merge-base", "--is-ancestor", ancestor, descendant], (0, 1))
        return result.returncode == 0

    # ---- submodules ----

    def submodules(self, repo: Repo) -> List[Submodule]:
        """Return the submodules declared in .gitmodules, in file order."""
        if not (repo.root / MODULES_FILENAME).is_file():
            return []
        result = self._git(
            repo,
            ["config", "-z", "--file", MODULES_FILENAME, "--get-regexp", r"^submodule\."],
            (0, 1),
        )
        return _parse_gitmodules(result.stdout)

    def list_submodule_names(self, repo: Repo) -> List[str]:
        return [sub.name for sub in self.submodules(repo)]

    def submodule(self, repo: Repo, name: str) -> Submodule:
        for sub in self.submodules(repo):
            if sub.name == name:
                return sub
        raise BackendQueryError(f"no submodule named {name!r} in {repo}")

    def submodule_visible(self, repo: Repo, name: str) -> bool:
        """A submodule is visible once its working tree has been populated."""
        sub = self.submodule(repo, name)
        return (repo.root / sub.path / ".git").exists()

    def open_submodule(self, repo: Repo, name: str) -> Repo:
        sub = self.submodule(repo, name)
        return Repo(root=repo.root / sub.path)

    def submodule_url(self, repo: Repo, name: str) -> Optional[str]:
        return self.submodule(repo, name).url

    def pinned_commits(
        self, repo: Repo, names: Iterable[str], at_commit: str
    ) -> Dict[str, Optional[str]]:
        """Return the gitlink sha recorded at *at_commit* for each submodule name.

        Submodules absent from that commit's tree map to None.
        """
        by_path = {sub.path: sub.name for sub in self.submodules(repo)}
        wanted = list(names)
        paths = [path for path, name in by_path.items() if name in wanted]
        pins: Dict[str, Optional[str]] = {name: None for name in wanted}
        if not paths:
            return pins

        result = self._git(repo, ["ls-tree", "-z", at_commit, "--", *paths])
        for entry in result.stdout.split("\0"):
            if not entry:
                continue
            meta, _, path = entry.partition("\t")
            mode, _, rest = meta.partition(" ")
            _, _, sha = rest.partition(" ")
            if mode == _GITLINK_MODE and path in by_path and by_path[path] in pins:
                pins[by_path[path]] = sha
        return pins

    def pinned_commit_for_submodule(
        self, repo: Repo, name: str, at_commit: str
    ) -> Optional[str]:
        return self.pinned_commits(repo, [name], at_commit)[name]
