"""gitmeta CLI: Typer application with status, check, and init commands."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from gitmeta import __version__

app = typer.Typer(
    name="gitmeta",
    help="Status and consistency checks for a meta-repository and its submodules.",
    add_completion=False,
    no_args_is_help=True,
)

console = Console(stderr=True)


def _configure_logging(verbose: bool, debug: bool) -> None:
    level = logging.DEBUG if debug else logging.INFO if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_time=False, show_path=debug)],
        force=True,
    )


def _resolve_repo_root() -> Path:
    """Find the meta-repository root, exit 2 on failure."""
    from gitmeta.git.adapter import GitError, get_repo_root

    try:
        return get_repo_root()
    except GitError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc


def _load(repo_root: Path, config: Optional[str], format: Optional[str]):
    from gitmeta.config.loader import ConfigError, load_config
    from gitmeta.config.schema import OUTPUT_FORMATS

    try:
        cfg = load_config(repo_root, config)
    except ConfigError as exc:
        console.print(f"[bold red]Config error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc

    if format:
        if format not in OUTPUT_FORMATS:
            console.print(f"[bold red]Invalid format:[/bold red] {format}")
            raise typer.Exit(code=2)
        cfg.output.format = format  # type: ignore[assignment]
    return cfg


# ── status ────────────────────────────────────────────────────────────────────


@app.command()
def status(
    names: Optional[List[str]] = typer.Argument(None, help="Submodules to report on (default: all)"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .gitmeta.toml"),
    format: Optional[str] = typer.Option(None, "--format", "-f", help="Output format: terminal | json"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
    debug: bool = typer.Option(False, "--debug", help="Log every git invocation"),
) -> None:
    """Show the meta-repository status and where each submodule stands against its pin."""
    from gitmeta.git.adapter import GitBackend, GitError
    from gitmeta.git.models import Repo
    from gitmeta.output import json_report, terminal
    from gitmeta.status.submodules import build_tree_status

    _configure_logging(verbose, debug)
    repo_root = _resolve_repo_root()
    cfg = _load(repo_root, config, format)
    backend = GitBackend(timeout=cfg.status.git_timeout, untracked=cfg.status.untracked)

    try:
        tree = build_tree_status(
            backend,
            Repo(repo_root),
            names or None,
            path_filter=cfg.status.path_filter(),
            max_workers=cfg.status.max_workers,
        )
    except GitError as exc:
        console.print(f"[bold red]Git error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc

    if cfg.output.format == "json":
        print(json_report.render(tree))
    elif names:
        terminal.render_requested(tree, show_untracked=cfg.output.show_untracked)
    else:
        terminal.render(tree, show_untracked=cfg.output.show_untracked)


# ── check ─────────────────────────────────────────────────────────────────────


@app.command()
def check(
    clean: bool = typer.Option(False, "--clean", help="Only check cleanliness"),
    consistent: bool = typer.Option(False, "--consistent", help="Only check consistency"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .gitmeta.toml"),
    format: Optional[str] = typer.Option(None, "--format", "-f", help="Output format: terminal | json"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
    debug: bool = typer.Option(False, "--debug", help="Log every git invocation"),
) -> None:
    """Fail (exit 1) unless the tree is clean and/or consistent; lists every problem."""
    from gitmeta.gate.engine import check_clean, check_clean_and_consistent, check_consistent
    from gitmeta.gate.models import GateFailure
    from gitmeta.git.adapter import GitBackend, GitError
    from gitmeta.git.models import Repo
    from gitmeta.output import json_report, terminal

    _configure_logging(verbose, debug)
    repo_root = _resolve_repo_root()
    cfg = _load(repo_root, config, format)
    backend = GitBackend(timeout=cfg.status.git_timeout, untracked=cfg.status.untracked)
    meta = Repo(repo_root)
    path_filter = cfg.status.path_filter()

    failure: Optional[GateFailure] = None
    try:
        if clean and not consistent:
            check_clean(backend, meta, path_filter=path_filter, max_workers=cfg.status.max_workers)
        elif consistent and not clean:
            check_consistent(backend, meta, path_filter=path_filter)
        else:
            check_clean_and_consistent(
                backend, meta, path_filter=path_filter, max_workers=cfg.status.max_workers
            )
    except GateFailure as exc:
        failure = exc
    except GitError as exc:
        console.print(f"[bold red]Git error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc

    if cfg.output.format == "json":
        print(json_report.render_gate(failure))
    elif failure is not None:
        terminal.render_gate_failure(failure, console=console)
    else:
        console.print("[green]✓[/green] Meta-repository and sub-repos passed.")

    if failure is not None:
        raise typer.Exit(code=1)


# ── init ──────────────────────────────────────────────────────────────────────


@app.command()
def init() -> None:
    """Generate a starter .gitmeta.toml in the meta-repository root."""
    from gitmeta.config.defaults import DEFAULT_TOML
    from gitmeta.config.loader import CONFIG_FILENAME

    repo_root = _resolve_repo_root()
    config_path = repo_root / CONFIG_FILENAME

    if config_path.exists():
        console.print(f"[yellow]⚠[/yellow]  {CONFIG_FILENAME} already exists at {config_path}")
        raise typer.Exit(code=1)

    config_path.write_text(DEFAULT_TOML, encoding="utf-8")
    console.print(f"[green]✓[/green] Created {config_path}")


# ── version ───────────────────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        print(f"gitmeta {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", "-V", callback=_version_callback,
        is_eager=True, help="Show version and exit",
    ),
) -> None:
    """gitmeta: where every repository in the tree stands against its pin."""
