"""Load and merge configuration from .gitmeta.toml and env vars."""

from __future__ import annotations

import dataclasses
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from gitmeta.config.schema import (
    OUTPUT_FORMATS,
    UNTRACKED_MODES,
    GitMetaConfig,
    OutputConfig,
    StatusConfig,
)

CONFIG_FILENAME = ".gitmeta.toml"


class ConfigError(Exception):
    """Raised when config is malformed or unreadable."""


def find_config_file(repo_root: Path, override: Optional[str] = None) -> Optional[Path]:
    """Locate the config file. *override* takes precedence."""
    if override:
        p = Path(override)
        if not p.is_file():
            raise ConfigError(f"Config file not found: {override}")
        return p
    candidate = repo_root / CONFIG_FILENAME
    return candidate if candidate.is_file() else None


def _parse_toml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Failed to parse {path}: {exc}") from exc


def _build_section(data: Dict[str, Any], cls: type, section: str):
    """Build a dataclass from a TOML section dict, ignoring unknown keys."""
    valid_fields = {f.name for f in dataclasses.fields(cls)}
    filtered = {k: v for k, v in data.get(section, {}).items() if k in valid_fields}
    return cls(**filtered)


def _validate(cfg: GitMetaConfig, source: Path) -> None:
    if cfg.status.untracked not in UNTRACKED_MODES:
        raise ConfigError(
            f"{source}: status.untracked must be one of {', '.join(UNTRACKED_MODES)}"
        )
    if cfg.output.format not in OUTPUT_FORMATS:
        raise ConfigError(
            f"{source}: output.format must be one of {', '.join(OUTPUT_FORMATS)}"
        )
    if not isinstance(cfg.status.max_workers, int) or cfg.status.max_workers < 1:
        raise ConfigError(f"{source}: status.max_workers must be a positive integer")
    if not isinstance(cfg.status.hidden_paths, list):
        raise ConfigError(f"{source}: status.hidden_paths must be a list of paths")


def _merge_env_overrides(cfg: GitMetaConfig) -> None:
    """Apply GITMETA_* environment variable overrides."""
    if val := os.environ.get("GITMETA_FORMAT"):
        if val in OUTPUT_FORMATS:
            cfg.output.format = val  # type: ignore[assignment]
    if val := os.environ.get("GITMETA_MAX_WORKERS"):
        try:
            workers = int(val)
        except ValueError:
            workers = 0
        if workers > 0:
            cfg.status.max_workers = workers
    if val := os.environ.get("GITMETA_GIT_TIMEOUT"):
        try:
            timeout = int(val)
        except ValueError:
            timeout = 0
        if timeout > 0:
            cfg.status.git_timeout = timeout


def load_config(
    repo_root: Path,
    config_override: Optional[str] = None,
) -> GitMetaConfig:
    """Load, validate, and return a GitMetaConfig."""
    config_path = find_config_file(repo_root, config_override)

    if config_path is None:
        cfg = GitMetaConfig()
    else:
        raw = _parse_toml(config_path)
        try:
            cfg = GitMetaConfig(
                version=raw.get("version", "1.0"),
                status=_build_section(raw, StatusConfig, "status"),
                output=_build_section(raw, OutputConfig, "output"),
            )
        except (TypeError, AttributeError) as exc:
            raise ConfigError(f"Invalid config in {config_path}: {exc}") from exc
        _validate(cfg, config_path)

    _merge_env_overrides(cfg)
    return cfg
