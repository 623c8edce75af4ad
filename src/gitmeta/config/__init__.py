"""Configuration loading, schema, and defaults."""

from gitmeta.config.loader import ConfigError, load_config
from gitmeta.config.schema import GitMetaConfig, OutputConfig, StatusConfig

__all__ = [
    "ConfigError",
    "GitMetaConfig",
    "OutputConfig",
    "StatusConfig",
    "load_config",
]
