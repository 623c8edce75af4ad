"""gitmeta: status and consistency gating for meta-repositories with submodules."""

__version__ = "0.1.0"
