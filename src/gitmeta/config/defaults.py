"""Starter .gitmeta.toml template."""

DEFAULT_TOML = """\
# gitmeta configuration
version = "1.0"

[status]
max_workers = 8               # concurrent submodule queries
untracked = "normal"          # normal | all | no
hidden_paths = [".gitmodules"]
git_timeout = 30              # seconds per git invocation

[output]
format = "terminal"           # terminal | json
show_untracked = true
"""
