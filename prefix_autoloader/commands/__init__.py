"""CLI commands for prefix-autoloader."""

__all__ = [
    "paths",
    "resolve",
    "run",
]
