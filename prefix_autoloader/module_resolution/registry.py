"""Prefix and explicit-file mapping tables.

A PathRegistry maps canonical namespace prefixes to ordered base directories,
and exact names to ordered candidate files. All registered paths are rooted
under a base directory validated at construction time.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from collections.abc import Mapping
from pathlib import Path

logger = logging.getLogger(__name__)


class ConfigurationError(ValueError):
    """Raised when a registry or loader cannot be configured."""


class PathRegistry:
    """Ordered prefix -> directories and name -> files tables.

    Entries only accumulate: there is no removal. Lookups return tuples so that
    callers iterating over them are unaffected by later registrations.
    """

    def __init__(self, base_root: str | Path, separator: str = ".", strict: bool = False):
        """Initialize with a base root.

        Args:
            base_root: Directory every registered path is rooted under
            separator: Hierarchy separator used in prefixes and symbols
            strict: Raise instead of silently ignoring unusable paths

        Raises:
            ConfigurationError: base_root is missing, not a directory or unreadable
        """
        if len(separator) != 1:
            raise ConfigurationError(f"Separator must be a single character, got {separator!r}")

        root = Path(base_root).expanduser().resolve()

        if not root.is_dir():
            raise ConfigurationError(f"Invalid base path {root}")

        if not os.access(root, os.R_OK):
            raise ConfigurationError(f"Path {root} is not readable")

        self.base_root = root
        self.separator = separator
        self.strict = strict
        self._paths: dict[str, list[Path]] = {}
        self._files: dict[str, list[Path]] = {}

    @property
    def root_prefix(self) -> str:
        return self.separator

    def canonicalize(self, name: str) -> str:
        """Return the canonical form of a prefix or symbol.

        Canonical names start with exactly one separator and never end with
        one. The root prefix is the separator alone.
        """
        return self.separator + name.strip(self.separator)

    def is_root(self, prefix: str) -> bool:
        return self.canonicalize(prefix) == self.root_prefix

    def add_path(self, path: str | Path, prefix: str = "") -> PathRegistry:
        """Register a base directory or explicit file for a prefix.

        Args:
            path: Directory or file, relative paths taken from the base root
            prefix: Namespace prefix (empty for the root prefix)

        Returns:
            This registry, for chaining

        Raises:
            ConfigurationError: strict mode and path is unusable for prefix
        """
        resolved = self._normalize_path(path)
        key = self.canonicalize(prefix)

        if resolved.is_file() and key != self.root_prefix:
            files = self._files.setdefault(key, [])
            if resolved not in files:
                files.append(resolved)
                logger.debug(f"[autoload:register] {key} -> file {resolved}")
        elif resolved.is_dir():
            directories = self._paths.setdefault(key, [])
            if resolved not in directories:
                directories.append(resolved)
                logger.debug(f"[autoload:register] {key} -> dir {resolved}")
        elif self.strict:
            raise ConfigurationError(f"Path {resolved} cannot be registered for prefix '{key}'")
        else:
            logger.debug(f"[autoload:register] ignoring {resolved} for {key}")

        return self

    def add_paths(self, mapping: Mapping[str, str | Path] | Iterable[tuple[str, str | Path]]) -> PathRegistry:
        """Register several (prefix, path) pairs in iteration order."""
        pairs = mapping.items() if isinstance(mapping, Mapping) else mapping
        for prefix, path in pairs:
            self.add_path(path, prefix)
        return self

    def directories_for(self, prefix: str) -> tuple[Path, ...]:
        """Directories registered for an already-canonical prefix."""
        return tuple(self._paths.get(prefix, ()))

    def files_for(self, name: str) -> tuple[Path, ...]:
        """Explicit files registered for an already-canonical name."""
        return tuple(self._files.get(name, ()))

    def prefixes(self) -> list[str]:
        return list(self._paths)

    def explicit_names(self) -> list[str]:
        return list(self._files)

    def _normalize_path(self, path: str | Path) -> Path:
        """Resolve path and root it under the base root."""
        candidate = Path(path).expanduser()
        if not candidate.is_absolute():
            candidate = self.base_root / candidate
        candidate = candidate.resolve()

        # Paths outside the root are re-anchored beneath it
        if not candidate.is_relative_to(self.base_root):
            candidate = self.base_root / candidate.relative_to(candidate.anchor)

        return candidate

    def __repr__(self) -> str:
        return f"PathRegistry({self.base_root}, prefixes={len(self._paths)}, files={len(self._files)})"
