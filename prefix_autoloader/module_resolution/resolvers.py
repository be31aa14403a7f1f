"""Symbol resolution against a PathRegistry.

Resolution order (first match wins):
1. Explicit file registered for the exact symbol
2. Package initializer of a prefix equal to the symbol
3. Longest registered prefix, first registered directory
"""

from __future__ import annotations

import importlib.machinery
import importlib.util
import logging
import sys
from collections.abc import Callable
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Literal

from .registry import PathRegistry

logger = logging.getLogger(__name__)

Activator = Callable[[str, Path], None]


@dataclass(frozen=True)
class Resolution:
    """A located source file.

    Attributes:
        symbol: Symbol as requested
        file: Absolute path of the winning file
        phase: "explicit" for explicit-file hits, "prefix" for directory search
        key: Explicit name or prefix that matched
        package: True when file is a package initializer
    """

    symbol: str
    file: Path
    phase: Literal["explicit", "prefix"]
    key: str
    package: bool = False


def import_source_file(module_name: str, file: Path) -> None:
    """Import a source file as a module registered in sys.modules.

    Does nothing if module_name is already imported. A module whose execution
    fails is removed from sys.modules before the error propagates.
    """
    if module_name in sys.modules:
        return

    loader = importlib.machinery.SourceFileLoader(module_name, str(file))
    spec = importlib.util.spec_from_file_location(module_name, file, loader=loader)
    if spec is None:
        raise ImportError(f"Cannot load {file} as {module_name}", name=module_name, path=str(file))

    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        loader.exec_module(module)
    except Exception:
        sys.modules.pop(module_name, None)
        raise


class Resolver:
    """Longest-prefix-first resolver with load-once activation."""

    def __init__(
        self,
        registry: PathRegistry,
        extension: str = ".py",
        activate: Activator = import_source_file,
        package_init: str | None = "__init__",
    ):
        """Initialize resolver.

        Args:
            registry: Mapping tables to search
            extension: Source file extension, including the dot
            activate: Called as activate(module_name, file) once per file
            package_init: Package initializer stem, None to disable package lookup
        """
        self.registry = registry
        self.extension = extension
        self.package_init = package_init
        self._activate = activate
        self._activated: set[Path] = set()
        self._resolved: dict[str, Path] = {}

    @property
    def resolved(self) -> Mapping[str, Path]:
        """Symbols resolved so far, mapped to their files."""
        return MappingProxyType(self._resolved)

    def is_activated(self, file: Path) -> bool:
        return file in self._activated

    def module_name(self, symbol: str) -> str:
        """Dotted module name for a symbol."""
        return ".".join(self._segments(symbol))

    def resolve(self, symbol: str) -> bool:
        """Locate and activate the file for symbol.

        Returns:
            True if a file was found and activated (now or earlier),
            False if this resolver has no file for symbol
        """
        resolution = self.locate(symbol)
        if resolution is None:
            logger.debug(f"[autoload:resolve] {symbol} -> not found")
            return False

        self._activate_once(symbol, resolution.file)
        self._resolved[symbol] = resolution.file
        return True

    def record(self, symbol: str, file: Path) -> None:
        """Record a file loaded on this resolver's behalf by the host."""
        self._activated.add(file)
        self._resolved[symbol] = file

    def locate(self, symbol: str) -> Resolution | None:
        """Find the file for symbol without activating it.

        Returns:
            Resolution for the winning file, None if nothing matches
        """
        registry = self.registry
        canonical = registry.canonicalize(symbol)

        for file in registry.files_for(canonical):
            if file.is_file():
                logger.debug(f"[autoload:resolve] {symbol} -> explicit {file}")
                return Resolution(symbol, file, "explicit", canonical)

        if self.package_init and not registry.is_root(canonical):
            for directory in registry.directories_for(canonical):
                candidate = directory / (self.package_init + self.extension)
                if candidate.is_file():
                    logger.debug(f"[autoload:resolve] {symbol} -> package {candidate}")
                    return Resolution(symbol, candidate, "prefix", canonical, package=True)

        # Walk backwards through the separators, longest prefix first
        working = canonical
        while (pos := working.rfind(registry.separator)) != -1:
            working = working[:pos].rstrip(registry.separator)
            relative = canonical[pos:].lstrip(registry.separator)
            if not relative:
                continue

            prefix = working or registry.root_prefix
            resolution = self._search_prefix(symbol, prefix, relative)
            if resolution is not None:
                logger.debug(f"[autoload:resolve] {symbol} -> {prefix} {resolution.file}")
                return resolution

        return None

    def _search_prefix(self, symbol: str, prefix: str, relative: str) -> Resolution | None:
        """Try each directory of prefix for the relative name."""
        parts = self._segments(relative)
        for directory in self.registry.directories_for(prefix):
            candidate = directory.joinpath(*parts[:-1], parts[-1] + self.extension)
            if candidate.is_file():
                return Resolution(symbol, candidate, "prefix", prefix)

            if self.package_init:
                candidate = directory.joinpath(*parts, self.package_init + self.extension)
                if candidate.is_file():
                    return Resolution(symbol, candidate, "prefix", prefix, package=True)

        return None

    def _activate_once(self, symbol: str, file: Path) -> None:
        # Marked before activation so re-entrant requests for the file are no-ops
        if file in self._activated:
            logger.debug(f"[autoload:activate] {file} already active")
            return

        self._activated.add(file)
        try:
            self._activate(self.module_name(symbol), file)
        except Exception:
            self._activated.discard(file)
            raise

    def _segments(self, name: str) -> list[str]:
        return [part for part in name.split(self.registry.separator) if part]

    def __repr__(self) -> str:
        return f"Resolver({self.registry.base_root}, extension={self.extension})"
