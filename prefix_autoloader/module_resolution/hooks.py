"""Hook chains and the loader hook adapter.

A LoaderHook plugs a Resolver into a host hook chain:
- CallbackChain: in-process chain of symbol -> bool callbacks
- MetaPathChain: Python's sys.meta_path finder list
"""

from __future__ import annotations

import importlib.machinery
import importlib.util
import logging
import sys
from collections.abc import Callable
from collections.abc import Sequence
from pathlib import Path
from types import ModuleType
from typing import Any
from typing import Protocol

from .resolvers import Resolver

logger = logging.getLogger(__name__)


class HookChain(Protocol):
    """Host capability that holds resolution hooks."""

    def register(self, hook: Any, prepend: bool = False) -> None: ...

    def unregister(self, hook: Any) -> None: ...


class CallbackChain:
    """Ordered chain of symbol -> bool callbacks.

    load() asks each callback in turn and stops at the first that reports
    success.
    """

    def __init__(self):
        self._hooks: list[Callable[[str], bool]] = []

    @property
    def hooks(self) -> tuple[Callable[[str], bool], ...]:
        return tuple(self._hooks)

    def register(self, hook: Callable[[str], bool], prepend: bool = False) -> None:
        if hook in self._hooks:
            return
        if prepend:
            self._hooks.insert(0, hook)
        else:
            self._hooks.append(hook)

    def unregister(self, hook: Callable[[str], bool]) -> None:
        if hook in self._hooks:
            self._hooks.remove(hook)

    def load(self, symbol: str) -> bool:
        """Ask each hook for symbol; True if one of them loaded it."""
        # Snapshot: hooks may register or unregister while loading
        for hook in tuple(self._hooks):
            if hook(symbol):
                return True
        return False


class MetaPathChain:
    """sys.meta_path as a hook chain."""

    def __init__(self, meta_path: list | None = None):
        """Initialize chain.

        Args:
            meta_path: Finder list to manage (default: sys.meta_path)
        """
        self._meta_path = meta_path

    @property
    def meta_path(self) -> list:
        return sys.meta_path if self._meta_path is None else self._meta_path

    def register(self, hook: Any, prepend: bool = False) -> None:
        finders = self.meta_path
        if hook in finders:
            return
        if prepend:
            finders.insert(0, hook)
        else:
            finders.append(hook)

    def unregister(self, hook: Any) -> None:
        finders = self.meta_path
        if hook in finders:
            finders.remove(hook)


class ResolvedSourceLoader(importlib.machinery.SourceFileLoader):
    """Source loader that reports executed modules back to the resolver."""

    def __init__(self, fullname: str, path: str, resolver: Resolver, symbol: str):
        super().__init__(fullname, path)
        self._resolver = resolver
        self._symbol = symbol

    def exec_module(self, module: ModuleType) -> None:
        super().exec_module(module)
        self._resolver.record(self._symbol, Path(self.path))


class LoaderHook:
    """Adapter between a Resolver and a host hook chain.

    Callable with a symbol (CallbackChain contract) and usable as a
    meta path finder (MetaPathChain contract).
    """

    def __init__(self, resolver: Resolver, chain: HookChain | None = None):
        self.resolver = resolver
        self.chain: HookChain = chain if chain is not None else MetaPathChain()

    def register(self, prepend: bool = False) -> LoaderHook:
        """Install this hook in the chain.

        Args:
            prepend: Try this hook before those already registered

        Returns:
            self
        """
        self.chain.register(self, prepend)
        logger.debug(f"[autoload:hook] registered {self!r} (prepend={prepend})")
        return self

    def unregister(self) -> None:
        """Remove this hook from the chain; no-op if absent."""
        self.chain.unregister(self)
        logger.debug(f"[autoload:hook] unregistered {self!r}")

    def __call__(self, symbol: str) -> bool:
        return self.resolver.resolve(symbol)

    def find_spec(
        self,
        fullname: str,
        path: Sequence[str] | None = None,
        target: ModuleType | None = None,
    ) -> importlib.machinery.ModuleSpec | None:
        """Meta path finder protocol.

        Returns:
            ModuleSpec for the mapped file, None to let other finders try
        """
        symbol = fullname.replace(".", self.resolver.registry.separator)
        resolution = self.resolver.locate(symbol)
        if resolution is None:
            return None

        loader = ResolvedSourceLoader(fullname, str(resolution.file), self.resolver, symbol)
        if resolution.package:
            return importlib.util.spec_from_file_location(
                fullname,
                resolution.file,
                loader=loader,
                submodule_search_locations=[str(resolution.file.parent)],
            )
        return importlib.util.spec_from_file_location(fullname, resolution.file, loader=loader)

    def invalidate_caches(self) -> None:
        """Nothing is cached between lookups."""

    def __repr__(self) -> str:
        return f"LoaderHook({self.resolver.registry.base_root})"
