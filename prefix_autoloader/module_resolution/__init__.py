"""Prefix-mapped module resolution.

PathRegistry holds the mapping tables, Resolver searches them, and LoaderHook
plugs a Resolver into a host hook chain such as sys.meta_path.
"""

from .hooks import CallbackChain
from .hooks import HookChain
from .hooks import LoaderHook
from .hooks import MetaPathChain
from .registry import ConfigurationError
from .registry import PathRegistry
from .resolvers import Resolution
from .resolvers import Resolver
from .resolvers import import_source_file

__all__ = [
    "CallbackChain",
    "ConfigurationError",
    "HookChain",
    "LoaderHook",
    "MetaPathChain",
    "PathRegistry",
    "Resolution",
    "Resolver",
    "import_source_file",
]
