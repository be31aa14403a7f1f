"""Loader settings from autoload.yaml files.

Settings are optional: the core is configured programmatically. The CLI uses
this module to build a loader from a YAML file such as:

```yaml
base_root: .
separator: "."
extension: .py
strict: false
prepend: false
paths:
  app: src/app
  app.legacy:
    - vendor/legacy
    - vendor/legacy-fallback
```
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml
from pydantic import BaseModel
from pydantic import Field
from pydantic import ValidationError
from pydantic import field_validator

from .module_resolution import ConfigurationError
from .module_resolution import HookChain
from .module_resolution import LoaderHook
from .module_resolution import PathRegistry
from .module_resolution import Resolver

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS_FILE = "autoload.yaml"
CONFIG_ENV_VAR = "AUTOLOAD_CONFIG"


class LoaderSettings(BaseModel):
    """Validated contents of a settings file."""

    base_root: Path = Field(default=Path("."), description="Root all mapped paths live under")
    separator: str = Field(default=".", description="Hierarchy separator in symbols")
    extension: str = Field(default=".py", description="Source file extension")
    strict: bool = Field(default=False, description="Reject paths that are neither file nor directory")
    prepend: bool = Field(default=False, description="Register before existing hooks")
    paths: dict[str, list[str]] = Field(default_factory=dict, description="Prefix to paths, in order")

    @field_validator("separator")
    @classmethod
    def _single_character(cls, value: str) -> str:
        if len(value) != 1:
            raise ValueError("separator must be a single character")
        return value

    @field_validator("extension")
    @classmethod
    def _dotted_extension(cls, value: str) -> str:
        return value if value.startswith(".") else f".{value}"

    @field_validator("paths", mode="before")
    @classmethod
    def _listify_paths(cls, value):
        if value is None:
            return {}
        if isinstance(value, dict):
            return {
                ("" if prefix is None else str(prefix)): [target] if isinstance(target, str) else target
                for prefix, target in value.items()
            }
        return value


def find_settings_file(explicit: str | Path | None = None) -> Path | None:
    """Pick the settings file to load.

    Resolution order:
    1. Explicit path (must exist)
    2. AUTOLOAD_CONFIG environment variable (must exist)
    3. ./autoload.yaml if present

    Raises:
        ConfigurationError: An explicitly named file does not exist
    """
    if explicit is None:
        explicit = os.getenv(CONFIG_ENV_VAR) or None

    if explicit is not None:
        path = Path(explicit).expanduser()
        if not path.is_file():
            raise ConfigurationError(f"Settings file not found: {path}")
        return path

    default = Path.cwd() / DEFAULT_SETTINGS_FILE
    return default if default.is_file() else None


def load_settings(path: str | Path | None = None) -> LoaderSettings:
    """Load and validate settings.

    A relative base_root is taken relative to the settings file. Without any
    settings file, defaults rooted at the current directory are returned.

    Raises:
        ConfigurationError: File missing, unparsable or invalid
    """
    settings_file = find_settings_file(path)
    if settings_file is None:
        logger.debug("[autoload:settings] no settings file, using defaults")
        return LoaderSettings(base_root=Path.cwd())

    try:
        with open(settings_file, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Cannot parse {settings_file}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Settings file {settings_file} must contain a mapping")

    try:
        settings = LoaderSettings.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid settings in {settings_file}:\n{e}") from e

    if not settings.base_root.expanduser().is_absolute():
        settings.base_root = settings_file.parent.resolve() / settings.base_root.expanduser()

    logger.debug(f"[autoload:settings] loaded {settings_file}")
    return settings


def build_registry(settings: LoaderSettings) -> PathRegistry:
    registry = PathRegistry(settings.base_root, separator=settings.separator, strict=settings.strict)
    for prefix, targets in settings.paths.items():
        for target in targets:
            registry.add_path(target, prefix)
    return registry


def build_loader(settings: LoaderSettings, chain: HookChain | None = None) -> LoaderHook:
    """Build an unregistered LoaderHook from settings.

    Args:
        settings: Loaded settings
        chain: Hook chain to register with later (default: sys.meta_path)

    Returns:
        LoaderHook wired to a fresh Resolver and PathRegistry
    """
    resolver = Resolver(build_registry(settings), extension=settings.extension)
    return LoaderHook(resolver, chain)
