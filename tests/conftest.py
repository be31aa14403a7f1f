"""Pytest configuration for prefix-autoloader tests."""

import sys
from pathlib import Path

import pytest


@pytest.fixture
def write_file():
    """Create a file (and its parents) with the given content."""

    def _write(path: Path, content: str = "") -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        return path.resolve()

    return _write


@pytest.fixture
def isolated_imports(monkeypatch):
    """Undo sys.meta_path changes and drop modules imported during the test."""
    monkeypatch.setattr(sys, "meta_path", list(sys.meta_path))
    before = set(sys.modules)
    yield
    for name in set(sys.modules) - before:
        del sys.modules[name]
