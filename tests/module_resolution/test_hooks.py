"""Tests for hook chains and the LoaderHook adapter."""

import importlib
import sys

import pytest

from prefix_autoloader.module_resolution import CallbackChain
from prefix_autoloader.module_resolution import LoaderHook
from prefix_autoloader.module_resolution import MetaPathChain
from prefix_autoloader.module_resolution import PathRegistry
from prefix_autoloader.module_resolution import Resolver


def _hook(tmp_path, chain=None, activate=None):
    registry = PathRegistry(tmp_path)
    resolver = Resolver(registry, activate=activate) if activate else Resolver(registry)
    return LoaderHook(resolver, chain)


class TestCallbackChain:
    def test_register_appends_and_prepends(self):
        chain = CallbackChain()
        first, second, third = (lambda s: False), (lambda s: False), (lambda s: False)

        chain.register(first)
        chain.register(second)
        chain.register(third, prepend=True)
        chain.register(first)

        assert chain.hooks == (third, first, second)

    def test_load_stops_at_first_success(self):
        chain = CallbackChain()
        asked = []

        def miss(symbol):
            asked.append(("miss", symbol))
            return False

        def hit(symbol):
            asked.append(("hit", symbol))
            return True

        def never(symbol):
            asked.append(("never", symbol))
            return True

        for hook in (miss, hit, never):
            chain.register(hook)

        assert chain.load("app.User") is True
        assert asked == [("miss", "app.User"), ("hit", "app.User")]

    def test_load_reports_miss(self):
        chain = CallbackChain()
        chain.register(lambda symbol: False)
        assert chain.load("app.User") is False

    def test_unregister_absent_hook_is_noop(self):
        chain = CallbackChain()
        chain.unregister(lambda symbol: True)
        assert chain.hooks == ()


class TestMetaPathChain:
    def test_register_into_injected_list(self):
        existing = object()
        finders = [existing]
        chain = MetaPathChain(finders)
        front, back = object(), object()

        chain.register(back)
        chain.register(front, prepend=True)
        chain.register(back)

        assert finders == [front, existing, back]

        chain.unregister(front)
        chain.unregister(front)
        assert finders == [existing, back]

    def test_defaults_to_sys_meta_path(self, isolated_imports):
        assert MetaPathChain().meta_path is sys.meta_path


class TestLoaderHook:
    def test_register_with_callback_chain(self, tmp_path, write_file):
        user = write_file(tmp_path / "src" / "user.py")
        calls = []
        chain = CallbackChain()
        hook = _hook(tmp_path, chain, activate=lambda name, file: calls.append((name, file)))
        hook.resolver.registry.add_path("src", "app")

        assert hook.register() is hook
        assert chain.load("app.user") is True
        assert chain.load("app.missing") is False
        assert calls == [("app.user", user)]

    def test_unregister_never_registered_is_noop(self, tmp_path):
        chain = CallbackChain()
        hook = _hook(tmp_path, chain)

        hook.unregister()
        hook.register(prepend=True)
        hook.unregister()

        assert chain.hooks == ()

    def test_default_chain_is_meta_path(self, tmp_path, isolated_imports):
        hook = _hook(tmp_path).register(prepend=True)
        assert sys.meta_path[0] is hook

        hook.unregister()
        assert hook not in sys.meta_path

    def test_find_spec_miss_returns_none(self, tmp_path):
        hook = _hook(tmp_path)
        assert hook.find_spec("autoload_unmapped.thing") is None

    def test_find_spec_for_package(self, tmp_path, write_file):
        init = write_file(tmp_path / "src" / "demo" / "__init__.py")
        hook = _hook(tmp_path)
        hook.resolver.registry.add_path("src/demo", "demo")

        spec = hook.find_spec("demo")

        assert spec.origin == str(init)
        assert spec.submodule_search_locations == [str(init.parent)]

    def test_find_spec_translates_separator(self, tmp_path, write_file):
        user = write_file(tmp_path / "src" / "User.py")
        registry = PathRegistry(tmp_path, separator="\\").add_path("src", "App")
        hook = LoaderHook(Resolver(registry), CallbackChain())

        spec = hook.find_spec("App.User")

        assert spec.origin == str(user)
        assert spec.submodule_search_locations is None


class TestImportThroughMetaPath:
    @pytest.fixture
    def project(self, tmp_path, write_file):
        pkg = tmp_path / "src" / "autoload_e2e_pkg"
        write_file(pkg / "__init__.py", "LOADED = True\n")
        write_file(pkg / "models" / "__init__.py")
        write_file(
            pkg / "models" / "user.py",
            "from autoload_e2e_pkg.helpers import greet\n\nGREETING = greet('user')\n",
        )
        write_file(tmp_path / "shared" / "helpers.py", "def greet(name):\n    return f'hello {name}'\n")
        return tmp_path

    def test_import_mapped_module(self, project, isolated_imports):
        registry = PathRegistry(project)
        registry.add_path("src/autoload_e2e_pkg", "autoload_e2e_pkg")
        registry.add_path("shared/helpers.py", "autoload_e2e_pkg.helpers")
        hook = LoaderHook(Resolver(registry)).register(prepend=True)

        try:
            module = importlib.import_module("autoload_e2e_pkg.models.user")
        finally:
            hook.unregister()

        assert module.GREETING == "hello user"
        assert sys.modules["autoload_e2e_pkg"].LOADED is True
        resolved = hook.resolver.resolved
        assert resolved["autoload_e2e_pkg.models.user"] == (
            project / "src" / "autoload_e2e_pkg" / "models" / "user.py"
        ).resolve()
        assert resolved["autoload_e2e_pkg.helpers"] == (project / "shared" / "helpers.py").resolve()

    def test_unmapped_import_falls_through(self, project, isolated_imports):
        hook = LoaderHook(Resolver(PathRegistry(project))).register()
        try:
            with pytest.raises(ModuleNotFoundError):
                importlib.import_module("autoload_e2e_pkg")
        finally:
            hook.unregister()
