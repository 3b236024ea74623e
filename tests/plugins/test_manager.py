"""Tests for the relcore PluginManager."""

from __future__ import annotations

import pytest

from relcore.plugins.hookspecs import hookimpl
from relcore.plugins.manager import PluginManager


class _Recorder:
    def __init__(self) -> None:
        self.calls: list[str] = []

    @hookimpl
    def post_audit_log(self, action_name: str) -> None:
        self.calls.append(action_name)


class _Helper:
    def helper(self) -> None:
        pass


class _Broken:
    def __init__(self) -> None:
        raise RuntimeError("needs arguments")

    @hookimpl
    def post_audit_log(self, action_name: str) -> None:
        pass


@pytest.fixture
def pm() -> PluginManager:
    return PluginManager()


class TestRegistration:
    def test_hook_specs_loaded(self, pm: PluginManager) -> None:
        assert hasattr(pm.hook, "post_audit_log")
        assert hasattr(pm.hook, "post_contact_log")

    def test_named_and_default_names(self, pm: PluginManager) -> None:
        pm.register_plugin(_Recorder(), name="recorder")
        pm.register_plugin(_Recorder())
        assert pm.list_plugin_names() == ["recorder", "_Recorder"]

    def test_dispatch_reaches_plugin(self, pm: PluginManager) -> None:
        recorder = _Recorder()
        pm.register_plugin(recorder)
        pm.hook.post_audit_log(
            action_name="vault_created",
            account_id=1,
            author_id=1,
            author_name="Ada",
            vault_id=3,
            objects={},
            created_at="2026-01-01T00:00:00+00:00",
        )
        assert recorder.calls == ["vault_created"]

    def test_unregister(self, pm: PluginManager) -> None:
        recorder = _Recorder()
        pm.register_plugin(recorder, name="recorder")
        pm.unregister(recorder)
        assert "recorder" not in pm.list_plugin_names()


class TestDiscovery:
    def test_marks_loaded(self, pm: PluginManager) -> None:
        assert pm.is_loaded is False
        assert isinstance(pm.discover_and_load(), list)
        assert pm.is_loaded is True

    def test_implements_hooks(self, pm: PluginManager) -> None:
        assert pm.implements_hooks(_Recorder) is True
        assert pm.implements_hooks(_Recorder()) is True
        assert pm.implements_hooks(_Helper) is False

    def test_class_registration_is_instantiated(self, pm: PluginManager) -> None:
        pm.register(_Recorder, name="by-class")
        pm.discover_and_load()
        plugins = pm.get_plugins()
        assert _Recorder not in plugins
        assert any(isinstance(p, _Recorder) for p in plugins)
        assert "by-class" in pm.list_plugin_names()

    def test_uninstantiable_class_is_dropped(self, pm: PluginManager) -> None:
        pm.register(_Broken, name="broken")
        pm.discover_and_load()
        assert "broken" not in pm.list_plugin_names()
