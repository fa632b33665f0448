"""Unit tests for core.plugins.manager module."""

from __future__ import annotations

from typing import Any
from unittest.mock import MagicMock, patch

import pytest
import typer

from site_operations_manager.core.plugins.base import Plugin, hookimpl
from site_operations_manager.core.plugins.manager import PluginManager

ENTRY_POINTS = "site_operations_manager.core.plugins.manager.importlib.metadata.entry_points"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class _RecordingPlugin(Plugin):  # type: ignore[misc]
    """Plugin that records the hooks it receives."""

    name = "recording"
    version = "1.0.0"
    description = "records hooks"

    def __init__(self) -> None:
        super().__init__()
        self.apps: list[Any] = []
        self.cleaned_up = False

    @hookimpl
    def register_commands(self, app: typer.Typer) -> None:
        self.apps.append(app)

    @hookimpl
    def cleanup(self) -> None:
        self.cleaned_up = True
        super().cleanup()


class _BrokenPlugin(Plugin):  # type: ignore[misc]
    """Plugin whose initialization always fails."""

    name = "broken"
    version = "1.0.0"

    def on_initialize(self) -> None:
        raise ValueError("bad config")


def _make_entry_point(name: str, plugin_class: type[Plugin]) -> MagicMock:
    """Return a MagicMock that acts as an importlib.metadata EntryPoint."""
    ep = MagicMock()
    ep.name = name
    ep.value = f"fake.module:{plugin_class.__name__}"
    ep.load.return_value = plugin_class
    return ep


# ---------------------------------------------------------------------------
# Discovery and loading
# ---------------------------------------------------------------------------


@pytest.mark.unit
class TestDiscoverPlugins:
    """Tests for PluginManager.discover_plugins."""

    def test_namespace_constant(self) -> None:
        """Plugins are discovered from the package's entry point group."""
        assert PluginManager.NAMESPACE == "site_operations_manager.plugins"

    def test_returns_names_from_entry_points(self) -> None:
        """discover_plugins lists names from the entry point group."""
        eps = [_make_entry_point("hosting", _RecordingPlugin), _make_entry_point("self", _BrokenPlugin)]
        with patch(ENTRY_POINTS, return_value=eps):
            assert PluginManager().discover_plugins() == ["hosting", "self"]

    def test_returns_empty_list_on_exception(self) -> None:
        """discover_plugins swallows metadata errors."""
        with patch(ENTRY_POINTS, side_effect=RuntimeError("metadata error")):
            assert PluginManager().discover_plugins() == []


@pytest.mark.unit
class TestLoadPlugin:
    """Tests for PluginManager.load_plugin and load_enabled."""

    def test_loads_plugin_successfully(self) -> None:
        """load_plugin instantiates and registers the entry point class."""
        with patch(ENTRY_POINTS, return_value=[_make_entry_point("recording", _RecordingPlugin)]):
            manager = PluginManager()
            assert manager.load_plugin("recording") is True

        assert isinstance(manager.get_plugin("recording"), _RecordingPlugin)

    def test_already_loaded(self) -> None:
        """Loading twice is a no-op."""
        manager = PluginManager()
        manager.register(_RecordingPlugin())
        with patch(ENTRY_POINTS) as entry_points:
            assert manager.load_plugin("recording") is True
        entry_points.assert_not_called()

    def test_not_found(self) -> None:
        """load_plugin returns False without a matching entry point."""
        with patch(ENTRY_POINTS, return_value=[]):
            assert PluginManager().load_plugin("missing") is False

    def test_load_exception(self) -> None:
        """Import errors are reported as a failed load."""
        ep = MagicMock()
        ep.name = "broken"
        ep.load.side_effect = ImportError("cannot import")
        with patch(ENTRY_POINTS, return_value=[ep]):
            assert PluginManager().load_plugin("broken") is False

    def test_load_enabled_returns_loaded_names(self) -> None:
        """load_enabled skips plugins that cannot be found."""
        with patch(ENTRY_POINTS, return_value=[_make_entry_point("recording", _RecordingPlugin)]):
            loaded = PluginManager().load_enabled(["recording", "missing"])
        assert loaded == ["recording"]


# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------


@pytest.mark.unit
class TestLifecycle:
    """Tests for initialize_all, register_commands and cleanup_all."""

    def test_initialize_all_passes_plugin_sections(self) -> None:
        """Each plugin receives its own plugins.<name> section."""
        manager = PluginManager()
        plugin = _RecordingPlugin()
        manager.register(plugin)

        manager.initialize_all({"plugins": {"recording": {"key": "val"}, "other": {"x": 1}}})

        assert plugin._config == {"key": "val"}
        assert plugin.is_initialized is True

    def test_initialize_all_continues_after_failure(self) -> None:
        """A failing plugin does not stop the others."""
        manager = PluginManager()
        good = _RecordingPlugin()
        manager.register(_BrokenPlugin())
        manager.register(good)

        manager.initialize_all({})

        assert good.is_initialized is True
        assert manager.get_plugin("broken").is_initialized is False  # type: ignore[union-attr]

    def test_register_commands_calls_hook(self) -> None:
        """register_commands reaches each plugin's hookimpl."""
        manager = PluginManager()
        plugin = _RecordingPlugin()
        manager.register(plugin)
        app = typer.Typer()

        manager.register_commands(app)

        assert plugin.apps == [app]

    def test_cleanup_all(self) -> None:
        """cleanup_all runs the cleanup hook."""
        manager = PluginManager()
        plugin = _RecordingPlugin()
        manager.register(plugin)
        manager.initialize_all({})

        manager.cleanup_all()

        assert plugin.cleaned_up is True
        assert manager._initialized is False

    def test_list_plugins(self) -> None:
        """list_plugins describes each registered plugin."""
        manager = PluginManager()
        manager.register(_RecordingPlugin())

        assert manager.list_plugins() == [
            {
                "name": "recording",
                "version": "1.0.0",
                "description": "records hooks",
                "initialized": False,
            }
        ]
