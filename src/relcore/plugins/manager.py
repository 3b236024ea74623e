"""relcore's pluggy plugin manager.

Third-party side-effect plugins are installed packages exposing a
``relcore.plugins`` entry point; the built-in activity log is registered
by the Store. Entry points may name a class instead of an instance; such
classes are instantiated so their hooks get a bound ``self``.
"""

from __future__ import annotations

import inspect
import logging

import pluggy

from relcore.plugins.hookspecs import PROJECT_NAME, RelcoreHookSpec

ENTRY_POINT_GROUP = "relcore.plugins"

logger = logging.getLogger(__name__)


class PluginManager(pluggy.PluginManager):
    """pluggy manager preloaded with the relcore hook specifications."""

    def __init__(self) -> None:
        super().__init__(PROJECT_NAME)
        self.add_hookspecs(RelcoreHookSpec)
        self.is_loaded = False

    def discover_and_load(self) -> list[str]:
        """Load every installed entry-point plugin; returns all registered names."""
        self.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
        for plugin in [p for p in self.get_plugins() if inspect.isclass(p)]:
            self._instantiate(plugin)
        self.is_loaded = True
        return self.list_plugin_names()

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        name = name or type(plugin).__name__
        self.register(plugin, name=name)
        logger.debug("Registered plugin %s", name)

    def list_plugin_names(self) -> list[str]:
        return [name for name, _ in self.list_name_plugin()]

    def implements_hooks(self, candidate: object) -> bool:
        """Whether any public attribute of *candidate* is a relcore hookimpl."""
        return any(
            self.parse_hookimpl_opts(candidate, attr) is not None
            for attr in dir(candidate)
            if not attr.startswith("_")
        )

    def _instantiate(self, plugin_cls: type) -> None:
        name = self.get_name(plugin_cls) or plugin_cls.__name__
        if not self.implements_hooks(plugin_cls):
            return
        self.unregister(plugin_cls)
        try:
            instance = plugin_cls()
        except Exception:
            logger.warning("Could not instantiate plugin %s; skipped", name, exc_info=True)
            return
        self.register(instance, name=name)
        logger.debug("Instantiated entry-point plugin %s", name)
