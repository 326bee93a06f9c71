"""Plugin discovery, loading, and application to a serializer.

Discovery: entry_points (pip-installed) via pluggy setuptools entrypoints,
plus local directory discovery of single-file plugins.
Capabilities: property converters, property injectors, property aliases,
value resolvers.
"""

from __future__ import annotations

import importlib.util
import inspect
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

import pluggy

from entityserde.plugins.hookspecs import EntitySerdeHookSpec

if TYPE_CHECKING:
    from entityserde.serializer.engine import EntitySerializer

PROJECT_NAME = "entityserde"
ENTRY_POINT_GROUP = "entityserde.plugins"

logger = logging.getLogger(__name__)


class PluginManager:
    """Manages plugin discovery, loading, and registration onto serializers."""

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(EntitySerdeHookSpec)
        self._loaded: bool = False

    def discover_and_load(self, *, local_dir: Path | None = None) -> list[str]:
        """Discover plugins from entry points and an optional local directory.

        Uses pluggy's native setuptools entry_point discovery for the
        ``entityserde.plugins`` group, then scans *local_dir* for
        single-file Python plugins.

        Returns a list of loaded plugin names.
        """
        self._pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
        self._normalize_plugin_instances()
        if local_dir is not None:
            self._discover_local(local_dir)
        self._loaded = True
        return self.list_plugin_names()

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        """Register a plugin instance directly (e.g. built-in plugins)."""
        resolved_name = name or plugin.__class__.__name__
        self._pm.register(plugin, name=resolved_name)
        logger.debug("Registered plugin: %s", resolved_name)

    @property
    def is_loaded(self) -> bool:
        """Whether discover_and_load() has been called."""
        return self._loaded

    @property
    def hook(self) -> pluggy.HookRelay:
        return self._pm.hook

    def list_plugin_names(self) -> list[str]:
        """Return names of all registered plugins, in registration order."""
        return [name for name, plugin in self._pm.list_name_plugin() if plugin is not None]

    # ------------------------------------------------------------------
    # Application
    # ------------------------------------------------------------------

    def apply(self, serializer: EntitySerializer) -> None:
        """Register every plugin contribution on *serializer*.

        Plugins are visited in registration order, so a later plugin's
        converters take precedence over an earlier plugin's. A plugin whose
        hook raises, or returns a malformed item, is skipped with a warning.
        """
        for name, plugin in self._pm.list_name_plugin():
            if plugin is None:
                continue  # blocked
            self._apply_plugin(serializer, plugin, name)

    def _apply_plugin(self, serializer: EntitySerializer, plugin: object, name: str) -> None:
        for converter in self._collect(plugin, name, "register_property_converters"):
            serializer.register_property_converter(converter)
        for item in self._collect(plugin, name, "register_property_injectors"):
            try:
                type_or_name, injector = item
                serializer.register_property_injector(type_or_name, injector)
            except (TypeError, ValueError, AttributeError):
                logger.warning(
                    "Skipping malformed injector %r from plugin %s", item, name, exc_info=True
                )
        for item in self._collect(plugin, name, "register_property_aliases"):
            try:
                type_or_name, alias, property_name = item
                serializer.register_property_alias(type_or_name, alias, property_name)
            except (TypeError, ValueError, AttributeError):
                logger.warning(
                    "Skipping malformed alias %r from plugin %s", item, name, exc_info=True
                )
        for resolver in self._collect(plugin, name, "register_value_resolvers"):
            if not callable(resolver):
                logger.warning("Skipping non-callable resolver %r from plugin %s", resolver, name)
                continue
            serializer.register_value_resolver(resolver)

    @staticmethod
    def _collect(plugin: object, plugin_name: str, hook_name: str) -> list[Any]:
        """Call one hook on a single plugin; failures become warnings."""
        hook = getattr(plugin, hook_name, None)
        if hook is None:
            return []
        try:
            contributed = hook()
        except Exception:
            logger.warning(
                "Failed to collect %s from plugin %s", hook_name, plugin_name, exc_info=True
            )
            return []
        if contributed is None:
            return []
        if not isinstance(contributed, list | tuple):
            logger.warning(
                "Plugin %s returned %s from %s; expected a list",
                plugin_name,
                type(contributed).__name__,
                hook_name,
            )
            return []
        return list(contributed)

    # ------------------------------------------------------------------
    # Local directory discovery
    # ------------------------------------------------------------------

    def _discover_local(self, local_dir: Path) -> None:
        """Scan *local_dir* for single-file Python plugins.

        Each ``*.py`` file (excluding ``_``-prefixed names) is loaded as a
        module. Classes inside the module that carry pluggy hookimpl-decorated
        methods are instantiated and registered.

        Errors are logged as warnings but never raised.
        """
        if not local_dir.is_dir():
            return

        for py_file in sorted(local_dir.glob("*.py")):
            if py_file.name.startswith("_"):
                continue
            module_name = f"entityserde_local_plugin_{py_file.stem}"
            try:
                spec = importlib.util.spec_from_file_location(module_name, py_file)
                if spec is None or spec.loader is None:
                    logger.warning("Could not create module spec for %s", py_file)
                    continue
                module = importlib.util.module_from_spec(spec)
                sys.modules[module_name] = module
                spec.loader.exec_module(module)
            except Exception:
                logger.warning("Failed to load local plugin %s", py_file, exc_info=True)
                sys.modules.pop(module_name, None)
                continue

            for _attr_name, obj in inspect.getmembers(module, inspect.isclass):
                if obj.__module__ != module_name:
                    continue  # skip imported classes
                if not self._has_hook_impls(obj):
                    continue
                try:
                    self.register_plugin(obj(), name=f"{module_name}.{obj.__name__}")
                except Exception:
                    logger.warning(
                        "Failed to instantiate plugin class %s from %s",
                        obj.__name__,
                        py_file,
                        exc_info=True,
                    )

    def _normalize_plugin_instances(self) -> None:
        """Replace registered plugin classes with instantiated objects.

        Entry-point loading may register a plugin class directly; its hooks
        would then be unbound.
        """
        for name, plugin in list(self._pm.list_name_plugin()):
            if not inspect.isclass(plugin):
                continue
            if not self._has_hook_impls(plugin):
                continue

            self._pm.unregister(plugin)
            try:
                instance = plugin()
            except Exception:
                logger.warning("Failed to instantiate entry-point plugin %s", name, exc_info=True)
                continue

            self._pm.register(instance, name=name)
            logger.debug("Instantiated entry-point plugin: %s", name)

    @staticmethod
    def _has_hook_impls(cls: type) -> bool:
        """Check whether *cls* has any methods decorated with ``@hookimpl``.

        Pluggy's ``HookimplMarker("entityserde")`` sets an
        ``entityserde_impl`` attribute on decorated methods.
        """
        for name in dir(cls):
            if name.startswith("_"):
                continue
            method = getattr(cls, name, None)
            if callable(method) and getattr(method, f"{PROJECT_NAME}_impl", None):
                return True
        return False
