"""Build a ready-to-use serializer from settings.

Configures logging, builds an :class:`EntitySerializer` with the configured
default :class:`SerializationSettings`, and applies discovered plugins.
"""

from __future__ import annotations

import logging

from entityserde.config.logging import configure_logging
from entityserde.config.settings import EntitySerdeSettings
from entityserde.plugins.builtins.type_hint import TypeHintPlugin
from entityserde.plugins.manager import PluginManager
from entityserde.serializer.engine import EntitySerializer

logger = logging.getLogger(__name__)


def create_serializer(
    settings: EntitySerdeSettings | None = None,
    *,
    plugin_manager: PluginManager | None = None,
    setup_logging: bool | None = None,
) -> EntitySerializer:
    """Build a serializer from *settings* (default: discovered settings).

    Built-in plugins are registered before discovery so that installed
    plugins take precedence over them.

    Logging is configured only when *setup_logging* is true, or, when it is
    left as ``None``, when the settings enable ``verbose`` or ``log_json``.
    Otherwise the host application's logging setup is left alone.
    """
    settings = settings or EntitySerdeSettings.load()
    if setup_logging is None:
        setup_logging = settings.verbose or settings.log_json
    if setup_logging:
        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    serializer = EntitySerializer(default_settings=settings.serialization)

    if not settings.plugins.enabled:
        logger.debug("Plugins disabled; serializer has no extensions")
        return serializer

    pm = plugin_manager or PluginManager()
    if settings.plugins.type_hints:
        pm.register_plugin(TypeHintPlugin(settings.plugins.type_hint_key), name="type-hints")
    if not pm.is_loaded:
        pm.discover_and_load(local_dir=settings.plugins.local_dir)
    pm.apply(serializer)
    logger.debug("Applied plugins: %s", ", ".join(pm.list_plugin_names()) or "(none)")
    return serializer
