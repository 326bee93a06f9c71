"""Configuration layer: frozen models, unified settings, logging setup."""

from entityserde.config.models import (
    DEFAULT_SERIALIZATION_SETTINGS,
    PluginsConfig,
    SerializationSettings,
)

__all__ = ["DEFAULT_SERIALIZATION_SETTINGS", "PluginsConfig", "SerializationSettings"]
