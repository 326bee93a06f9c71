"""Exception types raised by the serialization engine.

INVARIANT: A duplicate output key is an authoring error, never recovered.
Everything else the engine tolerates (alias misses, unmatched converters,
malformed entity references) is handled without raising.
"""

from __future__ import annotations


class EntitySerdeError(Exception):
    """Base class for all entityserde errors."""


class DuplicatePropertyError(EntitySerdeError):
    """Two pairs in one serialized entity produced the same output key."""

    def __init__(self, key: str, type_name: str | None = None) -> None:
        self.key = key
        self.type_name = type_name
        where = f" while serializing {type_name!r}" if type_name else ""
        super().__init__(
            f"Property {key!r} was encountered twice during serialization{where}. "
            "Make sure injected properties do not collide with model properties."
        )


class ConfigError(EntitySerdeError):
    """Invalid configuration file or value."""
