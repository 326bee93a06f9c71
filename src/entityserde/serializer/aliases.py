"""Bidirectional name mapping scoped to one exact type."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from entityserde.serializer._helpers import type_label

if TYPE_CHECKING:
    from entityserde.domain.protocols import TypeDescriptor

logger = logging.getLogger(__name__)


class AliasRegistry:
    """Alias lookups keyed by type descriptor or type full name.

    Each registration stores both ``alias -> property`` and
    ``property -> alias`` in the same mapping. There is no inheritance walk.
    """

    def __init__(self) -> None:
        self._aliases: dict[Any, dict[str, str]] = {}

    def register(self, type_or_name: TypeDescriptor | str, alias: str, property_name: str) -> None:
        aliases = self._aliases.setdefault(type_or_name, {})
        aliases[alias] = property_name
        aliases[property_name] = alias
        logger.debug(
            "Registered alias %r <-> %r for %s", alias, property_name, type_label(type_or_name)
        )

    def for_type(self, entity_type: TypeDescriptor) -> dict[str, str]:
        """Merge the type-keyed and name-keyed mappings for *entity_type*.

        When both define a key with different values the type-keyed entry
        wins, whichever was registered first.
        """
        by_type = self._aliases.get(entity_type, {})
        by_name = self._aliases.get(entity_type.full_name, {})
        merged = dict(by_name)
        for key, value in by_type.items():
            other = merged.get(key)
            if other is not None and other != value:
                logger.warning(
                    "Conflicting aliases for %r on %s: %r (by type) over %r (by name)",
                    key,
                    entity_type.full_name,
                    value,
                    other,
                )
            merged[key] = value
        return merged
