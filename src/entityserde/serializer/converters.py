"""Per-property interception of (de)serialization.

Subclass :class:`PropertyConverter` and override only what you need. The
base class is also the serializer's fallback, so ``super().serialize(...)``
gives the default conversion.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from entityserde.domain.protocols import is_entity_type
from entityserde.domain.results import PropertySerializationResult

if TYPE_CHECKING:
    from entityserde.config.models import SerializationSettings
    from entityserde.domain.protocols import PropertyDescriptor


class PropertyConverter:
    """Transforms the serialized name and value of a model property."""

    def should_convert(self, entity: Any, prop: PropertyDescriptor) -> bool:
        """Cheap filter: whether this converter applies to *prop* on *entity*."""
        return True

    def serialize(
        self,
        entity: Any,
        value: Any,
        prop: PropertyDescriptor,
        settings: SerializationSettings,
    ) -> PropertySerializationResult:
        """Return the output pair for *prop*, or ``IGNORE_PROPERTY`` to omit it.

        Entity references are serialized recursively with the same
        *settings*; other list values are copied shallowly.
        """
        if not value:
            return PropertySerializationResult(prop.name, value)
        if is_entity_type(prop.property_type):
            if prop.is_list and isinstance(value, list):
                return PropertySerializationResult(
                    prop.name, [item.serialize(settings) for item in value]
                )
            return PropertySerializationResult(prop.name, value.serialize(settings))
        if prop.is_list:
            return PropertySerializationResult(prop.name, list(value))
        return PropertySerializationResult(prop.name, value)

    def deserialize(self, entity: Any, value: Any, prop: PropertyDescriptor) -> Any:
        """Pre-process raw input, or return ``IGNORE_PROPERTY`` to skip *prop*."""
        return value


DEFAULT_CONVERTER = PropertyConverter()
