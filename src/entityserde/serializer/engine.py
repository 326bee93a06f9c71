"""EntitySerializer — orchestrates converters, injectors, aliases and resolvers.

INVARIANT: Serialized output is a flat dict with unique keys. Injected pairs
come first (most-derived type first), then model properties in declared order.

Converter precedence differs by direction and must stay that way:

- ``serialize``: every converter whose ``should_convert`` is true is tried,
  newest first; ``force`` skips ``IGNORE_PROPERTY`` results; the default
  converter is the final fallback.
- ``deserialize``: only the first matching converter is applied.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from entityserde.config.models import DEFAULT_SERIALIZATION_SETTINGS, SerializationSettings
from entityserde.domain.protocols import is_entity_type
from entityserde.domain.results import IGNORE_PROPERTY, PropertySerializationResult
from entityserde.errors import DuplicatePropertyError
from entityserde.serializer.aliases import AliasRegistry
from entityserde.serializer.converters import DEFAULT_CONVERTER, PropertyConverter
from entityserde.serializer.injectors import InjectorRegistry, PropertyInjector
from entityserde.serializer.resolvers import ValueResolver, ValueResolverChain

if TYPE_CHECKING:
    from entityserde.domain.protocols import EntityLike, PropertyDescriptor, TypeDescriptor

logger = logging.getLogger(__name__)


class EntitySerializer:
    """Converts entities to plain dicts and back.

    Parameters:
        default_settings: Settings used when a call does not pass its own.
    """

    def __init__(self, default_settings: SerializationSettings | None = None) -> None:
        if default_settings is None:
            default_settings = DEFAULT_SERIALIZATION_SETTINGS
        self.default_settings = default_settings
        self._converters: list[PropertyConverter] = []
        self._injectors = InjectorRegistry()
        self._aliases = AliasRegistry()
        self._resolvers = ValueResolverChain()

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register_property_converter(self, converter: PropertyConverter) -> None:
        """Register converters in order of increasing specificity.

        If two converters would convert a property, the one registered last
        applies.
        """
        self._converters.insert(0, converter)
        logger.debug("Registered property converter %r", converter)

    def register_property_injector(
        self, type_or_name: TypeDescriptor | str, injector: PropertyInjector
    ) -> None:
        """Inject pairs for entities of *type_or_name* and of its subtypes."""
        self._injectors.register(type_or_name, injector)

    def register_property_alias(
        self, type_or_name: TypeDescriptor | str, alias: str, property_name: str
    ) -> None:
        self._aliases.register(type_or_name, alias, property_name)

    def register_value_resolver(self, resolver: ValueResolver) -> None:
        self._resolvers.register(resolver)

    @property
    def converters(self) -> list[PropertyConverter]:
        """Registered converters in precedence order (newest first)."""
        return list(self._converters)

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def get_property_injectors(self, entity_type: TypeDescriptor) -> list[PropertyInjector]:
        return self._injectors.for_type(entity_type)

    def get_property_aliases(self, entity_type: TypeDescriptor) -> dict[str, str]:
        return self._aliases.for_type(entity_type)

    def resolve_property(self, entity: Any, name: str) -> PropertyDescriptor | None:
        """Find the property called *name*, or the one aliased as *name*."""
        entity_type = entity.meta
        prop = entity_type.get_property(name)
        if prop is not None:
            return prop
        property_name = self.get_property_aliases(entity_type).get(name)
        if property_name is None:
            return None
        return entity_type.get_property(property_name)

    def resolve_value(self, entity: Any, prop: PropertyDescriptor, value: Any) -> Any:
        """Ask the value resolvers in order; see :mod:`entityserde.serializer.resolvers`."""
        return self._resolvers.resolve(entity, prop, value)

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def serialize_property_value(
        self,
        entity: Any,
        prop: PropertyDescriptor,
        value: Any,
        settings: SerializationSettings,
    ) -> PropertySerializationResult:
        result = self._convert(entity, prop, value, settings)
        if result is not None and result is not IGNORE_PROPERTY and settings.use_aliases:
            alias = self.get_property_aliases(prop.containing_type).get(prop.name)
            if alias:
                result = PropertySerializationResult(alias, result.value)
        return result

    def _convert(
        self,
        entity: Any,
        prop: PropertyDescriptor,
        value: Any,
        settings: SerializationSettings,
    ) -> PropertySerializationResult:
        for converter in self._converters:
            if not converter.should_convert(entity, prop):
                continue
            result = converter.serialize(entity, value, prop, settings)
            if not settings.force or result is not IGNORE_PROPERTY:
                return result
        return DEFAULT_CONVERTER.serialize(entity, value, prop, settings)

    def serialize(
        self, entity: EntityLike, settings: SerializationSettings | None = None
    ) -> dict[str, Any]:
        """Produce a JSON-valid dict representation of *entity*.

        Raises:
            DuplicatePropertyError: Two pairs produced the same key.
        """
        if settings is None:
            settings = self.default_settings
        entity_type = entity.meta

        pairs: list[PropertySerializationResult] = []
        for injector in self.get_property_injectors(entity_type):
            pairs.extend(injector.inject(entity))
        for prop in entity_type.properties:
            if prop.is_calculated or prop.is_constant:
                continue
            pairs.append(self.serialize_property_value(entity, prop, prop.value(entity), settings))

        result: dict[str, Any] = {}
        for pair in pairs:
            if pair is None or pair is IGNORE_PROPERTY:
                continue
            if pair.key in result:
                raise DuplicatePropertyError(pair.key, entity_type.full_name)
            result[pair.key] = pair.value
        return result

    # ------------------------------------------------------------------
    # Deserialization
    # ------------------------------------------------------------------

    def deserialize(
        self,
        instance: Any,
        data: Any,
        prop: PropertyDescriptor,
        context: Any,
        construct_entity: bool = True,
    ) -> Any:
        """Convert raw *data* into a value for *prop* on *instance*.

        Returns ``IGNORE_PROPERTY`` when no value is produced: the matching
        converter asked to skip the property, or a single entity reference is
        neither a mapping nor an instance. A ``None`` in *data* comes back as
        ``None`` and is a value like any other.

        In an entity list, elements that are neither mappings nor instances are
        dropped. In a scalar list, elements that deserialize to
        ``IGNORE_PROPERTY`` are dropped.
        """
        converter = next((c for c in self._converters if c.should_convert(instance, prop)), None)
        if converter is not None:
            data = converter.deserialize(instance, data, prop)
        if data is IGNORE_PROPERTY:
            return IGNORE_PROPERTY

        property_type = prop.property_type

        if is_entity_type(property_type):
            if not construct_entity:
                return data
            if prop.is_list and isinstance(data, list):
                items = []
                for item in data:
                    if isinstance(item, property_type):
                        items.append(item)
                    elif isinstance(item, Mapping):
                        items.append(self._resolve_entity(property_type, item, context))
                    else:
                        logger.debug("Dropping malformed list item for %s: %r", prop.name, item)
                return items
            if data is None or isinstance(data, property_type):
                return data
            if isinstance(data, Mapping):
                return self._resolve_entity(property_type, data, context)
            logger.debug(
                "Skipping malformed reference for %s.%s: %r",
                prop.containing_type.full_name,
                prop.name,
                data,
            )
            return IGNORE_PROPERTY

        if prop.is_list and isinstance(data, list):
            items = [self.deserialize(instance, item, prop, context) for item in data]
            return [item for item in items if item is not IGNORE_PROPERTY]

        if prop.format is not None and data and isinstance(data, str) and property_type is not str:
            return prop.format.convert_from_string(data)

        return data

    @staticmethod
    def _resolve_entity(entity_class: type, state: Mapping[str, Any], context: Any) -> Any:
        """Reuse the pooled instance for the state's identifier, or construct one."""
        entity_type = entity_class.meta
        identifier = entity_type.identifier
        ident = state.get(identifier.name) if identifier is not None else None
        entity = entity_type.get(ident) if ident is not None else None
        if entity is None:
            entity = entity_class(ident, dict(state), context)
        return entity
