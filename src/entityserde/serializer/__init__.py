"""Serialization engine: converter chain, injector and alias registries, value resolvers."""

from entityserde.serializer.converters import PropertyConverter
from entityserde.serializer.engine import EntitySerializer
from entityserde.serializer.injectors import PropertyInjector
from entityserde.serializer.resolvers import UNRESOLVED, ValueResolver

__all__ = [
    "UNRESOLVED",
    "EntitySerializer",
    "PropertyConverter",
    "PropertyInjector",
    "ValueResolver",
]
