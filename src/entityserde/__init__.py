"""Type-directed object-graph serialization for entity models.

Quick start::

    from entityserde import Entity, Model, Property

    model = Model()

    class Person(Entity, model=model):
        name = Property(str)
        manager = Property("Person")

    data = Person(state={"name": "Ann"}).serialize()
"""

from entityserde.config.logging import install_null_handler
from entityserde.config.models import DEFAULT_SERIALIZATION_SETTINGS, SerializationSettings
from entityserde.domain.model import Entity, EntityType, InitializationContext, Model, Property
from entityserde.domain.results import IGNORE_PROPERTY, PropertySerializationResult
from entityserde.errors import DuplicatePropertyError, EntitySerdeError
from entityserde.serializer import (
    UNRESOLVED,
    EntitySerializer,
    PropertyConverter,
    PropertyInjector,
    ValueResolver,
)

install_null_handler()

__all__ = [
    "DEFAULT_SERIALIZATION_SETTINGS",
    "IGNORE_PROPERTY",
    "UNRESOLVED",
    "DuplicatePropertyError",
    "Entity",
    "EntitySerdeError",
    "EntitySerializer",
    "EntityType",
    "InitializationContext",
    "Model",
    "Property",
    "PropertyConverter",
    "PropertyInjector",
    "PropertySerializationResult",
    "SerializationSettings",
    "ValueResolver",
]
