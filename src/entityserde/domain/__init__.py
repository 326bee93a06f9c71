"""Domain layer — boundary protocols, serialization results, reference entity model.

INVARIANT: The serializer depends only on :mod:`protocols` and :mod:`results`;
:mod:`model` is one implementation of those protocols.
"""

from entityserde.domain.model import Entity, EntityType, InitializationContext, Model, Property
from entityserde.domain.results import IGNORE_PROPERTY, PropertySerializationResult

__all__ = [
    "IGNORE_PROPERTY",
    "Entity",
    "EntityType",
    "InitializationContext",
    "Model",
    "Property",
    "PropertySerializationResult",
]
