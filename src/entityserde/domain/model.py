"""Declarative entity classes over the boundary protocols.

Entity classes are declared against a :class:`Model`, which owns the type
namespace and the :class:`~entityserde.serializer.engine.EntitySerializer`
used to build and flatten instances::

    model = Model()

    class Person(Entity, model=model):
        id = Property(str, identifier=True)
        name = Property(str)
        manager = Property("Person")
        reports = Property("Person", is_list=True)

String property types are resolved lazily by full name within the model, so
types may refer to themselves or to types declared later.

Every top-level entity class derives from the model's root type (full name
``"Entity"``), so registrations made against ``"Entity"`` apply to all types.

Identity: an entity constructed with an identifier registers itself in the
pool of its type and of every ancestor type. ``EntityType.get(id)`` reads that
pool, which is how deserialization reuses instances.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, ClassVar

from entityserde.domain.protocols import ValueFormat
from entityserde.domain.results import IGNORE_PROPERTY

if TYPE_CHECKING:
    from entityserde.config.models import SerializationSettings
    from entityserde.serializer.engine import EntitySerializer

logger = logging.getLogger(__name__)

ROOT_TYPE_NAME = "Entity"


class InitializationContext:
    """Tracks the entities constructed during one deserialization session."""

    def __init__(self) -> None:
        self.created: list[Entity] = []

    def track(self, entity: Entity) -> None:
        self.created.append(entity)


class Property:
    """Declared property of an entity class; also a data descriptor.

    Args:
        property_type: A Python type, an entity class, or the full name of an
            entity type in the same model.
        is_list: The value is a list of ``property_type``.
        identifier: This property holds the entity's identity.
        default: Initial value for scalars (lists always start empty).
        constant: The value is fixed to *default* and cannot be assigned.
        calculated: Getter computing the value from the entity; never stored.
        format: String format used to parse textual input.
    """

    def __init__(
        self,
        property_type: Any,
        *,
        is_list: bool = False,
        identifier: bool = False,
        default: Any = None,
        constant: bool = False,
        calculated: Callable[[Any], Any] | None = None,
        format: ValueFormat | None = None,
    ) -> None:
        self.name = ""
        self._property_type = property_type
        self.is_list = is_list
        self.is_identifier = identifier
        self.default = default
        self.is_constant = constant
        self._getter = calculated
        self.format = format
        self._containing_type: EntityType | None = None

    @property
    def is_calculated(self) -> bool:
        return self._getter is not None

    @property
    def containing_type(self) -> EntityType:
        if self._containing_type is None:
            msg = f"Property {self.name!r} is not attached to an entity type"
            raise AttributeError(msg)
        return self._containing_type

    @property
    def property_type(self) -> Any:
        if isinstance(self._property_type, str):
            return self.containing_type.model.get_type(self._property_type).entity_class
        return self._property_type

    def value(self, entity: Any) -> Any:
        return self.__get__(entity, type(entity))

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    def __get__(self, instance: Any, owner: type | None = None) -> Any:
        if instance is None:
            return self
        if self._getter is not None:
            return self._getter(instance)
        if self.is_constant:
            return self.default
        state = instance._state
        if self.name not in state:
            state[self.name] = [] if self.is_list else self.default
        return state[self.name]

    def __set__(self, instance: Any, value: Any) -> None:
        if self._getter is not None or self.is_constant:
            msg = f"Property {self.name!r} is read-only"
            raise AttributeError(msg)
        instance._state[self.name] = value

    def __repr__(self) -> str:
        owner = self._containing_type.full_name if self._containing_type else "?"
        return f"<Property {owner}.{self.name}>"


class EntityType:
    """Type descriptor for one entity class."""

    def __init__(
        self,
        full_name: str,
        entity_class: type[Entity],
        model: Model,
        base_type: EntityType | None = None,
    ) -> None:
        self.full_name = full_name
        self.entity_class = entity_class
        self.model = model
        self._base_type = base_type
        self._own_properties: dict[str, Property] = {}
        self._pool: dict[Any, Entity] = {}

    @property
    def base_type(self) -> EntityType | None:
        return self._base_type

    @property
    def properties(self) -> list[Property]:
        """Declared properties, inherited ones first.

        A property redeclared by this type replaces the inherited one at the
        inherited position.
        """
        inherited = self._base_type.properties if self._base_type else []
        own = self._own_properties
        merged = [own.get(p.name, p) for p in inherited]
        overridden = {p.name for p in inherited}
        return [*merged, *(p for p in own.values() if p.name not in overridden)]

    @property
    def identifier(self) -> Property | None:
        return next((p for p in self.properties if p.is_identifier), None)

    def add_property(self, prop: Property) -> None:
        prop._containing_type = self
        self._own_properties[prop.name] = prop

    def get_property(self, name: str) -> Property | None:
        prop = self._own_properties.get(name)
        if prop is None and self._base_type is not None:
            return self._base_type.get_property(name)
        return prop

    def get(self, identifier: Any) -> Entity | None:
        """Return the pooled instance with *identifier*, if one exists."""
        return self._pool.get(identifier)

    def register(self, entity: Entity, identifier: Any) -> None:
        """Pool *entity* under this type and all of its ancestors."""
        t: EntityType | None = self
        while t is not None:
            t._pool[identifier] = entity
            t = t._base_type

    def __repr__(self) -> str:
        return f"<EntityType {self.full_name}>"


class Model:
    """Namespace of entity types sharing one serializer."""

    def __init__(self, serializer: EntitySerializer | None = None) -> None:
        if serializer is None:
            from entityserde.serializer.engine import EntitySerializer

            serializer = EntitySerializer()
        self.serializer = serializer
        self._types: dict[str, EntityType] = {}
        self.root = EntityType(ROOT_TYPE_NAME, Entity, self)
        self._types[ROOT_TYPE_NAME] = self.root

    @property
    def types(self) -> list[EntityType]:
        return list(self._types.values())

    def add_type(self, entity_type: EntityType) -> None:
        if entity_type.full_name in self._types:
            msg = f"Entity type {entity_type.full_name!r} is already defined in this model"
            raise ValueError(msg)
        self._types[entity_type.full_name] = entity_type
        logger.debug("Defined entity type %s", entity_type.full_name)

    def get_type(self, full_name: str) -> EntityType:
        try:
            return self._types[full_name]
        except KeyError:
            msg = f"Unknown entity type {full_name!r}"
            raise KeyError(msg) from None


class Entity:
    """Base class for declarative entity classes."""

    meta: ClassVar[EntityType]

    def __init_subclass__(
        cls,
        model: Model | None = None,
        name: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init_subclass__(**kwargs)
        parent_meta = next(
            (b.__dict__["meta"] for b in cls.__mro__[1:] if "meta" in b.__dict__),
            None,
        )
        if model is None:
            if parent_meta is None:
                msg = f"{cls.__name__} must be declared with a model: class X(Entity, model=...)"
                raise TypeError(msg)
            model = parent_meta.model
        elif parent_meta is not None and parent_meta.model is not model:
            msg = f"{cls.__name__} cannot derive from a type in a different model"
            raise TypeError(msg)

        meta = EntityType(name or cls.__name__, cls, model, base_type=parent_meta or model.root)
        for value in cls.__dict__.values():
            if isinstance(value, Property):
                meta.add_property(value)
        cls.meta = meta
        model.add_type(meta)

    def __init__(
        self,
        id: Any = None,
        state: dict[str, Any] | None = None,
        context: InitializationContext | None = None,
    ) -> None:
        self._state: dict[str, Any] = {}
        identifier = self.meta.identifier
        if id is not None:
            if identifier is not None:
                self._state[identifier.name] = id
            self.meta.register(self, id)
        if context is not None:
            context.track(self)
        if state:
            self.update(state, context)

    def update(self, state: dict[str, Any], context: InitializationContext | None = None) -> None:
        """Deserialize *state* onto this entity, resolving keys by name or alias."""
        serializer = self.meta.model.serializer
        for key, raw in state.items():
            prop = serializer.resolve_property(self, key)
            if prop is None:
                logger.debug("Ignoring unknown key %r for %s", key, self.meta.full_name)
                continue
            if prop.is_identifier and self._state.get(prop.name) is not None:
                continue
            if prop.is_calculated or prop.is_constant:
                continue
            value = serializer.deserialize(self, raw, prop, context)
            if value is IGNORE_PROPERTY:
                continue
            self._state[prop.name] = value
            if prop.is_identifier and value is not None:
                self.meta.register(self, value)

    @property
    def id(self) -> Any:
        identifier = self.meta.identifier
        return self._state.get(identifier.name) if identifier is not None else None

    def serialize(self, settings: SerializationSettings | None = None) -> dict[str, Any]:
        return self.meta.model.serializer.serialize(self, settings)

    def __repr__(self) -> str:
        ident = f" {self.id!r}" if self.id is not None else ""
        return f"<{self.meta.full_name}{ident}>"
