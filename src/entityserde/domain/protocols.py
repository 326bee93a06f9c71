"""Boundary protocols for the entity type system.

The serializer never depends on a concrete entity model. Anything that
satisfies these protocols can be serialized; :mod:`entityserde.domain.model`
is one such implementation.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from entityserde.config.models import SerializationSettings


class ValueFormat(Protocol):
    """String format able to parse a scalar value from text."""

    def convert_from_string(self, text: str) -> Any: ...


@runtime_checkable
class PropertyDescriptor(Protocol):
    """Immutable metadata for one property of a type."""

    name: str
    is_list: bool
    is_calculated: bool
    is_constant: bool
    format: ValueFormat | None

    @property
    def property_type(self) -> Any: ...

    @property
    def containing_type(self) -> TypeDescriptor: ...

    def value(self, entity: Any) -> Any: ...


@runtime_checkable
class TypeDescriptor(Protocol):
    """Immutable metadata for a domain type."""

    full_name: str

    @property
    def base_type(self) -> TypeDescriptor | None: ...

    @property
    def properties(self) -> Sequence[PropertyDescriptor]: ...

    @property
    def identifier(self) -> PropertyDescriptor | None: ...

    def get_property(self, name: str) -> PropertyDescriptor | None: ...

    def get(self, identifier: Any) -> Any: ...


class EntityLike(Protocol):
    """An entity instance: its type descriptor plus recursive serialization."""

    @property
    def meta(self) -> TypeDescriptor: ...

    def serialize(self, settings: SerializationSettings | None = None) -> dict[str, Any]: ...


def is_entity_type(value: Any) -> bool:
    """Whether *value* is an entity class, i.e. a class carrying a type descriptor."""
    return isinstance(value, type) and isinstance(getattr(value, "meta", None), TypeDescriptor)
