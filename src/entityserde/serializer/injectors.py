"""Extra output pairs contributed per entity type."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Protocol

from entityserde.serializer._helpers import type_label

if TYPE_CHECKING:
    from entityserde.domain.protocols import TypeDescriptor
    from entityserde.domain.results import PropertySerializationResult

logger = logging.getLogger(__name__)


class PropertyInjector(Protocol):
    """Adds key/value pairs ahead of an entity's model properties."""

    def inject(self, entity: Any) -> list[PropertySerializationResult]: ...


class InjectorRegistry:
    """Injectors keyed by type descriptor or type full name.

    Lookup for a type collects every level of its inheritance chain,
    most-derived first; at each level type-keyed injectors come before
    name-keyed ones.
    """

    def __init__(self) -> None:
        self._injectors: dict[Any, list[PropertyInjector]] = {}

    def register(self, type_or_name: TypeDescriptor | str, injector: PropertyInjector) -> None:
        self._injectors.setdefault(type_or_name, []).append(injector)
        logger.debug("Registered property injector %r for %s", injector, type_label(type_or_name))

    def for_exact_type(self, entity_type: TypeDescriptor) -> list[PropertyInjector]:
        return [
            *self._injectors.get(entity_type, []),
            *self._injectors.get(entity_type.full_name, []),
        ]

    def for_type(self, entity_type: TypeDescriptor) -> list[PropertyInjector]:
        injectors: list[PropertyInjector] = []
        t: TypeDescriptor | None = entity_type
        while t is not None:
            injectors.extend(self.for_exact_type(t))
            t = t.base_type
        return injectors
