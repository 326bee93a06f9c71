"""Built-in plugin injecting the entity's type name into serialized output.

Registered against the root ``Entity`` type name, so every entity of a
:class:`~entityserde.domain.model.Model` gets the pair, ahead of its
model properties.
"""

from __future__ import annotations

from typing import Any

import pluggy

from entityserde.domain.model import ROOT_TYPE_NAME
from entityserde.domain.results import PropertySerializationResult
from entityserde.serializer.injectors import PropertyInjector

hookimpl = pluggy.HookimplMarker("entityserde")


class TypeHintInjector:
    """Injects ``key: entity.meta.full_name``."""

    def __init__(self, key: str = "$type") -> None:
        self.key = key

    def inject(self, entity: Any) -> list[PropertySerializationResult]:
        return [PropertySerializationResult(self.key, entity.meta.full_name)]

    def __repr__(self) -> str:
        return f"TypeHintInjector({self.key!r})"


class TypeHintPlugin:
    """Contributes a :class:`TypeHintInjector` for all entity types."""

    def __init__(self, key: str = "$type") -> None:
        self._injector = TypeHintInjector(key)

    @hookimpl
    def register_property_injectors(self) -> list[tuple[str, PropertyInjector]]:
        return [(ROOT_TYPE_NAME, self._injector)]
