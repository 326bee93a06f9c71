"""Pluggy hook specifications for serializer extensions.

Each hook is a setup-time contribution collected once and registered on an
:class:`~entityserde.serializer.engine.EntitySerializer`. Every hook returns
a list, or ``None`` to contribute nothing.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pluggy

if TYPE_CHECKING:
    from entityserde.serializer.converters import PropertyConverter
    from entityserde.serializer.injectors import PropertyInjector
    from entityserde.serializer.resolvers import ValueResolver

hookspec = pluggy.HookspecMarker("entityserde")


class EntitySerdeHookSpec:
    """Hook specifications for the entityserde plugin system."""

    @hookspec
    def register_property_converters(self) -> list[PropertyConverter] | None:
        """Return converters, least specific first."""

    @hookspec
    def register_property_injectors(self) -> list[tuple[Any, PropertyInjector]] | None:
        """Return ``(type_or_full_name, injector)`` pairs."""

    @hookspec
    def register_property_aliases(self) -> list[tuple[Any, str, str]] | None:
        """Return ``(type_or_full_name, alias, property_name)`` triples."""

    @hookspec
    def register_value_resolvers(self) -> list[ValueResolver] | None:
        """Return value resolvers in the order they should be asked."""
