"""First-responder-wins hooks resolving a property value.

A resolver is called with ``(entity, property, value)`` and returns either a
result (a plain value or an awaitable the caller must await) or "no result".
``None`` and :data:`UNRESOLVED` both mean no result; ``0``, ``""`` and
``False`` are real results and stop the chain.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, Final

if TYPE_CHECKING:
    from entityserde.domain.protocols import PropertyDescriptor

logger = logging.getLogger(__name__)


class _Unresolved:
    _instance: _Unresolved | None = None

    def __new__(cls) -> _Unresolved:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNRESOLVED"


UNRESOLVED: Final = _Unresolved()

ValueResolver = Callable[[Any, "PropertyDescriptor", Any], Any]


class ValueResolverChain:
    """Ordered resolvers; the earliest registration is asked first."""

    def __init__(self) -> None:
        self._resolvers: list[ValueResolver] = []

    def __len__(self) -> int:
        return len(self._resolvers)

    def register(self, resolver: ValueResolver) -> None:
        self._resolvers.append(resolver)
        logger.debug("Registered value resolver %r", resolver)

    def resolve(self, entity: Any, prop: PropertyDescriptor, value: Any) -> Any:
        """Return the first resolver result, or :data:`UNRESOLVED`."""
        for resolver in self._resolvers:
            result = resolver(entity, prop, value)
            if result is not None and result is not UNRESOLVED:
                return result
        return UNRESOLVED
