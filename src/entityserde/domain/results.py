"""Per-property serialization results and the ignore sentinel."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class PropertySerializationResult:
    """One ``key: value`` pair of serialized output."""

    key: str
    value: Any


# Compared by identity. Returned by converters to omit a property when
# serializing, or to skip it when deserializing.
IGNORE_PROPERTY = PropertySerializationResult(key="ignore", value="ignore")
