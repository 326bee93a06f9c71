"""Shared helpers for the serializer registries."""

from __future__ import annotations

from typing import Any


def type_label(type_or_name: Any) -> str:
    """Human-readable name for a registry key (type descriptor or full name)."""
    return type_or_name if isinstance(type_or_name, str) else type_or_name.full_name
