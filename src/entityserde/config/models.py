"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, entityserde.toml only contains
overrides.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field


class SerializationSettings(BaseModel):
    """Per-call serialization options, frozen after construction.

    Attributes:
        use_aliases: Emit a property's registered alias instead of its name.
        force: Skip converters that ask to ignore a property and keep trying
            the rest of the chain, down to the default converter.
    """

    model_config = {"frozen": True}

    use_aliases: bool = False
    force: bool = False


DEFAULT_SERIALIZATION_SETTINGS = SerializationSettings()


# --- entityserde.toml sections ---


class PluginsConfig(BaseModel):
    """[plugins] section."""

    model_config = {"frozen": True}

    enabled: bool = True
    local_dir: Path | None = None
    type_hints: bool = False
    type_hint_key: str = Field(default="$type", min_length=1)
