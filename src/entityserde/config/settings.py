"""Unified settings — kwargs, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — passed by the embedding application
  2. Env vars     — ``ENTITYSERDE_*`` prefix
  3. TOML file    — ``entityserde.toml`` discovered via walk-up
  4. Code defaults — baked into the section models

Uses Pydantic Settings v2 with a custom :class:`TomlSettingsSource` that
reuses the walk-up discovery from :mod:`entityserde.config.discovery`.
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from entityserde.config.discovery import find_config
from entityserde.config.models import PluginsConfig, SerializationSettings
from entityserde.errors import ConfigError


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from an ``entityserde.toml`` file discovered via walk-up."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            raw = toml_path.read_text(encoding="utf-8")
            try:
                self._data = tomllib.loads(raw)
            except tomllib.TOMLDecodeError as exc:
                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise ConfigError(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        """Return the full TOML data dict for Pydantic to merge."""
        return self._data


# Thread-local storage for TOML path during construction.
_tls = threading.local()


class EntitySerdeSettings(BaseSettings):
    """Unified settings for an entityserde runtime.

    Attributes:
        config_path: The TOML file the settings were read from, if any.
        verbose: DEBUG logging for the ``entityserde`` logger.
        log_json: Render logs as JSON lines.
        serialization: Default :class:`SerializationSettings` for calls that
            do not pass their own.
        plugins: Plugin discovery options.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "ENTITYSERDE_",
        "env_nested_delimiter": "__",
    }

    config_path: Path | None = None

    verbose: bool = False
    log_json: bool = False

    serialization: SerializationSettings = Field(default_factory=SerializationSettings)
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def load(
        cls,
        *,
        config_path: str | Path | None = None,
        search_from: Path | None = None,
        **overrides: Any,
    ) -> EntitySerdeSettings:
        """Construct settings, discovering ``entityserde.toml`` when needed.

        An explicit *config_path* wins over walk-up discovery starting at
        *search_from* (default: cwd). *overrides* are highest priority.
        """
        toml_path: Path | None = None
        if config_path:
            p = Path(config_path)
            if p.is_file():
                toml_path = p
        else:
            toml_path = find_config(search_from)

        _tls.toml_path = toml_path
        try:
            return cls(config_path=toml_path, **overrides)
        finally:
            _tls.toml_path = None
