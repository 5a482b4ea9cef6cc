"""
pydantic-settings integration.

Subclass :class:`EnvReaderSettings` to get the same trimming, blank-value
validation and ``file:`` indirection as :func:`get_env` on every field read
from the environment::

    class DatabaseSettings(EnvReaderSettings):
        model_config = SettingsConfigDict(env_prefix="DB_")

        password: str  # DB_PASSWORD=file:/run/secrets/db_password
"""

from __future__ import annotations

from typing import Any

from pydantic.fields import FieldInfo
from pydantic_settings import (
    BaseSettings,
    EnvSettingsSource,
    PydanticBaseSettingsSource,
)

from .reader import report, resolve_value


class FileIndirectionEnvSource(EnvSettingsSource):
    """Environment source resolving values through :func:`resolve_value`.

    Blank values and unreadable files are logged and then treated as unset,
    so the field falls back to its default (or fails validation if required).
    """

    def _env_label(self, field_key: str) -> str:
        label = f"{self.env_prefix}{field_key}"
        return label if self.case_sensitive else label.upper()

    def get_field_value(self, field: FieldInfo, field_name: str) -> tuple[Any, str, bool]:
        env_val, field_key, value_is_complex = super().get_field_value(field, field_name)
        if isinstance(env_val, str):
            result = resolve_value(self._env_label(field_key), env_val)
            report(result)
            env_val = result.value
        return env_val, field_key, value_is_complex


class EnvReaderSettings(BaseSettings):
    """BaseSettings whose environment values go through :class:`FileIndirectionEnvSource`."""

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            FileIndirectionEnvSource(settings_cls),
            dotenv_settings,
            file_secret_settings,
        )
