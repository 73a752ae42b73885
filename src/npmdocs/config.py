"""Configuration loading.

Settings are loaded in priority order (highest first):
  1. Environment variables  (NPMDOCS__CACHE__TTL_SECONDS=3600)
  2. npmdocs.yaml           (searched in cwd, then platform config dir)
  3. Hardcoded defaults

The config file is optional. A Settings instance is built once on the
startup path and passed explicitly to the components that need it.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import platformdirs
import structlog
from pydantic import BaseModel, ValidationError, ValidatorFunctionWrapHandler, field_validator
from pydantic_settings import (
    BaseSettings,
    EnvSettingsSource,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

log = structlog.get_logger()

_DEFAULT_DATA_DIR = platformdirs.user_data_dir("npmdocs")
_DEFAULT_DB_PATH = str(Path(_DEFAULT_DATA_DIR) / "cache.db")

DEFAULT_CACHE_TTL_SECONDS = 24 * 60 * 60
DEFAULT_REGISTRY_BASE_URL = "https://api.npms.io/v2"
DEFAULT_REGISTRY_TIMEOUT_SECONDS = 15.0


def _find_config_file() -> str | None:
    """Return the path of the first npmdocs.yaml found, or None."""
    candidates = [
        Path("npmdocs.yaml"),
        Path(platformdirs.user_config_dir("npmdocs")) / "npmdocs.yaml",
    ]
    for path in candidates:
        if path.exists():
            return str(path)
    return None


class ServerSettings(BaseModel):
    transport: Literal["stdio", "http"] = "stdio"
    host: str = "127.0.0.1"
    port: int = 8080
    # Browser origins accepted by the HTTP transport in addition to localhost
    allowed_origins: list[str] = []


class RegistrySettings(BaseModel):
    base_url: str = DEFAULT_REGISTRY_BASE_URL
    timeout_seconds: float = DEFAULT_REGISTRY_TIMEOUT_SECONDS


class CacheSettings(BaseModel):
    ttl_seconds: int = DEFAULT_CACHE_TTL_SECONDS
    db_path: str = _DEFAULT_DB_PATH

    @field_validator("ttl_seconds", mode="wrap")
    @classmethod
    def ignore_invalid_ttl(cls, value: Any, handler: ValidatorFunctionWrapHandler) -> int:
        """Keep the default TTL when a configured value is not a positive integer."""
        try:
            ttl = handler(value)
        except ValidationError:
            ttl = 0
        if ttl <= 0:
            log.warning("config_override_ignored", field="cache.ttl_seconds", value=value)
            return DEFAULT_CACHE_TTL_SECONDS
        return ttl


class LoggingSettings(BaseModel):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    format: Literal["json", "text"] = "json"


def _is_positive_int(value: Any) -> bool:
    try:
        return int(value) > 0
    except (TypeError, ValueError):
        return False


class _EnvSettingsSource(EnvSettingsSource):
    """Environment source that drops a non-positive or non-integer cache TTL.

    The value from npmdocs.yaml, or the default, then applies.
    """

    def __call__(self) -> dict[str, Any]:
        data = super().__call__()
        cache = data.get("cache")
        if not isinstance(cache, dict) or "ttl_seconds" not in cache:
            return data
        if _is_positive_int(cache["ttl_seconds"]):
            return data

        log.warning(
            "config_override_ignored",
            field="cache.ttl_seconds",
            value=cache["ttl_seconds"],
            source="env",
        )
        remaining = {k: v for k, v in cache.items() if k != "ttl_seconds"}
        data = {k: v for k, v in data.items() if k != "cache"}
        if remaining:
            data["cache"] = remaining
        return data


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        # Double-underscore separates nesting: NPMDOCS__SERVER__PORT=9090
        env_prefix="NPMDOCS__",
        env_nested_delimiter="__",
        yaml_file=_find_config_file(),
        yaml_file_encoding="utf-8",
    )

    server: ServerSettings = ServerSettings()
    registry: RegistrySettings = RegistrySettings()
    cache: CacheSettings = CacheSettings()
    logging: LoggingSettings = LoggingSettings()

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
        **kwargs: Any,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            _EnvSettingsSource(settings_cls),
            YamlConfigSettingsSource(settings_cls),
        )
