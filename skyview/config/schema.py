"""Pydantic v2 configuration schema with strict validation."""

from pydantic import BaseModel, Field

from skyview.config.defaults import (
    DEFAULT_DB_PATH,
    DEFAULT_LANG,
    DEFAULT_STALENESS_MINUTES,
    DEFAULT_TICK_INTERVAL_SECONDS,
    DEFAULT_UNITS,
    FAVORITES_NAMESPACE,
    OPENWEATHER_BASE_URL,
)


class ApiConfig(BaseModel):
    model_config = {"extra": "forbid"}

    base_url: str = OPENWEATHER_BASE_URL
    api_key: str = ""
    units: str = DEFAULT_UNITS
    lang: str = DEFAULT_LANG
    timeout_seconds: float = Field(default=10.0, gt=0.0)


class RefreshConfig(BaseModel):
    model_config = {"extra": "forbid"}

    tick_interval_seconds: int = Field(default=DEFAULT_TICK_INTERVAL_SECONDS, ge=1)
    staleness_minutes: int = Field(default=DEFAULT_STALENESS_MINUTES, ge=1)


class StorageConfig(BaseModel):
    model_config = {"extra": "forbid"}

    db_path: str = DEFAULT_DB_PATH
    namespace: str = Field(default=FAVORITES_NAMESPACE, min_length=1)


class LocationConfig(BaseModel):
    model_config = {"extra": "forbid"}

    latitude: float | None = Field(default=None, ge=-90.0, le=90.0)
    longitude: float | None = Field(default=None, ge=-180.0, le=180.0)
    timeout_seconds: float = Field(default=10.0, gt=0.0)


class AppConfig(BaseModel):
    model_config = {"extra": "forbid"}

    api: ApiConfig = ApiConfig()
    refresh: RefreshConfig = RefreshConfig()
    storage: StorageConfig = StorageConfig()
    location: LocationConfig = LocationConfig()
