from __future__ import annotations

from typing import Optional

from pydantic import Field, SecretStr, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigError


class AppSettings(BaseSettings):
    app_name: str = "CityWeather"
    app_version: str = "0.1.0"
    app_env: str = "development"
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000

    # Upstream weather provider
    weather_api_base: str = Field(description="Base URL, e.g. https://api.weatherapi.com/v1")
    weather_api_key: SecretStr
    weather_api_timeout_s: Optional[float] = None

    # Document store
    document_store_endpoint: str = Field(description="SQLAlchemy URL without a database name")
    document_store_key: SecretStr
    database_name: str
    container_name: str

    # .env support and prefix for clarity
    model_config = SettingsConfigDict(
        env_prefix="APP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


def load_settings(**overrides) -> AppSettings:
    """Load settings from the environment, failing fast on missing values.

    Raises
    ------
    ConfigError
        When any required variable is absent or invalid. The message names
        the environment variables involved.
    """
    try:
        return AppSettings(**overrides)
    except ValidationError as exc:
        names = []
        for err in exc.errors():
            loc = err.get("loc") or ()
            if loc:
                names.append(f"APP_{str(loc[0]).upper()}")
        detail = ", ".join(sorted(set(names))) or str(exc)
        raise ConfigError(f"Missing or invalid configuration: {detail}") from exc
