"""Application exception classes."""

from typing import Optional


class ConfigError(Exception):
    """Raised when required configuration is missing or invalid."""


class WeatherAPIError(Exception):
    """Raised when the weather API returns a non-success status or bad payload."""

    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class DocumentStoreError(Exception):
    """Raised when writing or reading weather documents fails."""
