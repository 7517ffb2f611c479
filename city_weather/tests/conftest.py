from __future__ import annotations

import copy
import threading
from typing import Any, Callable, Dict, List, Optional

import pytest
import structlog
from sqlalchemy import create_engine

from city_weather.config import AppSettings
from city_weather.exceptions import WeatherAPIError
from city_weather.ingestion.storage import SqlDocumentStore


# Trimmed from a real current.json response; `air_quality` is not part of the model
SAMPLE_PAYLOAD: Dict[str, Any] = {
    "location": {
        "name": "London",
        "region": "City of London, Greater London",
        "country": "United Kingdom",
        "lat": 51.52,
        "lon": -0.11,
        "tz_id": "Europe/London",
        "localtime_epoch": 1760770800,
        "localtime": "2025-10-18 08:00",
    },
    "current": {
        "last_updated_epoch": 1760770800,
        "last_updated": "2025-10-18 08:00",
        "temp_c": 11.2,
        "temp_f": 52.2,
        "is_day": 1,
        "condition": {
            "text": "Light rain",
            "icon": "//cdn.weatherapi.com/weather/64x64/day/296.png",
            "code": 1183,
        },
        "wind_mph": 8.5,
        "wind_kph": 13.7,
        "wind_degree": 220,
        "wind_dir": "SW",
        "pressure_mb": 1009.0,
        "pressure_in": 29.8,
        "precip_mm": 0.4,
        "precip_in": 0.02,
        "humidity": 87,
        "cloud": 75,
        "feelslike_c": 9.6,
        "feelslike_f": 49.3,
        "windchill_c": 9.6,
        "vis_km": 10.0,
        "vis_miles": 6.0,
        "uv": 1.0,
        "gust_mph": 12.1,
        "gust_kph": 19.5,
    },
    "air_quality": {"co": 230.3},
}


def make_payload(code: int = 1183, text: str = "Light rain", name: str = "London") -> Dict[str, Any]:
    payload = copy.deepcopy(SAMPLE_PAYLOAD)
    payload["location"]["name"] = name
    payload["current"]["condition"]["code"] = code
    payload["current"]["condition"]["text"] = text
    return payload


class FakeWeatherClient:
    """In-memory `WeatherClient`: city -> payload, exception, or callable."""

    def __init__(self, responses: Optional[Dict[str, Any]] = None, default: Any = None) -> None:
        self.responses = responses or {}
        self.default = default
        self.calls: List[str] = []
        self._lock = threading.Lock()

    def fetch_current(self, city: str) -> Dict[str, Any]:
        with self._lock:
            self.calls.append(city)
        resp = self.responses.get(city, self.default)
        if callable(resp):
            resp = resp(city)
        if isinstance(resp, Exception):
            raise resp
        if resp is None:
            raise WeatherAPIError(f"weather API returned 400 for {city}", status_code=400)
        return copy.deepcopy(resp)


class RecordingStore:
    """`DocumentStore` that keeps documents in a list, optionally failing."""

    def __init__(self, fail_for: Optional[Callable[[str], bool]] = None) -> None:
        self.items: List[tuple] = []
        self.fail_for = fail_for
        self._lock = threading.Lock()

    def create_item(self, document: Dict[str, Any], partition_key: str) -> Dict[str, Any]:
        if self.fail_for and self.fail_for(partition_key):
            raise RuntimeError(f"write rejected for {partition_key}")
        with self._lock:
            self.items.append((partition_key, document))
        return document


@pytest.fixture(autouse=True)
def _reset_structlog():
    yield
    structlog.reset_defaults()


@pytest.fixture
def sql_store(tmp_path):
    # File-backed so every worker thread sees the same database
    engine = create_engine(f"sqlite:///{tmp_path / 'weather.db'}", future=True)
    store = SqlDocumentStore(engine, "weather")
    yield store
    store.dispose()


@pytest.fixture
def settings(tmp_path) -> AppSettings:
    return AppSettings(
        _env_file=None,
        weather_api_base="https://api.weatherapi.example/v1",
        weather_api_key="test-key",
        document_store_endpoint="sqlite://",
        document_store_key="unused",
        database_name=str(tmp_path / "settings.db"),
        container_name="weather",
    )
