from __future__ import annotations

import argparse
import contextvars
import sys
import uuid
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import FrozenSet, Optional, Sequence, Tuple

import structlog

from ..config import AppSettings, load_settings
from ..exceptions import ConfigError, WeatherAPIError
from ..ingestion.client import WeatherAPIClient, WeatherClient
from ..ingestion.models import WeatherRecord
from ..ingestion.storage import DocumentStore, SqlDocumentStore
from ..logging import init_logging


CITIES: Tuple[str, ...] = ("Medellín", "Charleston", "London", "Lisbon", "Campinas")

# WeatherAPI condition codes for drizzle, rain, sleet and ice pellets.
RAIN_CODES: FrozenSet[int] = frozenset(
    {1063, 1180, 1183, 1186, 1189, 1192, 1195, 1198, 1201, 1240, 1243, 1246, 1273, 1276}
)


def is_rainy(condition_code: int) -> bool:
    """Return True when the provider condition code denotes rain."""
    return condition_code in RAIN_CODES


@dataclass(frozen=True)
class CityResult:
    """Outcome of one city's unit of work."""

    city: str
    ok: bool
    record_id: Optional[str] = None
    rainy: bool = False
    error: Optional[str] = None
    status_code: Optional[int] = None

    @classmethod
    def succeeded(cls, city: str, record_id: str, rainy: bool) -> "CityResult":
        return cls(city=city, ok=True, record_id=record_id, rainy=rainy)

    @classmethod
    def failed(cls, city: str, error: str, status_code: Optional[int] = None) -> "CityResult":
        return cls(city=city, ok=False, error=error, status_code=status_code)


@dataclass(frozen=True)
class BatchReport:
    results: Tuple[CityResult, ...]

    @property
    def succeeded(self) -> Tuple[CityResult, ...]:
        return tuple(r for r in self.results if r.ok)

    @property
    def failed(self) -> Tuple[CityResult, ...]:
        return tuple(r for r in self.results if not r.ok)


class WeatherIngestionJob:
    """Fetches current weather for every roster city and stores one document each.

    The client and store are shared across all concurrent units of work and
    must be safe to call from several threads at once.
    """

    def __init__(
        self,
        client: WeatherClient,
        store: DocumentStore,
        cities: Sequence[str] = CITIES,
    ) -> None:
        if not cities:
            raise ValueError("cities must not be empty")
        self.client = client
        self.store = store
        self.cities: Tuple[str, ...] = tuple(cities)

    def run_batch(self) -> BatchReport:
        """Process every city concurrently and wait for all of them.

        Never raises because of a single city: each unit absorbs its own
        failures and reports them as a failed `CityResult`.
        """
        logger = structlog.get_logger()
        logger.info("batch_started", cities=len(self.cities))

        with ThreadPoolExecutor(max_workers=len(self.cities), thread_name_prefix="city") as pool:
            # Each unit runs in a copy of the caller's context so request-bound
            # log fields (request_id) reach the worker threads.
            futures = [
                pool.submit(contextvars.copy_context().run, self.process_city, city)
                for city in self.cities
            ]
            results = tuple(f.result() for f in futures)

        report = BatchReport(results=results)
        logger.info(
            "batch_completed",
            succeeded=len(report.succeeded),
            failed=len(report.failed),
        )
        return report

    def process_city(self, city: str) -> CityResult:
        """Fetch, enrich, store and classify one city's current weather."""
        logger = structlog.get_logger().bind(city=city)
        try:
            if not city or not city.strip():
                raise ValueError("city name must be non-empty")

            try:
                payload = self.client.fetch_current(city)
            except WeatherAPIError as e:
                logger.error("weather_fetch_failed", status_code=e.status_code, error=str(e))
                return CityResult.failed(city, str(e), status_code=e.status_code)
            logger.info("weather_fetched")

            record = WeatherRecord.from_payload(payload)
            record.id = str(uuid.uuid4())
            record.city = city

            self.store.create_item(record.to_document(), partition_key=city)
            logger.info("weather_stored", record_id=record.id)

            rainy = is_rainy(record.current.condition.code)
            if rainy:
                logger.info("city_has_rain", condition=record.current.condition.text)
            return CityResult.succeeded(city, record.id, rainy)
        except Exception as e:
            logger.error("city_processing_failed", error=str(e), error_type=type(e).__name__)
            return CityResult.failed(city, str(e))


def build_job(settings: AppSettings, cities: Sequence[str] = CITIES) -> WeatherIngestionJob:
    """Create the job with one shared HTTP client and one shared store."""
    client = WeatherAPIClient(
        base_url=settings.weather_api_base,
        api_key=settings.weather_api_key.get_secret_value(),
        timeout=settings.weather_api_timeout_s,
        pool_size=max(10, len(cities)),
    )
    store = SqlDocumentStore.from_settings(settings)
    return WeatherIngestionJob(client=client, store=store, cities=cities)


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Fetch and store current weather for the city roster once")
    p.add_argument(
        "--cities",
        default="",
        help="Optional comma-separated roster override (default: built-in roster)",
    )
    return p.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse_args(argv)
    cities = tuple(c.strip() for c in args.cities.split(",") if c.strip()) or CITIES

    try:
        settings = load_settings()
    except ConfigError as e:
        print(str(e), file=sys.stderr)
        return 2

    init_logging(settings.log_level)
    report = build_job(settings, cities).run_batch()

    for r in report.results:
        status = "ok" if r.ok else f"failed ({r.error})"
        rain = " rain" if r.rainy else ""
        print(f"{r.city}: {status}{rain}")
    print(f"{len(report.succeeded)}/{len(report.results)} cities stored")
    return 0


if __name__ == "__main__":
    sys.exit(main())
