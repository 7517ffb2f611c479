from .ingestion_service import (
    CITIES,
    RAIN_CODES,
    BatchReport,
    CityResult,
    WeatherIngestionJob,
    build_job,
    is_rainy,
)

__all__ = [
    "BatchReport",
    "CITIES",
    "CityResult",
    "RAIN_CODES",
    "WeatherIngestionJob",
    "build_job",
    "is_rainy",
]
