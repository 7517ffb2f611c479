"""City weather ingestion service.

Subpackages:
- ingestion: WeatherAPI client, record models and the document store.
- services: the per-city fetch/transform/store job.
- api: FastAPI app exposing the batch trigger and health.
"""

__all__ = ["api", "ingestion", "services"]
