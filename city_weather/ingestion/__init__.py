"""Ingestion subpackage.

Provides the current-conditions client, the weather record models and the
partitioned document store the ingestion job writes to.
"""

from .client import WeatherClient, WeatherAPIClient
from .models import Condition, Current, Location, WeatherRecord
from .storage import DocumentStore, SqlDocumentStore

__all__ = [
    "Condition",
    "Current",
    "DocumentStore",
    "Location",
    "SqlDocumentStore",
    "WeatherAPIClient",
    "WeatherClient",
    "WeatherRecord",
]
