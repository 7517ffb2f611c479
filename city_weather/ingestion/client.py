from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Protocol

import requests
from requests.adapters import HTTPAdapter

from ..exceptions import WeatherAPIError


class WeatherClient(Protocol):
    """Provider-agnostic current-conditions client interface.

    Implementations return the decoded JSON payload for one city and raise
    `WeatherAPIError` when the provider answers with a non-success status or
    a body that is not a JSON object.
    """

    def fetch_current(self, city: str) -> Dict[str, Any]:
        ...


@dataclass
class WeatherAPIClient:
    """WeatherAPI.com implementation of `WeatherClient`.

    Notes and assumptions:
    - Calls `GET {base_url}/current.json?key=...&q=<city>&aqi=no`.
    - One `requests.Session` is created per client and shared by every caller;
      the connection pool is sized for `pool_size` concurrent requests.
    - No retries are configured. A failed request is reported once.
    - Only 2xx counts as success. Any other status, 3xx included, raises.
    - `timeout` of None means no client-side timeout.
    """

    base_url: str
    api_key: str = field(repr=False)
    timeout: Optional[float] = None
    pool_size: int = 10
    _http: requests.Session = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.base_url = self.base_url.rstrip("/")
        self._http = self._session()

    def _session(self) -> requests.Session:
        s = requests.Session()
        adapter = HTTPAdapter(
            pool_connections=self.pool_size,
            pool_maxsize=self.pool_size,
            max_retries=0,
        )
        s.mount("https://", adapter)
        s.mount("http://", adapter)
        return s

    def fetch_current(self, city: str) -> Dict[str, Any]:
        params = {"key": self.api_key, "q": city, "aqi": "no"}
        resp = self._http.get(f"{self.base_url}/current.json", params=params, timeout=self.timeout)
        if not 200 <= resp.status_code < 300:
            raise WeatherAPIError(
                f"weather API returned {resp.status_code} for {city}",
                status_code=resp.status_code,
            )

        try:
            data = resp.json()
        except ValueError as e:
            raise WeatherAPIError(
                f"weather API returned a non-JSON body for {city}",
                status_code=resp.status_code,
            ) from e
        if not isinstance(data, dict):
            raise WeatherAPIError(
                f"weather API returned {type(data).__name__} instead of an object for {city}",
                status_code=resp.status_code,
            )
        return data

    def close(self) -> None:
        self._http.close()
