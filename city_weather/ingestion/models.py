from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict


class _Payload(BaseModel):
    """Base for WeatherAPI payload models.

    Unknown fields are dropped so upstream schema additions never break
    deserialization.
    """

    model_config = ConfigDict(extra="ignore")


class Condition(_Payload):
    text: str
    icon: str
    code: int


class Location(_Payload):
    name: str
    region: str
    country: str
    lat: float
    lon: float
    tz_id: str
    localtime_epoch: int
    localtime: str


class Current(_Payload):
    """Current conditions block.

    Units follow the provider: metric and imperial variants are both kept.
    """

    last_updated_epoch: int
    last_updated: str
    temp_c: float
    temp_f: float
    is_day: int
    condition: Condition
    wind_mph: float
    wind_kph: float
    wind_degree: int
    wind_dir: str
    pressure_mb: float
    pressure_in: float
    precip_mm: float
    precip_in: float
    humidity: int
    cloud: int
    feelslike_c: float
    feelslike_f: float
    vis_km: float
    vis_miles: float
    uv: float
    gust_mph: float
    gust_kph: float


class WeatherRecord(_Payload):
    """One city's current weather as stored in the document store.

    `id` and `city` are assigned after deserialization; any values sent by the
    provider under those keys are discarded.
    """

    id: Optional[str] = None
    city: Optional[str] = None
    location: Location
    current: Current

    @classmethod
    def from_payload(cls, payload: Any) -> "WeatherRecord":
        if isinstance(payload, dict):
            payload = {k: v for k, v in payload.items() if k not in ("id", "city")}
        return cls.model_validate(payload)

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")
