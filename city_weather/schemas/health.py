from typing import List

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: str = Field()
    app_name: str = Field()
    app_env: str = Field()
    version: str = Field()
    uptime_s: float = Field(ge=0)
    cities: List[str] = Field(description="Roster processed on every batch run")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "status": "ok",
                    "app_name": "CityWeather",
                    "app_env": "development",
                    "version": "0.1.0",
                    "uptime_s": 12.34,
                    "cities": ["Medellín", "Charleston", "London", "Lisbon", "Campinas"],
                }
            ]
        }
    }
