from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class WeatherSnapshot(BaseModel):
    """Current conditions at the user's location. Temperatures are Celsius."""

    model_config = ConfigDict(frozen=True)

    temp: float
    main: str = Field(default="", description="Dominant condition keyword, e.g. 'clear', 'rain'")
    description: str = ""
    location: str | None = None

    @field_validator("main")
    @classmethod
    def _lower_main(cls, value: str) -> str:
        return value.strip().lower()

    @classmethod
    def from_openweather(cls, payload: dict[str, Any]) -> "WeatherSnapshot":
        """Build a snapshot from an OpenWeather "current weather" response."""
        weather = (payload.get("weather") or [{}])[0]
        main = payload.get("main") or {}
        return cls(
            temp=round(float(main.get("temp", 0.0))),
            main=weather.get("main", ""),
            description=weather.get("description", ""),
            location=payload.get("name"),
        )
