from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timedelta

from .models import WeatherSnapshot

DEFAULT_WEATHER_TTL = timedelta(minutes=30)
DEFAULT_PERMISSION_TTL = timedelta(hours=24)


@dataclass(frozen=True)
class WeatherCache:
    """A weather snapshot plus the moment it was fetched.

    Callers own the value and hand ``current(now)`` to the engine; nothing
    here is global, and refreshing returns a new instance.
    """

    snapshot: WeatherSnapshot
    fetched_at: datetime
    ttl: timedelta = DEFAULT_WEATHER_TTL
    location: str | None = None

    def age(self, now: datetime) -> timedelta:
        return now - self.fetched_at

    def is_fresh(self, now: datetime) -> bool:
        return self.age(now) < self.ttl

    def current(self, now: datetime) -> WeatherSnapshot | None:
        """Return the snapshot while it is fresh, otherwise None."""
        return self.snapshot if self.is_fresh(now) else None

    def refreshed(self, snapshot: WeatherSnapshot, now: datetime) -> "WeatherCache":
        return replace(
            self,
            snapshot=snapshot,
            fetched_at=now,
            location=snapshot.location or self.location,
        )


@dataclass(frozen=True)
class LocationPermission:
    granted: bool
    recorded_at: datetime
    ttl: timedelta = DEFAULT_PERMISSION_TTL

    def is_valid(self, now: datetime) -> bool:
        """A remembered grant counts only until its TTL runs out."""
        return self.granted and (now - self.recorded_at) < self.ttl
