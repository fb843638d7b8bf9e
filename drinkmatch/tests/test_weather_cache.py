from __future__ import annotations

from datetime import datetime, timedelta

from drinkmatch.weather.cache import LocationPermission, WeatherCache
from drinkmatch.weather.models import WeatherSnapshot

FETCHED = datetime(2024, 6, 1, 12, 0)
SNAPSHOT = WeatherSnapshot(temp=22, main="clear", location="Lisbon")


def test_fresh_within_ttl():
    cache = WeatherCache(snapshot=SNAPSHOT, fetched_at=FETCHED)
    now = FETCHED + timedelta(minutes=29)
    assert cache.is_fresh(now)
    assert cache.current(now) == SNAPSHOT


def test_expired_after_ttl():
    cache = WeatherCache(snapshot=SNAPSHOT, fetched_at=FETCHED)
    now = FETCHED + timedelta(minutes=30)
    assert not cache.is_fresh(now)
    assert cache.current(now) is None


def test_custom_ttl():
    cache = WeatherCache(snapshot=SNAPSHOT, fetched_at=FETCHED, ttl=timedelta(minutes=5))
    assert cache.current(FETCHED + timedelta(minutes=6)) is None


def test_refreshed_returns_new_entry():
    cache = WeatherCache(snapshot=SNAPSHOT, fetched_at=FETCHED)
    later = FETCHED + timedelta(hours=1)
    rainy = WeatherSnapshot(temp=15, main="rain")

    updated = cache.refreshed(rainy, later)

    assert updated is not cache
    assert updated.current(later) == rainy
    assert updated.location == "Lisbon"  # kept when the new snapshot has none
    assert cache.snapshot == SNAPSHOT


def test_age():
    cache = WeatherCache(snapshot=SNAPSHOT, fetched_at=FETCHED)
    assert cache.age(FETCHED + timedelta(minutes=10)) == timedelta(minutes=10)


class TestLocationPermission:
    def test_grant_valid_for_a_day(self):
        permission = LocationPermission(granted=True, recorded_at=FETCHED)
        assert permission.is_valid(FETCHED + timedelta(hours=23))
        assert not permission.is_valid(FETCHED + timedelta(hours=24))

    def test_denied_never_valid(self):
        permission = LocationPermission(granted=False, recorded_at=FETCHED)
        assert not permission.is_valid(FETCHED)


def test_ttl_from_engine_config(monkeypatch):
    from drinkmatch.recommendations.config import EngineConfig

    monkeypatch.setenv("DRINKMATCH_WEATHER_CACHE_TTL_MINUTES", "10")
    config = EngineConfig()
    cache = WeatherCache(snapshot=SNAPSHOT, fetched_at=FETCHED, ttl=config.weather_cache_ttl)

    assert cache.current(FETCHED + timedelta(minutes=9)) == SNAPSHOT
    assert cache.current(FETCHED + timedelta(minutes=10)) is None
