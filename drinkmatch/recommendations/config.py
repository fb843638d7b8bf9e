from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import Path

from dotenv import load_dotenv

from .happy_hour import HappyHourConfig

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")

logger = logging.getLogger(__name__)


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int | None) -> int | None:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer %s=%r, using %r", name, raw, default)
        return default


@dataclass(frozen=True)
class EngineConfig:
    metric_units: bool = field(default_factory=lambda: _env_bool("DRINKMATCH_METRIC_UNITS", True))
    happy_hour_start: int = field(default_factory=lambda: _env_int("DRINKMATCH_HAPPY_HOUR_START", 15))
    happy_hour_end: int = field(default_factory=lambda: _env_int("DRINKMATCH_HAPPY_HOUR_END", 18))
    happy_hour_enabled: bool = field(
        default_factory=lambda: _env_bool("DRINKMATCH_HAPPY_HOUR_ENABLED", True)
    )
    weather_cache_ttl_minutes: int = field(
        default_factory=lambda: _env_int("DRINKMATCH_WEATHER_CACHE_TTL_MINUTES", 30)
    )
    result_limit: int | None = field(default_factory=lambda: _env_int("DRINKMATCH_RESULT_LIMIT", None))

    @property
    def happy_hour(self) -> HappyHourConfig:
        return HappyHourConfig(
            start_hour=self.happy_hour_start,
            end_hour=self.happy_hour_end,
            enabled=self.happy_hour_enabled,
        )

    @property
    def weather_cache_ttl(self) -> timedelta:
        return timedelta(minutes=self.weather_cache_ttl_minutes)


DEFAULT_ENGINE_CONFIG = EngineConfig()
