from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Sequence

from .models import Drink


@dataclass(frozen=True)
class HappyHourConfig:
    start_hour: int = 15  # 24-hour clock, inclusive
    end_hour: int = 18  # exclusive
    enabled: bool = True


DEFAULT_HAPPY_HOUR = HappyHourConfig()


def is_happy_hour(now: datetime, config: HappyHourConfig = DEFAULT_HAPPY_HOUR) -> bool:
    if not config.enabled:
        return False
    return config.start_hour <= now.hour < config.end_hour


def _format_hour(hour: int) -> str:
    if hour == 0:
        return "12 AM"
    if hour < 12:
        return f"{hour} AM"
    if hour == 12:
        return "12 PM"
    return f"{hour - 12} PM"


def happy_hour_time_range(config: HappyHourConfig = DEFAULT_HAPPY_HOUR) -> str:
    if not config.enabled:
        return ""
    return f"{_format_hour(config.start_hour)} - {_format_hour(config.end_hour)}"


def happy_hour_drinks(drinks: Sequence[Drink]) -> list[Drink]:
    return [d for d in drinks if d.happy_hour]


def happy_hour_status(
    drink: Drink,
    now: datetime,
    config: HappyHourConfig = DEFAULT_HAPPY_HOUR,
) -> str:
    """Badge text for an eligible drink, empty for everything else."""
    if not drink.happy_hour:
        return ""

    time_range = drink.happy_hour_times or happy_hour_time_range(config)
    if is_happy_hour(now, config):
        return f"Happy Hour Active • {time_range}"
    return f"Happy Hour • {time_range}"
