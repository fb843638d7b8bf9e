from __future__ import annotations

from datetime import datetime
from enum import Enum


class TimeOfDay(str, Enum):
    morning = "morning"
    afternoon = "afternoon"
    evening = "evening"
    night = "night"


class TemperatureBucket(str, Enum):
    hot = "hot"
    warm = "warm"
    cool = "cool"
    cold = "cold"


def time_of_day_for(moment: datetime | int) -> TimeOfDay:
    """Bucket a local datetime (or a bare hour 0-23) into a time of day."""
    hour = moment.hour if isinstance(moment, datetime) else int(moment)
    if hour < 12:
        return TimeOfDay.morning
    if hour < 17:
        return TimeOfDay.afternoon
    if hour < 21:
        return TimeOfDay.evening
    return TimeOfDay.night


def temperature_bucket(temp_c: float) -> TemperatureBucket:
    if temp_c >= 30:
        return TemperatureBucket.hot
    if temp_c >= 20:
        return TemperatureBucket.warm
    if temp_c >= 10:
        return TemperatureBucket.cool
    return TemperatureBucket.cold


def format_temperature(temp_c: float, metric: bool = True) -> str:
    if metric:
        return f"{round(temp_c)}°C"
    return f"{round(temp_c * 9 / 5 + 32)}°F"
