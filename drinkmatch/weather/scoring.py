from __future__ import annotations

import math

from ..recommendations.models import Drink, DrinkCategory, DrinkStrength, WeatherMatch
from .context import (
    TemperatureBucket,
    TimeOfDay,
    format_temperature,
    temperature_bucket,
)
from .models import WeatherSnapshot

NO_WEATHER_DATA_SCORE = 50

# Condition keywords sharing one of these words count as the same family.
CONDITION_FAMILIES = ("rain", "snow", "clear")

# ---------------------------------------------------------------------------
# Lookup tables
# ---------------------------------------------------------------------------

TIME_OF_DAY_PREFERENCES: dict[TimeOfDay, dict[str, tuple]] = {
    TimeOfDay.morning: {
        "categories": (),
        "strengths": (DrinkStrength.light,),
    },
    TimeOfDay.afternoon: {
        "categories": (),
        "strengths": (DrinkStrength.light, DrinkStrength.medium),
    },
    TimeOfDay.evening: {
        "categories": (DrinkCategory.wine, DrinkCategory.cocktail),
        "strengths": (DrinkStrength.medium, DrinkStrength.strong),
    },
    TimeOfDay.night: {
        "categories": (DrinkCategory.spirit, DrinkCategory.cocktail),
        "strengths": (DrinkStrength.strong,),
    },
}

TEMPERATURE_PREFERENCES: dict[TemperatureBucket, dict[str, tuple]] = {
    TemperatureBucket.hot: {
        "categories": (DrinkCategory.beer, DrinkCategory.non_alcoholic),
        "strengths": (DrinkStrength.light,),
        "flavors": ("refreshing",),
    },
    TemperatureBucket.warm: {
        "categories": (DrinkCategory.cocktail,),
        "strengths": (DrinkStrength.medium,),
        "flavors": ("refreshing",),
    },
    TemperatureBucket.cool: {
        "categories": (DrinkCategory.wine, DrinkCategory.cocktail),
        "strengths": (DrinkStrength.medium,),
        "flavors": (),
    },
    TemperatureBucket.cold: {
        "categories": (DrinkCategory.spirit,),
        "strengths": (DrinkStrength.strong,),
        "flavors": ("savory", "spicy"),
    },
}


# ---------------------------------------------------------------------------
# Score terms
# ---------------------------------------------------------------------------


def temperature_score(match: WeatherMatch, temp: float) -> float:
    """Up to 40 points for how close *temp* is to the drink's ideal."""
    if match.temp_min <= temp <= match.temp_max:
        temp_range = match.temp_max - match.temp_min
        if temp_range == 0:
            return 40.0 if temp == match.ideal_temp else 20.0
        diff = abs(temp - match.ideal_temp)
        return max(20.0, 40.0 - (diff / temp_range) * 20.0)

    distance = min(abs(temp - match.temp_min), abs(temp - match.temp_max))
    return max(0.0, 20.0 - distance * 2.0)


def condition_matches(match: WeatherMatch, condition: str) -> bool:
    return bool(condition) and condition in match.conditions


def condition_score(match: WeatherMatch, condition: str) -> int:
    """30 for an exact tag, 20 for the same coarse family, else 0."""
    if condition_matches(match, condition):
        return 30
    for tag in match.conditions:
        if any(family in tag and family in condition for family in CONDITION_FAMILIES):
            return 20
    return 0


def time_of_day_bonus(drink: Drink, time_of_day: TimeOfDay) -> int:
    prefs = TIME_OF_DAY_PREFERENCES.get(time_of_day, {})
    bonus = 0
    if drink.category in prefs.get("categories", ()):
        bonus += 10
    if drink.strength in prefs.get("strengths", ()):
        bonus += 5
    return min(15, bonus)


def temperature_bucket_bonus(drink: Drink, bucket: TemperatureBucket) -> int:
    prefs = TEMPERATURE_PREFERENCES.get(bucket, {})
    bonus = 0
    if drink.category in prefs.get("categories", ()):
        bonus += 10
    if drink.strength in prefs.get("strengths", ()):
        bonus += 5
    if any(flavor in prefs.get("flavors", ()) for flavor in drink.flavor_profile):
        bonus += 5
    return min(15, bonus)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def compute_score(drink: Drink, weather: WeatherSnapshot, time_of_day: TimeOfDay) -> int:
    """Weather match score in [0, 100] for one drink.

    Drinks without weather-match data get a neutral score.
    """
    match = drink.weather_match
    if match is None:
        return NO_WEATHER_DATA_SCORE

    time_of_day = TimeOfDay(time_of_day)
    total = (
        temperature_score(match, weather.temp)
        + condition_score(match, weather.main)
        + time_of_day_bonus(drink, time_of_day)
        + temperature_bucket_bonus(drink, temperature_bucket(weather.temp))
    )
    return max(0, min(100, _round_half_up(total)))


# ---------------------------------------------------------------------------
# Reasons
# ---------------------------------------------------------------------------


def generate_reasons(
    drink: Drink,
    weather: WeatherSnapshot,
    score: int,
    time_of_day: TimeOfDay,
    metric: bool = True,
) -> list[str]:
    """Explain a weather score. Always returns at least one reason."""
    reasons: list[str] = []
    time_of_day = TimeOfDay(time_of_day)
    bucket = temperature_bucket(weather.temp)
    display = format_temperature(weather.temp, metric)
    match = drink.weather_match

    if match and match.temp_min <= weather.temp <= match.temp_max:
        if bucket is TemperatureBucket.hot:
            reasons.append(f"Perfect for this {display} weather")
        elif bucket is TemperatureBucket.cold:
            reasons.append(f"Ideal for warming up in {display}")
        else:
            reasons.append(f"Great match for {display} weather")

    if match and condition_matches(match, weather.main):
        reasons.append(f"Excellent choice for {weather.description or weather.main}")

    flavors = drink.flavor_profile
    if bucket is TemperatureBucket.hot and "refreshing" in flavors:
        reasons.append("Refreshing choice for hot weather")
    elif bucket is TemperatureBucket.cold and ("spicy" in flavors or "smoky" in flavors):
        reasons.append("Warming flavors for cold weather")

    if time_of_day is TimeOfDay.evening and drink.category in (
        DrinkCategory.wine,
        DrinkCategory.cocktail,
    ):
        reasons.append("Perfect evening drink")
    elif time_of_day is TimeOfDay.afternoon and drink.strength is DrinkStrength.light:
        reasons.append("Light and suitable for afternoon")

    if not reasons:
        if score > 70:
            reasons.append("Highly recommended for current conditions")
        elif score > 40:
            reasons.append("Good choice for the weather")
        else:
            reasons.append("Worth trying in this weather")

    return reasons
