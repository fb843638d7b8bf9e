from __future__ import annotations

import logging
from typing import Sequence

from ..allergens.detector import is_safe_for_allergies
from ..chat.vocabulary import phrase_pattern
from ..preferences.mapper import FLAVOR_FILTERS, to_filters
from ..preferences.models import FlavorPreference, Intensity, MergedPreferences
from ..weather.context import TimeOfDay
from ..weather.models import WeatherSnapshot
from ..weather.scoring import compute_score, generate_reasons
from .config import DEFAULT_ENGINE_CONFIG, EngineConfig
from .models import Drink, DrinkFilters, DrinkRecommendation

logger = logging.getLogger(__name__)

NEUTRAL_SCORE = 50
HAPPY_HOUR_REASON = "Happy Hour special!"


def _contains(haystack: str, needle: str) -> bool:
    return needle in haystack.lower()


def matches_filters(drink: Drink, filters: DrinkFilters) -> bool:
    if filters.categories and drink.category not in filters.categories:
        return False
    if filters.strengths and drink.strength not in filters.strengths:
        return False
    if filters.flavors and not set(filters.flavors) & set(drink.flavor_profile):
        return False
    if filters.occasions and not set(filters.occasions) & set(drink.occasions):
        return False

    if filters.search:
        needle = filters.search.strip().lower()
        fields = [drink.name, drink.description, *drink.ingredients]
        if needle and not any(_contains(f, needle) for f in fields):
            return False

    excluded = [e.strip().lower() for e in filters.excluded_ingredients if e.strip()]
    if excluded:
        # Whole words only: excluding "gin" keeps "ginger beer".
        pattern = phrase_pattern(excluded)
        if any(pattern.search(f.lower()) for f in (drink.name, *drink.ingredients)):
            return False

    return True


def filter_drinks(drinks: Sequence[Drink], filters: DrinkFilters) -> list[Drink]:
    return [d for d in drinks if matches_filters(d, filters)]


def _intensity_bias(drink: Drink, prefs: MergedPreferences) -> int:
    """Count how many high-intensity choices the drink satisfies."""
    bias = 0
    if prefs.category_intensity.get(drink.category.value) is Intensity.high:
        bias += 1
    for flavor, intensity in prefs.flavor_intensity.items():
        if intensity is not Intensity.high:
            continue
        tags = FLAVOR_FILTERS.get(FlavorPreference(flavor), [flavor])
        if set(tags) & set(drink.flavor_profile):
            bias += 1
    return bias


def get_match_message(score: int) -> str:
    if score >= 80:
        return "Perfect Match!"
    if score >= 60:
        return "Great Match!"
    if score >= 40:
        return "Good Match!"
    return "Worth a Try!"


def recommend(
    drinks: Sequence[Drink],
    weather: WeatherSnapshot | None,
    preferences: MergedPreferences,
    *,
    time_of_day: TimeOfDay,
    happy_hour_active: bool = False,
    metric: bool | None = None,
    limit: int | None = None,
    config: EngineConfig = DEFAULT_ENGINE_CONFIG,
) -> list[DrinkRecommendation]:
    """Rank drinks for the current weather and the user's merged preferences.

    Allergen filtering always applies. Happy-hour eligible drinks lead the
    list while a happy hour is active, then drinks are ordered by score.
    """
    metric = config.metric_units if metric is None else metric
    limit = config.result_limit if limit is None else limit
    use_weather = preferences.use_weather and weather is not None

    candidates = filter_drinks(drinks, to_filters(preferences))
    logger.debug("%d of %d drinks passed preference filters", len(candidates), len(drinks))

    scored: list[tuple[tuple, DrinkRecommendation]] = []
    for index, drink in enumerate(candidates):
        if not is_safe_for_allergies(drink.ingredients, preferences.allergies):
            logger.debug("Excluding %r: unsafe for %s", drink.name, preferences.allergies)
            continue

        if use_weather:
            score = compute_score(drink, weather, time_of_day)
            reasons = generate_reasons(drink, weather, score, time_of_day, metric)
        else:
            score = NEUTRAL_SCORE
            reasons = ["Matches your preferences"]

        if score <= 0:
            logger.debug("Excluding %r: score %d", drink.name, score)
            continue

        promoted = happy_hour_active and drink.happy_hour
        if promoted:
            reasons = [*reasons, HAPPY_HOUR_REASON]

        sort_key = (not promoted, -score, -_intensity_bias(drink, preferences), index)
        scored.append((sort_key, DrinkRecommendation(drink=drink, score=score, reasons=reasons)))

    scored.sort(key=lambda item: item[0])
    results = [rec for _, rec in scored]

    if limit is not None:
        results = results[:limit]
    return results
