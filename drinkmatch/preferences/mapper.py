from __future__ import annotations

import logging
from typing import Any, Sequence

from ..allergens.detector import resolve_allergies
from ..recommendations.models import DrinkCategory, DrinkFilters, DrinkStrength
from .models import (
    AdventureLevel,
    FlavorPreference,
    Intensity,
    MergedPreferences,
    PreferenceInput,
    PreferenceSource,
    SourceKind,
)

logger = logging.getLogger(__name__)

READINESS_THRESHOLD = 60

CONFIDENCE_WEIGHTS: dict[str, int] = {
    "category": 30,
    "flavor": 25,
    "strength": 20,
    "occasion": 15,
    "allergies": 10,
}

# Resolved by "first source with a value wins".
_SCALAR_FIELDS = ("category", "flavor", "strength", "occasion", "adventure", "search", "use_weather")

# ---------------------------------------------------------------------------
# Preference → filter tables
# ---------------------------------------------------------------------------

STRENGTH_FILTERS: dict[DrinkStrength, list[DrinkStrength]] = {
    DrinkStrength.light: [DrinkStrength.light, DrinkStrength.non_alcoholic],
    DrinkStrength.medium: [DrinkStrength.light, DrinkStrength.medium],
    DrinkStrength.strong: [DrinkStrength.medium, DrinkStrength.strong],
    DrinkStrength.non_alcoholic: [DrinkStrength.non_alcoholic],
}

OCCASION_FILTERS: dict[str, list[str]] = {
    "casual": ["casual", "relaxing"],
    "party": ["party", "celebration"],
    "celebration": ["celebration", "party"],
    "romantic": ["romantic"],
    "relaxing": ["relaxing", "casual"],
}

FLAVOR_FILTERS: dict[FlavorPreference, list[str]] = {
    FlavorPreference.sweet: ["sweet", "fruity"],
    FlavorPreference.bitter: ["bitter", "herbal"],
    FlavorPreference.sour: ["sour", "refreshing"],
    FlavorPreference.smooth: ["refreshing", "savory"],
    FlavorPreference.crisp: ["crisp", "refreshing"],
    FlavorPreference.smokey: ["smoky", "spicy"],
}

ADVENTURE_CATEGORIES: dict[AdventureLevel, list[DrinkCategory]] = {
    AdventureLevel.classic: [DrinkCategory.wine, DrinkCategory.beer],
    AdventureLevel.bold: [DrinkCategory.cocktail, DrinkCategory.spirit],
    AdventureLevel.fruity: [DrinkCategory.cocktail, DrinkCategory.non_alcoholic],
    AdventureLevel.simple: [DrinkCategory.beer, DrinkCategory.wine, DrinkCategory.non_alcoholic],
}


# ---------------------------------------------------------------------------
# Confidence / readiness
# ---------------------------------------------------------------------------


def calculate_confidence(prefs: PreferenceInput | MergedPreferences) -> int:
    score = 0
    for field_name, weight in CONFIDENCE_WEIGHTS.items():
        if getattr(prefs, field_name, None):
            score += weight
    return min(score, 100)


def is_ready(prefs: PreferenceInput | MergedPreferences, confidence: int) -> bool:
    has_essentials = bool(prefs.category or prefs.flavor)
    return has_essentials and confidence >= READINESS_THRESHOLD


# ---------------------------------------------------------------------------
# Merging
# ---------------------------------------------------------------------------


def ordered_sources(
    quiz: PreferenceInput | None = None,
    ai: PreferenceInput | None = None,
    profile: PreferenceInput | None = None,
) -> list[PreferenceSource]:
    """Build the priority-ordered source list: quiz, then AI, then profile."""
    sources: list[PreferenceSource] = []
    for kind, prefs in ((SourceKind.quiz, quiz), (SourceKind.ai, ai), (SourceKind.profile, profile)):
        if prefs is not None:
            sources.append(PreferenceSource(kind=kind, preferences=prefs))
    return sources


def _choice_key(value: Any) -> str:
    return value.value if hasattr(value, "value") else str(value)


def merge_preferences(sources: Sequence[PreferenceSource]) -> MergedPreferences:
    """Reconcile preference sources given in priority order.

    Scalar fields come from the first source that has a value. Allergies are
    the union of every source, then resolved so "none" never sits next to a
    real allergy. Excluded ingredients are unioned as well.
    """
    merged: dict[str, Any] = {}
    provenance: dict[str, SourceKind] = {}

    for field_name in _SCALAR_FIELDS:
        for source in sources:
            value = getattr(source.preferences, field_name)
            if value is not None:
                merged[field_name] = value
                provenance[field_name] = source.kind
                break

    raw_allergies: list = []
    excluded: list[str] = []
    for source in sources:
        if source.preferences.allergies:
            raw_allergies.extend(source.preferences.allergies)
            provenance.setdefault("allergies", source.kind)
        for item in source.preferences.excluded_ingredients:
            if item not in excluded:
                excluded.append(item)

    if raw_allergies:
        merged["allergies"] = resolve_allergies(raw_allergies)
    merged["excluded_ingredients"] = excluded

    result = MergedPreferences(**merged, provenance=provenance)

    category_intensity: dict[str, Intensity] = {}
    flavor_intensity: dict[str, Intensity] = {}
    if result.category not in (None, "any") and provenance.get("category") is SourceKind.quiz:
        category_intensity[_choice_key(result.category)] = Intensity.high
    if result.flavor is not None and provenance.get("flavor") is SourceKind.quiz:
        flavor_intensity[_choice_key(result.flavor)] = Intensity.high

    confidence = calculate_confidence(result)
    logger.debug(
        "Merged %d preference sources: confidence=%d provenance=%s",
        len(sources), confidence, provenance,
    )
    return result.model_copy(update={
        "confidence": confidence,
        "ready": is_ready(result, confidence),
        "category_intensity": category_intensity,
        "flavor_intensity": flavor_intensity,
    })


# ---------------------------------------------------------------------------
# Merged preferences → filters
# ---------------------------------------------------------------------------


def to_filters(prefs: MergedPreferences) -> DrinkFilters:
    categories: list[DrinkCategory] = []
    if prefs.category and prefs.category != "any":
        categories = [DrinkCategory(prefs.category)]
    elif prefs.category is None and prefs.adventure:
        categories = list(ADVENTURE_CATEGORIES[prefs.adventure])

    strengths = list(STRENGTH_FILTERS.get(prefs.strength, [])) if prefs.strength else []
    flavors = list(FLAVOR_FILTERS.get(prefs.flavor, [])) if prefs.flavor else []
    occasions = (
        list(OCCASION_FILTERS.get(prefs.occasion, [prefs.occasion])) if prefs.occasion else []
    )

    return DrinkFilters(
        categories=categories,
        flavors=flavors,
        strengths=strengths,
        occasions=occasions,
        search=prefs.search,
        excluded_ingredients=list(prefs.excluded_ingredients),
    )
