from __future__ import annotations

from ..allergens.rules import AllergyType
from .models import MergedPreferences, PreferenceInput, PreferenceValidation

_REQUIRED_FIELDS = ("category", "flavor", "strength", "allergies")
_OPTIONAL_FIELDS = ("occasion", "adventure")

_ADVENTURE_PHRASES = {
    "classic": "traditional choices",
    "bold": "bold experiments",
    "fruity": "fruity options",
    "simple": "simple drinks",
}


def validate_preferences(prefs: PreferenceInput | MergedPreferences) -> PreferenceValidation:
    """Check one preference set for contradictions and report how complete it is."""
    errors: list[str] = []
    warnings: list[str] = []

    if not prefs.category and not prefs.flavor:
        warnings.append(
            "Consider setting a primary category or flavor preference for better recommendations"
        )

    if prefs.allergies is not None:
        if len(prefs.allergies) == 0 and isinstance(prefs, PreferenceInput):
            errors.append('At least one allergy option must be selected (including "none")')
        if AllergyType.none in prefs.allergies and len(prefs.allergies) > 1:
            errors.append('Cannot select "none" along with specific allergies')

    completeness = sum(25 for f in _REQUIRED_FIELDS if getattr(prefs, f))
    completeness += sum(5 for f in _OPTIONAL_FIELDS if getattr(prefs, f))

    return PreferenceValidation(
        is_valid=not errors,
        errors=errors,
        warnings=warnings,
        completeness=min(100, completeness),
    )


def summarize_preferences(prefs: MergedPreferences) -> str:
    parts: list[str] = []

    if prefs.category and prefs.category != "any":
        category = getattr(prefs.category, "value", prefs.category)
        name = "non-alcoholic drinks" if category == "non-alcoholic" else f"{category}s"
        parts.append(f"Prefers {name}")
    if prefs.flavor:
        parts.append(f"enjoys {prefs.flavor.value} flavors")
    if prefs.strength:
        parts.append(f"likes {prefs.strength.value} strength drinks")
    if prefs.adventure:
        parts.append(f"gravitates toward {_ADVENTURE_PHRASES[prefs.adventure.value]}")
    if prefs.allergies and AllergyType.none not in prefs.allergies:
        parts.append(f"avoids {', '.join(a.value for a in prefs.allergies)}")
    if prefs.excluded_ingredients:
        parts.append(f"skips {', '.join(prefs.excluded_ingredients)}")
    if prefs.use_weather:
        parts.append("considers weather in recommendations")

    return ", ".join(parts) if parts else "No specific preferences set"
