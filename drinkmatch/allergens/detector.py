from __future__ import annotations

import logging
from typing import Iterable, Sequence

from .rules import (
    ALLERGEN_LABELS,
    DETECTABLE_ALLERGIES,
    AllergyType,
    keywords_for,
)

logger = logging.getLogger(__name__)


def _coerce(allergies: Iterable[AllergyType | str] | None) -> list[AllergyType]:
    """Map raw allergy tags to the enum, dropping anything unrecognized."""
    result: list[AllergyType] = []
    for raw in allergies or []:
        try:
            allergy = AllergyType(raw.strip().lower() if isinstance(raw, str) else raw)
        except ValueError:
            logger.debug("Ignoring unknown allergy tag %r", raw)
            continue
        if allergy not in result:
            result.append(allergy)
    return result


def resolve_allergies(allergies: Iterable[AllergyType | str] | None) -> list[AllergyType]:
    """Resolve the "none" contradiction in an allergy set.

    Any specific allergy removes ``none``; a set left empty after that
    reverts to ``[none]``. Callers only pass sets a user actually answered.
    """
    coerced = _coerce(allergies)
    specific = [a for a in coerced if a is not AllergyType.none]
    return specific or [AllergyType.none]


def has_allergen(ingredients: Sequence[str] | None, allergy: AllergyType | str) -> bool:
    """Return True if any ingredient contains a keyword for *allergy*."""
    coerced = _coerce([allergy])
    if not coerced or coerced[0] is AllergyType.none:
        return False

    patterns = keywords_for(coerced[0])
    for ingredient in ingredients or []:
        lower = ingredient.lower()
        if any(pattern in lower for pattern in patterns):
            return True
    return False


def detect_all_allergens(ingredients: Sequence[str] | None) -> list[AllergyType]:
    return [a for a in DETECTABLE_ALLERGIES if has_allergen(ingredients, a)]


def is_safe_for_allergies(
    ingredients: Sequence[str] | None,
    user_allergies: Iterable[AllergyType | str] | None,
) -> bool:
    """Return True when none of the user's allergies are found in *ingredients*.

    An empty allergy list, or exactly ``["none"]``, means no restriction.
    """
    allergies = _coerce(user_allergies)
    if not allergies or allergies == [AllergyType.none]:
        return True

    return not any(
        a is not AllergyType.none and has_allergen(ingredients, a)
        for a in allergies
    )


def get_allergen_warnings(
    ingredients: Sequence[str] | None,
    user_allergies: Iterable[AllergyType | str] | None,
) -> list[str]:
    """Human-readable warning per triggered user allergy, in detection order."""
    allergies = set(_coerce(user_allergies))
    if not allergies:
        return []

    return [
        ALLERGEN_LABELS[a]
        for a in DETECTABLE_ALLERGIES
        if a in allergies and has_allergen(ingredients, a)
    ]
