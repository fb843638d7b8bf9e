from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from ..allergens.detector import resolve_allergies
from ..allergens.rules import AllergyType
from ..preferences.mapper import calculate_confidence, is_ready
from ..preferences.models import CORE_FIELDS, MergedPreferences, PreferenceInput
from .models import ConversationResult
from .vocabulary import (
    ALLERGY_CONTEXT_PATTERN,
    ALLERGY_PATTERNS,
    CATEGORY_PATTERNS,
    DIET_MARKER_PATTERNS,
    FLAVOR_PATTERNS,
    NO_ALLERGY_PATTERN,
    OCCASION_PATTERNS,
    RESTRICTION_RE,
    SPIRIT_PATTERN,
    STRENGTH_PATTERNS,
    all_matches,
    allergen_answer,
    first_match,
    is_no_allergy_answer,
    normalize_text,
    restriction_object_words,
)

logger = logging.getLogger(__name__)

_SCALAR_FIELDS = ("category", "flavor", "strength", "occasion", "adventure", "search", "use_weather")

# ---------------------------------------------------------------------------
# Follow-up questions
# ---------------------------------------------------------------------------

QUESTIONS: dict[str, tuple[str, list[str]]] = {
    "category": (
        "What type of beverage are you in the mood for tonight?",
        ["Cocktail", "Beer", "Wine", "Spirit", "Non-alcoholic"],
    ),
    "flavor": (
        "What kind of flavors are you in the mood for?",
        ["Sweet", "Sour", "Bitter", "Crisp", "Smoky", "Smooth"],
    ),
    "strength": (
        "How strong would you like your drink to be?",
        ["Light", "Medium", "Strong"],
    ),
    "occasion": (
        "What's the occasion? This helps me pick the perfect vibe.",
        ["Casual", "Celebration", "Business", "Romantic"],
    ),
    "allergies": (
        "Last question - any allergies or ingredients you'd like me to avoid?",
        ["None", "Gluten-free", "Dairy-free", "Other restrictions"],
    ),
}

READY_MESSAGE = "Perfect! Here are your recommendations:"


@dataclass
class _RestrictionScan:
    cleaned: str
    allergies: list[str] = field(default_factory=list)
    excluded: list[str] = field(default_factory=list)
    restricted: bool = False


def _strip(text: str, words: list[str]) -> str:
    for word in words:
        text = re.sub(r"\b" + re.escape(word) + r"\b", " ", text, count=1)
    return text


def _scan_restrictions(text: str) -> _RestrictionScan:
    scan = _RestrictionScan(cleaned=text)

    if is_no_allergy_answer(text):
        scan.allergies.append(AllergyType.none.value)
        text = NO_ALLERGY_PATTERN.sub(" ", text) if NO_ALLERGY_PATTERN.search(text) else ""

    for value, pattern in DIET_MARKER_PATTERNS:
        if pattern.search(text):
            scan.allergies.append(value)
            scan.restricted = True
            text = pattern.sub(" ", text)

    # "I have a nut allergy", "eggs, I'm allergic", or a bare "dairy" answer
    stated = allergen_answer(text)
    if not stated and ALLERGY_CONTEXT_PATTERN.search(text):
        stated = all_matches(text, ALLERGY_PATTERNS)
    if stated:
        scan.allergies.extend(stated)
        scan.restricted = True
        for _, pattern in ALLERGY_PATTERNS:
            text = pattern.sub(" ", text)

    pieces: list[str] = []
    cursor = 0
    for match in RESTRICTION_RE.finditer(text):
        clause = match.group(1)
        allergies = all_matches(clause, ALLERGY_PATTERNS)
        spirits = SPIRIT_PATTERN.findall(clause)
        if allergies or spirits:
            scan.restricted = True
        scan.allergies.extend(allergies)
        scan.excluded.extend(s for s in spirits if s not in scan.excluded)

        removed = restriction_object_words(clause) + spirits
        for _, pattern in ALLERGY_PATTERNS:
            removed.extend(pattern.findall(clause))
        pieces.append(text[cursor:match.start()])
        pieces.append(" " + _strip(clause, removed))
        cursor = match.end()
    pieces.append(text[cursor:])

    scan.cleaned = "".join(pieces)
    return scan


def extract_with_restriction(message: str) -> tuple[PreferenceInput, bool]:
    """Parse one utterance and report whether it rules something out."""
    text = normalize_text(message)
    scan = _scan_restrictions(text)
    cleaned = scan.cleaned

    prefs = PreferenceInput(
        category=first_match(cleaned, CATEGORY_PATTERNS),
        flavor=first_match(cleaned, FLAVOR_PATTERNS),
        strength=first_match(cleaned, STRENGTH_PATTERNS),
        occasion=first_match(cleaned, OCCASION_PATTERNS),
        allergies=resolve_allergies(scan.allergies) if scan.allergies else None,
        excluded_ingredients=scan.excluded,
    )
    logger.debug("Extracted %s from %r (restriction=%s)", prefs.model_dump(exclude_none=True), message, scan.restricted)
    return prefs, scan.restricted


def extract_preferences(message: str) -> PreferenceInput:
    """Parse one free-text utterance into a partial preference set."""
    prefs, _ = extract_with_restriction(message)
    return prefs


def is_restriction(message: str) -> bool:
    """True when the utterance rules something out ("but not gin", "allergic to dairy")."""
    _, restricted = extract_with_restriction(message)
    return restricted


# ---------------------------------------------------------------------------
# Accumulation
# ---------------------------------------------------------------------------


def accumulate_preferences(
    current: PreferenceInput,
    extracted: PreferenceInput,
    restriction_only: bool = False,
) -> PreferenceInput:
    """Fold newly extracted preferences into the running conversation state.

    New scalar values overwrite old ones unless the utterance was a
    restriction, in which case they only fill fields that are still unset.
    Allergies and exclusions are always appended.
    """
    data = current.model_dump()

    for field_name in _SCALAR_FIELDS:
        value = getattr(extracted, field_name)
        if value is None:
            continue
        if restriction_only and data[field_name] is not None:
            continue
        data[field_name] = value

    if extracted.allergies:
        data["allergies"] = resolve_allergies([*(current.allergies or []), *extracted.allergies])

    excluded = list(current.excluded_ingredients)
    for item in extracted.excluded_ingredients:
        if item not in excluded:
            excluded.append(item)
    data["excluded_ingredients"] = excluded

    return PreferenceInput(**data)


def refine_preferences(current: PreferenceInput, message: str) -> PreferenceInput:
    extracted, restricted = extract_with_restriction(message)
    return accumulate_preferences(current, extracted, restriction_only=restricted)


# ---------------------------------------------------------------------------
# Readiness
# ---------------------------------------------------------------------------


def missing_fields(prefs: PreferenceInput | MergedPreferences) -> list[str]:
    return [f for f in CORE_FIELDS if not getattr(prefs, f)]


def follow_up_questions(prefs: PreferenceInput | MergedPreferences) -> list[str]:
    return [QUESTIONS[f][0] for f in missing_fields(prefs)]


def _question_for(field_name: str, prefs: PreferenceInput) -> tuple[str, list[str]]:
    question, replies = QUESTIONS[field_name]
    if field_name == "flavor" and prefs.category and prefs.category != "any":
        category = getattr(prefs.category, "value", prefs.category)
        question = f"Great choice on {category}! What kind of flavors are you craving?"
    return question, list(replies)


def _expert_advice(prefs: PreferenceInput) -> str | None:
    allergies = prefs.allergies or []
    if prefs.category == "beer" and AllergyType.gluten in allergies:
        return (
            "Most beers contain gluten from barley or wheat, so I'll lean on wine, cocktails "
            "and non-alcoholic options with that same crisp, refreshing feel."
        )
    if prefs.category == "cocktail" and AllergyType.dairy in allergies:
        return (
            "Most cocktails are naturally dairy-free. I'll steer clear of creamy ones like "
            "White Russians or Brandy Alexanders."
        )
    if prefs.excluded_ingredients:
        return (
            f"No problem! I'll avoid {' and '.join(prefs.excluded_ingredients)} and focus on "
            "other options that match your taste."
        )
    return None


def analyze(prefs: PreferenceInput) -> ConversationResult:
    """Decide whether to recommend now or which single question to ask next."""
    confidence = calculate_confidence(prefs)
    ready = is_ready(prefs, confidence)

    if ready:
        return ConversationResult(
            preferences=prefs,
            confidence=confidence,
            ready=True,
            message=READY_MESSAGE,
            advice=_expert_advice(prefs),
        )

    missing = missing_fields(prefs)
    next_field = missing[0] if missing else None
    if next_field is None:
        message, replies = "Tell me a bit more about what you're looking for!", []
    else:
        message, replies = _question_for(next_field, prefs)

    return ConversationResult(
        preferences=prefs,
        confidence=confidence,
        ready=False,
        next_field=next_field,
        message=message,
        quick_replies=replies,
    )
