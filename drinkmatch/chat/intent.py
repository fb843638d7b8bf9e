from __future__ import annotations

import json
import logging
from typing import Any

from ..llm.config import DEFAULT_LLM_CONFIG, LLMConfig
from ..llm.groq_client import complete_json, complete_text, is_available
from ..preferences.models import PreferenceInput
from .extractor import accumulate_preferences, analyze, extract_with_restriction
from .models import ConversationResult, ConversationState, ConversationTurn
from .vocabulary import (
    CATEGORY_PATTERNS,
    FLAVOR_PATTERNS,
    OCCASION_PATTERNS,
    STRENGTH_PATTERNS,
    normalize_allergies,
    normalize_choice,
)

logger = logging.getLogger(__name__)

_MAX_TURNS = 6  # 3 exchanges

# ---------------------------------------------------------------------------
# LLM Prompts
# ---------------------------------------------------------------------------

PREFERENCE_EXTRACTION_PROMPT = """\
You are a bartender's assistant. Given a guest's message (and optionally prior \
conversation context), extract their drink preferences as JSON.

Return ONLY valid JSON with these fields (omit fields you cannot infer):
{
  "category": "cocktail / beer / wine / spirit / non-alcoholic / any",
  "flavor": "crisp / smoky / sweet / bitter / sour / smooth",
  "strength": "light / medium / strong",
  "occasion": "casual / celebration / business / romantic / sports / exploring",
  "allergies": ["gluten", "dairy", "nuts", "eggs", "soy", "none"],
  "avoid": ["spirits or ingredients the guest ruled out, e.g. gin"]
}

Only report allergies the guest actually mentioned. Use "none" only when the \
guest says they have no allergies."""

CLARIFICATION_PROMPT = """\
You are a friendly bartender helping a guest pick a drink. Some details are \
still missing.

Ask ONE brief, conversational follow-up question (under 30 words) about the \
missing detail named below. Do NOT list options in bullet points."""


# ---------------------------------------------------------------------------
# LLM output → PreferenceInput
# ---------------------------------------------------------------------------


def _preferences_from_llm(parsed: dict[str, Any]) -> PreferenceInput | None:
    allergies, excluded = normalize_allergies(parsed.get("allergies") or [])
    more_allergies, more_excluded = normalize_allergies(parsed.get("avoid") or [])
    allergies += [a for a in more_allergies if a not in allergies]
    excluded += [e for e in more_excluded if e not in excluded]

    prefs = PreferenceInput(
        category=normalize_choice(parsed.get("category"), CATEGORY_PATTERNS),
        flavor=normalize_choice(parsed.get("flavor"), FLAVOR_PATTERNS),
        strength=normalize_choice(parsed.get("strength"), STRENGTH_PATTERNS),
        occasion=normalize_choice(parsed.get("occasion"), OCCASION_PATTERNS),
        allergies=allergies or None,
        excluded_ingredients=excluded,
    )
    if not prefs.model_dump(exclude_none=True, exclude_defaults=True):
        return None
    return prefs


def _context_message(message: str, state: ConversationState | None) -> str:
    if not state or not state.turns:
        return message

    history_parts = [f"{turn.role}: {turn.content}" for turn in state.turns[-4:]]
    known = state.preferences.model_dump(mode="json", exclude_none=True, exclude_defaults=True)
    if known:
        history_parts.append(f"Known preferences so far: {json.dumps(known)}")
    context = "\n".join(history_parts)
    return f"Conversation context:\n{context}\n\nLatest message: {message}"


# ---------------------------------------------------------------------------
# Extraction / clarification
# ---------------------------------------------------------------------------


def _extract_intent(
    message: str,
    state: ConversationState | None,
    config: LLMConfig,
) -> tuple[PreferenceInput, bool]:
    keyword_prefs, restricted = extract_with_restriction(message)
    if not is_available(config):
        return keyword_prefs, restricted

    parsed = complete_json(PREFERENCE_EXTRACTION_PROMPT, _context_message(message, state), config)
    llm_prefs = _preferences_from_llm(parsed) if parsed else None
    if llm_prefs is None:
        logger.info("LLM extraction returned nothing usable, using keyword extraction")
        return keyword_prefs, restricted

    return accumulate_preferences(llm_prefs, keyword_prefs, restriction_only=True), restricted


def extract_intent(
    message: str,
    state: ConversationState | None = None,
    config: LLMConfig = DEFAULT_LLM_CONFIG,
) -> PreferenceInput:
    """Extract preferences with the LLM when configured, else by keywords.

    Allergies and exclusions found by the keyword pass are always kept, so a
    model that misses a restriction cannot make the result less safe.
    """
    prefs, _ = _extract_intent(message, state, config)
    return prefs


def generate_clarification(
    result: ConversationResult,
    config: LLMConfig = DEFAULT_LLM_CONFIG,
) -> str:
    if result.ready or result.next_field is None or not is_available(config):
        return result.message

    known = result.preferences.model_dump(mode="json", exclude_none=True, exclude_defaults=True)
    user_content = (
        f"Known preferences: {json.dumps(known)}\n"
        f"Missing detail: {result.next_field}\n"
        "Generate a brief follow-up question."
    )
    question = complete_text(CLARIFICATION_PROMPT, user_content, config)
    return question or result.message


# ---------------------------------------------------------------------------
# Conversation turns
# ---------------------------------------------------------------------------


def handle_turn(
    state: ConversationState,
    message: str,
    config: LLMConfig = DEFAULT_LLM_CONFIG,
) -> tuple[ConversationState, ConversationResult]:
    """Run one chat turn: extract, accumulate, then recommend or ask again."""
    extracted, restricted = _extract_intent(message, state, config)
    preferences = accumulate_preferences(state.preferences, extracted, restriction_only=restricted)

    result = analyze(preferences)
    if not result.ready:
        result = result.model_copy(update={"message": generate_clarification(result, config)})

    turns = list(state.turns)
    turns.append(ConversationTurn(role="user", content=message))
    turns.append(ConversationTurn(role="assistant", content=result.message))
    if len(turns) > _MAX_TURNS:
        turns = turns[-_MAX_TURNS:]

    new_state = ConversationState(
        turns=turns,
        preferences=preferences,
        clarification_count=state.clarification_count + (0 if result.ready else 1),
    )
    return new_state, result
