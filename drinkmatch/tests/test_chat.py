from __future__ import annotations

import json
from unittest.mock import MagicMock, patch

from drinkmatch.allergens.rules import AllergyType
from drinkmatch.chat.extractor import QUESTIONS, READY_MESSAGE, analyze, extract_with_restriction
from drinkmatch.chat.intent import (
    _preferences_from_llm,
    extract_intent,
    generate_clarification,
    handle_turn,
)
from drinkmatch.chat.models import ConversationState
from drinkmatch.llm.config import LLMConfig
from drinkmatch.preferences.models import PreferenceInput
from drinkmatch.recommendations.models import DrinkCategory, DrinkStrength

ENABLED_CONFIG = LLMConfig(api_key="test-key", enabled=True)
DISABLED_CONFIG = LLMConfig(api_key="", enabled=False)


def _mock_groq_response(content: str) -> MagicMock:
    message = MagicMock()
    message.content = content
    choice = MagicMock()
    choice.message = message
    response = MagicMock()
    response.choices = [choice]
    return response


# ── LLM output → preferences ─────────────────────────────────────────────


class TestLLMNormalization:
    def test_free_form_values_normalized(self):
        prefs = _preferences_from_llm({
            "category": "Red wine",
            "flavor": "smoky",
            "strength": "strong",
            "allergies": ["Gluten"],
            "avoid": ["gin"],
        })
        assert prefs.category is DrinkCategory.wine
        assert prefs.flavor.value == "smokey"
        assert prefs.strength is DrinkStrength.strong
        assert prefs.allergies == [AllergyType.gluten]
        assert prefs.excluded_ingredients == ["gin"]

    def test_unrecognized_values_dropped(self):
        assert _preferences_from_llm({"category": "sake", "mood": "happy"}) is None

    def test_empty_payload(self):
        assert _preferences_from_llm({}) is None


# ── Intent Extraction ────────────────────────────────────────────────────


class TestIntentExtraction:
    def test_fallback_when_disabled(self):
        prefs = extract_intent("a sweet cocktail", config=DISABLED_CONFIG)
        assert prefs.category is DrinkCategory.cocktail
        assert prefs.flavor.value == "sweet"

    @patch("drinkmatch.llm.groq_client.Groq")
    def test_llm_extraction(self, mock_groq_cls):
        mock_groq_cls.return_value.chat.completions.create.return_value = _mock_groq_response(
            json.dumps({"category": "spirit", "flavor": "smoky", "strength": "strong"})
        )
        prefs = extract_intent("something to sip by the fire", config=ENABLED_CONFIG)
        assert prefs.category is DrinkCategory.spirit
        assert prefs.flavor.value == "smokey"
        assert prefs.strength is DrinkStrength.strong

    @patch("drinkmatch.llm.groq_client.Groq")
    def test_keyword_allergies_kept_when_llm_misses_them(self, mock_groq_cls):
        mock_groq_cls.return_value.chat.completions.create.return_value = _mock_groq_response(
            json.dumps({"category": "beer"})
        )
        prefs = extract_intent("a beer, I'm celiac", config=ENABLED_CONFIG)
        assert prefs.category is DrinkCategory.beer
        assert prefs.allergies == [AllergyType.gluten]

    @patch("drinkmatch.llm.groq_client.Groq")
    def test_fallback_on_api_error(self, mock_groq_cls):
        mock_groq_cls.return_value.chat.completions.create.side_effect = Exception("API timeout")
        prefs = extract_intent("a hoppy IPA", config=ENABLED_CONFIG)
        assert prefs.category is DrinkCategory.beer
        assert prefs.flavor.value == "bitter"

    @patch("drinkmatch.llm.groq_client.Groq")
    def test_fallback_on_empty_answer(self, mock_groq_cls):
        mock_groq_cls.return_value.chat.completions.create.return_value = _mock_groq_response("{}")
        prefs = extract_intent("a glass of wine", config=ENABLED_CONFIG)
        assert prefs.category is DrinkCategory.wine


# ── Clarification ────────────────────────────────────────────────────────


class TestClarification:
    def test_canned_question_when_disabled(self):
        result = analyze(PreferenceInput())
        assert generate_clarification(result, DISABLED_CONFIG) == QUESTIONS["category"][0]

    @patch("drinkmatch.llm.groq_client.Groq")
    def test_llm_question(self, mock_groq_cls):
        mock_groq_cls.return_value.chat.completions.create.return_value = _mock_groq_response(
            "What flavors are calling to you tonight?"
        )
        result = analyze(PreferenceInput(category="wine"))
        assert generate_clarification(result, ENABLED_CONFIG) == "What flavors are calling to you tonight?"

    @patch("drinkmatch.llm.groq_client.Groq")
    def test_llm_failure_uses_canned_question(self, mock_groq_cls):
        mock_groq_cls.return_value.chat.completions.create.side_effect = Exception("API timeout")
        result = analyze(PreferenceInput(category="wine"))
        assert generate_clarification(result, ENABLED_CONFIG) == result.message

    @patch("drinkmatch.llm.groq_client.Groq")
    def test_ready_result_skips_llm(self, mock_groq_cls):
        result = analyze(PreferenceInput(category="wine", flavor="sweet", strength="light"))
        assert generate_clarification(result, ENABLED_CONFIG) == READY_MESSAGE
        mock_groq_cls.assert_not_called()


# ── Conversation turns ───────────────────────────────────────────────────


class TestHandleTurn:
    def test_multi_turn_until_ready(self):
        state = ConversationState()

        state, result = handle_turn(state, "a sweet cocktail", DISABLED_CONFIG)
        assert not result.ready
        assert result.next_field == "strength"
        assert result.message == QUESTIONS["strength"][0]
        assert state.clarification_count == 1
        assert len(state.turns) == 2

        state, result = handle_turn(state, "light please", DISABLED_CONFIG)
        assert result.ready
        assert result.message == READY_MESSAGE
        assert state.preferences.category is DrinkCategory.cocktail
        assert state.preferences.strength is DrinkStrength.light
        assert state.clarification_count == 1
        assert [t.role for t in state.turns] == ["user", "assistant", "user", "assistant"]

    def test_history_capped_at_six_turns(self):
        state = ConversationState()
        for message in ("a cocktail", "sweet", "light", "but not gin"):
            state, _ = handle_turn(state, message, DISABLED_CONFIG)
        assert len(state.turns) == 6
        assert state.turns[-2].content == "but not gin"

    @patch("drinkmatch.llm.groq_client.Groq")
    def test_restriction_turn_keeps_choices(self, mock_groq_cls):
        mock_groq_cls.return_value.chat.completions.create.return_value = _mock_groq_response(
            json.dumps({"category": "spirit", "avoid": ["gin"]})
        )
        state = ConversationState(
            preferences=PreferenceInput(category="cocktail", flavor="sweet", strength="light"),
        )

        state, result = handle_turn(state, "but not gin", ENABLED_CONFIG)

        assert result.ready
        assert state.preferences.category is DrinkCategory.cocktail
        assert state.preferences.excluded_ingredients == ["gin"]
        assert result.advice.startswith("No problem! I'll avoid gin")

    def test_first_message_with_restriction_keeps_category(self):
        state, result = handle_turn(ConversationState(), "A cocktail but not gin", DISABLED_CONFIG)
        assert state.preferences.category is DrinkCategory.cocktail
        assert state.preferences.excluded_ingredients == ["gin"]
        assert result.next_field == "flavor"

    def test_stated_allergy_recorded(self):
        state = ConversationState(
            preferences=PreferenceInput(category="cocktail", flavor="sweet", strength="light"),
        )
        state, _ = handle_turn(state, "I have a nut allergy", DISABLED_CONFIG)
        assert state.preferences.allergies == [AllergyType.nuts]
        assert state.preferences.category is DrinkCategory.cocktail

    def test_message_parsed_once_per_turn(self):
        with patch(
            "drinkmatch.chat.intent.extract_with_restriction", wraps=extract_with_restriction,
        ) as spy:
            handle_turn(ConversationState(), "a sweet cocktail but not gin", DISABLED_CONFIG)
        assert spy.call_count == 1
