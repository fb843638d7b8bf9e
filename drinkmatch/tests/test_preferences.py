from __future__ import annotations

import pytest
from pydantic import ValidationError

from drinkmatch.allergens.rules import AllergyType
from drinkmatch.preferences.mapper import (
    calculate_confidence,
    is_ready,
    merge_preferences,
    ordered_sources,
    to_filters,
)
from drinkmatch.preferences.models import (
    Intensity,
    MergedPreferences,
    PreferenceInput,
    SourceKind,
)
from drinkmatch.preferences.summary import summarize_preferences, validate_preferences
from drinkmatch.recommendations.models import DrinkCategory, DrinkStrength


# ── Input normalization ──────────────────────────────────────────────────


class TestPreferenceInput:
    def test_choices_are_case_folded(self):
        prefs = PreferenceInput(category="Wine", flavor="SWEET", strength=" Light ", allergies=["Gluten"])
        assert prefs.category is DrinkCategory.wine
        assert prefs.flavor.value == "sweet"
        assert prefs.strength is DrinkStrength.light
        assert prefs.allergies == [AllergyType.gluten]

    def test_any_category_allowed(self):
        assert PreferenceInput(category="any").category == "any"

    def test_unknown_category_rejected(self):
        with pytest.raises(ValidationError):
            PreferenceInput(category="sake")

    def test_unknown_allergy_rejected(self):
        with pytest.raises(ValidationError):
            PreferenceInput(allergies=["shellfish"])

    def test_blank_occasion_is_unset(self):
        assert PreferenceInput(occasion="   ").occasion is None

    def test_exclusions_deduplicated(self):
        prefs = PreferenceInput(excluded_ingredients=["Gin", "gin", " vodka "])
        assert prefs.excluded_ingredients == ["gin", "vodka"]


# ── Merging ──────────────────────────────────────────────────────────────


class TestMerge:
    def test_quiz_wins_over_ai(self):
        sources = ordered_sources(
            quiz=PreferenceInput(category="wine"),
            ai=PreferenceInput(category="beer", flavor="bitter"),
        )
        merged = merge_preferences(sources)
        assert merged.category is DrinkCategory.wine
        assert merged.flavor.value == "bitter"
        assert merged.provenance == {"category": SourceKind.quiz, "flavor": SourceKind.ai}

    def test_ordered_sources_skips_missing(self):
        sources = ordered_sources(profile=PreferenceInput(strength="strong"))
        assert [s.kind for s in sources] == [SourceKind.profile]

    def test_quiz_choices_get_high_intensity(self):
        merged = merge_preferences(ordered_sources(
            quiz=PreferenceInput(category="cocktail", flavor="sour"),
        ))
        assert merged.category_intensity == {"cocktail": Intensity.high}
        assert merged.flavor_intensity == {"sour": Intensity.high}

    def test_ai_choices_get_no_intensity(self):
        merged = merge_preferences(ordered_sources(ai=PreferenceInput(category="cocktail")))
        assert merged.category_intensity == {}

    def test_allergies_union_drops_none(self):
        merged = merge_preferences(ordered_sources(
            quiz=PreferenceInput(allergies=["none"]),
            profile=PreferenceInput(allergies=["gluten"]),
        ))
        assert merged.allergies == [AllergyType.gluten]

    def test_allergies_unioned_across_sources(self):
        merged = merge_preferences(ordered_sources(
            quiz=PreferenceInput(allergies=["dairy"]),
            ai=PreferenceInput(allergies=["nuts", "dairy"]),
        ))
        assert merged.allergies == [AllergyType.dairy, AllergyType.nuts]

    def test_only_none_stays_none(self):
        merged = merge_preferences(ordered_sources(quiz=PreferenceInput(allergies=["none"])))
        assert merged.allergies == [AllergyType.none]

    def test_unanswered_allergies_stay_empty(self):
        merged = merge_preferences(ordered_sources(quiz=PreferenceInput(allergies=[])))
        assert merged.allergies == []

    def test_exclusions_unioned(self):
        merged = merge_preferences(ordered_sources(
            quiz=PreferenceInput(excluded_ingredients=["gin"]),
            ai=PreferenceInput(excluded_ingredients=["vodka", "gin"]),
        ))
        assert merged.excluded_ingredients == ["gin", "vodka"]

    def test_use_weather_defaults_on(self):
        assert merge_preferences([]).use_weather is True
        merged = merge_preferences(ordered_sources(quiz=PreferenceInput(use_weather=False)))
        assert merged.use_weather is False

    def test_merged_readiness(self):
        merged = merge_preferences(ordered_sources(
            quiz=PreferenceInput(category="wine", flavor="sweet"),
            profile=PreferenceInput(allergies=["none"]),
        ))
        assert merged.confidence == 65
        assert merged.ready is True


# ── Confidence ───────────────────────────────────────────────────────────


class TestConfidence:
    def test_weights(self):
        assert calculate_confidence(PreferenceInput()) == 0
        assert calculate_confidence(PreferenceInput(category="wine")) == 30
        full = PreferenceInput(
            category="wine", flavor="sweet", strength="light", occasion="casual", allergies=["none"],
        )
        assert calculate_confidence(full) == 100

    def test_threshold(self):
        prefs = PreferenceInput(category="wine", flavor="sweet")
        assert not is_ready(prefs, calculate_confidence(prefs))  # 55

        prefs = PreferenceInput(category="wine", flavor="sweet", strength="light")
        assert is_ready(prefs, calculate_confidence(prefs))  # 75

    def test_essentials_required(self):
        prefs = PreferenceInput(strength="light", occasion="casual", allergies=["none"])
        assert not is_ready(prefs, 100)


# ── Filters ──────────────────────────────────────────────────────────────


class TestFilters:
    def test_full_mapping(self):
        merged = MergedPreferences(category="wine", flavor="sweet", strength="light", occasion="party")
        filters = to_filters(merged)
        assert filters.categories == [DrinkCategory.wine]
        assert filters.strengths == [DrinkStrength.light, DrinkStrength.non_alcoholic]
        assert filters.flavors == ["sweet", "fruity"]
        assert filters.occasions == ["party", "celebration"]

    def test_any_category_unconstrained(self):
        assert to_filters(MergedPreferences(category="any")).categories == []

    def test_adventure_used_without_category(self):
        filters = to_filters(MergedPreferences(adventure="bold"))
        assert filters.categories == [DrinkCategory.cocktail, DrinkCategory.spirit]

    def test_category_beats_adventure(self):
        filters = to_filters(MergedPreferences(category="beer", adventure="bold"))
        assert filters.categories == [DrinkCategory.beer]

    def test_unknown_occasion_filters_on_itself(self):
        assert to_filters(MergedPreferences(occasion="business")).occasions == ["business"]

    def test_empty_preferences_have_no_constraints(self):
        filters = to_filters(MergedPreferences())
        assert filters.categories == []
        assert filters.flavors == []
        assert filters.strengths == []
        assert filters.occasions == []


# ── Validation / summary ─────────────────────────────────────────────────


class TestValidation:
    def test_empty_allergy_answer_is_error(self):
        result = validate_preferences(PreferenceInput(category="wine", allergies=[]))
        assert not result.is_valid
        assert result.errors == ['At least one allergy option must be selected (including "none")']

    def test_none_with_specific_allergy_is_error(self):
        result = validate_preferences(PreferenceInput(allergies=["none", "gluten"]))
        assert not result.is_valid
        assert 'Cannot select "none" along with specific allergies' in result.errors

    def test_missing_essentials_is_warning(self):
        result = validate_preferences(PreferenceInput(strength="light"))
        assert result.is_valid
        assert len(result.warnings) == 1

    def test_completeness(self):
        assert validate_preferences(PreferenceInput()).completeness == 0
        assert validate_preferences(PreferenceInput(category="wine", occasion="casual")).completeness == 30
        full = PreferenceInput(
            category="wine", flavor="sweet", strength="light", allergies=["none"], occasion="casual",
        )
        assert validate_preferences(full).completeness == 100


class TestSummary:
    def test_full_summary(self):
        merged = MergedPreferences(
            category="wine", flavor="sweet", strength="light", allergies=["gluten"],
            excluded_ingredients=["gin"],
        )
        assert summarize_preferences(merged) == (
            "Prefers wines, enjoys sweet flavors, likes light strength drinks, avoids gluten, "
            "skips gin, considers weather in recommendations"
        )

    def test_non_alcoholic_wording(self):
        merged = MergedPreferences(category="non-alcoholic", use_weather=False)
        assert summarize_preferences(merged) == "Prefers non-alcoholic drinks"

    def test_no_preferences(self):
        assert summarize_preferences(MergedPreferences(use_weather=False)) == "No specific preferences set"
