from __future__ import annotations

from enum import Enum
from typing import Literal, Union

from pydantic import BaseModel, Field, field_validator

from ..allergens.rules import AllergyType
from ..recommendations.models import DrinkCategory, DrinkStrength


class FlavorPreference(str, Enum):
    crisp = "crisp"
    smokey = "smokey"
    sweet = "sweet"
    bitter = "bitter"
    sour = "sour"
    smooth = "smooth"


class AdventureLevel(str, Enum):
    classic = "classic"
    bold = "bold"
    fruity = "fruity"
    simple = "simple"


class SourceKind(str, Enum):
    quiz = "quiz"
    ai = "ai"
    profile = "profile"


class Intensity(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"


CategoryChoice = Union[DrinkCategory, Literal["any"]]

# Fields that count toward confidence, in follow-up question priority order.
CORE_FIELDS = ("category", "flavor", "strength", "occasion", "allergies")


class PreferenceInput(BaseModel):
    """One source of preferences: quiz answers, chat guesses or a stored profile.

    Every field is optional until the user answers it.
    """

    category: CategoryChoice | None = None
    flavor: FlavorPreference | None = None
    strength: DrinkStrength | None = None
    occasion: str | None = None
    adventure: AdventureLevel | None = None
    search: str | None = None
    allergies: list[AllergyType] | None = None
    excluded_ingredients: list[str] = Field(default_factory=list)
    use_weather: bool | None = None

    @field_validator("category", "flavor", "strength", "adventure", mode="before")
    @classmethod
    def _lower_choice(cls, value):
        if isinstance(value, str):
            return value.strip().lower() or None
        return value

    @field_validator("allergies", mode="before")
    @classmethod
    def _lower_allergies(cls, value):
        if isinstance(value, (list, tuple, set)):
            return [v.strip().lower() if isinstance(v, str) else v for v in value]
        return value

    @field_validator("occasion", "search")
    @classmethod
    def _blank_to_none(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.strip()
        return value or None

    @field_validator("occasion")
    @classmethod
    def _lower_occasion(cls, value: str | None) -> str | None:
        return value.lower() if value else value

    @field_validator("excluded_ingredients")
    @classmethod
    def _lower_exclusions(cls, value: list[str]) -> list[str]:
        seen: list[str] = []
        for item in value:
            item = item.strip().lower()
            if item and item not in seen:
                seen.append(item)
        return seen


class PreferenceSource(BaseModel):
    kind: SourceKind
    preferences: PreferenceInput


class MergedPreferences(BaseModel):
    category: CategoryChoice | None = None
    flavor: FlavorPreference | None = None
    strength: DrinkStrength | None = None
    occasion: str | None = None
    adventure: AdventureLevel | None = None
    search: str | None = None
    allergies: list[AllergyType] = Field(default_factory=list)
    excluded_ingredients: list[str] = Field(default_factory=list)
    use_weather: bool = True
    confidence: int = Field(default=0, ge=0, le=100)
    ready: bool = False
    category_intensity: dict[str, Intensity] = Field(default_factory=dict)
    flavor_intensity: dict[str, Intensity] = Field(default_factory=dict)
    provenance: dict[str, SourceKind] = Field(default_factory=dict)


class PreferenceValidation(BaseModel):
    is_valid: bool
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    completeness: int = Field(default=0, ge=0, le=100)
