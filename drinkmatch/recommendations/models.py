from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class DrinkCategory(str, Enum):
    cocktail = "cocktail"
    beer = "beer"
    wine = "wine"
    spirit = "spirit"
    non_alcoholic = "non-alcoholic"


class DrinkStrength(str, Enum):
    non_alcoholic = "non-alcoholic"
    light = "light"
    medium = "medium"
    strong = "strong"


def _lower_tags(values: list[str]) -> list[str]:
    return [v.strip().lower() for v in values if v and v.strip()]


class WeatherMatch(BaseModel):
    model_config = ConfigDict(frozen=True)

    temp_min: float
    temp_max: float
    ideal_temp: float
    conditions: list[str] = Field(default_factory=list)

    @field_validator("conditions")
    @classmethod
    def _lower_conditions(cls, value: list[str]) -> list[str]:
        return _lower_tags(value)

    @model_validator(mode="after")
    def _check_range(self) -> "WeatherMatch":
        if self.temp_max < self.temp_min:
            raise ValueError("temp_max must not be lower than temp_min")
        return self


class Drink(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    category: DrinkCategory
    description: str = ""
    strength: DrinkStrength
    abv: float = Field(default=0.0, ge=0.0, le=100.0)
    flavor_profile: list[str] = Field(default_factory=list)
    occasions: list[str] = Field(default_factory=list)
    ingredients: list[str] = Field(default_factory=list)
    weather_match: WeatherMatch | None = None
    happy_hour: bool = False
    happy_hour_times: str | None = None

    @field_validator("flavor_profile", "occasions")
    @classmethod
    def _lower(cls, value: list[str]) -> list[str]:
        return _lower_tags(value)


class DrinkFilters(BaseModel):
    """Categorical constraints derived from merged preferences.

    Empty lists impose no constraint.
    """

    categories: list[DrinkCategory] = Field(default_factory=list)
    flavors: list[str] = Field(default_factory=list)
    strengths: list[DrinkStrength] = Field(default_factory=list)
    occasions: list[str] = Field(default_factory=list)
    search: str | None = None
    excluded_ingredients: list[str] = Field(default_factory=list)


class DrinkRecommendation(BaseModel):
    drink: Drink
    score: int = Field(ge=0, le=100)
    reasons: list[str] = Field(min_length=1)
