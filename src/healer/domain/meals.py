"""Models for meal recommendations returned to the user."""

import math
import re
from dataclasses import dataclass
from enum import StrEnum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from healer.domain.errors import EmptyResultError

MEALS_PER_PLAN = 5


class DietaryPreference(StrEnum):
    """Dietary category of a recipe."""

    VEGETARIAN = "Vegetarian"
    EGGETARIAN = "Eggetarian"
    NON_VEGETARIAN = "Non-vegetarian"
    VEGAN = "Vegan"


class CookingTimeBucket(StrEnum):
    """Cooking time buckets used for filtering."""

    UNDER_15 = "<15min"
    FROM_15_TO_30 = "15-30min"
    FROM_30_TO_60 = "30-60min"
    OVER_60 = ">60min"


class RecommendationSource(StrEnum):
    """Where a set of recommendations came from."""

    GENERATED = "generated"
    FALLBACK = "fallback"


_DIETARY_KEYS = {
    re.sub(r"[^a-z]", "", preference.value.lower()): preference
    for preference in DietaryPreference
}

_BUCKET_MARKERS = (
    ("<15", CookingTimeBucket.UNDER_15),
    ("15-30", CookingTimeBucket.FROM_15_TO_30),
    ("30-60", CookingTimeBucket.FROM_30_TO_60),
    (">60", CookingTimeBucket.OVER_60),
)


def normalize_dietary_preference(value: str) -> DietaryPreference:
    """Map free-form dietary labels such as 'Non Vegetarian' to the enum."""
    key = re.sub(r"[^a-z]", "", value.lower())
    if key not in _DIETARY_KEYS:
        raise ValueError(f"Unknown dietary preference: {value!r}")
    return _DIETARY_KEYS[key]


def normalize_cooking_time(value: str) -> CookingTimeBucket:
    """Resolve a cooking time description to one of the four buckets.

    Canonical markers ("<15", "15-30", "30-60", ">60") win. Otherwise the
    upper end of the stated range is mapped to its bucket, so "25-30min"
    becomes "15-30min" and "1 hour 10 min" becomes ">60min".
    """
    text = value.strip().lower().replace(" ", "").replace("–", "-")
    for marker, bucket in _BUCKET_MARKERS:
        if marker in text:
            return bucket
    numbers = [int(number) for number in re.findall(r"\d+", text)]
    if not numbers:
        raise ValueError(f"Cannot read a cooking time from {value!r}")
    hours = re.search(r"(\d+)h", text)
    if hours:
        minutes = int(hours.group(1)) * 60
        extra = re.search(r"(\d+)m", text[hours.end() :])
        if extra:
            minutes += int(extra.group(1))
    else:
        minutes = max(numbers)
    if minutes < 15:
        return CookingTimeBucket.UNDER_15
    if minutes <= 30:
        return CookingTimeBucket.FROM_15_TO_30
    if minutes <= 60:
        return CookingTimeBucket.FROM_30_TO_60
    return CookingTimeBucket.OVER_60


class Nutrients(BaseModel):
    """Per-serving nutrient breakdown in grams (sodium in mg)."""

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    protein: float = Field(ge=0)
    carbs: float = Field(ge=0)
    fats: float = Field(ge=0)
    fiber: float = Field(ge=0)
    sugar: float = Field(ge=0)
    sodium: float | None = Field(default=None, ge=0)


class MealRecommendation(BaseModel):
    """A single recipe recommendation."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        str_strip_whitespace=True,
        allow_inf_nan=False,
    )

    name: str = Field(min_length=1)
    dietary_preference: DietaryPreference
    cooking_time: CookingTimeBucket
    total_calories: int = Field(ge=0)
    ingredients: list[Annotated[str, Field(min_length=1)]] = Field(min_length=1)
    ingredient_calories: dict[str, float]
    nutrients: Nutrients
    steps: list[Annotated[str, Field(min_length=1)]] = Field(min_length=1)
    key_benefits: str | None = None
    why_this_helps: str | None = None
    match_score: int = Field(ge=0, le=100)

    @field_validator("dietary_preference", mode="before")
    @classmethod
    def _parse_dietary_preference(cls, value: object) -> object:
        if isinstance(value, str):
            return normalize_dietary_preference(value)
        return value

    @field_validator("cooking_time", mode="before")
    @classmethod
    def _parse_cooking_time(cls, value: object) -> object:
        if isinstance(value, str):
            return normalize_cooking_time(value)
        return value

    @field_validator("total_calories", "match_score", mode="before")
    @classmethod
    def _round_numbers(cls, value: object) -> object:
        if isinstance(value, float) and math.isfinite(value):
            return round(value)
        return value

    @field_validator("ingredient_calories")
    @classmethod
    def _check_calories(cls, value: dict[str, float]) -> dict[str, float]:
        for ingredient, calories in value.items():
            if calories < 0:
                raise ValueError(f"Negative calories for {ingredient!r}")
        return value


class MealPlanPayload(BaseModel):
    """Top-level shape of a generation response."""

    meals: list[MealRecommendation]


@dataclass(frozen=True)
class RecommendationResult:
    """Either a non-empty list of meals or a user-facing failure message."""

    meals: tuple[MealRecommendation, ...] = ()
    source: RecommendationSource | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and bool(self.meals)

    def require_meals(self) -> tuple[MealRecommendation, ...]:
        """Return the meals, raising EmptyResultError for a failed result."""
        if not self.ok:
            raise EmptyResultError(self.error or "No meals available")
        return self.meals

    @classmethod
    def success(
        cls, meals: list[MealRecommendation], source: RecommendationSource
    ) -> "RecommendationResult":
        return cls(meals=tuple(meals), source=source)

    @classmethod
    def failure(cls, message: str) -> "RecommendationResult":
        return cls(error=message)
