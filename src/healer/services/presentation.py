"""Filtering, chart data and form options shown alongside a meal plan."""

from collections.abc import Iterable
from dataclasses import dataclass

from healer.domain.meals import CookingTimeBucket, DietaryPreference, MealRecommendation
from healer.domain.profile import (
    ActivityLevel,
    BloodPressureLevel,
    CholesterolLevel,
    Gender,
    HealthProfile,
)

FILTER_ALL = "All"

ALLERGY_OPTIONS = (
    "Gluten",
    "Dairy",
    "Nuts",
    "Shellfish",
    "Eggs",
    "Soy",
    "Fish",
    "Sesame",
    "Mustard",
    "Celery",
    "Lupin",
    "Molluscs",
    "Sulphites",
)

HEALTH_ISSUE_OPTIONS = (
    "Fever",
    "Common Cold",
    "Cough (Dry & Wet)",
    "Sore Throat",
    "Nasal Congestion",
    "Nausea & Vomiting",
    "Diarrhea",
    "Constipation",
    "Acidity & Heartburn",
    "Indigestion (Dyspepsia)",
    "Bloating & Gas",
    "Weak Immune System",
    "Fatigue & Low Energy",
    "Headaches & Migraines",
    "Dehydration",
    "Mild Food Poisoning",
    "Stomach Upset",
    "Loss of Appetite",
    "Joint Pain & Inflammation",
    "Skin Issues (Mild Acne, Dry Skin)",
)

FORM_OPTIONS: dict[str, tuple[str, ...]] = {
    "genders": tuple(option.value for option in Gender),
    "bloodPressureLevels": tuple(option.value for option in BloodPressureLevel),
    "cholesterolLevels": tuple(option.value for option in CholesterolLevel),
    "activityLevels": tuple(option.value for option in ActivityLevel),
    "allergies": ALLERGY_OPTIONS,
    "healthIssues": HEALTH_ISSUE_OPTIONS,
    "dietaryFilters": (FILTER_ALL, *(option.value for option in DietaryPreference)),
    "cookingTimeFilters": (FILTER_ALL, *(option.value for option in CookingTimeBucket)),
}

NUTRIENT_LABELS = ("Protein", "Carbohydrates", "Fats", "Fiber", "Sugar")


@dataclass(frozen=True)
class ChartSeries:
    """Labels and values for a single pie or doughnut chart."""

    labels: tuple[str, ...]
    values: tuple[float, ...]


def filter_meals(
    meals: Iterable[MealRecommendation],
    dietary: str = FILTER_ALL,
    cooking_time: str = FILTER_ALL,
) -> list[MealRecommendation]:
    """Return meals matching both filters, keeping their original order.

    ``cooking_time`` accepts a bucket value ("15-30min") or its range marker
    ("15-30"). Unknown filter values raise ValueError.
    """
    dietary_filter = _dietary_filter(dietary)
    time_marker = _cooking_time_marker(cooking_time)
    selected = []
    for meal in meals:
        if dietary_filter is not None and meal.dietary_preference != dietary_filter:
            continue
        if time_marker is not None and time_marker not in meal.cooking_time.value:
            continue
        selected.append(meal)
    return selected


def ingredient_calorie_chart(meal: MealRecommendation) -> ChartSeries:
    return ChartSeries(
        labels=tuple(meal.ingredient_calories),
        values=tuple(meal.ingredient_calories.values()),
    )


def nutrient_split_chart(meal: MealRecommendation) -> ChartSeries:
    nutrients = meal.nutrients
    return ChartSeries(
        labels=NUTRIENT_LABELS,
        values=(
            nutrients.protein,
            nutrients.carbs,
            nutrients.fats,
            nutrients.fiber,
            nutrients.sugar,
        ),
    )


def health_priorities(profile: HealthProfile) -> list[str]:
    """Describe the nutrition priorities applied to a profile's meal plan."""
    priorities = []
    if profile.has_high_blood_pressure:
        priorities.append(
            "Low sodium diet (<500mg per meal) for blood pressure management"
        )
    if profile.has_high_cholesterol:
        priorities.append("High fiber, low saturated fat for cholesterol control")
    if profile.has_glycemic_readings:
        priorities.append("Low glycemic index foods for blood sugar management")
    if profile.allergies:
        priorities.append(f"Allergen-free: Excluded {', '.join(profile.allergies)}")
    if profile.health_issues:
        priorities.append(
            f"Targeted nutrition for: {', '.join(profile.health_issues)}"
        )
    return priorities


def _dietary_filter(value: str) -> DietaryPreference | None:
    if value == FILTER_ALL:
        return None
    try:
        return DietaryPreference(value)
    except ValueError:
        raise ValueError(f"Unknown dietary filter: {value!r}") from None


def _cooking_time_marker(value: str) -> str | None:
    if value == FILTER_ALL:
        return None
    for bucket in CookingTimeBucket:
        marker = bucket.value.removesuffix("min")
        if value in {bucket.value, marker}:
            return marker
    raise ValueError(f"Unknown cooking time filter: {value!r}")
