"""Prompt and output contract for meal plan generation."""

import json

from healer.domain.meals import MEALS_PER_PLAN, CookingTimeBucket, DietaryPreference
from healer.domain.profile import HealthProfile

_NUMBER = {"type": "number", "minimum": 0}
_STRING_LIST = {"type": "array", "items": {"type": "string"}, "minItems": 1}

MEAL_PLAN_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "meals": {
            "type": "array",
            "minItems": 1,
            "items": {
                "type": "object",
                "properties": {
                    "name": {"type": "string"},
                    "dietaryPreference": {
                        "type": "string",
                        "enum": [option.value for option in DietaryPreference],
                    },
                    "cookingTime": {
                        "type": "string",
                        "enum": [option.value for option in CookingTimeBucket],
                    },
                    "totalCalories": {"type": "integer", "minimum": 0},
                    "ingredients": _STRING_LIST,
                    "ingredientCalories": {
                        "type": "object",
                        "additionalProperties": _NUMBER,
                    },
                    "nutrients": {
                        "type": "object",
                        "properties": {
                            "protein": _NUMBER,
                            "carbs": _NUMBER,
                            "fats": _NUMBER,
                            "fiber": _NUMBER,
                            "sugar": _NUMBER,
                            "sodium": _NUMBER,
                        },
                        "required": ["protein", "carbs", "fats", "fiber", "sugar"],
                    },
                    "steps": _STRING_LIST,
                    "keyBenefits": {"type": "string"},
                    "whyThisHelps": {"type": "string"},
                    "matchScore": {"type": "integer", "minimum": 0, "maximum": 100},
                },
                "required": [
                    "name",
                    "dietaryPreference",
                    "cookingTime",
                    "totalCalories",
                    "ingredients",
                    "ingredientCalories",
                    "nutrients",
                    "steps",
                    "matchScore",
                ],
            },
        }
    },
    "required": ["meals"],
}

_EXAMPLE_MEAL = {
    "name": "Detailed Recipe Name with Health Benefits",
    "dietaryPreference": "Vegetarian/Eggetarian/Non-vegetarian/Vegan",
    "cookingTime": "15-30min",
    "totalCalories": 450,
    "ingredients": [
        "1 cup specific ingredient with quantity",
        "2 tablespoons another ingredient",
        "1/2 pound protein with details",
    ],
    "ingredientCalories": {"ingredient1": 150, "ingredient2": 80, "ingredient3": 220},
    "nutrients": {
        "protein": 25,
        "carbs": 45,
        "fats": 15,
        "fiber": 8,
        "sugar": 12,
        "sodium": 380,
    },
    "steps": [
        "Step 1: Detailed explanation including time and temperature",
        "Step 2: Next detailed step with specific instructions",
        "Step 3: Continue with clear, elaborate instructions",
    ],
    "keyBenefits": "Brief description of key health benefits for this user",
    "whyThisHelps": (
        "Detailed explanation of how this meal addresses specific health "
        "conditions with scientific rationale"
    ),
    "matchScore": 92,
}


def build_meal_prompt(profile: HealthProfile) -> str:
    """Build the generation prompt embedding every profile field."""
    allergies = ", ".join(profile.allergies)
    issues = ", ".join(profile.health_issues)
    bmi = str(profile.bmi) if profile.bmi else "Not calculated"
    categories = ", ".join(option.value for option in DietaryPreference)
    buckets = ", ".join(option.value for option in CookingTimeBucket)

    sections = [
        "You are an expert nutritionist, chef, and medical AI assistant. Based on "
        "the following comprehensive health profile, generate exactly "
        f"{MEALS_PER_PLAN} detailed, healthy meal recipes that will specifically "
        "address the person's health conditions and preferences.",
        "\n".join(
            [
                "HEALTH PROFILE:",
                f"- Name: {profile.name}",
                f"- Age: {profile.age}",
                f"- Gender: {profile.gender}",
                f"- Height: {profile.height_cm:g} cm",
                f"- Weight: {profile.weight_kg:g} kg",
                f"- BMI: {bmi}",
                f"- Blood Pressure: {profile.blood_pressure}",
                f"- Cholesterol: {profile.cholesterol}",
                f"- Diabetes Fasting: {_reading(profile.glucose.fasting)}",
                f"- Diabetes Post-Meal: {_reading(profile.glucose.post_meal)}",
                f"- Allergies: {allergies or 'None'}",
                f"- Activity Level: {profile.activity_level}",
                "- Available Ingredients: "
                f"{profile.available_ingredients or 'Not specified'}",
                f"- Health Issues: {issues or 'None specified'}",
            ]
        ),
        "\n".join(
            [
                "CRITICAL REQUIREMENTS:",
                "1. PRIORITIZE medical conditions: High BP -> Low-sodium "
                "(<500mg/serving), High Cholesterol -> High-fiber, low-saturated fat",
                "2. AVOID ALLERGIES: Strictly exclude any ingredients related to: "
                f"{allergies or 'none'}",
                "3. PREFER available ingredients: "
                f"{profile.available_ingredients or 'use common healthy ingredients'}",
                "4. Address specific health issues with targeted nutrition: "
                f"{issues or 'general health maintenance'}",
                *_condition_notes(profile),
            ]
        ),
        "\n".join(
            [
                "RECIPE REQUIREMENTS:",
                "1. Make recipes VERY DETAILED and PRACTICAL for home cooking",
                "2. Include exact quantities and measurements for all ingredients",
                "3. Provide clear, numbered step-by-step cooking instructions",
                "4. Specify cooking time, temperature, and techniques",
                "5. Include total calorie count and macronutrient breakdown",
                "6. Calculate ingredient-level calorie distribution",
                "7. Explain why this meal helps their specific conditions",
                f"8. Specify dietary category, exactly one of: {categories}",
                f"9. Specify the cooking time category, exactly one of: {buckets}",
            ]
        ),
        "Please respond with ONLY valid JSON in this exact format "
        "(no additional text):\n"
        + json.dumps({"meals": [_EXAMPLE_MEAL]}, indent=2),
        f"Generate exactly {MEALS_PER_PLAN} different meal recipes. Make each "
        "recipe medically appropriate, nutritionally balanced, and practical for "
        "home cooking.\nFocus on ingredients that specifically help with their "
        "health conditions and consider their activity level and available "
        "ingredients.",
    ]
    return "\n\n".join(sections)


def _reading(value: float | None) -> str:
    return f"{value:g} mg/dL" if value is not None else "Not specified"


def _condition_notes(profile: HealthProfile) -> list[str]:
    """Spell out which medical priorities apply to this profile."""
    notes = []
    if profile.has_high_blood_pressure:
        notes.append("- This person HAS high blood pressure: keep sodium under 500mg.")
    if profile.has_high_cholesterol:
        notes.append("- This person HAS high cholesterol: favor fiber, limit saturated fat.")
    if profile.has_glycemic_readings:
        notes.append("- Blood sugar readings were provided: prefer low glycemic index foods.")
    return notes
