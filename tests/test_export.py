"""Tests for PDF export."""

import re

from healer.domain.meals import MealRecommendation
from healer.services.export import export_filename, render_meal_plan_pdf
from healer.services.fallback import fallback_meal_plan
from healer.services.profiles import normalize_profile
from tests.conftest import base_form, make_meal


def test_export_filename_replaces_whitespace_runs() -> None:
    assert export_filename("Jane  Q Doe") == "Jane_Q_Doe_HEALER_Meal_Plan.pdf"
    assert export_filename("Solo") == "Solo_HEALER_Meal_Plan.pdf"


def test_render_meal_plan_pdf_returns_pdf_bytes() -> None:
    profile = normalize_profile(
        base_form(bpLevel="High", allergies=["Nuts"], healthIssues=["Fever"])
    )
    meals = fallback_meal_plan(profile).meals

    content = render_meal_plan_pdf(profile, meals)

    assert content.startswith(b"%PDF")
    assert content.rstrip().endswith(b"%%EOF")


def test_long_plan_spans_several_pages() -> None:
    profile = normalize_profile(base_form())
    short = render_meal_plan_pdf(
        profile, [MealRecommendation.model_validate(make_meal())]
    )
    long_steps = [f"Step {index}: stir gently and keep tasting" for index in range(80)]
    long = render_meal_plan_pdf(
        profile,
        [
            MealRecommendation.model_validate(make_meal(steps=long_steps)),
            MealRecommendation.model_validate(make_meal(steps=long_steps)),
        ],
    )

    assert _page_count(long) > _page_count(short) >= 2


def test_render_handles_minimal_meals() -> None:
    profile = normalize_profile(base_form())
    meal = MealRecommendation.model_validate(
        make_meal(keyBenefits=None, whyThisHelps=None, ingredientCalories={})
    )

    assert render_meal_plan_pdf(profile, [meal]).startswith(b"%PDF")


def _page_count(content: bytes) -> int:
    return len(re.findall(rb"/Type\s*/Page(?!s)", content))
