"""Tests for meal recommendation requests."""

import asyncio
import json

import pytest

from healer.domain.errors import MealPlanParseError
from healer.domain.meals import RecommendationResult, RecommendationSource
from healer.services import recommendations
from healer.services.profiles import normalize_profile
from healer.services.recommendations import (
    EMPTY_RESULT_MESSAGE,
    RecommendationService,
    parse_meal_plan,
)
from tests.conftest import (
    FakeGenerationClient,
    base_form,
    failing_client,
    make_meal,
    meal_plan_text,
)


def _service(client: FakeGenerationClient) -> RecommendationService:
    return RecommendationService(
        client=client, model="test-model", reasoning_effort="low", store=False
    )


def test_recommend_returns_generated_meals() -> None:
    client = FakeGenerationClient()
    profile = normalize_profile(base_form())

    result = asyncio.run(_service(client).recommend(profile))

    assert result.ok
    assert result.source is RecommendationSource.GENERATED
    assert [meal.name for meal in result.meals] == [
        "Meal 1",
        "Meal 2",
        "Meal 3",
        "Meal 4",
        "Meal 5",
    ]
    assert client.calls == [
        {"model": "test-model", "reasoning_effort": "low", "store": False}
    ]


def test_recommend_embeds_profile_in_prompt() -> None:
    client = FakeGenerationClient()
    profile = normalize_profile(
        base_form(allergies=["Peanuts"], bpLevel="High", healthIssues=["Fever"])
    )

    asyncio.run(_service(client).recommend(profile))

    prompt = client.prompts[0]
    assert "Jane Doe" in prompt
    assert "Peanuts" in prompt
    assert "Fever" in prompt
    assert "<500mg" in prompt


def test_recommend_falls_back_on_service_error() -> None:
    profile = normalize_profile(base_form(bpLevel="High"))

    result = asyncio.run(_service(failing_client()).recommend(profile))

    assert result.ok
    assert result.source is RecommendationSource.FALLBACK
    assert len(result.meals) == 5
    assert all(meal.nutrients.sodium < 500 for meal in result.meals)


def test_recommend_falls_back_on_malformed_text() -> None:
    client = FakeGenerationClient(text="Sorry, I cannot help with that.")

    result = asyncio.run(_service(client).recommend(normalize_profile(base_form())))

    assert result.source is RecommendationSource.FALLBACK
    assert len(client.prompts) == 1


def test_recommend_falls_back_on_schema_violation() -> None:
    bad = json.dumps({"meals": [make_meal(ingredients=[])]})
    client = FakeGenerationClient(text=bad)

    result = asyncio.run(_service(client).recommend(normalize_profile(base_form())))

    assert result.source is RecommendationSource.FALLBACK


def test_recommend_falls_back_on_empty_meal_list() -> None:
    client = FakeGenerationClient(text='{"meals": []}')

    result = asyncio.run(_service(client).recommend(normalize_profile(base_form())))

    assert result.ok
    assert result.source is RecommendationSource.FALLBACK


def test_recommend_trims_extra_meals() -> None:
    client = FakeGenerationClient(text=meal_plan_text(7))

    result = asyncio.run(_service(client).recommend(normalize_profile(base_form())))

    assert len(result.meals) == 5
    assert result.meals[-1].name == "Meal 5"


def test_recommend_accepts_fewer_meals() -> None:
    client = FakeGenerationClient(text=meal_plan_text(3))

    result = asyncio.run(_service(client).recommend(normalize_profile(base_form())))

    assert result.source is RecommendationSource.GENERATED
    assert len(result.meals) == 3


def test_recommend_reports_failure_when_nothing_available(monkeypatch) -> None:
    monkeypatch.setattr(
        recommendations,
        "fallback_meal_plan",
        lambda profile: RecommendationResult(),
    )

    result = asyncio.run(
        _service(failing_client()).recommend(normalize_profile(base_form()))
    )

    assert not result.ok
    assert result.error == EMPTY_RESULT_MESSAGE


def test_parse_meal_plan_strips_code_fences() -> None:
    text = f"Here you go:\n```json\n{meal_plan_text(1)}\n```"

    meals = parse_meal_plan(text)

    assert meals[0].name == "Meal 1"


def test_parse_meal_plan_rejects_text_without_json() -> None:
    with pytest.raises(MealPlanParseError, match="No JSON object"):
        parse_meal_plan("no braces here")


def test_parse_meal_plan_rejects_invalid_json() -> None:
    with pytest.raises(MealPlanParseError, match="Invalid JSON"):
        parse_meal_plan('{"meals": [}')


def test_parse_meal_plan_ignores_braces_in_trailing_prose() -> None:
    text = meal_plan_text(1) + "\nNote: swap {salt} for herbs to taste."

    meals = parse_meal_plan(text)

    assert [meal.name for meal in meals] == ["Meal 1"]


@pytest.mark.parametrize(
    ("literal", "replacement"),
    [
        ('"matchScore": 90', '"matchScore": Infinity'),
        ('"totalCalories": 410', '"totalCalories": -Infinity'),
        ('"lentils": 330', '"lentils": NaN'),
        ('"protein": 24', '"protein": NaN'),
    ],
)
def test_parse_meal_plan_rejects_non_finite_numbers(
    literal: str, replacement: str
) -> None:
    text = meal_plan_text(1)
    assert literal in text

    with pytest.raises(MealPlanParseError):
        parse_meal_plan(text.replace(literal, replacement))


def test_recommend_falls_back_on_non_finite_numbers() -> None:
    text = meal_plan_text().replace('"matchScore": 90', '"matchScore": Infinity')
    client = FakeGenerationClient(text=text)

    result = asyncio.run(_service(client).recommend(normalize_profile(base_form())))

    assert result.ok
    assert result.source is RecommendationSource.FALLBACK


def test_parse_meal_plan_rejects_unreadable_cooking_time() -> None:
    text = json.dumps({"meals": [make_meal(cookingTime="a while")]})

    with pytest.raises(MealPlanParseError):
        parse_meal_plan(text)
