"""Shared test fixtures."""

import asyncio
import json
from dataclasses import dataclass, field

import pytest

from healer.config import Settings
from healer.containers import AppContainer
from healer.domain.errors import GenerationServiceError
from healer.services.recommendations import GenerationClient, RecommendationService
from healer.services.sessions import InMemorySessionStore, SessionService


def make_meal(**overrides: object) -> dict[str, object]:
    """Return a camelCase meal payload as the generation service sends it."""
    meal: dict[str, object] = {
        "name": "Lentil Spinach Soup",
        "dietaryPreference": "Vegan",
        "cookingTime": "15-30min",
        "totalCalories": 410,
        "ingredients": ["1 cup red lentils", "2 cups spinach"],
        "ingredientCalories": {"lentils": 330, "spinach": 80},
        "nutrients": {
            "protein": 24,
            "carbs": 60,
            "fats": 4,
            "fiber": 16,
            "sugar": 5,
            "sodium": 300,
        },
        "steps": ["Rinse the lentils", "Simmer with spinach for 20 minutes"],
        "keyBenefits": "High fiber",
        "whyThisHelps": "Fiber helps lower cholesterol.",
        "matchScore": 90,
    }
    meal.update(overrides)
    return meal


def meal_plan_text(count: int = 5) -> str:
    meals = [make_meal(name=f"Meal {index + 1}") for index in range(count)]
    return json.dumps({"meals": meals})


@dataclass
class FakeGenerationClient(GenerationClient):
    """Generation client returning canned text or raising a service error."""

    text: str = field(default_factory=meal_plan_text)
    error: Exception | None = None
    gate: asyncio.Event | None = None
    prompts: list[str] = field(default_factory=list)
    calls: list[dict[str, object]] = field(default_factory=list)
    closed: bool = False

    async def generate(
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        prompt: str,
        schema: dict[str, object],
    ) -> str:
        self.prompts.append(prompt)
        self.calls.append(
            {"model": model, "reasoning_effort": reasoning_effort, "store": store}
        )
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return self.text

    async def close(self) -> None:
        self.closed = True


def failing_client() -> FakeGenerationClient:
    return FakeGenerationClient(error=GenerationServiceError("quota exceeded"))


def base_form(**overrides: object) -> dict[str, object]:
    """Return a valid raw form submission in simple mode."""
    form: dict[str, object] = {
        "name": "Jane Doe",
        "age": "34",
        "gender": "Female",
        "height": "165",
        "weight": "62",
        "bpAdvancedMode": False,
        "bpLevel": "Normal",
        "cholesterolAdvancedMode": False,
        "cholesterolLevel": "Normal",
        "diabetesFasting": "",
        "diabetesPostMeal": "",
        "allergies": [],
        "activityLevel": "Active",
        "availableIngredients": "spinach, lentils",
        "healthIssues": [],
    }
    form.update(overrides)
    return form


@pytest.fixture
def settings() -> Settings:
    return Settings(
        openai_api_key="test-key",
        openai_model="test-model",
        openai_reasoning_effort="low",
        openai_store=False,
        environment="test",
    )


def build_test_container(
    settings: Settings, client: FakeGenerationClient | None = None
) -> AppContainer:
    generation_client = client or FakeGenerationClient()
    recommendation_service = RecommendationService(
        client=generation_client,
        model=settings.openai_model,
        reasoning_effort=settings.openai_reasoning_effort,
        store=settings.openai_store,
    )
    session_service = SessionService(
        repository=InMemorySessionStore(ttl_seconds=settings.session_ttl_seconds),
        recommendation_service=recommendation_service,
    )

    return AppContainer(
        settings=settings,
        generation_client=generation_client,
        recommendation_service=recommendation_service,
        session_service=session_service,
        close_resources=generation_client.close,
    )


@pytest.fixture
def container(settings: Settings) -> AppContainer:
    return build_test_container(settings)
