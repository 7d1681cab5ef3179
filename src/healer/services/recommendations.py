"""Meal recommendation requests with validation and fallback."""

import json
import logging
import re
from dataclasses import dataclass
from typing import Protocol

from pydantic import ValidationError

from healer.domain.errors import GenerationServiceError, MealPlanParseError
from healer.domain.meals import (
    MEALS_PER_PLAN,
    MealPlanPayload,
    MealRecommendation,
    RecommendationResult,
    RecommendationSource,
)
from healer.domain.profile import HealthProfile
from healer.services.fallback import fallback_meal_plan
from healer.services.prompts import MEAL_PLAN_SCHEMA, build_meal_prompt

EMPTY_RESULT_MESSAGE = "No meals were generated. Please try again with different inputs."

_CODE_FENCE = re.compile(r"```(?:json)?\s*", re.IGNORECASE)

_logger = logging.getLogger(__name__)


class GenerationClient(Protocol):
    """Interface for the text generation service."""

    async def generate(
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        prompt: str,
        schema: dict[str, object],
    ) -> str:
        """Return the raw response text for a prompt.

        Raises GenerationServiceError on transport, quota or timeout failures.
        """


@dataclass
class RecommendationService:
    """Builds meal requests, validates responses and falls back when needed."""

    client: GenerationClient
    model: str
    reasoning_effort: str | None = None
    store: bool = False

    async def recommend(self, profile: HealthProfile) -> RecommendationResult:
        """Return five meals for the profile, or a failure with a fixed message."""
        meals = await self._generate_meals(profile)
        if meals:
            return RecommendationResult.success(meals, RecommendationSource.GENERATED)

        result = fallback_meal_plan(profile)
        if not result.meals:
            _logger.error("Fallback produced no meals")
            return RecommendationResult.failure(EMPTY_RESULT_MESSAGE)
        return result

    async def _generate_meals(self, profile: HealthProfile) -> list[MealRecommendation]:
        """Ask the service once; an empty list means the fallback should be used."""
        prompt = build_meal_prompt(profile)
        try:
            text = await self.client.generate(
                model=self.model,
                reasoning_effort=self.reasoning_effort,
                store=self.store,
                prompt=prompt,
                schema=MEAL_PLAN_SCHEMA,
            )
        except GenerationServiceError as exc:
            _logger.warning("Generation service failed, using fallback: %s", exc)
            return []

        try:
            meals = parse_meal_plan(text)
        except MealPlanParseError as exc:
            _logger.warning("Unusable generation response, using fallback: %s", exc)
            return []

        if not meals:
            _logger.warning("Generation response had no meals, using fallback")
            return []
        if len(meals) > MEALS_PER_PLAN:
            _logger.info("Trimming %s generated meals to %s", len(meals), MEALS_PER_PLAN)
            meals = meals[:MEALS_PER_PLAN]
        _logger.info("Generated %s meals", len(meals))
        return meals


def parse_meal_plan(text: str) -> list[MealRecommendation]:
    """Extract and validate the meal plan JSON object from response text."""
    cleaned = _CODE_FENCE.sub("", text.strip())
    start = cleaned.find("{")
    if start == -1:
        raise MealPlanParseError("No JSON object found in response")
    decoder = json.JSONDecoder(parse_constant=_reject_constant)
    try:
        data, _ = decoder.raw_decode(cleaned, start)
    except json.JSONDecodeError as exc:
        raise MealPlanParseError(f"Invalid JSON: {exc}") from exc
    try:
        payload = MealPlanPayload.model_validate(data)
    except ValidationError as exc:
        raise MealPlanParseError(
            f"Response does not match the meal schema ({exc.error_count()} errors)"
        ) from exc
    return payload.meals


def _reject_constant(name: str) -> float:
    raise MealPlanParseError(f"Non-finite number {name} in response")
