"""Pydantic response models for the planner API."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from healer.domain.meals import MealRecommendation
from healer.domain.profile import HealthProfile
from healer.services.presentation import ChartSeries, health_priorities
from healer.services.sessions import PlannerSession, SessionStatus


class ProfileSummary(BaseModel):
    """Profile fields shown next to the meal plan."""

    name: str
    age: int
    gender: str
    height_cm: float
    weight_kg: float
    bmi: float | None = None
    bmi_category: str | None = None
    blood_pressure: str
    cholesterol: str
    diabetes_fasting: float | None = None
    diabetes_post_meal: float | None = None
    allergies: list[str]
    activity_level: str
    available_ingredients: str
    health_issues: list[str]
    submitted_at: datetime

    @classmethod
    def from_profile(cls, profile: HealthProfile) -> "ProfileSummary":
        return cls(
            name=profile.name,
            age=profile.age,
            gender=str(profile.gender),
            height_cm=profile.height_cm,
            weight_kg=profile.weight_kg,
            bmi=profile.bmi.value if profile.bmi else None,
            bmi_category=str(profile.bmi.category) if profile.bmi else None,
            blood_pressure=str(profile.blood_pressure),
            cholesterol=str(profile.cholesterol),
            diabetes_fasting=profile.glucose.fasting,
            diabetes_post_meal=profile.glucose.post_meal,
            allergies=list(profile.allergies),
            activity_level=str(profile.activity_level),
            available_ingredients=profile.available_ingredients,
            health_issues=list(profile.health_issues),
            submitted_at=profile.submitted_at,
        )


class SessionResponse(BaseModel):
    """Session state with the meals that pass the requested filters."""

    id: UUID
    status: SessionStatus
    generation: int
    source: str | None = None
    error: str | None = None
    actions: list[str]
    profile: ProfileSummary | None = None
    priorities: list[str]
    total_meals: int
    meals: list[dict[str, object]]

    @classmethod
    def from_session(
        cls, session: PlannerSession, meals: list[MealRecommendation] | None = None
    ) -> "SessionResponse":
        shown = list(session.meals) if meals is None else meals
        return cls(
            id=session.id,
            status=session.status,
            generation=session.generation,
            source=_source(session),
            error=session.error,
            actions=_actions(session),
            profile=(
                ProfileSummary.from_profile(session.profile)
                if session.profile
                else None
            ),
            priorities=health_priorities(session.profile) if session.profile else [],
            total_meals=len(session.meals),
            meals=[meal.model_dump(mode="json", by_alias=True) for meal in shown],
        )


class ChartResponse(BaseModel):
    """Chart data for one meal."""

    labels: list[str]
    values: list[float]

    @classmethod
    def from_series(cls, series: ChartSeries) -> "ChartResponse":
        return cls(labels=list(series.labels), values=list(series.values))


class MealChartsResponse(BaseModel):
    """Ingredient calorie and nutrient split charts for one meal."""

    meal: str
    ingredient_calories: ChartResponse
    nutrient_split: ChartResponse


def _actions(session: PlannerSession) -> list[str]:
    if session.status is SessionStatus.EMPTY:
        return ["submit"]
    if session.status is SessionStatus.PENDING:
        return ["reset"]
    if session.status is SessionStatus.FAILED:
        return ["retry", "reset"]
    return ["submit", "retry", "reset", "export"]


def _source(session: PlannerSession) -> str | None:
    if session.result is None or session.result.source is None:
        return None
    return str(session.result.source)
