"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from urllib.parse import quote
from uuid import UUID

from fastapi import Body, FastAPI, HTTPException, Request, Response, status

from healer.api.models import ChartResponse, MealChartsResponse, SessionResponse
from healer.app_logging import configure_logging
from healer.containers import AppContainer
from healer.domain.errors import (
    EmptyResultError,
    ProfileValidationError,
    SessionNotFoundError,
    SessionStateError,
)
from healer.services.export import export_filename, render_meal_plan_pdf
from healer.services.presentation import (
    FILTER_ALL,
    FORM_OPTIONS,
    filter_meals,
    ingredient_calorie_chart,
    nutrient_split_chart,
)
from healer.services.sessions import PlannerSession, SessionService, SessionStatus


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("Meal planner started (environment=%s)", container.settings.environment)
        yield
        await app.state.container.close_resources()

    app = FastAPI(title="HEALER meal planner", lifespan=lifespan)
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/form-options")
    async def form_options() -> dict[str, list[str]]:
        """Return the selectable values offered by the profile form."""
        return {key: list(values) for key, values in FORM_OPTIONS.items()}

    @app.post("/sessions", status_code=status.HTTP_201_CREATED)
    async def start_session(request: Request) -> SessionResponse:
        """Start an empty planner session."""
        session = _sessions(request).start()
        return SessionResponse.from_session(session)

    @app.get("/sessions/{session_id}")
    async def get_session(
        session_id: UUID,
        request: Request,
        dietary: str = FILTER_ALL,
        cooking_time: str = FILTER_ALL,
    ) -> SessionResponse:
        """Return session state with meals narrowed by the given filters."""
        session = _load(_sessions(request), session_id)
        try:
            meals = filter_meals(session.meals, dietary, cooking_time)
        except ValueError as exc:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
            ) from exc
        return SessionResponse.from_session(session, meals)

    @app.post("/sessions/{session_id}/submit")
    async def submit_profile(
        session_id: UUID,
        request: Request,
        raw_form: dict[str, object] = Body(...),
    ) -> SessionResponse:
        """Validate the profile form and request a meal plan."""
        try:
            session = await _sessions(request).submit(session_id, raw_form)
        except SessionNotFoundError as exc:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)
            ) from exc
        except ProfileValidationError as exc:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
            ) from exc
        return SessionResponse.from_session(session)

    @app.post("/sessions/{session_id}/retry")
    async def retry_session(session_id: UUID, request: Request) -> SessionResponse:
        """Request a new meal plan for the last submitted profile."""
        try:
            session = await _sessions(request).retry(session_id)
        except SessionNotFoundError as exc:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)
            ) from exc
        except SessionStateError as exc:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT, detail=str(exc)
            ) from exc
        return SessionResponse.from_session(session)

    @app.post("/sessions/{session_id}/reset")
    async def reset_session(session_id: UUID, request: Request) -> SessionResponse:
        """Clear the profile and meals of a session."""
        try:
            session = _sessions(request).reset(session_id)
        except SessionNotFoundError as exc:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)
            ) from exc
        return SessionResponse.from_session(session)

    @app.get("/sessions/{session_id}/meals/{index}/charts")
    async def meal_charts(
        session_id: UUID, index: int, request: Request
    ) -> MealChartsResponse:
        """Return chart data for the meal at ``index`` in the full plan."""
        session = _load(_sessions(request), session_id)
        if session.status is not SessionStatus.READY:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT, detail="Meal plan is not ready"
            )
        if not 0 <= index < len(session.meals):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Meal not found"
            )
        meal = session.meals[index]
        return MealChartsResponse(
            meal=meal.name,
            ingredient_calories=ChartResponse.from_series(
                ingredient_calorie_chart(meal)
            ),
            nutrient_split=ChartResponse.from_series(nutrient_split_chart(meal)),
        )

    @app.get("/sessions/{session_id}/export")
    async def export_session(session_id: UUID, request: Request) -> Response:
        """Download the meal plan as a PDF."""
        try:
            profile, meals = _sessions(request).meal_plan(session_id)
        except SessionNotFoundError as exc:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)
            ) from exc
        except (SessionStateError, EmptyResultError) as exc:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT, detail=str(exc)
            ) from exc
        content = render_meal_plan_pdf(profile, meals)
        filename = export_filename(profile.name)
        logger.info("Exported meal plan for session %s", session_id)
        return Response(
            content=content,
            media_type="application/pdf",
            headers={
                "Content-Disposition": f"attachment; filename*=UTF-8''{quote(filename)}"
            },
        )

    return app


def _sessions(request: Request) -> SessionService:
    state_container: AppContainer = request.app.state.container
    return state_container.session_service


def _load(service: SessionService, session_id: UUID) -> PlannerSession:
    try:
        return service.get(session_id)
    except SessionNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)
        ) from exc
