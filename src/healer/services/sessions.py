"""Planner session state and the controller that drives it."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime, timedelta
from enum import StrEnum
from typing import Protocol
from uuid import UUID, uuid4

from healer.domain.errors import (
    EmptyResultError,
    SessionNotFoundError,
    SessionStateError,
)
from healer.domain.meals import MealRecommendation, RecommendationResult
from healer.domain.profile import HealthProfile
from healer.services.profiles import normalize_profile
from healer.services.recommendations import RecommendationService

_logger = logging.getLogger(__name__)

DEFAULT_SESSION_TTL_SECONDS = 3600


class SessionStatus(StrEnum):
    """Lifecycle of a planner session."""

    EMPTY = "empty"
    PENDING = "pending"
    READY = "ready"
    FAILED = "failed"


@dataclass(frozen=True)
class PlannerSession:
    """Snapshot of one user's planner state."""

    id: UUID
    status: SessionStatus = SessionStatus.EMPTY
    generation: int = 0
    profile: HealthProfile | None = None
    result: RecommendationResult | None = None
    error: str | None = None
    updated_at: datetime = field(default_factory=lambda: datetime.now(tz=UTC))

    @property
    def meals(self) -> tuple[MealRecommendation, ...]:
        if self.result is None:
            return ()
        return self.result.meals


class SessionRepository(Protocol):
    """Storage interface for planner sessions."""

    def get(self, session_id: UUID) -> PlannerSession | None:
        """Return a session by id, if present."""

    def save(self, session: PlannerSession) -> None:
        """Insert or replace a session."""


@dataclass
class _StoredSession:
    session: PlannerSession
    expires_at: datetime


class InMemorySessionStore(SessionRepository):
    """Process-local session storage with idle expiry.

    Every save pushes a session's expiry ``ttl_seconds`` into the future.
    Expired sessions are dropped on read and pruned on every save.
    """

    def __init__(self, ttl_seconds: int = DEFAULT_SESSION_TTL_SECONDS) -> None:
        self._ttl = timedelta(seconds=ttl_seconds)
        self._entries: dict[UUID, _StoredSession] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, session_id: UUID) -> PlannerSession | None:
        entry = self._entries.get(session_id)
        if entry is None:
            return None
        if datetime.now(tz=UTC) >= entry.expires_at:
            self._entries.pop(session_id, None)
            return None
        return entry.session

    def save(self, session: PlannerSession) -> None:
        now = datetime.now(tz=UTC)
        expired = [
            key for key, entry in self._entries.items() if now >= entry.expires_at
        ]
        for key in expired:
            del self._entries[key]
        if expired:
            _logger.info("Pruned %s expired sessions", len(expired))
        self._entries[session.id] = _StoredSession(
            session=session, expires_at=now + self._ttl
        )


@dataclass
class SessionService:
    """Runs submissions, retries and resets against stored sessions.

    Every state change that starts or abandons a request bumps the session's
    generation. A response is applied only if its generation is still the
    latest one when it arrives.
    """

    repository: SessionRepository
    recommendation_service: RecommendationService

    def start(self) -> PlannerSession:
        """Create an empty session."""
        session = PlannerSession(id=uuid4())
        self.repository.save(session)
        _logger.info("Started session %s", session.id)
        return session

    def get(self, session_id: UUID) -> PlannerSession:
        session = self.repository.get(session_id)
        if session is None:
            raise SessionNotFoundError(f"Session {session_id} not found")
        return session

    async def submit(
        self, session_id: UUID, raw_form: Mapping[str, object]
    ) -> PlannerSession:
        """Validate a form and request a meal plan for it.

        Raises ProfileValidationError before any request is made; the stored
        session is left unchanged in that case.
        """
        self.get(session_id)
        profile = normalize_profile(raw_form)
        return await self._request(session_id, profile)

    async def retry(self, session_id: UUID) -> PlannerSession:
        """Request a new meal plan for the last submitted profile."""
        session = self.get(session_id)
        if session.profile is None:
            raise SessionStateError("Nothing to retry; submit a profile first")
        return await self._request(session_id, session.profile)

    def reset(self, session_id: UUID) -> PlannerSession:
        """Discard the profile and results and ignore any pending response."""
        session = self.get(session_id)
        cleared = PlannerSession(id=session.id, generation=session.generation + 1)
        self.repository.save(cleared)
        _logger.info("Reset session %s", session_id)
        return cleared

    def meal_plan(
        self, session_id: UUID
    ) -> tuple[HealthProfile, tuple[MealRecommendation, ...]]:
        """Return the profile and meals of a ready session."""
        session = self.get(session_id)
        if session.status is not SessionStatus.READY or session.profile is None:
            raise SessionStateError("Meal plan is not ready")
        return session.profile, session.result.require_meals()

    async def _request(
        self, session_id: UUID, profile: HealthProfile
    ) -> PlannerSession:
        session = self.get(session_id)
        generation = session.generation + 1
        self.repository.save(
            PlannerSession(
                id=session.id,
                status=SessionStatus.PENDING,
                generation=generation,
                profile=profile,
            )
        )
        result = await self.recommendation_service.recommend(profile)
        return self._apply(session_id, generation, result)

    def _apply(
        self, session_id: UUID, generation: int, result: RecommendationResult
    ) -> PlannerSession:
        current = self.get(session_id)
        if current.generation != generation:
            _logger.info(
                "Discarding stale result for session %s (generation %s, current %s)",
                session_id,
                generation,
                current.generation,
            )
            return current

        try:
            result.require_meals()
        except EmptyResultError as exc:
            updated = replace(
                current,
                status=SessionStatus.FAILED,
                result=result,
                error=str(exc),
                updated_at=datetime.now(tz=UTC),
            )
        else:
            updated = replace(
                current,
                status=SessionStatus.READY,
                result=result,
                error=None,
                updated_at=datetime.now(tz=UTC),
            )
        self.repository.save(updated)
        _logger.info("Session %s is %s", session_id, updated.status)
        return updated
