"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from healer.adapters.openai_generation_client import OpenAIGenerationClient
from healer.config import Settings
from healer.services.recommendations import GenerationClient, RecommendationService
from healer.services.sessions import InMemorySessionStore, SessionService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    generation_client: GenerationClient
    recommendation_service: RecommendationService
    session_service: SessionService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    generation_client = OpenAIGenerationClient.create(resolved_settings.openai_api_key)
    recommendation_service = RecommendationService(
        client=generation_client,
        model=resolved_settings.openai_model,
        reasoning_effort=resolved_settings.openai_reasoning_effort,
        store=resolved_settings.openai_store,
    )
    session_service = SessionService(
        repository=InMemorySessionStore(
            ttl_seconds=resolved_settings.session_ttl_seconds
        ),
        recommendation_service=recommendation_service,
    )

    async def close_resources() -> None:
        await generation_client.close()

    return AppContainer(
        settings=resolved_settings,
        generation_client=generation_client,
        recommendation_service=recommendation_service,
        session_service=session_service,
        close_resources=close_resources,
    )
