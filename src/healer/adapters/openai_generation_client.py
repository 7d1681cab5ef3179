"""OpenAI Responses API client for meal plan generation."""

import logging
from dataclasses import dataclass

from openai import AsyncOpenAI, OpenAIError

from healer.domain.errors import GenerationServiceError
from healer.services.recommendations import GenerationClient

_logger = logging.getLogger(__name__)


@dataclass
class OpenAIGenerationClient(GenerationClient):
    """Generation client backed by OpenAI Responses API."""

    client: AsyncOpenAI

    @classmethod
    def create(cls, api_key: str) -> "OpenAIGenerationClient":
        """Create an OpenAI generation client."""
        return cls(client=AsyncOpenAI(api_key=api_key))

    async def generate(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        prompt: str,
        schema: dict[str, object],
    ) -> str:
        """Call OpenAI Responses API and return the raw output text."""
        request_payload: dict[str, object] = {
            "model": model,
            "input": [
                {
                    "role": "user",
                    "content": [{"type": "input_text", "text": prompt}],
                }
            ],
            "text": {
                "format": {
                    "type": "json_schema",
                    "name": "meal_plan",
                    # Ingredient calories are an open map, which strict mode rejects.
                    "strict": False,
                    "schema": schema,
                }
            },
            "store": store,
        }
        if reasoning_effort:
            request_payload["reasoning"] = {"effort": reasoning_effort}

        try:
            response = await self.client.responses.create(**request_payload)
        except OpenAIError as exc:
            raise GenerationServiceError(f"OpenAI request failed: {exc}") from exc
        output_text = response.output_text
        if not output_text:
            raise GenerationServiceError("OpenAI returned an empty response")
        _logger.debug("OpenAI response: %s characters", len(output_text))
        return output_text

    async def close(self) -> None:
        await self.client.close()
