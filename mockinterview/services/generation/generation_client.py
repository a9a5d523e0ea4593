"""
Generation Client

This service sends a prompt to the hosted text-generation service and turns the
reply into structured data. The service is reached through its
OpenAI-compatible chat completions endpoint, so any compatible provider can be
configured through the AI_* settings.

Failures are split into two kinds so callers can choose a policy:
- UpstreamError: the request itself failed (network, timeout, provider error).
  Retrying later may help.
- MalformedResponseError: the provider answered, but the text is not the JSON
  we asked for. Retrying the same prompt is unlikely to help.

No retries happen here. The AsyncOpenAI client is created with max_retries=0
for the same reason.

Dependencies:
- openai: For the AsyncOpenAI client and its error types
- pydantic: For validating parsed JSON into result models
- loguru: For logging operations
"""

from typing import Any, Type, TypeVar
import openai
from openai import AsyncOpenAI
from pydantic import TypeAdapter, ValidationError as PydanticValidationError
from loguru import logger
from mockinterview.errors.exceptions import MalformedResponseError, UpstreamError
from mockinterview.helper.response_normalizer import normalize_response

T = TypeVar("T")


class GenerationClient:
    """
    Narrow interface over the text-generation service.

    Args:
        client: AsyncOpenAI client configured with base URL, key and timeout
        model: Model identifier sent with every request
    """

    def __init__(self, client: AsyncOpenAI, model: str):
        self.client = client
        self.model = model

    async def complete(self, prompt: str) -> str:
        """
        Send a prompt and return the raw reply text.

        Raises:
            UpstreamError: If the request fails or times out
        """
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
            )
        except openai.APITimeoutError as e:
            logger.error(f"Generation request to {self.model} timed out")
            raise UpstreamError(error=f"Request timed out: {e}") from e
        except openai.OpenAIError as e:
            logger.error(f"Generation request to {self.model} failed: {e}")
            raise UpstreamError(error=str(e)) from e

        if not response.choices:
            raise MalformedResponseError(error="Generation service returned no choices")

        content = response.choices[0].message.content
        logger.debug(f"Raw generation output ({self.model}): {content!r}")
        return content

    async def generate(self, prompt: str) -> Any:
        """
        Send a prompt and return the reply parsed as JSON.

        Raises:
            UpstreamError: If the request fails or times out
            MalformedResponseError: If the reply is not valid JSON after fence stripping
        """
        content = await self.complete(prompt)
        return normalize_response(content)

    async def generate_structured(self, prompt: str, result_type: Type[T]) -> T:
        """
        Send a prompt and validate the parsed reply into result_type.

        Args:
            prompt: Instruction text
            result_type: A pydantic model or a typing construct such as List[Model]

        Raises:
            UpstreamError: If the request fails or times out
            MalformedResponseError: If the reply is not JSON or does not match result_type
        """
        data = await self.generate(prompt)
        try:
            return TypeAdapter(result_type).validate_python(data)
        except PydanticValidationError as e:
            logger.error(f"Generation output does not match {getattr(result_type, '__name__', result_type)}: {e}")
            raise MalformedResponseError(error=f"Unexpected response shape: {e.error_count()} validation error(s)") from e
