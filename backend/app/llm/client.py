"""LLM client for itinerary generation over an OpenAI-compatible API.

Security: the API key comes from settings (environment) only. The SDK's own
retries are disabled; retry, deadline and breaker are applied by the caller
through the resilient executor.
"""

import logging
from typing import Protocol

import httpx
from openai import AsyncOpenAI

from backend.app.config import Settings, secret_value
from backend.app.llm.prompts import SYSTEM_PROMPT
from backend.app.tools.errors import UpstreamError

logger = logging.getLogger(__name__)

SERVICE_NAME = "perplexity"


class LLMClient(Protocol):
    """Protocol for LLM client implementations."""

    model: str

    async def complete(self, prompt: str) -> str:
        """Return the model's raw text for ``prompt``.

        Raises:
            UpstreamError: empty content or missing choices
        """
        ...


class PerplexityClient:
    """Perplexity chat completions through the OpenAI SDK."""

    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: str = "https://api.perplexity.ai",
        http_client: httpx.AsyncClient | None = None,
    ):
        """Initialize client.

        Args:
            api_key: Perplexity API key (read from environment)
            model: Model name
            base_url: API base URL
            http_client: Optional httpx client (for testing with mocks)
        """
        self.client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            max_retries=0,
            http_client=http_client,
        )
        self.model = model

    async def complete(self, prompt: str) -> str:
        response = await self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            max_tokens=6000,
            temperature=0.2,
            top_p=0.9,
        )

        if not response.choices:
            raise UpstreamError(SERVICE_NAME, "response has no choices")
        content = response.choices[0].message.content or ""
        if not content.strip():
            raise UpstreamError(SERVICE_NAME, "empty completion")
        logger.info(f"Received {len(content)} chars from {self.model}")
        return content


def get_llm_client(
    settings: Settings, http_client: httpx.AsyncClient | None = None
) -> LLMClient | None:
    """Factory for the configured LLM client.

    Returns:
        PerplexityClient if an API key is configured, None otherwise
    """
    api_key = secret_value(settings.perplexity_api_key)
    if api_key is None:
        logger.warning("No Perplexity API key configured, itineraries use deterministic generation")
        return None
    logger.info(f"Using Perplexity client with model {settings.perplexity_model}")
    return PerplexityClient(
        api_key=api_key,
        model=settings.perplexity_model,
        base_url=settings.perplexity_base_url,
        http_client=http_client,
    )
