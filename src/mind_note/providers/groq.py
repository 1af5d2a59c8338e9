"""Groq provider implementation (OpenAI-compatible chat completions)."""

import os

import openai
from openai import AsyncOpenAI

from mind_note.exceptions import AuthenticationError, ProviderError, RateLimitError
from mind_note.providers.base import BaseProvider

GROQ_BASE_URL = "https://api.groq.com/openai/v1"
DEFAULT_GROQ_MODEL = "llama-3.3-70b-versatile"


class GroqProvider(BaseProvider):
    """Groq provider using the OpenAI SDK against Groq's compatible endpoint."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        *,
        base_url: str = GROQ_BASE_URL,
        client: AsyncOpenAI | None = None,
    ):
        self.model = model or DEFAULT_GROQ_MODEL
        if client is not None:
            self.client = client
            return

        self.api_key = api_key or os.environ.get("GROQ_API_KEY")
        if not self.api_key:
            raise AuthenticationError(
                "No API key provided. Set GROQ_API_KEY environment variable "
                "or pass api_key parameter."
            )
        # The invoker owns the retry budget.
        self.client = AsyncOpenAI(api_key=self.api_key, base_url=base_url, max_retries=0)

    async def generate(self, prompt: str, *, temperature: float, max_output_tokens: int) -> str:
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                temperature=temperature,
                max_tokens=max_output_tokens,
            )
        except (openai.AuthenticationError, openai.PermissionDeniedError) as e:
            raise AuthenticationError(f"Invalid API key: {e}") from e
        except openai.RateLimitError as e:
            raise RateLimitError(f"API rate limit exceeded: {e}") from e
        except openai.OpenAIError as e:
            raise ProviderError(f"Groq request failed: {e}") from e

        if not response.choices:
            raise ProviderError("Groq returned no choices")
        return response.choices[0].message.content or ""

    def get_provider_metadata(self) -> dict[str, str]:
        return {"provider": "groq", "model": self.model}
