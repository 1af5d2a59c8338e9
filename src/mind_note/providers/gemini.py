"""Gemini provider implementation."""

import os

from google import genai
from google.genai import errors, types

from mind_note.exceptions import AuthenticationError, ProviderError, RateLimitError
from mind_note.providers.base import BaseProvider

DEFAULT_GEMINI_MODEL = "gemini-2.0-flash"


class GeminiProvider(BaseProvider):
    """Gemini API provider."""

    def __init__(self, api_key: str | None = None, model: str | None = None, *, client=None):
        """Initialize Gemini provider.

        Args:
            api_key: Gemini API key. Falls back to GEMINI_API_KEY env var.
            model: Model name to use.
            client: Preconfigured `genai.Client`, mainly for tests.

        Raises:
            AuthenticationError: If no API key is provided or found.
        """
        self.model = model or DEFAULT_GEMINI_MODEL
        if client is not None:
            self.client = client
            return

        self.api_key = api_key or os.environ.get("GEMINI_API_KEY")
        if not self.api_key:
            raise AuthenticationError(
                "No API key provided. Set GEMINI_API_KEY environment variable "
                "or pass api_key parameter."
            )
        self.client = genai.Client(api_key=self.api_key)

    async def generate(self, prompt: str, *, temperature: float, max_output_tokens: int) -> str:
        """Generate refinement text with Gemini.

        Raises:
            AuthenticationError: If API key is rejected
            RateLimitError: If API rate limit is exceeded
            ProviderError: For any other API failure
        """
        try:
            response = await self.client.aio.models.generate_content(
                model=self.model,
                contents=prompt,
                config=types.GenerateContentConfig(
                    temperature=temperature,
                    max_output_tokens=max_output_tokens,
                    response_mime_type="application/json",
                ),
            )
        except errors.ClientError as e:
            message = str(e).lower()
            if e.code == 429:
                raise RateLimitError(f"API rate limit exceeded: {e}") from e
            if e.code in (401, 403) or "api key" in message:
                raise AuthenticationError(f"Invalid API key: {e}") from e
            if "quota" in message or "rate limit" in message:
                raise RateLimitError(f"API rate limit exceeded: {e}") from e
            raise ProviderError(f"Gemini request failed: {e}") from e
        except errors.APIError as e:
            raise ProviderError(f"Gemini request failed: {e}") from e

        return response.text or ""

    def get_provider_metadata(self) -> dict[str, str]:
        return {"provider": "gemini", "model": self.model}
