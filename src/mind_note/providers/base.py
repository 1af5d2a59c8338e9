"""Base provider interface."""

from abc import ABC, abstractmethod


class BaseProvider(ABC):
    """Abstract base class for text generation providers."""

    model: str = ""

    @abstractmethod
    async def generate(self, prompt: str, *, temperature: float, max_output_tokens: int) -> str:
        """Run one generation request.

        Args:
            prompt: Full prompt text
            temperature: Sampling temperature
            max_output_tokens: Upper bound on generated tokens

        Returns:
            Raw text produced by the model
        """
        pass

    def get_provider_metadata(self) -> dict[str, str]:
        """Return provider-specific metadata."""
        return {}
