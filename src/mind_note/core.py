"""Core refinement pipeline."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from mind_note.config import RefinerSettings
from mind_note.exceptions import InvalidInputError
from mind_note.fallback import clean_tag, synthesize
from mind_note.invoker import InvokerConfig, RefinementInvoker, RetryExhausted
from mind_note.language import detect_language
from mind_note.prompts import PromptBuilder
from mind_note.providers.base import BaseProvider
from mind_note.schema import MemoRefinement
from mind_note.taxonomy.engine import ContextNormalizer, NormalizerConfig
from mind_note.taxonomy.repository import Taxonomy, load_taxonomy

logger = logging.getLogger(__name__)


class MemoRefiner:
    """Turns raw memo text into a `MemoRefinement`, falling back when the model is unusable."""

    def __init__(
        self,
        provider: BaseProvider,
        *,
        taxonomy: Taxonomy | None = None,
        invoker_config: InvokerConfig | None = None,
        normalizer_config: NormalizerConfig | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.provider = provider
        self.taxonomy = taxonomy or load_taxonomy()
        self.prompts = PromptBuilder(self.taxonomy)
        self.invoker = RefinementInvoker(provider, invoker_config, sleep=sleep)
        self.normalizer = ContextNormalizer(self.taxonomy, normalizer_config)

    async def refine(self, text: str) -> MemoRefinement:
        """Refine a memo.

        Args:
            text: Raw memo text.

        Returns:
            MemoRefinement. `is_fallback` is True when every attempt failed.

        Raises:
            InvalidInputError: If text is not a string or is blank.
            AuthenticationError: If the provider rejects its credentials.
        """
        if not isinstance(text, str) or not text.strip():
            raise InvalidInputError("Text is required")

        language = detect_language(text)
        logger.debug("detected language %s for %d chars", language, len(text))

        prompt = self.prompts.build(language, text)
        outcome = await self.invoker.invoke(prompt)

        if isinstance(outcome, RetryExhausted):
            logger.warning(
                "using fallback refinement after %d failed attempts", outcome.attempts
            )
            return synthesize(text, language, self.taxonomy)

        validated = outcome.refinement
        # Unmapped labels may be appended to the queue file; keep that off the event loop.
        context = await asyncio.to_thread(self.normalizer.normalize, validated.context, language)
        return MemoRefinement(
            refined=validated.refined,
            tag=clean_tag(validated.tag, language),
            context=context,
            insight=validated.insight.strip(),
            language=language,
            original_text=text,
            is_fallback=False,
        )


def _build_gemini_provider(api_key: str | None, model: str | None) -> BaseProvider:
    from mind_note.providers.gemini import GeminiProvider

    return GeminiProvider(api_key=api_key, model=model)


def _build_groq_provider(api_key: str | None, model: str | None) -> BaseProvider:
    from mind_note.providers.groq import GroqProvider

    return GroqProvider(api_key=api_key, model=model)


def _select_provider(provider: str | None, api_key: str | None, model: str | None = None) -> BaseProvider:
    provider_name = (provider or "gemini").strip().lower()
    if provider_name in {"gemini", "google"}:
        return _build_gemini_provider(api_key, model)
    if provider_name in {"groq", "llama"}:
        return _build_groq_provider(api_key, model)
    raise ValueError(f"Unsupported provider: {provider_name}")


def build_refiner(
    *,
    api_key: str | None = None,
    provider: str | None = None,
    settings: RefinerSettings | None = None,
) -> MemoRefiner:
    """Build a `MemoRefiner` from settings (defaults to `RefinerSettings.from_env()`)."""
    settings = settings or RefinerSettings.from_env()
    engine = _select_provider(provider or settings.provider, api_key, settings.model)
    return MemoRefiner(
        engine,
        taxonomy=load_taxonomy(settings.taxonomy_version, settings.taxonomy_path),
        invoker_config=settings.invoker_config(),
        normalizer_config=settings.normalizer_config(),
    )


async def refine(
    text: str,
    *,
    api_key: str | None = None,
    provider: str | None = None,
    settings: RefinerSettings | None = None,
) -> MemoRefinement:
    """Refine a raw memo into polished text, tag, context and insight.

    Args:
        text: Raw memo text (typed or transcribed).
        api_key: Provider API key. Falls back to GEMINI_API_KEY / GROQ_API_KEY.
        provider: Provider name (`gemini` or `groq`). Defaults to
            `MIND_NOTE_PROVIDER` env var, then `gemini`.
        settings: Pipeline settings. Defaults to `RefinerSettings.from_env()`.

    Returns:
        MemoRefinement; check `is_fallback` to tell AI output from the fallback.
    """
    if not isinstance(text, str) or not text.strip():
        raise InvalidInputError("Text is required")
    refiner = build_refiner(api_key=api_key, provider=provider, settings=settings)
    return await refiner.refine(text)


def refine_sync(
    text: str,
    *,
    api_key: str | None = None,
    provider: str | None = None,
    settings: RefinerSettings | None = None,
) -> MemoRefinement:
    """Blocking wrapper around `refine` for scripts and the CLI."""
    return asyncio.run(refine(text, api_key=api_key, provider=provider, settings=settings))
