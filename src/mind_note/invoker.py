"""Bounded-retry invocation of the generation service.

Each attempt calls the provider, strips code fences from the output, parses it
as JSON and validates it against `RefinedMemo`. Any failure is recorded and the
attempt is retried after a fixed delay until the budget is spent. The outcome is
returned as a value, never raised:

- `RefinementSuccess` carries the validated object.
- `RetryExhausted` carries the failures of every attempt.

Choosing what to do after exhaustion is left to the caller.
"""

from __future__ import annotations

import asyncio
import json
import logging
import re
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Literal, Union

from pydantic import ValidationError

from mind_note.exceptions import AuthenticationError, ResponseFormatError
from mind_note.providers.base import BaseProvider
from mind_note.schema import RefinedMemo

logger = logging.getLogger(__name__)

FailureKind = Literal["service_error", "timeout", "parse_error", "schema_error"]

_FENCE_OPEN = re.compile(r"^\s*```[A-Za-z]*\s*\n?")
_FENCE_CLOSE = re.compile(r"\n?\s*```\s*$")


@dataclass(frozen=True)
class InvokerConfig:
    max_attempts: int = 3
    retry_delay_sec: float = 1.0
    attempt_timeout_sec: float | None = 30.0
    temperature: float = 0.3
    max_output_tokens: int = 1024


@dataclass(frozen=True)
class AttemptFailure:
    attempt: int
    kind: FailureKind
    detail: str


@dataclass(frozen=True)
class RefinementSuccess:
    refinement: RefinedMemo
    attempts: int
    failures: tuple[AttemptFailure, ...] = ()


@dataclass(frozen=True)
class RetryExhausted:
    attempts: int
    failures: tuple[AttemptFailure, ...]


InvocationResult = Union[RefinementSuccess, RetryExhausted]


def clean_json_response(text: str) -> str:
    """Remove markdown code fences and surrounding whitespace from model output."""
    cleaned = _FENCE_OPEN.sub("", text, count=1)
    cleaned = _FENCE_CLOSE.sub("", cleaned, count=1)
    return cleaned.strip()


def parse_refinement(raw: str) -> RefinedMemo:
    """Parse and validate raw model output.

    Raises:
        ResponseFormatError: `kind` is `parse_error` for malformed JSON and
            `schema_error` for JSON that does not match `RefinedMemo`.
    """
    try:
        data = json.loads(clean_json_response(raw))
    except json.JSONDecodeError as e:
        raise ResponseFormatError(f"Model output is not valid JSON: {e}", kind="parse_error") from e

    if not isinstance(data, dict):
        raise ResponseFormatError(
            f"Model output must be a JSON object, got {type(data).__name__}",
            kind="schema_error",
        )

    try:
        return RefinedMemo.model_validate(data)
    except ValidationError as e:
        raise ResponseFormatError(f"Model output failed validation: {e}", kind="schema_error") from e


class RefinementInvoker:
    """Runs up to `max_attempts` sequential generation attempts for one prompt."""

    def __init__(
        self,
        provider: BaseProvider,
        config: InvokerConfig | None = None,
        *,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.provider = provider
        self.config = config or InvokerConfig()
        self._sleep = sleep

    async def invoke(self, prompt: str) -> InvocationResult:
        max_attempts = max(1, self.config.max_attempts)
        failures: list[AttemptFailure] = []

        for attempt in range(1, max_attempts + 1):
            result = await self._attempt(prompt, attempt)
            if isinstance(result, RefinedMemo):
                logger.info("refinement succeeded on attempt %d/%d", attempt, max_attempts)
                return RefinementSuccess(
                    refinement=result,
                    attempts=attempt,
                    failures=tuple(failures),
                )

            failures.append(result)
            logger.warning(
                "refinement attempt %d/%d failed (%s): %s",
                attempt,
                max_attempts,
                result.kind,
                result.detail,
            )
            if attempt < max_attempts:
                await self._sleep(self.config.retry_delay_sec)

        logger.error("all %d refinement attempts failed", max_attempts)
        return RetryExhausted(attempts=max_attempts, failures=tuple(failures))

    async def _attempt(self, prompt: str, attempt: int) -> RefinedMemo | AttemptFailure:
        try:
            raw = await asyncio.wait_for(
                self.provider.generate(
                    prompt,
                    temperature=self.config.temperature,
                    max_output_tokens=self.config.max_output_tokens,
                ),
                timeout=self.config.attempt_timeout_sec,
            )
        except AuthenticationError:
            raise
        except asyncio.TimeoutError:
            return AttemptFailure(
                attempt=attempt,
                kind="timeout",
                detail=f"no response within {self.config.attempt_timeout_sec}s",
            )
        except Exception as e:
            return AttemptFailure(attempt=attempt, kind="service_error", detail=str(e) or type(e).__name__)

        if not isinstance(raw, str):
            return AttemptFailure(
                attempt=attempt,
                kind="service_error",
                detail=f"provider returned {type(raw).__name__} instead of text",
            )

        try:
            return parse_refinement(raw)
        except ResponseFormatError as e:
            return AttemptFailure(attempt=attempt, kind=e.kind, detail=str(e))
