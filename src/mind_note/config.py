"""Environment-driven settings for the refinement pipeline."""

from __future__ import annotations

import os
from dataclasses import dataclass

from mind_note.invoker import InvokerConfig
from mind_note.taxonomy.engine import NormalizerConfig
from mind_note.taxonomy.repository import DEFAULT_TAXONOMY_VERSION


def _safe_float(value: str | None, default: float) -> float:
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _safe_int(value: str | None, default: int) -> int:
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _optional(value: str | None) -> str | None:
    if value is None:
        return None
    return value.strip() or None


@dataclass(frozen=True)
class RefinerSettings:
    provider: str = "gemini"
    model: str | None = None
    max_attempts: int = 3
    retry_delay_sec: float = 1.0
    attempt_timeout_sec: float = 30.0
    temperature: float = 0.3
    max_output_tokens: int = 1024
    taxonomy_version: str = DEFAULT_TAXONOMY_VERSION
    taxonomy_path: str | None = None
    unknown_queue_path: str | None = None

    @classmethod
    def from_env(cls) -> "RefinerSettings":
        return cls(
            provider=(os.getenv("MIND_NOTE_PROVIDER", "gemini").strip().lower() or "gemini"),
            model=_optional(os.getenv("MIND_NOTE_MODEL")),
            max_attempts=max(1, _safe_int(os.getenv("MIND_NOTE_MAX_ATTEMPTS"), 3)),
            retry_delay_sec=max(0.0, _safe_float(os.getenv("MIND_NOTE_RETRY_DELAY_SEC"), 1.0)),
            attempt_timeout_sec=_safe_float(os.getenv("MIND_NOTE_ATTEMPT_TIMEOUT_SEC"), 30.0),
            temperature=_safe_float(os.getenv("MIND_NOTE_TEMPERATURE"), 0.3),
            max_output_tokens=_safe_int(os.getenv("MIND_NOTE_MAX_OUTPUT_TOKENS"), 1024),
            taxonomy_version=(
                _optional(os.getenv("MIND_NOTE_TAXONOMY_VERSION")) or DEFAULT_TAXONOMY_VERSION
            ),
            taxonomy_path=_optional(os.getenv("MIND_NOTE_TAXONOMY_PATH")),
            unknown_queue_path=_optional(os.getenv("MIND_NOTE_UNKNOWN_QUEUE_PATH")),
        )

    def invoker_config(self) -> InvokerConfig:
        return InvokerConfig(
            max_attempts=self.max_attempts,
            retry_delay_sec=self.retry_delay_sec,
            attempt_timeout_sec=self.attempt_timeout_sec if self.attempt_timeout_sec > 0 else None,
            temperature=self.temperature,
            max_output_tokens=self.max_output_tokens,
        )

    def normalizer_config(self) -> NormalizerConfig:
        return NormalizerConfig(unknown_queue_path=self.unknown_queue_path)
