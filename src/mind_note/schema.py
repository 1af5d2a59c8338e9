"""Data models for mind-note."""

from typing import Literal

from pydantic import BaseModel, Field, field_validator

Language = Literal["en", "ko", "ja", "es", "fr", "de"]

SUPPORTED_LANGUAGES: tuple[Language, ...] = ("en", "ko", "ja", "es", "fr", "de")
DEFAULT_LANGUAGE: Language = "en"
MAX_REFINED_LENGTH = 1000


class RefinedMemo(BaseModel):
    """Refinement object returned by the generation service."""

    refined: str = Field(max_length=MAX_REFINED_LENGTH)
    tag: str
    context: str
    insight: str = ""

    @field_validator("insight", mode="before")
    @classmethod
    def _empty_insight(cls, value):
        return "" if value is None else value


class MemoRefinement(BaseModel):
    """Structured memo handed back to the caller."""

    refined: str = Field(max_length=MAX_REFINED_LENGTH)
    tag: str
    context: str
    insight: str = ""
    language: Language
    original_text: str
    is_fallback: bool = False
