"""Deterministic substitute results for when refinement is unavailable."""

from __future__ import annotations

import re

from mind_note.schema import DEFAULT_LANGUAGE, MAX_REFINED_LENGTH, Language, MemoRefinement
from mind_note.taxonomy.repository import Taxonomy, load_taxonomy

FALLBACK_TAGS: dict[Language, str] = {
    "en": "#memo",
    "ko": "#메모",
    "ja": "#メモ",
    "es": "#nota",
    "fr": "#note",
    "de": "#notiz",
}


def fallback_tag(language: Language) -> str:
    return FALLBACK_TAGS.get(language, FALLBACK_TAGS[DEFAULT_LANGUAGE])


def clean_tag(tag: str, language: Language) -> str:
    """Return `tag` as a single `#`-prefixed token, or the placeholder tag when empty."""
    value = re.sub(r"\s+", "-", tag.strip().lstrip("#").strip())
    if not value:
        return fallback_tag(language)
    return f"#{value}"


def synthesize(
    original_text: str,
    language: Language,
    taxonomy: Taxonomy | None = None,
) -> MemoRefinement:
    """Build the fallback result straight from the raw memo text."""
    taxonomy = taxonomy or load_taxonomy()
    return MemoRefinement(
        refined=original_text[:MAX_REFINED_LENGTH],
        tag=fallback_tag(language),
        context=taxonomy.default_category,
        insight="",
        language=language,
        original_text=original_text,
        is_fallback=True,
    )
