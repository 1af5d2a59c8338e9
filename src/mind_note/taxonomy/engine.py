"""Normalization engine for model-provided context categories."""

from __future__ import annotations

import json
import logging
import re
import unicodedata
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

from mind_note.taxonomy.repository import DEFAULT_TAXONOMY_VERSION, Alias, Taxonomy, load_taxonomy
from mind_note.taxonomy.types import ContextMatch

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NormalizerConfig:
    unknown_queue_path: str | None = None


class ContextNormalizer:
    """Dictionary-first normalizer that always yields a canonical category."""

    def __init__(self, taxonomy: Taxonomy, config: NormalizerConfig | None = None):
        self.taxonomy = taxonomy
        self.config = config or NormalizerConfig()
        self._folded_categories = {_fold_text(name): name for name in taxonomy.categories}

    def normalize(self, raw: str | None, language: str | None = None) -> str:
        return self.match(raw, language=language).category

    def match(self, raw: str | None, language: str | None = None) -> ContextMatch:
        if not raw or not raw.strip():
            return ContextMatch(
                raw=raw or "",
                category=self.taxonomy.default_category,
                reason="empty_input",
            )

        value = raw.strip()
        if self.taxonomy.is_canonical(value):
            return ContextMatch(raw=raw, category=value, method="exact")

        folded = self._folded_categories.get(_fold_text(value))
        if folded is not None:
            return ContextMatch(raw=raw, category=folded, method="casefold")

        alias = self._match_alias(value, language)
        if alias is not None:
            if self.taxonomy.is_canonical(alias.category):
                return ContextMatch(
                    raw=raw,
                    category=alias.category,
                    method="alias",
                    locale=alias.locale,
                )
            return self._resolve_default(raw, language, reason="alias_not_canonical")

        return self._resolve_default(raw, language, reason="no_taxonomy_match")

    def _match_alias(self, value: str, language: str | None) -> Alias | None:
        aliases = self._aliases_in_lookup_order(language)

        for alias in aliases:
            if alias.alias == value:
                return alias

        folded = _fold_text(value)
        for alias in aliases:
            if _fold_text(alias.alias) == folded:
                return alias
        return None

    def _aliases_in_lookup_order(self, language: str | None) -> list[Alias]:
        if not language:
            return list(self.taxonomy.aliases)
        preferred = self.taxonomy.aliases_by_locale(language)
        others = [alias for alias in self.taxonomy.aliases if alias.locale != language]
        return preferred + others

    def _resolve_default(self, raw: str, language: str | None, *, reason: str) -> ContextMatch:
        default = self.taxonomy.default_category
        logger.info("context %r resolved to default %r (%s)", raw, default, reason)
        self._enqueue_unknown(raw=raw, language=language, reason=reason)
        return ContextMatch(raw=raw, category=default, reason=reason)

    def _enqueue_unknown(self, *, raw: str, language: str | None, reason: str) -> None:
        path_value = self.config.unknown_queue_path
        if not path_value:
            return

        payload = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "raw": raw,
            "language": language,
            "reason": reason,
            "taxonomy_version": self.taxonomy.version,
        }
        path = Path(path_value)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with path.open("a", encoding="utf-8") as f:
                f.write(json.dumps(payload, ensure_ascii=False) + "\n")
        except OSError:
            # Unmapped queue should never break the refinement path.
            logger.exception("failed to append unmapped context to %s", path)


def normalize_context(
    raw: str | None,
    *,
    language: str | None = None,
    taxonomy_version: str = DEFAULT_TAXONOMY_VERSION,
    unknown_queue_path: str | None = None,
) -> str:
    """Force a raw context label into the canonical taxonomy."""

    normalizer = ContextNormalizer(
        load_taxonomy(taxonomy_version),
        config=NormalizerConfig(unknown_queue_path=unknown_queue_path),
    )
    return normalizer.normalize(raw, language=language)


def _fold_text(value: str) -> str:
    text = unicodedata.normalize("NFKC", value).lower().strip()
    text = text.replace("_", " ").replace("-", " ")
    text = re.sub(r"[^\w\s]", " ", text)
    return re.sub(r"\s+", "", text)
