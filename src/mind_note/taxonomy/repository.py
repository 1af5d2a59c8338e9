"""Taxonomy repository for context categories."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from functools import lru_cache
from importlib.resources import files
from pathlib import Path

from mind_note.exceptions import TaxonomyError

logger = logging.getLogger(__name__)

DEFAULT_TAXONOMY_VERSION = "v1"


@dataclass(frozen=True)
class Alias:
    locale: str
    alias: str
    category: str


@dataclass(frozen=True)
class Taxonomy:
    """Closed set of context categories plus their localized aliases."""

    version: str
    categories: tuple[str, ...]
    aliases: tuple[Alias, ...]
    default_category: str

    def __post_init__(self) -> None:
        if self.default_category not in self.categories:
            raise TaxonomyError(
                f"Default category {self.default_category!r} is not a canonical category"
            )

    @property
    def canonical_categories(self) -> frozenset[str]:
        return frozenset(self.categories)

    def is_canonical(self, value: str) -> bool:
        return value in self.canonical_categories

    def aliases_by_locale(self, locale: str) -> list[Alias]:
        return [alias for alias in self.aliases if alias.locale == locale]

    def localized_label(self, category: str, locale: str) -> str:
        """Return the first alias registered for `category` in `locale`, or the category itself."""
        for alias in self.aliases:
            if alias.locale == locale and alias.category == category:
                return alias.alias
        return category


class TaxonomyRepository:
    """Loads categories and aliases from packaged taxonomy data or a custom directory."""

    def __init__(self, version: str = DEFAULT_TAXONOMY_VERSION, path: str | Path | None = None):
        self.version = version
        self.path = Path(path) if path else None

    def load(self) -> Taxonomy:
        categories_data = self._read_json("categories.json")
        aliases_data = self._read_json("aliases.json")

        if not isinstance(categories_data, dict) or not isinstance(aliases_data, list):
            raise TaxonomyError(f"Malformed taxonomy data for version {self.version}")

        try:
            categories = tuple(str(name) for name in categories_data["categories"])
            default_category = str(categories_data["default_category"])
            aliases = tuple(Alias(**item) for item in aliases_data)
        except (KeyError, TypeError) as exc:
            raise TaxonomyError(f"Malformed taxonomy data for version {self.version}: {exc}") from exc

        canonical = set(categories)
        for alias in aliases:
            if alias.category not in canonical:
                logger.warning(
                    "alias %r (%s) points to unknown category %r",
                    alias.alias,
                    alias.locale,
                    alias.category,
                )

        return Taxonomy(
            version=self.version,
            categories=categories,
            aliases=aliases,
            default_category=default_category,
        )

    def _read_json(self, name: str):
        if self.path is not None:
            source = self.path / name
        else:
            source = files("mind_note.taxonomy.data").joinpath(self.version, name)
        try:
            return json.loads(source.read_text(encoding="utf-8"))
        except FileNotFoundError as exc:
            raise TaxonomyError(f"Taxonomy file not found: {name} ({self.version})") from exc
        except json.JSONDecodeError as exc:
            raise TaxonomyError(f"Invalid JSON in taxonomy file {name}: {exc}") from exc


@lru_cache(maxsize=8)
def load_taxonomy(version: str = DEFAULT_TAXONOMY_VERSION, path: str | None = None) -> Taxonomy:
    """Load a taxonomy once per process; later calls return the cached instance."""
    return TaxonomyRepository(version=version, path=path).load()
