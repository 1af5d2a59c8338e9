"""Context taxonomy and normalization for mind-note."""

from mind_note.taxonomy.engine import ContextNormalizer, NormalizerConfig, normalize_context
from mind_note.taxonomy.repository import Alias, Taxonomy, TaxonomyRepository, load_taxonomy
from mind_note.taxonomy.types import ContextMatch

__all__ = [
    "Alias",
    "ContextMatch",
    "ContextNormalizer",
    "NormalizerConfig",
    "Taxonomy",
    "TaxonomyRepository",
    "load_taxonomy",
    "normalize_context",
]
