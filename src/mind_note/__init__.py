"""mind-note: Refine raw voice or text memos into structured notes."""

from mind_note.core import MemoRefiner, refine, refine_sync
from mind_note.language import detect_language
from mind_note.schema import MemoRefinement, RefinedMemo
from mind_note.taxonomy import normalize_context

__version__ = "0.1.0"

__all__ = [
    "refine",
    "refine_sync",
    "detect_language",
    "normalize_context",
    "MemoRefiner",
    "MemoRefinement",
    "RefinedMemo",
    "__version__",
]
