"""Script-based language detection for memo text."""

import re

from mind_note.schema import DEFAULT_LANGUAGE, Language

# First match wins, so the least ambiguous scripts come first.
_SCRIPT_PATTERNS: tuple[tuple[Language, re.Pattern[str]], ...] = (
    ("ko", re.compile(r"[\uAC00-\uD7AF\u1100-\u11FF\u3130-\u318F]")),
    ("ja", re.compile(r"[\u3040-\u30FF\u31F0-\u31FF]")),
)

# Letters that point to a single Latin-script language. Spanish only uses
# the diaeresis in "güe" / "güi"; any other ü counts as German.
_LATIN_LETTERS: tuple[tuple[Language, re.Pattern[str]], ...] = (
    ("de", re.compile(r"[äößẞ]|(?<!g)ü|ü(?![ei])", re.IGNORECASE)),
    ("fr", re.compile(r"[àâçèêëîïôûùÿœæ]", re.IGNORECASE)),
    ("es", re.compile(r"[ñáíóú¿¡]|(?<=g)ü(?=[ei])", re.IGNORECASE)),
)
_SHARED_LETTERS: dict[Language, re.Pattern[str]] = {
    "fr": re.compile(r"é", re.IGNORECASE),
    "es": re.compile(r"é", re.IGNORECASE),
}
_COMMON_WORDS: dict[Language, frozenset[str]] = {
    "de": frozenset({"der", "die", "das", "und", "ist", "ich", "nicht", "mit", "ein", "eine", "für", "wir"}),
    "fr": frozenset({"le", "les", "et", "est", "une", "des", "du", "je", "pour", "avec", "nous", "pas", "très"}),
    "es": frozenset({"el", "los", "las", "que", "y", "es", "una", "por", "con", "para", "nos", "del", "muy"}),
}
_WORD = re.compile(r"\w+")

# Han ideographs without kana or hangul are attributed to Japanese.
_CJK_IDEOGRAPHS = re.compile(r"[\u4E00-\u9FFF]")


def _latin_language(text: str) -> Language | None:
    """Score accented Latin text; None when it carries no language-specific letters.

    Distinctive letters weigh double, letters shared by two languages and common
    function words count once. Ties go to the earlier entry in `_LATIN_LETTERS`.
    """
    letter_hits: dict[Language, int] = {}
    for language, pattern in _LATIN_LETTERS:
        hits = 2 * len(pattern.findall(text))
        shared = _SHARED_LETTERS.get(language)
        if shared is not None:
            hits += len(shared.findall(text))
        letter_hits[language] = hits

    if not any(letter_hits.values()):
        return None

    words = _WORD.findall(text.lower())
    best: Language | None = None
    best_score = 0
    for language, _ in _LATIN_LETTERS:
        if not letter_hits[language]:
            continue
        score = letter_hits[language] + sum(1 for word in words if word in _COMMON_WORDS[language])
        if score > best_score:
            best, best_score = language, score
    return best


def detect_language(text: str) -> Language:
    """Return the memo language inferred from the characters it uses.

    Never fails: text with no distinctive characters is treated as English.
    """
    if not text:
        return DEFAULT_LANGUAGE

    for language, pattern in _SCRIPT_PATTERNS:
        if pattern.search(text):
            return language

    latin = _latin_language(text)
    if latin is not None:
        return latin

    if _CJK_IDEOGRAPHS.search(text):
        return "ja"

    return DEFAULT_LANGUAGE
