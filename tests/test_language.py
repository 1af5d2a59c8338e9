"""Tests for script-based language detection."""

import pytest

from mind_note import detect_language


def test_empty_text_defaults_to_english():
    assert detect_language("") == "en"


def test_plain_latin_is_english():
    assert detect_language("test msg for me") == "en"


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("아이디어 정리", "ko"),
        ("ㅋㅋ 메모", "ko"),
        ("こんにちは、会議のメモ", "ja"),
        ("カタカナ", "ja"),
        ("会議議事録", "ja"),
        ("Grüße aus Berlin", "de"),
        ("Straße", "de"),
        ("mañana compro pan", "es"),
        ("¿qué tal?", "es"),
        ("réunion terminée", "fr"),
        ("ça va", "fr"),
    ],
)
def test_detects_script(text, expected):
    assert detect_language(text) == expected


def test_hangul_mixed_with_latin_is_korean():
    assert detect_language("meeting 회의 notes for tomorrow") == "ko"


def test_hangul_wins_over_kanji():
    assert detect_language("会議 회의") == "ko"


def test_kana_wins_over_accented_latin():
    assert detect_language("café で会いましょう") == "ja"


def test_refined_text_keeps_detected_language():
    original = "회의 괜찮았음 프로젝트 일정이랑 예산 얘기함"
    refined = "회의가 원활하게 진행되었습니다. 프로젝트 일정과 예산을 논의했습니다."

    assert detect_language(refined) == detect_language(original) == "ko"


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("Qué bueno, nos vemos en el café", "es"),
        ("pingüino", "es"),
        ("la vergüenza", "es"),
        ("Übung macht den Meister", "de"),
        ("für dich", "de"),
        ("café", "fr"),
        ("le café est très bon", "fr"),
    ],
)
def test_accented_latin_is_scored_across_languages(text, expected):
    assert detect_language(text) == expected
