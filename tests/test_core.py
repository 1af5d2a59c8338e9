"""Tests for the refinement pipeline."""

import asyncio
import json
import threading

import pytest

from mind_note import MemoRefiner, refine, refine_sync
from mind_note.config import RefinerSettings
from mind_note.core import build_refiner
from mind_note.exceptions import AuthenticationError, InvalidInputError
from mind_note.invoker import InvokerConfig
from mind_note.taxonomy import NormalizerConfig


def _refine(refiner, text):
    return asyncio.run(refiner.refine(text))


def test_scenario_english_success(make_provider, no_sleep, taxonomy):
    provider = make_provider(
        [
            '{"refined":"This is a test message for personal verification.",'
            '"tag":"#memo","context":"Personal Reflection"}'
        ]
    )
    refiner = MemoRefiner(provider, taxonomy=taxonomy, sleep=no_sleep)

    result = _refine(refiner, "test msg for me")

    assert result.is_fallback is False
    assert result.context == "Personal Reflection"
    assert result.language == "en"
    assert result.refined == "This is a test message for personal verification."
    assert result.tag == "#memo"
    assert result.insight == ""
    assert result.original_text == "test msg for me"
    assert len(provider.calls) == 1


def test_scenario_korean_alias_context(make_provider, model_json, no_sleep, taxonomy):
    provider = make_provider(
        [model_json(refined="아이디어를 정리합니다.", tag="#아이디어", context="아이디어")]
    )
    refiner = MemoRefiner(provider, taxonomy=taxonomy, sleep=no_sleep)

    result = _refine(refiner, "아이디어 정리")

    assert result.context == "Idea"
    assert result.language == "ko"
    assert result.tag == "#아이디어"
    assert provider.calls[0]["prompt"].startswith("너는")
    assert provider.calls[0]["prompt"].endswith("아이디어 정리")


@pytest.mark.parametrize("text", ["", "   ", "\n\t"])
def test_scenario_blank_input_rejected_before_any_call(make_provider, no_sleep, text):
    provider = make_provider(["unused"])
    refiner = MemoRefiner(provider, sleep=no_sleep)

    with pytest.raises(InvalidInputError):
        _refine(refiner, text)

    assert provider.calls == []


def test_non_string_input_rejected(make_provider, no_sleep):
    provider = make_provider(["unused"])

    with pytest.raises(InvalidInputError):
        _refine(MemoRefiner(provider, sleep=no_sleep), None)

    assert provider.calls == []


def test_scenario_validation_failures_fall_back(make_provider, model_json, no_sleep, taxonomy):
    text = "long memo " * 150
    provider = make_provider([model_json(refined="y" * 1200, tag="#memo", context="Idea")])
    refiner = MemoRefiner(provider, taxonomy=taxonomy, sleep=no_sleep)

    result = _refine(refiner, text)

    assert result.is_fallback is True
    assert result.context == taxonomy.default_category
    assert result.refined == text[:1000]
    assert result.original_text == text
    assert len(provider.calls) == 3


def test_invalid_json_always_yields_fallback_within_budget(make_provider, no_sleep, sleeps):
    provider = make_provider(["definitely not json"])
    refiner = MemoRefiner(provider, invoker_config=InvokerConfig(max_attempts=3), sleep=no_sleep)

    result = _refine(refiner, "회의 메모")

    assert result.is_fallback is True
    assert result.tag == "#메모"
    assert result.language == "ko"
    assert len(provider.calls) == 3
    assert sleeps == [1.0, 1.0]


def test_scenario_mixed_script_detected_as_korean(make_provider, model_json, no_sleep):
    provider = make_provider([model_json(refined="회의 노트입니다.", tag="#회의", context="Meeting Notes")])

    result = _refine(MemoRefiner(provider, sleep=no_sleep), "weekly sync 회의 notes")

    assert result.language == "ko"
    assert result.context == "Meeting Notes"


def test_unknown_context_is_forced_to_default(make_provider, model_json, no_sleep, taxonomy):
    provider = make_provider([model_json(refined="Done.", tag="#misc", context="Grocery Planning")])

    result = _refine(MemoRefiner(provider, taxonomy=taxonomy, sleep=no_sleep), "buy stuff")

    assert result.is_fallback is False
    assert result.context == "Memory Archive"


def test_tag_and_insight_are_cleaned(make_provider, model_json, no_sleep):
    provider = make_provider(
        [model_json(refined="Plan ready.", tag="weekly review", context="Goal Check", insight="  Book a slot. ")]
    )

    result = _refine(MemoRefiner(provider, sleep=no_sleep), "weekly review plan")

    assert result.tag == "#weekly-review"
    assert result.insight == "Book a slot."


def test_refined_text_is_bounded_on_success(make_provider, model_json, no_sleep):
    provider = make_provider([model_json(refined="z" * 1000, tag="#memo", context="Idea")])

    result = _refine(MemoRefiner(provider, sleep=no_sleep), "z")

    assert len(result.refined) == 1000
    assert result.is_fallback is False


def test_refine_uses_selected_provider(mocker, make_provider, model_json):
    provider = make_provider([model_json(refined="Shared.", tag="#memo", context="Work Log")])
    mocker.patch("mind_note.core._build_gemini_provider", return_value=provider)

    result = asyncio.run(refine("told team", provider="gemini", settings=RefinerSettings()))

    assert result.context == "Work Log"
    assert len(provider.calls) == 1


def test_refine_sync_uses_groq_provider(mocker, make_provider, model_json):
    provider = make_provider([model_json(refined="Shared.", tag="#memo", context="Work Memo")])
    build = mocker.patch("mind_note.core._build_groq_provider", return_value=provider)

    result = refine_sync("told team", api_key="k", settings=RefinerSettings(provider="groq", model="m"))

    assert result.context == "Work Memo"
    build.assert_called_once_with("k", "m")


def test_refine_rejects_blank_text_without_building_provider(mocker):
    build = mocker.patch("mind_note.core._build_gemini_provider")

    with pytest.raises(InvalidInputError):
        refine_sync("   ", provider="gemini")

    build.assert_not_called()


def test_unsupported_provider_raises():
    with pytest.raises(ValueError):
        build_refiner(provider="unknown", settings=RefinerSettings())


def test_gemini_requires_api_key(monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)

    with pytest.raises(AuthenticationError):
        build_refiner(provider="gemini", settings=RefinerSettings())


def test_groq_requires_api_key(monkeypatch):
    monkeypatch.delenv("GROQ_API_KEY", raising=False)

    with pytest.raises(AuthenticationError):
        build_refiner(provider="groq", settings=RefinerSettings())


def test_build_refiner_applies_settings(mocker, make_provider):
    mocker.patch("mind_note.core._build_gemini_provider", return_value=make_provider(["x"]))
    settings = RefinerSettings(max_attempts=5, retry_delay_sec=0.5, unknown_queue_path="/tmp/q.jsonl")

    refiner = build_refiner(settings=settings)

    assert refiner.invoker.config.max_attempts == 5
    assert refiner.invoker.config.retry_delay_sec == 0.5
    assert refiner.normalizer.config.unknown_queue_path == "/tmp/q.jsonl"
    assert refiner.taxonomy.version == "v1"


def test_context_normalization_runs_off_the_event_loop(make_provider, model_json, no_sleep, tmp_path):
    queue = tmp_path / "unknown.jsonl"
    provider = make_provider([model_json(refined="Done.", tag="#misc", context="Grocery Planning")])
    refiner = MemoRefiner(
        provider,
        normalizer_config=NormalizerConfig(unknown_queue_path=str(queue)),
        sleep=no_sleep,
    )
    normalize = refiner.normalizer.normalize
    threads = []

    def recording_normalize(raw, language=None):
        threads.append(threading.get_ident())
        return normalize(raw, language=language)

    refiner.normalizer.normalize = recording_normalize

    result = _refine(refiner, "buy stuff")

    assert result.context == "Memory Archive"
    assert threads and threads[0] != threading.get_ident()
    assert json.loads(queue.read_text(encoding="utf-8"))["raw"] == "Grocery Planning"
