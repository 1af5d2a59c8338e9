"""Tests for environment-driven settings."""

import pytest

from mind_note.config import RefinerSettings

ENV_VARS = [
    "MIND_NOTE_PROVIDER",
    "MIND_NOTE_MODEL",
    "MIND_NOTE_MAX_ATTEMPTS",
    "MIND_NOTE_RETRY_DELAY_SEC",
    "MIND_NOTE_ATTEMPT_TIMEOUT_SEC",
    "MIND_NOTE_TEMPERATURE",
    "MIND_NOTE_MAX_OUTPUT_TOKENS",
    "MIND_NOTE_TAXONOMY_VERSION",
    "MIND_NOTE_TAXONOMY_PATH",
    "MIND_NOTE_UNKNOWN_QUEUE_PATH",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    settings = RefinerSettings.from_env()

    assert settings == RefinerSettings()
    assert settings.provider == "gemini"
    assert settings.max_attempts == 3
    assert settings.retry_delay_sec == 1.0


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("MIND_NOTE_PROVIDER", " Groq ")
    monkeypatch.setenv("MIND_NOTE_MODEL", "llama-test")
    monkeypatch.setenv("MIND_NOTE_MAX_ATTEMPTS", "5")
    monkeypatch.setenv("MIND_NOTE_RETRY_DELAY_SEC", "0.5")
    monkeypatch.setenv("MIND_NOTE_UNKNOWN_QUEUE_PATH", "/tmp/unknown.jsonl")

    settings = RefinerSettings.from_env()

    assert settings.provider == "groq"
    assert settings.model == "llama-test"
    assert settings.max_attempts == 5
    assert settings.retry_delay_sec == 0.5
    assert settings.normalizer_config().unknown_queue_path == "/tmp/unknown.jsonl"


def test_invalid_values_fall_back_to_defaults(monkeypatch):
    monkeypatch.setenv("MIND_NOTE_MAX_ATTEMPTS", "many")
    monkeypatch.setenv("MIND_NOTE_TEMPERATURE", "warm")

    settings = RefinerSettings.from_env()

    assert settings.max_attempts == 3
    assert settings.temperature == 0.3


def test_attempts_and_delay_are_clamped(monkeypatch):
    monkeypatch.setenv("MIND_NOTE_MAX_ATTEMPTS", "0")
    monkeypatch.setenv("MIND_NOTE_RETRY_DELAY_SEC", "-2")

    settings = RefinerSettings.from_env()

    assert settings.max_attempts == 1
    assert settings.retry_delay_sec == 0.0


def test_non_positive_timeout_disables_timeout():
    config = RefinerSettings(attempt_timeout_sec=0).invoker_config()

    assert config.attempt_timeout_sec is None
    assert config.max_attempts == 3
    assert config.temperature == 0.3
    assert config.max_output_tokens == 1024
