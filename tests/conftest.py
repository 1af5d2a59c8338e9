"""Shared fixtures for mind-note tests."""

import json

import pytest

from mind_note.providers.base import BaseProvider
from mind_note.taxonomy import load_taxonomy


class FakeProvider(BaseProvider):
    """Replays canned responses; exceptions in the list are raised instead."""

    model = "fake-model"

    def __init__(self, responses):
        self.responses = list(responses)
        self.calls: list[dict] = []

    async def generate(self, prompt: str, *, temperature: float, max_output_tokens: int) -> str:
        self.calls.append(
            {
                "prompt": prompt,
                "temperature": temperature,
                "max_output_tokens": max_output_tokens,
            }
        )
        response = self.responses[min(len(self.calls), len(self.responses)) - 1]
        if isinstance(response, BaseException):
            raise response
        return response


@pytest.fixture
def make_provider():
    return FakeProvider


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def no_sleep(sleeps):
    async def _sleep(delay: float) -> None:
        sleeps.append(delay)

    return _sleep


@pytest.fixture
def taxonomy():
    return load_taxonomy()


@pytest.fixture
def model_json():
    def _dump(**fields) -> str:
        return json.dumps(fields, ensure_ascii=False)

    return _dump
