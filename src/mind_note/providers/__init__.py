"""Providers for mind-note."""

from mind_note.providers.base import BaseProvider
from mind_note.providers.gemini import GeminiProvider
from mind_note.providers.groq import GroqProvider

__all__ = ["BaseProvider", "GeminiProvider", "GroqProvider"]
