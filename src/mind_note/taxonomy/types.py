"""Data models for context normalization output."""

from typing import Literal

from pydantic import BaseModel

Method = Literal["exact", "casefold", "alias", "default"]


class ContextMatch(BaseModel):
    """How a raw context label was resolved to a canonical category."""

    raw: str
    category: str
    method: Method = "default"
    locale: str | None = None
    reason: str | None = None
