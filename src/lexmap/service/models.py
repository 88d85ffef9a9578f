"""Pydantic models for the lexicon control surface service."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator


class CreateLexiconRequest(BaseModel):
    """Request payload for creating (or replacing) a named lexicon."""

    case_sensitive: bool | None = Field(
        default=None,
        description="Comparison mode; defaults to the service configuration.",
    )
    replace: bool = Field(default=False, description="Replace an existing lexicon of that name.")


class LexiconSummary(BaseModel):
    name: str
    length: int = Field(..., ge=0)
    case_sensitive: bool


class LexiconListResponse(BaseModel):
    lexicons: list[LexiconSummary]


class SuffixCall(BaseModel):
    """Suffix invocation: positional ``args`` for calls, ``value`` for setters."""

    args: list[Any] = Field(default_factory=list, description="Encoded suffix arguments.")
    value: Any | None = Field(default=None, description="Value to assign to a settable suffix.")

    @field_validator("args")
    @classmethod
    def _limit_args(cls, value: list[Any]) -> list[Any]:
        if len(value) > 2:
            raise ValueError("lexicon suffixes take at most two arguments")
        return value


class SuffixResult(BaseModel):
    suffix: str
    result: Any | None = Field(default=None, description="Encoded result value, if any.")
    text: str | None = Field(default=None, description="Textual form of the result.")


class DumpDocument(BaseModel):
    """JSON form of a lexicon dump record."""

    header: str
    case_sensitive: bool = False
    entries: list[Any] = Field(default_factory=list)

    @field_validator("entries")
    @classmethod
    def _even_entries(cls, value: list[Any]) -> list[Any]:
        if len(value) % 2:
            raise ValueError("entries must alternate key/value pairs")
        return value


__all__ = [
    "CreateLexiconRequest",
    "DumpDocument",
    "LexiconListResponse",
    "LexiconSummary",
    "SuffixCall",
    "SuffixResult",
]
