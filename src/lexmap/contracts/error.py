"""Error kinds, envelope helpers and exit codes for lexmap."""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Callable
from dataclasses import dataclass
from enum import IntEnum
from functools import wraps
from typing import Any, NoReturn, TypeVar

logger = logging.getLogger(__name__)
T = TypeVar("T")


class Exit(IntEnum):
    """Stable exit codes shared across the CLI."""

    OK = 0
    BAD_INPUT = 2
    INVARIANT = 3
    POLICY = 4
    IO = 5


@dataclass(slots=True)
class ErrorEnvelope:
    """Machine-readable error contract for CLI failures."""

    error: str
    detail: str
    hint: str | None = None

    def to_json(self) -> str:
        payload = {"error": self.error, "detail": self.detail}
        if self.hint:
            payload["hint"] = self.hint
        return json.dumps(payload, ensure_ascii=False)


def die(code: Exit, kind: str, detail: str, hint: str | None = None) -> NoReturn:
    """Emit standardized JSON error on stderr and exit with a stable code."""

    env = ErrorEnvelope(error=kind, detail=detail, hint=hint)
    sys.stderr.write(env.to_json() + "\n")
    try:
        sys.stderr.flush()
    finally:
        sys.exit(int(code))


class EnvelopeError(Exception):
    """Base exception that carries an optional hint for the error envelope."""

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint = hint


class BadInputError(EnvelopeError):
    """Raised for malformed user input (arguments, documents, keys)."""


class InvariantError(EnvelopeError):
    """Raised when internal consistency checks fail."""


class PolicyError(EnvelopeError):
    """Raised for unsupported operations or contract violations."""


class IOErrorEnvelope(EnvelopeError):  # noqa: N818 - public API name
    """Raised for IO errors that should map to Exit.IO."""


def _describe_mode(case_sensitive: bool) -> str:
    return "case-sensitive" if case_sensitive else "case-insensitive"


class LexiconError(EnvelopeError):
    """Key-level failure raised by a lexicon; remembers the key and its mode."""

    def __init__(
        self, message: str, *, key: Any, case_sensitive: bool, hint: str | None = None
    ) -> None:
        super().__init__(message, hint=hint)
        self.key = key
        self.case_sensitive = case_sensitive


class DuplicateKeyError(LexiconError, PolicyError):
    """Raised by ``add`` when the key already exists under the active mode."""

    def __init__(self, key: Any, case_sensitive: bool) -> None:
        hint = None
        if not case_sensitive:
            hint = "Keys are compared case-insensitively; set CASESENSITIVE to true to keep both."
        super().__init__(
            f"The key {key!s} already exists in the lexicon ({_describe_mode(case_sensitive)})",
            key=key,
            case_sensitive=case_sensitive,
            hint=hint,
        )


class KeyNotFoundError(LexiconError, BadInputError):
    """Raised by direct lookups of a key that is not present."""

    def __init__(self, key: Any, case_sensitive: bool) -> None:
        hint = None
        if case_sensitive:
            hint = "Keys are compared case-sensitively; check the key's capitalisation."
        super().__init__(
            f"The key {key!s} was not found in the lexicon ({_describe_mode(case_sensitive)})",
            key=key,
            case_sensitive=case_sensitive,
            hint=hint,
        )


class MalformedDumpError(BadInputError):
    """Raised when a dump record cannot be decoded into lexicon entries."""


class UnknownSuffixError(BadInputError):
    """Raised when a suffix name is not part of the lexicon surface."""


class SuffixArityError(BadInputError):
    """Raised when a suffix is invoked with the wrong number of arguments."""


_EXCEPTION_ORDER: tuple[tuple[type[EnvelopeError], Exit, str], ...] = (
    (DuplicateKeyError, Exit.POLICY, "DuplicateKey"),
    (KeyNotFoundError, Exit.BAD_INPUT, "KeyNotFound"),
    (MalformedDumpError, Exit.BAD_INPUT, "MalformedDump"),
    (BadInputError, Exit.BAD_INPUT, "BadInput"),
    (InvariantError, Exit.INVARIANT, "Invariant"),
    (PolicyError, Exit.POLICY, "Policy"),
    (IOErrorEnvelope, Exit.IO, "IO"),
)


def guard_cli(fn: Callable[..., T]) -> Callable[..., T]:
    """Decorate a CLI handler to enforce exit codes and error envelopes."""

    @wraps(fn)
    def _wrapped(*args: Any, **kwargs: Any) -> T:
        try:
            return fn(*args, **kwargs)
        except EnvelopeError as exc:
            for exc_type, exit_code, label in _EXCEPTION_ORDER:
                if isinstance(exc, exc_type):
                    die(exit_code, label, str(exc), hint=getattr(exc, "hint", None))
            die(Exit.POLICY, "UnhandledEnvelope", str(exc), hint=getattr(exc, "hint", None))
        except FileNotFoundError as exc:
            die(Exit.IO, "FileNotFound", str(exc))
        except Exception as exc:  # pragma: no cover - defensive
            logger.exception("Unhandled CLI exception")
            die(Exit.POLICY, "Unhandled", f"{type(exc).__name__}: {exc}")

    return _wrapped


__all__ = [
    "Exit",
    "ErrorEnvelope",
    "EnvelopeError",
    "BadInputError",
    "InvariantError",
    "PolicyError",
    "IOErrorEnvelope",
    "LexiconError",
    "DuplicateKeyError",
    "KeyNotFoundError",
    "MalformedDumpError",
    "UnknownSuffixError",
    "SuffixArityError",
    "guard_cli",
    "die",
]
