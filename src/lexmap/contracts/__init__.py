"""Contract helpers for lexmap."""

from .error import (
    BadInputError,
    DuplicateKeyError,
    EnvelopeError,
    ErrorEnvelope,
    Exit,
    InvariantError,
    IOErrorEnvelope,
    KeyNotFoundError,
    LexiconError,
    MalformedDumpError,
    PolicyError,
    SuffixArityError,
    UnknownSuffixError,
    die,
    guard_cli,
)

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
