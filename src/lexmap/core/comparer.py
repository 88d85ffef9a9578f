"""Key comparison strategies for lexicons."""

from __future__ import annotations

from enum import StrEnum
from typing import Protocol

from .values import StringValue, Value


class ComparisonMode(StrEnum):
    """Key-equality policy of a lexicon instance."""

    CASE_SENSITIVE = "case-sensitive"
    CASE_INSENSITIVE = "case-insensitive"

    @classmethod
    def from_flag(cls, case_sensitive: bool) -> ComparisonMode:
        return cls.CASE_SENSITIVE if case_sensitive else cls.CASE_INSENSITIVE

    @property
    def case_sensitive(self) -> bool:
        return self is ComparisonMode.CASE_SENSITIVE


class KeyComparer(Protocol):
    """Equality/hash pair used for key lookup.

    Keys reported equal by ``equals`` must produce the same ``hash_key``.
    """

    mode: ComparisonMode

    def equals(self, left: Value, right: Value) -> bool: ...

    def hash_key(self, key: Value) -> int: ...


class CaseSensitiveComparer:
    """Exact comparison: same variant and structurally equal."""

    __slots__ = ()

    mode = ComparisonMode.CASE_SENSITIVE

    def equals(self, left: Value, right: Value) -> bool:
        if type(left) is not type(right):
            return False
        return left == right

    def hash_key(self, key: Value) -> int:
        return hash(key)


class CaseInsensitiveComparer:
    """Strings compare on their lowercase form; other variants compare exactly."""

    __slots__ = ()

    mode = ComparisonMode.CASE_INSENSITIVE

    def equals(self, left: Value, right: Value) -> bool:
        if type(left) is not type(right):
            return False
        if isinstance(left, StringValue) and isinstance(right, StringValue):
            return left.lowered() == right.lowered()
        return left == right

    def hash_key(self, key: Value) -> int:
        if isinstance(key, StringValue):
            return hash((StringValue.kind, key.lowered()))
        return hash(key)


_COMPARERS: dict[ComparisonMode, KeyComparer] = {
    ComparisonMode.CASE_SENSITIVE: CaseSensitiveComparer(),
    ComparisonMode.CASE_INSENSITIVE: CaseInsensitiveComparer(),
}


def comparer_for(mode: ComparisonMode) -> KeyComparer:
    return _COMPARERS[ComparisonMode(mode)]


__all__ = [
    "ComparisonMode",
    "KeyComparer",
    "CaseSensitiveComparer",
    "CaseInsensitiveComparer",
    "comparer_for",
]
