from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import TYPE_CHECKING, Any, Tuple

from lexmap.contracts.error import DuplicateKeyError, KeyNotFoundError

from .comparer import ComparisonMode, KeyComparer, comparer_for
from .values import ListValue, Value, from_primitive, to_value

if TYPE_CHECKING:  # pragma: no cover
    from lexmap.io.dump import DumpRecord


logger = logging.getLogger("lexmap")


class _KeyRef:
    """Dict slot wrapper routing equality and hashing through a comparer."""

    __slots__ = ("key", "_comparer", "_hash")

    def __init__(self, key: Value, comparer: KeyComparer) -> None:
        self.key = key
        self._comparer = comparer
        self._hash = comparer.hash_key(key)

    def __hash__(self) -> int:
        return self._hash

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, _KeyRef):
            return NotImplemented
        return self._comparer.equals(self.key, other.key)

    def __repr__(self) -> str:  # pragma: no cover - debugging aid
        return f"_KeyRef({self.key!r})"


class Lexicon(Value):
    """Ordered associative container with a swappable key comparison mode.

    Entries keep their insertion order. Overwriting an existing key keeps
    its position and the key object first stored. The default mode is
    case-insensitive.
    """

    __slots__ = ("_mode", "_comparer", "_entries")

    kind = "lexicon"

    def __init__(
        self,
        entries: Any = None,
        *,
        mode: ComparisonMode = ComparisonMode.CASE_INSENSITIVE,
    ) -> None:
        self._mode = ComparisonMode(mode)
        self._comparer = comparer_for(self._mode)
        self._entries: dict[_KeyRef, Value] = {}
        if entries:
            pairs = entries.items() if hasattr(entries, "items") else entries
            for key, value in pairs:
                self.add(key, value)

    def _ref(self, key: Any) -> _KeyRef:
        return _KeyRef(to_value(key), self._comparer)

    # ------------------------------------------------------------------
    # Mode
    # ------------------------------------------------------------------
    @property
    def mode(self) -> ComparisonMode:
        return self._mode

    @property
    def case_sensitive(self) -> bool:
        return self._mode.case_sensitive

    @case_sensitive.setter
    def case_sensitive(self, flag: bool) -> None:
        self.set_mode(ComparisonMode.from_flag(bool(flag)))

    def set_mode(self, mode: ComparisonMode) -> None:
        """Switch the comparison mode; a real switch discards every entry."""

        mode = ComparisonMode(mode)
        if mode is self._mode:
            return
        dropped = len(self._entries)
        self._mode = mode
        self._comparer = comparer_for(mode)
        self._entries = {}
        logger.info("Lexicon comparison mode set to %s (discarded %d entries)", mode.value, dropped)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------
    def get(self, key: Any) -> Value:
        ref = self._ref(key)
        try:
            return self._entries[ref]
        except KeyError:
            raise KeyNotFoundError(ref.key, self.case_sensitive) from None

    def try_get(self, key: Any) -> Tuple[Value | None, bool]:
        ref = self._ref(key)
        if ref in self._entries:
            return self._entries[ref], True
        return None, False

    def contains_key(self, key: Any) -> bool:
        return self._ref(key) in self._entries

    def contains_value(self, value: Any) -> bool:
        needle = to_value(value)
        return needle in self._entries.values()

    def contains_entry(self, key: Any, value: Any) -> bool:
        found, ok = self.try_get(key)
        if not ok or found is None:
            return False
        needle = to_value(value)
        return found == needle

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------
    def set(self, key: Any, value: Any) -> None:
        self._entries[self._ref(key)] = to_value(value)

    def add(self, key: Any, value: Any) -> None:
        ref = self._ref(key)
        if ref in self._entries:
            raise DuplicateKeyError(ref.key, self.case_sensitive)
        self._entries[ref] = to_value(value)

    def remove(self, key: Any) -> bool:
        return self._entries.pop(self._ref(key), None) is not None

    def remove_entry(self, key: Any, value: Any) -> bool:
        if not self.contains_entry(key, value):
            return False
        return self.remove(key)

    def clear(self) -> None:
        self._entries.clear()

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------
    @property
    def count(self) -> int:
        return len(self._entries)

    def keys(self) -> ListValue:
        return ListValue(tuple(ref.key for ref in self._entries))

    def values(self) -> ListValue:
        return ListValue(tuple(self._entries.values()))

    def items(self) -> Iterator[Tuple[Value, Value]]:
        for ref, value in self._entries.items():
            yield ref.key, value

    def copy(self) -> Lexicon:
        return self._copy({})

    def _copy(self, memo: dict[int, Lexicon]) -> Lexicon:
        clone = Lexicon(mode=self._mode)
        # registered before the entries so cycles resolve to the clone
        memo[id(self)] = clone
        for ref, value in self._entries.items():
            clone._entries[_KeyRef(ref.key, clone._comparer)] = _copy_value(value, memo)
        return clone

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------
    def dump(self) -> "DumpRecord":
        from lexmap.io.dump import dump_lexicon

        return dump_lexicon(self)

    def load_dump(self, record: "DumpRecord", *, strict: bool = False) -> None:
        from lexmap.io.dump import load_dump

        load_dump(self, record, strict=strict)

    def to_primitive(self) -> list[list[Any]]:
        return [[key.to_primitive(), value.to_primitive()] for key, value in self.items()]

    # ------------------------------------------------------------------
    # Python protocol
    # ------------------------------------------------------------------
    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: Any) -> bool:
        return self.contains_key(key)

    def __getitem__(self, key: Any) -> Value:
        return self.get(key)

    def __setitem__(self, key: Any, value: Any) -> None:
        self.set(key, value)

    def __str__(self) -> str:
        from lexmap.io.dump import format_dump

        return format_dump(self.dump())

    def __repr__(self) -> str:
        return f"Lexicon(count={len(self._entries)}, mode={self._mode.value!r})"


def _copy_value(value: Value, memo: dict[int, Lexicon]) -> Value:
    if isinstance(value, Lexicon):
        seen = memo.get(id(value))
        return seen if seen is not None else value._copy(memo)
    if isinstance(value, ListValue):
        return ListValue(tuple(_copy_value(item, memo) for item in value))
    return value


class IndexAdapter:
    """Index-style access to a lexicon for hosts that address containers by index.

    Integer indices are converted to ``IntegerValue`` keys; they are not
    positions.
    """

    __slots__ = ("lexicon",)

    def __init__(self, lexicon: Lexicon) -> None:
        self.lexicon = lexicon

    def get_index(self, index: Any) -> Value:
        return self.lexicon.get(from_primitive(index))

    def set_index(self, index: Any, value: Any) -> None:
        self.lexicon.set(from_primitive(index), value)


__all__ = ["Lexicon", "IndexAdapter"]
