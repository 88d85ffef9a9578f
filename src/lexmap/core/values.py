"""Value variants stored in a lexicon, plus literal conversion.

Every key and value held by a :class:`~lexmap.core.lexicon.Lexicon` is a
:class:`Value`. The variants form a closed set; each defines its own
equality and hash, and values of two different variants never compare
equal (``IntegerValue(1) != DoubleValue(1.0)``).
"""

from __future__ import annotations

import math
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any, ClassVar, overload


class Value:
    """Base class for all lexicon values."""

    __slots__ = ()

    kind: ClassVar[str] = "value"

    def to_primitive(self) -> Any:
        raise NotImplementedError

    def display(self) -> str:
        """Text used when the value appears inside a DUMP listing."""

        return str(self)


@dataclass(frozen=True, slots=True)
class StringValue(Value):
    text: str

    kind: ClassVar[str] = "string"

    def __str__(self) -> str:
        return self.text

    def display(self) -> str:
        return '"' + self.text.replace('"', '\\"') + '"'

    def to_primitive(self) -> str:
        return self.text

    def lowered(self) -> str:
        return self.text.lower()


@dataclass(frozen=True, slots=True)
class IntegerValue(Value):
    number: int

    kind: ClassVar[str] = "integer"

    def __str__(self) -> str:
        return str(self.number)

    def to_primitive(self) -> int:
        return self.number


@dataclass(frozen=True, slots=True)
class DoubleValue(Value):
    number: float

    kind: ClassVar[str] = "double"

    def __str__(self) -> str:
        if math.isfinite(self.number) and self.number.is_integer():
            return str(int(self.number))
        return repr(self.number)

    def to_primitive(self) -> float:
        return self.number


@dataclass(frozen=True, slots=True)
class BooleanValue(Value):
    flag: bool

    kind: ClassVar[str] = "boolean"

    def __str__(self) -> str:
        return "True" if self.flag else "False"

    def __bool__(self) -> bool:
        return self.flag

    def to_primitive(self) -> bool:
        return self.flag


@dataclass(frozen=True, slots=True)
class ListValue(Value):
    """Immutable ordered sequence of values.

    Used for composite keys/values and for the ``keys()``/``values()``
    snapshots a lexicon hands out, which must not change when the live
    container does.
    """

    items: tuple[Value, ...] = ()

    kind: ClassVar[str] = "list"

    @classmethod
    def of(cls, *items: Any) -> ListValue:
        return cls(tuple(to_value(item) for item in items))

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[Value]:
        return iter(self.items)

    @overload
    def __getitem__(self, index: int) -> Value: ...

    @overload
    def __getitem__(self, index: slice) -> tuple[Value, ...]: ...

    def __getitem__(self, index: int | slice) -> Value | tuple[Value, ...]:
        return self.items[index]

    def __str__(self) -> str:
        return "LIST of " + str(len(self.items)) + " items"

    def to_primitive(self) -> list[Any]:
        return [item.to_primitive() for item in self.items]


def to_value(obj: Any) -> Value:
    """Convert a Python literal (or an existing Value) into a Value variant."""

    if isinstance(obj, Value):
        return obj
    # bool first: it is an int subclass
    if isinstance(obj, bool):
        return BooleanValue(obj)
    if isinstance(obj, int):
        return IntegerValue(obj)
    if isinstance(obj, float):
        return DoubleValue(obj)
    if isinstance(obj, str):
        return StringValue(obj)
    if isinstance(obj, (list, tuple)):
        return ListValue(tuple(to_value(item) for item in obj))
    raise TypeError(f"Cannot convert {type(obj).__name__} to a lexicon value")


def from_primitive(obj: Any) -> Value:
    """Alias used by index-based accessors that receive raw host literals."""

    return to_value(obj)


__all__ = [
    "Value",
    "StringValue",
    "IntegerValue",
    "DoubleValue",
    "BooleanValue",
    "ListValue",
    "to_value",
    "from_primitive",
]
