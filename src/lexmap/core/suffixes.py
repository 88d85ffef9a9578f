"""Named operations ("suffixes") a scripting host can invoke on a lexicon."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from lexmap.contracts.error import BadInputError, PolicyError, SuffixArityError, UnknownSuffixError

from .lexicon import Lexicon
from .values import BooleanValue, IntegerValue, StringValue, Value, to_value


@dataclass(frozen=True, slots=True)
class Suffix:
    names: Tuple[str, ...]
    arity: int
    call: Callable[..., Optional[Value]]
    description: str
    setter: Optional[Callable[[Lexicon, Value], None]] = None


def _clear(lex: Lexicon) -> None:
    lex.clear()


def _add(lex: Lexicon, key: Value, value: Value) -> None:
    lex.add(key, value)


def _set_case(lex: Lexicon, value: Value) -> None:
    if not isinstance(value, BooleanValue):
        raise BadInputError(f"CASESENSITIVE expects a boolean, got {value.kind}")
    lex.case_sensitive = value.flag


_SUFFIXES: Tuple[Suffix, ...] = (
    Suffix(("CLEAR",), 0, _clear, "Removes all items from Lexicon"),
    Suffix(("KEYS",), 0, lambda lex: lex.keys(), "Returns the lexicon keys"),
    Suffix(("VALUES",), 0, lambda lex: lex.values(), "Returns the lexicon values"),
    Suffix(
        ("HASKEY",),
        1,
        lambda lex, key: BooleanValue(lex.contains_key(key)),
        "Returns true if a key is in the Lexicon",
    ),
    Suffix(
        ("HASVALUE",),
        1,
        lambda lex, value: BooleanValue(lex.contains_value(value)),
        "Returns true if value is in the Lexicon",
    ),
    Suffix(
        ("LENGTH",),
        0,
        lambda lex: IntegerValue(lex.count),
        "Returns the number of elements in the collection",
    ),
    Suffix(("COPY",), 0, lambda lex: lex.copy(), "Returns a copy of Lexicon"),
    Suffix(
        ("ADD",),
        2,
        _add,
        "Adds a new item to the lexicon, will error if the key already exists",
    ),
    Suffix(
        ("REMOVE",),
        1,
        lambda lex, key: BooleanValue(lex.remove(key)),
        "Removes the value at the given key",
    ),
    Suffix(
        ("DUMP",),
        0,
        lambda lex: StringValue(str(lex)),
        "Serializes the collection to a string for printing",
    ),
    Suffix(
        ("CASESENSITIVE", "CASE"),
        0,
        lambda lex: BooleanValue(lex.case_sensitive),
        "Lets you get/set the case sensitivity on the collection, "
        "changing sensitivity will clear the collection",
        setter=_set_case,
    ),
)

_BY_NAME: Dict[str, Suffix] = {name: suffix for suffix in _SUFFIXES for name in suffix.names}


def get_suffix(name: str) -> Suffix:
    try:
        return _BY_NAME[name.strip().upper()]
    except KeyError:
        raise UnknownSuffixError(
            f"Lexicon has no suffix named {name!r}",
            hint="Known suffixes: " + ", ".join(sorted(_BY_NAME)),
        ) from None


def invoke_suffix(lex: Lexicon, name: str, *args: Any) -> Optional[Value]:
    """Call the suffix ``name`` with ``args`` (converted to values)."""

    suffix = get_suffix(name)
    if len(args) != suffix.arity:
        raise SuffixArityError(
            f"{suffix.names[0]} takes {suffix.arity} argument(s), got {len(args)}"
        )
    return suffix.call(lex, *(to_value(arg) for arg in args))


def set_suffix(lex: Lexicon, name: str, value: Any) -> None:
    suffix = get_suffix(name)
    if suffix.setter is None:
        raise PolicyError(f"Suffix {suffix.names[0]} is read-only")
    suffix.setter(lex, to_value(value))


def describe_suffixes() -> List[Tuple[str, int, str]]:
    return [(" / ".join(s.names), s.arity, s.description) for s in _SUFFIXES]


__all__ = ["Suffix", "describe_suffixes", "get_suffix", "invoke_suffix", "set_suffix"]
