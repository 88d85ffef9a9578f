"""Dump codec: lexicon entries to/from an ordered flat record."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from functools import lru_cache
from importlib import resources
from typing import Any, Dict, List, Tuple

from jsonschema import Draft202012Validator

from lexmap.contracts.error import DuplicateKeyError, MalformedDumpError
from lexmap.core.comparer import ComparisonMode
from lexmap.core.lexicon import Lexicon
from lexmap.core.values import (
    BooleanValue,
    DoubleValue,
    IntegerValue,
    ListValue,
    StringValue,
    Value,
)

logger = logging.getLogger("lexmap")

HEADER_TEMPLATE = "LEXICON of {count} items:"
TYPE_TAG = "$type"


@dataclass(frozen=True, slots=True)
class DumpRecord:
    """Header plus the flat ``[key, value, key, value, ...]`` entry sequence."""

    header: str
    entries: Tuple[Any, ...]
    case_sensitive: bool = False

    def to_document(self) -> Dict[str, Any]:
        return {
            "header": self.header,
            "case_sensitive": self.case_sensitive,
            "entries": list(self.entries),
        }

    @classmethod
    def from_document(cls, document: Any) -> DumpRecord:
        """Validate a JSON-ready document against the bundled schema."""

        errors = sorted(_validator().iter_errors(document), key=lambda err: list(err.path))
        if errors:
            first = errors[0]
            where = "/".join(str(part) for part in first.path) or "<root>"
            raise MalformedDumpError(f"Invalid dump document at {where}: {first.message}")
        return cls(
            header=document["header"],
            entries=tuple(document["entries"]),
            case_sensitive=bool(document.get("case_sensitive", False)),
        )

    def to_json(self) -> str:
        return json.dumps(self.to_document(), ensure_ascii=False)

    @classmethod
    def from_json(cls, text: str) -> DumpRecord:
        try:
            document = json.loads(text)
        except json.JSONDecodeError as exc:
            raise MalformedDumpError(f"Dump is not valid JSON: {exc}") from exc
        return cls.from_document(document)


@lru_cache(maxsize=1)
def _validator() -> Draft202012Validator:
    schema_resource = resources.files("lexmap.contracts") / "dump_schema.json"
    with schema_resource.open(encoding="utf-8") as stream:
        return Draft202012Validator(json.load(stream))


def encode_value(value: Value) -> Any:
    if isinstance(value, StringValue):
        return value.text
    if isinstance(value, BooleanValue):
        return value.flag
    if isinstance(value, IntegerValue):
        return value.number
    if isinstance(value, DoubleValue):
        return value.number
    if isinstance(value, ListValue):
        return {TYPE_TAG: "list", "items": [encode_value(item) for item in value]}
    if isinstance(value, Lexicon):
        nested = dump_lexicon(value).to_document()
        return {TYPE_TAG: "lexicon", **nested}
    raise TypeError(f"Cannot encode {type(value).__name__}")


def decode_value(raw: Any) -> Value:
    if isinstance(raw, Value):
        return raw
    if isinstance(raw, bool):
        return BooleanValue(raw)
    if isinstance(raw, int):
        return IntegerValue(raw)
    if isinstance(raw, float):
        return DoubleValue(raw)
    if isinstance(raw, str):
        return StringValue(raw)
    if isinstance(raw, Mapping):
        tag = raw.get(TYPE_TAG)
        if tag == "list":
            items = raw.get("items")
            if not isinstance(items, Sequence) or isinstance(items, str):
                raise MalformedDumpError("List value is missing its items")
            return ListValue(tuple(decode_value(item) for item in items))
        if tag == "lexicon":
            entries = raw.get("entries")
            if not isinstance(entries, Sequence) or isinstance(entries, str):
                raise MalformedDumpError("Nested lexicon is missing its entries")
            case_sensitive = bool(raw.get("case_sensitive", False))
            nested = Lexicon(mode=ComparisonMode.from_flag(case_sensitive))
            load_dump(
                nested,
                DumpRecord(header=str(raw.get("header", "")), entries=tuple(entries), case_sensitive=case_sensitive),
            )
            return nested
        raise MalformedDumpError(f"Unknown value tag {tag!r}")
    raise MalformedDumpError(f"Cannot decode value of type {type(raw).__name__}")


def dump_lexicon(lex: Lexicon) -> DumpRecord:
    flat: List[Any] = []
    for key, value in lex.items():
        flat.append(encode_value(key))
        flat.append(encode_value(value))
    return DumpRecord(
        header=HEADER_TEMPLATE.format(count=len(lex)),
        entries=tuple(flat),
        case_sensitive=lex.case_sensitive,
    )


def _check_pairs(entries: Sequence[Any]) -> None:
    if len(entries) % 2:
        raise MalformedDumpError(
            f"Dump entries must alternate key/value pairs (got {len(entries)} items)"
        )


def load_dump(lex: Lexicon, record: DumpRecord, *, strict: bool = False) -> None:
    """Replace ``lex``'s entries with the pairs in ``record``.

    The target keeps its own comparison mode. Pairs whose keys collide under
    that mode overwrite the earlier value in place unless ``strict`` is set,
    in which case ``DuplicateKeyError`` is raised at the colliding pair.
    """

    lex.clear()
    values = record.entries
    _check_pairs(values)
    collapsed = 0
    for i in range(len(values) // 2):
        key = decode_value(values[2 * i])
        value = decode_value(values[2 * i + 1])
        if lex.contains_key(key):
            if strict:
                raise DuplicateKeyError(key, lex.case_sensitive)
            collapsed += 1
            logger.warning("Dump key %s collides with an earlier key; keeping the later value", key)
        lex.set(key, value)
    logger.debug("Loaded %d dump entries (%d collapsed)", len(values) // 2, collapsed)


def _render(raw: Any, indent: int, lines: List[str]) -> str:
    """Return the inline text for ``raw``; nested content is appended to ``lines``."""

    if isinstance(raw, Lexicon):
        raw = encode_value(raw)
    if isinstance(raw, Mapping):
        tag = raw.get(TYPE_TAG)
        if tag == "lexicon":
            entries = list(raw.get("entries", ()))
            _render_pairs(entries, indent + 2, lines)
            return str(raw.get("header", ""))
        if tag == "list":
            items = list(raw.get("items", ()))
            for idx, item in enumerate(items):
                nested: List[str] = []
                text = _render(item, indent + 2, nested)
                lines.append(" " * (indent + 2) + f"[{idx}] = {text}")
                lines.extend(nested)
            return f"LIST of {len(items)} items:"
    return decode_value(raw).display()


def _render_pairs(entries: Sequence[Any], indent: int, lines: List[str]) -> None:
    _check_pairs(entries)
    for i in range(len(entries) // 2):
        nested: List[str] = []
        key_text = _render(entries[2 * i], indent, [])
        value_text = _render(entries[2 * i + 1], indent, nested)
        lines.append(" " * indent + f"[{key_text}] = {value_text}")
        lines.extend(nested)


def format_dump(record: DumpRecord) -> str:
    """Human-readable DUMP text: the header, then one ``[key] = value`` line per entry."""

    lines = [record.header]
    _render_pairs(record.entries, 2, lines)
    return "\n".join(lines)


__all__ = [
    "DumpRecord",
    "HEADER_TEMPLATE",
    "decode_value",
    "dump_lexicon",
    "encode_value",
    "format_dump",
    "load_dump",
]
