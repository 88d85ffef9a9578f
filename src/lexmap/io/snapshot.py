"""Snapshot file helpers for lexicons."""

from __future__ import annotations

import logging
import os
import tempfile
from contextlib import suppress
from pathlib import Path

from lexmap.core.comparer import ComparisonMode
from lexmap.core.lexicon import Lexicon

from .dump import DumpRecord, dump_lexicon, load_dump
from .snapshot_header import DEFAULT_MAX_PAYLOAD_BYTES, read_snapshot, write_snapshot

logger = logging.getLogger("lexmap")


def read_record(path: str | Path, *, max_payload_bytes: int = DEFAULT_MAX_PAYLOAD_BYTES) -> DumpRecord:
    """Read a dump record from a snapshot file or a plain ``.json`` document."""

    target = Path(path)
    if target.suffix == ".json":
        return DumpRecord.from_json(target.read_text(encoding="utf-8"))
    return read_snapshot(target, max_payload_bytes=max_payload_bytes)


def load_lexicon(
    path: str | Path,
    *,
    strict: bool = False,
    max_payload_bytes: int = DEFAULT_MAX_PAYLOAD_BYTES,
) -> Lexicon:
    """Rebuild a lexicon, in its recorded comparison mode, from ``path``."""

    record = read_record(path, max_payload_bytes=max_payload_bytes)
    lex = Lexicon(mode=ComparisonMode.from_flag(record.case_sensitive))
    load_dump(lex, record, strict=strict)
    logger.debug("Loaded lexicon from %s (%d entries)", path, len(lex))
    return lex


def save_lexicon(lex: Lexicon, path: str | Path, *, compress: bool) -> None:
    """Save a lexicon atomically by writing to a temp file first."""

    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    tmp = tempfile.NamedTemporaryFile(
        delete=False,
        dir=target.parent,
        prefix=f".{target.name}.",
        suffix=".tmp",
    )
    tmp_path = Path(tmp.name)
    tmp.close()
    try:
        record = dump_lexicon(lex)
        if target.suffix == ".json":
            tmp_path.write_text(record.to_json(), encoding="utf-8")
        else:
            write_snapshot(tmp_path, record, compress=compress)
        os.replace(tmp_path, target)
    except Exception:
        with suppress(FileNotFoundError):
            tmp_path.unlink()
        raise
    logger.debug("Saved lexicon to %s (%d entries)", target, len(lex))


__all__ = ["read_record", "load_lexicon", "save_lexicon"]
