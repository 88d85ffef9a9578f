"""I/O helpers for lexmap."""

from .dump import DumpRecord, decode_value, dump_lexicon, encode_value, format_dump, load_dump
from .snapshot import load_lexicon, read_record, save_lexicon
from .snapshot_header import (
    SnapshotHeader,
    describe_snapshot,
    dumps_snapshot,
    loads_snapshot,
    read_snapshot,
    write_snapshot,
)

__all__ = [
    "DumpRecord",
    "decode_value",
    "dump_lexicon",
    "encode_value",
    "format_dump",
    "load_dump",
    "SnapshotHeader",
    "describe_snapshot",
    "dumps_snapshot",
    "loads_snapshot",
    "read_snapshot",
    "write_snapshot",
    "load_lexicon",
    "read_record",
    "save_lexicon",
]
