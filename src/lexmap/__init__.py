"""Ordered, case-configurable lexicon container and its dump codec."""

from . import contracts, core, io
from .core import ComparisonMode, IndexAdapter, Lexicon
from .io import DumpRecord

__all__ = [
    "contracts",
    "core",
    "io",
    "ComparisonMode",
    "DumpRecord",
    "IndexAdapter",
    "Lexicon",
]
