"""Lexicon control surface service."""

from .api import create_app
from .models import (
    CreateLexiconRequest,
    DumpDocument,
    LexiconListResponse,
    LexiconSummary,
    SuffixCall,
    SuffixResult,
)
from .store import LexiconStore

__all__ = [
    "create_app",
    "LexiconStore",
    "CreateLexiconRequest",
    "DumpDocument",
    "LexiconListResponse",
    "LexiconSummary",
    "SuffixCall",
    "SuffixResult",
]
