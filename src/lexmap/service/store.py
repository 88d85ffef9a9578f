"""Named lexicons held by a service instance."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Dict, List, Optional, Tuple, TypeVar

from lexmap.config import AppConfig
from lexmap.contracts.error import PolicyError
from lexmap.core.comparer import ComparisonMode
from lexmap.core.lexicon import Lexicon

logger = logging.getLogger("lexmap")
T = TypeVar("T")


class LexiconStore:
    """Named lexicons with access serialized by a single lock.

    Lexicons are single-writer containers; every read or mutation that goes
    through the store runs while holding ``_lock``.
    """

    def __init__(self, config: Optional[AppConfig] = None) -> None:
        self.config = config or AppConfig()
        self._lock = threading.Lock()
        self._lexicons: Dict[str, Lexicon] = {}

    def create(self, name: str, *, case_sensitive: Optional[bool] = None, replace: bool = False) -> Lexicon:
        if case_sensitive is None:
            case_sensitive = self.config.lexicon.case_sensitive
        with self._lock:
            if name in self._lexicons and not replace:
                raise PolicyError(f"Lexicon {name!r} already exists", hint="Set replace=true to overwrite it.")
            lex = Lexicon(mode=ComparisonMode.from_flag(case_sensitive))
            self._lexicons[name] = lex
        logger.info("Created lexicon %s (%s)", name, lex.mode.value)
        return lex

    def delete(self, name: str) -> None:
        with self._lock:
            del self._lexicons[name]

    def summaries(self) -> List[Tuple[str, int, bool]]:
        with self._lock:
            return [(name, len(lex), lex.case_sensitive) for name, lex in self._lexicons.items()]

    def apply(self, name: str, fn: Callable[[Lexicon], T]) -> T:
        """Run ``fn`` against the named lexicon while holding the store lock.

        Raises ``KeyError`` when no lexicon of that name exists.
        """

        with self._lock:
            lex = self._lexicons[name]
            return fn(lex)


__all__ = ["LexiconStore"]
