"""Typed configuration loader for lexmap."""

from __future__ import annotations

import os
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .contracts.error import BadInputError
from .core.comparer import ComparisonMode

_TRUE_WORDS = {"1", "true", "yes", "on"}
_FALSE_WORDS = {"0", "false", "no", "off"}


def _coerce_bool(raw: Any, name: str) -> bool:
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, str):
        normalized = raw.strip().lower()
        if normalized in _TRUE_WORDS:
            return True
        if normalized in _FALSE_WORDS:
            return False
    raise BadInputError(f"{name} must be boolean")


@dataclass
class LexiconPolicy:
    case_sensitive: bool = False
    strict_load: bool = False

    @property
    def mode(self) -> ComparisonMode:
        return ComparisonMode.from_flag(self.case_sensitive)

    def validate(self) -> None:
        if not isinstance(self.case_sensitive, bool):
            raise BadInputError("lexicon.case_sensitive must be boolean")
        if not isinstance(self.strict_load, bool):
            raise BadInputError("lexicon.strict_load must be boolean")


@dataclass
class SnapshotPolicy:
    compress: bool = True
    max_payload_bytes: int = 64 * 1024 * 1024

    def validate(self) -> None:
        if not isinstance(self.compress, bool):
            raise BadInputError("snapshot.compress must be boolean")
        if isinstance(self.max_payload_bytes, bool) or not isinstance(self.max_payload_bytes, int):
            raise BadInputError("snapshot.max_payload_bytes must be an integer")
        if self.max_payload_bytes <= 0:
            raise BadInputError("snapshot.max_payload_bytes must be > 0")


@dataclass
class AppConfig:
    lexicon: LexiconPolicy = field(default_factory=LexiconPolicy)
    snapshot: SnapshotPolicy = field(default_factory=SnapshotPolicy)

    @classmethod
    def load(cls, path: Path | None) -> AppConfig:
        if path is None:
            cfg = cls()
        else:
            try:
                data = tomllib.loads(path.read_text(encoding="utf-8"))
            except FileNotFoundError as exc:
                raise BadInputError(f"Config file not found: {path}") from exc
            except tomllib.TOMLDecodeError as exc:
                raise BadInputError(f"Invalid TOML: {exc}") from exc
            cfg = cls.from_dict(data)
        cfg.apply_env_overrides(os.environ)
        cfg.validate()
        return cfg

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AppConfig:
        lexicon_data = data.get("lexicon", {})
        if not isinstance(lexicon_data, dict):
            raise BadInputError("[lexicon] section must be a table")
        snapshot_data = data.get("snapshot", {})
        if not isinstance(snapshot_data, dict):
            raise BadInputError("[snapshot] section must be a table")
        try:
            lexicon = LexiconPolicy(**lexicon_data)
            snapshot = SnapshotPolicy(**snapshot_data)
        except TypeError as exc:
            raise BadInputError(f"Unknown config key: {exc}") from exc
        return cls(lexicon=lexicon, snapshot=snapshot)

    def apply_env_overrides(self, env: Mapping[str, str]) -> None:
        bool_overrides: dict[str, tuple[object, str]] = {
            "LEXICON_CASE_SENSITIVE": (self.lexicon, "case_sensitive"),
            "LEXICON_STRICT_LOAD": (self.lexicon, "strict_load"),
            "SNAPSHOT_COMPRESS": (self.snapshot, "compress"),
        }
        for key, (target, attr) in bool_overrides.items():
            raw_value = env.get(key)
            if raw_value is None:
                continue
            try:
                value = _coerce_bool(raw_value, key)
            except BadInputError as exc:
                raise BadInputError(f"Invalid env override {key}={raw_value!r}") from exc
            setattr(target, attr, value)

        raw_cap = env.get("SNAPSHOT_MAX_PAYLOAD_BYTES")
        if raw_cap is not None:
            try:
                self.snapshot.max_payload_bytes = int(raw_cap)
            except ValueError as exc:
                raise BadInputError(
                    f"Invalid env override SNAPSHOT_MAX_PAYLOAD_BYTES={raw_cap!r}"
                ) from exc

    def validate(self) -> None:
        self.lexicon.validate()
        self.snapshot.validate()


def load_app_config(path: str | None) -> AppConfig:
    config_path = Path(path) if path else None
    return AppConfig.load(config_path)


__all__ = ["AppConfig", "LexiconPolicy", "SnapshotPolicy", "load_app_config"]
