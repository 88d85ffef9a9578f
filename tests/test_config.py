from __future__ import annotations

from pathlib import Path

import pytest

from lexmap.config import AppConfig, load_app_config
from lexmap.contracts.error import BadInputError
from lexmap.core.comparer import ComparisonMode


def test_default_config_validates() -> None:
    cfg = load_app_config(None)
    assert cfg.lexicon.case_sensitive is False
    assert cfg.lexicon.mode is ComparisonMode.CASE_INSENSITIVE
    assert cfg.lexicon.strict_load is False
    assert cfg.snapshot.compress is True
    assert cfg.snapshot.max_payload_bytes == 64 * 1024 * 1024


def test_load_from_toml(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    cfg_path = tmp_path / "config.toml"
    cfg_path.write_text(
        """
[lexicon]
case_sensitive = true
strict_load = true

[snapshot]
compress = false
max_payload_bytes = 1024
""",
        encoding="utf-8",
    )
    cfg = load_app_config(str(cfg_path))
    assert cfg.lexicon.case_sensitive is True
    assert cfg.lexicon.mode is ComparisonMode.CASE_SENSITIVE
    assert cfg.lexicon.strict_load is True
    assert cfg.snapshot.compress is False
    assert cfg.snapshot.max_payload_bytes == 1024

    # env override takes precedence
    monkeypatch.setenv("LEXICON_CASE_SENSITIVE", "off")
    monkeypatch.setenv("SNAPSHOT_COMPRESS", "yes")
    monkeypatch.setenv("SNAPSHOT_MAX_PAYLOAD_BYTES", "2048")
    cfg_env = AppConfig.load(cfg_path)
    assert cfg_env.lexicon.case_sensitive is False
    assert cfg_env.snapshot.compress is True
    assert cfg_env.snapshot.max_payload_bytes == 2048


def test_invalid_values_raise(tmp_path: Path) -> None:
    bad_path = tmp_path / "bad.toml"
    bad_path.write_text("[snapshot]\nmax_payload_bytes = 0\n", encoding="utf-8")
    with pytest.raises(BadInputError):
        load_app_config(str(bad_path))

    bad_type = tmp_path / "bad_type.toml"
    bad_type.write_text('[lexicon]\ncase_sensitive = "sometimes"\n', encoding="utf-8")
    with pytest.raises(BadInputError):
        load_app_config(str(bad_type))

    unknown = tmp_path / "unknown.toml"
    unknown.write_text("[lexicon]\ncolour = 1\n", encoding="utf-8")
    with pytest.raises(BadInputError, match="Unknown config key"):
        load_app_config(str(unknown))


def test_missing_and_invalid_files(tmp_path: Path) -> None:
    with pytest.raises(BadInputError, match="not found"):
        load_app_config(str(tmp_path / "absent.toml"))
    broken = tmp_path / "broken.toml"
    broken.write_text("[lexicon\n", encoding="utf-8")
    with pytest.raises(BadInputError, match="Invalid TOML"):
        load_app_config(str(broken))


def test_invalid_env_override(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LEXICON_STRICT_LOAD", "maybe")
    with pytest.raises(BadInputError, match="LEXICON_STRICT_LOAD"):
        load_app_config(None)
    monkeypatch.delenv("LEXICON_STRICT_LOAD")
    monkeypatch.setenv("SNAPSHOT_MAX_PAYLOAD_BYTES", "lots")
    with pytest.raises(BadInputError, match="SNAPSHOT_MAX_PAYLOAD_BYTES"):
        load_app_config(None)
