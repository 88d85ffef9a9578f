from pathlib import Path
from unittest import mock

import pytest

from lexmap.contracts.error import DuplicateKeyError, MalformedDumpError
from lexmap.core.comparer import ComparisonMode
from lexmap.core.lexicon import Lexicon
from lexmap.io import snapshot
from lexmap.io.dump import DumpRecord


def _lexicon() -> Lexicon:
    lex = Lexicon(mode=ComparisonMode.CASE_SENSITIVE)
    lex.add("b", 1)
    lex.add("B", 2)
    lex.add("a", [True, 1.5])
    return lex


def test_save_and_load_preserve_mode_and_order(tmp_path: Path) -> None:
    target = tmp_path / "data.lex"
    original = _lexicon()
    snapshot.save_lexicon(original, target, compress=True)
    restored = snapshot.load_lexicon(target)
    assert restored.case_sensitive is True
    assert list(restored.items()) == list(original.items())


def test_json_documents_are_supported(tmp_path: Path) -> None:
    target = tmp_path / "data.json"
    snapshot.save_lexicon(_lexicon(), target, compress=True)
    assert target.read_text(encoding="utf-8").startswith("{")
    restored = snapshot.load_lexicon(target)
    assert restored.keys().to_primitive() == ["b", "B", "a"]


def test_load_lexicon_honours_strict_flag(tmp_path: Path) -> None:
    target = tmp_path / "dupes.json"
    target.write_text(
        DumpRecord(header="LEXICON of 2 items:", entries=("k", 1, "K", 2)).to_json(),
        encoding="utf-8",
    )
    assert len(snapshot.load_lexicon(target)) == 1
    with pytest.raises(DuplicateKeyError):
        snapshot.load_lexicon(target, strict=True)


def test_malformed_json_document(tmp_path: Path) -> None:
    target = tmp_path / "bad.json"
    target.write_text('{"header": "x", "entries": [1]}', encoding="utf-8")
    with pytest.raises(MalformedDumpError):
        snapshot.load_lexicon(target)


def test_missing_file_raises_file_not_found(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        snapshot.load_lexicon(tmp_path / "absent.lex")


def test_failed_save_leaves_no_temp_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    target = tmp_path / "data.lex"
    monkeypatch.setattr(snapshot, "write_snapshot", mock.Mock(side_effect=RuntimeError("boom")))
    with pytest.raises(RuntimeError, match="boom"):
        snapshot.save_lexicon(_lexicon(), target, compress=False)
    assert not target.exists()
    assert list(tmp_path.iterdir()) == []
