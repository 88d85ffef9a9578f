from __future__ import annotations

import json

import pytest

from lexmap.contracts.error import (
    BadInputError,
    DuplicateKeyError,
    ErrorEnvelope,
    Exit,
    InvariantError,
    IOErrorEnvelope,
    KeyNotFoundError,
    MalformedDumpError,
    PolicyError,
    guard_cli,
)


def _run_guarded(exc: BaseException) -> int:
    def handler() -> int:
        raise exc

    with pytest.raises(SystemExit) as excinfo:
        guard_cli(handler)()
    return excinfo.value.code


@pytest.mark.parametrize(
    ("exc", "code", "label"),
    [
        (DuplicateKeyError("k", False), Exit.POLICY, "DuplicateKey"),
        (KeyNotFoundError("k", True), Exit.BAD_INPUT, "KeyNotFound"),
        (MalformedDumpError("odd"), Exit.BAD_INPUT, "MalformedDump"),
        (BadInputError("bad"), Exit.BAD_INPUT, "BadInput"),
        (InvariantError("broken"), Exit.INVARIANT, "Invariant"),
        (PolicyError("nope"), Exit.POLICY, "Policy"),
        (IOErrorEnvelope("disk"), Exit.IO, "IO"),
        (FileNotFoundError("missing.lex"), Exit.IO, "FileNotFound"),
    ],
)
def test_guard_cli_maps_errors(
    exc: Exception, code: Exit, label: str, capsys: pytest.CaptureFixture[str]
) -> None:
    exit_code = _run_guarded(exc)
    assert exit_code == int(code)
    envelope = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
    assert envelope["error"] == label


def test_guard_cli_passes_results_through() -> None:
    assert guard_cli(lambda value: value * 2)(21) == 42


def test_lexicon_errors_carry_key_and_mode() -> None:
    dup = DuplicateKeyError("Alpha", False)
    assert dup.key == "Alpha"
    assert dup.case_sensitive is False
    assert "Alpha" in str(dup)
    assert "case-insensitive" in str(dup)
    assert dup.hint and "CASESENSITIVE" in dup.hint
    assert DuplicateKeyError("Alpha", True).hint is None

    missing = KeyNotFoundError("beta", True)
    assert isinstance(missing, BadInputError)
    assert "case-sensitive" in str(missing)
    assert missing.hint
    assert KeyNotFoundError("beta", False).hint is None


def test_error_envelope_omits_empty_hint() -> None:
    assert json.loads(ErrorEnvelope("Policy", "detail").to_json()) == {
        "error": "Policy",
        "detail": "detail",
    }
    with_hint = json.loads(ErrorEnvelope("Policy", "detail", hint="try again").to_json())
    assert with_hint["hint"] == "try again"
