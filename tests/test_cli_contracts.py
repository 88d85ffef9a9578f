import contextlib
import io
import json
import shlex
from pathlib import Path

from lexmap.cli import app as cli_app
from lexmap.io.snapshot import load_lexicon


def run_cli(cmd: str):
    argv = shlex.split(cmd)
    stdout = io.StringIO()
    stderr = io.StringIO()
    with contextlib.redirect_stdout(stdout), contextlib.redirect_stderr(stderr):
        try:
            code = cli_app.main(argv)
        except SystemExit as exc:  # CLI may call sys.exit
            code = exc.code if isinstance(exc.code, int) else 1
    cli_app.OUTPUT_JSON = False
    return code, stdout.getvalue().strip(), stderr.getvalue().strip()


def parse_error(stderr: str) -> dict:
    if not stderr.strip():
        return {}
    return json.loads(stderr.splitlines()[-1])


def test_new_add_get_roundtrip(tmp_path: Path) -> None:
    target = tmp_path / "words.lex"
    code, out, _ = run_cli(f"new {target}")
    assert code == 0
    assert out == f"created {target}"

    assert run_cli(f"add {target} Alpha 1")[0] == 0
    assert run_cli(f"add {target} beta '[1, 2]'")[0] == 0

    code, out, _ = run_cli(f"get {target} ALPHA")
    assert code == 0
    assert out == "1"

    code, out, _ = run_cli(f"keys {target}")
    assert code == 0
    assert out.splitlines() == ["Alpha", "beta"]

    code, out, _ = run_cli(f"length {target}")
    assert out == "2"


def test_new_refuses_existing_file(tmp_path: Path) -> None:
    target = tmp_path / "words.lex"
    run_cli(f"new {target}")
    code, _, err = run_cli(f"new {target}")
    env = parse_error(err)
    assert code == 4
    assert env["error"] == "Policy"
    assert "--force" in env["hint"]
    assert run_cli(f"new {target} --force --case-sensitive")[0] == 0
    assert load_lexicon(target).case_sensitive is True


def test_duplicate_add_reports_duplicate_key(tmp_path: Path) -> None:
    target = tmp_path / "words.lex"
    run_cli(f"new {target}")
    run_cli(f"add {target} key 1")
    code, _, err = run_cli(f"add {target} KEY 2")
    env = parse_error(err)
    assert code == 4
    assert env["error"] == "DuplicateKey"
    assert "CASESENSITIVE" in env["hint"]


def test_missing_key_reports_key_not_found(tmp_path: Path) -> None:
    target = tmp_path / "words.lex"
    run_cli(f"new {target} --case-sensitive")
    run_cli(f"set {target} key 1")
    code, _, err = run_cli(f"get {target} KEY")
    env = parse_error(err)
    assert code == 2
    assert env["error"] == "KeyNotFound"
    assert "KEY" in env["detail"]


def test_missing_file_returns_io(tmp_path: Path) -> None:
    code, _, err = run_cli(f"get {tmp_path / 'absent.lex'} key")
    assert code == 5
    assert parse_error(err)["error"] == "FileNotFound"


def test_corrupt_file_returns_bad_input(tmp_path: Path) -> None:
    target = tmp_path / "junk.lex"
    target.write_bytes(b"not a snapshot at all")
    code, _, err = run_cli(f"length {target}")
    assert code == 2
    assert parse_error(err)["error"] == "BadInput"


def test_remove_and_has_key(tmp_path: Path) -> None:
    target = tmp_path / "words.lex"
    run_cli(f"new {target}")
    run_cli(f"add {target} Key 1")
    assert run_cli(f"has-key {target} key")[1] == "True"
    assert run_cli(f"remove {target} KEY")[1] == "true"
    assert run_cli(f"remove {target} KEY")[1] == "false"
    assert run_cli(f"has-key {target} key")[1] == "False"


def test_case_switch_clears_entries(tmp_path: Path) -> None:
    target = tmp_path / "words.lex"
    run_cli(f"new {target}")
    run_cli(f"add {target} Key 1")
    code, out, err = run_cli(f"case {target} --set on")
    assert code == 0
    assert out == "true"
    assert "cleared 1 entries" in err
    assert len(load_lexicon(target)) == 0
    assert run_cli(f"case {target}")[1] == "true"


def test_suffix_command_and_json_output(tmp_path: Path) -> None:
    target = tmp_path / "words.lex"
    run_cli(f"new {target}")
    assert run_cli(f"suffix {target} add colour red")[0] == 0
    code, out, _ = run_cli(f"--json suffix {target} HASVALUE red")
    payload = json.loads(out)
    assert code == 0
    assert payload == {
        "ok": True,
        "command": "suffix",
        "file": str(target),
        "suffix": "HASVALUE",
        "result": True,
    }

    code, _, err = run_cli(f"suffix {target} SORT")
    env = parse_error(err)
    assert code == 2
    assert env["error"] == "BadInput"

    code, _, err = run_cli(f"suffix {target} ADD only-key")
    assert code == 2


def test_dump_text_and_document(tmp_path: Path) -> None:
    target = tmp_path / "words.lex"
    run_cli(f"new {target}")
    run_cli(f"add {target} Alpha 1")
    code, out, _ = run_cli(f"dump {target}")
    assert code == 0
    assert out.splitlines() == ["LEXICON of 1 items:", '  ["Alpha"] = 1']

    code, out, _ = run_cli(f"dump {target} --document")
    document = json.loads(out)
    assert document["entries"] == ["Alpha", 1]
    assert document["case_sensitive"] is False


def test_copy_and_inspect_snapshot(tmp_path: Path) -> None:
    source = tmp_path / "a.lex"
    dest = tmp_path / "b.lex"
    run_cli(f"new {source}")
    run_cli(f"add {source} x 1")
    code, out, _ = run_cli(f"copy {source} {dest}")
    assert code == 0
    assert load_lexicon(dest).keys().to_primitive() == ["x"]

    code, out, _ = run_cli(f"--json inspect-snapshot {dest}")
    payload = json.loads(out)
    assert payload["version"] == 1
    assert payload["compressed"] is True

    json_doc = tmp_path / "doc.json"
    run_cli(f"copy {source} {json_doc}")
    code, _, err = run_cli(f"inspect-snapshot {json_doc}")
    assert code == 2
    assert parse_error(err)["error"] == "BadInput"


def test_config_controls_default_mode(tmp_path: Path) -> None:
    cfg = tmp_path / "config.toml"
    cfg.write_text("[lexicon]\ncase_sensitive = true\n", encoding="utf-8")
    target = tmp_path / "words.lex"
    assert run_cli(f"--config {cfg} new {target}")[0] == 0
    assert load_lexicon(target).case_sensitive is True

    bad = tmp_path / "bad.toml"
    bad.write_text("[lexicon]\nnope = 1\n", encoding="utf-8")
    code, _, err = run_cli(f"--config {bad} suffixes")
    assert code == 2
    assert parse_error(err)["error"] == "BadInput"


def test_suffixes_listing() -> None:
    code, out, _ = run_cli("--json suffixes")
    assert code == 0
    names = {row["name"] for row in json.loads(out)["suffixes"]}
    assert "HASKEY" in names
    assert "CASESENSITIVE / CASE" in names
