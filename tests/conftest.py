import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
if SRC.exists():
    sys.path.insert(0, str(SRC))

# Register shared Hypothesis profiles for deterministic CI runs and fast local loops.
from tests.util import hypothesis_profiles  # noqa: E402,F401  pylint: disable=unused-import

from lexmap.cli import app as cli_app  # noqa: E402


@pytest.fixture(autouse=True)
def _reset_cli_state(monkeypatch: pytest.MonkeyPatch):
    """Keep CLI globals and env-driven config from leaking between tests."""

    for var in (
        "LEXMAP_CONFIG",
        "LEXMAP_TOKEN",
        "LEXICON_CASE_SENSITIVE",
        "LEXICON_STRICT_LOAD",
        "SNAPSHOT_COMPRESS",
        "SNAPSHOT_MAX_PAYLOAD_BYTES",
    ):
        monkeypatch.delenv(var, raising=False)
    handlers = list(cli_app.logger.handlers)
    yield
    cli_app.OUTPUT_JSON = False
    cli_app.logger.handlers = handlers
