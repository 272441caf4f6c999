# tests/test_smoke_ctf.py
"""
Smoke test for tools/smoke_ctf.py.

Runs the scripted offline match end to end and checks the JSONL monitoring
log it leaves behind.
"""

from __future__ import annotations

import importlib.util
import json
import logging
from pathlib import Path

import pytest

from ctf.logging_config import configure_logging


TOOL_PATH = Path(__file__).resolve().parents[1] / "tools" / "smoke_ctf.py"


def load_tool():
    spec = importlib.util.spec_from_file_location("smoke_ctf", TOOL_PATH)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_smoke_tool_replays_match(tmp_path: Path, capsys) -> None:
    tool = load_tool()
    log_path = tmp_path / "ctf.log"

    assert tool.main(["--profile", "match", "--log", str(log_path)]) == 0

    out = capsys.readouterr().out
    assert "flagScored" in out
    assert "has flag: True" in out

    records = [json.loads(line) for line in log_path.read_text(encoding="utf-8").splitlines()]
    kinds = [r["payload"]["kind"] for r in records if r["event_type"] == "CTF_EVENT"]
    assert kinds == [
        "flagAvailable",   # banner placed on the spawn cell
        "itemDetected",    # stone spawned
        "flagObtained",    # bob's pickup counter moved
        "itemDetected",    # flag dropped
        "flagAvailable",
        "itemCollected",
        "flagScored",      # RED captured
        "flagObtained",    # bob's counter moved again
    ]
    assert all(r["correlation_id"] == "match" for r in records)


def test_configure_logging_sets_ctf_level() -> None:
    configure_logging(debug_ctf=True)
    assert logging.getLogger("ctf").level == logging.DEBUG

    configure_logging(debug_ctf=False)
    assert logging.getLogger("ctf").level == logging.INFO


def test_smoke_tool_closes_log_when_replay_fails(tmp_path: Path, monkeypatch) -> None:
    tool = load_tool()
    log_path = tmp_path / "ctf.log"
    closed = []

    class RecordingLogger(tool.JsonFileLogger):
        def close(self) -> None:
            closed.append(self.path)
            super().close()

    def broken_replay(client, spawn) -> None:
        raise RuntimeError("connection lost")

    monkeypatch.setattr(tool, "JsonFileLogger", RecordingLogger)
    monkeypatch.setattr(tool, "replay_match", broken_replay)

    with pytest.raises(RuntimeError):
        tool.main(["--profile", "match", "--log", str(log_path)])

    assert closed == [log_path]


def test_profile_log_path_is_anchored_at_project_root() -> None:
    tool = load_tool()

    assert tool._profile_log_path(None) is None
    assert tool._profile_log_path("logs/ctf.log") == TOOL_PATH.parents[1] / "logs" / "ctf.log"
    absolute = Path("/var/log/ctf.log")
    assert tool._profile_log_path(str(absolute)) == absolute
