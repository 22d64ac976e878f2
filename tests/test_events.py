from __future__ import annotations

import json
from pathlib import Path

from retouch_engine.runs.events import EventWriter


def test_event_writer(tmp_path: Path) -> None:
    path = tmp_path / "events.jsonl"
    writer = EventWriter(path, "session-123")
    writer.emit("session_started", provider="dryrun")
    lines = path.read_text(encoding="utf-8").strip().splitlines()
    assert len(lines) == 1
    payload = json.loads(lines[0])
    assert payload["type"] == "session_started"
    assert payload["session_id"] == "session-123"
    assert "ts" in payload
    assert payload["provider"] == "dryrun"


def test_event_writer_appends_and_reads_back(tmp_path: Path) -> None:
    writer = EventWriter(tmp_path / "nested" / "events.jsonl", "s")
    writer.emit("prompt_edited", prompt="اجعل السماء زرقاء")
    writer.emit("session_reset")
    events = writer.read_all()
    assert [event["type"] for event in events] == ["prompt_edited", "session_reset"]
    assert events[0]["prompt"] == "اجعل السماء زرقاء"


def test_read_all_without_file(tmp_path: Path) -> None:
    assert EventWriter(tmp_path / "none.jsonl", "s").read_all() == []


def test_state_snapshot_is_nested(tmp_path: Path) -> None:
    writer = EventWriter(tmp_path / "events.jsonl", "s")
    writer.emit("transform_succeeded", state={"has_transformed": True, "is_busy": False}, result_chars=12)
    writer.emit("prompt_edited", prompt="x")
    settled, plain = writer.read_all()
    assert settled["state"] == {"has_transformed": True, "is_busy": False}
    assert settled["result_chars"] == 12
    assert "state" not in plain
