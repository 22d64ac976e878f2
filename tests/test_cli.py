from __future__ import annotations

import io
import json
from pathlib import Path

import pytest
from PIL import Image

from retouch_engine.cli import _build_parser, _handle_run, _handle_studio, parse_command


@pytest.fixture(autouse=True)
def _offline_env(monkeypatch) -> None:
    for name in ("GEMINI_API_KEY", "GOOGLE_API_KEY", "API_KEY", "RETOUCH_PROVIDER", "RETOUCH_DOWNLOAD_DIR", "RETOUCH_LOCALE"):
        monkeypatch.delenv(name, raising=False)


def _write_png(path: Path) -> Path:
    buffer = io.BytesIO()
    Image.new("RGB", (32, 32), (200, 40, 40)).save(buffer, format="PNG")
    path.write_bytes(buffer.getvalue())
    return path


def test_parse_command() -> None:
    assert parse_command("") == ("noop", "")
    assert parse_command("make it blue") == ("edit_prompt", "make it blue")
    assert parse_command("/prompt  add a moon ") == ("edit_prompt", "add a moon")
    assert parse_command("/open ~/cat.png") == ("select_image", "~/cat.png")
    assert parse_command("/GO") == ("submit_transform", "")
    assert parse_command("/exit") == ("quit", "")
    assert parse_command("/frobnicate now") == ("unknown", "frobnicate")


def test_run_saves_result(tmp_path: Path, capsys) -> None:
    image = _write_png(tmp_path / "red.png")
    out_dir = tmp_path / "out"
    args = _build_parser().parse_args(
        ["run", "--image", str(image), "--prompt", "make it green", "--out", str(out_dir), "--provider", "dryrun"]
    )

    assert _handle_run(args) == 0

    assert (out_dir / "transformed-image.png").exists()
    events = [json.loads(line) for line in (out_dir / "events.jsonl").read_text(encoding="utf-8").splitlines()]
    types = [event["type"] for event in events]
    assert "transform_succeeded" in types
    assert "download_saved" in types
    assert "Transformed in" in capsys.readouterr().out


def test_run_rejects_non_image(tmp_path: Path, capsys) -> None:
    notes = tmp_path / "notes.txt"
    notes.write_text("hello", encoding="utf-8")
    args = _build_parser().parse_args(
        ["run", "--image", str(notes), "--prompt", "x", "--out", str(tmp_path / "out"), "--provider", "dryrun"]
    )

    assert _handle_run(args) == 1
    assert "valid image file" in capsys.readouterr().out


def test_run_without_key_fails_cleanly(tmp_path: Path, capsys) -> None:
    image = _write_png(tmp_path / "red.png")
    args = _build_parser().parse_args(["run", "--image", str(image), "--prompt", "x", "--out", str(tmp_path / "out")])

    assert _handle_run(args) == 1
    assert "GEMINI_API_KEY" in capsys.readouterr().out


def test_studio_session(tmp_path: Path, capsys) -> None:
    image = _write_png(tmp_path / "red.png")
    out_dir = tmp_path / "studio"
    lines = iter(
        [
            "/go",
            f"/open {image}",
            "turn it into a watercolor",
            "/go",
            "/save",
            "/status",
            "/reset",
            "/quit",
        ]
    )
    args = _build_parser().parse_args(["studio", "--out", str(out_dir), "--provider", "dryrun"])

    assert _handle_studio(args, read_line=lambda _prompt: next(lines)) == 0

    output = capsys.readouterr().out
    assert "! Please choose an image before transforming it." in output
    assert "Image loaded" in output
    assert "Result ready" in output
    assert "Prompt: turn it into a watercolor" in output
    assert "Session reset." in output
    assert (out_dir / "transformed-image.png").exists()


def test_studio_stops_on_eof(tmp_path: Path) -> None:
    def _eof(_prompt: str) -> str:
        raise EOFError

    args = _build_parser().parse_args(["studio", "--out", str(tmp_path / "s"), "--provider", "dryrun"])
    assert _handle_studio(args, read_line=_eof) == 0


def test_studio_save_failure_keeps_session(tmp_path: Path, capsys) -> None:
    image = _write_png(tmp_path / "red.png")
    lines = iter([f"/open {image}", "blue", "/go", f"/save {image}", "/status", "/quit"])
    args = _build_parser().parse_args(["studio", "--out", str(tmp_path / "studio"), "--provider", "dryrun"])

    assert _handle_studio(args, read_line=lambda _prompt: next(lines)) == 0

    output = capsys.readouterr().out
    assert f"Could not save to {image}" in output
    assert "Prompt: blue" in output


def test_missing_key_message_follows_env_locale(tmp_path: Path, capsys, monkeypatch) -> None:
    monkeypatch.setenv("RETOUCH_LOCALE", "ar")
    image = _write_png(tmp_path / "red.png")
    args = _build_parser().parse_args(["run", "--image", str(image), "--prompt", "x", "--out", str(tmp_path / "out")])

    assert _handle_run(args) == 1
    assert "لم يتم إعداد مفتاح API" in capsys.readouterr().out
