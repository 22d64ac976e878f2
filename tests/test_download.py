from __future__ import annotations

from pathlib import Path

import pytest

from retouch_engine.datauri import encode_data_uri
from retouch_engine.download import DEFAULT_DOWNLOAD_NAME, trigger_download
from retouch_engine.errors import MalformedInput


def test_trigger_download_writes_decoded_bytes(tmp_path: Path) -> None:
    uri = encode_data_uri(b"png-bytes", "image/png")
    result = trigger_download(uri, DEFAULT_DOWNLOAD_NAME, directory=tmp_path)
    assert result is None
    assert (tmp_path / "transformed-image.png").read_bytes() == b"png-bytes"


def test_trigger_download_keeps_existing_files(tmp_path: Path) -> None:
    (tmp_path / "transformed-image.png").write_bytes(b"old")
    trigger_download(encode_data_uri(b"first", "image/png"), directory=tmp_path)
    trigger_download(encode_data_uri(b"second", "image/png"), directory=tmp_path)

    assert (tmp_path / "transformed-image.png").read_bytes() == b"old"
    assert (tmp_path / "transformed-image (1).png").read_bytes() == b"first"
    assert (tmp_path / "transformed-image (2).png").read_bytes() == b"second"


def test_trigger_download_creates_directory(tmp_path: Path) -> None:
    target = tmp_path / "nested" / "out"
    trigger_download(encode_data_uri(b"x", "image/png"), "result.png", directory=target)
    assert (target / "result.png").read_bytes() == b"x"


def test_trigger_download_rejects_malformed_uri(tmp_path: Path) -> None:
    with pytest.raises(MalformedInput):
        trigger_download("not-a-data-uri", directory=tmp_path)
