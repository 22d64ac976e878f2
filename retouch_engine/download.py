"""Save a data URI to disk the way a browser download would."""

from __future__ import annotations

from pathlib import Path

from .datauri import data_uri_to_bytes

DEFAULT_DOWNLOAD_NAME = "transformed-image.png"


def trigger_download(data_uri: str, filename: str = DEFAULT_DOWNLOAD_NAME, *, directory: str | Path | None = None) -> None:
    data, _ = data_uri_to_bytes(data_uri)
    base_dir = Path(directory).expanduser() if directory else Path(".")
    base_dir.mkdir(parents=True, exist_ok=True)
    target = _available_path(base_dir, Path(filename).name or DEFAULT_DOWNLOAD_NAME)
    target.write_bytes(data)


def _available_path(base_dir: Path, filename: str) -> Path:
    candidate = base_dir / filename
    if not candidate.exists():
        return candidate
    stem = candidate.stem
    suffix = candidate.suffix
    idx = 1
    while True:
        candidate = base_dir / f"{stem} ({idx}){suffix}"
        if not candidate.exists():
            return candidate
        idx += 1
