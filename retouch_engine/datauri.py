"""Data URI helpers and the selected-file wrapper."""

from __future__ import annotations

import asyncio
import base64
import binascii
import mimetypes
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Awaitable, Callable

from .errors import FileReadFailed, MalformedInput

_DATA_URI_RE = re.compile(r"data:([a-zA-Z0-9]+/[a-zA-Z0-9\-.+]+);base64,(.+)")


def encode_data_uri(data: bytes, media_type: str) -> str:
    if not media_type:
        raise MalformedInput("media type must not be empty")
    payload = base64.b64encode(bytes(data)).decode("ascii")
    return f"data:{media_type};base64,{payload}"


def decode_data_uri(uri: str) -> tuple[str, str]:
    """Split a data URI into ``(media_type, base64_payload)``.

    The payload is returned as-is; its alphabet is only checked by
    :func:`data_uri_to_bytes`.
    """
    match = _DATA_URI_RE.fullmatch(str(uri or ""))
    if not match:
        raise MalformedInput("Invalid Data URI")
    return match.group(1), match.group(2)


def data_uri_to_bytes(uri: str) -> tuple[bytes, str]:
    media_type, payload = decode_data_uri(uri)
    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise MalformedInput(f"Invalid base64 payload: {exc}") from exc
    return data, media_type


@dataclass(frozen=True)
class ImageFile:
    name: str
    content_type: str
    size: int
    _reader: Callable[[], Awaitable[bytes]] = field(repr=False, compare=False)

    @classmethod
    def from_path(cls, path: str | Path, content_type: str | None = None) -> "ImageFile":
        resolved = Path(path).expanduser()
        if content_type is None:
            content_type = mimetypes.guess_type(resolved.name)[0] or ""
        try:
            size = resolved.stat().st_size
        except OSError as exc:
            raise FileReadFailed(str(exc)) from exc

        async def _read() -> bytes:
            return await asyncio.to_thread(resolved.read_bytes)

        return cls(name=resolved.name, content_type=content_type, size=size, _reader=_read)

    @classmethod
    def from_bytes(cls, name: str, data: bytes, content_type: str) -> "ImageFile":
        blob = bytes(data)

        async def _read() -> bytes:
            return blob

        return cls(name=name, content_type=content_type, size=len(blob), _reader=_read)

    async def read(self) -> bytes:
        return await self._reader()


async def file_to_data_uri(file: ImageFile) -> str:
    try:
        data = await file.read()
    except OSError as exc:
        raise FileReadFailed(str(exc)) from exc
    return encode_data_uri(data, file.content_type)
