"""Dry-run generation client (offline)."""

from __future__ import annotations

import asyncio
import base64
import hashlib
import io

from PIL import Image, ImageDraw, ImageFont, ImageOps, UnidentifiedImageError

from ..errors import GenerationFailed
from .base import RESULT_MEDIA_TYPE

_BANNER_HEIGHT = 28


class DryRunClient:
    """Stands in for the hosted model: tints the input and stamps the prompt on it."""

    name = "dryrun"

    def __init__(self, delay_s: float = 0.0) -> None:
        self.delay_s = max(0.0, float(delay_s))
        self.calls: list[dict[str, object]] = []

    async def transform(self, image_bytes: bytes, media_type: str, prompt: str) -> str:
        self.calls.append({"media_type": media_type, "prompt": prompt, "byte_count": len(image_bytes)})
        if self.delay_s:
            await asyncio.sleep(self.delay_s)
        png = await asyncio.to_thread(self._render, bytes(image_bytes), prompt)
        payload = base64.b64encode(png).decode("ascii")
        return f"data:{RESULT_MEDIA_TYPE};base64,{payload}"

    def _render(self, image_bytes: bytes, prompt: str) -> bytes:
        try:
            with Image.open(io.BytesIO(image_bytes)) as source:
                image = source.convert("RGB")
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as exc:
            raise GenerationFailed(f"dryrun could not open the input image: {exc}") from exc
        tinted = ImageOps.colorize(ImageOps.grayscale(image), black=(0, 0, 0), white=_color_from_prompt(prompt))
        canvas = Image.new("RGB", (tinted.width, tinted.height + _BANNER_HEIGHT), (20, 20, 20))
        canvas.paste(tinted, (0, _BANNER_HEIGHT))
        draw = ImageDraw.Draw(canvas)
        draw.text((6, 6), f"dryrun: {prompt[:60]}", fill=(255, 255, 255), font=ImageFont.load_default())
        buffer = io.BytesIO()
        canvas.save(buffer, format="PNG")
        return buffer.getvalue()


def _color_from_prompt(prompt: str) -> tuple[int, int, int]:
    digest = hashlib.sha256(prompt.encode("utf-8")).digest()
    return 128 + digest[0] // 2, 128 + digest[1] // 2, 128 + digest[2] // 2
