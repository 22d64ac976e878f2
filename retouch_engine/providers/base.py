"""Generation client protocol."""

from __future__ import annotations

from typing import Protocol

INSTRUCTION_TEMPLATE = (
    "Transform this image based on the following instruction: {prompt}. "
    "Return only the transformed image."
)
RESULT_MEDIA_TYPE = "image/png"


class GenerationClient(Protocol):
    name: str

    async def transform(self, image_bytes: bytes, media_type: str, prompt: str) -> str:
        """Return the edited image as a PNG data URI."""
        ...


def build_instruction(prompt: str) -> str:
    return INSTRUCTION_TEMPLATE.format(prompt=prompt)
