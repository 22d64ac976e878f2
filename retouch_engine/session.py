"""Mutable state for one transform workflow."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class TransformSession:
    original_image: str | None = None
    transformed_image: str | None = None
    prompt: str = ""
    is_busy: bool = False
    error: str | None = None

    def snapshot(self) -> dict[str, Any]:
        """Event-safe view of the session: sizes instead of image payloads."""
        return {
            "has_original": self.original_image is not None,
            "original_chars": len(self.original_image or ""),
            "has_transformed": self.transformed_image is not None,
            "transformed_chars": len(self.transformed_image or ""),
            "prompt_chars": len(self.prompt),
            "is_busy": self.is_busy,
            "error": self.error,
        }
