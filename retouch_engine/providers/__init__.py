"""Generation client factory."""

from __future__ import annotations

from ..config import StudioConfig
from .base import GenerationClient
from .dryrun import DryRunClient
from .gemini import GeminiClient


def build_client(config: StudioConfig) -> GenerationClient:
    provider = (config.provider or "gemini").strip().lower()
    if provider == "dryrun":
        return DryRunClient()
    if provider == "gemini":
        return GeminiClient(config.api_key, model=config.model)
    raise ValueError(f"Unknown provider: {config.provider}")
