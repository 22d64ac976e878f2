"""Runtime configuration resolved from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping

DEFAULT_MODEL = "gemini-2.5-flash-image"
DEFAULT_MAX_UPLOAD_BYTES = 5 * 1024 * 1024
SUPPORTED_PROVIDERS = ("gemini", "dryrun")
SUPPORTED_LOCALES = ("en", "ar")

_API_KEY_ENV_VARS = ("GEMINI_API_KEY", "GOOGLE_API_KEY", "API_KEY")


@dataclass
class StudioConfig:
    api_key: str | None = None
    provider: str = "gemini"
    model: str = DEFAULT_MODEL
    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES
    locale: str = "en"
    download_dir: Path = field(default_factory=lambda: Path("."))

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "StudioConfig":
        env = os.environ if environ is None else environ
        api_key = None
        for name in _API_KEY_ENV_VARS:
            value = str(env.get(name) or "").strip()
            if value:
                api_key = value
                break
        provider = str(env.get("RETOUCH_PROVIDER") or "").strip().lower() or "gemini"
        model = str(env.get("RETOUCH_MODEL") or "").strip() or DEFAULT_MODEL
        locale = normalize_locale(env.get("RETOUCH_LOCALE"))
        download_dir = Path(str(env.get("RETOUCH_DOWNLOAD_DIR") or ".")).expanduser()
        return cls(
            api_key=api_key,
            provider=provider,
            model=model,
            max_upload_bytes=_parse_upload_limit(env.get("RETOUCH_MAX_UPLOAD_MB")),
            locale=locale,
            download_dir=download_dir,
        )


def normalize_locale(value: str | None) -> str:
    lowered = str(value or "").strip().lower().replace("_", "-")
    lang = lowered.split("-", 1)[0]
    return lang if lang in SUPPORTED_LOCALES else "en"


def _parse_upload_limit(raw: str | None) -> int:
    if raw is None or not str(raw).strip():
        return DEFAULT_MAX_UPLOAD_BYTES
    try:
        megabytes = float(str(raw).strip())
    except ValueError:
        return DEFAULT_MAX_UPLOAD_BYTES
    if megabytes <= 0:
        return DEFAULT_MAX_UPLOAD_BYTES
    return int(megabytes * 1024 * 1024)
