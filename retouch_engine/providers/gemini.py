"""Gemini image-editing client."""

from __future__ import annotations

import base64
from typing import Any, Sequence

from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from ..config import DEFAULT_MODEL
from ..errors import (
    EmptyResponse,
    GenerationFailed,
    MissingCredential,
    ModelRefusal,
    NoImageProduced,
)
from .base import RESULT_MEDIA_TYPE, build_instruction


class GeminiClient:
    name = "gemini"

    def __init__(self, api_key: str | None, model: str = DEFAULT_MODEL, client: Any | None = None) -> None:
        if client is None:
            if not api_key:
                raise MissingCredential("GEMINI_API_KEY or GOOGLE_API_KEY not set.")
            client = genai.Client(api_key=api_key)
        self.model = model or DEFAULT_MODEL
        self._client = client

    async def transform(self, image_bytes: bytes, media_type: str, prompt: str) -> str:
        contents = build_contents(image_bytes, media_type, prompt)
        config = types.GenerateContentConfig(response_modalities=["TEXT", "IMAGE"])
        try:
            response = await self._client.aio.models.generate_content(
                model=self.model,
                contents=contents,
                config=config,
            )
        except genai_errors.APIError as exc:
            raise GenerationFailed(_api_error_message(exc)) from exc
        except Exception as exc:
            raise GenerationFailed(str(exc) or type(exc).__name__) from exc
        return extract_image_data_uri(response)


def build_contents(image_bytes: bytes, media_type: str, prompt: str) -> list[types.Content]:
    parts = [
        types.Part(inline_data=types.Blob(data=bytes(image_bytes), mime_type=media_type)),
        types.Part(text=build_instruction(prompt)),
    ]
    return [types.Content(role="user", parts=parts)]


def extract_image_data_uri(response: Any) -> str:
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        raise EmptyResponse("No response was received from the model.")
    parts = _candidate_parts(candidates[0])

    for part in parts:
        inline_data = getattr(part, "inline_data", None)
        data = getattr(inline_data, "data", None) if inline_data else None
        if not data:
            continue
        if isinstance(data, str):
            payload = data
        else:
            payload = base64.b64encode(bytes(data)).decode("ascii")
        # Output is always presented as PNG, whatever the part declares.
        return f"data:{RESULT_MEDIA_TYPE};base64,{payload}"

    for part in parts:
        text = getattr(part, "text", None)
        if text:
            raise ModelRefusal(str(text))
    raise NoImageProduced("No image was found in the model response.")


def _candidate_parts(candidate: Any) -> Sequence[Any]:
    content = getattr(candidate, "content", None)
    return getattr(content, "parts", None) or getattr(candidate, "parts", None) or []


def _api_error_message(exc: genai_errors.APIError) -> str:
    message = getattr(exc, "message", None)
    if message:
        return str(message)
    return str(exc) or f"Gemini request failed with status {getattr(exc, 'code', 'unknown')}."
