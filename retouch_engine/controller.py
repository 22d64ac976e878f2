"""Transform workflow orchestration."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

from .config import StudioConfig
from .datauri import ImageFile, data_uri_to_bytes, file_to_data_uri
from .download import DEFAULT_DOWNLOAD_NAME, trigger_download
from .errors import InvalidFile, RetouchError
from .messages import EMPTY_PROMPT, NO_IMAGE, UNEXPECTED, describe_error, message
from .providers.base import GenerationClient
from .runs.events import EventWriter
from .session import TransformSession


class TransformController:
    """Owns one :class:`TransformSession` and applies user actions to it.

    Every request or file read is tagged with a generation number. ``reset()``
    and each new selection or submit bump it, so a completion that arrives for
    an older generation is dropped instead of overwriting newer state.
    """

    def __init__(
        self,
        client: GenerationClient,
        *,
        config: StudioConfig | None = None,
        events: EventWriter | None = None,
    ) -> None:
        self.client = client
        self.config = config or StudioConfig()
        self.events = events
        self.session = TransformSession()
        self._generation = 0
        self._inflight: asyncio.Task[str] | None = None
        self._emit("session_started", provider=getattr(client, "name", None), locale=self.config.locale)

    @property
    def locale(self) -> str:
        return self.config.locale

    async def select_image(self, file: ImageFile) -> bool:
        if self.session.is_busy:
            self._emit("action_rejected", action="select_image", reason="busy")
            return False
        try:
            validate_image_file(file, self.config.max_upload_bytes)
        except InvalidFile as exc:
            self.session.error = describe_error(exc, self.locale)
            self._emit(
                "image_rejected",
                settled=True,
                name=file.name,
                content_type=file.content_type,
                size=file.size,
                reason=exc.reason,
            )
            return False

        self._generation += 1
        token = self._generation
        try:
            data_uri = await file_to_data_uri(file)
        except RetouchError as exc:
            if token != self._generation:
                return False
            self.session.error = describe_error(exc, self.locale)
            self._emit("image_rejected", settled=True, name=file.name, reason=exc.kind.value)
            return False
        if token != self._generation:
            self._emit("image_discarded", name=file.name)
            return False

        session = self.session
        session.original_image = data_uri
        session.transformed_image = None
        session.error = None
        session.prompt = ""
        session.is_busy = False
        self._emit("image_selected", settled=True, name=file.name, content_type=file.content_type, size=file.size)
        return True

    def edit_prompt(self, text: str) -> None:
        self.session.prompt = text
        self._emit("prompt_edited", prompt=text)

    async def submit_transform(self) -> bool:
        session = self.session
        if session.is_busy:
            self._emit("action_rejected", action="submit_transform", reason="busy")
            return False
        if not session.original_image:
            session.error = message(NO_IMAGE, self.locale)
            return False
        if not session.prompt.strip():
            session.error = message(EMPTY_PROMPT, self.locale)
            return False

        session.is_busy = True
        session.error = None
        self._generation += 1
        token = self._generation
        prompt = session.prompt
        self._emit("transform_started", prompt=prompt, provider=getattr(self.client, "name", None))

        task: asyncio.Task[str] | None = None
        try:
            image_bytes, media_type = data_uri_to_bytes(session.original_image)
            task = asyncio.ensure_future(self.client.transform(image_bytes, media_type, prompt))
            self._inflight = task
            result = await task
        except asyncio.CancelledError:
            if token != self._generation:
                self._emit("transform_discarded", reason="cancelled")
                return False
            session.is_busy = False
            raise
        except RetouchError as exc:
            if token != self._generation:
                self._emit("transform_discarded", reason=exc.kind.value)
                return False
            session.is_busy = False
            session.error = describe_error(exc, self.locale)
            self._emit("transform_failed", settled=True, kind=exc.kind.value, error=session.error)
            return False
        except Exception:
            if token == self._generation:
                session.is_busy = False
                session.error = message(UNEXPECTED, self.locale)
                self._emit("transform_failed", settled=True, kind="unexpected", error=session.error)
            raise
        finally:
            if task is not None and self._inflight is task:
                self._inflight = None

        if token != self._generation:
            self._emit("transform_discarded", reason="stale")
            return False
        session.transformed_image = result
        session.is_busy = False
        self._emit("transform_succeeded", settled=True, result_chars=len(result))
        return True

    def dismiss_error(self) -> None:
        self.session.error = None
        self._emit("error_dismissed")

    def reset(self) -> None:
        self._invalidate()
        self.session = TransformSession()
        self._emit("session_reset", settled=True)

    def download_result(self, directory: str | Path | None = None) -> bool:
        if not self.session.transformed_image:
            return False
        target_dir = directory if directory is not None else self.config.download_dir
        trigger_download(self.session.transformed_image, DEFAULT_DOWNLOAD_NAME, directory=target_dir)
        self._emit("download_saved", directory=str(target_dir), filename=DEFAULT_DOWNLOAD_NAME)
        return True

    def _invalidate(self) -> None:
        self._generation += 1
        task, self._inflight = self._inflight, None
        if task is not None and not task.done():
            task.cancel()

    def _emit(self, event_type: str, *, settled: bool = False, **payload: Any) -> None:
        if self.events is None:
            return
        state = self.session.snapshot() if settled else None
        self.events.emit(event_type, state=state, **payload)


def validate_image_file(file: ImageFile, max_bytes: int) -> None:
    # Type check wins over the size check.
    if not str(file.content_type or "").startswith("image/"):
        raise InvalidFile("type")
    if file.size > max_bytes:
        raise InvalidFile("size", limit_bytes=max_bytes)
