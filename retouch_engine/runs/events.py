"""Append-only session event stream."""

from __future__ import annotations

import json
import threading
from dataclasses import dataclass
from dataclasses import field
from pathlib import Path
from typing import Any, Mapping

from ..utils import now_utc_iso


@dataclass
class EventWriter:
    path: Path
    session_id: str
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, init=False)

    def emit(self, event_type: str, *, state: Mapping[str, Any] | None = None, **payload: Any) -> dict[str, Any]:
        """Append one event. ``state`` is the session snapshot after the action, when it settled one."""
        event = {
            "type": event_type,
            "session_id": self.session_id,
            "ts": now_utc_iso(),
        }
        event.update(payload)
        if state is not None:
            event["state"] = dict(state)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        line = f"{json.dumps(event, ensure_ascii=False)}\n"
        with self._lock:
            with self.path.open("a", encoding="utf-8") as handle:
                handle.write(line)
        return event

    def read_all(self) -> list[dict[str, Any]]:
        if not self.path.exists():
            return []
        lines = self.path.read_text(encoding="utf-8").splitlines()
        return [json.loads(line) for line in lines if line.strip()]
