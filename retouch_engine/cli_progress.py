"""Elapsed-time ticker shown while a transform is outstanding."""

from __future__ import annotations

import shutil
import sys
import threading
import time
from typing import TextIO

_BOLD = "\x1b[1m"
_GREY = "\x1b[38;2;150;157;165m"
_RESET = "\x1b[0m"


def progress_line(label: str, start: float | None = None, done: bool = False) -> tuple[str, float]:
    now = time.monotonic()
    origin = now if start is None else start
    elapsed = max(0, int(now - origin))
    minutes, seconds = divmod(elapsed, 60)
    suffix = "done" if done else "waiting for the model"
    return f"• {label} ({minutes}m {seconds:02d}s • {suffix})", origin


class ProgressTicker:
    def __init__(
        self,
        label: str,
        done_label: str = "Finished in",
        stream: TextIO | None = None,
        interval_s: float = 1.0,
    ) -> None:
        self.label = label
        self.done_label = done_label
        self.start: float | None = None
        self.stream = stream or sys.stdout
        self.interval_s = max(0.2, interval_s)
        self._stop = threading.Event()
        self._thread = threading.Thread(target=self._run, daemon=True)
        self._tty = bool(getattr(self.stream, "isatty", lambda: False)())

    def start_ticking(self) -> None:
        line, self.start = progress_line(self.label)
        if not self._tty:
            self._write(f"{line}\n")
            return
        self._write(f"\r{_BOLD}{line}{_RESET}\033[K")
        self._thread.start()

    def stop(self, done: bool = True) -> None:
        if self._thread.is_alive():
            self._stop.set()
            self._thread.join()
        if not done:
            if self._tty:
                self._write("\n")
            return
        elapsed = max(0, int(time.monotonic() - (self.start or time.monotonic())))
        width = _terminal_width(100)
        styled = f"{_GREY}{_separator_line(f'{self.done_label} {_format_duration(elapsed)}', width)}{_RESET}"
        prefix = "\r" if self._tty else ""
        tail = "\033[K\n" if self._tty else "\n"
        self._write(f"{prefix}{styled}{tail}")

    def _run(self) -> None:
        while not self._stop.wait(self.interval_s):
            line, _ = progress_line(self.label, self.start)
            self._write(f"\r{_BOLD}{line}{_RESET}\033[K")

    def _write(self, text: str) -> None:
        self.stream.write(text)
        self.stream.flush()


def _format_duration(seconds: int) -> str:
    minutes, secs = divmod(seconds, 60)
    hours, minutes = divmod(minutes, 60)
    if hours:
        return f"{hours}h {minutes}m {secs:02d}s"
    if minutes:
        return f"{minutes}m {secs:02d}s"
    return f"{secs}s"


def _separator_line(label: str, width: int) -> str:
    content = f" {label} "
    if width <= len(content) + 2:
        return content.strip()
    remaining = width - len(content)
    left = remaining // 2
    return f"{'─' * left}{content}{'─' * (remaining - left)}"


def _terminal_width(fallback: int) -> int:
    return shutil.get_terminal_size(fallback=(fallback, 20)).columns
