"""Console output with a single-line progress bar."""

from __future__ import annotations

import sys
from typing import Optional, TextIO

_CLEAR_LINE = "\r\033[K"
_BAR_WIDTH = 30


class ConsoleUI:
    """Writes log lines and a progress bar to the terminal."""

    def __init__(self, out: Optional[TextIO] = None, err: Optional[TextIO] = None) -> None:
        self._out = out
        self._err = err
        self._label = ""
        self._total_steps = 0
        self._last_percent = -1
        self._in_progress = False

    @property
    def out(self) -> TextIO:
        return self._out if self._out is not None else sys.stdout

    @property
    def err(self) -> TextIO:
        return self._err if self._err is not None else sys.stderr

    @property
    def in_progress(self) -> bool:
        return self._in_progress

    def _emit(self, stream: TextIO, prefix: str, message: str) -> None:
        if self._in_progress:
            stream.write(_CLEAR_LINE)
        stream.write(f"{prefix} {message}\n")
        stream.flush()

    def log_info(self, message: str) -> None:
        self._emit(self.out, "[INFO]", message)

    def log_error(self, message: str) -> None:
        self._emit(self.err, "[ERROR]", message)

    def log_warning(self, message: str) -> None:
        self._emit(self.err, "[WARN]", message)

    def start_progress(self, label: str, total_steps: int) -> None:
        self._label = label
        self._total_steps = total_steps
        self._last_percent = -1
        self._in_progress = True
        self.update_progress(0, "")

    def update_progress(self, step: int, status: str = "") -> None:
        """Redraw the progress line; does nothing outside start/end."""
        if not self._in_progress:
            return

        parts = [_CLEAR_LINE, self._label, " ["]
        if self._total_steps > 0:
            fraction = step / self._total_steps
            percent = int(fraction * 100.0)
            pos = int(_BAR_WIDTH * fraction)
            parts.extend(
                "=" if i < pos else ">" if i == pos else " " for i in range(_BAR_WIDTH)
            )
            parts.append(f"] {percent}%")
        else:
            percent = 0
            parts.append("." * _BAR_WIDTH + f"] {step}")
        self._last_percent = percent

        if status:
            parts.append(f" {status}")

        stream = self.out
        stream.write("".join(parts))
        stream.flush()

    def end_progress(self) -> None:
        if not self._in_progress:
            return
        stream = self.out
        stream.write(f"{_CLEAR_LINE}{self._label} Done.\n")
        stream.flush()
        self._in_progress = False