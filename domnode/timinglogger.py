"""
@file timinglogger.py
@brief Timing events of the synchronize and find retry loops.

Events: retry_start, retry_wait, retry_success, retry_timeout. Each line reads

    [info] [timing] time=12:00:01 event=retry_wait description=click on id 'submit' attempt=2 sleep_s=0.05 stage=synchronize
"""

from __future__ import annotations

import os
import threading
import time
from typing import Any, Dict, Optional


class TimingLogger:
    """Thread-safe timing logger writing to stdout and/or a file."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._enabled = False
        self._console = True
        self._file_path: Optional[str] = None
        self._level = "INFO"

    def configure(
        self,
        *,
        console: bool = True,
        file_path: Optional[str] = None,
        level: str = "INFO",
    ) -> None:
        """Set the console flag, log file and level."""
        with self._lock:
            self._console = bool(console)
            self._file_path = file_path
            self._level = level.upper()

    def enable(self) -> None:
        """Start emitting timing events."""
        with self._lock:
            self._enabled = True

    def disable(self) -> None:
        """Stop emitting timing events."""
        with self._lock:
            self._enabled = False

    def is_enabled(self) -> bool:
        """Return True if timing events are emitted."""
        return self._enabled

    def log(
        self,
        *,
        event: str,
        description: Optional[str] = None,
        status: str = "info",
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Emit one timing event; None-valued metadata is left out."""
        if not self._enabled:
            return

        fields = {"time": time.strftime("%H:%M:%S"), "event": event, "description": description}
        fields.update(metadata or {})
        body = " ".join(f"{key}={value}" for key, value in fields.items() if value is not None)
        line = f"[{status.lower()}] [timing] {body}"

        if self._console:
            print(line, flush=True)
        if self._file_path:
            try:
                os.makedirs(os.path.dirname(os.path.abspath(self._file_path)) or ".", exist_ok=True)
                with open(self._file_path, "a", encoding="utf-8") as f:
                    f.write(line + "\n")
            except OSError:
                pass


TIMING_LOGGER = TimingLogger()
