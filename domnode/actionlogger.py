"""
@file actionlogger.py
@brief Action log for element handle operations.

Every facade call, reload and advisory warning of an Element can be emitted
as one event, either as a " | " separated line or as a JSON object per line.
Logging is off until enabled, either in code or via DOMNODE_* variables.
"""

from __future__ import annotations

import json
import os
import threading
import time
import traceback
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple

FORMATS = ("line", "jsonl")

# Keys never written in clear text.
SECRET_KEYS = frozenset({"password", "passwd", "secret", "token"})

# Values typed into fields are truncated per action.
MASKED_VALUES: Dict[str, Tuple[str, ...]] = {
    "set": ("value",),
    "send_keys": ("keys",),
}

# (event key, line label) in output order; None label prints the bare value.
LINE_FIELDS: Tuple[Tuple[str, Optional[str]], ...] = (
    ("timestamp", None),
    ("level", None),
    ("action", None),
    ("event", "event"),
    ("action_id", "action_id"),
    ("element", "element"),
    ("phase", "phase"),
    ("attempt", "attempt"),
    ("status", "status"),
    ("duration_ms", "duration_ms"),
)


class ActionLogger:
    """Thread-safe action logger writing to stdout and/or a file."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._enabled = False
        self._console = True
        self._file_path: Optional[str] = None
        self._level = "INFO"
        self._format = "line"
        self._max_traceback_chars = 4000
        self._sample_retry_events = 1

    def configure(
        self,
        *,
        console: bool = True,
        file_path: Optional[str] = None,
        level: str = "INFO",
        format: str = "line",
        max_traceback_chars: int = 4000,
        sample_retry_events: int = 1,
    ) -> None:
        """
        @param console Print events to stdout
        @param file_path Append events to this file
        @param format "line" or "jsonl"
        @param sample_retry_events Log every Nth retry attempt after the first
        """
        fmt = (format or "line").lower()
        if fmt not in FORMATS:
            raise ValueError(f"ActionLogger format must be one of {list(FORMATS)}, got {format!r}")

        with self._lock:
            self._console = bool(console)
            self._file_path = file_path
            self._level = level.upper()
            self._format = fmt
            self._max_traceback_chars = max(256, int(max_traceback_chars))
            self._sample_retry_events = max(1, int(sample_retry_events))

    def enable(self) -> None:
        with self._lock:
            self._enabled = True

    def disable(self) -> None:
        with self._lock:
            self._enabled = False

    def is_enabled(self) -> bool:
        return self._enabled

    def should_log_retry_attempt(self, attempt: int) -> bool:
        """The first attempt is always logged, later ones every Nth."""
        return attempt <= 1 or attempt % self._sample_retry_events == 0

    def log(
        self,
        *,
        action: str,
        element: Optional[str] = None,
        status: str = "ok",
        duration_ms: Optional[int] = None,
        metadata: Optional[Dict[str, Any]] = None,
        exception: Optional[BaseException] = None,
        action_id: Optional[str] = None,
        phase: Optional[str] = None,
        attempt: Optional[int] = None,
        event: Optional[str] = None,
    ) -> None:
        """Emit one event; a no-op while disabled."""
        if not self._enabled:
            return

        record: Dict[str, Any] = {
            "timestamp": time.strftime("%H:%M:%S"),
            "ts": datetime.now(timezone.utc).isoformat(timespec="milliseconds"),
            "level": self._level,
            "event": event or "action",
            "action": action,
            "action_id": action_id,
            "element": element,
            "phase": phase,
            "status": status,
            "attempt": attempt,
            "duration_ms": duration_ms,
            "metadata": self._redact(action, metadata or {}),
        }
        if exception is not None:
            record["exception"] = self._describe_exception(exception)

        self._emit(self._render(record))

    def _emit(self, line: str) -> None:
        if self._console:
            print(line, flush=True)
        if self._file_path:
            try:
                os.makedirs(os.path.dirname(os.path.abspath(self._file_path)) or ".", exist_ok=True)
                with open(self._file_path, "a", encoding="utf-8") as f:
                    f.write(line + "\n")
            except OSError:
                pass

    def _render(self, record: Dict[str, Any]) -> str:
        if self._format == "jsonl":
            return json.dumps(record, ensure_ascii=False, separators=(",", ":"), default=repr)

        parts = []
        for key, label in LINE_FIELDS:
            value = record.get(key)
            if value is None or value == "":
                continue
            if label is None:
                parts.append(str(value))
            elif key == "element":
                parts.append(f"{label}='{value}'")
            else:
                parts.append(f"{label}={value}")

        parts.extend(f"{key}={value}" for key, value in record["metadata"].items())

        exc = record.get("exception")
        if exc:
            parts.append(f"exc_type={exc['type']}")
            if exc.get("kind"):
                parts.append(f"exc_kind={exc['kind']}")
            parts.append(f"exc_message={exc['message']}")
            if exc.get("last_error_type"):
                parts.append(f"last_error={exc['last_error_type']}")
        return " | ".join(parts)

    @staticmethod
    def _redact(action: str, metadata: Dict[str, Any]) -> Dict[str, Any]:
        masked = MASKED_VALUES.get(action, ())
        redacted: Dict[str, Any] = {}
        for key, value in metadata.items():
            if key.lower() in SECRET_KEYS:
                redacted[key] = "***"
            elif key in masked:
                redacted[key] = _truncate(str(value))
            else:
                redacted[key] = value
        return redacted

    def _describe_exception(self, exception: BaseException) -> Dict[str, Any]:
        tb = "".join(traceback.format_exception(type(exception), exception, exception.__traceback__)).strip()
        if len(tb) > self._max_traceback_chars:
            tb = tb[: self._max_traceback_chars] + "...<truncated>"

        kind = getattr(exception, "kind", None)
        # TimeoutError and ObsoleteElementError carry the last retried failure.
        last = getattr(exception, "original_exception", None)
        return {
            "type": type(exception).__name__,
            "kind": getattr(kind, "value", None),
            "message": str(exception),
            "last_error_type": type(last).__name__ if last is not None else None,
            "last_error_message": str(last) if last is not None else None,
            "traceback": tb,
        }


def _truncate(text: str, max_visible: int = 10) -> str:
    return text if len(text) <= max_visible else f"{text[:max_visible]}..."


ACTION_LOGGER = ActionLogger()


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in {"1", "true", "yes", "on"}


def configure_logging_from_env() -> None:
    """
    Configure ACTION_LOGGER and TIMING_LOGGER from the environment:

        DOMNODE_ACTION_LOGGING=1            enable action events
        DOMNODE_ACTION_LOG_FILE=path        also append them to a file
        DOMNODE_ACTION_LOG_LEVEL=INFO
        DOMNODE_ACTION_LOG_FORMAT=line|jsonl
        DOMNODE_ACTION_LOG_SAMPLE_RETRY=N   log every Nth retry attempt
        DOMNODE_TIMING_LOGGING=1            enable retry timing events
        DOMNODE_TIMING_LOG_FILE=path
        DOMNODE_TIMING_LOG_LEVEL=INFO
    """
    from .timinglogger import TIMING_LOGGER

    if _env_flag("DOMNODE_ACTION_LOGGING"):
        ACTION_LOGGER.configure(
            file_path=os.getenv("DOMNODE_ACTION_LOG_FILE"),
            level=os.getenv("DOMNODE_ACTION_LOG_LEVEL", "INFO"),
            format=os.getenv("DOMNODE_ACTION_LOG_FORMAT", "line"),
            sample_retry_events=int(os.getenv("DOMNODE_ACTION_LOG_SAMPLE_RETRY", "1")),
        )
        ACTION_LOGGER.enable()
    else:
        ACTION_LOGGER.disable()

    if _env_flag("DOMNODE_TIMING_LOGGING"):
        TIMING_LOGGER.configure(
            file_path=os.getenv("DOMNODE_TIMING_LOG_FILE"),
            level=os.getenv("DOMNODE_TIMING_LOG_LEVEL", "INFO"),
        )
        TIMING_LOGGER.enable()
    else:
        TIMING_LOGGER.disable()
