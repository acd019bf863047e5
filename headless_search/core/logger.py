"""Structured logging: console line plus JSON event log file."""

import json
import logging
import os
import sys
import threading
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any

from headless_search.core.config import config


def _format_duration(ms: float | None) -> str:
    if ms is None or ms < 0:
        return "?"
    if ms >= 1000:
        return f"{ms / 1000:.1f}s"
    if ms >= 1:
        return f"{ms:.0f}ms"
    return "<1ms"


def _short(text: str | None, max_len: int = 60) -> str:
    if not text or not text.strip():
        return ""
    s = text.strip().replace("\n", " ")
    return s[:max_len] + "..." if len(s) > max_len else s


def _use_color() -> bool:
    if os.environ.get("NO_COLOR"):
        return False
    try:
        return sys.stdout.isatty()
    except Exception:
        return False


def _c(role: str) -> str:
    if not _use_color():
        return ""
    codes = {
        "dim": "\033[38;5;239m",
        "request": "\033[38;5;81m",  # cyan for outgoing requests
        "ok": "\033[38;5;78m",
        "fail": "\033[38;5;203m",
        "duration": "\033[38;5;221m",
        "analytics": "\033[38;5;245m",
    }
    return codes.get(role, "")


def _reset() -> str:
    if not _use_color():
        return ""
    return "\033[0m"


@dataclass
class LogEvent:
    event_type: str
    timestamp: str
    data: dict[str, Any]

    def to_dict(self) -> dict:
        return asdict(self)

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), default=str)


class SearchLogger:
    def __init__(self):
        self._file_lock = threading.Lock()
        self._log_file_handle = None
        if config.log_to_file:
            config.logs_dir.mkdir(parents=True, exist_ok=True)
            self.log_file = config.logs_dir / "engine.log"
            self._log_file_handle = open(self.log_file, "a", encoding="utf-8")
        self._setup_console_logger()

    def _setup_console_logger(self):
        self.console = logging.getLogger("headless_search")
        self.console.setLevel(logging.DEBUG)
        self._console_formatter = logging.Formatter(
            "%(asctime)s │ %(message)s", datefmt="%H:%M:%S"
        )
        if not self.console.handlers:
            handler = logging.StreamHandler()
            handler.setLevel(logging.INFO)
            handler.setFormatter(self._console_formatter)
            self.console.addHandler(handler)

    def log_event(self, event: LogEvent) -> None:
        if self._log_file_handle is None:
            return
        with self._file_lock:
            self._log_file_handle.write(event.to_json() + "\n")
            self._log_file_handle.flush()

    def _timestamp(self) -> str:
        return datetime.now().isoformat()

    def search_request(self, sequence: int, query: str, cause: str, page_index: int):
        event = LogEvent(
            event_type="SEARCH_REQUEST",
            timestamp=self._timestamp(),
            data={
                "sequence": sequence,
                "query": query[:500],
                "cause": cause,
                "page_index": page_index,
            },
        )
        self.log_event(event)
        self.console.info(
            f"{_c('request')}Search #{sequence}{_reset()} ({cause}) "
            f"q={_short(query)!r} page={page_index}"
        )

    def search_response(self, sequence: int, total_count: int, duration_ms: float | None):
        event = LogEvent(
            event_type="SEARCH_RESPONSE",
            timestamp=self._timestamp(),
            data={
                "sequence": sequence,
                "total_count": total_count,
                "duration_ms": duration_ms,
            },
        )
        self.log_event(event)
        dur = f"{_c('duration')}{_format_duration(duration_ms)}{_reset()}"
        self.console.info(
            f"{_c('ok')}Search #{sequence} [ok]{_reset()}  {total_count} results  {dur}"
        )

    def request_failed(self, sequence: int, kind: str, message: str):
        event = LogEvent(
            event_type="REQUEST_FAILED",
            timestamp=self._timestamp(),
            data={"sequence": sequence, "kind": kind, "message": message[:500]},
        )
        self.log_event(event)
        self.console.warning(
            f"{_c('fail')}Search #{sequence} [failed]{_reset()} {kind}: {_short(message, 80)}"
        )

    def stale_response(self, sequence: int, pending: int | None):
        event = LogEvent(
            event_type="STALE_RESPONSE",
            timestamp=self._timestamp(),
            data={"sequence": sequence, "pending": pending},
        )
        self.log_event(event)
        self.console.debug(f"Discarded stale response #{sequence} (pending={pending})")

    def analytics_event(self, event_type: str, fields: dict[str, Any]):
        event = LogEvent(
            event_type="ANALYTICS",
            timestamp=self._timestamp(),
            data={"event_type": event_type, "fields": fields},
        )
        self.log_event(event)
        self.console.debug(f"{_c('analytics')}Analytics: {event_type}{_reset()}")

    def error(self, message: str, *args, exception: Exception | None = None, **kwargs):
        event = LogEvent(
            event_type="ERROR",
            timestamp=self._timestamp(),
            data={
                "message": message,
                "exception": str(exception) if exception else None,
            },
        )
        self.log_event(event)

        allowed = {"exc_info", "stack_info", "stacklevel", "extra"}
        log_kwargs = {k: v for k, v in kwargs.items() if k in allowed}
        if exception and "exc_info" not in log_kwargs:
            log_kwargs["exc_info"] = exception

        self.console.error(f"Error: {message}", *args, **log_kwargs)

    def info(self, message: str, *args, **kwargs):
        allowed = {"exc_info", "stack_info", "stacklevel", "extra"}
        log_kwargs = {k: v for k, v in kwargs.items() if k in allowed}
        self.console.info(message, *args, **log_kwargs)

    def warning(self, message: str, *args, **kwargs):
        event = LogEvent(
            event_type="WARNING",
            timestamp=self._timestamp(),
            data={"message": message[:500]},
        )
        self.log_event(event)

        allowed = {"exc_info", "stack_info", "stacklevel", "extra"}
        log_kwargs = {k: v for k, v in kwargs.items() if k in allowed}
        self.console.warning(message, *args, **log_kwargs)

    def exception(self, message: str, *args, **kwargs):
        event = LogEvent(
            event_type="ERROR",
            timestamp=self._timestamp(),
            data={"message": message[:500]},
        )
        self.log_event(event)
        self.console.exception(message, *args, **kwargs)

    def debug(self, message: str, *args, **kwargs):
        event = LogEvent(
            event_type="DEBUG", timestamp=self._timestamp(), data={"message": message}
        )
        self.log_event(event)

        allowed = {"exc_info", "stack_info", "stacklevel", "extra"}
        log_kwargs = {k: v for k, v in kwargs.items() if k in allowed}
        self.console.debug(message, *args, **log_kwargs)


logger = SearchLogger()
