"""Message router — single entry point from callers into the file sink"""

import logging
import os
import threading
from dataclasses import dataclass
from datetime import datetime
from threading import Lock
from typing import Callable, Optional

from logsink.core.constants import TIMESTAMP_FORMAT, Severity
from logsink.sink.file_sink import FileSink

logger = logging.getLogger("logsink.router")

# Per-thread flag set while a route() call is in progress
_routing = threading.local()


@dataclass(frozen=True)
class LogContext:
    """Caller metadata attached to a message"""
    function: str = ""
    file: str = ""
    line: int = 0
    category: str = ""


def format_timestamp(now: datetime) -> str:
    """``YYYY-MM-DD hh:mm:ss.mmm``"""
    return f"{now.strftime(TIMESTAMP_FORMAT)}.{now.microsecond // 1000:03d}"


class MessageRouter:
    """
    Receives leveled messages, formats them and writes them to a FileSink.

    Each ``route()`` call holds the sink lock across lazy-open, formatting
    and writing, so lines from concurrent callers are totally ordered and
    never interleave. WARNING, ERROR and FATAL records are pushed to the OS
    before ``route()`` returns; DEBUG, INFO and UNKNOWN records wait for the
    next periodic flush.

    ``route()`` never raises: any failure drops the message and is counted
    in ``dropped``.

    Line format::

        [<timestamp-or-category>] [<LEVEL>] [<function> #<line> <pid> <tid>] <text>
    """

    def __init__(
        self,
        sink: FileSink,
        min_severity: Severity = Severity.INFO,
        clock: Optional[Callable[[], datetime]] = None,
        pid_fn: Optional[Callable[[], int]] = None,
        thread_id_fn: Optional[Callable[[], int]] = None,
    ) -> None:
        self._sink = sink
        self._min_severity = min_severity
        self._clock = clock or datetime.now
        self._pid = pid_fn or os.getpid
        self._thread_id = thread_id_fn or threading.get_native_id

        self._counter_lock = Lock()
        self._routed = 0
        self._filtered = 0
        self._dropped = 0

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def route(
        self,
        severity: Severity,
        context: Optional[LogContext],
        text: str,
    ) -> bool:
        """
        Write one message to the sink.

        Returns:
            True if the line reached the sink's writer
        """
        if getattr(_routing, "active", False):
            # A record emitted while this thread is already routing
            self._count("_dropped")
            return False

        if not self.accepts(severity):
            self._count("_filtered")
            return False

        _routing.active = True
        try:
            with self._sink.lock:
                if not self._sink.is_open and not self._sink.open():
                    self._count("_dropped")
                    return False

                line = self.format_line(severity, context or LogContext(), text)
                if not self._sink.write(line, flush_now=severity.is_urgent):
                    self._count("_dropped")
                    return False

            self._count("_routed")
            return True
        except Exception:
            self._count("_dropped")
            return False
        finally:
            _routing.active = False

    def accepts(self, severity: Severity) -> bool:
        """UNKNOWN is never filtered; everything else must reach min_severity."""
        if severity is Severity.UNKNOWN:
            return True
        return severity.rank >= self._min_severity.rank

    def format_line(self, severity: Severity, context: LogContext, text: str) -> str:
        category = context.category or ""
        if category[:1].isdigit():
            stamp = category
        else:
            stamp = format_timestamp(self._clock())

        line = (
            f"[{stamp}] [{severity.value}] "
            f"[{context.function} #{context.line} {self._pid()} {self._thread_id()}] "
            f"{text}"
        )
        if not line.endswith("\n"):
            line += "\n"
        return line

    @property
    def sink(self) -> FileSink:
        return self._sink

    @property
    def min_severity(self) -> Severity:
        return self._min_severity

    def set_min_severity(self, severity: Severity) -> None:
        if severity is Severity.UNKNOWN:
            raise ValueError("UNKNOWN cannot be used as a minimum severity")
        self._min_severity = severity

    @property
    def routed(self) -> int:
        return self._routed

    @property
    def filtered(self) -> int:
        return self._filtered

    @property
    def dropped(self) -> int:
        return self._dropped

    def counters(self) -> dict:
        with self._counter_lock:
            return {
                "routed": self._routed,
                "filtered": self._filtered,
                "dropped": self._dropped,
            }

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _count(self, name: str) -> None:
        with self._counter_lock:
            setattr(self, name, getattr(self, name) + 1)


_router: Optional[MessageRouter] = None
_router_lock = Lock()


def get_router(min_severity: Severity = Severity.INFO) -> MessageRouter:
    """
    Return the process-wide router bound to ``FileSink.get_instance()``.

    ``min_severity`` only applies to the first call.
    """
    global _router
    if _router is None:
        with _router_lock:
            if _router is None:
                _router = MessageRouter(FileSink.get_instance(), min_severity=min_severity)
    return _router


def route_message(
    severity: Severity,
    text: str,
    context: Optional[LogContext] = None,
) -> bool:
    """Route *text* through the process-wide router."""
    return get_router().route(severity, context, text)
