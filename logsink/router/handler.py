"""Installation hook: route stdlib logging records into the file sink"""

import logging
from typing import Optional

from logsink.core.constants import Severity
from logsink.router.message_router import LogContext, MessageRouter, get_router

INTERNAL_LOGGER_PREFIX = "logsink"


class InternalRecordFilter(logging.Filter):
    """Reject records emitted by this package's own loggers."""

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name
        return not (name == INTERNAL_LOGGER_PREFIX or name.startswith(INTERNAL_LOGGER_PREFIX + "."))


class SinkHandler(logging.Handler):
    """
    logging.Handler that forwards every record to a MessageRouter.

    The handler only formats the message body (tracebacks included); the
    router adds the ``[timestamp] [LEVEL] [function #line pid tid]`` prefix.
    A ``category`` passed through ``extra`` is forwarded, so a caller can
    supply its own timestamp marker::

        logger.info("replayed", extra={"category": "2024-01-01 00:00:00.000"})
    """

    def __init__(self, router: MessageRouter, level: int = logging.NOTSET) -> None:
        super().__init__(level)
        self._router = router
        self.setFormatter(logging.Formatter("%(message)s"))
        self.addFilter(InternalRecordFilter())

    @property
    def router(self) -> MessageRouter:
        return self._router

    def emit(self, record: logging.LogRecord) -> None:
        try:
            text = self.format(record)
            context = LogContext(
                function=record.funcName or "",
                file=record.pathname or "",
                line=record.lineno or 0,
                category=str(getattr(record, "category", "") or ""),
            )
            self._router.route(Severity.from_logging_level(record.levelno), context, text)
        except Exception:
            self.handleError(record)

    def flush(self) -> None:
        self._router.sink.flush()


def install(
    router: Optional[MessageRouter] = None,
    target: Optional[logging.Logger] = None,
    level: Optional[int] = None,
) -> SinkHandler:
    """
    Make the sink the destination for records logged through *target*.

    Args:
        router: Router to forward to (defaults to the process-wide router)
        target: Logger to attach to (defaults to the root logger)
        level: Handler level (defaults to the router's minimum severity)

    Returns:
        The installed handler
    """
    router = router or get_router()
    target = target if target is not None else logging.getLogger()

    # Remove previously installed sink handlers to avoid duplicate lines
    for existing in list(target.handlers):
        if isinstance(existing, SinkHandler):
            target.removeHandler(existing)

    if level is None:
        level = router.min_severity.to_logging_level()

    handler = SinkHandler(router, level=level)
    target.addHandler(handler)
    return handler


def uninstall(handler: SinkHandler, target: Optional[logging.Logger] = None) -> None:
    """Detach *handler* and flush what it has written."""
    target = target if target is not None else logging.getLogger()
    target.removeHandler(handler)
    handler.flush()
