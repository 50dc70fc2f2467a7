"""Message routing and the logging installation hook"""

from logsink.router.message_router import (
    LogContext,
    MessageRouter,
    format_timestamp,
    get_router,
    route_message,
)
from logsink.router.handler import SinkHandler, install, uninstall

__all__ = [
    "LogContext",
    "MessageRouter",
    "format_timestamp",
    "get_router",
    "route_message",
    "SinkHandler",
    "install",
    "uninstall",
]
