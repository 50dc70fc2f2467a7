"""Logging setup: wire the file sink into stdlib logging from a config"""

import logging
import sys
from typing import Optional

from logsink.config.models import LogSinkConfig
from logsink.core.constants import Severity
from logsink.core.result import SinkErrorKind
from logsink.router.handler import SinkHandler, install
from logsink.router.message_router import MessageRouter, get_router
from logsink.sink.file_sink import FileSink

CONSOLE_HANDLER_NAME = "logsink.console"


def setup_logging(
    config: Optional[LogSinkConfig] = None,
    sink: Optional[FileSink] = None,
) -> SinkHandler:
    """
    Configure the file sink and install it as a logging handler.

    Args:
        config: LogSinkConfig instance (if None, uses defaults)
        sink: Sink to configure; defaults to the process-wide instance
              and its process-wide router

    Returns:
        The installed SinkHandler

    Raises:
        SinkError: If the configured file name is rejected
    """
    if config is None:
        config = LogSinkConfig()
    sink_cfg = config.sink

    if sink is None:
        sink = FileSink.get_instance(
            max_bytes=sink_cfg.max_bytes,
            flush_interval_ms=sink_cfg.flush_interval_ms,
            truncate_on_open=sink_cfg.truncate_on_open,
            app_name=sink_cfg.app_name,
        )
        router = get_router(min_severity=sink_cfg.min_severity)
        router.set_min_severity(sink_cfg.min_severity)
    else:
        router = MessageRouter(sink, min_severity=sink_cfg.min_severity)

    sink.set_max_bytes_allowed(sink_cfg.max_bytes)
    result = sink.set_path(sink_cfg.directory, sink_cfg.file_name)
    if result.error is not SinkErrorKind.SINK_OPEN:
        # An already-open sink keeps writing to its current file
        result.raise_for_error()

    # Create logger
    target = logging.getLogger(config.logger_name)
    levels = [sink_cfg.min_severity.to_logging_level()]
    if config.console.enabled:
        levels.append(Severity(config.console.level).to_logging_level())
    target.setLevel(min(levels))

    handler = install(router, target)

    # Console handler
    for existing in list(target.handlers):
        if existing.get_name() == CONSOLE_HANDLER_NAME:
            target.removeHandler(existing)
    if config.console.enabled:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.set_name(CONSOLE_HANDLER_NAME)
        console_handler.setLevel(Severity(config.console.level).to_logging_level())
        console_handler.setFormatter(
            logging.Formatter(config.console.format, datefmt='%Y-%m-%d %H:%M:%S')
        )
        target.addHandler(console_handler)

    # A named logger keeps its records out of the root logger's handlers
    if config.logger_name:
        target.propagate = False

    return handler


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get logger instance by name (root logger by default)"""
    return logging.getLogger(name)
