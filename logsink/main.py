"""Command-line entry point: pipe stdin lines into the log sink"""

import argparse
import logging
import os
import sys
import threading
from typing import List, Optional, TextIO

from logsink.config.loader import config_summary, load_config
from logsink.config.models import LogSinkConfig
from logsink.core.constants import Severity
from logsink.utils.logger import setup_logging


def _start_dashboard(config: LogSinkConfig, handler) -> Optional[threading.Thread]:
    """Start the status dashboard in a background daemon thread."""
    logger = logging.getLogger("logsink.main")
    try:
        import uvicorn
        from logsink.dashboard.app import create_app

        app = create_app(sink=handler.router.sink, router=handler.router)
        host = config.dashboard.host
        port = config.dashboard.port

        def _run():
            uvicorn.run(app, host=host, port=port, log_level="warning", access_log=False)

        thread = threading.Thread(target=_run, name="dashboard", daemon=True)
        thread.start()
        logger.info(f"Dashboard started → http://{host}:{port}/api/status")
        return thread
    except Exception as e:
        logger.warning(f"Dashboard start failed (non-fatal): {e}")
        return None


def pipe_lines(stream: TextIO, logger: logging.Logger, level: int) -> int:
    """Log every non-empty line of *stream*; returns the number logged."""
    count = 0
    for line in stream:
        text = line.rstrip("\r\n")
        if not text:
            continue
        logger.log(level, text)
        count += 1
    return count


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point — load config, install the sink, pipe stdin."""
    parser = argparse.ArgumentParser(description="Thread-safe rotating file log sink")
    parser.add_argument(
        "config_path",
        nargs="?",
        default=None,
        help="Path to config JSON file (overrides LOGSINK_CONFIG env var)",
    )
    parser.add_argument(
        "--validate",
        action="store_true",
        default=False,
        help="Validate the config and exit",
    )
    parser.add_argument(
        "--level",
        default="INFO",
        help="Level for lines read from stdin (DEBUG/INFO/WARNING/ERROR/FATAL)",
    )
    args = parser.parse_args(argv)

    config_path = args.config_path or os.getenv("LOGSINK_CONFIG")

    try:
        config = load_config(config_path) if config_path else LogSinkConfig()
        severity = Severity.from_name(args.level)
        if severity is Severity.UNKNOWN:
            raise ValueError("--level must be one of DEBUG, INFO, WARNING, ERROR, FATAL")
    except FileNotFoundError as e:
        print(f"[ERROR] Config file not found: {e}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 1

    if args.validate:
        print("[OK] Config validation successful")
        for line in config_summary(config):
            print(line)
        return 0

    handler = setup_logging(config)
    print(f"Logging to: {handler.router.sink.path}", file=sys.stderr)

    if config.dashboard.enabled:
        _start_dashboard(config, handler)

    logger = logging.getLogger(config.logger_name or "stdin")
    try:
        pipe_lines(sys.stdin, logger, severity.to_logging_level())
    except KeyboardInterrupt:
        pass
    finally:
        handler.router.sink.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
