"""Core constants and enums for the log sink"""

import logging
from enum import Enum


DEFAULT_MAX_BYTES = 10 * 1024 * 1024      # 10 MiB
DEFAULT_FLUSH_INTERVAL_MS = 1000
DEFAULT_APP_NAME = "logsink"
DEFAULT_FILE_NAME = "logsink.log"

ROTATED_SUFFIX = ".old"
FLUSH_TASK_NAME = "flush_file_sink"

# Buffer size of the sink's writer; small records stay buffered until a flush
WRITE_BUFFER_SIZE = 64 * 1024

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


class Severity(str, Enum):
    """Record severity, ordered low -> high urgency (UNKNOWN is unranked)"""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    FATAL = "FATAL"
    UNKNOWN = "UNKNOWN"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]

    @property
    def is_urgent(self) -> bool:
        """Urgent records are flushed to the OS as soon as they are written."""
        return self in (Severity.WARNING, Severity.ERROR, Severity.FATAL)

    @classmethod
    def from_name(cls, name: str) -> "Severity":
        """Parse a level name; CRITICAL is accepted as an alias of FATAL."""
        key = name.strip().upper()
        if key == "CRITICAL":
            return cls.FATAL
        try:
            return cls(key)
        except ValueError:
            raise ValueError(f"Unknown severity: {name}")

    @classmethod
    def from_logging_level(cls, levelno: int) -> "Severity":
        """Map a stdlib logging level number; non-standard levels map to UNKNOWN."""
        return _LOGGING_LEVELS.get(levelno, cls.UNKNOWN)

    def to_logging_level(self) -> int:
        return _LOGGING_BY_SEVERITY.get(self, logging.NOTSET)


_SEVERITY_RANK = {
    Severity.UNKNOWN: -1,
    Severity.DEBUG: 0,
    Severity.INFO: 1,
    Severity.WARNING: 2,
    Severity.ERROR: 3,
    Severity.FATAL: 4,
}

_LOGGING_LEVELS = {
    logging.DEBUG: Severity.DEBUG,
    logging.INFO: Severity.INFO,
    logging.WARNING: Severity.WARNING,
    logging.ERROR: Severity.ERROR,
    logging.CRITICAL: Severity.FATAL,
}

_LOGGING_BY_SEVERITY = {severity: level for level, severity in _LOGGING_LEVELS.items()}
