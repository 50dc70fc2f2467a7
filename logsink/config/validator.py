"""Additional configuration validation logic"""

import os

from logsink.config.models import LogSinkConfig
from logsink.core.constants import ROTATED_SUFFIX

# Smallest threshold that still holds a handful of formatted lines
MIN_MAX_BYTES = 1024


def validate_config_constraints(config: LogSinkConfig) -> None:
    """
    Perform additional cross-field validation beyond Pydantic model validators.

    Args:
        config: LogSinkConfig instance to validate

    Raises:
        ValueError: If validation fails
    """
    sink = config.sink

    # The file name is joined onto the directory; it must not carry its own path
    if "/" in sink.file_name or "\\" in sink.file_name:
        raise ValueError("file_name must not contain path separators; use directory")

    if sink.file_name.endswith(ROTATED_SUFFIX):
        raise ValueError(f"file_name must not end with the rotation suffix {ROTATED_SUFFIX}")

    if sink.max_bytes < MIN_MAX_BYTES:
        raise ValueError(f"max_bytes must be at least {MIN_MAX_BYTES}")

    if sink.directory and os.path.isfile(os.path.expanduser(sink.directory)):
        raise ValueError(f"directory points to an existing file: {sink.directory}")

    if sink.app_name != sink.app_name.strip() or not sink.app_name:
        raise ValueError("app_name must be a non-empty name without surrounding whitespace")

    # Records from the package's own loggers never reach the sink
    if config.logger_name and (
        config.logger_name == "logsink" or config.logger_name.startswith("logsink.")
    ):
        raise ValueError("logger_name must not be inside the logsink namespace")
