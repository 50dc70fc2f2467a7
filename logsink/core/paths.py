"""Log file path resolution"""

import logging
import os
import re
import sys
from dataclasses import dataclass

from logsink.core.constants import DEFAULT_APP_NAME
from logsink.core.exceptions import EmptyFileNameError

logger = logging.getLogger("logsink.core.paths")

_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class ResolvedPath:
    """Final log file path and the directory that holds it"""
    path: str
    directory: str
    directory_ready: bool = True  # False if the directory could not be created


def sanitize_name(name: str) -> str:
    """Replace every whitespace run with a single underscore."""
    return _WHITESPACE.sub("_", name)


def app_data_dir(app_name: str = DEFAULT_APP_NAME) -> str:
    """Return the per-user application data directory for *app_name*."""
    home = os.path.expanduser("~")
    if sys.platform.startswith("win"):
        base = os.getenv("APPDATA") or os.path.join(home, "AppData", "Roaming")
    elif sys.platform == "darwin":
        base = os.path.join(home, "Library", "Application Support")
    else:
        base = os.getenv("XDG_DATA_HOME") or os.path.join(home, ".local", "share")
    return os.path.join(base, app_name)


def ensure_directory(directory: str) -> bool:
    """Create *directory* (and parents) if missing. Never raises."""
    try:
        os.makedirs(directory, exist_ok=True)
        return True
    except OSError as e:
        logger.debug(f"Could not create log directory {directory}: {e}")
        return False


def resolve_path(
    directory: str,
    file_name: str,
    app_name: str = DEFAULT_APP_NAME,
) -> ResolvedPath:
    """
    Compute the absolute, sanitized log file path.

    Args:
        directory: Target directory; blank falls back to the app-data directory
        file_name: Log file name; whitespace runs become underscores
        app_name: Application name used for the app-data fallback

    Returns:
        ResolvedPath with forward-slash separators

    Raises:
        EmptyFileNameError: If file_name is empty
    """
    if not file_name:
        raise EmptyFileNameError("Log file name must not be empty")

    file_name = sanitize_name(file_name)

    if not directory or not directory.strip():
        directory = sanitize_name(app_data_dir(app_name))

    directory = os.path.abspath(os.path.expanduser(directory)).replace("\\", "/")
    ready = ensure_directory(directory)

    path = directory.rstrip("/") + "/" + file_name
    return ResolvedPath(path=path, directory=directory, directory_ready=ready)
