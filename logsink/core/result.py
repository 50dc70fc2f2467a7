"""Result type returned by sink operations"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Type

from logsink.core.exceptions import (
    DirectoryCreateError,
    EmptyFileNameError,
    OpenFailureError,
    RenameFailureError,
    SinkError,
    SinkNotOpenError,
    SinkOpenError,
    WriteFailureError,
)


class SinkErrorKind(str, Enum):
    """Failure taxonomy for sink operations"""
    OPEN_FAILURE = "open_failure"
    RENAME_FAILURE = "rename_failure"
    DIRECTORY_CREATE_FAILURE = "directory_create_failure"
    EMPTY_FILE_NAME = "empty_file_name"
    SINK_OPEN = "sink_open"
    NOT_OPEN = "not_open"
    WRITE_FAILURE = "write_failure"


_EXCEPTION_BY_KIND: Dict[SinkErrorKind, Type[SinkError]] = {
    SinkErrorKind.OPEN_FAILURE: OpenFailureError,
    SinkErrorKind.RENAME_FAILURE: RenameFailureError,
    SinkErrorKind.DIRECTORY_CREATE_FAILURE: DirectoryCreateError,
    SinkErrorKind.EMPTY_FILE_NAME: EmptyFileNameError,
    SinkErrorKind.SINK_OPEN: SinkOpenError,
    SinkErrorKind.NOT_OPEN: SinkNotOpenError,
    SinkErrorKind.WRITE_FAILURE: WriteFailureError,
}


@dataclass(frozen=True)
class SinkResult:
    """
    Outcome of a sink operation.

    Truthy on success, so callers that only care about the boolean signal
    can keep writing ``if sink.open(): ...``. Failures carry the specific
    ``SinkErrorKind`` and an optional human-readable detail.
    """
    ok: bool
    error: Optional[SinkErrorKind] = None
    detail: Optional[str] = None

    def __bool__(self) -> bool:
        return self.ok

    @classmethod
    def success(cls) -> "SinkResult":
        return cls(ok=True)

    @classmethod
    def failure(cls, error: SinkErrorKind, detail: Optional[str] = None) -> "SinkResult":
        return cls(ok=False, error=error, detail=detail)

    def raise_for_error(self) -> None:
        """Raise the matching SinkError subclass if this result is a failure."""
        if self.ok:
            return
        exc_type = _EXCEPTION_BY_KIND.get(self.error, SinkError)
        raise exc_type(self.detail or self.error.value)

    def to_dict(self) -> dict:
        return {
            "ok": self.ok,
            "error": self.error.value if self.error else None,
            "detail": self.detail,
        }
