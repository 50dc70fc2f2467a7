"""Size-based rotation of the active log file"""

import logging
import os

from logsink.core.constants import ROTATED_SUFFIX
from logsink.core.result import SinkErrorKind, SinkResult

logger = logging.getLogger("logsink.sink.rotation")


class RotationPolicy:
    """
    Decides when the active file is too large and performs the
    close -> rename -> reopen sequence.

    Only one rotated generation is kept: ``<path>.old`` is overwritten on
    every rotation.

    All methods taking a sink must be called with the sink lock held; in
    practice they are only reached from ``FileSink.flush``.
    """

    def __init__(self, suffix: str = ROTATED_SUFFIX) -> None:
        self.suffix = suffix
        self.rotations = 0
        self.failed_rotations = 0

    @staticmethod
    def should_rotate(current_size: int, max_bytes: int) -> bool:
        return current_size > max_bytes

    def rotated_path(self, path: str) -> str:
        return path + self.suffix

    def check(self, sink) -> SinkResult:
        """Rotate *sink* if its file exceeds the threshold it currently holds."""
        if not sink.is_open:
            return SinkResult.failure(SinkErrorKind.NOT_OPEN)
        if not self.should_rotate(sink.current_size(), sink.max_bytes):
            return SinkResult.success()
        return self.rotate(sink)

    def rotate(self, sink) -> SinkResult:
        """
        Close the handle without releasing the sink, rename the file onto
        the rotated path and reopen a fresh handle at the original path.

        On rename or reopen failure the sink is left Closed so that the
        next write opens it from scratch.
        """
        path = sink.path
        target = self.rotated_path(path)

        sink._close_locked(reset=False)

        try:
            os.replace(path, target)
        except OSError as e:
            sink._abandon_locked()
            self.failed_rotations += 1
            logger.error(f"Rotation rename {path} -> {target} failed: {e}")
            return SinkResult.failure(SinkErrorKind.RENAME_FAILURE, str(e))

        result = sink._open_locked()
        if not result:
            sink._abandon_locked()
            self.failed_rotations += 1
            logger.error(f"Rotation reopen of {path} failed: {result.detail}")
            return result

        self.rotations += 1
        logger.info(f"Rotated {path} -> {target}")
        return SinkResult.success()
