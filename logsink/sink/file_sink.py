"""Process-wide, thread-safe log file sink with size-based rotation"""

import logging
import os
from threading import Lock, RLock
from typing import Optional, TextIO

from logsink.core.constants import (
    DEFAULT_APP_NAME,
    DEFAULT_FLUSH_INTERVAL_MS,
    DEFAULT_MAX_BYTES,
    FLUSH_TASK_NAME,
    WRITE_BUFFER_SIZE,
)
from logsink.core.exceptions import EmptyFileNameError
from logsink.core.paths import resolve_path
from logsink.core.result import SinkErrorKind, SinkResult
from logsink.core.scheduler import IntervalTaskPool
from logsink.sink.rotation import RotationPolicy
from logsink.sink.stats import SinkStats

logger = logging.getLogger("logsink.sink.file")


def _flush_tick(owner: "FileSink") -> bool:
    """Periodic flush callback registered with the scheduler."""
    owner.flush()
    return True


class FileSink:
    """
    Owner of the single active log file.

    Two states: Closed and Open. Every state-mutating operation (open,
    close, flush, write) runs under one re-entrant lock, which the
    MessageRouter also holds for its whole open-format-write sequence.

    While Open, a periodic flush task is registered with the injected
    scheduler; each flush pushes buffered output to the OS and hands the
    sink to the RotationPolicy, which may close-rename-reopen the file.

    File-system failures never raise out of this class: they come back as
    falsy ``SinkResult`` values carrying a ``SinkErrorKind``.

    Usage::

        sink = FileSink(max_bytes=1024 * 1024)
        sink.set_path("/var/log/myapp", "my app.log")   # -> my_app.log
        sink.write("hello\\n")
        sink.flush()
        sink.close()
    """

    _instance: Optional["FileSink"] = None
    _instance_lock = Lock()

    def __init__(
        self,
        max_bytes: int = DEFAULT_MAX_BYTES,
        flush_interval_ms: int = DEFAULT_FLUSH_INTERVAL_MS,
        scheduler: Optional[IntervalTaskPool] = None,
        truncate_on_open: bool = False,
        rotation_policy: Optional[RotationPolicy] = None,
        app_name: str = DEFAULT_APP_NAME,
        flush_task_name: Optional[str] = None,
    ) -> None:
        """
        Initialise FileSink.

        Args:
            max_bytes: Rotate once the file grows past this many bytes
            flush_interval_ms: Period of the automatic flush task
            scheduler: Interval task pool (defaults to the process-wide pool)
            truncate_on_open: Truncate instead of append on open (debug deployments)
            rotation_policy: Rotation policy (defaults to a ``.old`` policy)
            app_name: Application name for the app-data directory fallback
            flush_task_name: Name of the periodic flush task (unique per
                             sink by default, so sinks can share a pool)
        """
        if max_bytes <= 0:
            raise ValueError("max_bytes must be positive")
        if flush_interval_ms <= 0:
            raise ValueError("flush_interval_ms must be positive")

        self._lock = RLock()

        self._opened = False
        self._stream: Optional[TextIO] = None
        self._path = ""
        self._directory = ""
        self._directory_ready = True
        self._max_bytes = max_bytes

        self._flush_interval_ms = flush_interval_ms
        self._scheduler = scheduler or IntervalTaskPool.get_instance()
        self._truncate_on_open = truncate_on_open
        self._rotation = rotation_policy or RotationPolicy()
        self._app_name = app_name
        self._flush_task_name = flush_task_name or f"{FLUSH_TASK_NAME}:{id(self):x}"

        self._writes = 0
        self._flushes = 0
        self._dropped = 0
        self._open_failures = 0

    @classmethod
    def get_instance(
        cls,
        max_bytes: int = DEFAULT_MAX_BYTES,
        flush_interval_ms: int = DEFAULT_FLUSH_INTERVAL_MS,
        scheduler: Optional[IntervalTaskPool] = None,
        truncate_on_open: bool = False,
        app_name: str = DEFAULT_APP_NAME,
    ) -> "FileSink":
        """
        Return the process-wide sink, constructing it on first call.

        Arguments only apply to the first call; later calls return the
        existing instance unchanged.
        """
        if cls._instance is None:
            with cls._instance_lock:
                if cls._instance is None:
                    cls._instance = cls(
                        max_bytes=max_bytes,
                        flush_interval_ms=flush_interval_ms,
                        scheduler=scheduler,
                        truncate_on_open=truncate_on_open,
                        app_name=app_name,
                        flush_task_name=FLUSH_TASK_NAME,
                    )
        return cls._instance

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def set_path(self, directory: str, file_name: str) -> SinkResult:
        """
        Set the log directory and file name.

        Only allowed while Closed; an open sink keeps its current file.
        """
        with self._lock:
            if self._opened:
                logger.warning(f"FileSink: set_path rejected while open ({self._path})")
                return SinkResult.failure(
                    SinkErrorKind.SINK_OPEN, "close the sink before changing its path"
                )
            try:
                resolved = resolve_path(directory, file_name, self._app_name)
            except EmptyFileNameError as e:
                return SinkResult.failure(SinkErrorKind.EMPTY_FILE_NAME, str(e))

            self._path = resolved.path
            self._directory = resolved.directory
            self._directory_ready = resolved.directory_ready
            logger.debug(f"FileSink: path set to {self._path}")
            return SinkResult.success()

    def set_max_bytes_allowed(self, nbytes: int) -> None:
        """Change the rotation threshold; takes effect on the next flush."""
        if nbytes <= 0:
            raise ValueError("max_bytes must be positive")
        with self._lock:
            self._max_bytes = nbytes

    def get_dir_path(self) -> str:
        with self._lock:
            return self._directory

    @property
    def path(self) -> str:
        with self._lock:
            return self._path

    @property
    def max_bytes(self) -> int:
        with self._lock:
            return self._max_bytes

    @property
    def flush_interval_ms(self) -> int:
        return self._flush_interval_ms

    @property
    def flush_task_name(self) -> str:
        return self._flush_task_name

    @property
    def is_open(self) -> bool:
        with self._lock:
            return self._opened

    @property
    def lock(self) -> RLock:
        """The sink's exclusive lock (re-entrant)."""
        return self._lock

    @property
    def rotation_policy(self) -> RotationPolicy:
        return self._rotation

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def open(self) -> SinkResult:
        """Open the log file (Closed -> Open) and start the periodic flush."""
        with self._lock:
            return self._open_locked()

    def close(self, reset: bool = True) -> SinkResult:
        """
        Stop the periodic flush, flush and close the file.

        Args:
            reset: When False the handle is closed but the sink stays
                   claimed: it still reports open, lazy-open will not
                   reopen it and writes are dropped until ``open()`` or
                   ``close(reset=True)``.
        """
        with self._lock:
            return self._close_locked(reset)

    def flush(self) -> SinkResult:
        """Push buffered output to the OS, then rotate if the file is too large."""
        with self._lock:
            if not self._opened or self._stream is None:
                return SinkResult.failure(SinkErrorKind.NOT_OPEN)
            try:
                self._stream.flush()
            except OSError as e:
                logger.warning(f"FileSink: flush of {self._path} failed: {e}")
                return SinkResult.failure(SinkErrorKind.WRITE_FAILURE, str(e))
            self._flushes += 1
            return self._rotation.check(self)

    def write(self, text: str, flush_now: bool = False) -> SinkResult:
        """
        Append *text* to the active file, opening the sink if it is Closed.

        Args:
            text: Text to write (caller supplies line terminators)
            flush_now: Push the buffer to the OS immediately
        """
        with self._lock:
            if not self._opened:
                result = self._open_locked()
                if not result:
                    self._dropped += 1
                    return result

            if self._stream is None:
                self._dropped += 1
                return SinkResult.failure(SinkErrorKind.NOT_OPEN, "sink is closed for rotation")

            try:
                self._stream.write(text)
                if flush_now:
                    self._stream.flush()
            except OSError as e:
                self._dropped += 1
                logger.warning(f"FileSink: write to {self._path} failed: {e}")
                return SinkResult.failure(SinkErrorKind.WRITE_FAILURE, str(e))

            self._writes += 1
            return SinkResult.success()

    def current_size(self) -> int:
        """Size of the active file on disk (excludes unflushed output)."""
        with self._lock:
            try:
                if self._stream is not None:
                    return os.fstat(self._stream.fileno()).st_size
                if self._path and os.path.exists(self._path):
                    return os.path.getsize(self._path)
            except OSError:
                pass
            return 0

    def stats(self) -> SinkStats:
        with self._lock:
            return SinkStats(
                opened=self._opened,
                path=self._path,
                directory=self._directory,
                directory_ready=self._directory_ready,
                max_bytes=self._max_bytes,
                current_size=self.current_size(),
                flush_interval_ms=self._flush_interval_ms,
                writes=self._writes,
                flushes=self._flushes,
                dropped=self._dropped,
                open_failures=self._open_failures,
                rotations=self._rotation.rotations,
                failed_rotations=self._rotation.failed_rotations,
            )

    # ------------------------------------------------------------------
    # Lock-held internals (also used by RotationPolicy)
    # ------------------------------------------------------------------

    def _open_locked(self) -> SinkResult:
        if self._stream is not None:
            return SinkResult.success()

        if not self._path:
            self._opened = False
            self._open_failures += 1
            return SinkResult.failure(SinkErrorKind.OPEN_FAILURE, "no log path configured")

        mode = "w" if self._truncate_on_open else "a"
        try:
            stream = open(
                self._path,
                mode,
                encoding="utf-8",
                errors="backslashreplace",
                newline="\n",
                buffering=WRITE_BUFFER_SIZE,
            )
        except OSError as e:
            self._opened = False
            self._open_failures += 1
            logger.warning(f"FileSink: cannot open {self._path}: {e}")
            return SinkResult.failure(SinkErrorKind.OPEN_FAILURE, str(e))

        self._stream = stream
        self._opened = True
        self._scheduler.submit_interval_task(
            self._flush_task_name, self, self._flush_interval_ms, _flush_tick
        )
        logger.debug(f"FileSink: opened {self._path} (mode={mode})")
        return SinkResult.success()

    def _close_locked(self, reset: bool = True) -> SinkResult:
        if not self._opened:
            return SinkResult.failure(SinkErrorKind.NOT_OPEN)

        self._scheduler.remove_interval_task(self._flush_task_name, False)

        if reset:
            self._opened = False

        stream, self._stream = self._stream, None
        if stream is None:
            return SinkResult.success()

        try:
            stream.close()
        except OSError as e:
            logger.warning(f"FileSink: error closing {self._path}: {e}")
            return SinkResult.failure(SinkErrorKind.WRITE_FAILURE, str(e))

        logger.debug(f"FileSink: closed {self._path} (reset={reset})")
        return SinkResult.success()

    def _abandon_locked(self) -> None:
        """Drop to Closed after a failed rotation so the next write reopens."""
        if self._stream is not None:
            self._close_locked(reset=True)
        self._opened = False
