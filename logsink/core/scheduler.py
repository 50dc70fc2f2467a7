"""
Interval task pool

Runs named repeating callbacks on background daemon threads. The log sink
registers its periodic flush here when it opens and removes it when it
closes; the sink itself never starts a thread.

Contract
--------
* ``submit_interval_task(name, owner, interval_ms, callback)`` schedules
  ``callback(owner)`` every ``interval_ms`` milliseconds. The callback
  returns ``True`` to keep running, ``False`` to end the task.
* Each task runs on its own thread, so a task never has more than one
  invocation outstanding.
* Re-submitting an existing name replaces the old task. This is what lets
  a sink rotate (close + reopen) from inside its own flush callback.
* ``remove_interval_task(name, wait_for_completion)`` cancels a task. A
  callback already running is allowed to finish; waiting is skipped when
  called from the task's own thread.
* Callbacks run without the pool lock held, so they may call back into
  ``submit_interval_task`` / ``remove_interval_task``.
* Exceptions inside callbacks are caught and logged so one bad callback
  cannot kill its timer.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from threading import Event, Lock, RLock, Thread, current_thread
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger("logsink.core.scheduler")


IntervalCallback = Callable[[Any], bool]


@dataclass
class IntervalTask:
    """A registered repeating task"""
    name: str
    owner: Any
    interval_ms: int
    callback: IntervalCallback
    stop_event: Event = field(default_factory=Event)
    thread: Optional[Thread] = None
    runs: int = 0
    last_run: Optional[datetime] = None

    @property
    def cancelled(self) -> bool:
        return self.stop_event.is_set()


class IntervalTaskPool:
    """
    Named repeating timers backed by daemon threads.

    Usage::

        def flush_tick(sink):
            sink.flush()
            return True

        pool = IntervalTaskPool.get_instance()
        pool.submit_interval_task("flush_file_sink", sink, 1000, flush_tick)
        ...
        pool.remove_interval_task("flush_file_sink", wait_for_completion=False)
    """

    _instance: Optional["IntervalTaskPool"] = None
    _instance_lock = Lock()

    def __init__(self, clock: Optional[Callable[[], datetime]] = None) -> None:
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._tasks: Dict[str, IntervalTask] = {}
        self._lock = RLock()

    @classmethod
    def get_instance(cls) -> "IntervalTaskPool":
        """Return the process-wide pool, creating it on first use."""
        if cls._instance is None:
            with cls._instance_lock:
                if cls._instance is None:
                    cls._instance = cls()
        return cls._instance

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def submit_interval_task(
        self,
        name: str,
        owner: Any,
        interval_ms: int,
        callback: IntervalCallback,
    ) -> None:
        """Schedule ``callback(owner)`` every ``interval_ms`` milliseconds."""
        if interval_ms <= 0:
            raise ValueError("interval_ms must be positive")

        task = IntervalTask(
            name=name,
            owner=owner,
            interval_ms=interval_ms,
            callback=callback,
        )
        task.thread = Thread(
            target=self._run,
            args=(task,),
            name=f"interval-{name}",
            daemon=True,
        )

        with self._lock:
            previous = self._tasks.pop(name, None)
            if previous is not None:
                previous.stop_event.set()
                logger.debug(f"IntervalTaskPool: replacing task {name}")
            self._tasks[name] = task
            task.thread.start()

        logger.debug(f"IntervalTaskPool: submitted {name} every {interval_ms}ms")

    def remove_interval_task(self, name: str, wait_for_completion: bool = False) -> bool:
        """
        Cancel a task.

        Returns:
            True if a task with that name was registered
        """
        with self._lock:
            task = self._tasks.pop(name, None)
        if task is None:
            return False

        task.stop_event.set()
        if wait_for_completion and task.thread is not None and task.thread is not current_thread():
            task.thread.join()

        logger.debug(f"IntervalTaskPool: removed {name}")
        return True

    def run_once(self, name: str) -> bool:
        """
        Invoke a task's callback synchronously on the calling thread.

        Returns:
            The callback's continue signal; False if no such task
        """
        with self._lock:
            task = self._tasks.get(name)
        if task is None:
            return False
        return self._safe_call(task)

    def has_task(self, name: str) -> bool:
        with self._lock:
            return name in self._tasks

    def task_names(self) -> List[str]:
        with self._lock:
            return sorted(self._tasks)

    def get_task(self, name: str) -> Optional[IntervalTask]:
        with self._lock:
            return self._tasks.get(name)

    def shutdown(self, wait: bool = True) -> None:
        """Cancel every task."""
        for name in self.task_names():
            self.remove_interval_task(name, wait_for_completion=wait)
        logger.info("IntervalTaskPool: shut down")

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _run(self, task: IntervalTask) -> None:
        interval = task.interval_ms / 1000.0
        while not task.stop_event.wait(interval):
            if not self._safe_call(task):
                with self._lock:
                    if self._tasks.get(task.name) is task:
                        del self._tasks[task.name]
                task.stop_event.set()
                logger.debug(f"IntervalTaskPool: task {task.name} finished")
                break

    def _safe_call(self, task: IntervalTask) -> bool:
        """Call the task callback; an exception keeps the task alive."""
        try:
            keep_running = bool(task.callback(task.owner))
        except Exception as e:
            logger.error(f"IntervalTaskPool: task {task.name} raised exception: {e}")
            keep_running = True
        task.runs += 1
        task.last_run = self._clock()
        return keep_running
