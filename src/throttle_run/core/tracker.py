"""Completion tracker — counts outstanding tasks and records failures.

Workers never terminate the process themselves.  They hand a
:class:`~throttle_run.core.models.TaskResult` to :meth:`task_finished`;
the coordinating thread blocks in :meth:`CompletionTracker.wait` and
decides what happens next.
"""

from __future__ import annotations

import logging
import threading

from throttle_run.core.models import TaskResult

logger = logging.getLogger(__name__)


class CompletionTracker:
    """Thread-safe accounting of launched-but-unfinished tasks."""

    def __init__(self) -> None:
        self._cond = threading.Condition()
        self._outstanding = 0
        self._launched = 0
        self._succeeded = 0
        self._input_closed = False
        self._failure: TaskResult | None = None

    @property
    def launched(self) -> int:
        with self._cond:
            return self._launched

    @property
    def succeeded(self) -> int:
        with self._cond:
            return self._succeeded

    @property
    def outstanding(self) -> int:
        with self._cond:
            return self._outstanding

    @property
    def failed(self) -> bool:
        with self._cond:
            return self._failure is not None

    def task_started(self) -> None:
        with self._cond:
            self._outstanding += 1
            self._launched += 1

    def task_finished(self, result: TaskResult) -> None:
        """Account for a finished task; the first failure is kept."""
        with self._cond:
            self._outstanding -= 1
            if result.ok:
                self._succeeded += 1
            elif self._failure is None:
                self._failure = result
            else:
                logger.debug("task %d also failed: %s", result.index, result.error)
            self._cond.notify_all()

    def close_input(self) -> None:
        """Signal that no further tasks will be started."""
        with self._cond:
            self._input_closed = True
            self._cond.notify_all()

    def wait(self, timeout: float | None = None) -> TaskResult | None:
        """Block until all tasks are done or one has failed.

        Returns the first failed result, or ``None`` once input is
        closed and nothing is outstanding.

        Raises
        ------
        TimeoutError
            When *timeout* elapses first.
        """
        with self._cond:
            done = self._cond.wait_for(self._settled, timeout=timeout)
            if not done:
                raise TimeoutError("tasks still running")
            return self._failure

    def _settled(self) -> bool:
        if self._failure is not None:
            return True
        return self._input_closed and self._outstanding == 0
