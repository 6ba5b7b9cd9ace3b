"""Scheduler — drives input lines through the limiter into the launcher.

Flow:
1. A dispatcher thread takes lines in arrival order (FIFO admission).
2. Each line waits for :meth:`Limiter.admit` (rate token, then slot).
3. The launcher starts the task on its own thread.
4. The calling thread blocks in :meth:`CompletionTracker.wait`.

The first failure closes the limiter exactly once and is re-raised in
the calling thread.  Tasks that are already running are not cancelled.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable

from throttle_run.core.launcher import TaskLauncher
from throttle_run.core.models import CommandTemplate, RunSummary, Task
from throttle_run.core.protocols import CommandRunner, Limiter
from throttle_run.core.tracker import CompletionTracker
from throttle_run.exceptions import CommandFailedError, ThrottleRunError

logger = logging.getLogger(__name__)


class Scheduler:
    """Run one command per input line under the limiter's control.

    Parameters
    ----------
    template:
        Command template applied to every line.
    limiter:
        Admission gate; its ticker must already be running.
    runner:
        Any object satisfying the :class:`CommandRunner` protocol.
    """

    def __init__(
        self,
        template: CommandTemplate,
        limiter: Limiter,
        runner: CommandRunner,
    ) -> None:
        self._limiter = limiter
        self._tracker = CompletionTracker()
        self._launcher = TaskLauncher(template, runner, limiter, self._tracker)
        self._dispatch_error: BaseException | None = None

    @property
    def tracker(self) -> CompletionTracker:
        return self._tracker

    def run(self, lines: Iterable[str]) -> RunSummary:
        """Launch a task per line and wait for all of them.

        Raises
        ------
        CommandFailedError
            For the first task that failed.
        """
        dispatcher = threading.Thread(
            target=self._dispatch,
            args=(lines,),
            name="throttle-run-dispatcher",
            daemon=True,
        )
        dispatcher.start()

        failure = self._tracker.wait()
        if failure is not None:
            self._limiter.close()
            error = failure.error
            if isinstance(error, ThrottleRunError):
                raise error
            raise CommandFailedError(f"Task {failure.index} failed.")

        if self._dispatch_error is not None:
            raise self._dispatch_error

        summary = RunSummary(
            launched=self._tracker.launched,
            succeeded=self._tracker.succeeded,
        )
        logger.info("completed %d command(s)", summary.succeeded)
        return summary

    def _dispatch(self, lines: Iterable[str]) -> None:
        try:
            for index, line in enumerate(lines):
                if self._tracker.failed:
                    break
                if not self._limiter.admit():
                    break
                if self._tracker.failed:
                    self._limiter.release()
                    break
                self._launcher.launch(Task(index=index, line=line))
        except BaseException as exc:  # noqa: BLE001
            self._dispatch_error = exc
        finally:
            self._tracker.close_input()
