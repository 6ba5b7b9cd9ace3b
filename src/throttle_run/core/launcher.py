"""Task launcher — turns an admitted input line into a running command.

Each admitted task runs on its own daemon thread and blocks that thread
for the full lifetime of the child.  The concurrency slot is released in
``finally`` whatever the outcome, and the outcome is reported to the
:class:`~throttle_run.core.tracker.CompletionTracker` as a typed result.
"""

from __future__ import annotations

import logging
import threading

from throttle_run.core.models import CommandTemplate, Task, TaskResult, TaskState
from throttle_run.core.protocols import CommandRunner, Limiter
from throttle_run.core.tracker import CompletionTracker
from throttle_run.exceptions import CommandFailedError, ThrottleRunError

logger = logging.getLogger(__name__)


class TaskLauncher:
    """Build and start one task per admitted input line.

    Parameters
    ----------
    template:
        Command template shared by all tasks.
    runner:
        Any object satisfying the :class:`CommandRunner` protocol.
    limiter:
        Gate whose concurrency slot the caller already holds.
    tracker:
        Receives start/finish notifications.
    """

    def __init__(
        self,
        template: CommandTemplate,
        runner: CommandRunner,
        limiter: Limiter,
        tracker: CompletionTracker,
    ) -> None:
        self._template = template
        self._runner = runner
        self._limiter = limiter
        self._tracker = tracker

    def launch(self, task: Task) -> threading.Thread:
        """Start *task* on a new thread and return that thread.

        The caller must have been admitted by the limiter; the slot is
        handed over to the task.
        """
        task.argv = self._template.build_argv(task.line)
        task.state = TaskState.ADMITTED
        self._tracker.task_started()

        thread = threading.Thread(
            target=self._execute,
            args=(task,),
            name=f"throttle-run-task-{task.index}",
            daemon=True,
        )
        thread.start()
        return thread

    def _execute(self, task: Task) -> None:
        error: ThrottleRunError | None = None
        task.state = TaskState.RUNNING
        logger.debug("task %d running: %s", task.index, task.argv)
        try:
            self._runner.run(task.argv)
        except ThrottleRunError as exc:
            error = exc
        except Exception as exc:  # noqa: BLE001
            error = CommandFailedError(f"Unexpected error running {task.argv[0]}: {exc}")
        finally:
            self._limiter.release()

        task.state = TaskState.SUCCEEDED if error is None else TaskState.FAILED
        logger.debug("task %d %s", task.index, task.state.value)
        self._tracker.task_finished(
            TaskResult(index=task.index, argv=tuple(task.argv), error=error),
        )
