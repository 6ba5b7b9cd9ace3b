"""Tests for the completion tracker (core/tracker.py)."""

from __future__ import annotations

import logging
import threading

import pytest

from throttle_run.core.models import TaskResult
from throttle_run.core.tracker import CompletionTracker
from throttle_run.exceptions import CommandFailedError


def _ok(index: int = 0) -> TaskResult:
    return TaskResult(index=index, argv=("echo", str(index)))


def _failed(index: int = 0) -> TaskResult:
    return TaskResult(
        index=index,
        argv=("false",),
        error=CommandFailedError("false: exit status 1", returncode=1),
    )


class TestCompletionTracker:
    def test_wait_returns_immediately_with_no_tasks(self) -> None:
        tracker = CompletionTracker()
        tracker.close_input()
        assert tracker.wait(timeout=1) is None

    def test_wait_blocks_until_input_closed(self) -> None:
        tracker = CompletionTracker()
        with pytest.raises(TimeoutError):
            tracker.wait(timeout=0.05)

    def test_wait_blocks_until_outstanding_tasks_finish(self) -> None:
        tracker = CompletionTracker()
        tracker.task_started()
        tracker.close_input()
        with pytest.raises(TimeoutError):
            tracker.wait(timeout=0.05)

        tracker.task_finished(_ok())
        assert tracker.wait(timeout=1) is None

    def test_counts(self) -> None:
        tracker = CompletionTracker()
        for _ in range(3):
            tracker.task_started()
        assert tracker.outstanding == 3
        for index in range(3):
            tracker.task_finished(_ok(index))
        assert tracker.launched == 3
        assert tracker.succeeded == 3
        assert tracker.outstanding == 0

    def test_failure_wakes_waiter_before_input_closes(self) -> None:
        tracker = CompletionTracker()
        tracker.task_started()
        tracker.task_started()

        results: list[TaskResult | None] = []
        waiter = threading.Thread(target=lambda: results.append(tracker.wait()), daemon=True)
        waiter.start()

        failure = _failed(1)
        tracker.task_finished(failure)
        waiter.join(timeout=2)

        assert results == [failure]
        assert tracker.failed
        assert tracker.outstanding == 1

    def test_first_failure_is_kept(self) -> None:
        tracker = CompletionTracker()
        tracker.task_started()
        tracker.task_started()
        first, second = _failed(0), _failed(1)
        tracker.task_finished(first)
        tracker.task_finished(second)
        assert tracker.wait(timeout=1) is first

    def test_later_failures_are_not_logged_as_warnings(
        self, caplog: pytest.LogCaptureFixture,
    ) -> None:
        caplog.set_level(logging.DEBUG, logger="throttle_run.core.tracker")
        tracker = CompletionTracker()
        tracker.task_started()
        tracker.task_started()
        tracker.task_finished(_failed(0))
        tracker.task_finished(_failed(1))

        assert [r.levelno for r in caplog.records] == [logging.DEBUG]
        assert "task 1 also failed" in caplog.records[0].getMessage()
