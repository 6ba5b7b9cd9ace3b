"""Shared pytest fixtures and configuration for the throttle-run test suite.

Guidelines
----------
* No network access in any test.
* Core tests use fake runners, never child processes.
* Rate-gate timing is driven by explicit ``refill()`` calls, not sleeps.
* Only subprocess-runner and end-to-end tests spawn ``sys.executable``.
"""

from __future__ import annotations

import sys
import threading
from collections.abc import Sequence

import pytest

from throttle_run.exceptions import CommandFailedError


class RecordingRunner:
    """Fake :class:`CommandRunner` that records argv and peak concurrency."""

    def __init__(
        self,
        *,
        fail_on: str | None = None,
        gate: threading.Event | None = None,
    ) -> None:
        self.calls: list[list[str]] = []
        self.running = 0
        self.peak = 0
        self._fail_on = fail_on
        self._gate = gate
        self._lock = threading.Lock()

    def run(self, argv: Sequence[str]) -> None:
        with self._lock:
            self.calls.append(list(argv))
            self.running += 1
            self.peak = max(self.peak, self.running)
        try:
            if self._gate is not None:
                self._gate.wait(timeout=5)
            if self._fail_on is not None and self._fail_on in argv:
                raise CommandFailedError(f"{argv[0]}: exit status 3", returncode=3)
        finally:
            with self._lock:
                self.running -= 1


@pytest.fixture()
def make_runner() -> type[RecordingRunner]:
    """Factory for fake runners; call with ``fail_on=`` or ``gate=``."""
    return RecordingRunner


@pytest.fixture()
def python_exe() -> str:
    return sys.executable
