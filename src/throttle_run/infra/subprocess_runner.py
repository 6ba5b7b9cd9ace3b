"""``subprocess`` backed implementation of :class:`~throttle_run.core.protocols.CommandRunner`.

This module is the **only** place in the codebase that spawns child
processes.  All ``subprocess`` and OS exceptions are caught here and
re-raised as :class:`~throttle_run.exceptions.CommandFailedError`.
"""

from __future__ import annotations

import shlex
import subprocess
from collections.abc import Sequence

from throttle_run.exceptions import CommandFailedError, CommandTimeoutError


class SubprocessCommandRunner:
    """Concrete :class:`CommandRunner` that waits for each child to exit.

    The child inherits the parent's stdout and stderr, so output of
    concurrent children interleaves freely on the shared stdout.  Its
    stdin is the null device: the parent's stdin belongs to the feeder.

    Parameters
    ----------
    timeout:
        Optional limit in seconds.  An overrunning child is killed and
        reported as :class:`CommandTimeoutError`.
    """

    def __init__(self, timeout: float | None = None) -> None:
        self._timeout = timeout

    def run(self, argv: Sequence[str]) -> None:
        """Run *argv* and block until it exits.

        Raises
        ------
        CommandFailedError
            When the child exits nonzero or cannot be started.
        CommandTimeoutError
            When the child outlives the configured timeout.
        """
        command = shlex.join(argv)
        try:
            completed = subprocess.run(
                list(argv),
                stdin=subprocess.DEVNULL,
                check=False,
                timeout=self._timeout,
            )
        except subprocess.TimeoutExpired as exc:
            raise CommandTimeoutError(
                f"{command}: timed out after {self._timeout:g}s",
            ) from exc
        except OSError as exc:
            raise CommandFailedError(f"{command}: {exc.strerror or exc}") from exc

        if completed.returncode != 0:
            raise CommandFailedError(
                f"{command}: exit status {completed.returncode}",
                returncode=completed.returncode,
            )
