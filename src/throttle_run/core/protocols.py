"""Protocols (interfaces) consumed by the core layer.

These define the contracts that infrastructure adapters must satisfy.
Core code depends ONLY on these protocols, never on concrete
implementations, preserving the dependency inversion principle.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol


class CommandRunner(Protocol):
    """Contract for command execution backends.

    Any object that implements :meth:`run` with the correct signature
    satisfies this protocol structurally (no explicit inheritance
    required).
    """

    def run(self, argv: Sequence[str]) -> None:
        """Run *argv* to completion, blocking the calling thread.

        ``argv[0]`` is the program name.  The child inherits the
        parent's standard streams.

        Raises
        ------
        CommandFailedError
            When the child exits nonzero or cannot be started.
        """
        ...  # pragma: no cover


class Limiter(Protocol):
    """Contract for the admission gate used by the scheduler."""

    def admit(self) -> bool:
        """Block until a task may start; ``False`` once shut down."""
        ...  # pragma: no cover

    def release(self) -> None:
        """Return the concurrency slot held by a finished task."""
        ...  # pragma: no cover

    def close(self) -> None:
        """Stop admitting and wake any blocked :meth:`admit` call."""
        ...  # pragma: no cover
