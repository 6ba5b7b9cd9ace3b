"""Custom exception hierarchy for throttle-run.

All exceptions that cross layer boundaries must inherit from
:class:`ThrottleRunError`.  Raw OS and ``subprocess`` exceptions must
NEVER propagate beyond the infrastructure layer. They must be caught
and re-raised as a typed subclass defined here.

Hierarchy
---------
ThrottleRunError
├── ConfigurationError
│   ├── CommandTemplateError
│   └── InputNotRedirectedError
├── LimiterError
└── CommandFailedError
    └── CommandTimeoutError
"""

from __future__ import annotations


class ThrottleRunError(Exception):
    """Base exception for all throttle-run errors.

    Every user-visible error condition must map to a subclass of this
    exception so that the CLI error boundary can render a clean message
    without leaking internal stack traces.
    """

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""


# --- Configuration ---------------------------------------------------------

class ConfigurationError(ThrottleRunError):
    """Raised when flags or positional arguments are invalid.

    Always raised before any input is read or any command is started.
    """


class CommandTemplateError(ConfigurationError):
    """Raised when the command is missing or lacks the placeholder."""


class InputNotRedirectedError(ConfigurationError):
    """Raised when standard input is an interactive terminal."""


# --- Limiter ---------------------------------------------------------------

class LimiterError(ThrottleRunError):
    """Raised when a limiter gate is misused (e.g. released too often)."""


# --- Command execution -----------------------------------------------------

class CommandFailedError(ThrottleRunError):
    """Raised when a command exits nonzero or cannot be started."""

    def __init__(
        self,
        message: str,
        *,
        returncode: int | None = None,
        hint: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.returncode: int | None = returncode
        """Child exit status, or ``None`` when the child never ran."""


class CommandTimeoutError(CommandFailedError):
    """Raised when a command runs longer than the configured timeout."""
