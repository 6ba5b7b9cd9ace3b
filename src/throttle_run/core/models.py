"""Domain models for throttle-run.

Value objects are **frozen** dataclasses.  Validation happens once, at
construction, so every instance that exists is known to be usable.
:class:`Task` is the single mutable record: it carries one input line
through its lifecycle.
"""

from __future__ import annotations

import enum
from collections.abc import Sequence
from dataclasses import dataclass, field

from throttle_run.exceptions import CommandTemplateError, ConfigurationError, ThrottleRunError

PLACEHOLDER: str = "{}"
"""Token in the argument pattern replaced by each input line."""


# ---------------------------------------------------------------------------
# Command template
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class CommandTemplate:
    """Program name plus the argument pattern run for every input line."""

    name: str
    """Executable to run (looked up on ``PATH`` by the runner)."""

    args_pattern: str
    """Space-joined arguments containing :data:`PLACEHOLDER` at least once."""

    def __post_init__(self) -> None:
        if not self.name:
            raise CommandTemplateError("You must specify the command to run.")
        if PLACEHOLDER not in self.args_pattern:
            raise CommandTemplateError(
                f"You must specify the argument placeholder '{PLACEHOLDER}'.",
                hint=f"Example: throttle-run echo {PLACEHOLDER}",
            )

    @classmethod
    def from_words(cls, words: Sequence[str]) -> CommandTemplate:
        """Build a template from positional command-line words.

        The first word is the program name; the rest are joined with
        single spaces to form the argument pattern.
        """
        if not words:
            raise CommandTemplateError("You must specify the command to run.")
        return cls(name=words[0], args_pattern=" ".join(words[1:]))

    def build_argv(self, line: str) -> list[str]:
        """Return the full argument vector for one input *line*.

        Substitution happens on the whole pattern before splitting on
        whitespace, so a line containing spaces yields several tokens.
        """
        expanded = self.args_pattern.replace(PLACEHOLDER, line)
        return [self.name, *expanded.split()]


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class LimiterConfig:
    """Admission limits shared by the rate and concurrency gates."""

    rate: int = 1
    """Refill ticks per second of the rate gate."""

    inflight: int = 1
    """Maximum simultaneously running commands (and rate bucket capacity)."""

    def __post_init__(self) -> None:
        if self.rate <= 0:
            raise ConfigurationError("rate must be > 0")
        if self.inflight <= 0:
            raise ConfigurationError("inflight must be > 0")

    @property
    def interval(self) -> float:
        """Seconds between two rate-gate refills."""
        return 1.0 / self.rate


@dataclass(frozen=True, slots=True)
class RunSettings:
    """Validated runtime configuration assembled by the CLI."""

    limits: LimiterConfig
    timeout: float | None = None
    """Per-command timeout in seconds; ``None`` waits forever."""

    def __post_init__(self) -> None:
        if self.timeout is not None and self.timeout <= 0:
            raise ConfigurationError("timeout must be > 0")


# ---------------------------------------------------------------------------
# Task lifecycle
# ---------------------------------------------------------------------------

class TaskState(enum.Enum):
    """Lifecycle of a single input line."""

    PENDING = "pending"
    ADMITTED = "admitted"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"

    @property
    def terminal(self) -> bool:
        return self in (TaskState.SUCCEEDED, TaskState.FAILED)


@dataclass(slots=True)
class Task:
    """One input line on its way through admission and execution."""

    index: int
    line: str
    argv: list[str] = field(default_factory=list)
    state: TaskState = TaskState.PENDING


@dataclass(frozen=True, slots=True)
class TaskResult:
    """Outcome reported by a finished task to the completion tracker."""

    index: int
    argv: tuple[str, ...]
    error: ThrottleRunError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True, slots=True)
class RunSummary:
    """Counters for a run that finished without failures."""

    launched: int
    succeeded: int
