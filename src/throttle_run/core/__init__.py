"""Core / service layer — admission control and task orchestration.

Rules
-----
* No ``print()`` calls.
* No filesystem or subprocess I/O.
* No imports from ``cli`` or ``infra``.
* Threads and locks are allowed; module-level mutable state is not.
"""

from throttle_run.core.launcher import TaskLauncher
from throttle_run.core.limiter import ConcurrencyGate, DualLimiter, RateGate
from throttle_run.core.models import (
    PLACEHOLDER,
    CommandTemplate,
    LimiterConfig,
    RunSettings,
    RunSummary,
    Task,
    TaskResult,
    TaskState,
)
from throttle_run.core.protocols import CommandRunner, Limiter
from throttle_run.core.scheduler import Scheduler
from throttle_run.core.tracker import CompletionTracker

__all__: list[str] = [
    "PLACEHOLDER",
    "CommandRunner",
    "CommandTemplate",
    "CompletionTracker",
    "ConcurrencyGate",
    "DualLimiter",
    "Limiter",
    "LimiterConfig",
    "RateGate",
    "RunSettings",
    "RunSummary",
    "Scheduler",
    "Task",
    "TaskLauncher",
    "TaskResult",
    "TaskState",
]
