"""Infrastructure layer — external system integration.

This layer wraps all interaction with the operating system: reading
standard input, probing the terminal, and spawning child processes.
Every raw OS exception must be caught here and re-raised as a
:class:`~throttle_run.exceptions.ThrottleRunError` subclass.

Rules
-----
* No imports from ``cli``.
* No user-facing output (no ``print()``, no Rich rendering).
* Must expose clean, typed interfaces consumed by the core layer.
"""

from throttle_run.infra.input_feeder import InputFeeder, split_record
from throttle_run.infra.stdin_probe import is_redirected, require_redirected
from throttle_run.infra.subprocess_runner import SubprocessCommandRunner

__all__: list[str] = [
    "InputFeeder",
    "SubprocessCommandRunner",
    "is_redirected",
    "require_redirected",
    "split_record",
]
