"""Infrastructure: check that input is piped or redirected.

The tool reads its argument lines from standard input and must never
sit waiting on an interactive terminal.

Rules
-----
* Detection via ``isatty`` only, never a read from the stream.
* No ``print()``; callers handle user-facing output.
"""

from __future__ import annotations

from typing import TextIO

from throttle_run.exceptions import InputNotRedirectedError


def is_redirected(stream: TextIO) -> bool:
    """Return ``True`` when *stream* is a pipe or file, not a terminal.

    A stream that cannot be probed (closed, detached) counts as not
    redirected.
    """
    try:
        return not stream.isatty()
    except (OSError, ValueError):
        return False


def require_redirected(stream: TextIO) -> None:
    """Raise :class:`InputNotRedirectedError` unless *stream* is redirected."""
    if not is_redirected(stream):
        raise InputNotRedirectedError(
            "input must be from stdin",
            hint="Pipe or redirect the argument lines, e.g. "
            "cat args.txt | throttle-run echo {}",
        )
