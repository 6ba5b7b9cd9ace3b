"""CLI application entry point for throttle-run.

This module is the **sole error boundary** for the entire application.
It catches :class:`~throttle_run.exceptions.ThrottleRunError`,
``KeyboardInterrupt``, and any unexpected ``Exception``, rendering
user-friendly messages via Rich and returning well-defined exit codes.

Architecture notes
------------------
* No business logic lives here; all work is delegated to the core and
  infrastructure layers.
* ``print()`` is forbidden; the Rich stderr console is used exclusively.
* This module is the only place that translates between the domain world
  and the OS process exit code.
"""

from __future__ import annotations

import argparse
import io
import logging
import sys
from typing import NoReturn, TextIO

from throttle_run.cli import exit_codes
from throttle_run.cli.console import configure_logging, print_error
from throttle_run.exceptions import ConfigurationError, ThrottleRunError
from throttle_run.version import __version__

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

class _ArgumentParser(argparse.ArgumentParser):
    """Parser whose usage errors surface as :class:`ConfigurationError`."""

    def error(self, message: str) -> NoReturn:
        raise ConfigurationError(message, hint=f"Run '{self.prog} --help' for usage.")


def _build_parser() -> argparse.ArgumentParser:
    """Construct the argument parser.

    Flags must come before the command; every word from the command
    name onwards is passed through untouched::

        throttle-run --rate 5 --inflight 2 curl -s {}
    """
    parser = _ArgumentParser(
        prog="throttle-run",
        description=(
            "Run a command once per line of standard input, limited by "
            "start rate and by the number of commands in flight."
        ),
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--rate",
        type=int,
        default=1,
        help="Maximum number of command starts per second (default: 1).",
    )
    parser.add_argument(
        "--inflight",
        type=int,
        default=1,
        help="Maximum number of commands running in parallel (default: 1).",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Kill and fail a command that runs longer than this many seconds.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase log verbosity (-v info, -vv debug).",
    )
    parser.add_argument(
        "command",
        nargs=argparse.REMAINDER,
        help="Command and arguments; '{}' is replaced by each input line.",
    )
    return parser


# ---------------------------------------------------------------------------
# Command dispatch
# ---------------------------------------------------------------------------

def _handle_run(args: argparse.Namespace, stdin: TextIO) -> int:
    """Validate configuration, then process every input line.

    Flow:
    1. Refuse an interactive terminal on stdin.
    2. Build the command template and run settings.
    3. Start the input feeder and the limiter ticker.
    4. Hand the lines to the scheduler and wait for completion.
    """
    from throttle_run.core.limiter import DualLimiter
    from throttle_run.core.models import CommandTemplate, LimiterConfig, RunSettings
    from throttle_run.core.scheduler import Scheduler
    from throttle_run.infra.input_feeder import InputFeeder
    from throttle_run.infra.stdin_probe import require_redirected
    from throttle_run.infra.subprocess_runner import SubprocessCommandRunner

    require_redirected(stdin)

    words = args.command
    if words[:1] == ["--"]:
        words = words[1:]
    template = CommandTemplate.from_words(words)
    settings = RunSettings(
        limits=LimiterConfig(rate=args.rate, inflight=args.inflight),
        timeout=args.timeout,
    )
    logger.info(
        "running %r with rate=%d inflight=%d",
        template.name,
        settings.limits.rate,
        settings.limits.inflight,
    )

    feeder = InputFeeder(stdin)
    feeder.start()
    runner = SubprocessCommandRunner(timeout=settings.timeout)

    with DualLimiter.from_config(settings.limits) as limiter:
        Scheduler(template, limiter, runner).run(feeder)

    return exit_codes.SUCCESS


def _open_stdin() -> TextIO:
    """Return ``sys.stdin`` decoded so that any byte sequence survives.

    Undecodable bytes become lone surrogates; ``subprocess`` encodes
    them back with ``os.fsencode``, so each line reaches the child
    byte for byte.
    """
    buffer = getattr(sys.stdin, "buffer", None)
    if buffer is None:
        return sys.stdin
    return io.TextIOWrapper(
        buffer,
        encoding=sys.getfilesystemencoding(),
        errors="surrogateescape",
    )


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None, stdin: TextIO | None = None) -> int:
    """Run the throttle-run CLI.

    Parameters
    ----------
    argv:
        Explicit argument list.  When ``None`` (default), ``sys.argv[1:]``
        is used.
    stdin:
        Stream of argument lines.  When ``None`` (default),
        ``sys.stdin`` is used.  Accepting both enables deterministic
        testing without monkeypatching.

    Returns
    -------
    int
        OS process exit code.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    return _handle_run(args, _open_stdin() if stdin is None else stdin)


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

def cli() -> None:
    """Top-level error boundary invoked by the console-script entry point.

    This function wraps :func:`main` and guarantees the process never
    exits with a raw stack trace during normal usage.
    """
    try:
        code = main()
        sys.exit(code)
    except ThrottleRunError as exc:
        print_error(str(exc), exc.hint)
        sys.exit(exit_codes.GENERAL_ERROR)
    except KeyboardInterrupt:
        print_error("Aborted by user.")
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
    except Exception as exc:  # noqa: BLE001
        print_error(
            "Unexpected error. Please report this issue. "
            f"{type(exc).__name__}: {exc}"
        )
        sys.exit(exit_codes.UNEXPECTED_ERROR)
