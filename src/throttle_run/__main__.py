"""Allow ``python -m throttle_run`` invocation.

This module simply delegates to the CLI error-boundary entry point so
that ``python -m throttle_run`` behaves identically to the
``throttle-run`` console script.
"""

from __future__ import annotations

from throttle_run.cli.app import cli

if __name__ == "__main__":
    cli()
