"""CLI console and logging helpers.

Everything the tool itself says goes to **stderr** through Rich; stdout
is reserved for the children's output.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

console = Console(stderr=True)


def configure_logging(verbosity: int) -> None:
    """Route ``logging`` through Rich on stderr.

    ``0`` shows warnings, ``1`` (``-v``) info, ``2`` or more (``-vv``)
    debug.
    """
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_time=False, show_path=False)],
        force=True,
    )


def print_error(message: str, hint: str | None = None) -> None:
    """Render a one-line error (plus optional hint) on stderr.

    User-supplied text may contain ``[`` ``]``; it is escaped so Rich
    does not read it as markup.
    """
    console.print(f"[bold red]Error:[/bold red] {escape(message)}")
    if hint:
        console.print(f"[yellow]Hint:[/yellow] {escape(hint)}")
