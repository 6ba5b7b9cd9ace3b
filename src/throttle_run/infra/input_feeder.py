"""Infrastructure: read argument lines from a stream on a background thread.

Line boundaries
---------------
* One trailing ``\\n`` or ``\\r\\n`` is stripped from every record.
* A final record without a terminator is still emitted.
* No empty record is emitted after the final terminator.
* Blank lines in the middle of the stream are emitted as ``""``.

The handoff queue holds a single line.  The reader can therefore run
at most two lines ahead of the consumer: one waiting in the queue and
one held by its blocked ``put``.  A read error ends the stream just
like EOF; it is logged and kept on :attr:`InputFeeder.error`.  The CLI
decodes stdin with ``surrogateescape``, so undecodable bytes are
ordinary input rather than a read error.
"""

from __future__ import annotations

import logging
import queue
import threading
from collections.abc import Iterable, Iterator
from typing import cast

logger = logging.getLogger(__name__)

_EOF = object()


def split_record(raw: str) -> str:
    """Strip one line terminator from *raw*."""
    if raw.endswith("\r\n"):
        return raw[:-2]
    if raw.endswith("\n"):
        return raw[:-1]
    return raw


class InputFeeder:
    """Producer thread turning a text stream into argument lines.

    Usage::

        feeder = InputFeeder(sys.stdin)
        feeder.start()
        for line in feeder:
            ...
    """

    def __init__(self, stream: Iterable[str]) -> None:
        self._stream = stream
        self._queue: queue.Queue[object] = queue.Queue(maxsize=1)
        self._thread: threading.Thread | None = None
        self.error: Exception | None = None
        """Read error that ended the stream early, if any."""

    def start(self) -> None:
        """Start the reader thread (idempotent)."""
        if self._thread is not None:
            return
        self._thread = threading.Thread(
            target=self._read_loop,
            name="throttle-run-feeder",
            daemon=True,
        )
        self._thread.start()

    def __iter__(self) -> Iterator[str]:
        self.start()
        while True:
            item = self._queue.get()
            if item is _EOF:
                return
            yield cast(str, item)

    def _read_loop(self) -> None:
        try:
            for raw in self._stream:
                self._queue.put(split_record(raw))
        except (OSError, UnicodeDecodeError) as exc:
            self.error = exc
            logger.warning("stopped reading input: %s", exc)
        finally:
            self._queue.put(_EOF)
