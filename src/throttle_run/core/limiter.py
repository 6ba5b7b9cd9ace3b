"""Dual admission limiter — a rate gate and a concurrency gate.

A task may start only after it holds BOTH a rate token and a
concurrency slot.  Tokens are always taken first, then the slot; the
order is fixed.

Rate semantics
--------------
The rate gate is a bucket of ``capacity`` tokens that starts full and is
topped up by ``refill`` tokens every ``interval`` seconds, never beyond
``capacity``.  :meth:`DualLimiter.from_config` uses
``capacity = refill = inflight`` and ``interval = 1 / rate``, so the
first ``inflight`` tasks start immediately and steady-state throughput is
up to ``rate × inflight`` admissions per second, granted in batches of at
most ``inflight``.

Guarantees
----------
* No module-level state: every limiter is explicitly constructed and
  owned by its caller.
* The ticker is optional: tests call :meth:`RateGate.refill` directly.
"""

from __future__ import annotations

import logging
import threading

from throttle_run.core.models import LimiterConfig
from throttle_run.exceptions import LimiterError

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Rate gate
# ---------------------------------------------------------------------------

class RateGate:
    """Bounded token bucket refilled in batches on a fixed cadence.

    Parameters
    ----------
    capacity:
        Maximum number of stored tokens; also the initial fill.
    refill:
        Tokens added per tick (capped at *capacity*).
    interval:
        Seconds between ticks once :meth:`start` is called.
    """

    def __init__(self, capacity: int, refill: int, interval: float) -> None:
        if capacity <= 0 or refill <= 0:
            raise LimiterError("rate gate capacity and refill must be > 0")
        if interval <= 0:
            raise LimiterError("rate gate interval must be > 0")
        self._capacity = capacity
        self._refill = refill
        self._interval = interval
        self._tokens = capacity
        self._closed = False
        self._cond = threading.Condition()
        self._stop = threading.Event()
        self._ticker: threading.Thread | None = None

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def tokens(self) -> int:
        with self._cond:
            return self._tokens

    # ------------------------------------------------------------------
    # Token operations
    # ------------------------------------------------------------------

    def acquire(self) -> bool:
        """Take one token, blocking until one is available.

        Returns ``False`` without taking a token if the gate is closed.
        """
        with self._cond:
            while self._tokens == 0 and not self._closed:
                self._cond.wait()
            if self._closed:
                return False
            self._tokens -= 1
            return True

    def refill(self) -> int:
        """Top the bucket up by one batch; return the tokens added."""
        with self._cond:
            added = min(self._refill, self._capacity - self._tokens)
            if added:
                self._tokens += added
                self._cond.notify(added)
        if added:
            logger.debug("rate gate refilled %d token(s)", added)
        return added

    def close(self) -> None:
        """Reject further acquisitions and wake every waiter."""
        with self._cond:
            self._closed = True
            self._cond.notify_all()

    # ------------------------------------------------------------------
    # Ticker lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Start the background ticker (idempotent)."""
        if self._ticker is not None:
            return
        self._ticker = threading.Thread(
            target=self._tick_loop,
            name="throttle-run-ticker",
            daemon=True,
        )
        self._ticker.start()

    def stop(self) -> None:
        """Stop the background ticker (idempotent)."""
        self._stop.set()
        if self._ticker is not None and self._ticker is not threading.current_thread():
            self._ticker.join()
        self._ticker = None

    def _tick_loop(self) -> None:
        while not self._stop.wait(self._interval):
            self.refill()


# ---------------------------------------------------------------------------
# Concurrency gate
# ---------------------------------------------------------------------------

class ConcurrencyGate:
    """Counting semaphore bounding the number of running tasks."""

    def __init__(self, slots: int) -> None:
        if slots <= 0:
            raise LimiterError("concurrency gate needs at least one slot")
        self._slots = slots
        self._sem = threading.BoundedSemaphore(slots)
        self._lock = threading.Lock()
        self._in_use = 0

    @property
    def slots(self) -> int:
        return self._slots

    @property
    def in_use(self) -> int:
        with self._lock:
            return self._in_use

    def acquire(self) -> None:
        """Block until a slot is free, then take it."""
        self._sem.acquire()
        with self._lock:
            self._in_use += 1

    def release(self) -> None:
        """Return a slot to the pool."""
        with self._lock:
            if self._in_use == 0:
                raise LimiterError("concurrency slot released more times than acquired")
            self._in_use -= 1
        self._sem.release()


# ---------------------------------------------------------------------------
# Combined limiter
# ---------------------------------------------------------------------------

class DualLimiter:
    """Both gates behind a single ``admit`` / ``release`` interface.

    Usable as a context manager that runs the rate-gate ticker::

        with DualLimiter.from_config(LimiterConfig(rate=5, inflight=2)) as limiter:
            if limiter.admit():
                ...
                limiter.release()
    """

    def __init__(self, rate_gate: RateGate, concurrency_gate: ConcurrencyGate) -> None:
        self._rate_gate = rate_gate
        self._concurrency_gate = concurrency_gate
        self._closed = threading.Event()

    @classmethod
    def from_config(cls, config: LimiterConfig) -> DualLimiter:
        rate_gate = RateGate(
            capacity=config.inflight,
            refill=config.inflight,
            interval=config.interval,
        )
        return cls(rate_gate, ConcurrencyGate(config.inflight))

    @property
    def rate_gate(self) -> RateGate:
        return self._rate_gate

    @property
    def concurrency_gate(self) -> ConcurrencyGate:
        return self._concurrency_gate

    def __enter__(self) -> DualLimiter:
        self.start()
        return self

    def __exit__(self, *_args: object) -> None:
        self.stop()

    def start(self) -> None:
        self._rate_gate.start()

    def stop(self) -> None:
        self.close()
        self._rate_gate.stop()

    def admit(self) -> bool:
        """Take a rate token, then a concurrency slot.

        Returns ``False`` if the limiter was closed before both were
        held; no slot is kept in that case.
        """
        if not self._rate_gate.acquire():
            return False
        self._concurrency_gate.acquire()
        if self._closed.is_set():
            self._concurrency_gate.release()
            return False
        return True

    def release(self) -> None:
        self._concurrency_gate.release()

    def close(self) -> None:
        self._closed.set()
        self._rate_gate.close()
