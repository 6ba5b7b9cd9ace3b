"""throttle-run — run a command per input line under rate and concurrency limits.

Built on threads and a strict layered architecture.
"""

from throttle_run.version import __version__

__all__: list[str] = ["__version__"]
