"""Progress reporting for the copy phase.

The engine only needs a callable of shape ``(label, completed, total)``;
rendering is left to the caller (the CLI uses a click progress bar).
"""

from __future__ import annotations

import time
from typing import Callable, Protocol


class ProgressReporter(Protocol):
    """Called once per finished item, with ``completed`` increasing by one."""

    def __call__(self, label: str, completed: int, total: int) -> None: ...


class ThrottledReporter:
    """Forward at most one update every *interval* seconds.

    The final update (``completed == total``) is always forwarded so the
    receiver ends in a consistent state.
    """

    def __init__(self, callback: ProgressReporter, interval: float = 0.03,
                 *, clock: Callable[[], float] = time.monotonic) -> None:
        self._callback = callback
        self._interval = interval
        self._clock = clock
        self._last: float | None = None

    def __call__(self, label: str, completed: int, total: int) -> None:
        now = self._clock()
        final = completed >= total
        if final or self._last is None or now - self._last >= self._interval:
            self._last = now
            self._callback(label, completed, total)
