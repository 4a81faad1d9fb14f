"""Single-slot gate for synchronous calculation runs.

Only one synchronous run may be in flight at a time.  A second request
while busy is rejected rather than queued.  The most recent successful
result is kept; a failed run leaves it untouched.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator

from hybrid_engine.simulation.runner import CalculationResults


class RunInProgressError(RuntimeError):
    """Raised when a run is requested while another is executing."""


class RunGate:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._busy = False
        self._latest: CalculationResults | None = None

    @property
    def busy(self) -> bool:
        return self._busy

    @property
    def latest(self) -> CalculationResults | None:
        return self._latest

    @contextmanager
    def acquire(self) -> Iterator[None]:
        """Hold the slot for the duration of the block.

        Raises ``RunInProgressError`` immediately if the slot is taken.
        """
        with self._lock:
            if self._busy:
                raise RunInProgressError("A calculation is already running")
            self._busy = True
        try:
            yield
        finally:
            with self._lock:
                self._busy = False

    def store(self, results: CalculationResults) -> None:
        with self._lock:
            self._latest = results

    def clear(self) -> None:
        with self._lock:
            self._latest = None
            self._busy = False


run_gate = RunGate()
