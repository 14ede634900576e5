from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any, Callable, Optional

from .utils import utc_now_iso


@dataclass(frozen=True)
class SchedulerStatus:
    running: bool
    busy: bool
    runs: int
    skipped: int
    failures: int
    last_success_utc: Optional[str]
    last_error: Optional[str]


class PollingScheduler:
    """Runs ``job`` every ``interval`` seconds on a background thread, never two at once."""

    def __init__(self, job: Callable[[], Any], interval: float, name: str = "scheduler") -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.job = job
        self.interval = float(interval)
        self.name = name
        self._in_flight = threading.Lock()
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self.runs = 0
        self.skipped = 0
        self.failures = 0
        self.last_success_utc: Optional[str] = None
        self.last_error: Optional[str] = None

    @property
    def busy(self) -> bool:
        return self._in_flight.locked()

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def trigger(self) -> bool:
        """Run one cycle now. Returns False when a cycle is already in flight."""
        if not self._in_flight.acquire(blocking=False):
            self.skipped += 1
            print(f"[{self.name}] cycle already running, skipped")
            return False
        try:
            self.runs += 1
            self.job()
        except Exception as exc:
            self.failures += 1
            self.last_error = f"{type(exc).__name__}: {exc}"
            print(f"[{self.name}] ERROR: {self.last_error}")
        else:
            self.last_success_utc = utc_now_iso()
            self.last_error = None
        finally:
            self._in_flight.release()
        return True

    def start(self, run_immediately: bool = True) -> None:
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(
            target=self._loop, args=(run_immediately,), name=f"gcpv-{self.name}", daemon=True
        )
        self._thread.start()

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            if not self._thread.is_alive():
                self._thread = None

    def status(self) -> SchedulerStatus:
        return SchedulerStatus(
            running=self.running,
            busy=self.busy,
            runs=self.runs,
            skipped=self.skipped,
            failures=self.failures,
            last_success_utc=self.last_success_utc,
            last_error=self.last_error,
        )

    def _loop(self, run_immediately: bool) -> None:
        if run_immediately:
            self.trigger()
        while not self._stop.wait(self.interval):
            self.trigger()
