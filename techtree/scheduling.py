"""Debounced and deferred callbacks for recomputation triggers.

Layout and geometry are synchronous; these helpers only decide *when* a caller
re-runs them. Both keep a single slot: a newer request supersedes the pending
one and nothing queues up behind it.
"""

from __future__ import annotations

import threading
from typing import Any, Callable


class Debouncer:
    """Run ``fn`` once ``delay`` seconds after the last ``trigger`` call."""

    def __init__(self, delay: float, fn: Callable[..., Any]):
        self.delay = delay
        self.fn = fn
        self._lock = threading.Lock()
        self._timer: threading.Timer | None = None
        self._args: tuple = ()
        self._kwargs: dict = {}

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._timer is not None

    def trigger(self, *args: Any, **kwargs: Any) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._args, self._kwargs = args, kwargs
            self._timer = threading.Timer(self.delay, self._fire)
            self._timer.daemon = True
            self._timer.start()

    def _take(self) -> tuple[tuple, dict] | None:
        with self._lock:
            if self._timer is None:
                return None
            self._timer.cancel()
            self._timer = None
            return self._args, self._kwargs

    def _fire(self) -> None:
        taken = self._take()
        if taken is not None:
            args, kwargs = taken
            self.fn(*args, **kwargs)

    def flush(self) -> bool:
        """Run the pending call now. Returns False when nothing was pending."""
        taken = self._take()
        if taken is None:
            return False
        args, kwargs = taken
        self.fn(*args, **kwargs)
        return True

    def cancel(self) -> None:
        self._take()


class DeferredTask:
    """Single-slot deferred callback; scheduling again supersedes the old one."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._timer: threading.Timer | None = None
        self._generation = 0

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._timer is not None

    def schedule(self, fn: Callable[[], Any], delay: float) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._generation += 1
            generation = self._generation
            self._timer = threading.Timer(delay, self._run, args=(fn, generation))
            self._timer.daemon = True
            self._timer.start()

    def _run(self, fn: Callable[[], Any], generation: int) -> None:
        with self._lock:
            # A cancelled timer can still fire if it was already running.
            if generation != self._generation or self._timer is None:
                return
            self._timer = None
        fn()

    def cancel(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            self._generation += 1
