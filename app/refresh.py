"""Periodic reload scheduling for a long-running display host."""

from __future__ import annotations

import threading
from typing import Any, Callable

from core.config import ConfigError

DEFAULT_REFRESH_INTERVAL = 30 * 60.0  # seconds

Scheduler = Callable[[Callable[[], None], float], Any]


class IntervalHandle:
    """Repeating timer; ``cancel()`` stops future firings."""

    def __init__(self, fn: Callable[[], None], seconds: float) -> None:
        self.fn = fn
        self.seconds = seconds
        self._cancelled = threading.Event()
        self._timer: threading.Timer | None = None
        self._schedule()

    def _schedule(self) -> None:
        if self._cancelled.is_set():
            return
        self._timer = threading.Timer(self.seconds, self._fire)
        self._timer.daemon = True
        self._timer.start()

    def _fire(self) -> None:
        if self._cancelled.is_set():
            return
        self.fn()
        self._schedule()

    def cancel(self) -> None:
        self._cancelled.set()
        if self._timer is not None:
            self._timer.cancel()


def schedule_interval(fn: Callable[[], None], seconds: float) -> IntervalHandle:
    return IntervalHandle(fn, seconds)


def setup_auto_refresh(
    target: Any,
    interval: float = DEFAULT_REFRESH_INTERVAL,
    scheduler: Scheduler = schedule_interval,
) -> Any:
    """Schedule ``target.reload()`` every ``interval`` seconds; returns the scheduler's handle."""
    if target is None or not callable(getattr(target, "reload", None)):
        raise ConfigError("setup_auto_refresh requires a target with a callable reload()")
    if not callable(scheduler):
        raise ConfigError("setup_auto_refresh requires a callable scheduler")

    def _reload() -> None:
        target.reload()

    return scheduler(_reload, interval)


__all__ = ["DEFAULT_REFRESH_INTERVAL", "IntervalHandle", "schedule_interval", "setup_auto_refresh"]
