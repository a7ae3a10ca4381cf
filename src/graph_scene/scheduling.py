"""
Owner-thread executors and tick schedulers.

All scene mutations run on one owner thread, represented by a SceneExecutor:

- InlineExecutor: runs work immediately on the thread that created it
- ThreadedExecutor: runs work on a single dedicated worker thread

A Scheduler decides when the layout engine ticks:

- ManualScheduler: ticks only when ``fire()`` is called (tests, headless use)
- ThreadedScheduler: a daemon timer thread posting ticks onto an executor
"""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable, Optional, TypeVar

from .errors import InvalidStateError
from .validation import InvalidParameterError, validate_positive

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


# -----------------------------------------------------------------------------
# Executors
# -----------------------------------------------------------------------------


class SceneExecutor(ABC):
    """Runs callables on the scene's owner thread."""

    @abstractmethod
    def submit(self, fn: Callable[..., T], *args: Any) -> Future[T]:
        """Schedule ``fn(*args)`` and return a future for its result."""
        pass

    @abstractmethod
    def is_owner_thread(self) -> bool:
        """True when called from the thread that owns the scene."""
        pass

    def shutdown(self, wait: bool = True) -> None:
        """Release the executor's resources."""
        pass


class InlineExecutor(SceneExecutor):
    """
    Runs every submission synchronously on the thread that created it.

    Work submitted from any other thread is not run; its future fails with
    InvalidStateError.
    """

    def __init__(self) -> None:
        self._owner_ident = threading.get_ident()

    def submit(self, fn: Callable[..., T], *args: Any) -> Future[T]:
        future: Future[T] = Future()
        if not self.is_owner_thread():
            future.set_exception(
                InvalidStateError("InlineExecutor only runs work submitted from its owner thread.")
            )
            return future
        try:
            future.set_result(fn(*args))
        except Exception as exc:
            future.set_exception(exc)
        return future

    def is_owner_thread(self) -> bool:
        return threading.get_ident() == self._owner_ident


class ThreadedExecutor(SceneExecutor):
    """
    Single worker thread that owns the scene.

    Submissions run one at a time, in submission order.
    """

    def __init__(self, *, thread_name_prefix: str = "graph-scene") -> None:
        self._owner_ident: Optional[int] = None
        self._executor = ThreadPoolExecutor(
            max_workers=1,
            thread_name_prefix=thread_name_prefix,
            initializer=self._mark_owner,
        )

    def _mark_owner(self) -> None:
        self._owner_ident = threading.get_ident()

    def submit(self, fn: Callable[..., T], *args: Any) -> Future[T]:
        return self._executor.submit(fn, *args)

    def is_owner_thread(self) -> bool:
        return self._owner_ident is not None and threading.get_ident() == self._owner_ident

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)


# -----------------------------------------------------------------------------
# Schedulers
# -----------------------------------------------------------------------------


class Scheduler(ABC):
    """Invokes a bound callback periodically while active."""

    def __init__(self) -> None:
        self._callback: Optional[Callable[[], Any]] = None
        self._active = False

    @property
    def active(self) -> bool:
        return self._active

    def bind(self, callback: Callable[[], Any]) -> None:
        """Set the callback invoked on every firing."""
        self._callback = callback

    @abstractmethod
    def start(self) -> None:
        pass

    @abstractmethod
    def stop(self) -> None:
        pass


class ManualScheduler(Scheduler):
    """
    Scheduler that fires only on request.

    Example:
        scheduler = ManualScheduler()
        panel = GraphPanel(graph, scheduler=scheduler)
        panel.initialize(800, 600)
        panel.set_automatic_layout_enabled(True)
        scheduler.fire(10)  # ten engine ticks
    """

    def start(self) -> None:
        self._active = True

    def stop(self) -> None:
        self._active = False

    def fire(self, times: int = 1) -> int:
        """
        Invoke the callback ``times`` times if active.

        Returns:
            Number of callbacks actually invoked
        """
        if not self._active or self._callback is None:
            return 0
        for _ in range(times):
            self._callback()
        return times


class ThreadedScheduler(Scheduler):
    """
    Daemon timer that posts the callback onto an executor at a fixed interval.

    An InlineExecutor is refused: it would run every firing on the timer
    thread instead of the owner thread.

    Args:
        interval: Seconds between firings
        executor: Where each firing runs; defaults to the timer thread itself
    """

    def __init__(self, *, interval: float = 1.0 / 60.0, executor: Optional[SceneExecutor] = None) -> None:
        super().__init__()
        self._interval = validate_positive(interval, "interval")
        self._executor = _check_executor(executor)
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._pending: Optional[Future[Any]] = None

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def executor(self) -> Optional[SceneExecutor]:
        return self._executor

    @executor.setter
    def executor(self, value: Optional[SceneExecutor]) -> None:
        self._executor = _check_executor(value)

    def start(self) -> None:
        if self._active:
            return
        self._active = True
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, name="graph-scene-timer", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        if not self._active:
            return
        self._active = False
        self._stop_event.set()
        thread = self._thread
        self._thread = None
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=max(1.0, 4 * self._interval))

    def _run(self) -> None:
        while not self._stop_event.wait(self._interval):
            callback = self._callback
            if callback is None:
                continue
            if self._executor is None:
                self._fire(callback)
            elif self._pending is None or self._pending.done():
                # skip this firing while the previous one is still queued
                self._pending = self._executor.submit(self._fire, callback)

    def _fire(self, callback: Callable[[], Any]) -> None:
        try:
            callback()
        except Exception:
            LOGGER.exception("Scheduled tick failed")


def _check_executor(executor: Optional[SceneExecutor]) -> Optional[SceneExecutor]:
    if isinstance(executor, InlineExecutor):
        raise InvalidParameterError(
            "ThreadedScheduler cannot post onto an InlineExecutor; use ThreadedExecutor "
            "or drive an inline panel with ManualScheduler."
        )
    return executor


__all__ = [
    "SceneExecutor",
    "InlineExecutor",
    "ThreadedExecutor",
    "Scheduler",
    "ManualScheduler",
    "ThreadedScheduler",
]
