"""
Data loading bound to a view's lifetime.

A view calls mount(key, fetch, on_done) when it is shown (or when its route
key changes) and unmount() when it goes away. fetch runs on a worker thread;
on_done receives the result, or the exception fetch raised, but only if the
view is still mounted and no newer mount() superseded this one. Late
responses for a view that is gone are dropped.
"""

from __future__ import annotations

import enum
import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable, Optional

from campusportal.errors import NotFoundError


log = logging.getLogger(__name__)


class LoadState(enum.Enum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    NOT_FOUND = "not_found"
    ERROR = "error"


class ViewLoader:
    def __init__(self, name: str = "view", executor: Optional[ThreadPoolExecutor] = None) -> None:
        self.name = name
        self._executor = executor or ThreadPoolExecutor(max_workers=2, thread_name_prefix=f"load-{name}")
        self._owns_executor = executor is None
        self._lock = threading.RLock()
        self._generation = 0
        self._mounted = False
        self.key: Optional[str] = None
        self.state = LoadState.IDLE

    @property
    def mounted(self) -> bool:
        return self._mounted

    def mount(self, key: str, fetch: Callable[[], Any], on_done: Callable[[Any], None]) -> Future:
        """
        Start loading `key`. Any load still running for an earlier key is
        superseded: its result will not reach on_done.
        """
        with self._lock:
            self._generation += 1
            generation = self._generation
            self._mounted = True
            self.key = key
            self.state = LoadState.LOADING

        def _run() -> Any:
            try:
                result: Any = fetch()
            except Exception as exc:
                log.debug("%s: load of %r failed: %s", self.name, key, exc)
                result = exc
            self._deliver(generation, key, result, on_done)
            return result

        return self._executor.submit(_run)

    def _deliver(self, generation: int, key: str, result: Any, on_done: Callable[[Any], None]) -> None:
        # on_done runs under the lock so unmount() cannot interleave with it
        with self._lock:
            if not (self._mounted and generation == self._generation):
                log.debug("%s: dropping stale response for %r", self.name, key)
                return
            if isinstance(result, NotFoundError):
                self.state = LoadState.NOT_FOUND
            elif isinstance(result, Exception):
                self.state = LoadState.ERROR
            else:
                self.state = LoadState.LOADED
            on_done(result)

    def unmount(self) -> None:
        with self._lock:
            self._mounted = False
            self._generation += 1
            self.state = LoadState.IDLE

    def shutdown(self) -> None:
        self.unmount()
        if self._owns_executor:
            self._executor.shutdown(wait=False)

    def __enter__(self) -> "ViewLoader":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.shutdown()
