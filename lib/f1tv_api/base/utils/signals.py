# f1tv_api/base/utils/signals.py
"""
Observer registry and set-once readiness flags used by the session to publish
state changes (ascendon, entitlement, location, remote config).
"""

import threading
from concurrent.futures import Future
from typing import Callable, List, Optional, Tuple

from .logger import logger


class Signal:
    """
    Named observer registry

    Handlers are called synchronously in registration order. A handler that
    raises is logged and skipped; the emitter never sees the exception.
    """

    def __init__(self, name: str):
        self.name = name
        self._lock = threading.Lock()
        self._handlers: List[Tuple[Callable, bool]] = []

    def connect(self, handler: Callable) -> Callable:
        """Register handler for every emission (usable as decorator)"""
        with self._lock:
            self._handlers.append((handler, False))
        return handler

    def connect_once(self, handler: Callable) -> Callable:
        """Register handler for the next emission only"""
        with self._lock:
            self._handlers.append((handler, True))
        return handler

    def disconnect(self, handler: Callable) -> bool:
        """Remove every registration of handler; returns True if one was found"""
        with self._lock:
            before = len(self._handlers)
            self._handlers = [(h, once) for h, once in self._handlers if h is not handler]
            return len(self._handlers) != before

    @property
    def receivers(self) -> int:
        with self._lock:
            return len(self._handlers)

    def emit(self, *args, **kwargs) -> int:
        """
        Call all registered handlers

        Returns:
            Number of handlers that completed without raising
        """
        with self._lock:
            handlers = list(self._handlers)
            self._handlers = [(h, once) for h, once in self._handlers if not once]

        delivered = 0
        for handler, _ in handlers:
            try:
                handler(*args, **kwargs)
                delivered += 1
            except Exception as e:
                logger.error(f"Signal '{self.name}': handler {getattr(handler, '__name__', handler)} failed: {e}",
                             exc_info=True)
        return delivered

    def __repr__(self) -> str:
        return f"<Signal {self.name} receivers={self.receivers}>"


class ReadinessSignal:
    """
    Set-once flag with blocking and future-based waiting

    Waiting on a flag that is never set blocks forever; pass a timeout.
    """

    def __init__(self, name: str):
        self.name = name
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._futures: List[Future] = []
        self._callbacks: List[Callable[[], None]] = []

    def is_set(self) -> bool:
        return self._event.is_set()

    def set(self) -> bool:
        """
        Mark as ready and release all waiters

        Returns:
            True on the first call, False if already set
        """
        with self._lock:
            if self._event.is_set():
                return False
            self._event.set()
            futures, self._futures = self._futures, []
            callbacks, self._callbacks = self._callbacks, []

        logger.debug(f"Readiness '{self.name}' reached ({len(futures)} pending waiters)")

        for future in futures:
            if not future.done():
                future.set_result(None)
        for callback in callbacks:
            try:
                callback()
            except Exception as e:
                logger.error(f"Readiness '{self.name}': callback failed: {e}", exc_info=True)
        return True

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until set; returns False if the timeout elapsed first"""
        return self._event.wait(timeout)

    def future(self) -> Future:
        """Future resolving (with None) once the flag is set"""
        future: Future = Future()
        with self._lock:
            if not self._event.is_set():
                self._futures.append(future)
                return future
        future.set_result(None)
        return future

    def on_set(self, callback: Callable[[], None]) -> None:
        """Run callback once the flag is set (immediately if already set)"""
        with self._lock:
            if not self._event.is_set():
                self._callbacks.append(callback)
                return
        callback()

    @classmethod
    def all_of(cls, name: str, *signals: 'ReadinessSignal') -> 'ReadinessSignal':
        """Conjunction: set once every input signal is set"""
        combined = cls(name)

        def check() -> None:
            if all(signal.is_set() for signal in signals):
                combined.set()

        for signal in signals:
            signal.on_set(check)
        if not signals:
            combined.set()
        return combined

    def __repr__(self) -> str:
        return f"<ReadinessSignal {self.name} set={self.is_set()}>"
