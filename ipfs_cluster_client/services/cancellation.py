# ipfs_cluster_client/services/cancellation.py
"""
Cooperative cancellation for cluster requests.

A CancellationToken is created by the caller, passed with a single call's
options and cancelled from any thread. The request dispatcher is the only
component that listens to it.
"""
import logging
import threading
from typing import Callable, List

from ipfs_cluster_client.core.errors import CancelledError

logger = logging.getLogger(__name__)


class CancellationToken:
    """
    Thread-safe, one-shot cancellation signal.

    Once cancelled it stays cancelled. Callbacks registered before cancellation
    run exactly once on the cancelling thread; callbacks registered afterwards
    run immediately.
    """

    def __init__(self):
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._callbacks: List[Callable[[], None]] = []
        self.reason = "Request cancelled"

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self, reason: str = "Request cancelled") -> None:
        with self._lock:
            if self._event.is_set():
                return
            self.reason = reason
            self._event.set()
            callbacks, self._callbacks = self._callbacks, []

        for callback in callbacks:
            try:
                callback()
            except Exception as e:
                logger.warning(f"Cancellation callback failed: {e}")

    def add_callback(self, callback: Callable[[], None]) -> Callable[[], None]:
        """
        Register a callback fired on cancellation.

        Returns:
            A function that unregisters the callback.
        """
        with self._lock:
            if not self._event.is_set():
                self._callbacks.append(callback)

                def unregister() -> None:
                    with self._lock:
                        if callback in self._callbacks:
                            self._callbacks.remove(callback)

                return unregister

        callback()
        return lambda: None

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise CancelledError(self.reason)

    def wait(self, timeout: float = None) -> bool:
        return self._event.wait(timeout)
