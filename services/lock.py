"""
Advisory single-flag lock.

Used to keep a second fetch/refresh from starting while one is running:
``try_lock`` reads a busy flag without blocking and fails immediately if it is
set, so the caller can just show "busy" instead of freezing the UI.

The flag check and the mutex acquisition are two separate steps. Two callers
can both see the flag clear and then both take the mutex in turn; the mutex is
the real exclusion boundary, the flag only makes the common case fail fast.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager

from services.error import AlreadyLockingError


class SingleFlagLock:

    def __init__(self):
        self._mutex = threading.Lock()
        self._locking = 0

    def try_lock(self) -> None:
        """Set the busy flag or raise ``AlreadyLockingError`` without blocking."""
        if self._locking == 1:
            raise AlreadyLockingError()
        with self._mutex:
            if self._locking == 0:
                self._locking = 1

    def unlock(self) -> None:
        with self._mutex:
            if self._locking == 1:
                self._locking = 0

    def is_locking(self) -> bool:
        with self._mutex:
            return self._locking == 1

    @contextmanager
    def held(self):
        """``with lock.held():`` calls try_lock on entry, unlock on exit."""
        self.try_lock()
        try:
            yield self
        finally:
            self.unlock()
