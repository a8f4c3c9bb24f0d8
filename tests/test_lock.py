"""
Tests for the advisory single-flag lock.
"""

from __future__ import annotations

import threading
import time

import pytest

from services.error import AlreadyLockingError
from services.lock import SingleFlagLock


def test_second_try_lock_fails_fast() -> None:
    lock = SingleFlagLock()
    lock.try_lock()
    assert lock.is_locking()

    start = time.monotonic()
    with pytest.raises(AlreadyLockingError):
        lock.try_lock()
    assert time.monotonic() - start < 0.5


def test_unlock_allows_relock() -> None:
    lock = SingleFlagLock()
    lock.try_lock()
    lock.unlock()
    assert not lock.is_locking()
    lock.try_lock()
    assert lock.is_locking()


def test_unlock_on_fresh_lock_is_harmless() -> None:
    lock = SingleFlagLock()
    lock.unlock()
    assert not lock.is_locking()


def test_contended_try_lock_does_not_wait_for_holder() -> None:
    """A second thread is turned away while the first one holds the flag."""
    lock = SingleFlagLock()
    lock.try_lock()
    errors: list[Exception] = []

    def worker() -> None:
        try:
            lock.try_lock()
        except AlreadyLockingError as e:
            errors.append(e)

    t = threading.Thread(target=worker)
    t.start()
    t.join(timeout=2)
    assert not t.is_alive()
    assert len(errors) == 1


def test_held_context_manager_releases() -> None:
    lock = SingleFlagLock()
    with lock.held():
        assert lock.is_locking()
        with pytest.raises(AlreadyLockingError):
            with lock.held():
                pass
        # the failed inner attempt must not have released the outer hold
        assert lock.is_locking()
    assert not lock.is_locking()
