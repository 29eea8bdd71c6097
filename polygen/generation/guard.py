"""Mutual exclusion for generation runs."""

import threading
from collections.abc import Callable, Generator
from contextlib import contextmanager
from typing import TypeVar

from polygen.core.logger.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class BuildInvocationGuard:
    """Critical section allowing one orchestration run at a time.

    Waiters block without timeout. The lock is not reentrant: an action that
    enters the same guard again deadlocks, so orchestration must never call
    itself.
    """

    def __init__(self) -> None:
        """Initialize the guard."""
        self._lock = threading.Lock()

    @property
    def locked(self) -> bool:
        """Return True while a run holds the guard."""
        return self._lock.locked()

    @contextmanager
    def exclusive(self) -> Generator[None, None, None]:
        """Hold the guard for the duration of the block.

        Yields:
            None once the guard is acquired. Released on every exit path.
        """
        if self._lock.locked():
            logger.debug("Waiting for a running generation to finish")
        with self._lock:
            yield

    def with_exclusive_access(self, action: Callable[[], T]) -> T:
        """Run an action while holding the guard.

        Args:
            action: Callable to execute exclusively.

        Returns:
            Whatever the action returns.
        """
        with self.exclusive():
            return action()


_default_guard = BuildInvocationGuard()


def get_default_guard() -> BuildInvocationGuard:
    """Get the process-wide guard shared by orchestrators.

    Returns:
        BuildInvocationGuard singleton.
    """
    return _default_guard
