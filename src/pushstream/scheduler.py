"""
Cooperative "run on next turn" scheduling used for deferred buffer release.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from collections import deque
from typing import Callable, Deque

logger = logging.getLogger(__name__)


class SchedulerError(RuntimeError):
    """Raised when a deferred callback cannot be scheduled."""


class Scheduler(ABC):
    """Abstract base class for next-turn schedulers."""

    @abstractmethod
    def call_soon(self, callback: Callable[[], None]) -> None:
        """Run callback on a later turn, never synchronously."""
        pass


class AsyncioScheduler(Scheduler):
    """Schedule callbacks on the running asyncio event loop."""

    def call_soon(self, callback: Callable[[], None]) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError as e:
            raise SchedulerError(
                "no running event loop; attach streams from inside a coroutine "
                "or configure a ManualScheduler"
            ) from e
        loop.call_soon(callback)


class ManualScheduler(Scheduler):
    """
    Queue callbacks until run_pending() is called.

    Useful for driving streams without an event loop and for stepping
    through turns deterministically.
    """

    def __init__(self):
        self._queue: Deque[Callable[[], None]] = deque()

    def call_soon(self, callback: Callable[[], None]) -> None:
        self._queue.append(callback)

    @property
    def pending(self) -> int:
        return len(self._queue)

    def run_pending(self) -> int:
        """
        Run callbacks queued before this call.

        Callbacks queued while running belong to the next turn.

        Returns:
            Number of callbacks run
        """
        count = len(self._queue)
        for _ in range(count):
            callback = self._queue.popleft()
            callback()
        if count:
            logger.debug(f"Ran {count} deferred callbacks")
        return count
