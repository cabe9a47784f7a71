"""
Stream construction helpers.
"""

import asyncio
import logging
from typing import Awaitable, Iterable, TypeVar

from pushstream.config import StreamConfig
from pushstream.streams.stream import Stream

logger = logging.getLogger(__name__)

T = TypeVar('T')


def failed(future: 'asyncio.Future') -> bool:
    """
    Check a completed future for failure, logging it if configured.

    A failed future carries no element and must not end the stream it feeds.
    """
    if future.cancelled():
        if StreamConfig.get_instance().log_failed_awaitables:
            logger.error(f"Awaitable {future!r} was cancelled; its stream will not progress")
        return True

    error = future.exception()
    if error is not None:
        if StreamConfig.get_instance().log_failed_awaitables:
            logger.error(
                f"Awaitable failed with {type(error).__name__}: {error}; "
                f"its stream will not progress",
                exc_info=error,
            )
        return True

    return False


def empty() -> Stream:
    """Create a stream that ends immediately without elements."""
    return Stream(lambda emit, end: end())


def stream_array(elements: Iterable[T]) -> Stream[T]:
    """
    Create a stream that delivers elements in order, then ends.

    Elements are copied at construction; later changes to the source
    sequence are not seen.
    """
    return Stream(lambda emit, end: end(), seed=list(elements))


def stream_promise(awaitable: Awaitable[T]) -> Stream[T]:
    """
    Create a stream that emits the awaitable's result, then ends.

    Requires a running event loop when awaitable is a coroutine. If the
    awaitable never completes, or fails, the stream never ends.
    """
    future = asyncio.ensure_future(awaitable)

    def producer(emit, end):
        def resolved(done: 'asyncio.Future') -> None:
            if failed(done):
                return
            emit(done.result())
            end()

        future.add_done_callback(resolved)

    return Stream(producer)
