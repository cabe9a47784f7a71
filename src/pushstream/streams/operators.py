"""
Stream operators for transformation and merging.

Each operator builds a new stream whose producer attaches to the source.
Exceptions raised by user functions are not caught: they propagate out of
the push that triggered them and leave both streams' state unchanged.
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Awaitable, Callable, TypeVar

from pushstream.streams.sinks import CallbackSink
from pushstream.streams.sources import failed
from pushstream.streams.stream import Stream

T = TypeVar('T')
U = TypeVar('U')


class StreamOperator(ABC):
    """Base class for stream operators."""

    @abstractmethod
    def apply(self, stream: Stream) -> Stream:
        """Apply operator to stream, returning the derived stream."""
        pass


class MapOperator(StreamOperator):
    """Map each element to a new value."""

    def __init__(self, func: Callable[[T], U]):
        self.func = func

    def apply(self, stream: Stream[T]) -> Stream[U]:
        func = self.func

        def producer(emit, end):
            stream.attach(CallbackSink(lambda element: emit(func(element)), end))

        return Stream(producer)


class FilterOperator(StreamOperator):
    """Filter elements by predicate."""

    def __init__(self, predicate: Callable[[T], bool]):
        self.predicate = predicate

    def apply(self, stream: Stream[T]) -> Stream[T]:
        predicate = self.predicate

        def producer(emit, end):
            def on_element(element):
                if predicate(element):
                    emit(element)

            stream.attach(CallbackSink(on_element, end))

        return Stream(producer)


class MergeCounter:
    """
    Track open inner sources of a merge.

    The merged stream ends exactly once, when the outer source has ended and
    no inner source is open.
    """

    def __init__(self, end: Callable[[], None]):
        self._end = end
        self.open = 0
        self.source_ended = False
        self.done = False

    def opened(self) -> None:
        self.open += 1

    def closed(self) -> None:
        self.open -= 1
        self._check()

    def finish_source(self) -> None:
        self.source_ended = True
        self._check()

    def _check(self) -> None:
        if self.done or not self.source_ended or self.open > 0:
            return
        self.done = True
        self._end()


class InterleaveMapOperator(StreamOperator):
    """Map each element to a sub-stream and merge sub-stream outputs."""

    def __init__(self, func: Callable[[T], Stream[U]]):
        self.func = func

    def apply(self, stream: Stream[T]) -> Stream[U]:
        func = self.func

        def producer(emit, end):
            counter = MergeCounter(end)

            def on_element(element):
                counter.opened()
                func(element).attach(CallbackSink(emit, counter.closed))

            stream.attach(CallbackSink(on_element, counter.finish_source))

        return Stream(producer)


class InterleavePromisesOperator(StreamOperator):
    """Merge the results of a stream of awaitables in resolution order."""

    def apply(self, stream: Stream[Awaitable[T]]) -> Stream[T]:

        def producer(emit, end):
            counter = MergeCounter(end)

            def resolved(future):
                # Failed awaitables stay counted as open
                if failed(future):
                    return
                emit(future.result())
                counter.closed()

            def on_element(awaitable):
                counter.opened()
                asyncio.ensure_future(awaitable).add_done_callback(resolved)

            stream.attach(CallbackSink(on_element, counter.finish_source))

        return Stream(producer)


def filter_stream(stream: Stream[T], predicate: Callable[[T], bool]) -> Stream[T]:
    """Keep only elements for which predicate holds."""
    return FilterOperator(predicate).apply(stream)


def map_stream(stream: Stream[T], func: Callable[[T], U]) -> Stream[U]:
    """Apply func to each element."""
    return MapOperator(func).apply(stream)


def interleave_map(stream: Stream[T], func: Callable[[T], Stream[U]]) -> Stream[U]:
    """
    Flatten a stream of sub-streams produced by func.

    Sub-stream elements are forwarded as they arrive; there is no ordering
    across sub-streams. The result ends once the source and every sub-stream
    have ended.
    """
    return InterleaveMapOperator(func).apply(stream)


def interleave_promises(stream: Stream[Awaitable[T]]) -> Stream[T]:
    """
    Merge awaitable results in the order they resolve.

    The result ends once the source has ended and every awaitable has
    resolved. A failed awaitable is logged and keeps the result open.
    """
    return InterleavePromisesOperator().apply(stream)
