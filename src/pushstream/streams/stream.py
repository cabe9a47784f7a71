"""
Push-based streams with pre-attachment buffering.

A Stream runs its producer once, synchronously, at construction. Elements
produced before the buffer is released are held and replayed to every
consumer that attaches; the buffer is released on the scheduler's next turn
after the first attach. From then on elements are forwarded directly to the
attached consumers.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import (
    Any, Callable, Generic, Iterable, List, Optional, TypeVar,
)

from pushstream.config import StreamConfig

logger = logging.getLogger(__name__)

T = TypeVar('T')
U = TypeVar('U')

# producer(emit, end)
Emitter = Callable[[Callable[[T], None], Callable[[], None]], None]


class Sink(ABC, Generic[T]):
    """
    Receiver of stream elements.

    Any object exposing element() and end() can be attached; subclassing
    is optional.
    """

    @abstractmethod
    def element(self, element: T) -> None:
        """Receive one element."""
        pass

    @abstractmethod
    def end(self) -> None:
        """Receive the end-of-stream signal."""
        pass


class StreamState(Enum):
    """Lifecycle of a stream: buffer held or released, consumers live or terminated."""
    BUFFERING = "buffering"
    LIVE = "live"
    BUFFERED_ENDED = "buffered_ended"
    ENDED = "ended"

    @property
    def buffering(self) -> bool:
        return self in (StreamState.BUFFERING, StreamState.BUFFERED_ENDED)

    @property
    def ended(self) -> bool:
        return self in (StreamState.BUFFERED_ENDED, StreamState.ENDED)

    def after_release(self) -> 'StreamState':
        """State after the prebuffer is released."""
        if self == StreamState.BUFFERING:
            return StreamState.LIVE
        if self == StreamState.BUFFERED_ENDED:
            return StreamState.ENDED
        return self

    def after_finish(self) -> 'StreamState':
        """State after the producer signals end."""
        if self == StreamState.BUFFERING:
            return StreamState.BUFFERED_ENDED
        if self == StreamState.LIVE:
            return StreamState.ENDED
        return self


class Stream(Generic[T]):
    """
    A single-producer, multi-consumer push stream.
    """

    def __init__(self, producer: Emitter, seed: Optional[Iterable[T]] = None):
        """
        Initialize stream and run its producer.

        Args:
            producer: Called once with (emit, end) bound to this stream
            seed: Elements to place in the prebuffer before the producer runs
        """
        settings = StreamConfig.get_instance()
        self._scheduler = settings.scheduler
        self._warning_size = settings.prebuffer_warning_size
        self._warned = False

        self._state = StreamState.BUFFERING
        self._prebuffer: List[T] = list(seed) if seed is not None else []
        self._consumers: List[Any] = []
        self._release_pending = False

        producer(self._push, self._finish)

    @property
    def state(self) -> StreamState:
        return self._state

    @property
    def released(self) -> bool:
        return not self._state.buffering

    @property
    def ended(self) -> bool:
        return self._state.ended

    def attach(self, sink: Sink[T]) -> None:
        """
        Attach a consumer.

        Held elements are replayed to the sink synchronously and the buffer
        release is scheduled for the next turn, so every sink attaching in
        the same turn sees the full buffer. An ended stream then signals
        end immediately; otherwise the sink is registered for later elements.
        """
        if self._state.buffering:
            # A scheduling failure must leave the sink untouched
            self._schedule_release()
            for element in list(self._prebuffer):
                sink.element(element)

        if self._state.ended:
            sink.end()
            return

        self._consumers.append(sink)

    def _schedule_release(self) -> None:
        if self._release_pending:
            return
        self._scheduler.call_soon(self._release)
        self._release_pending = True

    def _release(self) -> None:
        self._release_pending = False
        if not self._state.buffering:
            return
        dropped = len(self._prebuffer)
        self._prebuffer = []
        self._state = self._state.after_release()
        logger.debug(f"Released prebuffer of {dropped} elements, now {self._state.value}")

    def _push(self, element: T) -> None:
        if self._state.ended:
            return

        # Buffer check comes first: a sink that attached this turn does not
        # see elements pushed before the release runs.
        if self._state.buffering:
            self._prebuffer.append(element)
            if not self._warned and len(self._prebuffer) > self._warning_size:
                self._warned = True
                logger.warning(
                    f"Prebuffer holds {len(self._prebuffer)} elements; "
                    f"no consumer has attached to release it"
                )
            return

        for sink in tuple(self._consumers):
            sink.element(element)

    def _finish(self) -> None:
        if self._state.ended:
            return

        consumers = self._consumers
        self._consumers = []
        self._state = self._state.after_finish()
        logger.debug(f"Stream ended with {len(consumers)} consumers attached")

        for sink in consumers:
            sink.end()

    # Operators

    def filter(self, predicate: Callable[[T], bool]) -> 'Stream[T]':
        """Keep only elements matching predicate."""
        from pushstream.streams.operators import filter_stream
        return filter_stream(self, predicate)

    def map(self, func: Callable[[T], U]) -> 'Stream[U]':
        """Apply function to each element."""
        from pushstream.streams.operators import map_stream
        return map_stream(self, func)

    def interleave_map(self, func: Callable[[T], 'Stream[U]']) -> 'Stream[U]':
        """Map each element to a stream and merge their outputs."""
        from pushstream.streams.operators import interleave_map
        return interleave_map(self, func)

    # Terminal operators

    def collect(self) -> 'asyncio.Future[List[T]]':
        """Future resolving to every delivered element once the stream ends."""
        from pushstream.streams.sinks import collect
        return collect(self)

    def for_each(self, func: Callable[[T], Any]) -> 'asyncio.Future[None]':
        """Call func per element; the returned future resolves on end."""
        from pushstream.streams.sinks import for_each
        return for_each(self, func)

    def __repr__(self) -> str:
        return (f"Stream(state={self._state.value}, "
                f"buffered={len(self._prebuffer)}, "
                f"consumers={len(self._consumers)})")
