"""
Ready-made consumers and terminal helpers.
"""

import asyncio
from typing import Any, Callable, List, Optional, TypeVar

from pushstream.streams.stream import Sink, Stream

T = TypeVar('T')


class CallbackSink(Sink[T]):
    """Adapt plain callables to the Sink interface."""

    def __init__(self,
                 on_element: Callable[[T], Any],
                 on_end: Optional[Callable[[], Any]] = None):
        self.on_element = on_element
        self.on_end = on_end

    def element(self, element: T) -> None:
        self.on_element(element)

    def end(self) -> None:
        if self.on_end is not None:
            self.on_end()


class ListSink(Sink[T]):
    """Record every element and whether the stream ended."""

    def __init__(self):
        self.elements: List[T] = []
        self.ended = False

    def element(self, element: T) -> None:
        self.elements.append(element)

    def end(self) -> None:
        self.ended = True

    def __repr__(self) -> str:
        return f"ListSink(elements={self.elements!r}, ended={self.ended})"


def collect(stream: Stream[T]) -> 'asyncio.Future[List[T]]':
    """
    Attach to stream and gather its elements.

    Returns:
        Future resolving to the list of elements when the stream ends.
        A stream that never ends leaves the future pending.
    """
    future = asyncio.get_running_loop().create_future()
    elements: List[T] = []

    def on_end():
        if not future.done():
            future.set_result(elements)

    stream.attach(CallbackSink(elements.append, on_end))
    return future


def for_each(stream: Stream[T], func: Callable[[T], Any]) -> 'asyncio.Future[None]':
    """Call func for each element; the returned future resolves on end."""
    future = asyncio.get_running_loop().create_future()

    def on_end():
        if not future.done():
            future.set_result(None)

    stream.attach(CallbackSink(func, on_end))
    return future
