"""Push-based streams with pre-attachment buffering."""

from pushstream.streams.stream import (
    Emitter,
    Sink,
    Stream,
    StreamState,
)
from pushstream.streams.sinks import (
    CallbackSink,
    ListSink,
    collect,
    for_each,
)
from pushstream.streams.sources import (
    empty,
    stream_array,
    stream_promise,
)
from pushstream.streams.operators import (
    StreamOperator,
    MapOperator,
    FilterOperator,
    InterleaveMapOperator,
    InterleavePromisesOperator,
    filter_stream,
    map_stream,
    interleave_map,
    interleave_promises,
)

__all__ = [
    "Emitter",
    "Sink",
    "Stream",
    "StreamState",
    "CallbackSink",
    "ListSink",
    "collect",
    "for_each",
    "empty",
    "stream_array",
    "stream_promise",
    "StreamOperator",
    "MapOperator",
    "FilterOperator",
    "InterleaveMapOperator",
    "InterleavePromisesOperator",
    "filter_stream",
    "map_stream",
    "interleave_map",
    "interleave_promises",
]
