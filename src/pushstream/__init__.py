"""
pushstream: push-based event streams with pre-attachment buffering.

A producer pushes elements into a Stream; consumers attach to receive them.
Elements produced before anyone attaches are held and replayed, so late
consumers in the same turn do not miss them.
"""

from pushstream.config import StreamConfig
from pushstream.scheduler import (
    AsyncioScheduler,
    ManualScheduler,
    Scheduler,
    SchedulerError,
)
from pushstream.streams import (
    CallbackSink,
    ListSink,
    Sink,
    Stream,
    StreamState,
    collect,
    empty,
    filter_stream,
    for_each,
    interleave_map,
    interleave_promises,
    map_stream,
    stream_array,
    stream_promise,
)

__version__ = "0.1.0"
__license__ = "Apache-2.0"

__all__ = [
    "StreamConfig",
    "Scheduler",
    "AsyncioScheduler",
    "ManualScheduler",
    "SchedulerError",
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
    "filter_stream",
    "map_stream",
    "interleave_map",
    "interleave_promises",
]
