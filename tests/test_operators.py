#!/usr/bin/env python3
"""
Tests for filter, map and interleave_map.
"""

import unittest
from pushstream import (
    AsyncioScheduler, CallbackSink, ListSink, ManualScheduler, Stream,
    StreamConfig, empty, filter_stream, interleave_map, map_stream,
    stream_array,
)


class Handle:
    """Stream plus the emit/end callbacks its producer received."""

    def __init__(self):
        self.emit = None
        self.end = None
        self.stream = Stream(self._producer)

    def _producer(self, emit, end):
        self.emit = emit
        self.end = end


class TestStructuralOperators(unittest.TestCase):
    """Test filter and map."""

    def setUp(self):
        self.scheduler = ManualScheduler()
        StreamConfig.set_defaults(scheduler=self.scheduler)

    def tearDown(self):
        StreamConfig.set_defaults(scheduler=AsyncioScheduler())

    def test_filter(self):
        """Filter keeps the matching subsequence, then ends."""
        sink = ListSink()
        filter_stream(stream_array(range(1, 7)), lambda x: x % 2 == 0).attach(sink)

        self.assertEqual(sink.elements, [2, 4, 6])
        self.assertTrue(sink.ended)

    def test_map(self):
        """Map applies the function elementwise, then ends."""
        sink = ListSink()
        map_stream(stream_array(['a', 'b']), str.upper).attach(sink)

        self.assertEqual(sink.elements, ['A', 'B'])
        self.assertTrue(sink.ended)

    def test_filter_then_map(self):
        """Chained operators compose."""
        sink = ListSink()
        (stream_array([1, 2, 3, 4])
            .filter(lambda x: x % 2 == 0)
            .map(lambda x: x * 10)
            .attach(sink))

        self.assertEqual(sink.elements, [20, 40])
        self.assertTrue(sink.ended)

    def test_ends_only_when_source_ends(self):
        """Derived streams stay open while their source is open."""
        source = Handle()
        mapped = source.stream.map(lambda x: x + 1)
        sink = ListSink()
        mapped.attach(sink)
        self.scheduler.run_pending()

        source.emit(1)
        source.emit(2)
        self.assertEqual(sink.elements, [2, 3])
        self.assertFalse(sink.ended)

        source.end()
        self.assertTrue(sink.ended)

    def test_predicate_error_propagates(self):
        """Predicate errors reach the emitter and leave the stream open."""
        def predicate(x):
            if x == 3:
                raise ValueError("bad element")
            return True

        source = Handle()
        filtered = filter_stream(source.stream, predicate)
        sink = ListSink()
        filtered.attach(sink)
        self.scheduler.run_pending()

        source.emit(1)
        with self.assertRaises(ValueError):
            source.emit(3)
        source.emit(4)

        self.assertEqual(sink.elements, [1, 4])
        self.assertFalse(sink.ended)
        self.assertFalse(filtered.ended)

    def test_map_error_propagates(self):
        """Map errors reach the emitter."""
        source = Handle()
        mapped = map_stream(source.stream, lambda x: 1 // x)
        mapped.attach(ListSink())
        self.scheduler.run_pending()

        with self.assertRaises(ZeroDivisionError):
            source.emit(0)


class TestInterleaveMap(unittest.TestCase):
    """Test interleave_map merging and termination."""

    def setUp(self):
        self.scheduler = ManualScheduler()
        StreamConfig.set_defaults(scheduler=self.scheduler)

    def tearDown(self):
        StreamConfig.set_defaults(scheduler=AsyncioScheduler())

    def test_synchronous_sub_streams(self):
        """Finite sub-streams flatten in arrival order and end synchronously."""
        sink = ListSink()
        stream_array([1, 2]).interleave_map(lambda x: stream_array([x, x * 10])).attach(sink)

        self.assertEqual(sink.elements, [1, 10, 2, 20])
        self.assertTrue(sink.ended)

    def test_empty_source(self):
        """An empty source ends the output without calling func."""
        calls = []

        def func(x):
            calls.append(x)
            return empty()

        sink = ListSink()
        interleave_map(empty(), func).attach(sink)

        self.assertEqual(calls, [])
        self.assertTrue(sink.ended)

    def test_waits_for_open_sub_streams(self):
        """Output ends only after source and every sub-stream end."""
        source = Handle()
        subs = {}

        def func(key):
            subs[key] = Handle()
            return subs[key].stream

        sink = ListSink()
        interleave_map(source.stream, func).attach(sink)
        self.scheduler.run_pending()

        source.emit('a')
        source.emit('b')
        self.scheduler.run_pending()

        subs['a'].emit(1)
        subs['b'].emit(2)
        subs['a'].emit(3)
        self.assertEqual(sink.elements, [1, 2, 3])

        source.end()
        self.assertFalse(sink.ended)
        subs['a'].end()
        self.assertFalse(sink.ended)
        subs['b'].end()
        self.assertTrue(sink.ended)

    def test_source_end_after_sub_streams(self):
        """Output ends when the source ends last."""
        source = Handle()
        sink = ListSink()
        interleave_map(source.stream, lambda x: stream_array([x])).attach(sink)
        self.scheduler.run_pending()

        source.emit(7)
        self.assertEqual(sink.elements, [7])
        self.assertFalse(sink.ended)

        source.end()
        self.assertTrue(sink.ended)

    def test_open_sub_stream_keeps_output_open(self):
        """A sub-stream that never ends keeps the output open."""
        never = Handle()
        sink = ListSink()
        stream_array([1]).interleave_map(lambda x: never.stream).attach(sink)

        self.assertFalse(sink.ended)

    def test_ends_exactly_once(self):
        """The merged output signals end a single time."""
        ends = []
        sink = CallbackSink(lambda e: None, lambda: ends.append(True))
        stream_array([1, 2, 3]).interleave_map(lambda x: empty()).attach(sink)

        self.assertEqual(ends, [True])


if __name__ == "__main__":
    unittest.main()
