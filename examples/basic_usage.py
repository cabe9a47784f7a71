#!/usr/bin/env python3
"""
Basic usage examples for pushstream.
"""

import asyncio
import logging
import random

from pushstream import (
    AsyncioScheduler,
    CallbackSink,
    ManualScheduler,
    Stream,
    StreamConfig,
    interleave_promises,
    stream_array,
    stream_promise,
)


def example_operators(scheduler):
    """Example: filter and map over a fixed sequence."""
    print("\n=== Operators Example ===")

    stream = (stream_array(range(1, 11))
              .filter(lambda x: x % 2 == 0)
              .map(lambda x: x * 10))
    stream.attach(CallbackSink(
        lambda x: print(f"  element: {x}"),
        lambda: print("  end"),
    ))
    scheduler.run_pending()


def example_manual_turns(scheduler):
    """Example: stepping buffer release by hand, without an event loop."""
    print("\n=== Manual Scheduler Example ===")

    handles = {}
    stream = Stream(lambda emit, end: handles.update(emit=emit, end=end))
    handles['emit']('early')

    stream.attach(CallbackSink(lambda x: print(f"  first sink: {x}")))
    stream.attach(CallbackSink(lambda x: print(f"  second sink: {x}")))
    print(f"  before release: {stream!r}")

    scheduler.run_pending()
    print(f"  after release: {stream!r}")

    handles['emit']('live')
    handles['end']()


async def fetch(name):
    await asyncio.sleep(random.uniform(0.01, 0.1))
    return f"{name} done"


async def example_async():
    """Example: merging awaitables in completion order."""
    print("\n=== Async Example ===")

    names = ['alpha', 'beta', 'gamma', 'delta']
    results = await interleave_promises(stream_array([fetch(n) for n in names])).collect()
    print(f"  completion order: {results}")

    nested = stream_array(names).interleave_map(lambda n: stream_promise(fetch(n)))
    await nested.for_each(lambda r: print(f"  nested: {r}"))


def main():
    """Run all examples."""
    print("=== pushstream Examples ===")
    logging.basicConfig(level=logging.INFO)

    # No event loop yet: step release turns by hand
    scheduler = ManualScheduler()
    StreamConfig.set_defaults(scheduler=scheduler)
    example_operators(scheduler)
    example_manual_turns(scheduler)

    # Back to the event loop for awaitables
    StreamConfig.set_defaults(scheduler=AsyncioScheduler())
    asyncio.run(example_async())

    print("\n=== All examples completed! ===")


if __name__ == "__main__":
    main()
