# pyLaMetric - Frame Composition
# -*- coding: utf-8 -*-
"""
 Build the ordered frame list of a notification from small producers.

 A producer is anything that yields zero or more frames:
    * a frame (SimpleFrame, GoalFrame, ChartFrame)
    * None or EMPTY - no frames
    * a list or tuple of producers
    * a FrameBuilder
    * a callable taking no arguments that returns a producer (called once)

 Functions
    compose(*producers)                   # Flatten producers into a list of frames
    optional(condition, producer)         # Producer frames if condition else nothing
    either(condition, first, second)      # Frames of first if condition else second
    repeat(producer, count)               # First frame of producer, count times
    simple(text, icon)                    # SimpleFrame shorthand
    goal(current, bounds, unit, icon)     # GoalFrame from a (start, end) pair or range
    chart(*points)                        # ChartFrame shorthand

 Example
    frames = compose(
        simple("Build finished", icon=IdentifiedIcon(23)),
        optional(failures, simple(f"{failures} failing")),
        either(deployed, simple("Deployed"), simple("Waiting")),
        repeat(chart(1, 3, 2, 5), 2),
    )

 Nothing here talks to the device, the result is only a list of frames.
"""
import copy
import logging
from typing import Iterable, Iterator, List, Optional, Sequence, Union

from pylametric.model import (DEFAULT_ICON, FRAME_TYPES, ChartFrame, Frame, GoalFrame,
                              Icon, SimpleFrame)

log = logging.getLogger(__name__)

# Producer that yields no frames
EMPTY = ()


def build_frames(producer) -> List[Frame]:
    """Flatten a single producer into a new list of frames"""
    if producer is None:
        return []
    if isinstance(producer, FRAME_TYPES):
        return [producer]
    if isinstance(producer, FrameBuilder):
        return producer.build()
    if isinstance(producer, (list, tuple)):
        frames = []
        for item in producer:
            frames.extend(build_frames(item))
        return frames
    if callable(producer):
        return build_frames(producer())
    raise TypeError(f"Not a frame producer: {producer!r}")


def compose(*producers) -> List[Frame]:
    """Concatenate the frames of every producer in declaration order"""
    return build_frames(producers)


def optional(condition, producer) -> List[Frame]:
    if not condition:
        return []
    return build_frames(producer)


def either(condition, first, second) -> List[Frame]:
    # Only the chosen side is flattened; a callable on the other side never runs
    return build_frames(first if condition else second)


def repeat(producer, count: int) -> List[Frame]:
    """
    Repeat the first frame of producer count times.

    Raises ValueError if the producer yields no frame or count is negative.
    """
    if count < 0:
        raise ValueError(f"Repeat count must not be negative: {count}")
    frames = build_frames(producer)
    if not frames:
        raise ValueError("Cannot repeat a producer that yields no frames")
    if len(frames) > 1:
        log.debug(f"repeat() uses the first of {len(frames)} frames")
    return [copy.copy(frames[0]) for _ in range(count)]


def simple(text: Optional[str], icon: Icon = DEFAULT_ICON) -> SimpleFrame:
    return SimpleFrame(text, icon)


def goal(current: int, bounds: Union[range, Sequence[int]], unit: str, icon: Icon = DEFAULT_ICON) -> GoalFrame:
    """
    GoalFrame for current in bounds.

    bounds is a (start, end) pair or a range; for a range the end is the last
    value it contains, so goal(30, range(0, 101), "%") ends at 100.
    """
    if isinstance(bounds, range):
        if len(bounds) == 0:
            raise ValueError(f"Empty goal range: {bounds}")
        start, end = bounds[0], bounds[-1]
    else:
        start, end = bounds
    return GoalFrame(start, current, end, unit, icon)


def chart(*points: int) -> ChartFrame:
    return ChartFrame(points)


class FrameBuilder:
    """
    Fluent accumulator for frames.

    Every call flattens its producer immediately and appends the frames, so the
    order of calls is the order on the device.

        frames = (FrameBuilder()
                  .simple("Hello")
                  .when(is_late, simple("Late!"))
                  .repeat(chart(1, 2, 3), 2)
                  .build())
    """

    def __init__(self, *producers):
        self._frames: List[Frame] = compose(*producers)

    def add(self, *producers) -> "FrameBuilder":
        self._frames.extend(compose(*producers))
        return self

    def extend(self, producers: Iterable) -> "FrameBuilder":
        return self.add(*producers)

    def simple(self, text: Optional[str], icon: Icon = DEFAULT_ICON) -> "FrameBuilder":
        return self.add(simple(text, icon))

    def goal(self, current: int, bounds, unit: str, icon: Icon = DEFAULT_ICON) -> "FrameBuilder":
        return self.add(goal(current, bounds, unit, icon))

    def chart(self, *points: int) -> "FrameBuilder":
        return self.add(chart(*points))

    def when(self, condition, producer) -> "FrameBuilder":
        return self.add(optional(condition, producer))

    def either(self, condition, first, second) -> "FrameBuilder":
        return self.add(either(condition, first, second))

    def repeat(self, producer, count: int) -> "FrameBuilder":
        return self.add(repeat(producer, count))

    def build(self) -> List[Frame]:
        return list(self._frames)

    def __iter__(self) -> Iterator[Frame]:
        return iter(list(self._frames))

    def __len__(self) -> int:
        return len(self._frames)
