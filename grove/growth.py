"""
Stroke-reveal growth scheduling.

Turns the segments of one tree into a timeline of partial strokes so the
tree appears to grow rather than pop in.

Per segment:
    distance  = |start - end|
    increment = 0.05               if distance / 20 > draw_speed
                draw_speed / distance  otherwise
    duration  = draw_interval * min(20, floor(distance / draw_speed))

Segments start one after another: the k-th segment starts after the sum of
the durations of segments 0..k-1. Once started, a segment paints the stroke
from its base toward its tip at fraction min(a, 1), growing a by the
increment every draw_interval, until a reaches 1.

The sum of all durations is the plan's total_duration. The builder lock is
released exactly that long after growth starts; every paint step of the
plan lands at or before that moment.
"""

import math
from collections.abc import Callable
from dataclasses import dataclass

from grove.geometry import Segment
from grove.timeline import Timeline

MAX_STEPS = 20
LONG_SEGMENT_INCREMENT = 1.0 / MAX_STEPS  # 0.05

# paint(segment, fraction) draws the first `fraction` of the stroke
PaintFn = Callable[[Segment, float], None]


@dataclass(frozen=True)
class GrowthTask:
    """
    When and how fast one segment is revealed.

    Attributes:
        segment: Branch to reveal
        delay: Start time relative to the start of growth
        duration: Time budget this segment adds to the cumulative delay
        increment: Fraction revealed per step
        steps: Number of paint steps until the stroke is complete
    """

    segment: Segment
    delay: float
    duration: float
    increment: float
    steps: int

    def fraction_at(self, step: int) -> float:
        """Revealed fraction after paint step `step` (0-based)."""
        if step >= self.steps - 1:
            return 1.0
        return min((step + 1) * self.increment, 1.0)


@dataclass(frozen=True)
class GrowthPlan:
    """Ordered tasks of one growth cycle."""

    tasks: tuple[GrowthTask, ...]
    total_duration: float
    draw_interval: float

    @property
    def num_steps(self) -> int:
        return sum(task.steps for task in self.tasks)

    def last_step_time(self) -> float:
        """Time of the final paint step, relative to the start of growth."""
        if not self.tasks:
            return 0.0
        return max(t.delay + (t.steps - 1) * self.draw_interval for t in self.tasks)


def segment_increment(distance: float, draw_speed: float) -> float:
    """Fraction revealed per step. Zero-length segments complete in one step."""
    if distance <= 0.0:
        return 1.0
    if distance / MAX_STEPS > draw_speed:
        return LONG_SEGMENT_INCREMENT
    return draw_speed / distance


def segment_duration(distance: float, draw_speed: float, draw_interval: float) -> float:
    """Time this segment adds to the cumulative start delay."""
    return draw_interval * min(MAX_STEPS, math.floor(distance / draw_speed))


def step_count(increment: float) -> int:
    """Paint steps needed to reach fraction 1 at a given increment."""
    if increment >= 1.0:
        return 1
    # Guard against 1/increment landing a hair above an integer
    steps = math.ceil(1.0 / increment - 1e-9)
    return max(1, steps)


def plan_growth(
    segments: list[Segment],
    draw_speed: float,
    draw_interval: float,
) -> GrowthPlan:
    """
    Compute the staggered timeline of a tree.

    Args:
        segments: Tree segments in generation order (parent before children)
        draw_speed: Pixels revealed per step
        draw_interval: Milliseconds between steps

    Returns:
        GrowthPlan with one task per segment, delays strictly cumulative
    """
    tasks = []
    delay = 0.0
    for segment in segments:
        distance = segment.length
        increment = segment_increment(distance, draw_speed)
        duration = segment_duration(distance, draw_speed, draw_interval)
        tasks.append(
            GrowthTask(
                segment=segment,
                delay=delay,
                duration=duration,
                increment=increment,
                steps=step_count(increment),
            )
        )
        delay += duration
    return GrowthPlan(tasks=tuple(tasks), total_duration=delay, draw_interval=draw_interval)


def schedule_growth(
    plan: GrowthPlan,
    timeline: Timeline,
    start_time: float,
    paint: PaintFn,
) -> None:
    """
    Push the first step of every task onto the timeline.

    Each step paints its fraction and, unless the stroke is complete,
    schedules the next step draw_interval later.
    """
    for task in plan.tasks:
        timeline.schedule(start_time + task.delay, _stepper(task, timeline, paint, plan.draw_interval))


def _stepper(task: GrowthTask, timeline: Timeline, paint: PaintFn, interval: float):
    def step(at: float, k: int = 0) -> None:
        paint(task.segment, task.fraction_at(k))
        if k + 1 < task.steps:
            timeline.schedule(at + interval, lambda t: step(t, k + 1))

    return step


class BuilderLock:
    """
    Process-wide flag allowing at most one growth cycle at a time.

    The owner acquires it before scheduling a tree and schedules exactly one
    release after the plan's total duration.
    """

    def __init__(self) -> None:
        self._held = False

    @property
    def held(self) -> bool:
        return self._held

    def acquire(self) -> bool:
        """Take the lock. Returns False if a tree is already growing."""
        if self._held:
            return False
        self._held = True
        return True

    def release(self) -> None:
        if not self._held:
            raise RuntimeError("Builder lock released while not held")
        self._held = False
