"""
Single ordered timeline of deferred callbacks.

All animation in the scene (growth steps, builder lock release, periodic
ambience ticks) is an entry in one min-heap keyed by due time. One driving
clock calls advance(now); every entry due at or before now runs in time
order, ties broken by insertion order. Callbacks may schedule further
entries, which run in the same advance() call if they are already due.

There are no threads and nothing blocks: a callback that wants to continue
later simply schedules itself again.
"""

import heapq
import itertools
from collections.abc import Callable

Callback = Callable[[float], None]


class Timeline:
    """Min-heap of (time, sequence, callback) entries advanced by one clock."""

    def __init__(self, now: float = 0.0) -> None:
        self._heap: list[tuple[float, int, Callback]] = []
        self._counter = itertools.count()
        self.now = now

    def __len__(self) -> int:
        return len(self._heap)

    def schedule(self, at: float, callback: Callback) -> None:
        """Run callback(at) once the clock reaches `at`."""
        heapq.heappush(self._heap, (at, next(self._counter), callback))

    def schedule_in(self, delay: float, callback: Callback) -> None:
        """Run callback `delay` milliseconds after the current clock."""
        self.schedule(self.now + delay, callback)

    def every(self, interval: float, callback: Callback, start: float | None = None) -> None:
        """Run callback every `interval` milliseconds, first at `start`."""
        if interval <= 0:
            raise ValueError("Interval must be positive")
        first = self.now if start is None else start

        def repeat(t: float) -> None:
            callback(t)
            self.schedule(t + interval, repeat)

        self.schedule(first, repeat)

    def next_time(self) -> float | None:
        """Due time of the earliest pending entry, or None when idle."""
        return self._heap[0][0] if self._heap else None

    def advance(self, now: float) -> int:
        """
        Run every entry due at or before `now`.

        Each callback receives its own scheduled time, not `now`, so steps
        that fell behind still see a consistent schedule.

        Returns:
            Number of callbacks run
        """
        if now < self.now:
            raise ValueError(f"Clock moved backwards: {now} < {self.now}")
        ran = 0
        while self._heap and self._heap[0][0] <= now:
            at, _, callback = heapq.heappop(self._heap)
            self.now = max(self.now, at)
            callback(at)
            ran += 1
        self.now = now
        return ran
