"""
Headless scene sessions.

Runs a scene against a simulated clock, feeding it a script of timed
events, and records what happened. The result is a trace with the ambience
history and growth statistics, plus helpers to render or save frames with
matplotlib.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field

import matplotlib.pyplot as plt
import numpy as np

from grove.config import SceneConfig
from grove.events import SceneEvent
from grove.growth import GrowthPlan
from grove.scene import Scene

# (time in ms, event)
ScriptEntry = tuple[float, SceneEvent]


@dataclass
class SessionTrace:
    """
    Record of a headless session.

    Contains:
    - times: Clock reading after each step
    - ambience_history: Ambience at each step
    - plans: Growth plans accepted, in order
    - rejected: Events turned away by the builder lock
    - frames: Composited frames captured along the way
    """

    times: list[float] = field(default_factory=list)
    ambience_history: list[float] = field(default_factory=list)
    plans: list[GrowthPlan] = field(default_factory=list)
    rejected: int = 0
    strokes: int = 0
    frames: list[np.ndarray] = field(default_factory=list)

    def get_scalar_summary(self) -> dict[str, float]:
        """
        Key numbers of the session:
        - Duration: Simulated milliseconds
        - Trees: Growth cycles started
        - Rejected: Events turned away while a tree was growing
        - Segments: Branch segments scheduled
        - Strokes: Partial stroke commands painted
        - Min/Max/MeanAmbience: Light level over the session
        """
        ambience = np.array(self.ambience_history) if self.ambience_history else np.zeros(1)
        return {
            "Duration": self.times[-1] - self.times[0] if self.times else 0.0,
            "Trees": len(self.plans),
            "Rejected": self.rejected,
            "Segments": sum(len(p.tasks) for p in self.plans),
            "Strokes": self.strokes,
            "MinAmbience": float(ambience.min()),
            "MaxAmbience": float(ambience.max()),
            "MeanAmbience": float(ambience.mean()),
        }

    def print_summary(self) -> None:
        """Print a formatted summary table to stdout."""
        summary = self.get_scalar_summary()
        print("\n" + "=" * 40)
        print("SESSION SUMMARY")
        print("=" * 40)
        for key, value in summary.items():
            if isinstance(value, float):
                print(f"{key:>14}: {value:10.3f}")
            else:
                print(f"{key:>14}: {value:10d}")
        print("=" * 40)


def run_session(
    scene: Scene,
    duration: float,
    script: Iterable[ScriptEntry] = (),
    step: float | None = None,
    capture_every: float | None = None,
) -> SessionTrace:
    """
    Drive an initialized scene through `duration` milliseconds.

    Args:
        scene: Scene after initialize()
        duration: Simulated milliseconds to run
        script: Timed events, dispatched when the clock reaches their time
        step: Clock increment (defaults to the scene tick interval)
        capture_every: Capture a composited frame this often (None = never)

    Returns:
        SessionTrace of the run
    """
    if not scene.ready:
        raise ValueError("Scene must be initialized before running a session")
    step = scene.config.tick_interval if step is None else step
    pending = sorted(script, key=lambda entry: entry[0])
    trace = SessionTrace()
    start = scene.now
    strokes_before = scene.forest.stroke_count
    next_capture = start

    t = start
    while t <= start + duration:
        while pending and start + pending[0][0] <= t:
            at, event = pending.pop(0)
            scene.advance(max(start + at, scene.now))
            result = scene.dispatch(event, start + at)
            if result is None or result is False:
                trace.rejected += 1
            elif result is not True:
                trace.plans.append(result)
        scene.advance(t)
        trace.times.append(t)
        trace.ambience_history.append(scene.get_ambience())
        if capture_every is not None and t >= next_capture:
            trace.frames.append(scene.compose())
            next_capture += capture_every
        t += step

    trace.strokes = scene.forest.stroke_count - strokes_before
    return trace


def run_default_session(duration: float = 60000.0, seed: int = 42,
                        size: tuple[int, int] = (480, 360)) -> tuple[Scene, SessionTrace]:
    """A small scene with a handful of clicks spread over the session."""
    from grove.events import HoverEvent, TriggerEvent

    scene = Scene(SceneConfig.small())
    width, height = size
    scene.initialize(width, height, seed=seed)
    script = [
        (0.0, HoverEvent(x=width * 0.3, y=height / 2)),
        (100.0, TriggerEvent(x=width * 0.3, y=height / 2)),
        (200.0, TriggerEvent(x=width * 0.6, y=height / 2)),  # Rejected, still growing
        (10000.0, TriggerEvent(x=width * 0.7, y=height / 2)),
    ]
    trace = run_session(scene, duration, script, capture_every=duration / 4)
    return scene, trace


def render_frame(frame: np.ndarray, figsize: tuple = (8, 6)) -> tuple[plt.Figure, plt.Axes]:
    """Show a composited frame on a matplotlib figure."""
    fig, ax = plt.subplots(figsize=figsize)
    ax.imshow(frame)
    ax.set_aspect("equal")
    ax.axis("off")
    return fig, ax


def save_frame(frame: np.ndarray, filepath: str) -> None:
    """Write a composited frame to an image file."""
    plt.imsave(filepath, frame)
    print(f"Saved to {filepath}")
