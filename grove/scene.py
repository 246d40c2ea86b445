"""
Scene controller.

Owns the four layers (sky, forest, hover preview, ground), the builder lock
and the timeline, and exposes the inbound operations a hosting shell calls
with coordinates already mapped into the scene:

    initialize(width, height)   once the surface exists
    on_trigger(point)           plant a tree
    on_hover(point)             move the trunk preview
    on_scale_adjust(delta)      resize the trunk
    advance(now)                run everything due up to now

Two flows share the timeline but no mutable state apart from the ambience
value handed from sky to ground. Growth is triggered from outside; the
ambience tick repeats every tick_interval.

Before initialize() every operation is a silent no-op.
"""

from dataclasses import replace

import numpy as np

from grove.config import SceneConfig, TreeConfig
from grove.events import HoverEvent, ScaleEvent, SceneEvent, TriggerEvent
from grove.fade import age
from grove.geometry import Point, Segment, generate_tree
from grove.ground import Ground
from grove.growth import BuilderLock, GrowthPlan, plan_growth, schedule_growth
from grove.raster import Raster, composite
from grove.sky import AmbienceEngine, AmbienceFrame
from grove.timeline import Timeline


class Scene:
    """The running simulation. One tree grows at a time."""

    def __init__(self, config: SceneConfig | None = None) -> None:
        self.config = config if config is not None else SceneConfig.default()
        self.lock = BuilderLock()
        self.trunk_height = self.config.tree.trunk_height
        self.timeline: Timeline | None = None
        self.width = 0
        self.height = 0

        self.sky: Raster | None = None
        self.forest: Raster | None = None
        self.preview: Raster | None = None
        self.ground_layer: Raster | None = None
        self.ambience: AmbienceEngine | None = None
        self.ground: Ground | None = None

        # Counters for reporting
        self.trees_planted = 0
        self.triggers_rejected = 0
        self.ticks = 0

    @property
    def ready(self) -> bool:
        return self.timeline is not None

    @property
    def now(self) -> float:
        return self.timeline.now if self.timeline is not None else 0.0

    def initialize(self, width: int, height: int, start_time: float = 0.0,
                   seed: int | None = None) -> None:
        """
        Allocate layers, generate the ground and start the ambience clock.

        Args:
            width: Surface width in pixels
            height: Surface height in pixels
            start_time: Clock reading (ms) at which the day/night cycle starts
            seed: Seed for terrain and star placement (None = random)
        """
        rng = np.random.default_rng(seed)
        self.width, self.height = width, height
        # A fresh timeline drops any pending release, so the lock starts over too
        self.lock = BuilderLock()
        self.sky = Raster(width, height)
        self.forest = Raster(width, height)
        self.preview = Raster(width, height)
        self.ground_layer = Raster(width, height)

        self.timeline = Timeline(start_time)
        self.ambience = AmbienceEngine(
            self.config.palette, self.config.celestial, self.config.stars, rng
        )
        self.ground = Ground(self.config.ground, self.config.tree.ground_margin)
        self.ground.initialize(self.ground_layer, rng)

        self.ambience.initialize(self.sky, start_time)
        self._apply_ambience(self.ambience.get_ambience())
        self.timeline.every(
            self.config.tick_interval, self._tick, start=start_time + self.config.tick_interval
        )

    # -------------------------------------------------------------------------
    # Periodic ambience
    # -------------------------------------------------------------------------

    def _tick(self, at: float) -> None:
        frame: AmbienceFrame | None = self.ambience.tick(at)
        if frame is not None:
            self._apply_ambience(frame.ambience)
        self.ticks += 1

    def _apply_ambience(self, value: float) -> None:
        self.ground.set_ambience(value)
        self.ground.update()

    def get_ambience(self) -> float | None:
        if self.ambience is None:
            return None
        return self.ambience.get_ambience()

    # -------------------------------------------------------------------------
    # Inbound operations
    # -------------------------------------------------------------------------

    def tree_config(self) -> TreeConfig:
        """Tree shape with the current (wheel-adjusted) trunk height."""
        return replace(self.config.tree, trunk_height=self.trunk_height)

    def on_trigger(self, point: Point, now: float | None = None) -> GrowthPlan | None:
        """
        Start growing a tree planted at point.x.

        Runs everything due up to `now` first, ages the trees already drawn,
        then schedules the new one. Rejected while another tree is growing.

        Returns:
            The growth plan, or None if rejected or not initialized
        """
        if not self.ready:
            return None
        at = self.timeline.now if now is None else max(now, self.timeline.now)
        # Finish the previous tree and its lock release before deciding
        self.timeline.advance(at)
        if self.lock.held:
            self.triggers_rejected += 1
            return None

        self.forest.put_pixels(age(self.forest.pixels, self.config.fade))
        self.lock.acquire()

        segments = generate_tree(point.x, self.height, self.tree_config())
        growth = self.config.growth
        plan = plan_growth(segments, growth.draw_speed, growth.draw_interval)
        schedule_growth(plan, self.timeline, at, self._paint_segment)
        self.timeline.schedule(at + plan.total_duration, lambda _t: self.lock.release())
        self.trees_planted += 1
        return plan

    def _paint_segment(self, segment: Segment, fraction: float) -> None:
        self.forest.stroke_line(
            segment.end, segment.point_at(fraction), segment.width,
            self.config.tree.stroke_color,
        )

    def on_hover(self, point: Point) -> bool:
        """Draw the trunk preview under the pointer. False if rejected."""
        if not self.ready or self.lock.held:
            return False
        tree = self.config.tree
        w, h = tree.trunk_width, self.trunk_height
        self.preview.clear()
        self.preview.fill_rect(
            point.x - w / 2, self.height - h - tree.ground_margin, w, h, tree.preview_color
        )
        return True

    def on_scale_adjust(self, delta: float, point: Point | None = None) -> bool:
        """
        Shrink (delta > 0) or grow (delta < 0) the trunk by one step.

        The height stays within [min_height, max_height]. The preview is
        redrawn at point when one is given. False if rejected.
        """
        if not self.ready or self.lock.held:
            return False
        tree = self.config.tree
        if delta > 0:
            self.trunk_height = max(tree.min_height, self.trunk_height - tree.height_step)
        elif delta < 0:
            self.trunk_height = min(tree.max_height, self.trunk_height + tree.height_step)
        if point is not None:
            self.on_hover(point)
        return True

    def dispatch(self, event: SceneEvent, now: float | None = None):
        """Route a validated event to its operation."""
        if isinstance(event, TriggerEvent):
            return self.on_trigger(event.point, now)
        if isinstance(event, HoverEvent):
            return self.on_hover(event.point)
        if isinstance(event, ScaleEvent):
            return self.on_scale_adjust(event.delta, event.point)
        raise TypeError(f"Unsupported event: {type(event).__name__}")

    # -------------------------------------------------------------------------
    # Clock and output
    # -------------------------------------------------------------------------

    def advance(self, now: float) -> int:
        """Run every growth step, lock release and tick due up to now."""
        if not self.ready:
            return 0
        return self.timeline.advance(now)

    def compose(self) -> np.ndarray | None:
        """Current frame: sky, forest, preview and ground, bottom to top."""
        if not self.ready:
            return None
        return composite([self.sky, self.forest, self.preview, self.ground_layer])
