"""
Tests for the scene controller.

These tests drive a full scene through the timeline: planting, the builder
lock, aging of old trees, the hover preview, trunk resizing and the
ambience handoff from sky to ground.
"""

import numpy as np
import pytest

from grove.config import SceneConfig
from grove.events import parse_event
from grove.geometry import Point
from grove.ground import retint
from grove.scene import Scene


def make_scene(width: int = 200, height: int = 600) -> Scene:
    scene = Scene(SceneConfig.default())
    scene.initialize(width, height, seed=0)
    return scene


class TestNotReady:
    """Before initialize every operation is a silent no-op."""

    def test_operations_ignored(self) -> None:
        scene = Scene()
        assert scene.on_trigger(Point(10, 10)) is None
        assert scene.on_hover(Point(10, 10)) is False
        assert scene.on_scale_adjust(1.0) is False
        assert scene.advance(1000.0) == 0
        assert scene.compose() is None
        assert scene.get_ambience() is None
        assert scene.trunk_height == 200.0


class TestReinitialize:
    """Re-initializing starts a clean scene."""

    def test_reinitialize_during_growth_frees_lock(self) -> None:
        scene = make_scene()
        plan = scene.on_trigger(Point(100, 500))
        scene.initialize(200, 600, seed=1)
        assert not scene.lock.held
        scene.advance(10 * plan.total_duration)
        assert not scene.lock.held
        assert scene.on_trigger(Point(100, 500)) is not None
        assert scene.on_hover(Point(50, 10)) is False

    def test_reinitialize_clears_forest(self) -> None:
        scene = make_scene()
        plan = scene.on_trigger(Point(100, 500))
        scene.advance(plan.total_duration)
        scene.initialize(200, 600, seed=0)
        assert not scene.forest.pixels.any()
        assert scene.on_hover(Point(50, 10))


class TestTrigger:
    """Tests for planting and the builder lock."""

    def test_plan_for_default_tree(self) -> None:
        """A click plants a full tree with its trunk above the ground margin."""
        scene = make_scene()
        plan = scene.on_trigger(Point(100, 500))
        assert plan is not None
        assert len(plan.tasks) == 511
        trunk = plan.tasks[0].segment
        assert trunk.start == (100, 350)
        assert trunk.end == (100, 550)
        assert scene.lock.held
        assert scene.trees_planted == 1

    def test_second_trigger_rejected_while_growing(self) -> None:
        """Nothing is scheduled or painted for a click during growth."""
        scene = make_scene()
        scene.on_trigger(Point(100, 500))
        scene.advance(100.0)
        pending = len(scene.timeline)
        strokes = scene.forest.stroke_count
        assert scene.on_trigger(Point(150, 500)) is None
        assert len(scene.timeline) == pending
        assert scene.forest.stroke_count == strokes
        assert scene.triggers_rejected == 1

    def test_trigger_after_release_accepted(self) -> None:
        """A trigger timed past the release catches the clock up first."""
        scene = make_scene()
        first = scene.on_trigger(Point(100, 500), now=0.0)
        second = scene.on_trigger(Point(180, 500), now=first.total_duration + 1)
        assert second is not None
        assert scene.triggers_rejected == 0
        # The first tree was finished, then aged once
        assert scene.forest.stroke_count == first.num_steps
        assert scene.forest.pixels[450, 100].tolist() == [0, 0, 0, 215]

    def test_trigger_before_release_rejected(self) -> None:
        scene = make_scene()
        first = scene.on_trigger(Point(100, 500), now=0.0)
        assert scene.on_trigger(Point(180, 500), now=first.total_duration - 1) is None
        assert scene.lock.held

    def test_lock_released_after_total_duration(self) -> None:
        """Every step is painted by the time the lock is released."""
        scene = make_scene()
        plan = scene.on_trigger(Point(100, 500))
        scene.advance(plan.total_duration - 1)
        assert scene.lock.held
        scene.advance(plan.total_duration)
        assert not scene.lock.held
        assert scene.forest.stroke_count == plan.num_steps

    def test_growth_paints_trunk(self) -> None:
        """The finished trunk is drawn in the stroke color."""
        scene = make_scene()
        plan = scene.on_trigger(Point(100, 500))
        scene.advance(plan.total_duration)
        assert scene.forest.pixels[450, 100].tolist() == [0, 0, 0, 255]

    def test_old_tree_ages_on_next_trigger(self) -> None:
        """Planting a new tree fades the finished one by one step."""
        scene = make_scene()
        plan = scene.on_trigger(Point(100, 500))
        scene.advance(plan.total_duration)
        assert scene.on_trigger(Point(180, 500)) is not None
        assert scene.forest.pixels[450, 100].tolist() == [0, 0, 0, 215]

    def test_trigger_at_later_time(self) -> None:
        """Growth starts at the given time rather than the clock reading."""
        scene = make_scene()
        plan = scene.on_trigger(Point(100, 500), now=500.0)
        scene.advance(499.0)
        assert scene.forest.stroke_count == 0
        scene.advance(500.0 + plan.total_duration)
        assert not scene.lock.held


class TestPreviewAndScale:
    """Tests for the hover preview and wheel resizing."""

    def test_hover_draws_trunk_rect(self) -> None:
        """The preview is a trunk-sized rectangle above the ground margin."""
        scene = make_scene()
        assert scene.on_hover(Point(50, 10))
        alpha = scene.preview.pixels[..., 3]
        assert (alpha > 0).sum() == 20 * 200
        assert alpha[400, 50] == 255
        assert alpha[300, 50] == 0

    def test_hover_replaces_previous_preview(self) -> None:
        """Only one preview is visible at a time."""
        scene = make_scene()
        scene.on_hover(Point(50, 10))
        scene.on_hover(Point(150, 10))
        alpha = scene.preview.pixels[..., 3]
        assert alpha[400, 50] == 0
        assert alpha[400, 150] == 255

    def test_hover_rejected_while_growing(self) -> None:
        scene = make_scene()
        scene.on_trigger(Point(100, 500))
        assert scene.on_hover(Point(50, 10)) is False
        assert not scene.preview.pixels.any()

    def test_scale_clamped(self) -> None:
        """Trunk height stays within [100, 300]."""
        scene = make_scene()
        for _ in range(15):
            scene.on_scale_adjust(1.0)
        assert scene.trunk_height == 100.0
        for _ in range(25):
            scene.on_scale_adjust(-1.0)
        assert scene.trunk_height == 300.0

    def test_scale_changes_next_tree(self) -> None:
        """A resized trunk is used by the next planted tree."""
        scene = make_scene()
        scene.on_scale_adjust(1.0)
        plan = scene.on_trigger(Point(100, 500))
        assert plan.tasks[0].segment.length == pytest.approx(190.0)

    def test_scale_rejected_while_growing(self) -> None:
        scene = make_scene()
        scene.on_trigger(Point(100, 500))
        assert scene.on_scale_adjust(1.0) is False
        assert scene.trunk_height == 200.0


class TestAmbienceHandoff:
    """Tests for the sky-to-ground ambience flow."""

    def test_ground_follows_sky(self) -> None:
        """Half way through the first transition the ground is tinted to match."""
        scene = make_scene()
        scene.advance(30000.0)
        ambience = scene.get_ambience()
        assert ambience == pytest.approx(0.675)
        assert scene.ground.get_ambience() == ambience
        expected = retint(scene.ground.get_reference(), ambience)
        assert np.array_equal(scene.ground_layer.pixels, expected)

    def test_ticks_keep_running(self) -> None:
        """The ambience tick repeats every tick interval."""
        scene = make_scene()
        scene.advance(1000.0)
        assert scene.ticks == 10


class TestDispatchAndCompose:
    """Tests for event routing and frame output."""

    def test_dispatch_validated_events(self) -> None:
        scene = make_scene()
        assert scene.dispatch(parse_event({"kind": "hover", "x": 50, "y": 10})) is True
        assert scene.dispatch(parse_event({"kind": "scale", "delta": -3})) is True
        assert scene.trunk_height == 210.0
        plan = scene.dispatch(parse_event({"kind": "trigger", "x": 100, "y": 500}))
        assert plan is not None

    def test_dispatch_rejects_unknown_objects(self) -> None:
        scene = make_scene()
        with pytest.raises(TypeError):
            scene.dispatch("click")

    def test_compose_is_opaque_frame(self) -> None:
        """Sky at the bottom makes every frame opaque."""
        scene = make_scene()
        scene.advance(100.0)
        frame = scene.compose()
        assert frame.shape == (600, 200, 4)
        assert np.all(frame[..., 3] == 255)
