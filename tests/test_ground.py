"""
Tests for the grass ground and its ambience tint.
"""

import math

import numpy as np
import pytest

from grove.config import GroundConfig
from grove.ground import Ground, darken, generate_terrain, quad_bezier_pts, retint
from grove.geometry import Point
from grove.raster import Raster


def make_reference(value: int, alpha: int = 255) -> np.ndarray:
    ref = np.zeros((2, 2, 4), dtype=np.uint8)
    ref[..., :3] = value
    ref[..., 3] = alpha
    return ref


class TestRetint:
    """Tests for visible = reference * ambience."""

    def test_exact_half(self) -> None:
        """200 at ambience 0.5 is 100."""
        out = retint(make_reference(200), 0.5)
        assert np.all(out[..., :3] == 100)

    def test_floor_at_odd_values(self) -> None:
        """201 at ambience 0.5 is floored to 100."""
        out = retint(make_reference(201), 0.5)
        assert np.all(out[..., :3] == 100)

    def test_alpha_untouched(self) -> None:
        """Tint never changes transparency."""
        out = retint(make_reference(200, alpha=77), 0.25)
        assert np.all(out[..., 3] == 77)
        assert np.all(out[..., :3] == 50)

    def test_full_and_zero_light(self) -> None:
        """Ambience 1 is the identity, 0 is black."""
        ref = make_reference(123)
        assert np.array_equal(retint(ref, 1.0), ref)
        assert np.all(retint(ref, 0.0)[..., :3] == 0)

    def test_reference_not_mutated(self) -> None:
        """The input buffer is left as it was."""
        ref = make_reference(180)
        retint(ref, 0.3)
        assert np.all(ref[..., :3] == 180)


class TestTerrain:
    """Tests for one-shot grass generation."""

    def test_blade_count(self) -> None:
        """One blade per spacing across the width."""
        raster = Raster(120, 200)
        config = GroundConfig(blade_spacing=6.0)
        blades = generate_terrain(raster, 150.0, config, np.random.default_rng(0))
        assert blades == math.ceil(120 / 6.0)

    def test_ground_strip_opaque_and_sky_clear(self) -> None:
        """Everything below the ground line is painted, the upper sky is left empty."""
        raster = Raster(120, 200)
        generate_terrain(raster, 150.0, GroundConfig(), np.random.default_rng(0))
        assert np.all(raster.pixels[151:, :, 3] == 255)
        assert not raster.pixels[:100].any()

    def test_same_seed_same_terrain(self) -> None:
        """Terrain is reproducible from its random source."""
        a, b = Raster(60, 100), Raster(60, 100)
        generate_terrain(a, 70.0, GroundConfig(), np.random.default_rng(5))
        generate_terrain(b, 70.0, GroundConfig(), np.random.default_rng(5))
        assert np.array_equal(a.pixels, b.pixels)

    def test_darken_scales_rgb_only(self) -> None:
        """A darkening pass multiplies color and keeps alpha."""
        raster = Raster(2, 2)
        raster.pixels[...] = (200, 100, 50, 255)
        darken(raster, 0.5)
        assert raster.pixels[0, 0].tolist() == [100, 50, 25, 255]

    def test_bezier_endpoints(self) -> None:
        """Curve samples start and end on the anchor points."""
        pts = quad_bezier_pts(Point(0, 0), Point(5, -10), Point(0, -20), 4)
        assert len(pts) == 5
        assert pts[0] == Point(0, 0)
        assert pts[-1] == Point(0, -20)
        assert pts[2] == Point(2.5, -10.0)


class TestGround:
    """Tests for the ground layer."""

    def make_ground(self) -> tuple[Ground, Raster]:
        surface = Raster(80, 120)
        ground = Ground(GroundConfig(), ground_margin=40.0)
        ground.initialize(surface, np.random.default_rng(2))
        return ground, surface

    def test_reference_is_lit_terrain(self) -> None:
        """Right after generation the reference equals the surface."""
        ground, surface = self.make_ground()
        assert np.array_equal(ground.get_reference(), surface.pixels.astype(np.float64))

    def test_update_applies_ambience(self) -> None:
        """Visible pixels follow reference * ambience exactly."""
        ground, surface = self.make_ground()
        reference = ground.get_reference()
        ground.set_ambience(0.5)
        ground.update()
        assert np.array_equal(surface.pixels, retint(reference, 0.5))
        # Reference survives the tint
        assert np.array_equal(ground.get_reference(), reference)

    def test_relight_restores_colors(self) -> None:
        """Going dark and back to full light gives the original ground."""
        ground, surface = self.make_ground()
        original = surface.get_pixels()
        ground.set_ambience(0.05)
        ground.update()
        ground.set_ambience(1.0)
        ground.update()
        assert np.array_equal(surface.pixels, original)

    def test_recapture_divides_by_ambience(self) -> None:
        """Re-capturing a tinted ground recovers the lit colors within flooring error."""
        ground, _ = self.make_ground()
        reference = ground.get_reference()
        ground.set_ambience(0.5)
        ground.update()
        ground.capture_reference()
        assert np.max(np.abs(ground.get_reference() - reference)) <= 2.0

    def test_ambience_range_checked(self) -> None:
        """Ambience outside [0, 1] is a programming error."""
        ground, _ = self.make_ground()
        with pytest.raises(ValueError):
            ground.set_ambience(1.5)
        with pytest.raises(ValueError):
            ground.set_ambience(-0.1)

    def test_not_ready_is_noop(self) -> None:
        """Before initialize nothing is painted or captured."""
        ground = Ground(GroundConfig(), ground_margin=40.0)
        ground.set_ambience(0.5)
        ground.update()
        ground.capture_reference()
        assert ground.get_reference() is None
