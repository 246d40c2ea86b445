"""
Tests for configuration validation and presets.
"""

import dataclasses

import pytest

from grove.config import (
    DAY,
    CelestialConfig,
    FadeConfig,
    GroundConfig,
    GrowthConfig,
    PaletteConfig,
    SceneConfig,
    StarConfig,
    TreeConfig,
)


class TestPresets:
    """The shipped presets are valid and distinct."""

    def test_default_values(self) -> None:
        config = SceneConfig.default()
        assert config.tree.trunk_height == 200.0
        assert config.tree.trunk_width == 20.0
        assert config.growth.draw_speed == 4.0
        assert config.palette.period == 40000.0
        assert config.palette.size == 4

    def test_small_preset(self) -> None:
        config = SceneConfig.small()
        assert config.tree.trunk_width < SceneConfig.default().tree.trunk_width
        assert config.palette.period == 4000.0

    def test_frozen(self) -> None:
        """Configs cannot be changed after construction."""
        config = TreeConfig()
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.trunk_height = 150.0


class TestValidation:
    """Invalid values are rejected at construction."""

    def test_trunk_outside_range(self) -> None:
        with pytest.raises(ValueError):
            TreeConfig(trunk_height=350.0)

    def test_colored_stroke(self) -> None:
        """Only gray strokes can age."""
        with pytest.raises(ValueError):
            TreeConfig(stroke_color=(255, 0, 0, 255))

    def test_growth_speed(self) -> None:
        with pytest.raises(ValueError):
            GrowthConfig(draw_speed=0.0)
        with pytest.raises(ValueError):
            GrowthConfig(draw_interval=-1.0)

    def test_fade_policy(self) -> None:
        with pytest.raises(ValueError):
            FadeConfig(policy="dissolve")
        with pytest.raises(ValueError):
            FadeConfig(step=0)

    def test_palette_needs_two_frames(self) -> None:
        with pytest.raises(ValueError):
            PaletteConfig(key_frames=(DAY,), ambients=(1.0,))

    def test_palette_ambient_count(self) -> None:
        with pytest.raises(ValueError):
            PaletteConfig(ambients=(1.0, 0.5))

    def test_palette_ambient_range(self) -> None:
        with pytest.raises(ValueError):
            PaletteConfig(ambients=(1.0, 0.35, -0.1, 0.5))

    def test_celestial_loops(self) -> None:
        with pytest.raises(ValueError):
            CelestialConfig(loops=(1000.0, 1000.0))

    def test_star_thresholds(self) -> None:
        with pytest.raises(ValueError):
            StarConfig(threshold=0.05, night_ambient=0.1)

    def test_ground_spacing(self) -> None:
        with pytest.raises(ValueError):
            GroundConfig(blade_spacing=0.0)

    def test_tick_interval(self) -> None:
        with pytest.raises(ValueError):
            SceneConfig(tick_interval=0.0)
