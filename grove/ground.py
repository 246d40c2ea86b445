"""
Grass ground and its ambience tint.

The ground layer is generated once: a solid strip along the bottom edge,
then rows of grass blades drawn as quadratic Bezier strokes. Every few
blades the whole layer is darkened slightly, so blades drawn early end up
darker and read as deeper grass.

The generated pixels are captured as the reference (fully lit) colors. On
every tick the visible layer is recomputed from the reference:

    visible.rgb = floor(reference.rgb * ambience)
    visible.a   = reference.a
"""

import numpy as np

from grove.config import GroundConfig
from grove.geometry import Point
from grove.raster import Raster

BLADE_SAMPLES = 6


def quad_bezier_pts(a: Point, cpt: Point, b: Point, n: int) -> list[Point]:
    """Sample n+1 points along a quadratic Bezier curve."""
    pts = []
    for i in range(n + 1):
        t = i / n
        x0 = a.x + t * (cpt.x - a.x)
        y0 = a.y + t * (cpt.y - a.y)
        x1 = cpt.x + t * (b.x - cpt.x)
        y1 = cpt.y + t * (b.y - cpt.y)
        pts.append(Point(x0 + t * (x1 - x0), y0 + t * (y1 - y0)))
    return pts


def blade_curve(root: Point, config: GroundConfig, rng: np.random.Generator) -> list[Point]:
    """Points of one grass blade leaning by offsets picked from the option sets."""
    lo, hi = config.blade_height
    length = rng.uniform(lo, hi)
    bend = rng.choice(config.control_offsets)
    lean = rng.choice(config.tip_offsets)
    tip = Point(root.x + lean, root.y - length)
    control = Point(root.x + bend, root.y - length / 2)
    return quad_bezier_pts(root, control, tip, BLADE_SAMPLES)


def darken(raster: Raster, factor: float) -> None:
    """Scale the RGB of every pixel by factor, alpha untouched."""
    rgb = raster.pixels[..., :3].astype(np.float64) * factor
    raster.pixels[..., :3] = np.floor(rgb).astype(np.uint8)


def generate_terrain(raster: Raster, ground_y: float, config: GroundConfig,
                     rng: np.random.Generator) -> int:
    """
    Paint the grass ground onto an empty layer.

    Args:
        raster: Ground layer
        ground_y: y of the ground line; everything below it is soil
        config: Texture parameters
        rng: Random source for blade shapes and colors

    Returns:
        Number of blades drawn
    """
    raster.fill_rect(0, ground_y, raster.width, raster.height - ground_y, config.base_color)

    blades = 0
    x = 0.0
    while x < raster.width:
        # Roots sit a little below the ground line so blades overlap the strip
        root = Point(x + rng.uniform(0, config.blade_spacing), ground_y + rng.uniform(0, 8))
        color = config.blade_colors[rng.integers(len(config.blade_colors))]
        raster.stroke_polyline(blade_curve(root, config, rng), config.blade_width, color)
        blades += 1
        if blades % config.darken_every == 0:
            darken(raster, config.darken_factor)
        x += config.blade_spacing
    return blades


def retint(reference: np.ndarray, ambience: float) -> np.ndarray:
    """
    Visible ground pixels at a given light level.

    Channels are floored, so a reference value of 201 at ambience 0.5
    becomes 100.

    Args:
        reference: (H, W, 4) fully lit pixels
        ambience: Light level in [0, 1]

    Returns:
        (H, W, 4) uint8 pixels
    """
    ref = np.asarray(reference, dtype=np.float64)
    visible = np.empty(ref.shape, dtype=np.uint8)
    visible[..., :3] = np.clip(np.floor(ref[..., :3] * ambience), 0, 255).astype(np.uint8)
    visible[..., 3] = np.clip(ref[..., 3], 0, 255).astype(np.uint8)
    return visible


class Ground:
    """
    The ground layer.

    Owns its reference buffer; other layers only hand it an ambience value
    through set_ambience().
    """

    def __init__(self, config: GroundConfig, ground_margin: float) -> None:
        self.config = config
        self.ground_margin = ground_margin
        self.surface: Raster | None = None
        self.reference: np.ndarray | None = None
        self.current_ambience = 1.0
        self.blade_count = 0

    def initialize(self, surface: Raster, rng: np.random.Generator) -> None:
        """Generate terrain at full light and capture it as the reference."""
        self.surface = surface
        self.current_ambience = 1.0
        surface.clear()
        ground_y = surface.height - self.ground_margin
        self.blade_count = generate_terrain(surface, ground_y, self.config, rng)
        self.capture_reference()

    def capture_reference(self) -> None:
        """
        Re-derive the reference from what is on the surface now.

        The surface is assumed to be tinted at the current ambience, so its
        colors are divided by it to recover the fully lit values.
        """
        if self.surface is None:
            return
        if self.current_ambience <= 0.0:
            raise ValueError("Cannot recover reference colors from a fully dark ground")
        ref = self.surface.pixels.astype(np.float64)
        ref[..., :3] = ref[..., :3] / self.current_ambience
        self.reference = ref

    def get_reference(self) -> np.ndarray | None:
        return None if self.reference is None else self.reference.copy()

    def set_ambience(self, value: float) -> None:
        if not 0.0 <= value <= 1.0:
            raise ValueError(f"Ambience must be in [0, 1], got {value}")
        self.current_ambience = value

    def get_ambience(self) -> float:
        return self.current_ambience

    def update(self) -> None:
        """Repaint the visible layer from the reference at the current ambience."""
        if self.surface is None or self.reference is None:
            return
        self.surface.pixels[...] = retint(self.reference, self.current_ambience)
