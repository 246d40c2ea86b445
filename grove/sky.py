"""
Day/night ambience.

Two independent clocks run from the moment the engine starts:

Palette clock:
    The palette is a ring of N key-frames. One cycle lasts
    next_lerp_time + lerp_time: key-frame i is held, then fades into
    key-frame (i + 1) mod N. Color channels are floored to integers:

        color    = floor((C[i1] - C[i0]) * t / lerp_time + C[i0])
        ambience = (A[i1] - A[i0]) * t / lerp_time + A[i0]

Celestial clock:
    Loops through sunset, moon rise and an empty sky. Within a phase the
    progress p in [0, 1) places the body on its path:

        sun:  x = -60 + 400 p,      y = 400 + (H - 400) p
        moon: x = W + 50 - 300 p,   y = 300 - 350 p

Stars drift slowly to the right and only show when ambience drops below a
darkness threshold.

The ambience scalar is the engine's only output consumed elsewhere (by the
ground tint).
"""

import math
from dataclasses import dataclass
from typing import NamedTuple

import numpy as np

from grove.config import CELESTIAL_PHASES, CelestialConfig, PaletteConfig, StarConfig
from grove.geometry import Point
from grove.raster import Raster

SUN_INNER = 20.0
SUN_OUTER = 50.0
MOON_LIT_RADIUS = 25.0
MOON_SHADOW_RADIUS = 30.0
MOON_LIT_OFFSET = 15.0
STAR_AREA = 200.0  # Square pixels of sky per star at density 1


# =============================================================================
# PALETTE CLOCK
# =============================================================================


class PaletteState(NamedTuple):
    """
    Palette clock reading.

    Attributes:
        cycle: Number of completed cycles since start
        i0: Key-frame fading out
        i1: Key-frame fading in
        t: Time into the transition (0 while holding)
        fraction: t / lerp_time
        stops: (4, 3) integer gradient stop colors
        ambience: Scene light level
    """

    cycle: int
    i0: int
    i1: int
    t: float
    fraction: float
    stops: np.ndarray
    ambience: float


def lerp_colors(c0: np.ndarray, c1: np.ndarray, fraction: float) -> np.ndarray:
    """Interpolate gradient stops, flooring every channel."""
    c0 = np.asarray(c0, dtype=np.float64)
    c1 = np.asarray(c1, dtype=np.float64)
    return np.floor((c1 - c0) * fraction + c0).astype(np.int64)


def palette_state(elapsed: float, palette: PaletteConfig) -> PaletteState:
    """
    Read the palette clock.

    Args:
        elapsed: Milliseconds since the engine started (>= 0)
        palette: Key-frames, intensities and durations

    Returns:
        PaletteState for that instant
    """
    if elapsed < 0:
        raise ValueError("Elapsed time must be nonnegative")
    cycle = int(elapsed // palette.period)
    phase = elapsed - cycle * palette.period
    i0 = cycle % palette.size
    i1 = (cycle + 1) % palette.size

    t = max(0.0, phase - palette.next_lerp_time)
    fraction = t / palette.lerp_time

    stops = lerp_colors(palette.key_frames[i0], palette.key_frames[i1], fraction)
    a0, a1 = palette.ambients[i0], palette.ambients[i1]
    ambience = (a1 - a0) * fraction + a0
    return PaletteState(cycle, i0, i1, t, fraction, stops, ambience)


# =============================================================================
# CELESTIAL CLOCK
# =============================================================================


class CelestialState(NamedTuple):
    """Which body is in the sky, how far along its path, and where."""

    phase: str
    progress: float
    position: Point | None


def celestial_phase(elapsed: float, loops: tuple[float, ...]) -> tuple[int, float]:
    """
    Active phase index and its progress in [0, 1).

    Phases follow each other in order and wrap around after the last one.
    """
    total = sum(loops)
    into = elapsed % total
    for index, duration in enumerate(loops):
        if into < duration:
            return index, into / duration
        into -= duration
    # Only reachable through float rounding at the very end of a loop
    return 0, 0.0


def celestial_position(phase: str, progress: float, width: int, height: int) -> Point | None:
    """Screen position of the active body, None for an empty sky."""
    if phase == "sun":
        return Point(-60 + 400 * progress, 400 + (height - 400) * progress)
    if phase == "moon":
        return Point(width + 50 - 300 * progress, 300 - 350 * progress)
    return None


def celestial_state(elapsed: float, config: CelestialConfig,
                    width: int, height: int) -> CelestialState:
    index, progress = celestial_phase(elapsed, config.loops)
    phase = CELESTIAL_PHASES[index]
    return CelestialState(phase, progress, celestial_position(phase, progress, width, height))


# =============================================================================
# STAR FIELD
# =============================================================================


def star_speeds(count: int, base_speed: float) -> np.ndarray:
    """Per-star drift speed: every 3rd star 2.5x, the remaining multiples of 23 5x."""
    index = np.arange(count)
    multiplier = np.ones(count)
    multiplier[index % 23 == 0] = 5.0
    multiplier[index % 3 == 0] = 2.5
    return base_speed * multiplier


def star_visibility(ambience: float, config: StarConfig) -> tuple[float, int]:
    """
    Star opacity and gray level at a given ambience.

    Both grow linearly as ambience falls below the threshold. Opacity is 0
    at the threshold and 1 at night_ambient.

    Returns:
        (alpha in [0, 1], gray in [0, 255])
    """
    if ambience >= config.threshold:
        return 0.0, 0
    span = config.threshold - config.night_ambient
    alpha = min(1.0, max(0.0, 1.0 - (ambience - config.night_ambient) / span))
    intensity = 1.0 - (ambience / 2 - config.night_ambient) / span
    gray = min(255, max(0, math.floor(config.max_gray * intensity)))
    return alpha, gray


class StarField:
    """Fixed set of star positions drifting horizontally and wrapping around."""

    def __init__(self, width: int, height: int, config: StarConfig,
                 rng: np.random.Generator) -> None:
        self.width = width
        self.config = config
        count = math.floor((width * height / STAR_AREA) * config.density)
        # Keep stars off the very edge so the 1px dots stay whole
        self.x = rng.integers(0, max(1, width - 10), size=count).astype(np.float64)
        self.y = rng.integers(0, max(1, height - 10), size=count).astype(np.float64)
        self.speeds = star_speeds(count, config.base_speed)

    def __len__(self) -> int:
        return len(self.x)

    def drift(self, dt: float) -> None:
        """Move every star right by its speed times dt, wrapping at the width."""
        self.x = (self.x + self.speeds * dt) % self.width

    def paint(self, raster: Raster, ambience: float) -> None:
        alpha, gray = star_visibility(ambience, self.config)
        if alpha <= 0.0 or len(self) == 0:
            return
        cols = np.clip(self.x.astype(np.int64), 0, raster.width - 1)
        rows = np.clip(self.y.astype(np.int64), 0, raster.height - 1)
        dst = raster.pixels[rows, cols].astype(np.float64)
        dst[:, :3] = dst[:, :3] * (1.0 - alpha) + gray * alpha
        raster.pixels[rows, cols] = np.round(dst).astype(np.uint8)


# =============================================================================
# AMBIENCE ENGINE
# =============================================================================


@dataclass
class AmbienceFrame:
    """Everything computed in one tick."""

    time: float
    palette: PaletteState
    celestial: CelestialState | None
    ambience: float


class AmbienceEngine:
    """
    Drives the sky layer and publishes the ambience scalar.

    Until initialize() attaches a surface, tick() is a no-op returning None.
    """

    def __init__(self, palette: PaletteConfig, celestial: CelestialConfig,
                 stars: StarConfig, rng: np.random.Generator | None = None) -> None:
        self.palette = palette
        self.celestial = celestial
        self.star_config = stars
        self.rng = rng if rng is not None else np.random.default_rng()
        self.surface: Raster | None = None
        self.stars: StarField | None = None
        self.start_time = 0.0
        self.last_time = 0.0
        # Before the first tick the sky shows the first key-frame
        self.current_ambience = palette.ambients[0]
        self.last_frame: AmbienceFrame | None = None

    def initialize(self, surface: Raster, start_time: float = 0.0) -> None:
        self.surface = surface
        self.start_time = start_time
        self.last_time = start_time
        self.stars = StarField(surface.width, surface.height, self.star_config, self.rng)
        self.tick(start_time)

    def get_ambience(self) -> float:
        return self.current_ambience

    def tick(self, now: float) -> AmbienceFrame | None:
        """Advance both clocks to `now` and repaint the sky."""
        if self.surface is None:
            return None
        elapsed = now - self.start_time
        state = palette_state(elapsed, self.palette)
        self.current_ambience = state.ambience

        celestial = None
        if self.celestial.enabled:
            celestial = celestial_state(elapsed, self.celestial,
                                        self.surface.width, self.surface.height)

        self.surface.fill_vertical_gradient(state.stops)
        if celestial is not None:
            self._paint_celestial(celestial)

        self.stars.drift(now - self.last_time)
        self.stars.paint(self.surface, state.ambience)
        self.last_time = now

        self.last_frame = AmbienceFrame(now, state, celestial, state.ambience)
        return self.last_frame

    def _paint_celestial(self, celestial: CelestialState) -> None:
        pos = celestial.position
        if celestial.phase == "sun":
            self.surface.radial_glow(pos, SUN_INNER, SUN_OUTER, self.celestial.sun_color)
        elif celestial.phase == "moon":
            # Lit disc, then a slightly larger disc of sky on top leaves a crescent
            window = self.surface.disc_mask(pos, MOON_SHADOW_RADIUS)
            sky = None
            if window is not None:
                rows, cols, mask = window
                sky = self.surface.pixels[rows, cols][mask]
            lit = Point(pos.x + MOON_LIT_OFFSET, pos.y + MOON_LIT_OFFSET)
            self.surface.fill_disc(lit, MOON_LIT_RADIUS, (*self.celestial.moon_color, 255))
            if sky is not None:
                self.surface.pixels[rows, cols][mask] = sky
