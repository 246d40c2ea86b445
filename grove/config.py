"""
Configuration and type definitions for the scene animation engine.

This module defines every tunable constant of the scene. Nothing in the
engine is hard-coded: trunk size, branch spread, drawing speed, the sky
palette, the celestial loop, the star field and the ground texture all come
from the dataclasses below.

Time is measured in milliseconds throughout. Colors are 8-bit RGB(A) tuples.

Sections:
    TreeConfig: Trunk size and spread, hover preview, height range
    GrowthConfig: Stroke reveal speed
    FadeConfig: How previously drawn trees age
    PaletteConfig: Day/night key-frames and cycle durations
    CelestialConfig: Sun/moon motion loop
    StarConfig: Night star field
    GroundConfig: Grass terrain texture
    SceneConfig: Everything above plus the tick interval
"""

from dataclasses import dataclass, field

RGB = tuple[int, int, int]
RGBA = tuple[int, int, int, int]


def _check_color(name: str, color: tuple) -> None:
    if not all(0 <= c <= 255 for c in color):
        raise ValueError(f"{name} channels must be in [0, 255], got {color}")


@dataclass(frozen=True)
class TreeConfig:
    """
    Fractal tree shape and the pointer-driven controls around it.

    trunk_width drives the branch count: each level is 2 pixels thinner and
    recursion stops at width 2, so a width of 20 gives 9 levels.
    """

    trunk_height: float = 200.0  # Initial trunk length in pixels
    trunk_width: float = 20.0  # Initial trunk line width
    spread_angle: float = 30.0  # Degrees between a branch and its parent
    min_height: float = 100.0  # Lower bound for wheel adjustment
    max_height: float = 300.0  # Upper bound for wheel adjustment
    height_step: float = 10.0  # Trunk height change per wheel notch
    ground_margin: float = 50.0  # Trunk base sits this far above the bottom
    stroke_color: RGBA = (0, 0, 0, 255)
    preview_color: RGBA = (0, 0, 0, 255)

    def __post_init__(self) -> None:
        if self.trunk_width <= 0:
            raise ValueError("Trunk width must be positive")
        if self.min_height <= 0 or self.min_height > self.max_height:
            raise ValueError("Height range must satisfy 0 < min_height <= max_height")
        if not self.min_height <= self.trunk_height <= self.max_height:
            raise ValueError(
                f"Trunk height {self.trunk_height} outside "
                f"[{self.min_height}, {self.max_height}]"
            )
        if self.height_step <= 0:
            raise ValueError("Height step must be positive")
        if self.ground_margin < 0:
            raise ValueError("Ground margin must be nonnegative")
        _check_color("stroke_color", self.stroke_color)
        _check_color("preview_color", self.preview_color)
        # Fade only ages gray strokes
        r, g, b, _ = self.stroke_color
        if not r == g == b:
            raise ValueError("Stroke color must be a gray (R == G == B)")


@dataclass(frozen=True)
class GrowthConfig:
    """Stroke reveal speed.

    A segment advances draw_speed pixels every draw_interval milliseconds,
    but never takes more than 20 steps.
    """

    draw_speed: float = 4.0  # Pixels revealed per step
    draw_interval: float = 10.0  # Milliseconds between steps

    def __post_init__(self) -> None:
        if self.draw_speed <= 0:
            raise ValueError("Draw speed must be positive")
        if self.draw_interval <= 0:
            raise ValueError("Draw interval must be positive")


FADE_POLICIES = ("alpha", "brighten")


@dataclass(frozen=True)
class FadeConfig:
    """
    How previously drawn trees age when a new tree is triggered.

    policy:
        "alpha": gray strokes lose opacity (fade into the sky behind them)
        "brighten": gray strokes move toward white
    """

    policy: str = "alpha"
    step: int = 40  # Channel change per aging pass

    def __post_init__(self) -> None:
        if self.policy not in FADE_POLICIES:
            raise ValueError(f"Unknown fade policy: {self.policy!r}")
        if not 0 < self.step <= 255:
            raise ValueError("Fade step must be in (0, 255]")


# Four vertical gradient stops per key-frame (top to bottom)
DAY: tuple[RGB, ...] = ((0x00, 0x00, 0x3F), (0x00, 0x3F, 0x7F), (0x1F, 0x5F, 0xC0), (0x3F, 0xA0, 0xFF))
DUSK: tuple[RGB, ...] = ((0x00, 0x3F, 0x7F), (0x50, 0x4F, 0x7F), (0xB2, 0x74, 0x82), (0xFF, 0x90, 0x00))
NIGHT: tuple[RGB, ...] = ((0x00, 0x00, 0x00), (0x00, 0x0F, 0x3F), (0x00, 0x28, 0x50), (0x00, 0x1F, 0x3F))
DAWN: tuple[RGB, ...] = ((0x1F, 0x00, 0x5F), (0x1F, 0x0F, 0x60), (0xA0, 0x1F, 0x1F), (0xFF, 0x7F, 0x00))


@dataclass(frozen=True)
class PaletteConfig:
    """
    Cyclic day/night palette.

    Each cycle holds key-frame i for next_lerp_time, then fades to key-frame
    (i + 1) mod N over lerp_time. The ambient intensity of a key-frame is
    the scene light level while it is fully shown.
    """

    key_frames: tuple[tuple[RGB, ...], ...] = (DAY, DUSK, NIGHT, DAWN)
    ambients: tuple[float, ...] = (1.0, 0.35, 0.05, 0.5)  # day, dusk, night, dawn
    lerp_time: float = 20000.0  # Time taken to fade sky colors
    next_lerp_time: float = 20000.0  # Waiting time until next fade

    def __post_init__(self) -> None:
        if len(self.key_frames) < 2:
            raise ValueError("Palette needs at least two key-frames")
        if len(self.ambients) != len(self.key_frames):
            raise ValueError("Need exactly one ambient intensity per key-frame")
        for frame in self.key_frames:
            if len(frame) != 4:
                raise ValueError("Each key-frame needs exactly four gradient stops")
            for stop in frame:
                if len(stop) != 3:
                    raise ValueError("Gradient stops are RGB triples")
                _check_color("key-frame stop", stop)
        if not all(0.0 <= a <= 1.0 for a in self.ambients):
            raise ValueError("Ambient intensities must be in [0, 1]")
        if self.lerp_time <= 0:
            raise ValueError("Lerp time must be positive")
        if self.next_lerp_time < 0:
            raise ValueError("Hold time must be nonnegative")

    @property
    def period(self) -> float:
        return self.next_lerp_time + self.lerp_time

    @property
    def size(self) -> int:
        return len(self.key_frames)


CELESTIAL_PHASES = ("sun", "moon", "none")


@dataclass(frozen=True)
class CelestialConfig:
    """Sun/moon motion loop: sunset, moon rise, then an empty sky."""

    enabled: bool = True
    loops: tuple[float, ...] = (70000.0, 30000.0, 60000.0)  # sun, moon, none
    sun_color: RGB = (255, 255, 255)
    moon_color: RGB = (0xCC, 0xCC, 0xCC)

    def __post_init__(self) -> None:
        if len(self.loops) != len(CELESTIAL_PHASES):
            raise ValueError(f"Need one duration per phase {CELESTIAL_PHASES}")
        if not all(d > 0 for d in self.loops):
            raise ValueError("Celestial phase durations must be positive")


@dataclass(frozen=True)
class StarConfig:
    """
    Night star field.

    Stars appear once ambience drops below threshold and reach full opacity
    at night_ambient.
    """

    density: float = 0.2  # Stars per 200 square pixels of sky
    threshold: float = 0.3  # Ambience below which stars show
    night_ambient: float = 0.05  # Ambience at which stars are fully opaque
    base_speed: float = 0.001  # Horizontal drift in pixels per millisecond
    max_gray: int = 192  # Star gray level before ambience boost

    def __post_init__(self) -> None:
        if self.density < 0:
            raise ValueError("Star density must be nonnegative")
        if not self.night_ambient < self.threshold:
            raise ValueError("night_ambient must be below the star threshold")
        if self.base_speed < 0:
            raise ValueError("Star speed must be nonnegative")


@dataclass(frozen=True)
class GroundConfig:
    """
    Grass terrain texture.

    Blades are quadratic Bezier strokes rising from the ground line. Every
    darken_every blades the whole ground is darkened so that earlier blades
    sit deeper in the grass.
    """

    base_color: RGBA = (0x00, 0x64, 0x00, 255)
    blade_colors: tuple[RGBA, ...] = (
        (0x1E, 0x8C, 0x1E, 255),
        (0x2E, 0xA0, 0x2E, 255),
        (0x3C, 0xB4, 0x3C, 255),
    )
    blade_spacing: float = 3.0  # Horizontal pixels between blade roots
    blade_height: tuple[float, float] = (12.0, 30.0)  # Min/max blade length
    control_offsets: tuple[float, ...] = (-6.0, -3.0, 0.0, 3.0, 6.0)
    tip_offsets: tuple[float, ...] = (-4.0, -2.0, 2.0, 4.0)
    blade_width: float = 1.5
    darken_every: int = 40  # Blades between darkening passes
    darken_factor: float = 0.92  # RGB multiplier of a darkening pass

    def __post_init__(self) -> None:
        if self.blade_spacing <= 0:
            raise ValueError("Blade spacing must be positive")
        lo, hi = self.blade_height
        if not 0 < lo <= hi:
            raise ValueError("Blade height range must satisfy 0 < min <= max")
        if not self.control_offsets or not self.tip_offsets:
            raise ValueError("Blade offset option sets must not be empty")
        if self.darken_every <= 0:
            raise ValueError("darken_every must be positive")
        if not 0.0 < self.darken_factor <= 1.0:
            raise ValueError("Darken factor must be in (0, 1]")
        _check_color("base_color", self.base_color)
        for color in self.blade_colors:
            _check_color("blade color", color)


@dataclass(frozen=True)
class SceneConfig:
    """
    Complete scene configuration.

    tick_interval is the period of the ambience/ground refresh; growth steps
    run on their own draw_interval.
    """

    tick_interval: float = 100.0
    tree: TreeConfig = field(default_factory=TreeConfig)
    growth: GrowthConfig = field(default_factory=GrowthConfig)
    fade: FadeConfig = field(default_factory=FadeConfig)
    palette: PaletteConfig = field(default_factory=PaletteConfig)
    celestial: CelestialConfig = field(default_factory=CelestialConfig)
    stars: StarConfig = field(default_factory=StarConfig)
    ground: GroundConfig = field(default_factory=GroundConfig)

    def __post_init__(self) -> None:
        if self.tick_interval <= 0:
            raise ValueError("Tick interval must be positive")

    @classmethod
    def default(cls) -> "SceneConfig":
        """The full-size scene as seen in a browser window."""
        return cls()

    @classmethod
    def small(cls) -> "SceneConfig":
        """A cheap scene for quick runs: thin trunk, sparse stars, short cycle."""
        return cls(
            tree=TreeConfig(trunk_height=100.0, trunk_width=8.0),
            palette=PaletteConfig(lerp_time=2000.0, next_lerp_time=2000.0),
            celestial=CelestialConfig(loops=(7000.0, 3000.0, 6000.0)),
            stars=StarConfig(density=0.05),
            ground=GroundConfig(blade_spacing=6.0, darken_every=10),
        )
