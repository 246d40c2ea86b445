"""
Fractal tree geometry.

A tree is a strict binary recursion. Each call emits one segment, then two
children that start where the parent's segment starts and lean left and
right by the spread angle:

    child_height = height / 1.5
    child_width  = width - 2
    left tip     = start - (sin(a + s), cos(a + s)) * child_height
    right tip    = start - (sin(a - s), cos(a - s)) * child_height

with angles in degrees, measured from vertical. Recursion stops once the
width reaches 2, so the depth is bounded by initial_width / 2.

Screen coordinates: y grows downward, so "up" is negative y. A child
segment's end is its parent's start, which makes every segment run from its
tip (start) back to its base (end). Growth reveals strokes base first.

Generation is pure and deterministic. Timing lives in grove.growth.
"""

import math
from typing import NamedTuple

from grove.config import TreeConfig

MIN_WIDTH = 2.0
HEIGHT_DIVISOR = 1.5
WIDTH_DECREMENT = 2.0


class Point(NamedTuple):
    """A position in scene coordinates (pixels, y down)."""

    x: float
    y: float


class Segment(NamedTuple):
    """
    One branch stroke.

    Attributes:
        start: Tip of the branch
        end: Base of the branch (the parent's tip, or the ground for the trunk)
        width: Line width
        angle: Absolute lean from vertical in degrees
        height: Nominal branch length (the trunk's may differ from |start - end|)
        depth: Recursion level, trunk = 0
    """

    start: Point
    end: Point
    width: float
    angle: float
    height: float
    depth: int

    @property
    def length(self) -> float:
        return math.hypot(self.start.x - self.end.x, self.start.y - self.end.y)

    def point_at(self, fraction: float) -> Point:
        """Point reached after revealing `fraction` of the stroke from its base."""
        return Point(
            self.end.x + (self.start.x - self.end.x) * fraction,
            self.end.y + (self.start.y - self.end.y) * fraction,
        )


def child_tip(start: Point, height: float, angle: float) -> Point:
    """Tip of a branch of length `height` leaning `angle` degrees from vertical."""
    rad = angle * math.pi / 180
    return Point(start.x - math.sin(rad) * height, start.y - math.cos(rad) * height)


def generate_branches(
    start: Point,
    end: Point,
    height: float,
    width: float,
    current_angle: float,
    spread: float,
) -> list[Segment]:
    """
    Generate every segment of a tree in pre-order.

    Order is parent, then the whole left subtree, then the whole right
    subtree. Nothing is emitted for width <= 2.

    Args:
        start: Top of the trunk
        end: Base of the trunk
        height: Trunk length used to size the children
        width: Trunk line width
        current_angle: Lean of the trunk from vertical (degrees)
        spread: Angle between a branch and its parent (degrees)

    Returns:
        List of segments, trunk first
    """
    segments: list[Segment] = []

    def grow(start: Point, end: Point, height: float, width: float,
             angle: float, depth: int) -> None:
        if width <= MIN_WIDTH:
            return
        segments.append(Segment(start, end, width, angle, height, depth))

        branch_h = height / HEIGHT_DIVISOR
        branch_w = width - WIDTH_DECREMENT
        left = child_tip(start, branch_h, angle + spread)
        right = child_tip(start, branch_h, angle - spread)

        grow(left, start, branch_h, branch_w, angle + spread, depth + 1)
        grow(right, start, branch_h, branch_w, angle - spread, depth + 1)

    grow(Point(*start), Point(*end), height, width, current_angle, 0)
    return segments


def trunk_for(x: float, surface_height: float, config: TreeConfig) -> tuple[Point, Point]:
    """
    Trunk endpoints for a tree planted at horizontal position x.

    The trunk stands on the ground line, ground_margin pixels above the
    bottom edge, and reaches trunk_height pixels up.

    Returns:
        (start, end): top and base of the trunk
    """
    base_y = surface_height - config.ground_margin
    start = Point(x, base_y - config.trunk_height)
    end = Point(x, base_y)
    return start, end


def generate_tree(x: float, surface_height: float, config: TreeConfig) -> list[Segment]:
    """Generate the segments of a tree planted at x using the configured shape."""
    start, end = trunk_for(x, surface_height, config)
    return generate_branches(
        start, end, config.trunk_height, config.trunk_width, 0.0, config.spread_angle
    )


def level_count(width: float) -> int:
    """Number of recursion levels that emit segments for a trunk width."""
    if width <= MIN_WIDTH:
        return 0
    return math.ceil((width - MIN_WIDTH) / WIDTH_DECREMENT)


def expected_segment_count(width: float) -> int:
    """Size of the complete binary tree generated from a trunk width."""
    return 2 ** level_count(width) - 1
