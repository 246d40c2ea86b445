"""
RGBA raster surfaces.

Each visual layer of the scene (sky, forest, hover preview, ground) paints
into its own Raster: an (height, width, 4) uint8 numpy array with
straight (non-premultiplied) alpha. Layers are alpha-composited into a frame
only when a frame is requested.

Rasterization samples pixel centers and never anti-aliases, so a stroke
painted in a gray color leaves exactly gray pixels behind. The fade engine
relies on that.
"""

import math

import numpy as np

from grove.config import RGBA
from grove.geometry import Point


class Raster:
    """A fixed-size RGBA pixel buffer with a handful of paint primitives."""

    def __init__(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"Surface size must be positive, got {width}x{height}")
        self.pixels = np.zeros((height, width, 4), dtype=np.uint8)
        self.stroke_count = 0  # Stroke commands issued since creation

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    # -------------------------------------------------------------------------
    # Buffer access
    # -------------------------------------------------------------------------

    def clear(self) -> None:
        """Reset every pixel to transparent black."""
        self.pixels[...] = 0

    def get_pixels(self) -> np.ndarray:
        """Copy of the pixel buffer."""
        return self.pixels.copy()

    def put_pixels(self, buffer) -> None:
        """Replace the pixel buffer with `buffer` (any array-like of the same shape)."""
        arr = np.asarray(buffer)
        if arr.shape != self.pixels.shape:
            raise ValueError(f"Buffer shape {arr.shape} != surface shape {self.pixels.shape}")
        self.pixels[...] = np.clip(arr, 0, 255).astype(np.uint8)

    # -------------------------------------------------------------------------
    # Coverage helpers
    # -------------------------------------------------------------------------

    def _window(self, x0: float, y0: float, x1: float, y1: float):
        """Pixel index window covering [x0, x1] x [y0, y1], clipped to the surface.

        Returns (row slice, col slice, pixel-center xs, pixel-center ys) or
        None when the window is off-surface.
        """
        c0 = max(0, math.floor(x0))
        c1 = min(self.width, math.ceil(x1) + 1)
        r0 = max(0, math.floor(y0))
        r1 = min(self.height, math.ceil(y1) + 1)
        if c0 >= c1 or r0 >= r1:
            return None
        xs = np.arange(c0, c1) + 0.5
        ys = np.arange(r0, r1) + 0.5
        gx, gy = np.meshgrid(xs, ys)
        return slice(r0, r1), slice(c0, c1), gx, gy

    def _paint(self, rows: slice, cols: slice, mask: np.ndarray, color: RGBA) -> None:
        self.pixels[rows, cols][mask] = color

    # -------------------------------------------------------------------------
    # Paint primitives
    # -------------------------------------------------------------------------

    def fill_rect(self, x: float, y: float, w: float, h: float, color: RGBA) -> None:
        """Fill the axis-aligned rectangle with top-left corner (x, y)."""
        window = self._window(x, y, x + w, y + h)
        if window is None:
            return
        rows, cols, gx, gy = window
        mask = (gx >= x) & (gx < x + w) & (gy >= y) & (gy < y + h)
        self._paint(rows, cols, mask, color)

    def stroke_line(self, p0: Point, p1: Point, width: float, color: RGBA) -> None:
        """Stroke a straight line with round caps."""
        self.stroke_count += 1
        radius = max(width / 2, 0.5)
        window = self._window(
            min(p0.x, p1.x) - radius, min(p0.y, p1.y) - radius,
            max(p0.x, p1.x) + radius, max(p0.y, p1.y) + radius,
        )
        if window is None:
            return
        rows, cols, gx, gy = window
        dx, dy = p1.x - p0.x, p1.y - p0.y
        length_sq = dx * dx + dy * dy
        if length_sq == 0.0:
            dist_sq = (gx - p0.x) ** 2 + (gy - p0.y) ** 2
        else:
            # Distance from each pixel center to the closest point on the segment
            t = np.clip(((gx - p0.x) * dx + (gy - p0.y) * dy) / length_sq, 0.0, 1.0)
            dist_sq = (gx - (p0.x + t * dx)) ** 2 + (gy - (p0.y + t * dy)) ** 2
        self._paint(rows, cols, dist_sq <= radius * radius, color)

    def stroke_polyline(self, points: list[Point], width: float, color: RGBA) -> None:
        """Stroke consecutive points as joined round-capped lines."""
        for a, b in zip(points, points[1:]):
            self.stroke_line(a, b, width, color)

    def fill_disc(self, center: Point, radius: float, color: RGBA) -> None:
        """Fill a circle."""
        mask_window = self.disc_mask(center, radius)
        if mask_window is None:
            return
        rows, cols, mask = mask_window
        self._paint(rows, cols, mask, color)

    def disc_mask(self, center: Point, radius: float):
        """(row slice, col slice, boolean mask) of the pixels inside a circle."""
        window = self._window(center.x - radius, center.y - radius,
                              center.x + radius, center.y + radius)
        if window is None:
            return None
        rows, cols, gx, gy = window
        mask = (gx - center.x) ** 2 + (gy - center.y) ** 2 <= radius * radius
        return rows, cols, mask

    def radial_glow(self, center: Point, inner: float, outer: float,
                    color: tuple[int, int, int], solid: float = 0.5) -> None:
        """
        Composite a soft round glow over the surface.

        Fully opaque out to inner + solid * (outer - inner), then fading
        linearly to transparent at outer.
        """
        window = self._window(center.x - outer, center.y - outer,
                              center.x + outer, center.y + outer)
        if window is None:
            return
        rows, cols, gx, gy = window
        dist = np.sqrt((gx - center.x) ** 2 + (gy - center.y) ** 2)
        offset = (dist - inner) / (outer - inner)
        alpha = np.clip((1.0 - offset) / (1.0 - solid), 0.0, 1.0)
        self.blend(rows, cols, alpha, color)

    def blend(self, rows: slice, cols: slice, alpha: np.ndarray,
              color: tuple[int, int, int]) -> None:
        """Alpha-composite a flat color over a window with per-pixel alpha."""
        region = self.pixels[rows, cols]
        src = np.zeros(region.shape, dtype=np.float64)
        src[..., :3] = color
        src[..., 3] = alpha * 255.0
        region[...] = _over(src, region.astype(np.float64))

    def fill_vertical_gradient(self, stops: np.ndarray) -> None:
        """
        Fill the surface with an opaque top-to-bottom gradient.

        Args:
            stops: (n, 3) colors evenly spaced from top (offset 0) to bottom (offset 1)
        """
        self.pixels[...] = vertical_gradient(stops, self.width, self.height)


def vertical_gradient(stops: np.ndarray, width: int, height: int) -> np.ndarray:
    """(height, width, 4) opaque image of evenly spaced color stops."""
    stops = np.asarray(stops, dtype=np.float64)
    offsets = np.linspace(0.0, 1.0, len(stops))
    rows = (np.arange(height) + 0.5) / height
    column = np.stack([np.interp(rows, offsets, stops[:, c]) for c in range(3)], axis=-1)
    image = np.empty((height, width, 4), dtype=np.uint8)
    image[..., :3] = np.floor(column)[:, None, :].astype(np.uint8)
    image[..., 3] = 255
    return image


def _over(src: np.ndarray, dst: np.ndarray) -> np.ndarray:
    """Porter-Duff "over" of straight-alpha float images in [0, 255]."""
    sa = src[..., 3:4] / 255.0
    da = dst[..., 3:4] / 255.0
    out_a = sa + da * (1.0 - sa)
    safe = np.where(out_a > 0, out_a, 1.0)
    out_rgb = (src[..., :3] * sa + dst[..., :3] * da * (1.0 - sa)) / safe
    out = np.concatenate([out_rgb, out_a * 255.0], axis=-1)
    return np.clip(np.round(out), 0, 255).astype(np.uint8)


def composite(layers: list[Raster]) -> np.ndarray:
    """Alpha-composite layers bottom to top into one (H, W, 4) uint8 frame."""
    if not layers:
        raise ValueError("Nothing to composite")
    frame = layers[0].pixels.astype(np.float64)
    for layer in layers[1:]:
        if layer.pixels.shape != frame.shape:
            raise ValueError("Layers must share one surface size")
        frame = _over(layer.pixels.astype(np.float64), frame).astype(np.float64)
    return frame.astype(np.uint8)
