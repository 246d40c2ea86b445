"""
Aging of previously drawn trees.

Before a new tree starts growing, every stroke already on the forest layer
is pushed one step toward the background. Strokes are painted in a gray
(R == G == B) without anti-aliasing, so "gray and visible" identifies old
tree pixels; anything else is left untouched.

Two policies:
    alpha_decay: alpha -= step, clamped at 0 (strokes dissolve into the sky)
    brighten:    RGB += step, clamped at 255 (strokes whiten)

Both are monotone: repeated passes move a pixel steadily to its bound and
then leave it there.
"""

import jax.numpy as jnp
from jax import Array

from grove.config import FadeConfig


def gray_mask(buffer: Array) -> Array:
    """Visible pixels whose three color channels are equal."""
    r, g, b, a = buffer[..., 0], buffer[..., 1], buffer[..., 2], buffer[..., 3]
    return (r == g) & (g == b) & (a > 0)


def alpha_decay(buffer: Array, step: int) -> Array:
    """
    Lower the alpha of gray pixels by `step`, stopping at fully transparent.

    Args:
        buffer: (H, W, 4) uint8 pixels
        step: Alpha decrease per pass

    Returns:
        Aged (H, W, 4) uint8 pixels
    """
    pixels = jnp.asarray(buffer).astype(jnp.int32)
    alpha = pixels[..., 3]
    faded = jnp.where(gray_mask(pixels), jnp.maximum(alpha - step, 0), alpha)
    return pixels.at[..., 3].set(faded).astype(jnp.uint8)


def brighten(buffer: Array, step: int) -> Array:
    """
    Raise the RGB channels of gray pixels by `step`, stopping at white.

    Args:
        buffer: (H, W, 4) uint8 pixels
        step: Channel increase per pass

    Returns:
        Aged (H, W, 4) uint8 pixels
    """
    pixels = jnp.asarray(buffer).astype(jnp.int32)
    rgb = pixels[..., :3]
    target = gray_mask(pixels) & (pixels[..., 0] < 255)
    lighter = jnp.minimum(rgb + step, 255)
    aged = jnp.where(target[..., None], lighter, rgb)
    return pixels.at[..., :3].set(aged).astype(jnp.uint8)


def age(buffer: Array, config: FadeConfig) -> Array:
    """Apply one aging pass using the configured policy."""
    if config.policy == "alpha":
        return alpha_decay(buffer, config.step)
    return brighten(buffer, config.step)


def background_distance(buffer: Array, config: FadeConfig) -> Array:
    """
    How far each pixel still is from the faded-out state.

    Zero for pixels that no longer change under aging. Non-increasing
    under repeated `age` passes.
    """
    pixels = jnp.asarray(buffer).astype(jnp.int32)
    gray = gray_mask(pixels)
    if config.policy == "alpha":
        return jnp.where(gray, pixels[..., 3], 0)
    return jnp.where(gray, 255 - pixels[..., 0], 0)
