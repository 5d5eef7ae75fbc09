"""
Metaball rasteriser — direct evaluation of the field at every pixel.

For each pixel the influence Σ(sizeᵢ / dᵢ^goo) of every source is
summed and compared against the threshold.  There is no spatial
pruning: each render costs width × height × sources evaluations.

A source sitting exactly on a pixel divides by zero.  That is left to
IEEE semantics (±inf or nan) and the threshold comparison sorts it out:
inf is on, nan is off.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import numpy as np

from .geometry import CROSS, Point
from .palettes import DEFAULT_SCHEME, ColorScheme, get_scheme

if TYPE_CHECKING:
    from .field import MetaballField

logger = logging.getLogger(__name__)


@dataclass
class RenderOptions:
    """Display toggles, independent of the field itself."""
    show_centers: bool = False
    scheme: ColorScheme = field(default_factory=lambda: get_scheme(DEFAULT_SCHEME))


def field_value(metaballs: "MetaballField", x: int, y: int) -> float:
    """Field value at pixel (x, y), summed over sources in order."""
    here = Point(x, y)
    total = np.float64(0.0)
    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        for ball in metaballs.metaballs:
            dist = np.float64(ball.location.distance(here))
            total = total + np.float64(ball.size) / np.power(dist, metaballs.goo)
    return float(total)


def field_values(metaballs: "MetaballField") -> np.ndarray:
    """Field value for the whole raster → (height, width) float64 array."""
    h, w = metaballs.height, metaballs.width
    ys, xs = np.meshgrid(
        np.arange(h, dtype=np.float64),
        np.arange(w, dtype=np.float64),
        indexing="ij",
    )

    total = np.zeros((h, w), dtype=np.float64)
    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        for ball in metaballs.metaballs:
            dx = xs - float(ball.location.x)
            dy = ys - float(ball.location.y)
            dist = np.sqrt(dx * dx + dy * dy)
            total += ball.size / np.power(dist, metaballs.goo)
    return total


def render_frame(metaballs: "MetaballField", opts: RenderOptions) -> np.ndarray:
    """Render one frame → (height, width, 4) uint8 RGBA array."""
    h, w = metaballs.height, metaballs.width
    scheme = opts.scheme

    values = field_values(metaballs)
    # nan compares false, so undefined pixels stay off
    is_on = values > metaballs.threshold

    img = np.empty((h, w, 4), dtype=np.uint8)
    img[...] = scheme.off
    img[is_on] = scheme.on

    if opts.show_centers:
        marker = np.array(scheme.marker, dtype=np.uint8)
        for ball in metaballs.metaballs:
            cx = int(round(ball.location.x))
            cy = int(round(ball.location.y))
            for dx, dy in CROSS:
                px, py = cx + dx, cy + dy
                if 0 <= px < w and 0 <= py < h:
                    img[py, px] = marker

    return img


def render(buffer, metaballs: "MetaballField", opts: RenderOptions) -> None:
    """Render the field into *buffer*, overwriting every byte.

    *buffer* is any writable object exposing exactly width × height × 4
    bytes (bytearray, memoryview, contiguous uint8 array).  The frame is
    computed first and copied in one step, so on error the buffer is
    left as it was.

    Raises:
        ValueError: if the buffer has the wrong size or is read-only.
    """
    view = np.frombuffer(buffer, dtype=np.uint8)
    expected = metaballs.pixel_count * 4
    if view.size != expected:
        raise ValueError(f"Buffer holds {view.size} bytes, expected {expected}")
    if not view.flags.writeable:
        raise ValueError("Buffer is read-only")

    frame = render_frame(metaballs, opts)
    view[:] = frame.reshape(-1)
    logger.debug(
        "Rendered %d metaballs (goo=%g, threshold=%g, centers=%s)",
        len(metaballs.metaballs), metaballs.goo, metaballs.threshold, opts.show_centers,
    )
