"""
Colour schemes for the metaball raster.

Each scheme defines:
  - on:     Pixels whose field value exceeds the threshold (RGBA)
  - off:    Background pixels (RGBA)
  - marker: Source centre markers drawn over the field (RGBA)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Tuple

RGBA = Tuple[int, int, int, int]


@dataclass(frozen=True)
class ColorScheme:
    """Immutable colour scheme for the raster."""
    name: str
    on: RGBA
    off: RGBA
    marker: RGBA


# ── Built-in schemes ─────────────────────────────────────────────────────

SCHEMES: Dict[str, ColorScheme] = {
    "classic": ColorScheme(
        name="Classic Red",
        on=(255, 0, 0, 255), off=(0, 0, 0, 255), marker=(0, 0, 255, 255),
    ),
    "mono": ColorScheme(
        name="Monochrome",
        on=(255, 255, 255, 255), off=(0, 0, 0, 255), marker=(255, 0, 0, 255),
    ),
    "ink": ColorScheme(
        name="Ink on Paper",
        on=(20, 20, 30, 255), off=(245, 240, 225, 255), marker=(200, 30, 30, 255),
    ),
    "phosphor": ColorScheme(
        name="Phosphor",
        on=(60, 255, 90, 255), off=(4, 18, 6, 255), marker=(255, 220, 40, 255),
    ),
    "ocean": ColorScheme(
        name="Ocean",
        on=(40, 140, 255, 255), off=(5, 10, 30, 255), marker=(255, 120, 20, 255),
    ),
}

DEFAULT_SCHEME = "classic"


def get_scheme(key: str) -> ColorScheme:
    """Look up a built-in scheme by key (raises KeyError if unknown)."""
    return SCHEMES[key]


def list_schemes() -> List[str]:
    return sorted(SCHEMES)
