"""
Metaball field model.

Holds the set of sources together with the global shaping exponent
(``goo``) and the on/off ``threshold``, plus the random generator used
to populate a fresh field.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np

from .geometry import Point

logger = logging.getLogger(__name__)


BASE_METABALL_SIZE = 90.0
MIN_METABALL_COUNT = 3

DEFAULT_GOO = 1.6
DEFAULT_THRESHOLD = 0.5

RASTER_WIDTH = 256
RASTER_HEIGHT = 256


# ---------------------------------------------------------------------------
# Data model
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Metaball:
    """A single influence source. ``size`` is a signed strength."""
    location: Point
    size: float


@dataclass
class MetaballField:
    """Sources, exponent and threshold for one raster.

    ``width`` and ``height`` are fixed for the lifetime of the field.
    ``goo`` and ``threshold`` may be reassigned at any time; any float
    is accepted.
    """
    goo: float
    threshold: float
    width: int
    height: int
    metaballs: List[Metaball] = field(default_factory=list)

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Raster must be non-empty, got {self.width}x{self.height}")
        if not self.metaballs:
            raise ValueError("A field needs at least one metaball")

    @property
    def pixel_count(self) -> int:
        return self.width * self.height

    def randomized(self, rng: Optional[np.random.Generator] = None) -> "MetaballField":
        """New random field keeping goo, threshold and dimensions."""
        return generate_random(self.goo, self.threshold, self.width, self.height, rng)


# ---------------------------------------------------------------------------
# Random generation
# ---------------------------------------------------------------------------

def random_exponential(factor: float, rng: np.random.Generator) -> float:
    """Sample an exponential distribution with rate *factor*.

    Like counting coin flips: on heads flip again, on tails stop.
    """
    u = rng.random()
    return math.log(1.0 - u) / -factor


def centered_random(inner: float, rng: np.random.Generator) -> float:
    """Uniform sample within [inner / 2, inner * 1.5].

    ``centered_random(0.5, rng)`` lies within [0.25, 0.75].
    """
    if not 0.0 < inner < 1.0:
        raise ValueError(f"inner should be within (0, 1), got {inner!r}")
    u = rng.random()
    return u * inner + inner / 2.0


def random_metaball_count(rng: np.random.Generator) -> int:
    return int(math.floor(random_exponential(0.5, rng))) + MIN_METABALL_COUNT


def generate_random(
    goo: float,
    threshold: float,
    width: int,
    height: int,
    rng: Optional[np.random.Generator] = None,
) -> MetaballField:
    """Generate a field with a random number of randomly placed metaballs.

    Parameters:
        goo:       Distance exponent of the influence function.
        threshold: Field value above which a pixel is on.
        width:     Raster width in pixels.
        height:    Raster height in pixels.
        rng:       numpy Generator (None = fresh unseeded generator).
    """
    rng = rng if rng is not None else np.random.default_rng()
    count = random_metaball_count(rng)
    metaballs: List[Metaball] = []
    for _ in range(count):
        size = centered_random(0.5, rng) * BASE_METABALL_SIZE
        x = round(width * centered_random(0.5, rng))
        y = round(height * centered_random(0.5, rng))
        metaballs.append(Metaball(location=Point(x, y), size=size))
    logger.debug("Generated %d metaballs on %dx%d", count, width, height)
    return MetaballField(
        goo=goo,
        threshold=threshold,
        width=width,
        height=height,
        metaballs=metaballs,
    )
