"""
Metaballs
=========

A 2D raster visualisation of an implicit scalar field built from
metaballs: point influence sources whose contributions are summed at
every pixel and thresholded into foreground and background.

  - Field Σ(sizeᵢ / dᵢ^goo) evaluated directly for every pixel
  - ``goo`` shapes the fall-off, ``threshold`` decides on/off
  - Random fields with an exponentially distributed source count
  - Goo and threshold adjustable at runtime from a text channel (stdin)
  - Optional markers at the source centres
"""

__version__ = "1.0.0"
__author__ = "Metaballs"
