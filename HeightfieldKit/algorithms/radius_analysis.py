"""
HeightfieldKit/algorithms/radius_analysis.py

Radius analysis kernel: for every pixel, the highest elevation inside a
filled disk of ``radius`` pixels and the steepest uphill step from any disk
cell to one of its 8-connected neighbours.

Out-of-image cells are skipped, never wrapped or clamped. Grids handed to
:func:`radius_fields` may already contain ``OUT_OF_BOUNDS`` cells (tile
overlaps); they are treated exactly like cells outside the image.
"""
from __future__ import annotations

from typing import List, Tuple

import numpy as np
from scipy.ndimage import maximum_filter

from ..core.bias import INT16_MAX, INT16_MIN
from ..core.raster import CanonicalRaster
from ..utils.types import Channel
from .base import BaseAlgorithm

# (dx, dy)
NEIGHBOR_OFFSETS: Tuple[Tuple[int, int], ...] = (
    (-1, -1), (0, -1), (1, -1),
    (-1, 0),           (1, 0),
    (-1, 1),  (0, 1),  (1, 1),
)

# Below any int16 elevation and any elevation difference; int32-safe to subtract.
OUT_OF_BOUNDS = np.int32(-(2 ** 30))

DEFAULT_RADIUS = 16
DEFAULT_DIFF_FLOOR = 0


def validate_radius(radius) -> int:
    radius = int(radius)
    if radius < 0:
        raise ValueError(f"radius must be >= 0, got {radius}")
    if radius > INT16_MAX:
        raise ValueError(f"radius must fit the int16 marker channel, got {radius}")
    return radius


def validate_diff_floor(diff_floor) -> int:
    diff_floor = int(diff_floor)
    if not INT16_MIN <= diff_floor <= INT16_MAX:
        raise ValueError(f"diff_floor must be within int16 range, got {diff_floor}")
    return diff_floor


def disk_offsets(radius: int) -> List[Tuple[int, int]]:
    """Integer offsets (i, j) with i*i + j*j <= radius*radius, row by row."""
    r2 = radius * radius
    return [
        (i, j)
        for j in range(-radius, radius + 1)
        for i in range(-radius, radius + 1)
        if i * i + j * j <= r2
    ]


def disk_footprint(radius: int) -> np.ndarray:
    """Boolean (2r+1, 2r+1) footprint of the disk, center at [r, r]."""
    j, i = np.mgrid[-radius:radius + 1, -radius:radius + 1]
    return (i * i + j * j) <= radius * radius


def steepest_ascent(heights: np.ndarray) -> np.ndarray:
    """max(h(n) - h(q)) over the in-bounds 8-neighbours n of every cell q.

    Cells that are out of bounds themselves, or have no in-bounds neighbour,
    get ``OUT_OF_BOUNDS``.
    """
    heights = np.asarray(heights, dtype=np.int32)
    h, w = heights.shape
    valid = heights != OUT_OF_BOUNDS
    padded = np.pad(heights, 1, mode="constant", constant_values=OUT_OF_BOUNDS)

    ascent = np.full((h, w), OUT_OF_BOUNDS, dtype=np.int32)
    for dx, dy in NEIGHBOR_OFFSETS:
        neighbor = padded[1 + dy:1 + dy + h, 1 + dx:1 + dx + w]
        usable = valid & (neighbor != OUT_OF_BOUNDS)
        np.maximum(ascent, np.where(usable, neighbor - heights, OUT_OF_BOUNDS), out=ascent)
    return ascent


def radius_fields(heights: np.ndarray, radius: int, diff_floor: int = DEFAULT_DIFF_FLOOR
                  ) -> Tuple[np.ndarray, np.ndarray]:
    """Vectorized kernel. Returns int32 ``(max_height, max_diff)``."""
    heights = np.asarray(heights, dtype=np.int32)
    footprint = disk_footprint(radius)

    max_height = maximum_filter(
        heights, footprint=footprint, mode="constant", cval=int(OUT_OF_BOUNDS)
    )
    max_diff = maximum_filter(
        steepest_ascent(heights), footprint=footprint, mode="constant", cval=int(OUT_OF_BOUNDS)
    )
    np.maximum(max_diff, np.int32(diff_floor), out=max_diff)
    return max_height, max_diff


def analyze_pixel(elevation: np.ndarray, x: int, y: int, radius: int,
                  diff_floor: int = DEFAULT_DIFF_FLOOR) -> Tuple[int, int]:
    """Per-pixel form of the kernel; depends only on the read-only elevation grid."""
    height, width = elevation.shape
    max_height = INT16_MIN
    max_diff = diff_floor
    r2 = radius * radius

    for j in range(-radius, radius + 1):
        for i in range(-radius, radius + 1):
            if i * i + j * j > r2:
                continue
            qx = x + i
            qy = y + j
            if qx < 0 or qy < 0 or qx >= width or qy >= height:
                continue

            hq = int(elevation[qy, qx])
            for dx, dy in NEIGHBOR_OFFSETS:
                nx = qx + dx
                ny = qy + dy
                if nx < 0 or ny < 0 or nx >= width or ny >= height:
                    continue
                max_diff = max(max_diff, int(elevation[ny, nx]) - hq)

            if hq > max_height:
                max_height = hq

    return max_height, max_diff


def write_results(raster: CanonicalRaster, max_height: np.ndarray, max_diff: np.ndarray,
                  radius: int) -> CanonicalRaster:
    """Store kernel output in channels 1-3. Channel 0 is left untouched."""
    shape = (raster.height, raster.width)
    if max_height.shape != shape or max_diff.shape != shape:
        raise ValueError(f"kernel output shape {max_height.shape} != raster shape {shape}")

    raster.samples[:, :, Channel.MAX_HEIGHT] = max_height.astype(np.int16)
    raster.samples[:, :, Channel.MAX_DIFF] = np.clip(max_diff, INT16_MIN, INT16_MAX).astype(np.int16)
    raster.samples[:, :, Channel.MARKER] = radius
    return raster


class RadiusAnalysisAlgorithm(BaseAlgorithm):
    """scipy.ndimage による CPU 実装"""

    def process(self, elevation, **params):
        radius = validate_radius(params.get('radius', DEFAULT_RADIUS))
        diff_floor = validate_diff_floor(params.get('diff_floor', DEFAULT_DIFF_FLOOR))
        return radius_fields(elevation, radius, diff_floor)

    def get_default_params(self):
        return {'radius': DEFAULT_RADIUS, 'diff_floor': DEFAULT_DIFF_FLOOR}


class ReferenceRadiusAnalysisAlgorithm(BaseAlgorithm):
    """Pixel-by-pixel loop over :func:`analyze_pixel`. Slow; small rasters only."""

    def process(self, elevation, **params):
        radius = validate_radius(params.get('radius', DEFAULT_RADIUS))
        diff_floor = validate_diff_floor(params.get('diff_floor', DEFAULT_DIFF_FLOOR))

        elevation = np.asarray(elevation)
        h, w = elevation.shape
        max_height = np.empty((h, w), dtype=np.int32)
        max_diff = np.empty((h, w), dtype=np.int32)
        for y in range(h):
            for x in range(w):
                max_height[y, x], max_diff[y, x] = analyze_pixel(elevation, x, y, radius, diff_floor)
        return max_height, max_diff

    def get_default_params(self):
        return {'radius': DEFAULT_RADIUS, 'diff_floor': DEFAULT_DIFF_FLOOR}


__all__ = [
    "NEIGHBOR_OFFSETS",
    "OUT_OF_BOUNDS",
    "analyze_pixel",
    "disk_footprint",
    "disk_offsets",
    "radius_fields",
    "steepest_ascent",
    "write_results",
    "RadiusAnalysisAlgorithm",
    "ReferenceRadiusAnalysisAlgorithm",
]
