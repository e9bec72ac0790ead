"""
HeightfieldKit/algorithms/dask_radius.py

Tiled radius analysis on a local threaded dask scheduler. Each tile is
extended by ``radius + 1`` cells of overlap so its core is computed from the
same neighbourhood as the untiled kernel; cells beyond the image edge are
filled with ``OUT_OF_BOUNDS`` and ignored.
"""
from __future__ import annotations

import logging
from contextlib import nullcontext

import dask
import dask.array as da
import numpy as np
from dask.diagnostics import ProgressBar

from .base import BaseAlgorithm
from .radius_analysis import (
    DEFAULT_DIFF_FLOOR,
    DEFAULT_RADIUS,
    OUT_OF_BOUNDS,
    radius_fields,
    validate_diff_floor,
    validate_radius,
)

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 1024
FIELDS = ("max_height", "max_diff")


def compute_radius_block(block: np.ndarray, *, radius: int, diff_floor: int, field: str) -> np.ndarray:
    """One overlapped tile -> one output field."""
    max_height, max_diff = radius_fields(block, radius, diff_floor)
    if field == "max_height":
        return max_height
    if field == "max_diff":
        return max_diff
    raise ValueError(f"unknown field: {field}")


class DaskRadiusAnalysisAlgorithm(BaseAlgorithm):
    def process(self, elevation, **params):
        radius = validate_radius(params.get('radius', DEFAULT_RADIUS))
        diff_floor = validate_diff_floor(params.get('diff_floor', DEFAULT_DIFF_FLOOR))
        chunk_size = int(params.get('chunk_size') or DEFAULT_CHUNK_SIZE)
        num_workers = params.get('num_workers')
        show_progress = bool(params.get('show_progress', False))

        heights = np.asarray(elevation, dtype=np.int32)
        h, w = heights.shape
        depth = radius + 1

        # 1タイルで足りる場合はそのまま計算
        if (h <= chunk_size and w <= chunk_size) or depth >= min(h, w):
            logger.debug(f"Single tile {w}x{h} (chunk={chunk_size}, depth={depth})")
            return radius_fields(heights, radius, diff_floor)

        chunk = max(chunk_size, depth)
        arr = da.from_array(heights, chunks=(chunk, chunk))
        logger.debug(f"Tiling {w}x{h} into {arr.numblocks} blocks of {chunk}px, depth={depth}")

        fields = [
            arr.map_overlap(
                compute_radius_block, depth=depth,
                boundary=int(OUT_OF_BOUNDS), dtype=np.int32,
                radius=radius, diff_floor=diff_floor, field=field)
            for field in FIELDS
        ]

        with ProgressBar() if show_progress else nullcontext():
            max_height, max_diff = dask.compute(
                *fields, scheduler="threads", num_workers=num_workers)
        return np.asarray(max_height), np.asarray(max_diff)

    def get_default_params(self):
        return {
            'radius': DEFAULT_RADIUS,
            'diff_floor': DEFAULT_DIFF_FLOOR,
            'chunk_size': DEFAULT_CHUNK_SIZE,
            'num_workers': None,
            'show_progress': False,
        }


__all__ = ["compute_radius_block", "DaskRadiusAnalysisAlgorithm"]
