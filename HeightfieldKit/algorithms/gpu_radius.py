"""
HeightfieldKit/algorithms/gpu_radius.py

CUDA backend: one thread per output pixel running the per-pixel kernel
against the read-only elevation grid. Requires cupy (``gpu`` extra).
"""
from __future__ import annotations

import logging

import cupy as cp
import numpy as np

from .base import BaseAlgorithm
from .radius_analysis import (
    DEFAULT_DIFF_FLOOR,
    DEFAULT_RADIUS,
    validate_diff_floor,
    validate_radius,
)

logger = logging.getLogger(__name__)

THREADS_PER_BLOCK = 256

_radius_kernel = cp.RawKernel(r'''
__constant__ int NEIGHBOR_DX[8] = {-1, 0, 1, -1, 1, -1, 0, 1};
__constant__ int NEIGHBOR_DY[8] = {-1, -1, -1, 0, 0, 1, 1, 1};

extern "C" __global__
void radius_analysis(
    const int* heights,
    int* max_height,
    int* max_diff,
    const int width,
    const int height,
    const int radius,
    const int diff_floor
) {
    int idx = blockIdx.x * blockDim.x + threadIdx.x;
    if (idx >= width * height) {
        return;
    }

    int x = idx % width;
    int y = idx / width;
    int best_height = -32768;
    int best_diff = diff_floor;
    int r2 = radius * radius;

    for (int j = -radius; j <= radius; ++j) {
        int qy = y + j;
        if (qy < 0 || qy >= height) {
            continue;
        }
        for (int i = -radius; i <= radius; ++i) {
            if (i * i + j * j > r2) {
                continue;
            }
            int qx = x + i;
            if (qx < 0 || qx >= width) {
                continue;
            }

            int hq = heights[qy * width + qx];
            if (hq > best_height) {
                best_height = hq;
            }

            for (int k = 0; k < 8; ++k) {
                int nx = qx + NEIGHBOR_DX[k];
                int ny = qy + NEIGHBOR_DY[k];
                if (nx < 0 || ny < 0 || nx >= width || ny >= height) {
                    continue;
                }
                int diff = heights[ny * width + nx] - hq;
                if (diff > best_diff) {
                    best_diff = diff;
                }
            }
        }
    }

    max_height[idx] = best_height;
    max_diff[idx] = best_diff;
}
''', 'radius_analysis')


class GpuRadiusAnalysisAlgorithm(BaseAlgorithm):
    def process(self, elevation, **params):
        radius = validate_radius(params.get('radius', DEFAULT_RADIUS))
        diff_floor = validate_diff_floor(params.get('diff_floor', DEFAULT_DIFF_FLOOR))

        heights = cp.asarray(np.ascontiguousarray(elevation, dtype=np.int32))
        h, w = heights.shape
        max_height = cp.empty((h, w), dtype=cp.int32)
        max_diff = cp.empty((h, w), dtype=cp.int32)

        n = h * w
        blocks = (n + THREADS_PER_BLOCK - 1) // THREADS_PER_BLOCK
        logger.debug(f"Launching radius_analysis: {blocks} blocks x {THREADS_PER_BLOCK} threads")
        _radius_kernel(
            (blocks,), (THREADS_PER_BLOCK,),
            (heights, max_height, max_diff,
             np.int32(w), np.int32(h), np.int32(radius), np.int32(diff_floor)),
        )
        return cp.asnumpy(max_height), cp.asnumpy(max_diff)

    def get_default_params(self):
        return {'radius': DEFAULT_RADIUS, 'diff_floor': DEFAULT_DIFF_FLOOR}


__all__ = ["GpuRadiusAnalysisAlgorithm"]
