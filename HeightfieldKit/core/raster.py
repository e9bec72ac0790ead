"""
HeightfieldKit/core/raster.py

The canonical 4-channel signed 16-bit height buffer.
"""
from __future__ import annotations

from typing import Tuple

import numpy as np

from ..utils.types import Channel

CHANNELS = 4


class CanonicalRaster:
    """Row-major, channel-interleaved ``[Elevation, AuxA, AuxB, AuxC]`` buffer.

    ``samples`` has shape ``(height, width, 4)`` and dtype int16. The shape is
    fixed at construction; analysis only rewrites channels 1-3 in place.

    An int16 array that is already C-contiguous is kept as-is, not copied:
    the raster and the caller share memory, so analysis results also show up
    in the caller's array. Pass ``samples.copy()`` to keep the input intact.
    """

    __slots__ = ("width", "height", "samples")

    def __init__(self, width: int, height: int, samples: np.ndarray):
        width = int(width)
        height = int(height)
        if width < 1 or height < 1:
            raise ValueError(f"raster dimensions must be positive: {width}x{height}")

        samples = np.asarray(samples)
        if samples.dtype != np.int16:
            raise TypeError(f"canonical samples must be int16, got {samples.dtype}")
        expected = (height, width, CHANNELS)
        if samples.shape != expected:
            if samples.size != height * width * CHANNELS:
                raise ValueError(
                    f"sample count {samples.size} != {width}*{height}*{CHANNELS}"
                )
            samples = samples.reshape(expected)

        self.width = width
        self.height = height
        self.samples = np.ascontiguousarray(samples)

    @classmethod
    def blank(cls, width: int, height: int) -> "CanonicalRaster":
        return cls(width, height, np.zeros((height, width, CHANNELS), dtype=np.int16))

    @property
    def elevation(self) -> np.ndarray:
        return self.samples[:, :, Channel.ELEVATION]

    def channel(self, channel: Channel) -> np.ndarray:
        return self.samples[:, :, int(channel)]

    def flat(self) -> np.ndarray:
        """Flat int16 view of length ``width*height*4`` for the renderer."""
        return self.samples.reshape(-1)

    def elevation_range(self) -> Tuple[int, int]:
        """(max, min) of the elevation channel."""
        elev = self.elevation
        return int(elev.max()), int(elev.min())

    def copy(self) -> "CanonicalRaster":
        return CanonicalRaster(self.width, self.height, self.samples.copy())

    def __len__(self) -> int:
        return self.samples.size

    def __eq__(self, other):
        if not isinstance(other, CanonicalRaster):
            return NotImplemented
        return (
            self.width == other.width
            and self.height == other.height
            and np.array_equal(self.samples, other.samples)
        )

    __hash__ = None

    def __repr__(self) -> str:
        return f"CanonicalRaster(width={self.width}, height={self.height})"


def to_float_texture(raster: CanonicalRaster, divisor: float = 10930.0) -> np.ndarray:
    """Scale the flat buffer to float32 for display. The raster is not modified."""
    if divisor == 0:
        raise ValueError("divisor must be non-zero")
    return raster.flat().astype(np.float32) / np.float32(divisor)
