"""
HeightfieldKit/io/decoder.py

Decode a 16-bit height raster of unknown pixel encoding into the canonical
4-channel signed buffer.
"""
from __future__ import annotations

import logging
import warnings
from pathlib import Path
from typing import Tuple, Union

import numpy as np
from rasterio.errors import NotGeoreferencedWarning, RasterioError
from rasterio.io import MemoryFile

from ..core.bias import OPAQUE_ALPHA, to_signed
from ..core.raster import CHANNELS, CanonicalRaster
from ..utils.errors import DecodeError, HeightfieldError, RasterIoError
from ..utils.types import ColorType, SampleFormat, SourceEncoding
from .raster_info import inspect_encoding

logger = logging.getLogger(__name__)


def _read_pixels(src, encoding: SourceEncoding) -> np.ndarray:
    """Read every band as (height, width, bands) int16."""
    bands = src.read()
    expected = (encoding.band_count, encoding.height, encoding.width)
    if bands.shape != expected:
        raise DecodeError(f"pixel data shape {bands.shape} does not match header {expected}")

    if encoding.sample_format is SampleFormat.UINT16:
        bands = to_signed(bands)
    else:
        bands = bands.astype(np.int16, copy=False)
    return np.moveaxis(bands, 0, -1)


def expand_to_canonical(pixels: np.ndarray, colortype: ColorType) -> np.ndarray:
    """Gray/RGB/RGBA (h, w, c) int16 -> (h, w, 4) int16 without bit loss."""
    h, w = pixels.shape[:2]
    out = np.empty((h, w, CHANNELS), dtype=np.int16)

    if colortype is ColorType.GRAY:
        out[:, :, :3] = pixels[:, :, :1]
        out[:, :, 3] = OPAQUE_ALPHA
    elif colortype is ColorType.RGB:
        out[:, :, :3] = pixels
        out[:, :, 3] = OPAQUE_ALPHA
    elif colortype is ColorType.RGBA:
        out[:] = pixels
    else:
        raise ValueError(f"unknown colortype: {colortype}")
    return out


def decode_with_encoding(data: Union[bytes, bytearray, memoryview]) -> Tuple[CanonicalRaster, SourceEncoding]:
    """Like :func:`decode`, also returning the source encoding it detected."""
    data = bytes(data)
    if not data:
        raise DecodeError("no raster data")

    try:
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", NotGeoreferencedWarning)
            with MemoryFile(data) as memfile:
                with memfile.open() as src:
                    encoding = inspect_encoding(src)
                    pixels = _read_pixels(src, encoding)
    except HeightfieldError:
        raise
    except (RasterioError, OSError) as e:
        raise DecodeError(f"cannot decode raster: {e}") from e

    logger.info(
        f"Decoded {encoding.width}x{encoding.height} "
        f"{encoding.colortype.value}/{encoding.sample_format.value} raster"
    )
    samples = expand_to_canonical(pixels, encoding.colortype)
    return CanonicalRaster(encoding.width, encoding.height, samples), encoding


def decode(data: bytes) -> CanonicalRaster:
    """Decode raster file bytes into a :class:`CanonicalRaster`.

    Raises UnsupportedColorType, UnsupportedSampleFormat or DecodeError.
    """
    raster, _ = decode_with_encoding(data)
    return raster


def read_bytes(path: Union[str, Path]) -> bytes:
    path = Path(path)
    try:
        return path.read_bytes()
    except OSError as e:
        raise RasterIoError(f"cannot read {path}: {e}") from e


def read_raster(path: Union[str, Path]) -> CanonicalRaster:
    """Open ``path`` and decode it."""
    return decode(read_bytes(path))
