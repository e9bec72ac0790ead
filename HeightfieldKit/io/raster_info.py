"""Raster metadata helpers."""
from __future__ import annotations

from typing import Sequence

import numpy as np
from rasterio.enums import ColorInterp

from ..utils.errors import DecodeError, UnsupportedColorType, UnsupportedSampleFormat
from ..utils.types import ColorType, SampleFormat, SourceEncoding

_RGB = (ColorInterp.red, ColorInterp.green, ColorInterp.blue)
_GRAY_LIKE = (ColorInterp.gray, ColorInterp.undefined)
_ALPHA_LIKE = (ColorInterp.alpha, ColorInterp.undefined)

_SAMPLE_FORMATS = {
    np.dtype(np.int16): SampleFormat.INT16,
    np.dtype(np.uint16): SampleFormat.UINT16,
}


def classify_colortype(band_count: int, colorinterp: Sequence[ColorInterp], dtype) -> ColorType:
    """Map band count + color interpretation onto Gray/RGB/RGBA.

    Floating-point rasters are treated as a colortype of their own and
    rejected here, before the sample width is looked at.
    """
    dtype = np.dtype(dtype)
    if dtype.kind in "fc":
        raise UnsupportedColorType(f"floating-point rasters are not supported ({dtype})")

    interp = tuple(colorinterp)
    if ColorInterp.palette in interp:
        raise UnsupportedColorType("palette rasters are not supported")

    if band_count == 1 and interp[0] in _GRAY_LIKE:
        return ColorType.GRAY
    if band_count == 3 and interp == _RGB:
        return ColorType.RGB
    if band_count == 4 and interp[:3] == _RGB and interp[3] in _ALPHA_LIKE:
        return ColorType.RGBA

    names = ", ".join(ci.name for ci in interp)
    raise UnsupportedColorType(f"unsupported colortype: {band_count} band(s) [{names}]")


def classify_sample_format(dtype) -> SampleFormat:
    dtype = np.dtype(dtype)
    try:
        return _SAMPLE_FORMATS[dtype]
    except KeyError:
        raise UnsupportedSampleFormat(
            f"samples must be 16-bit signed or unsigned integers, got {dtype}"
        ) from None


def inspect_encoding(src) -> SourceEncoding:
    """Read width/height/colortype/sample format from an open rasterio dataset."""
    dtypes = {np.dtype(d) for d in src.dtypes}
    if len(dtypes) != 1:
        raise DecodeError(f"bands declare mixed sample types: {sorted(str(d) for d in dtypes)}")
    dtype = dtypes.pop()

    colortype = classify_colortype(src.count, src.colorinterp, dtype)
    sample_format = classify_sample_format(dtype)

    if src.width < 1 or src.height < 1:
        raise DecodeError(f"invalid raster dimensions: {src.width}x{src.height}")

    return SourceEncoding(
        colortype=colortype,
        sample_format=sample_format,
        width=int(src.width),
        height=int(src.height),
        band_count=int(src.count),
    )
