"""
HeightfieldKit/utils/errors.py

Typed failures raised at the decode/encode boundaries.
"""


class HeightfieldError(Exception):
    """Base class for every error raised by HeightfieldKit."""


class RasterIoError(HeightfieldError, OSError):
    """Underlying storage could not be opened, read, created or written."""


class DecodeError(HeightfieldError, ValueError):
    """Malformed header, or pixel data that does not match the declared size."""


class UnsupportedColorType(HeightfieldError, ValueError):
    """Colortype outside Gray/RGB/RGBA (palette, CMYK, float, ...)."""


class UnsupportedSampleFormat(HeightfieldError, ValueError):
    """Integer samples that are not exactly 16 bits wide."""


class EncodeError(HeightfieldError, RuntimeError):
    """Output bytes could not be produced from a valid raster."""


class BackendUnavailable(HeightfieldError, RuntimeError):
    """An optional compute backend cannot be imported on this system."""


__all__ = [
    "HeightfieldError",
    "RasterIoError",
    "DecodeError",
    "UnsupportedColorType",
    "UnsupportedSampleFormat",
    "EncodeError",
    "BackendUnavailable",
]
