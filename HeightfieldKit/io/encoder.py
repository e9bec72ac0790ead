"""
HeightfieldKit/io/encoder.py

Serialize the canonical buffer as an RGBA unsigned 16-bit GeoTIFF.
"""
from __future__ import annotations

import logging
import os
import warnings
from pathlib import Path
from typing import Union

import numpy as np
from rasterio.errors import NotGeoreferencedWarning, RasterioError
from rasterio.io import MemoryFile

from ..core.bias import to_unsigned
from ..core.raster import CHANNELS, CanonicalRaster
from ..utils.errors import EncodeError, RasterIoError

logger = logging.getLogger(__name__)


def output_profile(raster: CanonicalRaster) -> dict:
    """Fixed creation profile. No georeferencing or timestamps are written."""
    return {
        "driver": "GTiff",
        "width": raster.width,
        "height": raster.height,
        "count": CHANNELS,
        "dtype": "uint16",
        "photometric": "RGB",
        "alpha": "YES",
        "interleave": "pixel",
        "tiled": False,
    }


def encode(raster: CanonicalRaster) -> bytes:
    """Encode ``raster`` to GeoTIFF bytes (4 x uint16, inverse bias)."""
    bands = np.ascontiguousarray(np.moveaxis(to_unsigned(raster.samples), -1, 0))

    try:
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", NotGeoreferencedWarning)
            with MemoryFile() as memfile:
                with memfile.open(**output_profile(raster)) as dst:
                    dst.write(bands)
                data = memfile.read()
    except (RasterioError, OSError) as e:
        raise EncodeError(f"cannot encode {raster!r}: {e}") from e

    if not data:
        raise EncodeError(f"encoder produced no bytes for {raster!r}")
    return data


def write_raster(raster: CanonicalRaster, path: Union[str, Path], overwrite: bool = True) -> Path:
    """Encode and publish ``raster`` at ``path`` via a temporary sibling file.

    The destination is replaced atomically; on failure the temporary file is
    removed and any existing file at ``path`` is left as it was.
    """
    dst = Path(path)
    if dst.exists() and not overwrite:
        raise RasterIoError(f"output file already exists: {dst}")

    data = encode(raster)
    tmp = dst.with_suffix(".tmp.tif")
    try:
        with open(tmp, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp, dst)
    except OSError as e:
        raise RasterIoError(f"cannot write {dst}: {e}") from e
    finally:
        tmp.unlink(missing_ok=True)

    logger.info(f"Wrote {raster.width}x{raster.height} RGBA16 raster: {dst} ({len(data)} bytes)")
    return dst
