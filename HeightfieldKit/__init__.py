"""
HeightfieldKit

16-bit height raster ingestion, radius analysis and lossless round-trip.
"""
from .core.raster import CanonicalRaster, to_float_texture
from .core.pipeline import PipelineOptions, load_heightfield, run_pipeline, texture_for
from .io.decoder import decode, read_raster
from .io.encoder import encode, write_raster
from .algorithms import analyze
from .utils.errors import (
    BackendUnavailable,
    DecodeError,
    EncodeError,
    HeightfieldError,
    RasterIoError,
    UnsupportedColorType,
    UnsupportedSampleFormat,
)
from .utils.types import Channel, ColorType, PipelineResult, SampleFormat, SourceEncoding

__version__ = "0.1.0"

__all__ = [
    "CanonicalRaster",
    "Channel",
    "ColorType",
    "PipelineOptions",
    "PipelineResult",
    "SampleFormat",
    "SourceEncoding",
    "analyze",
    "decode",
    "encode",
    "load_heightfield",
    "read_raster",
    "run_pipeline",
    "texture_for",
    "to_float_texture",
    "write_raster",
    "BackendUnavailable",
    "DecodeError",
    "EncodeError",
    "HeightfieldError",
    "RasterIoError",
    "UnsupportedColorType",
    "UnsupportedSampleFormat",
]
