"""
HeightfieldKit/utils/types.py
"""
from enum import Enum, IntEnum
from pathlib import Path
from typing import TYPE_CHECKING, Optional, NamedTuple

if TYPE_CHECKING:
    from ..core.raster import CanonicalRaster


class ColorType(str, Enum):
    GRAY = "gray"
    RGB = "rgb"
    RGBA = "rgba"


class SampleFormat(str, Enum):
    INT16 = "int16"
    UINT16 = "uint16"


class Channel(IntEnum):
    """Channel order of the canonical buffer"""
    ELEVATION = 0
    MAX_HEIGHT = 1
    MAX_DIFF = 2
    MARKER = 3


# デコード時に判定したソース形式
class SourceEncoding(NamedTuple):
    """Pixel encoding read from a raster header"""
    colortype: ColorType
    sample_format: SampleFormat
    width: int
    height: int
    band_count: int


class PipelineResult(NamedTuple):
    """Outcome of one pipeline run"""
    raster: "CanonicalRaster"
    encoding: SourceEncoding
    backend: Optional[str] = None
    output_path: Optional[Path] = None
    elapsed_seconds: float = 0.0
