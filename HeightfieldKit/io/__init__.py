from .decoder import decode, read_raster
from .encoder import encode, write_raster
from .raster_info import inspect_encoding

__all__ = ["decode", "read_raster", "encode", "write_raster", "inspect_encoding"]
