"""
HeightfieldKit/core/pipeline.py

Decode -> (optional) radius analysis -> (optional) serialization, in strict
sequence. Each stage finishes before the next one starts.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

import numpy as np

from ..algorithms import analyze
from ..config.config_manager import get_config_manager
from ..config.system_config import resolve_backend
from ..io.decoder import decode_with_encoding, read_bytes
from ..io.encoder import write_raster
from ..utils.errors import HeightfieldError
from ..utils.types import PipelineResult
from .raster import CanonicalRaster, to_float_texture

logger = logging.getLogger(__name__)


@dataclass
class PipelineOptions:
    """Per-run options. ``None`` falls back to pipeline_presets.yaml."""
    analyze: bool = True
    radius: Optional[int] = None
    diff_floor: Optional[int] = None
    backend: Optional[str] = None
    output_path: Optional[Union[str, Path]] = None
    overwrite: bool = True
    chunk_size: Optional[int] = None
    num_workers: Optional[int] = None
    show_progress: bool = False

    def resolved(self) -> "PipelineOptions":
        defaults = get_config_manager().get_analysis_defaults()
        return PipelineOptions(
            analyze=self.analyze,
            radius=defaults["radius"] if self.radius is None else self.radius,
            diff_floor=defaults["diff_floor"] if self.diff_floor is None else self.diff_floor,
            backend=defaults["backend"] if self.backend is None else self.backend,
            output_path=self.output_path,
            overwrite=self.overwrite,
            chunk_size=self.chunk_size,
            num_workers=self.num_workers,
            show_progress=self.show_progress,
        )


def load_heightfield(path: Union[str, Path]) -> CanonicalRaster:
    """Decode only."""
    raster, _ = decode_with_encoding(read_bytes(path))
    return raster


def run_pipeline(source: Union[str, Path, bytes], options: Optional[PipelineOptions] = None) -> PipelineResult:
    """Run one raster through the pipeline.

    ``source`` is a file path or the raw file bytes. Errors from any stage
    are logged and re-raised; no later stage runs after a failure.
    """
    opts = (options or PipelineOptions()).resolved()
    start = time.perf_counter()

    try:
        data = source if isinstance(source, (bytes, bytearray, memoryview)) else read_bytes(source)
        raster, encoding = decode_with_encoding(data)

        backend = None
        if opts.analyze:
            backend = resolve_backend(opts.backend, raster.width * raster.height)
            analyze(
                raster, opts.radius,
                diff_floor=opts.diff_floor,
                backend=backend,
                chunk_size=opts.chunk_size,
                num_workers=opts.num_workers,
                show_progress=opts.show_progress,
            )

        output_path = None
        if opts.output_path is not None:
            output_path = write_raster(raster, opts.output_path, overwrite=opts.overwrite)
    except HeightfieldError as e:
        logger.error(f"Pipeline failed for {_describe(source)}: {e}")
        raise

    elapsed = time.perf_counter() - start
    logger.info(f"took {elapsed:.3f} seconds to process {_describe(source)}")
    return PipelineResult(
        raster=raster,
        encoding=encoding,
        backend=backend,
        output_path=output_path,
        elapsed_seconds=elapsed,
    )


def texture_for(raster: CanonicalRaster, divisor: Optional[float] = None) -> np.ndarray:
    """Float32 display buffer using the configured divisor."""
    if divisor is None:
        divisor = get_config_manager().get_texture_divisor()
    return to_float_texture(raster, divisor)


def _describe(source) -> str:
    if isinstance(source, (bytes, bytearray, memoryview)):
        return f"<{len(source)} bytes>"
    return str(source)
