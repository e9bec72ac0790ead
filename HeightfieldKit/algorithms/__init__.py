"""
HeightfieldKit/algorithms/__init__.py
"""
import importlib
import logging

from .base import BaseAlgorithm
from .radius_analysis import (
    NEIGHBOR_OFFSETS,
    RadiusAnalysisAlgorithm,
    ReferenceRadiusAnalysisAlgorithm,
    analyze_pixel,
    disk_offsets,
    validate_diff_floor,
    validate_radius,
    write_results,
)
from ..config.system_config import get_analysis_config
from ..utils.errors import BackendUnavailable

logger = logging.getLogger(__name__)

__all__ = [
    'BaseAlgorithm',
    'NEIGHBOR_OFFSETS',
    'RadiusAnalysisAlgorithm',
    'ReferenceRadiusAnalysisAlgorithm',
    'analyze',
    'analyze_pixel',
    'disk_offsets',
    'get',
]

# name -> (module, class); optional backends are imported on first use
_REGISTRY = {
    "numpy": ("radius_analysis", "RadiusAnalysisAlgorithm"),
    "reference": ("radius_analysis", "ReferenceRadiusAnalysisAlgorithm"),
    "dask": ("dask_radius", "DaskRadiusAnalysisAlgorithm"),
    "cupy": ("gpu_radius", "GpuRadiusAnalysisAlgorithm"),
}


def get(name: str) -> BaseAlgorithm:
    try:
        module_name, class_name = _REGISTRY[name]
    except KeyError:
        raise ValueError(f"Unknown analysis backend: {name} (choose from {sorted(_REGISTRY)})") from None

    try:
        module = importlib.import_module(f".{module_name}", __name__)
    except ImportError as e:
        raise BackendUnavailable(f"Backend {name} is not available: {e}") from e
    return getattr(module, class_name)()


def analyze(raster, radius, *, diff_floor=0, backend="numpy", **params):
    """Run the radius analysis kernel on ``raster`` in place and return it.

    Channel 0 is only read; channels 1-3 receive max height, max uphill
    difference and ``radius``. ``backend`` may be ``auto``.
    """
    radius = validate_radius(radius)
    diff_floor = validate_diff_floor(diff_floor)

    config = get_analysis_config(
        backend,
        pixel_count=raster.width * raster.height,
        chunk_size=params.pop("chunk_size", None),
        num_workers=params.pop("num_workers", None),
    )
    for key in ("chunk_size", "num_workers"):
        if key in config:
            params[key] = config[key]

    algo = get(config["backend"])
    logger.info(f"Radius analysis: backend={config['backend']}, radius={radius}, {raster.width}x{raster.height}")
    max_height, max_diff = algo.process(raster.elevation, radius=radius, diff_floor=diff_floor, **params)
    return write_results(raster, max_height, max_diff, radius)
