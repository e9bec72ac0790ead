"""
HeightfieldKit/config/system_config.py
"""

import multiprocessing, psutil, logging
from typing import Optional
from ..config.config_manager import get_config_manager

logger = logging.getLogger(__name__)


def detect_system_config() -> dict:
    """CPU数とメモリ量を取得"""
    return {
        "cpu_count": multiprocessing.cpu_count(),
        "memory_gb": psutil.virtual_memory().total // (1024**3),
    }


def resolve_backend(backend: str, pixel_count: int) -> str:
    """'auto' をピクセル数から numpy / dask に解決"""
    if backend != "auto":
        return backend
    threshold = get_config_manager().get_auto_dask_min_pixels()
    return "dask" if pixel_count >= threshold else "numpy"


def get_analysis_config(backend: str = "auto", pixel_count: int = 0,
                        chunk_size: Optional[int] = None,
                        num_workers: Optional[int] = None) -> dict:
    """解析バックエンドと並列設定を決定"""
    manager = get_config_manager()
    sys_config = detect_system_config()
    resolved = resolve_backend(backend, pixel_count)

    config = {"backend": resolved, "system_info": sys_config}

    if resolved == "dask":
        preset = manager.get_dask_preset()
        config["chunk_size"] = int(chunk_size or preset["chunk_size"])
        config["num_workers"] = int(num_workers or min(preset["max_workers"], sys_config["cpu_count"]))
    elif resolved == "reference" and pixel_count > manager.get_reference_max_pixels():
        logger.warning(
            f"Reference backend on {pixel_count} pixels will be very slow "
            f"(recommended <= {manager.get_reference_max_pixels()})"
        )

    logger.debug(f"Analysis config: {config}")
    return config
