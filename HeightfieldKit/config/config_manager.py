import os
import yaml
import logging
from pathlib import Path
from typing import Dict, Any

logger = logging.getLogger(__name__)

BACKENDS = ("auto", "numpy", "dask", "cupy", "reference")


class ConfigManager:
    """パイプライン設定の一元管理"""

    _instance = None
    _config = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._load_config()
        return cls._instance

    def _load_config(self):
        """YAMLファイルから設定を読み込み"""
        config_path = Path(__file__).parent / "pipeline_presets.yaml"
        with open(config_path, encoding="utf-8-sig") as f:
            self._config = yaml.safe_load(f)

    @classmethod
    def reset(cls):
        """Drop the cached instance so the YAML is read again."""
        cls._instance = None

    def get_analysis_defaults(self) -> Dict[str, Any]:
        """Analysis defaults with environment overrides applied."""
        defaults = self._config["analysis"].copy()

        if radius := os.getenv("HEIGHTFIELD_RADIUS"):
            defaults["radius"] = int(radius)
            logger.info(f"Overriding radius to {radius} from env")

        if backend := os.getenv("HEIGHTFIELD_BACKEND"):
            backend = backend.strip().lower()
            if backend in BACKENDS:
                defaults["backend"] = backend
                logger.info(f"Overriding backend to {backend} from env")
            else:
                logger.warning(f"Unknown backend in HEIGHTFIELD_BACKEND: {backend}, keeping {defaults['backend']}")

        return defaults

    def get_dask_preset(self) -> Dict[str, Any]:
        preset = self._config["backends"]["dask"].copy()

        if chunk_size := os.getenv("HEIGHTFIELD_CHUNK_SIZE"):
            preset["chunk_size"] = int(chunk_size)
            logger.info(f"Overriding chunk_size to {chunk_size} from env")

        if num_workers := os.getenv("HEIGHTFIELD_NUM_WORKERS"):
            preset["max_workers"] = int(num_workers)
            logger.info(f"Overriding max_workers to {num_workers} from env")

        return preset

    def get_auto_dask_min_pixels(self) -> int:
        return int(self._config["backends"]["auto_dask_min_pixels"])

    def get_reference_max_pixels(self) -> int:
        return int(self._config["backends"]["reference"]["max_pixels"])

    def get_texture_divisor(self) -> float:
        return float(self._config["texture"]["divisor"])


def get_config_manager() -> ConfigManager:
    return ConfigManager()
