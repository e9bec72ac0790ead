import sys
from pathlib import Path

import numpy as np
import pytest
import rasterio

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


def _write_tiff(path, bands, **profile):
    bands = np.asarray(bands)
    if bands.ndim == 2:
        bands = bands[np.newaxis]
    count, height, width = bands.shape
    colormap = profile.pop("colormap", None)
    with rasterio.open(
        path, "w", driver="GTiff", width=width, height=height,
        count=count, dtype=bands.dtype, **profile,
    ) as dst:
        dst.write(bands)
        if colormap is not None:
            dst.write_colormap(1, colormap)
    return Path(path)


@pytest.fixture
def write_tiff(tmp_path):
    """write_tiff(name, bands, **profile) -> Path; bands is (count, h, w) or (h, w)."""
    def _factory(name, bands, **profile):
        return _write_tiff(tmp_path / name, bands, **profile)
    return _factory


@pytest.fixture
def rng():
    return np.random.default_rng(20240611)


@pytest.fixture(autouse=True)
def _fresh_config(monkeypatch):
    from HeightfieldKit.config.config_manager import ConfigManager

    for key in ("HEIGHTFIELD_RADIUS", "HEIGHTFIELD_BACKEND",
                "HEIGHTFIELD_CHUNK_SIZE", "HEIGHTFIELD_NUM_WORKERS"):
        monkeypatch.delenv(key, raising=False)
    ConfigManager.reset()
    yield
    ConfigManager.reset()
