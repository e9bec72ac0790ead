import numpy as np
import pytest

from HeightfieldKit import (
    PipelineOptions,
    UnsupportedSampleFormat,
    load_heightfield,
    read_raster,
    run_pipeline,
    texture_for,
    to_float_texture,
)
from HeightfieldKit.utils.types import ColorType


def test_full_run_persists_analyzed_raster(write_tiff, tmp_path, rng):
    elevation = rng.integers(0, 65536, size=(12, 10), dtype=np.uint16)
    src = write_tiff("dem.tif", elevation)
    out = tmp_path / "dem_analyzed.tif"

    result = run_pipeline(src, PipelineOptions(radius=2, backend="numpy", output_path=out))

    assert result.encoding.colortype is ColorType.GRAY
    assert result.backend == "numpy"
    assert result.output_path == out
    assert result.elapsed_seconds >= 0
    assert np.all(result.raster.samples[:, :, 3] == 2)
    assert read_raster(out) == result.raster


def test_decode_only_run(write_tiff):
    src = write_tiff("dem.tif", np.full((3, 3), 7, dtype=np.int16))
    result = run_pipeline(src, PipelineOptions(analyze=False))

    assert result.backend is None
    assert result.output_path is None
    assert result.raster == load_heightfield(src)
    assert np.all(result.raster.samples[:, :, 3] == 32767)


def test_bytes_source(write_tiff):
    data = write_tiff("dem.tif", np.full((4, 4), 1000, dtype=np.int16)).read_bytes()
    result = run_pipeline(data, PipelineOptions(radius=1))

    assert np.all(result.raster.samples[:, :, 1] == 1000)
    assert np.all(result.raster.samples[:, :, 2] == 0)


def test_failed_decode_produces_no_output(write_tiff, tmp_path, caplog):
    src = write_tiff("dem8.tif", np.zeros((4, 4), dtype=np.uint8))
    out = tmp_path / "never.tif"

    with pytest.raises(UnsupportedSampleFormat):
        run_pipeline(src, PipelineOptions(output_path=out))

    assert not out.exists()
    assert "Pipeline failed" in caplog.text


def test_radius_default_comes_from_environment(write_tiff, monkeypatch):
    monkeypatch.setenv("HEIGHTFIELD_RADIUS", "3")
    src = write_tiff("dem.tif", np.zeros((5, 5), dtype=np.int16))

    result = run_pipeline(src)

    assert np.all(result.raster.samples[:, :, 3] == 3)
    assert result.backend == "numpy"


def test_texture_handoff_does_not_mutate(write_tiff):
    raster = load_heightfield(write_tiff("dem.tif", np.full((2, 2), 10930, dtype=np.int16)))
    before = raster.copy()

    texture = texture_for(raster)

    assert texture.dtype == np.float32
    assert texture.shape == (2 * 2 * 4,)
    assert np.allclose(texture[0::4], 1.0)
    assert raster == before
    assert np.array_equal(to_float_texture(raster, 2.0)[0::4], np.full(4, 5465.0, dtype=np.float32))


def test_elevation_range(write_tiff):
    raster = load_heightfield(write_tiff("dem.tif", np.array([[-5, 3], [9, 0]], dtype=np.int16)))
    assert raster.elevation_range() == (9, -5)


def test_reported_backend_is_the_one_that_ran(write_tiff, monkeypatch):
    import HeightfieldKit.algorithms as algorithms

    requested = []
    real_get = algorithms.get

    def _recording_get(name):
        requested.append(name)
        return real_get(name)

    monkeypatch.setattr(algorithms, "get", _recording_get)
    src = write_tiff("dem.tif", np.zeros((6, 6), dtype=np.int16))

    result = run_pipeline(src, PipelineOptions(radius=1, backend="auto"))

    assert requested == [result.backend]
    assert result.backend == "numpy"
