import os
import warnings

import numpy as np
import pytest
import rasterio
from rasterio.enums import ColorInterp
from rasterio.errors import NotGeoreferencedWarning

from HeightfieldKit.core.raster import CanonicalRaster
from HeightfieldKit.io import decoder, encoder
from HeightfieldKit.io.decoder import decode, read_raster
from HeightfieldKit.io.encoder import encode, write_raster
from HeightfieldKit.utils.errors import EncodeError, RasterIoError


def _random_raster(rng, width=9, height=7):
    samples = rng.integers(-32768, 32768, size=(height, width, 4), dtype=np.int16)
    return CanonicalRaster(width, height, samples)


def test_round_trip_is_exact(rng):
    raster = _random_raster(rng)
    raster.samples[0, 0] = [-32768, 32767, 0, -1]

    assert decode(encode(raster)) == raster


def test_round_trip_from_unsigned_rgba_source(write_tiff, rng):
    bands = rng.integers(0, 65536, size=(4, 5, 8), dtype=np.uint16)
    original = read_raster(write_tiff("src.tif", bands, photometric="RGB", alpha="YES"))

    assert decode(encode(original)) == original


def test_encoding_is_byte_reproducible(rng):
    raster = _random_raster(rng)
    assert encode(raster) == encode(raster.copy())


def test_output_is_rgba_uint16(tmp_path, rng):
    raster = _random_raster(rng, width=4, height=3)
    path = write_raster(raster, tmp_path / "out.tif")

    with rasterio.open(path) as src:
        assert src.count == 4
        assert set(src.dtypes) == {"uint16"}
        assert (src.width, src.height) == (4, 3)
        assert tuple(src.colorinterp[:3]) == (ColorInterp.red, ColorInterp.green, ColorInterp.blue)
        assert src.colorinterp[3] in (ColorInterp.alpha, ColorInterp.undefined)
        elevation = src.read(1)

    expected = (raster.samples[:, :, 0].astype(np.int32) + 32768).astype(np.uint16)
    assert np.array_equal(elevation, expected)


def test_write_leaves_no_temporary_file(tmp_path, rng):
    write_raster(_random_raster(rng), tmp_path / "out.tif")
    assert sorted(p.name for p in tmp_path.iterdir()) == ["out.tif"]


def test_write_to_missing_directory_is_io_error(tmp_path, rng):
    with pytest.raises(RasterIoError):
        write_raster(_random_raster(rng), tmp_path / "missing" / "out.tif")


def test_failed_publish_keeps_previous_file(tmp_path, rng, monkeypatch):
    dst = tmp_path / "out.tif"
    dst.write_bytes(b"previous")

    def _fail(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr(encoder.os, "replace", _fail)
    with pytest.raises(RasterIoError):
        write_raster(_random_raster(rng), dst)

    assert dst.read_bytes() == b"previous"
    assert not (tmp_path / "out.tmp.tif").exists()


def test_encode_failure_produces_no_file(tmp_path, rng, monkeypatch):
    def _fail(raster):
        raise EncodeError("boom")

    monkeypatch.setattr(encoder, "encode", _fail)
    with pytest.raises(EncodeError):
        write_raster(_random_raster(rng), tmp_path / "out.tif")
    assert list(tmp_path.iterdir()) == []


def test_overwrite_false_refuses_existing_file(tmp_path, rng):
    dst = tmp_path / "out.tif"
    dst.write_bytes(b"keep")
    with pytest.raises(RasterIoError):
        write_raster(_random_raster(rng), dst, overwrite=False)
    assert dst.read_bytes() == b"keep"


def test_written_file_decodes_back(tmp_path, rng):
    raster = _random_raster(rng)
    path = write_raster(raster, tmp_path / "out.tif")
    assert os.path.getsize(path) > 0
    assert decoder.read_raster(path) == raster


@pytest.mark.parametrize("wrap", [bytearray, memoryview])
def test_decode_accepts_buffer_types(rng, wrap):
    raster = _random_raster(rng, width=3, height=2)
    assert decode(wrap(encode(raster))) == raster


def test_encode_emits_no_georeference_warning(rng):
    with warnings.catch_warnings():
        warnings.simplefilter("error", NotGeoreferencedWarning)
        encode(_random_raster(rng))
