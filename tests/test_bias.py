import numpy as np
import pytest

from HeightfieldKit.core.bias import to_signed, to_unsigned


def test_bias_endpoints():
    out = to_signed(np.array([0, 32768, 65535], dtype=np.uint16))
    assert out.tolist() == [-32768, 0, 32767]


def test_bias_is_a_bijection_over_full_domain():
    unsigned = np.arange(65536, dtype=np.uint32).astype(np.uint16)
    signed = to_signed(unsigned)

    assert signed.dtype == np.int16
    assert np.unique(signed).size == 65536
    assert np.array_equal(to_unsigned(signed), unsigned)

    all_signed = np.arange(-32768, 32768, dtype=np.int32).astype(np.int16)
    assert np.array_equal(to_signed(to_unsigned(all_signed)), all_signed)


def test_bias_preserves_order():
    signed = to_signed(np.arange(65536, dtype=np.uint32).astype(np.uint16))
    assert np.all(np.diff(signed.astype(np.int32)) == 1)


def test_bias_rejects_wrong_dtype():
    with pytest.raises(TypeError):
        to_signed(np.array([1, 2], dtype=np.int32))
    with pytest.raises(TypeError):
        to_unsigned(np.array([1, 2], dtype=np.uint16))
