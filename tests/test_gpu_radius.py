import numpy as np
import pytest

cp = pytest.importorskip('cupy')


@pytest.mark.parametrize('shape, radius', [
    ((1, 1), 2),
    ((31, 17), 0),
    ((64, 48), 4),
])
def test_gpu_kernel_matches_cpu(rng, shape, radius):
    from HeightfieldKit.algorithms import get

    elevation = rng.integers(-32768, 32768, size=shape, dtype=np.int16)
    try:
        actual = get('cupy').process(elevation, radius=radius, diff_floor=-100)
    except cp.cuda.runtime.CUDARuntimeError:
        pytest.skip('no CUDA device')
    expected = get('numpy').process(elevation, radius=radius, diff_floor=-100)

    assert np.array_equal(actual[0], expected[0])
    assert np.array_equal(actual[1], expected[1])
