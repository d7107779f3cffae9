"""Tests for interpolators."""

import numpy as np
import pytest

from nnreslice import DimensionError
from nnreslice.interpolate import Nearest, Linear, Cubic, get_interpolator
from nnreslice.space import Grid


@pytest.fixture
def ramp():
    """Volume whose value at (i, j, k) is i + 2j + 3k."""
    i, j, k = np.meshgrid(*(np.arange(4.),) * 3, indexing='ij')
    return i + 2 * j + 3 * k


class TestValidity:

    @pytest.mark.parametrize('position,expected', [
        ((0, 0, 0), True),
        ((-0.5, -0.5, -0.5), True),
        ((3.5, 3.5, 3.5), True),
        ((3.51, 1, 1), False),
        ((1, -0.51, 1), False),
        ((1, 1, np.nan), False),
        ((np.inf, 1, 1), False),
    ])
    def test_field_of_view(self, position, expected):
        interp = Linear(np.zeros((4, 4, 4)))
        assert bool(interp.valid(position)) is expected
        _, valid = interp.value_at(position)
        assert valid is expected

    def test_default_out_of_bounds_float(self):
        value, valid = Linear(np.ones((4, 4, 4))).value_at((10, 0, 0))
        assert not valid
        assert np.isnan(value)

    def test_default_out_of_bounds_integer(self):
        interp = Nearest(np.ones((4, 4, 4), dtype=np.int16))
        value, valid = interp.value_at((10, 0, 0))
        assert not valid
        assert value == 0

    def test_custom_out_of_bounds(self):
        interp = Linear(np.ones((4, 4, 4)), out_of_bounds=-1)
        assert interp.value_at((0, -1, 0)) == (-1, False)

    def test_values_at(self):
        interp = Linear(np.ones((4, 4, 4)))
        positions = np.array([[0, 0, 0], [5, 0, 0], [np.nan, 0, 0]])
        values, valid = interp.values_at(positions)
        np.testing.assert_array_equal(valid, [True, False, False])
        assert values[0] == 1
        assert np.isnan(values[1]) and np.isnan(values[2])


class TestKernels:

    def test_nearest(self, ramp):
        interp = Nearest(ramp)
        value, _ = interp.value_at((1.2, 2.7, 0.4))
        assert value == ramp[1, 3, 0]
        # Border positions are clamped
        assert interp.value_at((3.5, 0, 0))[0] == ramp[3, 0, 0]

    def test_linear_reproduces_ramp(self, ramp):
        interp = Linear(ramp)
        value, _ = interp.value_at((1.5, 0.25, 2))
        assert value == pytest.approx(8.0)
        # Integer positions return the voxel value
        assert interp.value_at((3, 2, 1))[0] == pytest.approx(ramp[3, 2, 1])

    def test_linear_clamps_at_border(self, ramp):
        interp = Linear(ramp)
        assert interp.value_at((-0.5, 0, 0))[0] == pytest.approx(0)
        assert interp.value_at((3.5, 0, 0))[0] == pytest.approx(3)

    def test_linear_ignores_nan_with_zero_weight(self):
        data = np.ones((4, 4, 4))
        data[2, 1, 1] = np.nan
        assert Linear(data).value_at((1, 1, 1))[0] == 1

    def test_cubic_constant(self):
        interp = Cubic(np.full((5, 5, 5), 3.))
        values, valid = interp.values_at(np.random.uniform(-0.5, 4.5, (20, 3)))
        assert valid.all()
        np.testing.assert_allclose(values, 3.)

    def test_cubic_interpolates_nodes(self):
        data = np.random.RandomState(0).randn(6, 5, 4)
        interp = Cubic(data)
        nodes = np.stack(np.meshgrid(*(np.arange(s) for s in data.shape),
                                     indexing='ij'), axis=-1)
        values, _ = interp.values_at(nodes)
        np.testing.assert_allclose(values, data, atol=1e-6)


class TestCursor:

    def test_non_spatial_axes(self):
        data = np.ones((3, 3, 3, 2)) * np.array([1., 2.])
        interp = Linear(data)
        assert interp.ndim == 4
        assert interp.value_at((1, 1, 1))[0] == 1
        interp.index[3] = 1
        assert interp.value_at((1, 1, 1))[0] == 2
        interp.reset()
        assert interp.index[3] == 0

    def test_too_few_axes(self):
        with pytest.raises(DimensionError):
            Linear(np.zeros((4, 4)))

    def test_voxel_size(self):
        grid = Grid((3, 3, 3, 2), spacing=(1, 2, 3))
        interp = Nearest(np.zeros(grid.shape), grid=grid)
        assert interp.voxel_size(1) == 2
        assert interp.voxel_size(3) == 1
        assert Nearest(np.zeros((3, 3, 3))).voxel_size(0) == 1

    @pytest.mark.parametrize('shape', [(3, 3, 3), (3, 3, 4, 2), (3, 3, 3, 3)])
    def test_grid_must_match_volume(self, shape):
        with pytest.raises(DimensionError):
            Linear(np.zeros((3, 3, 3, 2)), grid=Grid(shape))


class TestGetInterpolator:

    @pytest.mark.parametrize('order,klass', [
        (0, Nearest), ('nearest', Nearest), (1, Linear), ('Linear', Linear),
        (3, Cubic), ('cubic', Cubic), (Cubic, Cubic),
    ])
    def test_known(self, order, klass):
        assert get_interpolator(order) is klass

    @pytest.mark.parametrize('order', [2, 'sinc', None])
    def test_unknown(self, order):
        with pytest.raises(ValueError):
            get_interpolator(order)
