"""Tests for the oversampling estimator and plans."""

import logging

import numpy as np
import pytest

from nnreslice import OversampleError
from nnreslice.reslice import OversamplingPlan, estimate_oversampling, \
    make_oversampling_plan
from nnreslice.space import AffineTransform, Grid


def _rigid(translation=(0, 0, 0), angles=(0, 0, 0)):
    """Rotations about the first, second then third axis, then a shift."""
    mat = np.eye(4)
    for axis, angle in enumerate(angles):
        i, j = [a for a in range(3) if a != axis]
        rot = np.eye(4)
        rot[i, i] = rot[j, j] = np.cos(angle)
        rot[i, j], rot[j, i] = -np.sin(angle), np.sin(angle)
        mat = rot @ mat
    mat[:3, 3] = translation
    return mat


def _mapping(source, reference):
    """Reference voxel to source voxel."""
    return source.transform.solve(reference.transform)


class TestEstimateOversampling:

    def test_identity(self):
        assert estimate_oversampling(np.eye(4)) == (1, 1, 1)

    def test_coarse_reference(self):
        source = Grid((4, 4, 4), spacing=1)
        reference = Grid((2, 2, 2), spacing=2)
        assert estimate_oversampling(_mapping(source, reference)) == (2, 2, 2)

    def test_fine_reference(self):
        source = Grid((4, 4, 4), spacing=1)
        reference = Grid((8, 8, 8), spacing=0.5)
        assert estimate_oversampling(_mapping(source, reference)) == (1, 1, 1)

    def test_anisotropic(self):
        mapping = np.diag([3., 1., 0.5, 1.])
        assert estimate_oversampling(mapping) == (3, 1, 1)

    def test_rounding_noise(self):
        mapping = np.diag([1.0005, 2.001, 1., 1.])
        assert estimate_oversampling(mapping) == (1, 2, 1)

    def test_translation_is_ignored(self):
        mapping = AffineTransform.from_parts(linear=np.diag([2, 2, 2]),
                                             translation=[10, -3, 7])
        assert estimate_oversampling(mapping) == (2, 2, 2)

    def test_degenerate_step(self):
        assert estimate_oversampling(np.diag([0., 1., 1., 1.])) == (1, 1, 1)

    def test_rotated_reference(self):
        source = Grid((10, 10, 10))
        reference = Grid((5, 5, 5), transform=_rigid(
            [1, 2, 3], [0.3, -0.5, 0.7]) @ np.diag([2, 2, 2, 1]))
        assert estimate_oversampling(_mapping(source, reference)) == (2, 2, 2)

    def test_oblique_step(self):
        # A unit step along the first axis spans 1.5 voxels diagonally
        mapping = np.eye(4)
        mapping[:3, 0] = [1.5 / np.sqrt(2), 1.5 / np.sqrt(2), 0]
        assert estimate_oversampling(mapping) == (2, 1, 1)

    def test_monotonic_in_reference_spacing(self):
        source = Grid((16, 16, 16))
        previous = (1, 1, 1)
        for spacing in (0.5, 1, 1.5, 2, 3, 4.5):
            reference = Grid((4, 4, 4), spacing=spacing)
            factors = estimate_oversampling(_mapping(source, reference))
            assert all(f >= p for f, p in zip(factors, previous))
            previous = factors
        assert previous == (5, 5, 5)


class TestOversamplingPlan:

    def test_attributes(self):
        plan = OversamplingPlan((2, 1, 4))
        assert plan.factors == (2, 1, 4)
        np.testing.assert_allclose(plan.increment, [0.5, 1, 0.25])
        np.testing.assert_allclose(plan.origin_offset, [-0.25, 0, -0.375])
        assert plan.normalization == pytest.approx(1 / 8)
        assert plan.count == 8
        assert plan.active

    def test_offsets(self):
        offsets = OversamplingPlan((2, 1, 4)).offsets()
        assert offsets.shape == (8, 3)
        # The first axis varies fastest
        np.testing.assert_allclose(offsets[0], [-0.25, 0, -0.375])
        np.testing.assert_allclose(offsets[1], [0.25, 0, -0.375])
        np.testing.assert_allclose(offsets[2], [-0.25, 0, -0.125])
        # Samples are centered on the voxel
        np.testing.assert_allclose(offsets.mean(axis=0), 0, atol=1e-12)

    def test_inactive(self):
        plan = OversamplingPlan((1, 1, 1))
        assert not plan.active
        assert plan.normalization == 1
        np.testing.assert_array_equal(plan.offsets(), [[0, 0, 0]])

    @pytest.mark.parametrize('factors', [(0, 1, 1), (1, 1), (1, 1, 1, 1),
                                         (1.5, 1, 1), (1, 'a', 1)])
    def test_invalid(self, factors):
        with pytest.raises(OversampleError):
            OversamplingPlan(factors)

    def test_integral_floats(self):
        assert OversamplingPlan((2., 1, 1)).factors == (2, 1, 1)


class TestMakeOversamplingPlan:

    def test_estimated(self):
        plan = make_oversampling_plan(np.diag([2., 1., 3., 1.]))
        assert plan.factors == (2, 1, 3)

    def test_explicit_overrides_estimate(self):
        plan = make_oversampling_plan(np.diag([4., 4., 4., 1.]), [1, 1, 1])
        assert plan.factors == (1, 1, 1)
        assert not plan.active

    def test_scalar_is_broadcast(self):
        assert make_oversampling_plan(np.eye(4), 3).factors == (3, 3, 3)

    def test_integral_floats_are_accepted(self):
        assert make_oversampling_plan(np.eye(4), [2., 1, 1]).factors == (2, 1, 1)

    @pytest.mark.parametrize('oversample', [
        [0, 1, 1], [1, -2, 1], [1.5, 1, 1], [1, 1], 0, [1, 'a', 1],
    ])
    def test_invalid(self, oversample):
        with pytest.raises(OversampleError):
            make_oversampling_plan(np.eye(4), oversample)

    def test_logs_factors(self, caplog):
        caplog.set_level(logging.INFO, logger='nnreslice')
        make_oversampling_plan(np.diag([2., 2., 1., 1.]))
        assert 'using oversampling factors [ 2 2 1 ]' in caplog.text

    def test_silent_when_inactive(self, caplog):
        caplog.set_level(logging.INFO, logger='nnreslice')
        make_oversampling_plan(np.eye(4))
        assert 'oversampling' not in caplog.text
