"""
Test cases for variogram analysis.
"""

import pytest
import numpy as np

import sys
import os
# Add parent directory to path to find pygeosynth package
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from pygeosynth.exceptions import InvalidArgumentError
from pygeosynth.kernels import create_kernel
from pygeosynth.locations import Locations
from pygeosynth.synthesizer import SyntheticGenerator
from pygeosynth.variogram import Variogram, kernel_variogram, empirical_variogram


class TestKernelVariogram:
    """Test theoretical variograms of covariance kernels."""

    def test_exponential_model(self):
        """Smoothness 0.5 gives the exponential variogram."""
        h = np.linspace(0, 1, 30)
        variogram_obj = kernel_variogram(create_kernel('UnivariateMaternStationary'),
                                         [2.0, 0.25, 0.5], h)

        assert isinstance(variogram_obj, Variogram)
        assert variogram_obj.gamma[0] == 0.0
        np.testing.assert_allclose(variogram_obj.gamma, 2.0 * (1 - np.exp(-h / 0.25)),
                                   rtol=1e-10, atol=1e-12)

    def test_nugget_jump(self):
        """A nugget shows up as a jump just past zero distance."""
        variogram_obj = kernel_variogram(create_kernel('UnivariateMaternNuggetsStationary'),
                                         [1.0, 0.1, 1.5, 0.4], [0.0, 1e-8])

        assert variogram_obj.gamma[0] == 0.0
        np.testing.assert_allclose(variogram_obj.gamma[1], 0.4, atol=1e-6)

    def test_monotone(self):
        variogram_obj = kernel_variogram(create_kernel('UnivariateMaternStationary'),
                                         [1.0, 0.1, 1.5], np.linspace(0, 1, 40))
        assert np.all(np.diff(variogram_obj.gamma) >= 0)
        assert variogram_obj.gamma[-1] <= 1.0

    def test_multivariate_rejected(self):
        with pytest.raises(InvalidArgumentError, match="univariate"):
            kernel_variogram(create_kernel('BivariateMaternParsimonious'),
                             [1.0, 1.0, 0.1, 0.5, 0.5, 0.5], [0.0, 0.1])

    def test_negative_distances(self):
        with pytest.raises(InvalidArgumentError, match="non-negative"):
            kernel_variogram(create_kernel('UnivariateMaternStationary'), [1.0, 0.1, 0.5], [-0.1])


class TestEmpiricalVariogram:
    """Test the binned classical estimator."""

    def setup_method(self):
        """Set up jittered grid locations."""
        self.locations = SyntheticGenerator(seed=42).generate_locations(100, '2D')

    def test_constant_field(self):
        variogram_obj = empirical_variogram(self.locations, np.full(100, 3.0), n_bins=10)

        np.testing.assert_array_equal(variogram_obj.gamma, 0.0)
        assert np.all(variogram_obj.n_pairs > 0)

    def test_linear_field_bounds(self):
        """For values equal to x, semivariances stay below half the squared distance."""
        max_dist = 0.5
        n_bins = 10
        variogram_obj = empirical_variogram(self.locations, self.locations.x,
                                            max_dist=max_dist, n_bins=n_bins)

        upper_edges = variogram_obj.distances + max_dist / n_bins / 2
        assert np.all(variogram_obj.gamma <= 0.5 * upper_edges ** 2 + 1e-12)
        assert np.all(np.diff(variogram_obj.distances) > 0)
        assert np.all(variogram_obj.distances < max_dist)

    def test_pair_count(self):
        """Every pair within max_dist lands in exactly one bin."""
        coords = self.locations.spatial_coordinates()
        diffs = coords[:, np.newaxis, :] - coords[np.newaxis, :, :]
        d = np.sqrt((diffs ** 2).sum(axis=-1))
        expected = int(np.sum(np.triu(d <= 0.3, k=1)))

        variogram_obj = empirical_variogram(self.locations, self.locations.y, max_dist=0.3)
        assert variogram_obj.n_pairs.sum() == expected

    def test_nan_values_dropped(self):
        values = self.locations.x.copy()
        values[:10] = np.nan
        variogram_obj = empirical_variogram(self.locations, values, max_dist=0.3)

        assert np.all(np.isfinite(variogram_obj.gamma))

    def test_invalid_inputs(self):
        with pytest.raises(InvalidArgumentError, match="Expected 100 values"):
            empirical_variogram(self.locations, np.zeros(5))
        with pytest.raises(InvalidArgumentError, match="n_bins"):
            empirical_variogram(self.locations, np.zeros(100), n_bins=0)

        single = Locations.from_arrays([0.5], [0.5])
        with pytest.raises(InvalidArgumentError, match="Insufficient"):
            empirical_variogram(single, [1.0])
