"""
Test cases for tiled covariance assembly.
"""

import pytest
import numpy as np

import sys
import os
# Add parent directory to path to find pygeosynth package
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from pygeosynth.covariance import tile_ranges, covariance_matrix
from pygeosynth.exceptions import InvalidArgumentError
from pygeosynth.kernels import create_kernel
from pygeosynth.synthesizer import SyntheticGenerator


class TestTileRanges:
    """Test splitting a matrix extent into tiles."""

    def test_even_split(self):
        assert list(tile_ranges(6, 3)) == [(0, 3), (3, 3)]

    def test_ragged_last_tile(self):
        assert list(tile_ranges(5, 2)) == [(0, 2), (2, 2), (4, 1)]

    def test_single_tile(self):
        assert list(tile_ranges(4, 10)) == [(0, 4)]

    def test_invalid(self):
        with pytest.raises(InvalidArgumentError, match="tile_size"):
            list(tile_ranges(4, 0))
        with pytest.raises(InvalidArgumentError, match="extent"):
            list(tile_ranges(0, 2))


class TestCovarianceMatrix:
    """Test dense assembly from per-tile kernel calls."""

    def setup_method(self):
        generator = SyntheticGenerator(seed=8)
        self.locations = generator.generate_locations(12, '2D')
        self.other = generator.generate_locations(5, '2D')
        self.kernel = create_kernel('UnivariateMaternStationary')
        self.theta = [1.0, 0.2, 1.5]

    def test_tile_size_does_not_change_result(self):
        whole = covariance_matrix(self.kernel, self.locations, self.theta)
        for tile_size in (1, 4, 5, 12):
            tiled = covariance_matrix(self.kernel, self.locations, self.theta, tile_size=tile_size)
            np.testing.assert_allclose(tiled, whole, rtol=1e-12)

    def test_fortran_order(self):
        sigma = covariance_matrix(self.kernel, self.locations, self.theta, tile_size=5)
        assert sigma.flags.f_contiguous
        assert sigma.shape == (12, 12)

    def test_rectangular(self):
        """Cross covariances between two location sets."""
        cross = covariance_matrix(self.kernel, self.locations, self.theta,
                                  locations2=self.other, tile_size=4)
        reverse = covariance_matrix(self.kernel, self.other, self.theta,
                                    locations2=self.locations, tile_size=3)

        assert cross.shape == (12, 5)
        np.testing.assert_allclose(cross, reverse.T, rtol=1e-12)

    def test_multivariate_extent(self):
        kernel = create_kernel('TrivariateMaternParsimonious')
        theta = [1.0, 2.0, 3.0, 0.1, 0.5, 1.0, 1.5, 0.3, 0.2, 0.1]
        sigma = covariance_matrix(kernel, self.locations, theta, tile_size=7)

        assert sigma.shape == (36, 36)
        np.testing.assert_allclose(np.diag(sigma), np.tile([1.0, 2.0, 3.0], 12))

    def test_single_precision(self):
        kernel = create_kernel('UnivariateMaternStationary', 'single')
        sigma = covariance_matrix(kernel, self.locations, self.theta, tile_size=5)
        double = covariance_matrix(self.kernel, self.locations, self.theta)

        assert sigma.dtype == np.float32
        np.testing.assert_allclose(sigma, double, rtol=1e-5, atol=1e-6)

    def test_great_circle(self):
        """Metric selectors pass through to every tile."""
        euclid = covariance_matrix(self.kernel, self.locations, self.theta)
        gcd = covariance_matrix(self.kernel, self.locations, [1.0, 20.0, 1.5],
                                distance_metric='great_circle', tile_size=5)

        assert not np.allclose(euclid, gcd)
        np.testing.assert_allclose(np.diag(gcd), 1.0)
