"""
Test cases for plotting functions.
"""

import pytest
import numpy as np
import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt

import sys
import os
# Add parent directory to path to find pygeosynth package
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from pygeosynth.covariance import covariance_matrix
from pygeosynth.exceptions import InvalidArgumentError
from pygeosynth.kernels import create_kernel
from pygeosynth.plotting import plot_locations, plot_covariance, plot_variogram
from pygeosynth.synthesizer import SyntheticGenerator
from pygeosynth.variogram import kernel_variogram, empirical_variogram


class TestPlotting:
    """Test that plotting functions produce figures."""

    def setup_method(self):
        self.locations = SyntheticGenerator(seed=0).generate_locations(25, '2D')
        self.kernel = create_kernel('UnivariateMaternStationary')
        self.theta = [1.0, 0.1, 0.5]

    def teardown_method(self):
        plt.close('all')

    def test_plot_locations(self):
        fig = plot_locations(self.locations)
        assert isinstance(fig, plt.Figure)
        assert fig.axes[0].get_title() == '25 Locations (2D)'

    def test_plot_locations_on_axes(self):
        fig, ax = plt.subplots()
        returned = plot_locations(self.locations, show_order=False, ax=ax)
        assert returned is fig
        assert len(ax.collections) == 1

    def test_plot_covariance(self):
        sigma = covariance_matrix(self.kernel, self.locations, self.theta)
        fig = plot_covariance(sigma)
        assert isinstance(fig, plt.Figure)
        assert len(fig.axes[0].images) == 1

    def test_plot_covariance_rejects_vectors(self):
        with pytest.raises(InvalidArgumentError, match="2-D"):
            plot_covariance(np.ones(5))

    def test_plot_variogram_with_model(self):
        empirical = empirical_variogram(self.locations, self.locations.x, max_dist=0.5)
        model = kernel_variogram(self.kernel, self.theta, np.linspace(0, 0.5, 20))

        fig = plot_variogram(empirical, model=model)
        assert len(fig.axes[0].lines) == 2
