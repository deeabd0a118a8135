"""
pyGeoSynth: Synthetic Geospatial Data and Matérn Covariance Kernels

A Python package for generating synthetic 2D, 3D and space-time location
sets in Morton order and filling covariance tiles with a family of
stationary, non-stationary, space-time and multivariate Matérn kernels.
"""

from .control import SynthesisControl, parse_theta
from .covariance import covariance_matrix, tile_ranges
from .exceptions import (
    GeoSynthError,
    InvalidArgumentError,
    InvalidParameterError,
    UnknownKernelError,
    NumericalDegenerateError,
)
from .kernels import KERNEL_REGISTRY, KernelRegistry, Kernel, create_kernel
from .locations import Locations
from .plotting import plot_locations, plot_covariance, plot_variogram
from .spatial import sort_locations
from .synthesizer import SyntheticGenerator, generate_locations
from .utils import Dimension, DistanceMetric
from .variogram import Variogram, kernel_variogram, empirical_variogram

__version__ = "0.1.0"
__author__ = "Python GeoSynth Implementation"

__all__ = [
    "SynthesisControl",
    "parse_theta",
    "covariance_matrix",
    "tile_ranges",
    "GeoSynthError",
    "InvalidArgumentError",
    "InvalidParameterError",
    "UnknownKernelError",
    "NumericalDegenerateError",
    "KERNEL_REGISTRY",
    "KernelRegistry",
    "Kernel",
    "create_kernel",
    "Locations",
    "plot_locations",
    "plot_covariance",
    "plot_variogram",
    "sort_locations",
    "SyntheticGenerator",
    "generate_locations",
    "Dimension",
    "DistanceMetric",
    "Variogram",
    "kernel_variogram",
    "empirical_variogram",
]
