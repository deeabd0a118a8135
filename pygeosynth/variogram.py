"""
Variogram analysis for covariance kernels and sampled fields.
"""

import numpy as np
from scipy.spatial.distance import pdist
from typing import Optional, Sequence

from .exceptions import InvalidArgumentError
from .kernels.base import Kernel
from .locations import Locations


class Variogram:
    """
    Semivariogram values over distance.

    Attributes
    ----------
    distances : np.ndarray
        Distances (bin centers for empirical variograms)
    gamma : np.ndarray
        Semivariance values
    n_pairs : np.ndarray
        Number of pairs in each distance bin (zeros for theoretical variograms)
    """

    def __init__(self, distances: np.ndarray, gamma: np.ndarray, n_pairs: np.ndarray):
        self.distances = distances
        self.gamma = gamma
        self.n_pairs = n_pairs


def kernel_variogram(kernel: Kernel, theta: Sequence[float],
                     distances: Sequence[float]) -> Variogram:
    """
    Theoretical semivariogram of a univariate stationary kernel.

        gamma(h) = C(0) - C(h)

    The kernel is evaluated between the origin and points placed at the
    requested distances along the x axis, with the Euclidean metric.

    Parameters
    ----------
    kernel : Kernel
        Univariate kernel on 2D locations
    theta : sequence of float
        Kernel parameters
    distances : sequence of float
        Non-negative lags

    Returns
    -------
    Variogram
        Semivariances at the requested lags

    Examples
    --------
    >>> var_obj = kernel_variogram(create_kernel('UnivariateMaternStationary'),
    ...                            [1.0, 0.1, 0.5], np.linspace(0, 1, 20))
    """
    if kernel.variables_number != 1:
        raise InvalidArgumentError(f"{kernel.name} is multivariate; variograms need a univariate kernel")
    distances = np.asarray(distances, dtype=float).ravel()
    if len(distances) == 0 or np.any(distances < 0):
        raise InvalidArgumentError("distances must be a non-empty array of non-negative lags")

    origin = Locations.from_arrays([0.0], [0.0])
    lags = Locations.from_arrays(distances, np.zeros_like(distances))

    sill = np.empty(1)
    kernel.generate_covariance_matrix(sill, 1, 1, 0, 0, origin, origin, None, theta, 0)
    cov = np.empty(len(distances))
    kernel.generate_covariance_matrix(cov, 1, len(distances), 0, 0, origin, lags, None, theta, 0)

    return Variogram(distances, sill[0] - cov, np.zeros(len(distances), dtype=int))


def empirical_variogram(locations: Locations, values: np.ndarray,
                        max_dist: Optional[float] = None, n_bins: int = 15) -> Variogram:
    """
    Classical empirical semivariogram of values observed at locations.

    Parameters
    ----------
    locations : Locations
        Observation locations (spatial axes are used)
    values : np.ndarray
        One value per location
    max_dist : float, optional
        Maximum pair distance; defaults to a third of the largest distance
    n_bins : int, default=15
        Number of distance bins

    Returns
    -------
    Variogram
        Non-empty bins with their centers, semivariances and pair counts
    """
    values = np.asarray(values, dtype=float).ravel()
    if len(values) != locations.size:
        raise InvalidArgumentError(
            f"Expected {locations.size} values, got {len(values)}"
        )
    if n_bins <= 0:
        raise InvalidArgumentError(f"n_bins must be positive, got {n_bins}")

    coords = locations.spatial_coordinates()
    valid = np.all(np.isfinite(coords), axis=1) & np.isfinite(values)
    coords = coords[valid]
    values = values[valid]
    if len(values) < 2:
        raise InvalidArgumentError("Insufficient valid observations for variogram computation")

    distances = pdist(coords)
    semivariances = 0.5 * pdist(values.reshape(-1, 1), metric="sqeuclidean")

    if max_dist is None:
        max_dist = np.max(distances) / 3
    if not max_dist > 0:
        raise InvalidArgumentError("No pairs within specified maximum distance")

    within = distances <= max_dist
    distances = distances[within]
    semivariances = semivariances[within]
    if len(distances) == 0:
        raise InvalidArgumentError("No pairs within specified maximum distance")

    bin_edges = np.linspace(0, max_dist, n_bins + 1)
    bin_centers = (bin_edges[:-1] + bin_edges[1:]) / 2
    # Last bin is closed so pairs at exactly max_dist are kept
    bins = np.clip(np.digitize(distances, bin_edges) - 1, 0, n_bins - 1)

    n_pairs = np.bincount(bins, minlength=n_bins)
    sums = np.bincount(bins, weights=semivariances, minlength=n_bins)

    non_empty = n_pairs > 0
    gamma = sums[non_empty] / n_pairs[non_empty]
    return Variogram(bin_centers[non_empty], gamma, n_pairs[non_empty])
