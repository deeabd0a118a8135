"""
Covariance kernel contract, distance metrics and Matérn building blocks.
"""

import warnings

import numpy as np
from abc import ABC, abstractmethod
from scipy.special import gamma, kv
from typing import Callable, Optional, Sequence, Tuple, Union

from ..exceptions import InvalidArgumentError, InvalidParameterError, NumericalDegenerateError
from ..locations import Locations
from ..utils import DistanceMetric, parse_distance_metric, tile_view

EARTH_RADIUS_KM = 6371.0


def euclidean_distance(locations1: Locations, index1: np.ndarray,
                       locations2: Locations, index2: np.ndarray) -> np.ndarray:
    """
    Pairwise Euclidean distances over the spatial axes.

    Parameters
    ----------
    locations1, locations2 : Locations
        Location sets with the same spatial axes
    index1, index2 : np.ndarray
        Point indices into each set

    Returns
    -------
    np.ndarray
        (len(index1), len(index2)) distance matrix
    """
    axes = locations1.spatial_axes
    if axes != locations2.spatial_axes:
        raise InvalidArgumentError(
            f"Location sets have different spatial axes: {axes} and {locations2.spatial_axes}"
        )
    squared = np.zeros((len(index1), len(index2)))
    for name in axes:
        diff = getattr(locations1, name)[index1][:, np.newaxis] - \
            getattr(locations2, name)[index2][np.newaxis, :]
        squared += diff ** 2
    return np.sqrt(squared)


def great_circle_distance(locations1: Locations, index1: np.ndarray,
                          locations2: Locations, index2: np.ndarray) -> np.ndarray:
    """
    Pairwise haversine distances in kilometres.

    ``x`` is read as longitude and ``y`` as latitude, both in degrees, on a
    sphere of radius :data:`EARTH_RADIUS_KM`. Any z axis is ignored.
    """
    lon1 = np.radians(locations1.x[index1])[:, np.newaxis]
    lat1 = np.radians(locations1.y[index1])[:, np.newaxis]
    lon2 = np.radians(locations2.x[index2])[np.newaxis, :]
    lat2 = np.radians(locations2.y[index2])[np.newaxis, :]

    u = np.sin((lat2 - lat1) / 2)
    v = np.sin((lon2 - lon1) / 2)
    h = u * u + np.cos(lat1) * np.cos(lat2) * v * v
    return 2.0 * EARTH_RADIUS_KM * np.arcsin(np.sqrt(np.clip(h, 0.0, 1.0)))


DISTANCE_FUNCTIONS = {
    DistanceMetric.EUCLIDEAN: euclidean_distance,
    DistanceMetric.GREAT_CIRCLE: great_circle_distance,
}


def distance_function(metric: Union[int, str, DistanceMetric]) -> Callable:
    """Resolve a metric selector to its pairwise distance function."""
    return DISTANCE_FUNCTIONS[parse_distance_metric(metric)]


def matern_correlation(distance: np.ndarray, smoothness, range_param=1.0) -> np.ndarray:
    """
    Matérn correlation function.

        M(d) = (d/range)^nu * K_nu(d/range) / (2^(nu-1) * Gamma(nu))

    with M(0) = 1 exactly; the Bessel function is only evaluated at
    non-zero distances. Where the product is not representable (x^nu
    underflows against an overflowing K_nu near zero, or the reverse far
    out) the limit is used: 1 below x = 1 and 0 above.

    Parameters
    ----------
    distance : np.ndarray
        Non-negative distances
    smoothness : float or np.ndarray
        Smoothness nu > 0, broadcastable against ``distance``
    range_param : float or np.ndarray, default=1.0
        Range > 0, broadcastable against ``distance``

    Returns
    -------
    np.ndarray
        Correlations with the shape of the broadcast inputs
    """
    scaled, nu = np.broadcast_arrays(
        np.asarray(distance, dtype=float) / np.asarray(range_param, dtype=float),
        np.asarray(smoothness, dtype=float),
    )
    result = np.ones(scaled.shape)
    nonzero = scaled != 0
    if np.any(nonzero):
        x = scaled[nonzero]
        order = nu[nonzero]
        with np.errstate(over='ignore', under='ignore', invalid='ignore'):
            values = x ** order * kv(order, x) / (2.0 ** (order - 1) * gamma(order))
        degenerate = ~np.isfinite(values)
        values[degenerate] = np.where(x[degenerate] < 1.0, 1.0, 0.0)
        result[nonzero] = values
    return result


class Kernel(ABC):
    """
    Base class for covariance kernels.

    A kernel holds only static metadata: the number of jointly modelled
    variables ``variables_number`` (P) and the length of its parameter
    vector ``parameters_number``. It keeps no per-call state, so one
    instance may fill any number of tiles, including concurrently as long
    as the output buffers are disjoint.

    Parameters
    ----------
    dtype : numpy dtype, default=np.float64
        Precision of the values written to the output buffer
    """

    variables_number = 1
    parameters_number = 0
    # theta indices that must be > 0
    smoothness_indices: Tuple[int, ...] = ()
    positive_indices: Tuple[int, ...] = ()
    requires_time = False

    def __init__(self, dtype=np.float64):
        self.dtype = np.dtype(dtype)

    @property
    def name(self) -> str:
        """Registry name of the kernel."""
        return type(self).__name__

    @property
    def precision(self) -> str:
        return "single" if self.dtype == np.float32 else "double"

    def check_theta(self, theta: Sequence[float]) -> np.ndarray:
        """
        Validate a parameter vector.

        Raises
        ------
        InvalidParameterError
            On a too-short vector, non-finite entries, a smoothness <= 0 or
            a non-positive range/scale term
        """
        if theta is None:
            raise InvalidParameterError(f"{self.name} needs {self.parameters_number} parameters, got None")
        theta = np.asarray(theta, dtype=float).ravel()
        if len(theta) < self.parameters_number:
            raise InvalidParameterError(
                f"{self.name} needs {self.parameters_number} parameters, got {len(theta)}"
            )
        if len(theta) > self.parameters_number:
            warnings.warn(f"{self.name} uses {self.parameters_number} parameters; "
                          f"ignoring {len(theta) - self.parameters_number} extra values")
            theta = theta[:self.parameters_number]
        if not np.all(np.isfinite(theta)):
            raise InvalidParameterError(f"{self.name} parameters must be finite, got {theta.tolist()}")
        for i in self.smoothness_indices:
            if theta[i] <= 0:
                raise InvalidParameterError(f"{self.name}: smoothness theta[{i}] must be > 0, got {theta[i]}")
        for i in self.positive_indices:
            if theta[i] <= 0:
                raise InvalidParameterError(f"{self.name}: theta[{i}] must be > 0, got {theta[i]}")
        self._check_domain(theta)
        return theta

    def _check_domain(self, theta: np.ndarray) -> None:
        """Hook for kernel-specific parameter constraints."""

    def matrix_extent(self, locations: Locations) -> int:
        """Number of matrix rows (or columns) a location set spans."""
        return self.variables_number * locations.size

    def generate_covariance_matrix(
        self,
        matrix: np.ndarray,
        rows: int,
        cols: int,
        row_offset: int,
        col_offset: int,
        locations1: Locations,
        locations2: Optional[Locations],
        locations3: Optional[Locations],
        theta: Sequence[float],
        distance_metric: Union[int, str, DistanceMetric] = DistanceMetric.EUCLIDEAN,
    ) -> np.ndarray:
        """
        Fill one covariance tile.

        Entry (i, j) of the tile is the covariance between matrix index
        ``row_offset + i`` of ``locations1`` and matrix index
        ``col_offset + j`` of ``locations2``, stored column-major so that
        ``matrix[i + j * rows]`` holds it for a flat buffer.

        Parameters
        ----------
        matrix : np.ndarray
            Caller-owned flat buffer (>= rows * cols values) or (rows, cols) array
        rows, cols : int
            Tile extents
        row_offset, col_offset : int
            Global matrix indices of the tile's first row and column
        locations1, locations2 : Locations
            Row and column location sets; ``locations2=None`` reuses ``locations1``
        locations3 : Locations, optional
            Auxiliary locations (e.g. a center point for non-stationary kernels)
        theta : sequence of float
            Parameter vector of exactly ``parameters_number`` values
        distance_metric : int, str or DistanceMetric, default=EUCLIDEAN
            Resolved once per call

        Returns
        -------
        np.ndarray
            The written (rows, cols) view of ``matrix``

        Raises
        ------
        InvalidArgumentError
            Bad extents, offsets, buffers or locations
        InvalidParameterError
            Bad parameter vector
        NumericalDegenerateError
            If the block contains non-finite values; nothing is written
        """
        rows, cols, row_offset, col_offset = (int(v) for v in (rows, cols, row_offset, col_offset))
        if rows <= 0 or cols <= 0:
            raise InvalidArgumentError(f"Tile extents must be positive, got ({rows}, {cols})")
        if row_offset < 0 or col_offset < 0:
            raise InvalidArgumentError(f"Offsets must be non-negative, got ({row_offset}, {col_offset})")
        if not isinstance(locations1, Locations):
            raise InvalidArgumentError("locations1 must be a Locations instance")
        if locations2 is None:
            locations2 = locations1
        elif not isinstance(locations2, Locations):
            raise InvalidArgumentError("locations2 must be a Locations instance")

        if row_offset + rows > self.matrix_extent(locations1):
            raise InvalidArgumentError(
                f"Rows {row_offset}..{row_offset + rows} exceed the {self.matrix_extent(locations1)} "
                f"matrix rows spanned by locations1"
            )
        if col_offset + cols > self.matrix_extent(locations2):
            raise InvalidArgumentError(
                f"Columns {col_offset}..{col_offset + cols} exceed the {self.matrix_extent(locations2)} "
                f"matrix columns spanned by locations2"
            )
        if self.requires_time and (locations1.time is None or locations2.time is None):
            raise InvalidArgumentError(f"{self.name} needs space-time locations")

        theta = self.check_theta(theta)
        distance = distance_function(distance_metric)
        view = tile_view(matrix, rows, cols)

        row_index = np.arange(row_offset, row_offset + rows)
        col_index = np.arange(col_offset, col_offset + cols)
        block = self._compute_block(row_index, col_index, locations1, locations2,
                                    locations3, theta, distance)
        block = np.asarray(block, dtype=self.dtype)

        if not np.all(np.isfinite(block)):
            bad = int(np.sum(~np.isfinite(block)))
            raise NumericalDegenerateError(
                f"{self.name} produced {bad} non-finite values for theta={theta.tolist()}"
            )

        view[...] = block
        return view

    @abstractmethod
    def _compute_block(self, row_index: np.ndarray, col_index: np.ndarray,
                       locations1: Locations, locations2: Locations,
                       locations3: Optional[Locations], theta: np.ndarray,
                       distance: Callable) -> np.ndarray:
        """Return the (rows, cols) covariance block for the given matrix indices."""
        pass

    def __repr__(self):
        return (f"{self.name}(P={self.variables_number}, "
                f"parameters={self.parameters_number}, precision='{self.precision}')")


class UnivariateKernel(Kernel):
    """Base class for single-variable kernels that depend on distance only."""

    def _compute_block(self, row_index, col_index, locations1, locations2,
                       locations3, theta, distance):
        d = distance(locations1, row_index, locations2, col_index)
        return self.covariance(d, theta)

    @abstractmethod
    def covariance(self, distance: np.ndarray, theta: np.ndarray) -> np.ndarray:
        """Covariance as a function of distance for a validated theta."""
        pass
