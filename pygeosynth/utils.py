"""
Utility functions for pyGeoSynth package.
"""

import re
import warnings
from enum import Enum, IntEnum
from typing import Tuple, Union

import numpy as np

from .exceptions import InvalidArgumentError


class Dimension(Enum):
    """Dimensionality of a location set."""

    DIMENSION_2D = "2D"
    DIMENSION_3D = "3D"
    SPACE_TIME = "ST"


class DistanceMetric(IntEnum):
    """Rule used to turn a coordinate pair into a scalar distance."""

    EUCLIDEAN = 0
    GREAT_CIRCLE = 1


PRECISIONS = {
    "double": np.float64,
    "single": np.float32,
}

_DIMENSION_ALIASES = {
    "2d": Dimension.DIMENSION_2D,
    "3d": Dimension.DIMENSION_3D,
    "st": Dimension.SPACE_TIME,
    "spacetime": Dimension.SPACE_TIME,
    "space-time": Dimension.SPACE_TIME,
    "space_time": Dimension.SPACE_TIME,
}

_METRIC_ALIASES = {
    "euclidean": DistanceMetric.EUCLIDEAN,
    "eg": DistanceMetric.EUCLIDEAN,
    "great_circle": DistanceMetric.GREAT_CIRCLE,
    "great-circle": DistanceMetric.GREAT_CIRCLE,
    "greatcircle": DistanceMetric.GREAT_CIRCLE,
    "gcd": DistanceMetric.GREAT_CIRCLE,
}


def parse_dimension(dimension: Union[str, Dimension]) -> Dimension:
    """
    Interpret a dimension selector.

    Parameters
    ----------
    dimension : str or Dimension
        One of '2D', '3D', 'ST' (case-insensitive) or a Dimension member

    Returns
    -------
    Dimension
        Parsed dimension tag

    Examples
    --------
    >>> parse_dimension('st')
    <Dimension.SPACE_TIME: 'ST'>
    """
    if isinstance(dimension, Dimension):
        return dimension
    if isinstance(dimension, str):
        key = dimension.strip().lower()
        if key in _DIMENSION_ALIASES:
            return _DIMENSION_ALIASES[key]
    raise InvalidArgumentError(f"Invalid dimension: {dimension!r}. Use '2D', '3D' or 'ST'")


def parse_distance_metric(metric: Union[int, str, DistanceMetric]) -> DistanceMetric:
    """
    Interpret a distance metric selector.

    Parameters
    ----------
    metric : int, str or DistanceMetric
        0 / 'euclidean' / 'eg' for Euclidean distance,
        1 / 'great_circle' / 'gcd' for great-circle distance

    Returns
    -------
    DistanceMetric
        Parsed metric
    """
    if isinstance(metric, DistanceMetric):
        return metric
    if isinstance(metric, str):
        key = metric.strip().lower()
        if key in _METRIC_ALIASES:
            return _METRIC_ALIASES[key]
    elif isinstance(metric, (int, np.integer)) and not isinstance(metric, bool):
        try:
            return DistanceMetric(int(metric))
        except ValueError:
            pass
    raise InvalidArgumentError(f"Invalid distance metric: {metric!r}")


def parse_precision(precision: str) -> Tuple[str, type]:
    """
    Interpret a numeric precision name.

    Returns
    -------
    tuple
        (canonical name, numpy dtype)
    """
    key = str(precision).strip().lower()
    if key in ("float", "float32"):
        key = "single"
    elif key in ("float64",):
        key = "double"
    if key not in PRECISIONS:
        raise InvalidArgumentError(
            f"Invalid precision: {precision!r}. Use one of {sorted(PRECISIONS)}"
        )
    return key, PRECISIONS[key]


def is_camel_case(name: str) -> bool:
    """Check whether a kernel name is already in CamelCase form."""
    if not name or "_" in name:
        return False
    return not name[0].islower()


def normalize_kernel_name(name: str, warn: bool = True) -> str:
    """
    Convert a snake_case kernel name to its CamelCase registry form.

    Parameters
    ----------
    name : str
        Kernel name, e.g. 'univariate_matern_stationary'
    warn : bool, default=True
        Whether to warn when a conversion takes place

    Returns
    -------
    str
        CamelCase name, e.g. 'UnivariateMaternStationary'
    """
    if not isinstance(name, str) or not name.strip():
        raise InvalidArgumentError(f"Invalid kernel name: {name!r}")
    name = name.strip()
    if is_camel_case(name):
        return name

    words = [w for w in re.split(r"[_\s]+", name) if w]
    converted = "".join(w[0].upper() + w[1:] for w in words)
    if warn and converted != name:
        warnings.warn(f"Converting kernel name '{name}' to '{converted}'")
    return converted


def tile_view(matrix: np.ndarray, rows: int, cols: int) -> np.ndarray:
    """
    Column-major (rows x cols) view over a caller-owned buffer.

    Element (i, j) of the returned view aliases ``matrix[i + j * rows]``
    for a flat buffer. A two-dimensional buffer must already have shape
    (rows, cols) and is returned unchanged.

    Parameters
    ----------
    matrix : np.ndarray
        Flat buffer with at least rows * cols elements, or a 2-D array
    rows, cols : int
        Tile extents

    Returns
    -------
    np.ndarray
        Writable view sharing memory with ``matrix``
    """
    if not isinstance(matrix, np.ndarray):
        raise InvalidArgumentError("matrix must be a numpy array owned by the caller")
    if not matrix.flags.writeable:
        raise InvalidArgumentError("matrix buffer is read-only")

    if matrix.ndim == 2:
        if matrix.shape != (rows, cols):
            raise InvalidArgumentError(
                f"matrix shape {matrix.shape} does not match tile ({rows}, {cols})"
            )
        return matrix

    if matrix.ndim != 1:
        raise InvalidArgumentError(f"matrix must be 1-D or 2-D, got {matrix.ndim}-D")
    if matrix.size < rows * cols:
        raise InvalidArgumentError(
            f"matrix buffer holds {matrix.size} values, tile needs {rows * cols}"
        )
    if not matrix.flags.c_contiguous:
        raise InvalidArgumentError("flat matrix buffer must be contiguous")

    view = matrix[:rows * cols].reshape((rows, cols), order="F")
    return view
