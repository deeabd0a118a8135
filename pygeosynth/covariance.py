"""
Tile-by-tile assembly of dense covariance matrices.

A tiled linear-algebra runtime calls
:meth:`Kernel.generate_covariance_matrix` once per tile, each call writing
into its own buffer. The helpers here reproduce that calling pattern
serially, which is convenient for small problems, examples and tests.
"""

import numpy as np
from typing import Iterator, Optional, Sequence, Tuple, Union

from .exceptions import InvalidArgumentError
from .kernels.base import Kernel
from .locations import Locations
from .utils import DistanceMetric


def tile_ranges(n: int, tile_size: int) -> Iterator[Tuple[int, int]]:
    """
    Split ``range(n)`` into consecutive tiles.

    Parameters
    ----------
    n : int
        Matrix extent
    tile_size : int
        Tile extent; the last tile may be smaller

    Yields
    ------
    tuple of int
        (offset, extent) of every tile

    Examples
    --------
    >>> list(tile_ranges(5, 2))
    [(0, 2), (2, 2), (4, 1)]
    """
    if n <= 0:
        raise InvalidArgumentError(f"Matrix extent must be positive, got {n}")
    if tile_size <= 0:
        raise InvalidArgumentError(f"tile_size must be positive, got {tile_size}")
    for offset in range(0, n, tile_size):
        yield offset, min(tile_size, n - offset)


def covariance_matrix(
    kernel: Kernel,
    locations1: Locations,
    theta: Sequence[float],
    locations2: Optional[Locations] = None,
    locations3: Optional[Locations] = None,
    distance_metric: Union[int, str, DistanceMetric] = DistanceMetric.EUCLIDEAN,
    tile_size: Optional[int] = None,
) -> np.ndarray:
    """
    Build a full covariance matrix from per-tile kernel evaluations.

    Parameters
    ----------
    kernel : Kernel
        Kernel instance, e.g. from :func:`create_kernel`
    locations1 : Locations
        Row locations
    theta : sequence of float
        Kernel parameter vector
    locations2 : Locations, optional
        Column locations (defaults to ``locations1``)
    locations3 : Locations, optional
        Auxiliary locations passed through to the kernel
    distance_metric : int, str or DistanceMetric, default=EUCLIDEAN
        Distance rule
    tile_size : int, optional
        Square tile extent; the whole matrix is one tile by default

    Returns
    -------
    np.ndarray
        (P * n1, P * n2) Fortran-ordered matrix in the kernel's precision
    """
    if locations2 is None:
        locations2 = locations1
    n_rows = kernel.matrix_extent(locations1)
    n_cols = kernel.matrix_extent(locations2)
    tile_size = max(n_rows, n_cols) if tile_size is None else int(tile_size)

    matrix = np.empty((n_rows, n_cols), dtype=kernel.dtype, order="F")
    for row_offset, rows in tile_ranges(n_rows, tile_size):
        for col_offset, cols in tile_ranges(n_cols, tile_size):
            tile = np.empty(rows * cols, dtype=kernel.dtype)
            kernel.generate_covariance_matrix(tile, rows, cols, row_offset, col_offset,
                                              locations1, locations2, locations3,
                                              theta, distance_metric)
            matrix[row_offset:row_offset + rows, col_offset:col_offset + cols] = \
                tile.reshape((rows, cols), order="F")
    return matrix
