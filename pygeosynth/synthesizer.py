"""
Synthetic location generation.
"""

import numpy as np
from typing import Optional, Union

from .control import SynthesisControl
from .exceptions import InvalidArgumentError
from .locations import Locations
from .spatial.morton import sort_locations
from .utils import Dimension, parse_dimension

JITTER = 0.4
LAYOUTS = ("grid", "uniform")


class SyntheticGenerator:
    """
    Seeded generator of synthetic location sets.

    Each generator owns its own ``numpy.random.Generator``; two generators
    never share random state. Re-seeding with the same value reproduces the
    same coordinates bit for bit, while generating again without re-seeding
    continues the random stream and yields new coordinates.

    Parameters
    ----------
    control : SynthesisControl, optional
        Default problem size, dimension, time slots, partitioning and
        run mode
    seed : int, optional
        Initial seed; falls back to ``control.seed``

    Attributes
    ----------
    locations : Locations or None
        Most recently generated location set

    Examples
    --------
    >>> generator = SyntheticGenerator(seed=0)
    >>> locations = generator.generate_locations(9, '2D')
    >>> locations.size
    9
    """

    def __init__(self, control: Optional[SynthesisControl] = None, seed: Optional[int] = None):
        self.control = control
        if seed is None and control is not None:
            seed = control.seed
        self.locations = None
        self.seed(seed)

    def seed(self, seed: Optional[int] = None) -> None:
        """Reset the random stream; ``None`` draws fresh OS entropy."""
        self._seed = seed
        self.rng = np.random.default_rng(seed)

    @property
    def monitoring(self) -> bool:
        return self.control is not None and self.control.monitoring

    def uniform_distribution(self, low: float, high: float, size=None):
        """
        Draw from the uniform distribution on [low, high).

        Parameters
        ----------
        low, high : float
            Range bounds, ``low < high``
        size : int or tuple, optional
            Output shape; a single float is returned when omitted
        """
        if not high > low:
            raise InvalidArgumentError(f"Invalid uniform range [{low}, {high})")
        return self.rng.uniform(low, high, size)

    def generate_locations(
        self,
        problem_size: Optional[int] = None,
        dimension: Optional[Union[str, Dimension]] = None,
        time_slots: Optional[int] = None,
        layout: str = "grid",
        partition_size: Optional[int] = None,
    ) -> Locations:
        """
        Generate a new location set and reorder it along the Morton curve.

        Parameters
        ----------
        problem_size : int, optional
            Number of spatial points N (defaults to the control's value)
        dimension : str or Dimension, optional
            '2D', '3D' or 'ST' (defaults to the control's value, else '2D')
        time_slots : int, optional
            Number of time slots for 'ST'; the result holds N * time_slots points
        layout : str, default='grid'
            'grid' jitters one point inside each cell of a regular grid,
            'uniform' draws every coordinate independently from U(0, 1)
        partition_size : int, optional
            Morton sorting partition (defaults to ``problem_size // p_grid``
            of the control, else the whole set)

        Returns
        -------
        Locations
            The generated set, also stored as ``self.locations``
        """
        if problem_size is None:
            if self.control is None:
                raise InvalidArgumentError("problem_size is required when no control is given")
            problem_size = self.control.problem_size
        if dimension is None:
            dimension = self.control.dimension if self.control is not None else Dimension.DIMENSION_2D
        if time_slots is None:
            time_slots = self.control.time_slots if self.control is not None else 1
        problem_size = int(problem_size)
        if partition_size is None and self.control is not None:
            partition_size = max(1, problem_size // self.control.p_grid)
        time_slots = int(time_slots)
        dimension = parse_dimension(dimension)
        if problem_size <= 0:
            raise InvalidArgumentError(f"problem_size must be positive, got {problem_size}")
        if time_slots < 1:
            raise InvalidArgumentError(f"time_slots must be at least 1, got {time_slots}")
        if layout not in LAYOUTS:
            raise InvalidArgumentError(f"Unknown layout '{layout}'. Use one of {LAYOUTS}")
        if partition_size is not None and int(partition_size) <= 0:
            raise InvalidArgumentError(f"partition_size must be positive, got {partition_size}")

        self.locations = None

        if self.monitoring:
            print(f"Generating {problem_size} {dimension.value} locations (layout={layout})...")

        n_spatial_axes = 3 if dimension == Dimension.DIMENSION_3D else 2
        coords = self._draw_coordinates(problem_size, n_spatial_axes, layout)

        if dimension == Dimension.SPACE_TIME:
            spatial = Locations.from_arrays(coords[:, 0], coords[:, 1])
            sort_locations(spatial, partition_size)
            locations = Locations(problem_size * time_slots, Dimension.SPACE_TIME)
            locations.x[:] = np.tile(spatial.x, time_slots)
            locations.y[:] = np.tile(spatial.y, time_slots)
            locations.time[:] = np.repeat(np.arange(1, time_slots + 1, dtype=float), problem_size)
        else:
            z = coords[:, 2] if n_spatial_axes == 3 else None
            locations = Locations.from_arrays(coords[:, 0], coords[:, 1], z=z, dimension=dimension)
            sort_locations(locations, partition_size)

        if self.monitoring:
            print(f"  Sorted {locations.size} locations in Morton order")

        self.locations = locations
        return locations

    def sort_locations(self, partition_size: Optional[int] = None) -> np.ndarray:
        """Morton-sort the current location set in place; see :func:`sort_locations`."""
        if self.locations is None:
            raise InvalidArgumentError("No locations generated yet")
        if partition_size is None and self.control is not None:
            partition_size = max(1, self.locations.size // self.control.p_grid)
        return sort_locations(self.locations, partition_size)

    def _draw_coordinates(self, n: int, n_axes: int, layout: str) -> np.ndarray:
        """Draw an (n, n_axes) array of coordinates in [0, 1]."""
        if layout == "uniform":
            return self.uniform_distribution(0.0, 1.0, size=(n, n_axes))

        per_axis = _grid_side(n, n_axes)
        # Grid cells in row-major order, first n of them
        cells = np.indices((per_axis,) * n_axes).reshape(n_axes, -1).T[:n]
        jitter = self.uniform_distribution(-JITTER, JITTER, size=(n, n_axes))
        return (cells + 0.5 + jitter) / per_axis


def _grid_side(n: int, n_axes: int) -> int:
    """Smallest grid side length s with s ** n_axes >= n."""
    side = max(1, int(round(n ** (1.0 / n_axes))))
    while side ** n_axes < n:
        side += 1
    while side > 1 and (side - 1) ** n_axes >= n:
        side -= 1
    return side


def generate_locations(problem_size: int, dimension: Union[str, Dimension] = "2D",
                       time_slots: int = 1, seed: Optional[int] = None,
                       layout: str = "grid") -> Locations:
    """
    Convenience wrapper creating a one-off generator.

    Examples
    --------
    >>> locations = generate_locations(16, '3D', seed=42)
    >>> locations.z is not None
    True
    """
    generator = SyntheticGenerator(seed=seed)
    return generator.generate_locations(problem_size, dimension, time_slots, layout=layout)
