"""
Location store holding per-axis coordinate arrays.
"""

import numpy as np
import pandas as pd
from typing import Optional, Union

from .exceptions import InvalidArgumentError
from .utils import Dimension, parse_dimension


class Locations:
    """
    Ordered set of N points stored as parallel coordinate arrays.

    Parameters
    ----------
    size : int
        Number of points
    dimension : str or Dimension, default='2D'
        '2D' allocates x and y, '3D' adds z, 'ST' adds time

    Attributes
    ----------
    x, y : np.ndarray
        Planar coordinates
    z : np.ndarray or None
        Third spatial axis (3D only)
    time : np.ndarray or None
        Time coordinate (space-time only)
    """

    def __init__(self, size: int, dimension: Union[str, Dimension] = "2D"):
        size = int(size)
        if size <= 0:
            raise InvalidArgumentError(f"Number of locations must be positive, got {size}")

        self.dimension = parse_dimension(dimension)
        self.x = np.zeros(size)
        self.y = np.zeros(size)
        self.z = np.zeros(size) if self.dimension == Dimension.DIMENSION_3D else None
        self.time = np.zeros(size) if self.dimension == Dimension.SPACE_TIME else None

    @classmethod
    def from_arrays(cls, x, y, z=None, time=None,
                    dimension: Optional[Union[str, Dimension]] = None) -> "Locations":
        """
        Build a location set from existing coordinate arrays.

        The dimension is inferred from which optional axes are given unless
        stated explicitly. Arrays are copied.
        """
        if z is not None and time is not None:
            raise InvalidArgumentError("A location set carries either z or time, not both")
        if dimension is None:
            if z is not None:
                dimension = Dimension.DIMENSION_3D
            elif time is not None:
                dimension = Dimension.SPACE_TIME
            else:
                dimension = Dimension.DIMENSION_2D
        dimension = parse_dimension(dimension)

        x = np.asarray(x, dtype=float).ravel()
        y = np.asarray(y, dtype=float).ravel()
        if len(x) != len(y):
            raise InvalidArgumentError(f"x and y must have same length, got {len(x)} and {len(y)}")

        if dimension == Dimension.DIMENSION_3D and z is None:
            raise InvalidArgumentError("3D locations require a z array")
        if dimension == Dimension.SPACE_TIME and time is None:
            raise InvalidArgumentError("Space-time locations require a time array")
        if dimension == Dimension.DIMENSION_2D and (z is not None or time is not None):
            raise InvalidArgumentError("2D locations take neither z nor time")

        locations = cls(len(x), dimension)
        locations.x[:] = x
        locations.y[:] = y
        for axis, values in (("z", z), ("time", time)):
            if values is None:
                continue
            values = np.asarray(values, dtype=float).ravel()
            if len(values) != len(x):
                raise InvalidArgumentError(
                    f"{axis} must have same length as x, got {len(values)} and {len(x)}"
                )
            getattr(locations, axis)[:] = values
        return locations

    @classmethod
    def from_frame(cls, frame: pd.DataFrame) -> "Locations":
        """Build a location set from a DataFrame with columns x, y and optionally z or time."""
        missing = [col for col in ("x", "y") if col not in frame.columns]
        if missing:
            raise InvalidArgumentError(f"Missing columns in data: {missing}")
        z = frame["z"].values if "z" in frame.columns else None
        time = frame["time"].values if "time" in frame.columns else None
        return cls.from_arrays(frame["x"].values, frame["y"].values, z=z, time=time)

    @property
    def size(self) -> int:
        return len(self.x)

    def __len__(self):
        return self.size

    @property
    def axes(self):
        """Names of the axes present for this dimension, spatial axes first."""
        names = ["x", "y"]
        if self.z is not None:
            names.append("z")
        if self.time is not None:
            names.append("time")
        return names

    @property
    def spatial_axes(self):
        return [name for name in self.axes if name != "time"]

    def spatial_coordinates(self) -> np.ndarray:
        """Spatial coordinates as an (N, 2) or (N, 3) array."""
        return np.column_stack([getattr(self, name) for name in self.spatial_axes])

    def permute(self, order: np.ndarray) -> None:
        """
        Reorder every present axis with the same permutation, in place.

        Parameters
        ----------
        order : np.ndarray
            Permutation of range(size); position i receives point order[i]
        """
        order = np.asarray(order)
        if order.shape != (self.size,) or not np.array_equal(np.sort(order), np.arange(self.size)):
            raise InvalidArgumentError("order must be a permutation of range(size)")
        for name in self.axes:
            values = getattr(self, name)
            values[:] = values[order]

    def center(self, *others: "Locations") -> "Locations":
        """
        Representative center point.

        Each present spatial axis gets the midpoint of its own range,
        computed independently of the other axes. A time axis, if any,
        is centered the same way. Passing further location sets centers
        their union, so the result does not depend on argument order.

        Parameters
        ----------
        *others : Locations
            Additional sets of the same dimension

        Returns
        -------
        Locations
            One-point location set with the same dimension
        """
        for other in others:
            if other.dimension != self.dimension:
                raise InvalidArgumentError(
                    f"Cannot center {self.dimension.value} and {other.dimension.value} locations together"
                )
        center = Locations(1, self.dimension)
        for name in self.axes:
            values = np.concatenate([getattr(loc, name) for loc in (self,) + others])
            lo, hi = np.min(values), np.max(values)
            getattr(center, name)[0] = lo + (hi - lo) / 2
        return center

    def copy(self) -> "Locations":
        return Locations.from_arrays(self.x, self.y, z=self.z, time=self.time,
                                     dimension=self.dimension)

    def to_frame(self) -> pd.DataFrame:
        """Export the coordinates as a DataFrame with one column per axis."""
        return pd.DataFrame({name: getattr(self, name).copy() for name in self.axes})

    def __repr__(self):
        return f"Locations(size={self.size}, dimension='{self.dimension.value}')"
