"""
Morton (Z-order) encoding and reordering of location sets.

Each coordinate in [0, 1] is quantized to a 16-bit integer whose bits are
spread four positions apart. Shifting the spread X, Y and Z values by 0, 1
and 2 and adding them gives a single 64-bit key; sorting points by that key
keeps points that are close in space close in index, which improves data
reuse when a covariance matrix is processed tile by tile.

Bit layout of ``spread_bits(0x7FFF)``::

    ---- ---1 ---1 ---1 ---1 ---1 ---1 ---1 ---1 ---1 ---1 ---1 ---1 ---1 ---1 ---1
    = 0x0111111111111111
"""

import numpy as np
from typing import Optional, Sequence, Union

from ..exceptions import InvalidArgumentError
from ..locations import Locations

UINT16_MAX = 0xFFFF

# (shift, mask) pairs taking 16 bits to a 4-bit stride
_SPREAD_STEPS = (
    (24, 0x000000FF000000FF),
    (12, 0x000F000F000F000F),
    (6, 0x0303030303030303),
    (3, 0x1111111111111111),
)

IntOrArray = Union[int, np.ndarray]


def _as_uint64(value: IntOrArray):
    """Return (array, was_scalar) with ``value`` as a uint64 array."""
    scalar = np.ndim(value) == 0
    return np.asarray(value, dtype=np.uint64), scalar


def spread_bits(value: IntOrArray) -> IntOrArray:
    """
    Spread the low 16 bits of ``value`` so that bit i lands on bit 4*i.

    Parameters
    ----------
    value : int or np.ndarray
        Unsigned input; bits above the 16th are discarded

    Returns
    -------
    int or np.ndarray
        Spread 64-bit key (Python int for scalar input, uint64 array otherwise)

    Examples
    --------
    >>> hex(spread_bits(0x7FFF))
    '0x111111111111111'
    """
    bits, scalar = _as_uint64(value)
    bits = bits & np.uint64(UINT16_MAX)
    for shift, mask in _SPREAD_STEPS:
        bits = (bits ^ (bits << np.uint64(shift))) & np.uint64(mask)
    return int(bits) if scalar else bits


def reverse_spread_bits(key: IntOrArray) -> IntOrArray:
    """
    Compact a spread key back to 16 bits; inverse of :func:`spread_bits`.

    Only bits at positions that are multiples of four are read, so
    ``reverse_spread_bits(key >> s)`` extracts the axis interleaved at shift s.

    Parameters
    ----------
    key : int or np.ndarray
        Spread 64-bit key

    Returns
    -------
    int or np.ndarray
        16-bit value (Python int for scalar input, uint64 array otherwise)
    """
    bits, scalar = _as_uint64(key)
    bits = bits & np.uint64(_SPREAD_STEPS[-1][1])
    steps = list(_SPREAD_STEPS)
    # Undo the steps in reverse order, each with the previous step's mask
    masks = [mask for _, mask in steps[:-1]][::-1] + [UINT16_MAX]
    for (shift, _), mask in zip(steps[::-1], masks):
        bits = (bits ^ (bits >> np.uint64(shift))) & np.uint64(mask)
    return int(bits) if scalar else bits


def quantize(coordinate: Union[float, np.ndarray]) -> IntOrArray:
    """
    Scale coordinates in [0, 1] to 16-bit unsigned integers.

    Returns
    -------
    int or np.ndarray
        ``floor(c * 65535 + 0.5)`` as uint64
    """
    values = np.asarray(coordinate, dtype=float)
    scaled = np.floor(values * float(UINT16_MAX) + 0.5).astype(np.uint64)
    return int(scaled) if np.ndim(coordinate) == 0 else scaled


def interleave(x: IntOrArray, y: IntOrArray, z: Optional[IntOrArray] = None) -> IntOrArray:
    """Combine quantized axis values into a Morton key."""
    key_x, scalar = _as_uint64(spread_bits(x))
    key = key_x + (np.asarray(spread_bits(y), dtype=np.uint64) << np.uint64(1))
    if z is not None:
        key = key + (np.asarray(spread_bits(z), dtype=np.uint64) << np.uint64(2))
    return int(key) if scalar else key


def morton_key(x, y, z=None) -> IntOrArray:
    """
    Morton key of points with coordinates in [0, 1].

    Parameters
    ----------
    x, y : float or np.ndarray
        Planar coordinates
    z : float or np.ndarray, optional
        Third spatial coordinate

    Returns
    -------
    int or np.ndarray
        Interleaved 64-bit key(s)
    """
    qz = None if z is None else quantize(z)
    return interleave(quantize(x), quantize(y), qz)


def compare_uint64(first: int, second: int) -> bool:
    """Return True if ``first`` orders strictly before ``second``."""
    return int(first) < int(second)


def compare_morton(point: Sequence[float], other: Sequence[float]) -> bool:
    """
    Strict weak ordering of two points by Morton key.

    Parameters
    ----------
    point, other : sequence of float
        (x, y) or (x, y, z) coordinates in [0, 1]

    Returns
    -------
    bool
        True if ``point`` sorts strictly before ``other``; equal points
        compare False in both directions
    """
    if len(point) != len(other) or len(point) not in (2, 3):
        raise InvalidArgumentError("Points must both have 2 or 3 coordinates")
    return compare_uint64(morton_key(*point), morton_key(*other))


def location_keys(locations: Locations) -> np.ndarray:
    """Morton keys for every point of a location set (spatial axes only)."""
    coords = [getattr(locations, name) for name in locations.spatial_axes]
    for name, values in zip(locations.spatial_axes, coords):
        if np.any(~np.isfinite(values)) or np.any(values < 0) or np.any(values > 1):
            raise InvalidArgumentError(
                f"Morton ordering needs coordinates in [0, 1]; axis '{name}' "
                f"spans [{np.nanmin(values):.6g}, {np.nanmax(values):.6g}]"
            )
    return morton_key(*coords)


def sort_locations(locations: Locations, partition_size: Optional[int] = None) -> np.ndarray:
    """
    Reorder a location set in place along the Morton curve.

    Points are sorted by ascending key within each contiguous partition of
    ``partition_size`` points (the whole set by default). The sort is
    stable and the same permutation is applied to every axis, time included.

    Parameters
    ----------
    locations : Locations
        Location set with spatial coordinates in [0, 1]
    partition_size : int, optional
        Number of consecutive points sorted together

    Returns
    -------
    np.ndarray
        The applied permutation: new position i holds old point order[i]
    """
    n = locations.size
    if partition_size is None:
        partition_size = n
    partition_size = int(partition_size)
    if partition_size <= 0:
        raise InvalidArgumentError(f"partition_size must be positive, got {partition_size}")

    keys = location_keys(locations)
    order = np.empty(n, dtype=np.intp)
    for start in range(0, n, partition_size):
        stop = min(n, start + partition_size)
        order[start:stop] = start + np.argsort(keys[start:stop], kind="stable")

    locations.permute(order)
    return order
