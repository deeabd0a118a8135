"""
Test cases for Morton encoding and location reordering.
"""

import pytest
import numpy as np

import sys
import os
# Add parent directory to path to find pygeosynth package
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from pygeosynth.exceptions import InvalidArgumentError
from pygeosynth.locations import Locations
from pygeosynth.spatial.morton import (
    spread_bits, reverse_spread_bits, quantize, interleave, morton_key,
    compare_uint64, compare_morton, location_keys, sort_locations
)


class TestBitSpreading:
    """Test spreading and compacting of 16-bit values."""

    def test_spread_all_ones(self):
        """Fifteen set bits land on every fourth position."""
        assert spread_bits(0x7FFF) == 0x0111111111111111

    def test_interleaved_fixtures(self):
        """Axis planes shifted by 0, 1 and 2 never collide."""
        full = 0x7FFF
        assert interleave(0, 0, full) == 0x0444444444444444
        assert interleave(0, full, full) == 0x0666666666666666
        assert interleave(full, full, full) == 0x0777777777777777
        assert interleave(0, full) == 0x0222222222222222
        assert interleave(full, full) == 0x0333333333333333

    def test_round_trip_all_16_bit_values(self):
        """reverse_spread_bits undoes spread_bits for every 16-bit value."""
        values = np.arange(65536, dtype=np.uint64)
        spread = spread_bits(values)

        assert spread.dtype == np.uint64
        np.testing.assert_array_equal(reverse_spread_bits(spread), values)

    def test_high_bits_discarded(self):
        """Only the low 16 bits take part in spreading."""
        assert spread_bits(0x1FFFF) == spread_bits(0xFFFF)

    def test_axis_extraction(self):
        """Each axis is recovered by shifting the key before compacting."""
        x, y, z = 32007, 37, 22222
        key = interleave(x, y, z)

        assert reverse_spread_bits(key) == x
        assert reverse_spread_bits(key >> 1) == y
        assert reverse_spread_bits(key >> 2) == z

    def test_scalar_returns_int(self):
        """Scalar inputs give Python ints."""
        assert isinstance(spread_bits(5), int)
        assert isinstance(reverse_spread_bits(spread_bits(5)), int)


class TestMortonKeys:
    """Test quantization, keys and comparisons."""

    def test_quantize(self):
        """Coordinates are rounded to the nearest 16-bit step."""
        assert quantize(0.0) == 0
        assert quantize(1.0) == 65535
        assert quantize(0.5) == 32768
        np.testing.assert_array_equal(quantize(np.array([0.0, 1.0])), [0, 65535])

    def test_morton_key_matches_interleave(self):
        """Keys are the interleaved quantized coordinates."""
        assert morton_key(0.25, 0.75) == interleave(quantize(0.25), quantize(0.75))
        assert morton_key(0.1, 0.2, 0.3) == interleave(quantize(0.1), quantize(0.2), quantize(0.3))

    def test_compare_uint64(self):
        assert compare_uint64(1, 2)
        assert not compare_uint64(2, 1)
        assert not compare_uint64(2, 2)

    def test_compare_morton(self):
        """Comparator is a strict weak ordering."""
        assert compare_morton((0.1, 0.1), (0.9, 0.9))
        assert not compare_morton((0.9, 0.9), (0.1, 0.1))

        # Equal points compare False in both directions
        assert not compare_morton((0.4, 0.6), (0.4, 0.6))
        assert not compare_morton((0.4, 0.6, 0.2), (0.4, 0.6, 0.2))

    def test_compare_morton_invalid(self):
        with pytest.raises(InvalidArgumentError, match="2 or 3 coordinates"):
            compare_morton((0.1, 0.2), (0.1, 0.2, 0.3))


class TestSortLocations:
    """Test in-place Morton reordering of location sets."""

    def setup_method(self):
        """Set up random locations in the unit square and cube."""
        rng = np.random.default_rng(123)
        self.locations_2d = Locations.from_arrays(rng.random(50), rng.random(50))
        self.locations_3d = Locations.from_arrays(rng.random(40), rng.random(40), z=rng.random(40))

    def test_keys_non_decreasing(self):
        """After sorting, Morton keys never decrease."""
        for locations in (self.locations_2d, self.locations_3d):
            sort_locations(locations)
            keys = location_keys(locations)
            assert np.all(keys[1:] >= keys[:-1])

    def test_rows_preserved(self):
        """Every point keeps its coordinates; only the order changes."""
        before = self.locations_3d.to_frame().values
        order = sort_locations(self.locations_3d)
        after = self.locations_3d.to_frame().values

        np.testing.assert_array_equal(before[order], after)
        np.testing.assert_array_equal(np.sort(order), np.arange(40))

    def test_time_follows_points(self):
        """The time axis is permuted together with the spatial axes."""
        x = np.array([0.9, 0.1, 0.5])
        y = np.array([0.9, 0.1, 0.5])
        locations = Locations.from_arrays(x, y, time=[3.0, 1.0, 2.0])

        sort_locations(locations)

        np.testing.assert_array_equal(locations.x, [0.1, 0.5, 0.9])
        np.testing.assert_array_equal(locations.time, [1.0, 2.0, 3.0])

    def test_stable_for_equal_keys(self):
        """Points with identical keys keep their relative order."""
        locations = Locations.from_arrays([0.5, 0.2, 0.5], [0.5, 0.2, 0.5], time=[1.0, 2.0, 3.0])
        order = sort_locations(locations)

        np.testing.assert_array_equal(order, [1, 0, 2])
        np.testing.assert_array_equal(locations.time, [2.0, 1.0, 3.0])

    def test_partitions_sorted_independently(self):
        """Points never move between partitions."""
        order = sort_locations(self.locations_2d, partition_size=20)
        keys = location_keys(self.locations_2d)

        for start in range(0, 50, 20):
            block = order[start:start + 20]
            np.testing.assert_array_equal(np.sort(block), np.arange(start, min(50, start + 20)))
            part = keys[start:start + 20]
            assert np.all(part[1:] >= part[:-1])

    def test_out_of_range_coordinates(self):
        """Coordinates outside [0, 1] are rejected before anything moves."""
        locations = Locations.from_arrays([0.2, 1.5], [0.1, 0.3])

        with pytest.raises(InvalidArgumentError, match=r"\[0, 1\]"):
            sort_locations(locations)
        np.testing.assert_array_equal(locations.x, [0.2, 1.5])

    def test_non_finite_coordinates(self):
        locations = Locations.from_arrays([0.2, np.nan], [0.1, 0.3])
        with pytest.raises(InvalidArgumentError):
            sort_locations(locations)

    def test_invalid_partition_size(self):
        with pytest.raises(InvalidArgumentError, match="partition_size"):
            sort_locations(self.locations_2d, partition_size=0)
