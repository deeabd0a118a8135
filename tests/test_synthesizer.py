"""
Test cases for synthetic location generation.
"""

import pytest
import numpy as np

import sys
import os
# Add parent directory to path to find pygeosynth package
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from pygeosynth.control import SynthesisControl
from pygeosynth.exceptions import InvalidArgumentError
from pygeosynth.spatial.morton import location_keys
from pygeosynth.synthesizer import SyntheticGenerator, generate_locations, _grid_side
from pygeosynth.utils import Dimension


class TestReproducibility:
    """Test seeding behaviour of the generator."""

    def test_same_seed_identical(self):
        """Two generators with the same seed produce identical coordinates."""
        first = SyntheticGenerator(seed=0).generate_locations(25, '2D')
        second = SyntheticGenerator(seed=0).generate_locations(25, '2D')

        np.testing.assert_array_equal(first.x, second.x)
        np.testing.assert_array_equal(first.y, second.y)

    def test_reseed_reproduces(self):
        """Re-seeding the same generator restarts the stream."""
        generator = SyntheticGenerator(seed=7)
        first = generator.generate_locations(16, '3D').copy()

        generator.seed(7)
        second = generator.generate_locations(16, '3D')

        np.testing.assert_array_equal(first.x, second.x)
        np.testing.assert_array_equal(first.z, second.z)

    def test_stream_continues_without_reseed(self):
        """Generating twice without re-seeding yields new coordinates."""
        generator = SyntheticGenerator(seed=7)
        first = generator.generate_locations(16, '2D').copy()
        second = generator.generate_locations(16, '2D')

        assert not np.array_equal(first.x, second.x)

    def test_generators_independent(self):
        """Drawing from one generator does not affect another."""
        reference = SyntheticGenerator(seed=3).generate_locations(9)

        generator = SyntheticGenerator(seed=3)
        other = SyntheticGenerator(seed=3)
        other.generate_locations(9)
        other.generate_locations(9)

        np.testing.assert_array_equal(generator.generate_locations(9).x, reference.x)

    def test_module_function(self):
        first = generate_locations(12, '2D', seed=11)
        second = generate_locations(12, '2D', seed=11)
        np.testing.assert_array_equal(first.y, second.y)


class TestLayouts:
    """Test the geometry of generated location sets."""

    def test_grid_one_point_per_cell(self):
        """The jittered grid places exactly one point in each cell."""
        locations = SyntheticGenerator(seed=1).generate_locations(16, '2D')

        cells = set(zip(np.floor(locations.x * 4).astype(int),
                        np.floor(locations.y * 4).astype(int)))
        assert len(cells) == 16

    def test_grid_3d_one_point_per_cell(self):
        locations = SyntheticGenerator(seed=1).generate_locations(27, '3D')

        cells = set(zip(np.floor(locations.x * 3).astype(int),
                        np.floor(locations.y * 3).astype(int),
                        np.floor(locations.z * 3).astype(int)))
        assert len(cells) == 27

    def test_coordinates_in_unit_interval(self):
        for layout in ('grid', 'uniform'):
            locations = SyntheticGenerator(seed=2).generate_locations(50, '3D', layout=layout)
            for axis in ('x', 'y', 'z'):
                values = getattr(locations, axis)
                assert np.all(values >= 0) and np.all(values <= 1)

    def test_grid_side(self):
        assert _grid_side(9, 2) == 3
        assert _grid_side(10, 2) == 4
        assert _grid_side(27, 3) == 3
        assert _grid_side(28, 3) == 4
        assert _grid_side(1, 2) == 1

    def test_output_is_morton_sorted(self):
        locations = SyntheticGenerator(seed=5).generate_locations(64, '2D')
        keys = location_keys(locations)
        assert np.all(keys[1:] >= keys[:-1])

    def test_space_time(self):
        """Space-time sets replicate the spatial points for every slot."""
        locations = SyntheticGenerator(seed=0).generate_locations(9, 'ST', time_slots=3)

        assert locations.size == 27
        assert locations.dimension == Dimension.SPACE_TIME
        assert locations.z is None
        np.testing.assert_array_equal(locations.time, np.repeat([1.0, 2.0, 3.0], 9))
        np.testing.assert_array_equal(locations.x[:9], locations.x[9:18])
        np.testing.assert_array_equal(locations.y[:9], locations.y[18:])

        keys = location_keys(locations)[:9]
        assert np.all(keys[1:] >= keys[:-1])

    def test_partitioned_sort_from_control(self):
        """Control partitioning sorts each block of points separately."""
        control = SynthesisControl(problem_size=20, p_grid=2, seed=4)
        locations = SyntheticGenerator(control).generate_locations()
        keys = location_keys(locations)

        assert control.partition_size == 10
        for start in (0, 10):
            part = keys[start:start + 10]
            assert np.all(part[1:] >= part[:-1])

    def test_partition_follows_explicit_problem_size(self):
        """An explicit problem_size overrides the control's when partitioning."""
        control = SynthesisControl(problem_size=100, p_grid=2, seed=4)
        locations = SyntheticGenerator(control).generate_locations(problem_size=20)
        keys = location_keys(locations)

        assert locations.size == 20
        for start in (0, 10):
            part = keys[start:start + 10]
            assert np.all(part[1:] >= part[:-1])

        expected = SyntheticGenerator(seed=4).generate_locations(20, partition_size=10)
        np.testing.assert_array_equal(locations.x, expected.x)
        np.testing.assert_array_equal(locations.y, expected.y)


class TestValidation:
    """Test argument validation and progress output."""

    def setup_method(self):
        self.generator = SyntheticGenerator(seed=0)

    def test_non_positive_count(self):
        with pytest.raises(InvalidArgumentError, match="problem_size"):
            self.generator.generate_locations(0)
        with pytest.raises(InvalidArgumentError, match="problem_size"):
            self.generator.generate_locations(-4)

    def test_invalid_time_slots(self):
        with pytest.raises(InvalidArgumentError, match="time_slots"):
            self.generator.generate_locations(9, 'ST', time_slots=0)

    def test_invalid_layout(self):
        with pytest.raises(InvalidArgumentError, match="layout"):
            self.generator.generate_locations(9, layout='hexagonal')

    def test_failed_call_keeps_previous_store(self):
        """Validation happens before the previous store is replaced."""
        locations = self.generator.generate_locations(9)
        with pytest.raises(InvalidArgumentError):
            self.generator.generate_locations(0)
        assert self.generator.locations is locations

    def test_missing_problem_size(self):
        with pytest.raises(InvalidArgumentError, match="problem_size is required"):
            self.generator.generate_locations()

    def test_uniform_distribution(self):
        values = self.generator.uniform_distribution(-2.0, 3.0, size=100)
        assert np.all(values >= -2.0) and np.all(values < 3.0)

        with pytest.raises(InvalidArgumentError, match="Invalid uniform range"):
            self.generator.uniform_distribution(1.0, 1.0)

    def test_sort_without_locations(self):
        with pytest.raises(InvalidArgumentError, match="No locations"):
            SyntheticGenerator(seed=0).sort_locations()

    def test_verbose_progress(self, capsys):
        """Verbose run mode prints progress lines."""
        control = SynthesisControl(problem_size=9, seed=0, run_mode='verbose')
        SyntheticGenerator(control).generate_locations()

        captured = capsys.readouterr()
        assert "Generating 9 2D locations" in captured.out
        assert "Morton order" in captured.out

    def test_standard_mode_silent(self, capsys):
        control = SynthesisControl(problem_size=9, seed=0)
        SyntheticGenerator(control).generate_locations()
        assert capsys.readouterr().out == ""
