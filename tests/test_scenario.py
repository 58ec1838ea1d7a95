"""
Test suite for Scenario and predefined scenarios.

Tests cover:
- Spawning bodies and seeding trajectories
- Parent/child arena relationships
- Default reduced mass
- Presentation positions
- Factory functions
"""

import pytest
import numpy as np
from orrery import (
    Scenario, Body, Trajectory, TrajectoryPoint, VelocityFrame,
    ParentSamplePolicy, relative_mass, circular_orbit, sun_planet_moon,
    temp_config
)
from orrery.defaults import SUN_MASS, HEAVY_SUN_MASS, MOON_MASS


@pytest.fixture
def scenario():
    """Sun with one planet and one moon spawned by hand."""
    s = Scenario(100.0, name='test')
    planet = s.spawn(1.0, [10, 0, 0], [0, 3, 0], name='planet')
    s.spawn(0.1, [11, 0, 0], [0, 1, 0], parent=planet, name='moon')
    return s


class TestConstruction:
    """Test Scenario creation."""

    def test_empty(self):
        s = Scenario(10.0)
        assert len(s) == 0
        assert s.central_mass == 10.0
        assert s.step_size == 0.01

    def test_step_size_from_config(self):
        with temp_config(TIME_PER_STEP=0.05):
            s = Scenario(10.0)
        assert s.step_size == 0.05

    def test_invalid_central_mass(self):
        with pytest.raises(ValueError, match="Central mass"):
            Scenario(0.0)

    def test_invalid_step_size(self):
        with pytest.raises(ValueError, match="Step size"):
            Scenario(1.0, step_size=-0.01)


class TestSpawn:
    """Test adding bodies."""

    def test_indices_in_spawn_order(self, scenario):
        assert scenario.index_of('planet') == 0
        assert scenario.index_of('moon') == 1

    def test_body_record(self, scenario):
        body = scenario.body(1)
        assert isinstance(body, Body)
        assert body.parent == 0
        assert not body.is_root
        assert scenario.body(0).is_root

    def test_trajectory_seeded(self, scenario):
        """Each spawned body has its initial point at step 0."""
        traj = scenario.trajectory(0)
        assert isinstance(traj, Trajectory)
        assert traj.steps() == [0]
        assert traj.lookup(0) == TrajectoryPoint(0.0, [10, 0, 0], [0, 3, 0])

    def test_child_trajectory_references_parent(self, scenario):
        assert scenario.trajectory(1).parent is scenario.trajectory(0)
        assert scenario.trajectory(0).parent is None

    def test_default_relative_mass_root(self, scenario):
        """Root bodies pair with the central mass."""
        assert scenario.body(0).relative_mass == pytest.approx(
            relative_mass(100.0, 1.0))

    def test_default_relative_mass_child(self, scenario):
        """Children pair with their parent's mass."""
        assert scenario.body(1).relative_mass == pytest.approx(
            relative_mass(1.0, 0.1))

    def test_explicit_relative_mass(self):
        s = Scenario(100.0)
        s.spawn(1.0, [1, 0, 0], [0, 1, 0], relative_mass=0.5)
        assert s.trajectory(0).relative_mass == 0.5

    def test_default_names(self):
        s = Scenario(100.0)
        s.spawn(1.0, [1, 0, 0], [0, 1, 0])
        s.spawn(1.0, [2, 0, 0], [0, 1, 0])
        assert s.body(1).name == 'body1'

    def test_missing_parent_rejected(self):
        """A parent must exist before its child is spawned."""
        s = Scenario(100.0)
        with pytest.raises(IndexError, match="Parent index 0"):
            s.spawn(1.0, [1, 0, 0], [0, 1, 0], parent=0)

    def test_duplicate_name_rejected(self, scenario):
        with pytest.raises(ValueError, match="Duplicate"):
            scenario.spawn(1.0, [1, 0, 0], [0, 1, 0], name='moon')

    def test_invalid_mass(self):
        with pytest.raises(ValueError, match="Mass must be positive"):
            Scenario(100.0).spawn(-1.0, [1, 0, 0], [0, 1, 0])

    def test_velocity_frame_string(self):
        s = Scenario(100.0)
        s.spawn(1.0, [1, 0, 0], [0, 1, 0], velocity_frame='parent_relative')
        assert s.trajectory(0).velocity_frame is VelocityFrame.PARENT_RELATIVE

    def test_parent_policy_shared(self):
        s = Scenario(100.0, parent_policy='interpolate')
        s.spawn(1.0, [1, 0, 0], [0, 1, 0])
        assert s.trajectory(0).parent_policy is ParentSamplePolicy.INTERPOLATE


class TestTree:
    """Test arena relationships."""

    def test_parent_of(self, scenario):
        assert scenario.parent_of(0) is None
        assert scenario.parent_of(1) == 0

    def test_children_of(self, scenario):
        assert scenario.children_of(0) == [1]
        assert scenario.children_of(1) == []

    def test_index_of_unknown(self, scenario):
        with pytest.raises(KeyError):
            scenario.index_of('comet')

    def test_bodies_parent_before_child(self, scenario):
        order = [i for i, _, _ in scenario.bodies()]
        assert order == [0, 1]
        for i, body, _ in scenario.bodies():
            assert body.parent is None or body.parent < i


class TestPositions:
    """Test presentation output."""

    def test_positions_float32(self, scenario):
        positions = scenario.positions_at(0)
        assert set(positions) == {'planet', 'moon'}
        assert positions['moon'].dtype == np.float32
        np.testing.assert_array_equal(positions['planet'], [10, 0, 0])

    def test_missing_step_omitted(self, scenario):
        assert scenario.positions_at(5) == {}

    def test_repr(self, scenario):
        text = repr(scenario)
        assert "'test'" in text
        assert 'bodies=2' in text


class TestDefaults:
    """Test predefined scenarios."""

    def test_circular_orbit(self):
        s = circular_orbit()
        assert s.central_mass == SUN_MASS
        mu = 333.0 / 334.0
        point = s.trajectory(0).lookup(0)
        np.testing.assert_allclose(point.position, [20, 0, 0])
        np.testing.assert_allclose(point.velocity, [0, np.sqrt(mu / 20), 0])
        assert s.body(0).relative_mass == pytest.approx(mu)

    def test_fresh_instances(self):
        """Factories never share trajectory caches."""
        assert circular_orbit().trajectory(0) is not circular_orbit().trajectory(0)

    def test_sun_planet_moon(self):
        s = sun_planet_moon()
        assert s.central_mass == HEAVY_SUN_MASS
        assert s.index_of('planet') == 0
        assert s.parent_of(s.index_of('moon')) == 0
        moon = s.trajectory(1)
        assert moon.velocity_frame is VelocityFrame.PARENT_RELATIVE
        assert s.body(1).mass == MOON_MASS
