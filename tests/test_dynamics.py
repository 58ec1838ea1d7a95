"""
Test suite for the restricted two-body derivative model.

Tests cover:
- Inverse-square acceleration toward the parent sample
- Parent lookup key mapping and missing-sample recovery
- Parent sample frozen across RK stages
- Velocity frames
- Environment parsing and validation
- Analytic helpers
"""

import math
import pytest
import numpy as np
from orrery import (
    Environment, StepEnvironment, ParentSamplePolicy, VelocityFrame,
    TrajectoryPoint, ParentView, Integrator,
    restricted_two_body, resolve_step_environment,
    circular_speed, orbital_period, relative_mass
)
from orrery.dynamics import lookup_key, make_integrator, STATE_WIDTH


def view_of(points: dict) -> ParentView:
    """Bounded view over a plain mapping of step -> point."""
    upper = max(points) if points else None
    return ParentView(points, upper)


class TestRestrictedTwoBody:
    """Test the derivative function itself."""

    def test_root_body_acceleration(self):
        """Acceleration is -mu r / |r|^3 about the origin."""
        env = StepEnvironment(4.0, np.zeros(3), np.zeros(3))
        state = np.array([2.0, 0.0, 0.0, 0.0, 1.0, 0.0])
        d = restricted_two_body(state, 0.0, env)
        np.testing.assert_allclose(d, [0.0, 1.0, 0.0, -1.0, 0.0, 0.0])

    def test_acceleration_relative_to_parent(self):
        """Only the separation from the parent matters."""
        env = StepEnvironment(4.0, np.array([1.0, 1.0, 1.0]), np.zeros(3))
        state = np.array([3.0, 1.0, 1.0, 0.0, 0.0, 0.0])
        d = restricted_two_body(state, 0.0, env)
        np.testing.assert_allclose(d[3:6], [-1.0, 0.0, 0.0])

    def test_inverse_square(self):
        """Doubling the distance quarters the acceleration."""
        env = StepEnvironment(1.0, np.zeros(3), np.zeros(3))
        near = restricted_two_body(np.array([0, 0, 1.0, 0, 0, 0]), 0.0, env)
        far = restricted_two_body(np.array([0, 0, 2.0, 0, 0, 0]), 0.0, env)
        assert far[5] == pytest.approx(near[5] / 4)

    def test_output_width(self):
        """Derivative is 6 wide."""
        env = StepEnvironment(1.0, np.zeros(3), np.zeros(3))
        d = restricted_two_body(np.ones(6), 0.0, env)
        assert d.shape == (STATE_WIDTH,)

    def test_inertial_frame_ignores_parent_velocity(self):
        """Inertial position rate is the body's own velocity."""
        env = StepEnvironment(1.0, np.zeros(3), np.array([5.0, 5.0, 5.0]))
        d = restricted_two_body(np.array([1.0, 0, 0, 0.1, 0.2, 0.3]), 0.0, env)
        np.testing.assert_allclose(d[0:3], [0.1, 0.2, 0.3])

    def test_parent_relative_frame_adds_parent_velocity(self):
        """Parent-relative position rate is v + v_parent."""
        env = StepEnvironment(1.0, np.zeros(3), np.array([1.0, 2.0, 3.0]),
                              VelocityFrame.PARENT_RELATIVE)
        d = restricted_two_body(np.array([1.0, 0, 0, 0.1, 0.2, 0.3]), 0.0, env)
        np.testing.assert_allclose(d[0:3], [1.1, 2.2, 3.3])

    def test_zero_separation_not_clamped(self):
        """A zero separation propagates non-finite values."""
        env = StepEnvironment(1.0, np.zeros(3), np.zeros(3))
        with np.errstate(divide='ignore', invalid='ignore'):
            d = restricted_two_body(np.zeros(6), 0.0, env)
        assert not np.all(np.isfinite(d[3:6]))


class TestLookupKey:
    """Test mapping from integrator time to parent step."""

    def test_exact_multiple(self):
        assert lookup_key(0.25, 100.0) == 25

    def test_rounds_up(self):
        """Keys use ceil, so a fractional step rounds up."""
        assert lookup_key(0.251, 100.0) == 26

    def test_zero(self):
        assert lookup_key(0.0, 100.0) == 0


class TestResolveStepEnvironment:
    """Test parent sample resolution."""

    def test_root_resolves_to_origin(self):
        """No parent yields zero position and velocity."""
        env = Environment(relative_mass=2.0)
        step_env = resolve_step_environment(env, 1.23)
        assert step_env.relative_mass == 2.0
        np.testing.assert_array_equal(step_env.parent_position, np.zeros(3))
        np.testing.assert_array_equal(step_env.parent_velocity, np.zeros(3))

    def test_hit_returns_parent_sample(self):
        """Existing key returns the stored parent state."""
        points = {k: TrajectoryPoint(k * 0.01, [k, 0, 0], [0, k, 0])
                  for k in range(10)}
        env = Environment(relative_mass=1.0, parent=view_of(points),
                          lookup_scale=100.0)
        step_env = resolve_step_environment(env, 0.05)
        np.testing.assert_allclose(step_env.parent_position, [5, 0, 0])
        np.testing.assert_allclose(step_env.parent_velocity, [0, 5, 0])

    def test_empty_parent_resolves_to_origin(self):
        """An empty parent view behaves like no parent."""
        env = Environment(relative_mass=1.0, parent=view_of({}))
        step_env = resolve_step_environment(env, 0.5)
        np.testing.assert_array_equal(step_env.parent_position, np.zeros(3))

    def test_miss_zero_policy(self):
        """Missing sample is replaced by zero under the zero policy."""
        points = {0: TrajectoryPoint(0.0, [3, 3, 3], [1, 1, 1])}
        env = Environment(relative_mass=1.0, parent=view_of(points),
                          lookup_scale=100.0, parent_policy='zero')
        step_env = resolve_step_environment(env, 0.5)
        np.testing.assert_array_equal(step_env.parent_position, np.zeros(3))
        np.testing.assert_array_equal(step_env.parent_velocity, np.zeros(3))

    def test_miss_interpolate_between_neighbors(self):
        """Interpolation policy blends the nearest samples on each side."""
        points = {
            0: TrajectoryPoint(0.0, [0, 0, 0], [0, 0, 0]),
            10: TrajectoryPoint(0.1, [10, 0, 0], [0, 2, 0]),
        }
        env = Environment(relative_mass=1.0, parent=view_of(points),
                          lookup_scale=100.0, parent_policy='interpolate')
        step_env = resolve_step_environment(env, 0.04)
        np.testing.assert_allclose(step_env.parent_position, [4, 0, 0])
        np.testing.assert_allclose(step_env.parent_velocity, [0, 0.8, 0])

    def test_miss_interpolate_clamps_past_end(self):
        """Interpolation beyond the last sample holds the last sample."""
        points = {0: TrajectoryPoint(0.0, [0, 0, 0], [0, 0, 0]),
                  1: TrajectoryPoint(0.01, [1, 2, 3], [4, 5, 6])}
        env = Environment(relative_mass=1.0, parent=view_of(points),
                          lookup_scale=100.0,
                          parent_policy=ParentSamplePolicy.INTERPOLATE)
        step_env = resolve_step_environment(env, 0.5)
        np.testing.assert_allclose(step_env.parent_position, [1, 2, 3])
        np.testing.assert_allclose(step_env.parent_velocity, [4, 5, 6])

    def test_miss_interpolate_empty_view(self):
        """Interpolation with no samples falls back to zero."""
        env = Environment(relative_mass=1.0, parent=view_of({}),
                          parent_policy='interpolate')
        step_env = resolve_step_environment(env, 0.5)
        np.testing.assert_array_equal(step_env.parent_position, np.zeros(3))

    def test_view_bound_hides_later_samples(self):
        """Samples past the view's upper bound count as missing."""
        points = {k: TrajectoryPoint(k * 0.01, [1, 1, 1], [0, 0, 0])
                  for k in range(10)}
        env = Environment(relative_mass=1.0, parent=ParentView(points, 4),
                          lookup_scale=100.0)
        step_env = resolve_step_environment(env, 0.08)
        np.testing.assert_array_equal(step_env.parent_position, np.zeros(3))


class TestParentFrozenAcrossStages:
    """The parent sample is looked up once per integrator step."""

    def test_substages_use_step_start_sample(self):
        """A parent jump at the next key does not leak into sub-stages."""
        # Parent sits at the origin at step 0 and far away at step 1. The
        # half-step stages of step 0 would map to key 1 if looked up per
        # stage, so freezing is visible in the result.
        points = {
            0: TrajectoryPoint(0.0, [0, 0, 0], [0, 0, 0]),
            1: TrajectoryPoint(0.01, [100, 0, 0], [0, 0, 0]),
        }
        parent_env = Environment(relative_mass=1.0, parent=view_of(points),
                                 lookup_scale=100.0)
        root_env = Environment(relative_mass=1.0, lookup_scale=100.0)
        integ = make_integrator(0.01)
        state = np.array([1.0, 0.0, 0.0, 0.0, 1.0, 0.0])

        with_parent = integ.step(state, 0.0, parent_env)
        as_root = integ.step(state, 0.0, root_env)
        np.testing.assert_array_equal(with_parent, as_root)


class TestEnvironment:
    """Test Environment construction."""

    def test_parses_strings(self):
        env = Environment(relative_mass=1.0, parent_policy='interpolate',
                          velocity_frame='parent_relative')
        assert env.parent_policy is ParentSamplePolicy.INTERPOLATE
        assert env.velocity_frame is VelocityFrame.PARENT_RELATIVE

    def test_default_lookup_scale(self):
        """Default lookup scale is the reciprocal of the time per step."""
        env = Environment(relative_mass=1.0)
        assert env.lookup_scale == pytest.approx(100.0)

    def test_invalid_policy(self):
        with pytest.raises(ValueError, match="Unknown parent sample policy"):
            Environment(relative_mass=1.0, parent_policy='nearest')

    def test_invalid_frame(self):
        with pytest.raises(ValueError, match="Unknown velocity frame"):
            Environment(relative_mass=1.0, velocity_frame='rotating')

    def test_negative_step(self):
        with pytest.raises(ValueError, match="Current step"):
            Environment(relative_mass=1.0, current_step=-1)

    def test_immutable(self):
        env = Environment(relative_mass=1.0)
        with pytest.raises(AttributeError):
            env.relative_mass = 2.0


class TestHelpers:
    """Test analytic helper functions."""

    def test_relative_mass(self):
        assert relative_mass(333.0, 1.0) == pytest.approx(333.0 / 334.0)

    def test_relative_mass_symmetric(self):
        assert relative_mass(2.0, 3.0) == relative_mass(3.0, 2.0)

    def test_relative_mass_rejects_nonpositive(self):
        with pytest.raises(ValueError):
            relative_mass(0.0, 1.0)

    def test_circular_speed(self):
        assert circular_speed(4.0, 1.0) == pytest.approx(2.0)

    def test_orbital_period(self):
        assert orbital_period(1.0, 1.0) == pytest.approx(2 * math.pi)

    def test_helpers_reject_bad_radius(self):
        with pytest.raises(ValueError):
            circular_speed(1.0, 0.0)
        with pytest.raises(ValueError):
            orbital_period(1.0, -1.0)

    def test_model_registers(self):
        """The restricted model passes the registration dimension check."""
        assert isinstance(make_integrator(0.01), Integrator)
