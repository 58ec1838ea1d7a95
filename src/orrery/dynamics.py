'''Development code for an orbital trajectory caching package
Restricted two-body dynamics model'''

import math
import numpy as np
from dataclasses import dataclass, field
from enum import Enum
from typing import NamedTuple, Optional, TYPE_CHECKING
from .config import config
from .errors import MissingParentSample
from .integrator import Integrator
from .vector import Vector3, frozen_zero3, norm

if TYPE_CHECKING:
    from .trajectory import ParentView

# define enumerated options for the model
class ParentSamplePolicy(Enum):
    ZERO = 'zero'                  # substitute a zero point on a miss
    INTERPOLATE = 'interpolate'    # interpolate between nearest samples

class VelocityFrame(Enum):
    INERTIAL = 'inertial'                # position rate = v
    PARENT_RELATIVE = 'parent_relative'  # position rate = v + v_parent

_ZERO3 = frozen_zero3()

STATE_WIDTH = 6


@dataclass(frozen=True)
class Environment:
    """
    Transient context for one trajectory extension batch.

    Built fresh for every call to Trajectory.calculate and discarded
    afterwards.

    Attributes
    ----------
    relative_mass : float
        Reduced mass mu of the restricted two-body subproblem
    parent : ParentView, optional
        Bounded read-only view of the parent's trajectory, None for roots
    current_step : int
        Absolute step of the batch's start point
    lookup_scale : float
        Maps an integrator time value to a parent step key
    parent_policy : ParentSamplePolicy or str
        Resolution of missing parent samples
    velocity_frame : VelocityFrame or str
        Frame of the velocity half of the state
    """
    relative_mass: float
    parent: Optional["ParentView"] = None
    current_step: int = 0
    lookup_scale: float = field(default_factory=lambda: config.LOOKUP_SCALE)
    parent_policy: ParentSamplePolicy = field(
        default_factory=lambda: config.PARENT_SAMPLE_POLICY)
    velocity_frame: VelocityFrame = VelocityFrame.INERTIAL

    def __post_init__(self):
        if self.current_step < 0:
            raise ValueError(f"Current step must be non-negative, got {self.current_step}")
        if not self.lookup_scale > 0:
            raise ValueError(f"Lookup scale must be positive, got {self.lookup_scale}")
        # Parse strings to enums (frozen dataclass)
        object.__setattr__(self, 'parent_policy',
                           parse_parent_policy(self.parent_policy))
        object.__setattr__(self, 'velocity_frame',
                           parse_velocity_frame(self.velocity_frame))


class StepEnvironment(NamedTuple):
    """Parent sample resolved once per integrator step."""
    relative_mass: float
    parent_position: Vector3
    parent_velocity: Vector3
    velocity_frame: VelocityFrame = VelocityFrame.INERTIAL


# ========== PARENT SAMPLING ==========
def lookup_key(param: float, lookup_scale: float) -> int:
    """Absolute step key for an integrator time value: ceil(param * scale)."""
    return int(math.ceil(param * lookup_scale))


def resolve_step_environment(environment: Environment, param: float) -> StepEnvironment:
    """
    Resolve the parent's position and velocity for one integrator step.

    A root body always resolves to the origin. A miss on the parent view is
    recovered here: with ParentSamplePolicy.ZERO the zero point is
    substituted, with ParentSamplePolicy.INTERPOLATE the nearest known
    samples are interpolated.
    """
    mu = environment.relative_mass
    frame = environment.velocity_frame
    parent = environment.parent
    if parent is None:
        return StepEnvironment(mu, _ZERO3, _ZERO3, frame)

    key = lookup_key(param, environment.lookup_scale)
    try:
        point = parent.require(key)
    except MissingParentSample:
        if environment.parent_policy is ParentSamplePolicy.INTERPOLATE:
            r1, v1 = interpolate_parent(parent, key)
        else:
            r1, v1 = _ZERO3, _ZERO3
        return StepEnvironment(mu, r1, v1, frame)
    return StepEnvironment(mu, point.position, point.velocity, frame)


def interpolate_parent(parent: "ParentView", key: int):
    """
    Linearly interpolate the parent's state at a missing step.

    Returns
    -------
    (position, velocity) : tuple of np.ndarray
        Interpolated between the nearest samples on either side; the nearest
        sample when only one side exists; zero when the view is empty.
    """
    lower, upper = parent.neighbors(key)
    if lower is None and upper is None:
        return _ZERO3, _ZERO3
    if lower is None or upper is None:
        _, point = lower if lower is not None else upper
        return point.position, point.velocity

    k0, p0 = lower
    k1, p1 = upper
    w = (key - k0) / (k1 - k0)
    position = p0.position + w * (p1.position - p0.position)
    velocity = p0.velocity + w * (p1.velocity - p0.velocity)
    return position, velocity


# ========== DERIVATIVE MODEL ==========
def restricted_two_body(state: np.ndarray, param: float,
                        environment: StepEnvironment) -> np.ndarray:
    """
    State derivative of a body attracted by its (non-reactive) parent.

    r12 = r2 - r1
    a2 = -mu * r12 / |r12|^3
    derivative = [v2, a2]

    With VelocityFrame.PARENT_RELATIVE the velocity half of the state is
    measured relative to the parent and the position rate becomes
    v2 + v_parent.

    Parameters
    ----------
    state : np.ndarray
        [x, y, z, vx, vy, vz] of the moving body
    param : float
        Integrator time value (the parent sample is already resolved)
    environment : StepEnvironment
        Reduced mass and parent sample for the current step

    Returns
    -------
    np.ndarray
        6-wide derivative
    """
    r2 = state[0:3]
    v2 = state[3:6]

    r12 = r2 - environment.parent_position
    r_norm = norm(r12)
    # No softening: a near-zero separation yields huge or non-finite values
    a2 = -environment.relative_mass * r12 / r_norm**3

    if environment.velocity_frame is VelocityFrame.PARENT_RELATIVE:
        rate = v2 + environment.parent_velocity
    else:
        rate = v2
    return np.concatenate((rate, a2))


def make_integrator(step_size: float) -> Integrator:
    """Register the restricted two-body model with an RK4 integrator."""
    return Integrator(
        restricted_two_body,
        STATE_WIDTH,
        step_size,
        step_environment=resolve_step_environment,
        check_environment=Environment(relative_mass=1.0),
    )


# ========== ANALYTIC HELPERS ==========
def circular_speed(mu: float, radius: float) -> float:
    """Speed of a circular orbit of given radius: sqrt(mu / r)."""
    if radius <= 0:
        raise ValueError(f"Radius must be positive, got {radius}")
    return math.sqrt(mu / radius)


def orbital_period(mu: float, radius: float) -> float:
    """Period of a circular orbit: 2 pi sqrt(r^3 / mu)."""
    if mu <= 0:
        raise ValueError(f"Gravitational parameter must be positive, got {mu}")
    if radius <= 0:
        raise ValueError(f"Radius must be positive, got {radius}")
    return 2.0 * math.pi * math.sqrt(radius**3 / mu)


# ========== PARSING ==========
def parse_parent_policy(policy) -> ParentSamplePolicy:
    """Convert string or enum to ParentSamplePolicy enum"""
    if isinstance(policy, ParentSamplePolicy):
        return policy
    if isinstance(policy, str):
        try:
            return ParentSamplePolicy(policy.lower())
        except ValueError:
            raise ValueError(
                f"Unknown parent sample policy '{policy}'. "
                f"Use: {[p.value for p in ParentSamplePolicy]}"
            ) from None
    raise TypeError(f"Parent sample policy must be str or ParentSamplePolicy, "
                    f"got {type(policy).__name__}")


def parse_velocity_frame(frame) -> VelocityFrame:
    """Convert string or enum to VelocityFrame enum"""
    if isinstance(frame, VelocityFrame):
        return frame
    if isinstance(frame, str):
        try:
            return VelocityFrame(frame.lower())
        except ValueError:
            raise ValueError(
                f"Unknown velocity frame '{frame}'. "
                f"Use: {[f.value for f in VelocityFrame]}"
            ) from None
    raise TypeError(f"Velocity frame must be str or VelocityFrame, "
                    f"got {type(frame).__name__}")
