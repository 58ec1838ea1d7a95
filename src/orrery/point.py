'''Development code for an orbital trajectory caching package
TrajectoryPoint class definition'''

import numpy as np
from .config import config
from .vector import Vector3, as_vector3, frozen_zero3


class TrajectoryPoint:
    """
    Immutable sample of a body's motion at one instant.

    TrajectoryPoint is immutable, extract arrays using numpy methods and
    create a new instance to change.

    Parameters
    ----------
    time : float
        Simulation time of the sample
    position : array-like
        Position [x, y, z]
    velocity : array-like
        Velocity [vx, vy, vz]
    """
    # ========== CONSTRUCTION ==========
    def __init__(self, time: float, position, velocity):
        self._time = float(time)
        self._position = as_vector3(position)
        self._velocity = as_vector3(velocity)
        # Ensure immutability of stored arrays
        self._position.flags.writeable = False
        self._velocity.flags.writeable = False

    @classmethod
    def from_state(cls, time: float, state) -> "TrajectoryPoint":
        """
        Create a point from a 6-wide state vector [x, y, z, vx, vy, vz].
        """
        state = np.asarray(state, dtype=float)
        if state.shape != (6,):
            raise ValueError(f"State vector must have shape (6,), got {state.shape}")
        return cls(time, state[0:3], state[3:6])

    @classmethod
    def zero(cls, time: float = 0.0) -> "TrajectoryPoint":
        """Point at the origin with zero velocity."""
        return cls(time, frozen_zero3(), frozen_zero3())

    # ========== PROPERTY ACCESS ==========
    @property
    def time(self) -> float:
        return self._time

    @property
    def position(self) -> Vector3:
        """Position (read-only)"""
        return self._position

    @property
    def velocity(self) -> Vector3:
        """Velocity (read-only)"""
        return self._velocity

    @property
    def state(self) -> np.ndarray:
        """Concatenated state vector [x, y, z, vx, vy, vz] (fresh copy)."""
        return np.concatenate((self._position, self._velocity))

    # ========== COMPARISON ==========
    def is_identical(self, other: "TrajectoryPoint") -> bool:
        """Bit-for-bit equality, used to verify deterministic recomputation."""
        return (
            self._time == other._time and
            np.array_equal(self._position, other._position) and
            np.array_equal(self._velocity, other._velocity)
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, TrajectoryPoint):
            return NotImplemented
        rtol = config.EQUALITY_RTOL
        atol = config.EQUALITY_ATOL
        return (
            bool(np.isclose(self.time, other.time, rtol=rtol, atol=atol)) and
            np.allclose(self.position, other.position, rtol=rtol, atol=atol) and
            np.allclose(self.velocity, other.velocity, rtol=rtol, atol=atol)
        )

    # Tolerance-based equality cannot be hashed consistently
    __hash__ = None

    def __repr__(self) -> str:
        r = ", ".join(f"{c:.6g}" for c in self._position)
        v = ", ".join(f"{c:.6g}" for c in self._velocity)
        return f"TrajectoryPoint(t={self._time:.6g}, r=[{r}], v=[{v}])"
