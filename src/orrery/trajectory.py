'''Development code for an orbital trajectory caching package
Trajectory class definition'''

import numpy as np
import pandas as pd
from types import MappingProxyType
from typing import Dict, Iterator, Optional, Tuple
from .config import config
from .dynamics import (Environment, ParentSamplePolicy, VelocityFrame,
                       make_integrator, parse_parent_policy,
                       parse_velocity_frame)
from .errors import MissingParentSample
from .point import TrajectoryPoint
from .utils import Timer


class ParentView:
    """
    Read-only view of a trajectory cache bounded by an upper step.

    The view shares the underlying mapping instead of copying it. Because
    the cache is append-only, every key at or below ``upper`` is stable for
    the lifetime of the view; keys the owner adds later are hidden.

    Parameters
    ----------
    points : dict
        Mapping of absolute step to TrajectoryPoint (not copied)
    upper : int or None
        Largest visible step, None for an empty view
    first : int, optional
        Smallest step in the mapping. Trajectory.snapshot passes its tracked
        value; when omitted it is found once, on the first neighbor query.
    """
    def __init__(self, points: Dict[int, TrajectoryPoint], upper: Optional[int],
                 first: Optional[int] = None):
        self._points = points
        self._upper = upper
        self._first = first

    @property
    def upper(self) -> Optional[int]:
        return self._upper

    def get(self, step: int) -> Optional[TrajectoryPoint]:
        """Point at step, or None if absent or beyond the bound."""
        if self._upper is None or step > self._upper:
            return None
        return self._points.get(step)

    def require(self, step: int) -> TrajectoryPoint:
        """
        Point at step.

        Raises
        ------
        MissingParentSample
            If the step is absent or beyond the bound
        """
        point = self.get(step)
        if point is None:
            raise MissingParentSample(step)
        return point

    def neighbors(self, step: int) -> Tuple[Optional[Tuple[int, TrajectoryPoint]],
                                            Optional[Tuple[int, TrajectoryPoint]]]:
        """
        Nearest visible samples strictly below and strictly above step.

        Searches outward from step within [first, upper]. A trajectory cache
        is contiguous, so a miss past the frontier resolves to ``upper`` at
        once and a miss before the seed resolves to ``first``.

        Returns
        -------
        (lower, upper) : tuple
            Each entry is a (step, point) pair or None
        """
        if self._upper is None or not self._points:
            return None, None
        if self._first is None:
            self._first = min(self._points)

        below = None
        k = min(step - 1, self._upper)
        while k >= self._first:
            if k in self._points:
                below = k
                break
            k -= 1

        above = None
        k = max(step + 1, self._first)
        while k <= self._upper:
            if k in self._points:
                above = k
                break
            k += 1

        return (
            (below, self._points[below]) if below is not None else None,
            (above, self._points[above]) if above is not None else None,
        )

    def __contains__(self, step) -> bool:
        return self.get(step) is not None

    def __repr__(self):
        return f"ParentView(upper={self._upper})"


class Trajectory:
    """
    Append-only, step-indexed cache of a body's trajectory points.

    Keys are absolute simulation steps shared by every body, so a point is
    found directly without renumbering as the cache grows. Existing keys are
    only ever rewritten by deterministic recomputation with identical inputs.

    Parameters
    ----------
    parent : Trajectory, optional
        Trajectory of the body this one orbits (None for a root body)
    relative_mass : float
        Reduced mass mu of the restricted two-body subproblem
    step_size : float, optional
        Simulated time per step (default: config.TIME_PER_STEP)
    velocity_frame : VelocityFrame or str, optional
        Frame of stored velocities (default: 'inertial')
    parent_policy : ParentSamplePolicy or str, optional
        Missing parent sample resolution
        (default: config.PARENT_SAMPLE_POLICY)
    name : str, optional
        Label used in reprs and error messages

    Attributes:
        points: mapping of absolute step to TrajectoryPoint (read only)
        parent: parent Trajectory or None
        relative_mass: reduced mass
    """
    # ========== CONSTRUCTION ==========
    def __init__(
        self,
        parent: Optional["Trajectory"],
        relative_mass: float,
        step_size: Optional[float] = None,
        velocity_frame=VelocityFrame.INERTIAL,
        parent_policy=None,
        name: Optional[str] = None,
    ):
        if relative_mass <= 0:
            raise ValueError(f"Relative mass must be positive, got {relative_mass}")
        if parent is not None and not isinstance(parent, Trajectory):
            raise TypeError(f"Parent must be a Trajectory, got {type(parent).__name__}")
        if step_size is None:
            step_size = config.TIME_PER_STEP
        if parent_policy is None:
            parent_policy = config.PARENT_SAMPLE_POLICY

        self._points: Dict[int, TrajectoryPoint] = {}
        self._frontier: Optional[int] = None
        self._first: Optional[int] = None
        self._last_batch_time: Optional[float] = None
        self._parent = parent
        self._relative_mass = float(relative_mass)
        self._step_size = float(step_size)
        self._lookup_scale = 1.0 / self._step_size
        self._velocity_frame = parse_velocity_frame(velocity_frame)
        self._parent_policy = parse_parent_policy(parent_policy)
        self._name = name
        # Registers the derivative model (width check happens here)
        self._integrator = make_integrator(self._step_size)

    def seed(self, point: TrajectoryPoint, step: int = 0) -> "Trajectory":
        """
        Insert the spawn-time initial point.

        Returns
        -------
        self
            Returns self for method chaining

        Raises
        ------
        ValueError
            If the trajectory already holds points
        """
        if self._points:
            raise ValueError(
                f"Cannot seed {self._label()}: it already holds "
                f"{len(self._points)} points"
            )
        if step < 0:
            raise ValueError(f"Seed step must be non-negative, got {step}")
        self._points[int(step)] = point
        self._frontier = int(step)
        self._first = int(step)
        return self

    # ========== PROPERTY ACCESS ==========
    @property
    def points(self):
        """Read-only mapping of absolute step to TrajectoryPoint."""
        return MappingProxyType(self._points)

    @property
    def parent(self) -> Optional["Trajectory"]:
        return self._parent

    @property
    def relative_mass(self) -> float:
        return self._relative_mass

    @property
    def step_size(self) -> float:
        return self._step_size

    @property
    def lookup_scale(self) -> float:
        return self._lookup_scale

    @property
    def velocity_frame(self) -> VelocityFrame:
        return self._velocity_frame

    @property
    def parent_policy(self) -> ParentSamplePolicy:
        return self._parent_policy

    @property
    def name(self) -> Optional[str]:
        return self._name

    @property
    def frontier(self) -> Optional[int]:
        """Largest computed step, None if empty."""
        return self._frontier

    @property
    def first(self) -> Optional[int]:
        """Smallest computed step, None if empty."""
        return self._first

    @property
    def last_batch_time(self) -> Optional[float]:
        """Wall time in seconds of the most recent calculate() call."""
        return self._last_batch_time

    # ========== CACHE ACCESS ==========
    def lookup(self, step: int) -> Optional[TrajectoryPoint]:
        """Point at an absolute step, or None if not yet computed."""
        return self._points.get(step)

    def steps(self) -> list:
        """Sorted list of computed steps."""
        return sorted(self._points)

    def is_contiguous(self) -> bool:
        """True if the computed steps form a range without interior holes."""
        if not self._points:
            return True
        return max(self._points) - min(self._points) + 1 == len(self._points)

    def snapshot(self, upper: Optional[int] = None) -> ParentView:
        """
        Bounded read-only view of this cache for use as a parent.

        Parameters
        ----------
        upper : int, optional
            Largest visible step (default: current frontier)
        """
        frontier = self.frontier
        if upper is None or frontier is None:
            upper = frontier
        else:
            upper = min(upper, frontier)
        return ParentView(self._points, upper, first=self._first)

    def environment(self, current_step: int) -> Environment:
        """
        Build the Environment for an extension starting at current_step.

        The parent, if any, is exposed through a view bounded by its
        frontier at the time of the call.
        """
        parent = self._parent.snapshot() if self._parent is not None else None
        return Environment(
            relative_mass=self._relative_mass,
            parent=parent,
            current_step=current_step,
            lookup_scale=self._lookup_scale,
            parent_policy=self._parent_policy,
            velocity_frame=self._velocity_frame,
        )

    # ========== COMPUTATION ==========
    def calculate(self, start_point: TrajectoryPoint, environment: Environment,
                  batch_size: int) -> range:
        """
        Integrate a batch from start_point and insert it into the cache.

        Runs batch_size RK4 steps and inserts batch_size+1 points keyed by
        environment.current_step + offset. Identical inputs always produce
        identical points, so an overlapping re-invocation only rewrites
        existing keys with the same values.

        Parameters
        ----------
        start_point : TrajectoryPoint
            Boundary point the batch starts from
        environment : Environment
            Batch context (parent view, reduced mass, start step)
        batch_size : int
            Number of integrator steps

        Returns
        -------
        range
            Absolute steps written by this batch
        """
        if batch_size < 0:
            raise ValueError(f"Batch size must be non-negative, got {batch_size}")
        current_step = environment.current_step

        with Timer(f"Integrating {batch_size} steps for {self._label()}",
                   steps=batch_size, verbose=config.VERBOSE) as timer:
            solution = self._integrator.integrate(
                start_point.state, start_point.time, batch_size, environment
            )
        self._last_batch_time = timer.elapsed

        params, states = solution
        for n in range(len(params)):
            self._points[current_step + n] = TrajectoryPoint(
                params[n], states[n, 0:3], states[n, 3:6]
            )
        last = current_step + batch_size
        if self._frontier is None or last > self._frontier:
            self._frontier = last
        if self._first is None or current_step < self._first:
            self._first = current_step
        return range(current_step, current_step + batch_size + 1)

    # ========== EXPORT ==========
    def positions(self, start: Optional[int] = None,
                  stop: Optional[int] = None) -> np.ndarray:
        """
        Positions of computed steps in [start, stop) as an (n, 3) array.
        """
        return np.array([self._points[k].position for k in self._range(start, stop)]
                        ).reshape(-1, 3)

    def to_dataframe(self, start: Optional[int] = None,
                     stop: Optional[int] = None) -> pd.DataFrame:
        """
        Export computed steps in [start, stop) to pandas DataFrame.

        Returns:
            DataFrame indexed by step with columns for time and state
        """
        steps = self._range(start, stop)
        states = np.array([self._points[k].state for k in steps]).reshape(-1, 6)
        data = {
            'time': [self._points[k].time for k in steps],
            'x': states[:, 0],
            'y': states[:, 1],
            'z': states[:, 2],
            'vx': states[:, 3],
            'vy': states[:, 4],
            'vz': states[:, 5],
        }
        return pd.DataFrame(data, index=pd.Index(steps, name='step'))

    def _range(self, start, stop) -> list:
        return [k for k in self.steps()
                if (start is None or k >= start) and (stop is None or k < stop)]

    # ========== SPECIAL METHODS ==========
    def _label(self) -> str:
        return f"'{self._name}'" if self._name else "trajectory"

    def __contains__(self, step) -> bool:
        return step in self._points

    def __len__(self) -> int:
        return len(self._points)

    def __iter__(self) -> Iterator[Tuple[int, TrajectoryPoint]]:
        """Iterate over (step, point) pairs in step order."""
        for k in self.steps():
            yield k, self._points[k]

    def __repr__(self):
        parent = self._parent._label() if self._parent is not None else None
        return (f"Trajectory(name={self._name!r}, parent={parent}, "
                f"mu={self._relative_mass:.6g}, points={len(self._points)}, "
                f"frontier={self.frontier})")
