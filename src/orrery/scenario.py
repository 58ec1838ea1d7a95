'''Development code for an orbital trajectory caching package
Scenario class definition'''

import numpy as np
from typing import Dict, Iterator, List, Optional, Tuple
from .body import Body, relative_mass as reduced_mass
from .config import config
from .dynamics import VelocityFrame, parse_velocity_frame
from .point import TrajectoryPoint
from .trajectory import Trajectory


class Scenario:
    """
    Arena of bodies forming a static parent/child tree.

    Bodies are addressed by integer index. A parent must already exist when
    a child is spawned, so index order is always parent-before-child and
    cycles cannot be built. Each body owns one Trajectory, seeded at step 0
    with its initial conditions.

    Parameters
    ----------
    central_mass : float
        Mass of the implicit, fixed central body at the origin. Root bodies
        orbit it.
    step_size : float, optional
        Simulated time per step shared by all trajectories
        (default: config.TIME_PER_STEP)
    parent_policy : ParentSamplePolicy or str, optional
        Missing parent sample resolution for all trajectories
        (default: config.PARENT_SAMPLE_POLICY)
    name : str, optional
        Scenario identifier

    Notes
    -----
    - Scenario constants are fixed at construction, so scenarios with
      different masses and timesteps can coexist
    - Bodies cannot be removed; the whole scenario is discarded instead
    """
    # ========== CONSTRUCTION ==========
    def __init__(
        self,
        central_mass: float,
        step_size: Optional[float] = None,
        parent_policy=None,
        name: Optional[str] = None,
    ):
        if central_mass <= 0:
            raise ValueError(f"Central mass must be positive, got {central_mass}")
        if step_size is None:
            step_size = config.TIME_PER_STEP
        if step_size <= 0:
            raise ValueError(f"Step size must be positive, got {step_size}")
        if parent_policy is None:
            parent_policy = config.PARENT_SAMPLE_POLICY

        self._central_mass = float(central_mass)
        self._step_size = float(step_size)
        self._parent_policy = parent_policy
        self._name = name
        self._bodies: List[Body] = []
        self._trajectories: List[Trajectory] = []

    def spawn(
        self,
        mass: float,
        position,
        velocity,
        parent: Optional[int] = None,
        relative_mass: Optional[float] = None,
        name: Optional[str] = None,
        velocity_frame=VelocityFrame.INERTIAL,
    ) -> int:
        """
        Add a body and seed its trajectory at step 0.

        Parameters
        ----------
        mass : float
            Body mass
        position : array-like
            Initial position [x, y, z]
        velocity : array-like
            Initial velocity [vx, vy, vz] (relative to the parent when
            velocity_frame is 'parent_relative')
        parent : int, optional
            Index of an existing body to orbit; None orbits the central mass
        relative_mass : float, optional
            Reduced mass mu. Defaults to relative_mass(M_parent, mass) with
            M_parent the parent's mass or the central mass.
        name : str, optional
            Body identifier
        velocity_frame : VelocityFrame or str, optional
            Frame of the velocity half of the state (default: 'inertial')

        Returns
        -------
        int
            Index of the new body

        Raises
        ------
        IndexError
            If parent does not refer to an existing body
        """
        parent_traj = None
        if parent is not None:
            if not 0 <= parent < len(self._bodies):
                raise IndexError(
                    f"Parent index {parent} does not refer to an existing body "
                    f"({len(self._bodies)} spawned)"
                )
            parent_mass = self._bodies[parent].mass
            parent_traj = self._trajectories[parent]
        else:
            parent_mass = self._central_mass

        if relative_mass is None:
            relative_mass = reduced_mass(parent_mass, mass)
        if name is None:
            name = f"body{len(self._bodies)}"
        elif any(b.name == name for b in self._bodies):
            raise ValueError(f"Duplicate body name '{name}'")

        body = Body(mass=float(mass), relative_mass=float(relative_mass),
                    parent=parent, name=name)
        traj = Trajectory(
            parent_traj,
            body.relative_mass,
            step_size=self._step_size,
            velocity_frame=parse_velocity_frame(velocity_frame),
            parent_policy=self._parent_policy,
            name=name,
        )
        traj.seed(TrajectoryPoint(0.0, position, velocity), step=0)

        self._bodies.append(body)
        self._trajectories.append(traj)
        return len(self._bodies) - 1

    # ========== PROPERTY ACCESS ==========
    @property
    def central_mass(self) -> float:
        return self._central_mass

    @property
    def step_size(self) -> float:
        return self._step_size

    @property
    def name(self) -> Optional[str]:
        return self._name

    def body(self, index: int) -> Body:
        return self._bodies[index]

    def trajectory(self, index: int) -> Trajectory:
        return self._trajectories[index]

    def parent_of(self, index: int) -> Optional[int]:
        return self._bodies[index].parent

    def children_of(self, index: int) -> List[int]:
        return [i for i, b in enumerate(self._bodies) if b.parent == index]

    def index_of(self, name: str) -> int:
        """Index of the body with the given name."""
        for i, b in enumerate(self._bodies):
            if b.name == name:
                return i
        raise KeyError(f"No body named '{name}'")

    def bodies(self) -> Iterator[Tuple[int, Body, Trajectory]]:
        """
        Iterate over (index, body, trajectory) in parent-before-child order.
        """
        for i, (body, traj) in enumerate(zip(self._bodies, self._trajectories)):
            yield i, body, traj

    # ========== PRESENTATION ==========
    def positions_at(self, step: int) -> Dict[str, np.ndarray]:
        """
        Renderable translations of every body at an absolute step.

        Positions are projected to float32, the precision of render
        transforms. Bodies without a point at this step are omitted.

        Returns
        -------
        dict
            Body name -> float32 array of shape (3,)
        """
        out = {}
        for _, body, traj in self.bodies():
            point = traj.lookup(step)
            if point is not None:
                out[body.name] = point.position.astype(np.float32)
        return out

    # ========== SPECIAL METHODS ==========
    def __len__(self) -> int:
        return len(self._bodies)

    def __repr__(self):
        label = f"'{self._name}'" if self._name else "unnamed"
        return (f"Scenario({label}, central_mass={self._central_mass:.6g}, "
                f"bodies={len(self._bodies)}, h={self._step_size})")
