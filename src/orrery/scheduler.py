'''Development code for an orbital trajectory caching package
TrajectoryScheduler class definition'''

import warnings
from typing import List, NamedTuple, Optional
from .clock import SimulationClock
from .config import config
from .errors import MissingCurrentPoint, ParentCoverageError
from .scenario import Scenario
from .utils import validation_error


class ExtensionRecord(NamedTuple):
    """One batch extension performed by the scheduler."""
    body: int               # arena index
    start: int              # absolute step of the boundary point
    stop: int               # last absolute step written
    parent_frontier: Optional[int]  # parent's frontier at extension time
    elapsed: Optional[float] = None  # wall time of the batch in seconds


class TrajectoryScheduler:
    """
    Keeps every body's trajectory cache ahead of the simulation clock.

    Once per tick the clock is updated and the scheduler walks the bodies in
    parent-before-child order. A body whose cache lacks the clock's next
    step is extended by one large batch from its point at the current step,
    amortizing integration over many subsequent ticks.

    Construction runs the first pass, so the caches already cover the
    clock's first advance. A slow frame that advances the clock several
    times is covered before the clock moves, chaining batches if one batch
    cannot reach the landing step.

    Parameters
    ----------
    scenario : Scenario
        Bodies and trajectories to keep ahead of the clock
    clock : SimulationClock, optional
        Defaults to a clock whose time_per_step is the scenario's step size
        and whose step_size is config.STEP_SIZE
    batch_size : int, optional
        Integrator steps per extension (default: config.BATCH_SIZE)
    lookahead : int, optional
        Clock advances that must already be cached after every pass
        (default: config.LOOKAHEAD). With 1 a body is extended as soon as
        its cache lacks the clock's next step; larger values extend earlier.

    Raises
    ------
    ValueError
        If batch_size is smaller than the lookahead span, which could
        never cover it
    ParentCoverageError
        From the initial pass, if a parent cannot cover its child's first
        batch
    """
    # ========== CONSTRUCTION ==========
    def __init__(self, scenario: Scenario, clock: Optional[SimulationClock] = None,
                 batch_size: Optional[int] = None,
                 lookahead: Optional[int] = None):
        if clock is None:
            clock = SimulationClock(time_per_step=scenario.step_size)
        if batch_size is None:
            batch_size = config.BATCH_SIZE
        if lookahead is None:
            lookahead = config.LOOKAHEAD
        if int(lookahead) != lookahead or lookahead < 1:
            raise ValueError(f"Lookahead must be a positive integer, got {lookahead}")
        span = clock.step_size * int(lookahead)
        if batch_size < span:
            raise ValueError(
                f"Batch size ({batch_size}) must be at least the lookahead "
                f"span ({span} steps) to stay ahead of the clock"
            )
        if batch_size < 10 * clock.step_size:
            warnings.warn(
                f"Batch size {batch_size} covers only "
                f"{batch_size // clock.step_size} clock advances; every body "
                f"will be re-extended that often.",
                RuntimeWarning,
                stacklevel=2
            )

        self._scenario = scenario
        self._clock = clock
        self._batch_size = int(batch_size)
        self._lookahead = int(lookahead)
        self._extensions: List[ExtensionRecord] = []

        # Cover the first clock advance before the host starts ticking
        self.schedule()

    # ========== PROPERTY ACCESS ==========
    @property
    def scenario(self) -> Scenario:
        return self._scenario

    @property
    def clock(self) -> SimulationClock:
        return self._clock

    @property
    def batch_size(self) -> int:
        return self._batch_size

    @property
    def lookahead(self) -> int:
        return self._lookahead

    @property
    def step(self) -> int:
        """Clock's current absolute step."""
        return self._clock.step

    @property
    def extensions(self) -> List[ExtensionRecord]:
        """History of batch extensions in execution order."""
        return list(self._extensions)

    # ========== SCHEDULING ==========
    def tick(self, wall_delta: float) -> int:
        """
        Advance the clock by wall_delta and keep every cache ahead of it.

        The previous pass only guarantees ``lookahead`` clock advances. When
        this tick will advance the clock further, the caches are first
        extended from the current step to cover the step the clock lands
        on; the regular pass then runs at the new step.

        Returns
        -------
        int
            Number of absolute steps the clock advanced
        """
        pending = self._clock.pending(wall_delta)
        if pending > self._lookahead:
            self.schedule(advances=pending)
        advanced = self._clock.advance(wall_delta)
        self.schedule()
        return advanced

    def schedule(self, advances: Optional[int] = None) -> List[ExtensionRecord]:
        """
        Extend every body whose cache lacks the step ``advances`` clock
        advances ahead of the current step.

        Parameters
        ----------
        advances : int, optional
            Clock advances to cover (default: lookahead, which with the
            default of 1 is the clock's next step)

        Returns
        -------
        list of ExtensionRecord
            Extensions performed by this pass

        Raises
        ------
        MissingCurrentPoint
            If a body needing extension has no point at the current step
        """
        if advances is None:
            advances = self._lookahead
        step = self._clock.step
        target = step + self._clock.step_size * advances
        performed = []
        for index, body, traj in self._scenario.bodies():
            if target in traj:
                continue
            performed.extend(self._extend(index, step, target))
        return performed

    def _extend(self, index: int, step: int, target: int) -> List[ExtensionRecord]:
        """
        Extend one body from the current step until its cache holds target.

        A target further than one batch away is reached by chaining batches,
        each starting from the previous batch's last point.
        """
        body = self._scenario.body(index)
        traj = self._scenario.trajectory(index)

        records = []
        start = step
        while target not in traj:
            start_point = traj.lookup(start)
            if start_point is None:
                raise MissingCurrentPoint(start, body=body.name)

            stop = start + self._batch_size
            parent_frontier = None
            if traj.parent is not None:
                parent_frontier = traj.parent.frontier
                if parent_frontier is None or parent_frontier < stop:
                    validation_error(
                        f"Parent of body '{body.name}' covers steps up to "
                        f"{parent_frontier}, but the extension needs {stop}",
                        ParentCoverageError
                    )

            env = traj.environment(start)
            traj.calculate(start_point, env, self._batch_size)

            record = ExtensionRecord(index, start, stop, parent_frontier,
                                     traj.last_batch_time)
            self._extensions.append(record)
            records.append(record)
            start = stop
        return records

    def __repr__(self):
        return (f"TrajectoryScheduler(bodies={len(self._scenario)}, "
                f"step={self._clock.step}, batch_size={self._batch_size})")
