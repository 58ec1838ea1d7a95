'''Development code for an orbital trajectory caching package
SimulationClock class definition'''

from enum import Enum
from typing import Optional
from .config import config

# define an enumerated list of clock states
class ClockState(Enum):
    ACCUMULATING = 'accumulating'   # elapsed < time_per_step
    STEP_READY = 'step_ready'       # elapsed >= time_per_step


class SimulationClock:
    """
    Fixed-timestep accumulator converting wall-clock time into steps.

    Every ``time_per_step`` of accumulated wall time advances the absolute
    step counter by ``step_size``. A slow frame advances several steps at
    once and the sub-step remainder carries over to the next update.

    Parameters
    ----------
    time_per_step : float, optional
        Wall time per clock advance (default: config.TIME_PER_STEP)
    step_size : int, optional
        Steps per clock advance (default: config.STEP_SIZE)
    """
    def __init__(self, time_per_step: Optional[float] = None,
                 step_size: Optional[int] = None):
        if time_per_step is None:
            time_per_step = config.TIME_PER_STEP
        if step_size is None:
            step_size = config.STEP_SIZE
        if not time_per_step > 0:
            raise ValueError(f"Time per step must be positive, got {time_per_step}")
        if int(step_size) != step_size or step_size < 1:
            raise ValueError(f"Step size must be a positive integer, got {step_size}")

        self._time_per_step = float(time_per_step)
        self._step_size = int(step_size)
        self._time_elapsed = 0.0
        self._step = 0

    # ========== PROPERTY ACCESS ==========
    @property
    def time_per_step(self) -> float:
        return self._time_per_step

    @property
    def step_size(self) -> int:
        return self._step_size

    @property
    def time_elapsed(self) -> float:
        """Accumulated wall time not yet converted into steps."""
        return self._time_elapsed

    @property
    def step(self) -> int:
        """Current absolute step (monotonic)."""
        return self._step

    @property
    def next_step(self) -> int:
        """Step the clock reaches on its next advance."""
        return self._step + self._step_size

    @property
    def state(self) -> ClockState:
        if self._time_elapsed >= self._time_per_step:
            return ClockState.STEP_READY
        return ClockState.ACCUMULATING

    # ========== UPDATE ==========
    def _drain(self, wall_delta: float):
        """Whole timesteps contained in elapsed + wall_delta, and the remainder."""
        if wall_delta < 0:
            raise ValueError(f"Wall-clock delta must be non-negative, got {wall_delta}")
        elapsed = self._time_elapsed + wall_delta
        advances = 0
        while elapsed >= self._time_per_step:
            advances += 1
            elapsed -= self._time_per_step
        return advances, elapsed

    def pending(self, wall_delta: float) -> int:
        """
        Clock advances that advance(wall_delta) would perform.

        Does not change the clock. Uses the same arithmetic as advance(), so
        the count always agrees with the subsequent update.
        """
        advances, _ = self._drain(wall_delta)
        return advances

    def advance(self, wall_delta: float) -> int:
        """
        Accumulate wall time and convert whole timesteps into steps.

        Parameters
        ----------
        wall_delta : float
            Wall-clock time since the previous update (non-negative)

        Returns
        -------
        int
            Number of absolute steps the counter advanced
        """
        advances, self._time_elapsed = self._drain(wall_delta)
        self._step += advances * self._step_size
        return advances * self._step_size

    def __repr__(self):
        return (f"SimulationClock(step={self._step}, step_size={self._step_size}, "
                f"elapsed={self._time_elapsed:.6g}, "
                f"time_per_step={self._time_per_step})")
