"""
Batch timing and soft validation for trajectory extensions.
"""

from time import perf_counter
import warnings
from typing import Optional, Type
from .config import config


class Timer:
    """
    Wall-clock timer for one integration batch.

    The duration is kept on ``elapsed`` after the block exits, whether or not
    it is printed, so the trajectory can hand it on to the scheduler's
    extension log. When ``steps`` is given the printed line also reports the
    integration rate.

    Examples
    --------
    >>> with Timer("Integrating 5000 steps for 'planet'", steps=5000,
    ...            verbose=True) as t:
    ...     traj.calculate(start, env, 5000)
    Integrating 5000 steps for 'planet': 0.812345 s (6155 steps/s)
    >>> t.elapsed
    0.812345...
    """
    def __init__(self, label: str, steps: Optional[int] = None,
                 verbose: bool = False):
        self.label = label
        self.steps = steps
        self.verbose = verbose
        self.elapsed: Optional[float] = None

    def __enter__(self):
        self._start = perf_counter()
        return self

    def __exit__(self, *args):
        self.elapsed = perf_counter() - self._start
        if self.verbose:
            print(self.report())

    def report(self) -> str:
        """One-line summary of the last measurement."""
        line = f"{self.label}: {self.elapsed:.6f} s"
        if self.steps and self.elapsed > 0:
            line += f" ({self.steps / self.elapsed:.0f} steps/s)"
        return line


def validation_error(message: str, error_class: Type[Exception] = ValueError):
    """
    Fail a soft check according to config.STRICT_VALIDATION.

    Used where continuing is still well defined, for example a child
    extension running past its parent's cache, which then falls back to the
    missing parent sample policy.

    Parameters
    ----------
    message : str
        Description of the failed check
    error_class : Type[Exception], optional
        Raised when STRICT_VALIDATION is True (default: ValueError)

    Warns
    -----
    UserWarning
        When STRICT_VALIDATION is False; execution then continues
    """
    if config.STRICT_VALIDATION:
        raise error_class(message)
    warnings.warn(message, UserWarning, stacklevel=3)
