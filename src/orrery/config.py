"""
Global Configuration for Orrery Package
========================================

This module provides package-wide configuration settings that users can modify
to control the default simulation timestep, scheduling batch sizes, parent
sampling behavior and validation strictness.

Examples
--------
View current configuration:

>>> import orrery
>>> print(orrery.config)

Modify settings:

>>> orrery.config.BATCH_SIZE = 20000  # Larger look-ahead per extension
>>> orrery.config.VERBOSE = True  # Print integration timings

Reset to defaults:

>>> orrery.config.reset()

Temporarily modify settings:

>>> with orrery.temp_config(PARENT_SAMPLE_POLICY='interpolate'):
...     # Interpolated parent samples for this block only
...     scheduler.tick(0.016)

Notes
-----
These settings only supply defaults. Values passed explicitly to a
Scenario, Trajectory, SimulationClock or TrajectoryScheduler at
construction time take precedence and are fixed for that object, so
several scenarios with different constants can coexist.
"""

from dataclasses import dataclass
from contextlib import contextmanager


@dataclass
class OrreryConfig:
    """
    Global configuration for Orrery package.

    Attributes
    ----------
    TIME_PER_STEP : float
        Simulated time covered by one integrator step, and wall-clock time
        per clock advance.
        Default: 0.01
    STEP_SIZE : int
        Number of absolute steps the clock advances per elapsed
        TIME_PER_STEP of wall time.
        Default: 8
    BATCH_SIZE : int
        Number of integrator steps computed per trajectory extension.
        Default: 5000
    LOOKAHEAD : int
        Clock advances the scheduler keeps cached ahead of the current
        step. 1 extends a body as soon as its next step is missing.
        Default: 1
    PARENT_SAMPLE_POLICY : str
        How a missing parent sample is resolved during derivative
        evaluation: 'zero' substitutes a zero point, 'interpolate'
        interpolates between the nearest known samples.
        Default: 'zero'
    STRICT_VALIDATION : bool
        If True, validation failures raise exceptions.
        If False, validation failures issue warnings.
        Default: True
    VERBOSE : bool
        If True, trajectory extensions print their integration time.
        Default: False
    EQUALITY_RTOL : float
        Relative tolerance for TrajectoryPoint equality comparisons.
        Default: 1e-12
    EQUALITY_ATOL : float
        Absolute tolerance for TrajectoryPoint equality comparisons.
        Default: 1e-14
    """

    # Timestep and scheduling
    TIME_PER_STEP: float = 0.01
    STEP_SIZE: int = 8
    BATCH_SIZE: int = 5000
    LOOKAHEAD: int = 1

    # Dynamics
    PARENT_SAMPLE_POLICY: str = 'zero'

    # Validation behavior
    STRICT_VALIDATION: bool = True
    VERBOSE: bool = False

    # Numerical tolerance for equality comparisons
    EQUALITY_RTOL: float = 1e-12
    EQUALITY_ATOL: float = 1e-14

    @property
    def LOOKUP_SCALE(self) -> float:
        """
        Scale mapping an integrator time value onto an absolute step key.

        Parent samples are keyed by absolute step, and step ``k`` is
        integrated at time ``k * TIME_PER_STEP``, so the key for a time
        value ``t`` is ``ceil(t * LOOKUP_SCALE)``.

        Returns
        -------
        float
            Reciprocal of TIME_PER_STEP
        """
        return 1.0 / self.TIME_PER_STEP

    def reset(self):
        """
        Reset all configuration values to package defaults.

        Examples
        --------
        >>> import orrery
        >>> orrery.config.BATCH_SIZE = 10  # Modify
        >>> orrery.config.reset()  # Back to defaults
        >>> orrery.config.BATCH_SIZE
        5000
        """
        defaults = OrreryConfig()
        for key in self.__dataclass_fields__:
            setattr(self, key, getattr(defaults, key))

    def __repr__(self):
        """Return formatted string showing all configuration values."""
        lines = ["OrreryConfig:"]
        lines.append("  Timestep:")
        lines.append(f"    TIME_PER_STEP = {self.TIME_PER_STEP}")
        lines.append(f"    LOOKUP_SCALE = {self.LOOKUP_SCALE}")
        lines.append(f"    STEP_SIZE = {self.STEP_SIZE}")
        lines.append(f"    BATCH_SIZE = {self.BATCH_SIZE}")
        lines.append(f"    LOOKAHEAD = {self.LOOKAHEAD}")
        lines.append("  Dynamics:")
        lines.append(f"    PARENT_SAMPLE_POLICY = '{self.PARENT_SAMPLE_POLICY}'")
        lines.append("  Numerical Tolerances:")
        lines.append(f"    EQUALITY_RTOL = {self.EQUALITY_RTOL}")
        lines.append(f"    EQUALITY_ATOL = {self.EQUALITY_ATOL}")
        lines.append("  Behavior:")
        lines.append(f"    STRICT_VALIDATION = {self.STRICT_VALIDATION}")
        lines.append(f"    VERBOSE = {self.VERBOSE}")
        return "\n".join(lines)


# Global configuration instance
config = OrreryConfig()


@contextmanager
def temp_config(**kwargs):
    """
    Context manager for temporarily modifying configuration values.

    Configuration is automatically restored when the context exits,
    even if an exception occurs.

    Parameters
    ----------
    **kwargs
        Configuration attributes to temporarily modify.

    Examples
    --------
    >>> import orrery
    >>> with orrery.temp_config(STRICT_VALIDATION=False, VERBOSE=True):
    ...     scheduler.tick(0.5)
    >>> # Original config restored here
    >>> orrery.config.VERBOSE
    False

    Raises
    ------
    AttributeError
        If an invalid configuration attribute is specified.
    """
    old_values = {}
    for key, value in kwargs.items():
        if key not in config.__dataclass_fields__:
            raise AttributeError(
                f"OrreryConfig has no attribute '{key}'. "
                f"Valid attributes: {list(config.__dataclass_fields__.keys())}"
            )
        old_values[key] = getattr(config, key)
        setattr(config, key, value)

    try:
        yield config
    finally:
        for key, value in old_values.items():
            setattr(config, key, value)
