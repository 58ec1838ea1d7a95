"""
Exception hierarchy for the Orrery package.

Fatal conditions propagate to the host application. MissingParentSample is
the one recoverable condition: the dynamics model catches it and substitutes
a default parent sample.
"""


class OrreryError(Exception):
    """Base class for all Orrery errors."""


class MissingCurrentPoint(OrreryError, LookupError):
    """
    A trajectory has no point at the clock's current step.

    Raised by the scheduler when it needs the boundary point of a body to
    seed an extension. The cache fell behind the clock and physics would
    desynchronize from rendering, so this is fatal.
    """
    def __init__(self, step: int, body=None):
        self.step = step
        self.body = body
        who = f"body {body!r}" if body is not None else "trajectory"
        super().__init__(
            f"No trajectory point for {who} at current step {step}. "
            f"The cache fell behind the simulation clock; advance the "
            f"clock through TrajectoryScheduler.tick so caches are extended first."
        )


class MissingParentSample(OrreryError, LookupError):
    """A parent trajectory has no sample at the requested step."""
    def __init__(self, step: int):
        self.step = step
        super().__init__(f"Parent trajectory has no sample at step {step}")


class InvalidStateDimension(OrreryError, ValueError):
    """A derivative function returns a vector of the wrong width."""
    def __init__(self, expected: int, got):
        self.expected = expected
        self.got = got
        super().__init__(
            f"Derivative function must return a vector of width {expected} "
            f"matching the state, got shape {got}"
        )


class ParentCoverageError(OrreryError, RuntimeError):
    """A child would be extended past the end of its parent's trajectory."""
