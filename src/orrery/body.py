'''Development code for an orbital trajectory caching package
Body dataclass definition'''

from dataclasses import dataclass
from typing import Optional


def relative_mass(m1: float, m2: float) -> float:
    """
    Reduced mass of a two-body pair: m1*m2 / (m1+m2).

    Collapses the pair into an equivalent one-body problem about a fixed
    center.
    """
    if m1 <= 0 or m2 <= 0:
        raise ValueError(f"Masses must be positive, got m1={m1}, m2={m2}")
    return (m1 * m2) / (m1 + m2)


@dataclass(frozen=True)
class Body:
    """
    Immutable parameters for a simulated body.

    Attributes
    ----------
    mass : float
        Body mass (scenario units)
    parent : int, optional
        Arena index of the body this one orbits; None orbits the
        scenario's central mass at the origin
    relative_mass : float
        Reduced mass mu used by the derivative model
    name : str, optional
        Body identifier
    """
    mass: float
    relative_mass: float
    parent: Optional[int] = None
    name: Optional[str] = None

    def __post_init__(self):
        if self.mass <= 0:
            raise ValueError(f"Mass must be positive, got {self.mass}")
        if self.relative_mass <= 0:
            raise ValueError(f"Relative mass must be positive, got {self.relative_mass}")
        if self.parent is not None and self.parent < 0:
            raise ValueError(f"Parent index must be non-negative, got {self.parent}")

    @property
    def is_root(self) -> bool:
        return self.parent is None
