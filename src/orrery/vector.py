'''Development code for an orbital trajectory caching package
3-component vector helpers'''

import numpy as np

# Alias used in annotations; every Vector3 is a float64 array of shape (3,)
Vector3 = np.ndarray


def as_vector3(value) -> Vector3:
    """
    Convert array-like input to a Vector3.

    Parameters
    ----------
    value : array-like
        Three numeric components

    Returns
    -------
    np.ndarray
        Fresh float64 array of shape (3,)

    Raises
    ------
    ValueError
        If value does not have exactly three components
    """
    arr = np.array(value, dtype=float)
    if arr.shape != (3,):
        raise ValueError(f"Vector3 requires 3 components, got shape {arr.shape}")
    return arr


def frozen_zero3() -> Vector3:
    """Read-only zero vector, safe to share between points and steps."""
    out = np.zeros(3)
    out.flags.writeable = False
    return out


def norm(a: Vector3) -> float:
    """Euclidean length."""
    # sqrt(dot) is faster than np.linalg.norm for 3-vectors in a hot loop
    return float(np.sqrt(np.dot(a, a)))
