"""
Numeric shaping primitives.

Linear normalization of the bounded slider domain and the power-law
reshape that gives each axis its sensitivity curve.
"""

from typing import Union

import numpy as np

from statefield.core.dimensions import MAX_VALUE

ArrayLike = Union[float, np.ndarray]


def clamp(value: ArrayLike, lo: float, hi: float) -> ArrayLike:
    """Clamp a scalar or array to [lo, hi]."""
    if isinstance(value, np.ndarray):
        return np.clip(value, lo, hi)
    return max(lo, min(hi, float(value)))


def normalize(value: ArrayLike) -> ArrayLike:
    """
    Map the [0, 5] slider domain onto [0, 1].

    No clamping is applied here; callers supply in-range values.
    """
    if isinstance(value, np.ndarray):
        return value.astype(np.float64) / MAX_VALUE
    return float(value) / MAX_VALUE


def reshape(x: ArrayLike, power: ArrayLike) -> ArrayLike:
    """
    Clamp to [0, 1] then apply a power-law curve.

    ``power`` > 1 suppresses low values while leaving values near 1 intact.
    Arrays of exponents are applied element-wise.
    """
    if isinstance(x, np.ndarray) or isinstance(power, np.ndarray):
        return np.power(np.clip(np.asarray(x, dtype=np.float64), 0.0, 1.0), power)
    return clamp(x, 0.0, 1.0) ** float(power)
