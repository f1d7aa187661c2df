"""
Array helpers shared by the core components.
"""

import numpy as np
import numpy.typing as npt


def frozen_array(values: npt.ArrayLike) -> np.ndarray:
    """Return a private float copy of ``values`` that cannot be written to."""
    array = np.array(values, dtype=float)
    array.setflags(write=False)
    return array


def nan_safe_extrema(values: np.ndarray):
    """
    Get (min, max) of the non-NaN entries.

    Returns (nan, nan) for an empty selection instead of raising or warning.
    """
    finite = values[~np.isnan(values)]
    if finite.size == 0:
        return np.nan, np.nan
    return float(np.min(finite)), float(np.max(finite))
