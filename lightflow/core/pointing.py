"""
Pointing track extension for coded-mask light curves.

A coded-mask light curve has one bin per pointing. Besides the usual
bins it carries the pointing direction, the exposure on target and the
angular distance of the target from the pointing axis. The track is a
separate record attached to a TimeSeries; the TimeSeries itself does
not change type.
"""

from typing import Optional

import numpy as np
import numpy.typing as npt

from lightflow.utils.arrays import frozen_array
from lightflow.utils.exceptions import DimensionMismatchError, PointingTrackError


class PointingTrack:
    """
    Per-pointing attitude and exposure information.

    Parameters
    ----------
    ras_of_pointings : array-like
        Right ascension of each pointing axis (degrees).
    decs_of_pointings : array-like
        Declination of each pointing axis (degrees).
    exposures_on_target : array-like
        Effective exposure on the target for each pointing (seconds).
    dist_to_pointing_axis : array-like
        Angular distance of the target from each pointing axis (degrees).
    effective_pointing_durations : array-like or None, optional
        Dead-time corrected duration of each pointing (seconds). If None,
        the livetime of the series falls back to its ontime.

    Raises
    ------
    PointingTrackError
        If the arrays have different lengths or are empty.

    Examples
    --------
    >>> track = PointingTrack(
    ...     ras_of_pointings=[83.6, 83.9],
    ...     decs_of_pointings=[22.0, 22.3],
    ...     exposures_on_target=[1800.0, 1750.0],
    ...     dist_to_pointing_axis=[1.2, 3.4],
    ... )
    >>> track.n_pointings
    2
    >>> track.exposure_on_target
    3550.0
    """

    def __init__(
        self,
        ras_of_pointings: npt.ArrayLike,
        decs_of_pointings: npt.ArrayLike,
        exposures_on_target: npt.ArrayLike,
        dist_to_pointing_axis: npt.ArrayLike,
        effective_pointing_durations: Optional[npt.ArrayLike] = None,
    ):
        self._ras = frozen_array(np.ravel(ras_of_pointings))
        self._decs = frozen_array(np.ravel(decs_of_pointings))
        self._exposures = frozen_array(np.ravel(exposures_on_target))
        self._dist_to_axis = frozen_array(np.ravel(dist_to_pointing_axis))
        if effective_pointing_durations is not None:
            self._durations = frozen_array(np.ravel(effective_pointing_durations))
        else:
            self._durations = None
        self._validate()

    def _validate(self):
        """Validate that every column has one entry per pointing."""
        n = len(self._ras)
        if n == 0:
            raise PointingTrackError("Pointing track must contain at least one pointing")

        columns = {
            'decs_of_pointings': self._decs,
            'exposures_on_target': self._exposures,
            'dist_to_pointing_axis': self._dist_to_axis,
        }
        if self._durations is not None:
            columns['effective_pointing_durations'] = self._durations

        for name, column in columns.items():
            if len(column) != n:
                raise PointingTrackError(
                    f"Length of {name} ({len(column)}) must match "
                    f"number of pointings ({n})"
                )

    def check_compatible(self, n_bins: int):
        """
        Check that the track has one pointing per bin.

        Raises
        ------
        DimensionMismatchError
            If ``n_pointings != n_bins``.
        """
        if self.n_pointings != n_bins:
            raise DimensionMismatchError(
                f"Pointing track has {self.n_pointings} pointings but "
                f"time series has {n_bins} bins"
            )

    @property
    def n_pointings(self) -> int:
        return len(self._ras)

    @property
    def ras_of_pointings(self) -> np.ndarray:
        return self._ras.copy()

    @property
    def decs_of_pointings(self) -> np.ndarray:
        return self._decs.copy()

    @property
    def exposures_on_target(self) -> np.ndarray:
        return self._exposures.copy()

    @property
    def dist_to_pointing_axis(self) -> np.ndarray:
        return self._dist_to_axis.copy()

    @property
    def effective_pointing_durations(self) -> Optional[np.ndarray]:
        """Get dead-time corrected durations, or None if not provided."""
        if self._durations is None:
            return None
        return self._durations.copy()

    @property
    def exposure_on_target(self) -> float:
        """Get total exposure on target (seconds)."""
        return float(np.nansum(self._exposures))

    @property
    def livetime(self) -> Optional[float]:
        """Get total dead-time corrected duration, or None if durations are unknown."""
        if self._durations is None:
            return None
        return float(np.nansum(self._durations))

    def __repr__(self) -> str:
        return (
            f"PointingTrack(n_pointings={self.n_pointings}, "
            f"exposure_on_target={self.exposure_on_target:.6g})"
        )
