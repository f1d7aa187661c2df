"""
Bin heights and rates for binned time series.

Heights are counts per bin; rates are heights divided by bin widths. One is
always derived from the other. NaN bins are legitimate: they are excluded
from every aggregate and counted in ``n_nans``.
"""

from typing import Optional

import numpy as np
import numpy.typing as npt

from lightflow.core.geometry import BinGeometry
from lightflow.utils.arrays import frozen_array, nan_safe_extrema
from lightflow.utils.diagnostics import DiagnosticLog
from lightflow.utils.exceptions import DimensionMismatchError


def _ratio(numerator: float, denominator: float) -> float:
    """Divide, returning NaN instead of raising on an empty denominator."""
    if denominator == 0:
        return np.nan
    return numerator / denominator


class IntensityModel:
    """
    Per-bin heights and rates with first-moment aggregates.

    Use the ``from_counts`` or ``from_rates`` constructors; they are
    mutually exclusive ways of defining the same quantities.

    Parameters
    ----------
    geometry : BinGeometry
        Validated bins.
    heights : np.ndarray
        Counts per bin.
    rates : np.ndarray
        Counts per second per bin.
    diagnostics : DiagnosticLog or None, optional
        Event collector. Default is a private log.

    Attributes
    ----------
    n_nans : int
        Number of bins whose height or rate is NaN.
    n_non_nans : int
        Number of bins entering the aggregates.
    there_are_nans : bool
        Whether any bin is NaN.
    """

    def __init__(
        self,
        geometry: BinGeometry,
        heights: np.ndarray,
        rates: np.ndarray,
        diagnostics: Optional[DiagnosticLog] = None,
    ):
        diagnostics = diagnostics if diagnostics is not None else DiagnosticLog()

        self._bin_heights = frozen_array(heights)
        self._rates = frozen_array(rates)

        nan_mask = np.isnan(self._bin_heights) | np.isnan(self._rates)
        nan_mask.setflags(write=False)
        self._nan_mask = nan_mask
        valid = ~nan_mask

        valid_heights = self._bin_heights[valid]
        valid_rates = self._rates[valid]

        self._n_nans = int(np.count_nonzero(nan_mask))
        self._n_non_nans = int(np.count_nonzero(valid))

        self._sum_of_bin_heights = float(np.sum(valid_heights))
        self._sum_of_squared_bin_heights = float(np.sum(valid_heights ** 2))
        self._sum_of_rates = float(np.sum(valid_rates))
        self._sum_of_squared_rates = float(np.sum(valid_rates ** 2))
        self._sum_of_bin_widths = geometry.sum_of_bin_widths

        self._min_bin_height, self._max_bin_height = nan_safe_extrema(self._bin_heights)
        self._min_rate, self._max_rate = nan_safe_extrema(self._rates)

        self._mean_bin_height = _ratio(self._sum_of_bin_heights, self._n_non_nans)

        if self._n_non_nans > 0:
            heights_for_search = np.where(valid, self._bin_heights, np.nan)
            self._bin_centre_at_min_bin_height = float(
                geometry._bin_centres[np.nanargmin(heights_for_search)]
            )
            self._bin_centre_at_max_bin_height = float(
                geometry._bin_centres[np.nanargmax(heights_for_search)]
            )
        else:
            self._bin_centre_at_min_bin_height = np.nan
            self._bin_centre_at_max_bin_height = np.nan

        if self._n_nans > 0:
            diagnostics.warning(
                'nan_values',
                f"There are {self._n_nans} NaN values in the intensities; "
                f"excluding them from calculations",
                n_nans=self._n_nans,
                n_non_nans=self._n_non_nans,
            )

    @classmethod
    def from_counts(
        cls,
        geometry: BinGeometry,
        counts: npt.ArrayLike,
        diagnostics: Optional[DiagnosticLog] = None,
    ) -> 'IntensityModel':
        """
        Define intensities from counts per bin.

        Parameters
        ----------
        geometry : BinGeometry
            Validated bins.
        counts : array-like
            Counts per bin. Shape: (n_bins,)
        diagnostics : DiagnosticLog or None, optional
            Event collector.

        Returns
        -------
        IntensityModel
            Model with ``rate_i = counts_i / width_i``.

        Raises
        ------
        DimensionMismatchError
            If ``len(counts) != geometry.n_bins``.
        """
        heights = cls._as_bin_array(counts, geometry, 'counts')
        return cls(geometry, heights, heights / geometry._bin_widths, diagnostics)

    @classmethod
    def from_rates(
        cls,
        geometry: BinGeometry,
        rates: npt.ArrayLike,
        diagnostics: Optional[DiagnosticLog] = None,
    ) -> 'IntensityModel':
        """
        Define intensities from rates per bin.

        Parameters
        ----------
        geometry : BinGeometry
            Validated bins.
        rates : array-like
            Rates (counts per second) per bin. Shape: (n_bins,)
        diagnostics : DiagnosticLog or None, optional
            Event collector.

        Returns
        -------
        IntensityModel
            Model with ``counts_i = rates_i * width_i``.

        Raises
        ------
        DimensionMismatchError
            If ``len(rates) != geometry.n_bins``.
        """
        rates_array = cls._as_bin_array(rates, geometry, 'rates')
        return cls(geometry, rates_array * geometry._bin_widths, rates_array, diagnostics)

    @staticmethod
    def _as_bin_array(values: npt.ArrayLike, geometry: BinGeometry, name: str) -> np.ndarray:
        array = np.asarray(values, dtype=float).ravel()
        if len(array) != geometry.n_bins:
            raise DimensionMismatchError(
                f"Length of {name} ({len(array)}) must equal number of bins ({geometry.n_bins})"
            )
        return array

    # ========================================
    # Properties
    # ========================================

    @property
    def bin_heights(self) -> np.ndarray:
        return self._bin_heights.copy()

    @property
    def rates(self) -> np.ndarray:
        return self._rates.copy()

    @property
    def nan_mask(self) -> np.ndarray:
        """Get boolean mask, True where a bin is excluded from aggregates."""
        return self._nan_mask.copy()

    @property
    def n_nans(self) -> int:
        return self._n_nans

    @property
    def n_non_nans(self) -> int:
        return self._n_non_nans

    @property
    def there_are_nans(self) -> bool:
        return self._n_nans > 0

    @property
    def sum_of_bin_heights(self) -> float:
        return self._sum_of_bin_heights

    @property
    def sum_of_squared_bin_heights(self) -> float:
        return self._sum_of_squared_bin_heights

    @property
    def sum_of_rates(self) -> float:
        return self._sum_of_rates

    @property
    def sum_of_squared_rates(self) -> float:
        return self._sum_of_squared_rates

    @property
    def min_bin_height(self) -> float:
        return self._min_bin_height

    @property
    def max_bin_height(self) -> float:
        return self._max_bin_height

    @property
    def min_rate(self) -> float:
        return self._min_rate

    @property
    def max_rate(self) -> float:
        return self._max_rate

    @property
    def mean_bin_height(self) -> float:
        """Get mean counts per non-NaN bin."""
        return self._mean_bin_height

    @property
    def bin_centre_at_min_bin_height(self) -> float:
        return self._bin_centre_at_min_bin_height

    @property
    def bin_centre_at_max_bin_height(self) -> float:
        return self._bin_centre_at_max_bin_height

    def mean_rate(self, errors_are_set: bool = False) -> float:
        """
        Get the mean rate.

        Parameters
        ----------
        errors_are_set : bool, optional
            Whether per-bin rate uncertainties are attached. Default is False.

        Returns
        -------
        float
            Without errors: total counts over the sum of all bin widths.
            With errors: arithmetic mean of the non-NaN rates. NaN when
            every bin is NaN.
        """
        if self._n_non_nans == 0:
            return np.nan
        if errors_are_set:
            return self._sum_of_rates / self._n_non_nans
        return _ratio(self._sum_of_bin_heights, self._sum_of_bin_widths)

    def __repr__(self) -> str:
        return (
            f"IntensityModel(n_bins={len(self._bin_heights)}, n_nans={self._n_nans}, "
            f"sum_of_bin_heights={self._sum_of_bin_heights:.6g})"
        )
