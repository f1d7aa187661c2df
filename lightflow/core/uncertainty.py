"""
Rate uncertainties and inverse-variance weighting.

When errors on rates are supplied the series is treated as non-Poissonian:
the errors give each bin a weight ``1 / error**2`` and the weighted mean rate
becomes available.
"""

from typing import Optional

import numpy as np
import numpy.typing as npt

from lightflow.core.geometry import BinGeometry
from lightflow.core.intensity import IntensityModel
from lightflow.utils.arrays import frozen_array
from lightflow.utils.diagnostics import DiagnosticLog
from lightflow.utils.exceptions import DimensionMismatchError


def poisson_rate_errors(intensities: IntensityModel, geometry: BinGeometry) -> np.ndarray:
    """
    Get fallback rate errors from the mean counts per bin.

    Parameters
    ----------
    intensities : IntensityModel
        Source of ``mean_bin_height``.
    geometry : BinGeometry
        Source of bin widths.

    Returns
    -------
    np.ndarray
        ``sqrt(mean_bin_height) / width_i`` for every bin.
    """
    with np.errstate(invalid='ignore'):
        uncertainty = np.sqrt(intensities.mean_bin_height)
    return uncertainty / geometry.bin_widths


class ErrorModel:
    """
    Per-bin rate errors, weights and the weighted mean rate.

    Parameters
    ----------
    intensities : IntensityModel
        Rates the errors apply to.
    geometry : BinGeometry
        Bins the rates are defined on.
    errors : array-like
        Error on each rate. Shape: (n_bins,)
    diagnostics : DiagnosticLog or None, optional
        Event collector. Default is a private log.

    Raises
    ------
    DimensionMismatchError
        If ``len(errors) != geometry.n_bins``.

    Notes
    -----
    A NaN error on a non-NaN rate is replaced by the Poisson-like fallback
    ``sqrt(mean_bin_height) / width_i`` and reported as an
    ``error_substituted`` event. A NaN error on a NaN rate stays NaN.

    Examples
    --------
    >>> geom = BinGeometry(0.0, [0, 1, 1, 2, 2, 3])
    >>> rates = IntensityModel.from_rates(geom, [2, 4, 6])
    >>> model = ErrorModel(rates, geom, [1, 1, 2])
    >>> round(model.weighted_mean_rate, 4)
    3.3333
    """

    def __init__(
        self,
        intensities: IntensityModel,
        geometry: BinGeometry,
        errors: npt.ArrayLike,
        diagnostics: Optional[DiagnosticLog] = None,
    ):
        diagnostics = diagnostics if diagnostics is not None else DiagnosticLog()

        errors_array = np.array(errors, dtype=float).ravel()
        if len(errors_array) != geometry.n_bins:
            raise DimensionMismatchError(
                f"Length of errors ({len(errors_array)}) must equal number of bins ({geometry.n_bins})"
            )

        rates = intensities._rates
        missing = np.isnan(errors_array) & ~np.isnan(rates)
        if np.any(missing):
            fallback = poisson_rate_errors(intensities, geometry)
            errors_array[missing] = fallback[missing]
            diagnostics.warning(
                'error_substituted',
                f"There are {int(np.count_nonzero(missing))} NaN values in errors whose "
                f"corresponding rate is not NaN. Setting error from mean counts per bin",
                indices=np.nonzero(missing)[0].tolist(),
            )

        with np.errstate(divide='ignore'):
            weights = 1.0 / errors_array ** 2

        self._errors_on_rates = frozen_array(errors_array)
        self._weights_on_rates = frozen_array(weights)

        valid = ~intensities._nan_mask & ~np.isnan(weights)
        self._sum_of_weights = float(np.sum(weights[valid]))
        with np.errstate(invalid='ignore', divide='ignore'):
            self._weighted_mean_rate = float(
                np.sum(rates[valid] * weights[valid]) / self._sum_of_weights
            )
            self._error_on_weighted_mean_rate = float(1.0 / np.sqrt(self._sum_of_weights))

    @property
    def errors_on_rates(self) -> np.ndarray:
        return self._errors_on_rates.copy()

    @property
    def weights_on_rates(self) -> np.ndarray:
        return self._weights_on_rates.copy()

    @property
    def sum_of_weights(self) -> float:
        return self._sum_of_weights

    @property
    def weighted_mean_rate(self) -> float:
        """Get the inverse-variance weighted mean rate."""
        return self._weighted_mean_rate

    @property
    def error_on_weighted_mean_rate(self) -> float:
        """Get ``1 / sqrt(sum_of_weights)``."""
        return self._error_on_weighted_mean_rate

    def __repr__(self) -> str:
        return (
            f"ErrorModel(n_bins={len(self._errors_on_rates)}, "
            f"weighted_mean_rate={self._weighted_mean_rate:.6g})"
        )
