"""
TimeSeries class for binned light curves.

This module provides the immutable TimeSeries aggregate with support for:
- Construction from counts or from rates (with optional errors)
- Gap detection and the sampling function
- NaN-aware first-to-fourth moment statistics of heights and rates
- Inverse-variance weighting when errors on rates are known
- Optional observation metadata and pointing track
- Column tables for file writers
"""

from typing import Dict, Optional, Tuple
import logging

import numpy as np
import numpy.typing as npt

from lightflow.core.gaps import GapModel
from lightflow.core.geometry import BinGeometry
from lightflow.core.intensity import IntensityModel
from lightflow.core.metadata import ObservationMetadata
from lightflow.core.pointing import PointingTrack
from lightflow.core.statistics import (
    MomentStatistics,
    compute_statistics,
    kurtosis_standard_error,
    skewness_standard_error,
)
from lightflow.core.uncertainty import ErrorModel, poisson_rate_errors
from lightflow.utils.constants import TIME_UNIT
from lightflow.utils.diagnostics import DiagnosticEvent, DiagnosticLog
from lightflow.utils.exceptions import ColumnCountMismatchError, PointingTrackError

logger = logging.getLogger(__name__)


class TimeSeries:
    """
    A binned time series (light curve).

    The TimeSeries is a histogram whose x-axis is time: each bin has a left
    and a right edge, a height (counts) and a rate (height / width). Errors
    on rates are optional; when present the series is non-Poissonian and
    the errors weight the mean rate.

    Instances are immutable. Build them with ``from_counts`` or
    ``from_rates``; every array-valued property returns a new copy.

    Parameters
    ----------
    _geometry : BinGeometry
        Internal parameter: validated bins.
    _gaps : GapModel
        Internal parameter: gaps and sampling function.
    _intensities : IntensityModel
        Internal parameter: heights and rates.
    _errors : ErrorModel or None
        Internal parameter: errors on rates, if supplied.
    _built_from : {'counts', 'rates'}
        Internal parameter: which construction path was taken.
    _metadata : ObservationMetadata or None
        Internal parameter: observation attributes.
    _pointing : PointingTrack or None
        Internal parameter: pointing extension record.
    _diagnostics : DiagnosticLog or None
        Internal parameter: construction events.

    Attributes
    ----------
    n_bins : int
        Number of bins.
    bin_centres : np.ndarray
        Bin centres relative to ``t_start``.
    bin_heights : np.ndarray
        Counts per bin.
    rates : np.ndarray
        Counts per second per bin.
    there_are_gaps : bool
        Whether the series has gaps or NaN bins.
    errors_are_set : bool
        Whether errors on rates were supplied.

    See Also
    --------
    from_counts : Create from counts per bin
    from_rates : Create from rates and optional errors

    Examples
    --------
    >>> ts = TimeSeries.from_counts(0.0, [0, 1, 1, 2, 3, 4], [10, 20, 30])
    >>> ts.n_bins
    3
    >>> ts.there_are_gaps
    True
    >>> ts.sum_of_gaps
    1.0
    >>> ts.bin_width()
    1.0
    """

    def __init__(
        self,
        _geometry: BinGeometry,
        _gaps: GapModel,
        _intensities: IntensityModel,
        _errors: Optional[ErrorModel] = None,
        _built_from: str = 'counts',
        _metadata: Optional[ObservationMetadata] = None,
        _pointing: Optional[PointingTrack] = None,
        _diagnostics: Optional[DiagnosticLog] = None,
    ):
        diagnostics = _diagnostics if _diagnostics is not None else DiagnosticLog(logger)

        if _pointing is not None:
            _pointing.check_compatible(_geometry.n_bins)

        self._geometry = _geometry
        self._gaps = _gaps
        self._intensities = _intensities
        self._errors = _errors
        self._built_from = _built_from
        self._metadata = _metadata if _metadata is not None else ObservationMetadata()
        self._pointing = _pointing

        errors_are_set = _errors is not None
        self._mean_rate = _intensities.mean_rate(errors_are_set)

        self._height_stats = compute_statistics(
            _intensities._bin_heights, _intensities.mean_bin_height
        )
        self._rate_stats = compute_statistics(_intensities._rates, self._mean_rate)

        n = _intensities.n_non_nans
        self._skewness_standard_error = skewness_standard_error(n)
        self._kurtosis_standard_error = kurtosis_standard_error(n)
        if n > 0:
            self._error_on_mean_rate = float(np.sqrt(self._rate_stats.variance / n))
        else:
            self._error_on_mean_rate = np.nan

        diagnostics.emit(
            'intensities_defined',
            f"Intensities are defined (sum of bin heights={_intensities.sum_of_bin_heights}, "
            f"mean rate={self._mean_rate}, min rate={_intensities.min_rate}, "
            f"max rate={_intensities.max_rate}, variance in rates={self._rate_stats.variance})",
            sum_of_bin_heights=_intensities.sum_of_bin_heights,
            mean_rate=self._mean_rate,
            min_rate=_intensities.min_rate,
            max_rate=_intensities.max_rate,
            variance_in_rates=self._rate_stats.variance,
        )
        self._events = diagnostics.events
        self._frozen = True

    def __setattr__(self, name, value):
        if getattr(self, '_frozen', False):
            raise AttributeError(f"TimeSeries is immutable; cannot set '{name}'")
        super().__setattr__(name, value)

    # ========================================
    # Factory Methods
    # ========================================

    @classmethod
    def from_counts(
        cls,
        t_start: float,
        flat_edges: npt.ArrayLike,
        counts: npt.ArrayLike,
        metadata: Optional[ObservationMetadata] = None,
        pointing: Optional[PointingTrack] = None,
    ) -> 'TimeSeries':
        """
        Create TimeSeries from counts per bin.

        Parameters
        ----------
        t_start : float
            Absolute start time (seconds).
        flat_edges : array-like
            Left/right edge pairs relative to ``t_start``. Shape: (2 * n_bins,)
        counts : array-like
            Counts per bin. NaN marks a missing bin. Shape: (n_bins,)
        metadata : ObservationMetadata or None, optional
            Observation attributes. Default is empty metadata.
        pointing : PointingTrack or None, optional
            Pointing extension with one pointing per bin. Default is None.

        Returns
        -------
        TimeSeries
            New time series with ``rate_i = counts_i / width_i``.

        Raises
        ------
        DimensionMismatchError
            If edges have odd length or ``len(counts) != n_bins``.
        InvalidGeometryError
            If bins have non-positive width or overlap.
        """
        diagnostics = DiagnosticLog(logger)
        geometry = BinGeometry(t_start, flat_edges, diagnostics)
        gaps = GapModel(geometry, diagnostics)
        intensities = IntensityModel.from_counts(geometry, counts, diagnostics)
        return cls(
            _geometry=geometry,
            _gaps=gaps,
            _intensities=intensities,
            _built_from='counts',
            _metadata=metadata,
            _pointing=pointing,
            _diagnostics=diagnostics,
        )

    @classmethod
    def from_rates(
        cls,
        t_start: float,
        flat_edges: npt.ArrayLike,
        rates: npt.ArrayLike,
        errors: Optional[npt.ArrayLike] = None,
        metadata: Optional[ObservationMetadata] = None,
        pointing: Optional[PointingTrack] = None,
    ) -> 'TimeSeries':
        """
        Create TimeSeries from rates per bin.

        Parameters
        ----------
        t_start : float
            Absolute start time (seconds).
        flat_edges : array-like
            Left/right edge pairs relative to ``t_start``. Shape: (2 * n_bins,)
        rates : array-like
            Counts per second per bin. NaN marks a missing bin. Shape: (n_bins,)
        errors : array-like or None, optional
            Error on each rate. If None, the series is Poissonian and no
            weighting is applied. Default is None.
        metadata : ObservationMetadata or None, optional
            Observation attributes. Default is empty metadata.
        pointing : PointingTrack or None, optional
            Pointing extension with one pointing per bin. Default is None.

        Returns
        -------
        TimeSeries
            New time series with ``counts_i = rates_i * width_i``.

        Raises
        ------
        DimensionMismatchError
            If edges have odd length, or rates or errors do not have one
            entry per bin.
        InvalidGeometryError
            If bins have non-positive width or overlap.
        """
        diagnostics = DiagnosticLog(logger)
        geometry = BinGeometry(t_start, flat_edges, diagnostics)
        gaps = GapModel(geometry, diagnostics)
        intensities = IntensityModel.from_rates(geometry, rates, diagnostics)
        error_model = None
        if errors is not None:
            error_model = ErrorModel(intensities, geometry, errors, diagnostics)
        return cls(
            _geometry=geometry,
            _gaps=gaps,
            _intensities=intensities,
            _errors=error_model,
            _built_from='rates',
            _metadata=metadata,
            _pointing=pointing,
            _diagnostics=diagnostics,
        )

    @classmethod
    def from_time_series(
        cls,
        ts: 'TimeSeries',
        metadata: Optional[ObservationMetadata] = None,
        pointing: Optional[PointingTrack] = None,
    ) -> 'TimeSeries':
        """
        Rebuild a TimeSeries through the same construction path as ``ts``.

        Parameters
        ----------
        ts : TimeSeries
            Series to copy.
        metadata : ObservationMetadata or None, optional
            Replacement metadata. None keeps the metadata of ``ts``.
        pointing : PointingTrack or None, optional
            Replacement pointing track. None keeps the track of ``ts``; use
            ``without_pointing_track`` to drop it.

        Returns
        -------
        TimeSeries
            Independent series with identical bins and intensities.
        """
        return ts._rebuild(
            metadata if metadata is not None else ts._metadata,
            pointing if pointing is not None else ts._pointing,
        )

    def _rebuild(
        self,
        metadata: ObservationMetadata,
        pointing: Optional[PointingTrack],
    ) -> 'TimeSeries':
        """Helper to rerun this series' construction path with new attachments."""
        if self._errors is not None:
            return TimeSeries.from_rates(
                self.t_start, self.bin_edges, self.rates, self.errors_on_rates,
                metadata=metadata, pointing=pointing,
            )
        if self._built_from == 'rates':
            return TimeSeries.from_rates(
                self.t_start, self.bin_edges, self.rates, metadata=metadata, pointing=pointing
            )
        return TimeSeries.from_counts(
            self.t_start, self.bin_edges, self.bin_heights, metadata=metadata, pointing=pointing
        )

    def with_metadata(self, metadata: ObservationMetadata) -> 'TimeSeries':
        """Return a new series with ``metadata`` attached."""
        return TimeSeries.from_time_series(self, metadata=metadata)

    def with_pointing_track(self, pointing: PointingTrack) -> 'TimeSeries':
        """Return a new series with the pointing extension attached."""
        return TimeSeries.from_time_series(self, pointing=pointing)

    def without_pointing_track(self) -> 'TimeSeries':
        """Return a new series with the pointing extension removed."""
        return self._rebuild(self._metadata, None)

    # ========================================
    # Bins
    # ========================================

    @property
    def n_bins(self) -> int:
        """Get number of bins."""
        return self._geometry.n_bins

    @property
    def time_unit(self) -> str:
        return TIME_UNIT

    @property
    def t_start(self) -> float:
        return self._geometry.t_start

    @property
    def t_stop(self) -> float:
        return self._geometry.t_stop

    @property
    def t_mid(self) -> float:
        return self._geometry.t_mid

    @property
    def duration(self) -> float:
        """Get time from the first to the last edge (gaps included)."""
        return self._geometry.duration

    @property
    def bin_edges(self) -> np.ndarray:
        """Get flat (left, right) edge pairs relative to ``t_start``."""
        return self._geometry.bin_edges

    @property
    def left_bin_edges(self) -> np.ndarray:
        return self._geometry.left_bin_edges

    @property
    def right_bin_edges(self) -> np.ndarray:
        return self._geometry.right_bin_edges

    @property
    def bin_centres(self) -> np.ndarray:
        return self._geometry.bin_centres

    @property
    def bin_widths(self) -> np.ndarray:
        return self._geometry.bin_widths

    @property
    def half_bin_widths(self) -> np.ndarray:
        return self._geometry.half_bin_widths

    @property
    def min_bin_width(self) -> float:
        return self._geometry.min_bin_width

    @property
    def max_bin_width(self) -> float:
        return self._geometry.max_bin_width

    @property
    def avg_bin_width(self) -> float:
        return self._geometry.avg_bin_width

    @property
    def bin_width_is_constant(self) -> bool:
        return self._geometry.bin_width_is_constant

    def bin_width(self) -> float:
        """
        Get the common bin width.

        Raises
        ------
        NotConstantError
            If the bin width is not constant. Use ``bin_widths`` instead.
        """
        return self._geometry.bin_width()

    @property
    def sum_of_bin_widths(self) -> float:
        return self._geometry.sum_of_bin_widths

    @property
    def ontime(self) -> float:
        """Get time covered by bins (sum of bin widths)."""
        return self._geometry.sum_of_bin_widths

    @property
    def livetime(self) -> float:
        """
        Get dead-time corrected time on target.

        Uses the effective pointing durations if the pointing track has
        them, otherwise the ontime.
        """
        if self._pointing is not None and self._pointing.livetime is not None:
            return self._pointing.livetime
        return self.ontime

    @property
    def exposure_on_target(self) -> float:
        """Get effective exposure: the pointing track total, otherwise the ontime."""
        if self._pointing is not None:
            return self._pointing.exposure_on_target
        return self.ontime

    @property
    def bin_centre_at_min_bin_height(self) -> float:
        return self._intensities.bin_centre_at_min_bin_height

    @property
    def bin_centre_at_max_bin_height(self) -> float:
        return self._intensities.bin_centre_at_max_bin_height

    # ========================================
    # Gaps and Sampling
    # ========================================

    @property
    def there_are_gaps(self) -> bool:
        """Check for gaps in the timeline; NaN bins count as gaps."""
        return self._gaps.there_are_gaps or self._intensities.there_are_nans

    @property
    def n_gaps(self) -> int:
        return self._gaps.n_gaps

    @property
    def gap_edges(self) -> np.ndarray:
        return self._gaps.gap_edges

    @property
    def gap_lengths(self) -> np.ndarray:
        return self._gaps.gap_lengths

    @property
    def sum_of_gaps(self) -> float:
        return self._gaps.sum_of_gaps

    @property
    def mean_gap(self) -> float:
        return self._gaps.mean_gap

    @property
    def min_gap(self) -> float:
        return self._gaps.min_gap

    @property
    def max_gap(self) -> float:
        return self._gaps.max_gap

    @property
    def n_sampling_function_bins(self) -> int:
        return self._gaps.n_sampling_function_bins

    @property
    def sampling_function_edges(self) -> np.ndarray:
        return self._gaps.sampling_function_edges

    @property
    def sampling_function_values(self) -> np.ndarray:
        return self._gaps.sampling_function_values

    # ========================================
    # Intensities
    # ========================================

    @property
    def bin_heights(self) -> np.ndarray:
        """Get counts per bin."""
        return self._intensities.bin_heights

    @property
    def rates(self) -> np.ndarray:
        """Get counts per second per bin."""
        return self._intensities.rates

    @property
    def there_are_nans(self) -> bool:
        return self._intensities.there_are_nans

    @property
    def n_nans(self) -> int:
        return self._intensities.n_nans

    @property
    def n_non_nans(self) -> int:
        return self._intensities.n_non_nans

    @property
    def errors_are_set(self) -> bool:
        return self._errors is not None

    @property
    def errors_on_rates(self) -> np.ndarray:
        """
        Get errors on rates.

        If errors were not supplied, returns ``sqrt(mean_bin_height) / width``
        for every bin.
        """
        if self._errors is not None:
            return self._errors.errors_on_rates
        return poisson_rate_errors(self._intensities, self._geometry)

    @property
    def weights_on_rates(self) -> np.ndarray:
        """Get ``1 / errors_on_rates**2``."""
        with np.errstate(divide='ignore'):
            return 1.0 / self.errors_on_rates ** 2

    @property
    def mean_subtracted_bin_heights(self) -> np.ndarray:
        return self._intensities.bin_heights - self.mean_bin_height

    @property
    def mean_subtracted_rates(self) -> np.ndarray:
        return self._intensities.rates - self._mean_rate

    # ========================================
    # Statistics on Bin Heights
    # ========================================

    @property
    def height_statistics(self) -> MomentStatistics:
        return self._height_stats

    @property
    def sum_of_bin_heights(self) -> float:
        return self._intensities.sum_of_bin_heights

    @property
    def mean_bin_height(self) -> float:
        return self._intensities.mean_bin_height

    @property
    def min_bin_height(self) -> float:
        return self._intensities.min_bin_height

    @property
    def max_bin_height(self) -> float:
        return self._intensities.max_bin_height

    @property
    def variance_in_bin_heights(self) -> float:
        return self._height_stats.variance

    @property
    def mean_deviation_in_bin_heights(self) -> float:
        return self._height_stats.mean_deviation

    @property
    def skewness_in_bin_heights(self) -> float:
        return self._height_stats.skewness

    @property
    def kurtosis_in_bin_heights(self) -> float:
        return self._height_stats.kurtosis

    @property
    def skewness_standard_error(self) -> float:
        return self._skewness_standard_error

    @property
    def kurtosis_standard_error(self) -> float:
        return self._kurtosis_standard_error

    # ========================================
    # Statistics on Rates
    # ========================================

    @property
    def rate_statistics(self) -> MomentStatistics:
        return self._rate_stats

    @property
    def sum_of_rates(self) -> float:
        return self._intensities.sum_of_rates

    @property
    def mean_rate(self) -> float:
        """
        Get the mean rate.

        Without errors: total counts over the sum of all bin widths, NaN
        bins included in the widths.
        With errors: arithmetic mean of the non-NaN rates.
        """
        return self._mean_rate

    @property
    def min_rate(self) -> float:
        return self._intensities.min_rate

    @property
    def max_rate(self) -> float:
        return self._intensities.max_rate

    @property
    def error_on_mean_rate(self) -> float:
        """Get ``sqrt(variance_in_rates / n_non_nans)``."""
        return self._error_on_mean_rate

    @property
    def weighted_mean_rate(self) -> float:
        """Get the inverse-variance weighted mean rate (``mean_rate`` without errors)."""
        if self._errors is not None:
            return self._errors.weighted_mean_rate
        return self._mean_rate

    @property
    def error_on_weighted_mean_rate(self) -> float:
        """Get the error on the weighted mean rate (``error_on_mean_rate`` without errors)."""
        if self._errors is not None:
            return self._errors.error_on_weighted_mean_rate
        return self._error_on_mean_rate

    @property
    def sum_of_weights(self) -> float:
        """Get the sum of weights on rates (NaN without errors)."""
        if self._errors is not None:
            return self._errors.sum_of_weights
        return np.nan

    @property
    def variance_in_rates(self) -> float:
        return self._rate_stats.variance

    @property
    def mean_deviation_in_rates(self) -> float:
        return self._rate_stats.mean_deviation

    @property
    def skewness_in_rates(self) -> float:
        return self._rate_stats.skewness

    @property
    def kurtosis_in_rates(self) -> float:
        return self._rate_stats.kurtosis

    # ========================================
    # Attributes and Extensions
    # ========================================

    @property
    def metadata(self) -> ObservationMetadata:
        """Get observation metadata (immutable)."""
        return self._metadata

    @property
    def pointing(self) -> Optional[PointingTrack]:
        """Get the pointing track, or None if not attached."""
        return self._pointing

    @property
    def has_pointing_track(self) -> bool:
        return self._pointing is not None

    @property
    def diagnostics(self) -> Tuple[DiagnosticEvent, ...]:
        """Get events recorded while this series was built."""
        return self._events

    # ========================================
    # Column Tables
    # ========================================

    def _append_columns(
        self,
        columns: Dict[str, np.ndarray],
        function: Optional[npt.ArrayLike],
    ) -> Dict[str, np.ndarray]:
        if self._pointing is not None:
            columns['dist_to_pointing_axis'] = self._pointing.dist_to_pointing_axis
        if function is not None:
            function_column = np.array(function, dtype=float).ravel()
            if len(function_column) != self.n_bins:
                raise ColumnCountMismatchError(
                    f"Function length ({len(function_column)}) must equal "
                    f"number of bins ({self.n_bins})"
                )
            columns['function'] = function_column
        return columns

    def counts_table(self, function: Optional[npt.ArrayLike] = None) -> Dict[str, np.ndarray]:
        """
        Get the columns of a counts table.

        Parameters
        ----------
        function : array-like or None, optional
            Extra column (e.g. a model) with one value per bin.

        Returns
        -------
        dict of str to np.ndarray
            ``bin_centres``, ``half_bin_widths``, ``counts``, then
            ``dist_to_pointing_axis`` if a pointing track is attached and
            ``function`` if given.

        Raises
        ------
        ColumnCountMismatchError
            If ``len(function) != n_bins``.
        """
        columns = {
            'bin_centres': self.bin_centres,
            'half_bin_widths': self.half_bin_widths,
            'counts': self.bin_heights,
        }
        return self._append_columns(columns, function)

    def rates_table(self, function: Optional[npt.ArrayLike] = None) -> Dict[str, np.ndarray]:
        """
        Get the columns of a rates table.

        Same as ``counts_table`` with ``rates`` and ``errors_on_rates``
        in place of ``counts``.
        """
        columns = {
            'bin_centres': self.bin_centres,
            'half_bin_widths': self.half_bin_widths,
            'rates': self.rates,
            'errors_on_rates': self.errors_on_rates,
        }
        return self._append_columns(columns, function)

    def sampling_function_table(self) -> Dict[str, np.ndarray]:
        """Get centres, half-widths and values of the sampling-function segments."""
        edges = self._gaps.sampling_function_edges
        lefts, rights = edges[0::2], edges[1::2]
        return {
            'bin_centres': (lefts + rights) / 2.0,
            'half_bin_widths': (rights - lefts) / 2.0,
            'values': self._gaps.sampling_function_values,
        }

    def all_data_table(self) -> Dict[str, np.ndarray]:
        """
        Get the rates table extended with every pointing track column.

        Raises
        ------
        PointingTrackError
            If no pointing track is attached.
        """
        if self._pointing is None:
            raise PointingTrackError("all_data_table requires a pointing track")
        columns = self.rates_table()
        columns['ras_of_pointings'] = self._pointing.ras_of_pointings
        columns['decs_of_pointings'] = self._pointing.decs_of_pointings
        columns['exposures_on_target'] = self._pointing.exposures_on_target
        durations = self._pointing.effective_pointing_durations
        if durations is not None:
            columns['effective_pointing_durations'] = durations
        return columns

    # ========================================
    # Numpy Interface
    # ========================================

    def __array__(self, dtype=None, copy=None) -> np.ndarray:
        """Numpy array interface - returns a copy of the bin heights."""
        return np.asarray(self._intensities.bin_heights, dtype=dtype)

    def __len__(self) -> int:
        """Length is number of bins."""
        return self.n_bins

    # ========================================
    # String Representation
    # ========================================

    def __repr__(self) -> str:
        """String representation."""
        kind = "weighted" if self.errors_are_set else "poissonian"
        pointing = ", pointing track" if self.has_pointing_track else ""
        return (
            f"TimeSeries(n_bins={self.n_bins}, "
            f"range=[{self.t_start:.3f}, {self.t_stop:.3f}] {TIME_UNIT}, "
            f"n_gaps={self.n_gaps}, {kind}{pointing}, "
            f"mean_rate={self._mean_rate:.4g})"
        )


def from_counts(
    t_start: float,
    flat_edges: npt.ArrayLike,
    counts: npt.ArrayLike,
    metadata: Optional[ObservationMetadata] = None,
    pointing: Optional[PointingTrack] = None,
) -> TimeSeries:
    """Create a TimeSeries from counts per bin. See ``TimeSeries.from_counts``."""
    return TimeSeries.from_counts(t_start, flat_edges, counts, metadata=metadata, pointing=pointing)


def from_rates(
    t_start: float,
    flat_edges: npt.ArrayLike,
    rates: npt.ArrayLike,
    errors: Optional[npt.ArrayLike] = None,
    metadata: Optional[ObservationMetadata] = None,
    pointing: Optional[PointingTrack] = None,
) -> TimeSeries:
    """Create a TimeSeries from rates per bin. See ``TimeSeries.from_rates``."""
    return TimeSeries.from_rates(
        t_start, flat_edges, rates, errors, metadata=metadata, pointing=pointing
    )
