"""
Gap detection and sampling function for binned time series.

A gap is a separation between the end of one bin and the start of the next
that is larger than the floating-point resolution of the edge closing it.
The sampling function is the 0/1 step function describing which parts of
``[t_start, t_stop]`` are covered by bins.
"""

from typing import List, Optional

import numpy as np

from lightflow.core.geometry import BinGeometry
from lightflow.utils.arrays import frozen_array
from lightflow.utils.constants import GAP_SPACING_FACTOR
from lightflow.utils.diagnostics import DiagnosticLog


def gap_tolerance(edge: float) -> float:
    """
    Get the smallest separation that counts as a gap before ``edge``.

    Parameters
    ----------
    edge : float
        Left edge of the bin that follows the separation.

    Returns
    -------
    float
        Floating-point spacing at ``GAP_SPACING_FACTOR * edge``.
    """
    return float(np.spacing(GAP_SPACING_FACTOR * abs(edge)))


class GapModel:
    """
    Gaps between consecutive bins and the derived sampling function.

    Parameters
    ----------
    geometry : BinGeometry
        Validated bins.
    diagnostics : DiagnosticLog or None, optional
        Event collector. Default is a private log.

    Attributes
    ----------
    n_gaps : int
        Number of significant gaps.
    gap_edges : np.ndarray
        Flat (start, end) pairs, one per gap.
    gap_lengths : np.ndarray
        Length of each gap.
    sampling_function_edges : np.ndarray
        Flat (start, end) pairs relative to ``t_start``, one per
        sampling-function segment. Runs of touching bins form one segment.
    sampling_function_values : np.ndarray
        1.0 where a segment covers bins, 0.0 where it covers a gap. Values
        alternate, so there are ``2 * n_gaps + 1`` segments.

    Examples
    --------
    >>> geom = BinGeometry(0.0, [0, 1, 1, 2, 3, 4])
    >>> gaps = GapModel(geom)
    >>> gaps.n_gaps
    1
    >>> gaps.sampling_function_values
    array([1., 0., 1.])
    >>> gaps.sampling_function_edges
    array([0., 2., 2., 3., 3., 4.])
    """

    def __init__(self, geometry: BinGeometry, diagnostics: Optional[DiagnosticLog] = None):
        diagnostics = diagnostics if diagnostics is not None else DiagnosticLog()

        lefts = geometry._left_edges
        rights = geometry._right_edges

        gap_edges: List[float] = []
        gap_lengths: List[float] = []
        # Series never starts with a gap: edges are re-based to the first bin
        sf_edges: List[float] = [lefts[0], rights[0]]
        sf_values: List[float] = [1.0]

        for i in range(1, geometry.n_bins):
            gap = lefts[i] - rights[i - 1]
            if gap > gap_tolerance(lefts[i]):
                gap_edges.extend([rights[i - 1], lefts[i]])
                gap_lengths.append(gap)
                sf_edges.extend([rights[i - 1], lefts[i], lefts[i], rights[i]])
                sf_values.extend([0.0, 1.0])
            else:
                # Touching bins extend the current covered segment
                sf_edges[-1] = rights[i]

        self._gap_edges = frozen_array(gap_edges)
        self._gap_lengths = frozen_array(gap_lengths)
        self._sampling_function_edges = frozen_array(sf_edges)
        self._sampling_function_values = frozen_array(sf_values)

        if len(gap_lengths) > 0:
            self._sum_of_gaps = float(np.sum(self._gap_lengths))
            self._mean_gap = self._sum_of_gaps / len(gap_lengths)
            self._min_gap = float(np.min(self._gap_lengths))
            self._max_gap = float(np.max(self._gap_lengths))
            diagnostics.warning(
                'gaps_detected',
                f"There are {self.n_gaps} gaps in timeline "
                f"(total={self._sum_of_gaps}, mean={self._mean_gap}, max={self._max_gap})",
                n_gaps=self.n_gaps,
                sum_of_gaps=self._sum_of_gaps,
                gap_fraction=self._sum_of_gaps / geometry.duration,
                mean_gap=self._mean_gap,
                max_gap=self._max_gap,
            )
        else:
            self._sum_of_gaps = 0.0
            self._mean_gap = 0.0
            self._min_gap = 0.0
            self._max_gap = 0.0
            diagnostics.emit('no_gaps', "No gaps in timeline")

    @property
    def n_gaps(self) -> int:
        return len(self._gap_lengths)

    @property
    def there_are_gaps(self) -> bool:
        """Check whether at least one separation exceeds the gap tolerance."""
        return self.n_gaps > 0

    @property
    def gap_edges(self) -> np.ndarray:
        return self._gap_edges.copy()

    @property
    def gap_lengths(self) -> np.ndarray:
        return self._gap_lengths.copy()

    @property
    def sum_of_gaps(self) -> float:
        return self._sum_of_gaps

    @property
    def mean_gap(self) -> float:
        return self._mean_gap

    @property
    def min_gap(self) -> float:
        return self._min_gap

    @property
    def max_gap(self) -> float:
        return self._max_gap

    @property
    def n_sampling_function_bins(self) -> int:
        """Get the number of sampling-function segments."""
        return len(self._sampling_function_values)

    @property
    def sampling_function_edges(self) -> np.ndarray:
        """Get segment edges relative to ``t_start``, like ``bin_edges``."""
        return self._sampling_function_edges.copy()

    @property
    def sampling_function_values(self) -> np.ndarray:
        return self._sampling_function_values.copy()

    def __repr__(self) -> str:
        return f"GapModel(n_gaps={self.n_gaps}, sum_of_gaps={self._sum_of_gaps:.6g})"
