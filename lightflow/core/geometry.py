"""
Bin geometry for binned time series.

This module provides the BinGeometry class, which turns a flat list of
left/right edge pairs into validated bins with support for:
- Re-basing edges so that the first edge is zero
- Per-bin centres, widths and half-widths
- Constant bin width detection
- Duration, start, stop and mid times
"""

from typing import Optional

import numpy as np
import numpy.typing as npt

from lightflow.utils.arrays import frozen_array
from lightflow.utils.constants import CONSTANT_WIDTH_VARIANCE_TOLERANCE
from lightflow.utils.diagnostics import DiagnosticLog
from lightflow.utils.exceptions import (
    DimensionMismatchError,
    InvalidGeometryError,
    NotConstantError,
)


class BinGeometry:
    """
    Time bins defined by pairs of edges.

    Edges are given as one flat sequence ``[l0, r0, l1, r1, ...]`` expressed
    relative to ``t_start``. They are re-based so that the first edge is 0
    before anything else is computed.

    Parameters
    ----------
    t_start : float
        Absolute start time of the first bin (seconds).
    flat_edges : array-like
        Left/right edge pairs. Length must be even and non-zero.
    diagnostics : DiagnosticLog or None, optional
        Event collector. Default is a private log.

    Attributes
    ----------
    n_bins : int
        Number of bins (``len(flat_edges) // 2``).
    bin_edges : np.ndarray
        Re-based flat edges.
    bin_width_is_constant : bool
        Whether all bins (the last one excepted) share a width.

    Raises
    ------
    DimensionMismatchError
        If ``flat_edges`` is empty or has an odd length.
    InvalidGeometryError
        If edges are not finite, a bin has zero or negative width, or two
        bins overlap.

    Examples
    --------
    >>> geom = BinGeometry(100.0, [0, 1, 1, 2, 3, 4])
    >>> geom.n_bins
    3
    >>> geom.duration
    4.0
    >>> geom.bin_width()
    1.0
    """

    def __init__(
        self,
        t_start: float,
        flat_edges: npt.ArrayLike,
        diagnostics: Optional[DiagnosticLog] = None,
    ):
        diagnostics = diagnostics if diagnostics is not None else DiagnosticLog()

        edges = np.asarray(flat_edges, dtype=float).ravel()
        self._validate_edges(edges)

        # Edges are defined wrt t_start
        edges = edges - edges[0]

        self._t_start = float(t_start)
        self._bin_edges = frozen_array(edges)
        self._left_edges = frozen_array(edges[0::2])
        self._right_edges = frozen_array(edges[1::2])

        widths = self._right_edges - self._left_edges
        self._bin_widths = frozen_array(widths)
        self._half_bin_widths = frozen_array(widths / 2.0)
        self._bin_centres = frozen_array((self._left_edges + self._right_edges) / 2.0)

        self._duration = float(edges[-1] - edges[0])
        self._t_stop = self._t_start + self._duration
        self._t_mid = (self._t_start + self._t_stop) / 2.0

        self._sum_of_bin_widths = float(np.sum(widths))
        self._min_bin_width = float(np.min(widths))
        self._max_bin_width = float(np.max(widths))
        self._avg_bin_width = self._sum_of_bin_widths / self.n_bins

        self._bin_width_is_constant = self._widths_are_constant(widths)

        diagnostics.emit(
            'geometry_defined',
            f"TimeSeries has {self.n_bins} bins "
            f"(tstart={self._t_start}, tstop={self._t_stop}, duration={self._duration})",
            n_bins=self.n_bins,
            t_start=self._t_start,
            t_stop=self._t_stop,
            duration=self._duration,
            sum_of_bin_widths=self._sum_of_bin_widths,
        )
        if not self._bin_width_is_constant:
            diagnostics.warning(
                'bin_width_not_constant',
                f"Bin width is not constant (min={self._min_bin_width}, "
                f"max={self._max_bin_width}, avg={self._avg_bin_width})",
                min_bin_width=self._min_bin_width,
                max_bin_width=self._max_bin_width,
                avg_bin_width=self._avg_bin_width,
            )

    @staticmethod
    def _validate_edges(edges: np.ndarray):
        """Validate that flat edges describe ordered, non-overlapping bins."""
        if edges.size == 0:
            raise DimensionMismatchError("Bin edges must contain at least one left/right pair")

        if edges.size % 2 != 0:
            raise DimensionMismatchError(
                f"Bin edges length ({edges.size}) must be even: one left and one right edge per bin"
            )

        if not np.all(np.isfinite(edges)):
            raise InvalidGeometryError("Bin edges must be finite")

        lefts = edges[0::2]
        rights = edges[1::2]
        bad = np.nonzero(rights <= lefts)[0]
        if bad.size > 0:
            i = int(bad[0])
            raise InvalidGeometryError(
                f"Bin {i} has non-positive width: left={lefts[i]}, right={rights[i]}"
            )

        overlaps = np.nonzero(lefts[1:] < rights[:-1])[0]
        if overlaps.size > 0:
            i = int(overlaps[0]) + 1
            raise InvalidGeometryError(
                f"Bins must be time-ordered: bin {i} starts at {lefts[i]} "
                f"before bin {i - 1} ends at {rights[i - 1]}"
            )

    @staticmethod
    def _widths_are_constant(widths: np.ndarray) -> bool:
        """Check whether all widths but the last one agree."""
        # The last bin is often truncated at the end of the observation
        w = widths[:-1]
        if w.size < 2:
            return True
        return bool(np.var(w, ddof=1) < CONSTANT_WIDTH_VARIANCE_TOLERANCE)

    # ========================================
    # Properties
    # ========================================

    @property
    def n_bins(self) -> int:
        """Get number of bins."""
        return len(self._bin_widths)

    @property
    def t_start(self) -> float:
        return self._t_start

    @property
    def t_stop(self) -> float:
        return self._t_stop

    @property
    def t_mid(self) -> float:
        return self._t_mid

    @property
    def duration(self) -> float:
        """Get time between the first and last edge."""
        return self._duration

    @property
    def bin_edges(self) -> np.ndarray:
        """Get flat (left, right) edge pairs, re-based to zero."""
        return self._bin_edges.copy()

    @property
    def left_bin_edges(self) -> np.ndarray:
        return self._left_edges.copy()

    @property
    def right_bin_edges(self) -> np.ndarray:
        return self._right_edges.copy()

    @property
    def bin_centres(self) -> np.ndarray:
        return self._bin_centres.copy()

    @property
    def bin_widths(self) -> np.ndarray:
        return self._bin_widths.copy()

    @property
    def half_bin_widths(self) -> np.ndarray:
        return self._half_bin_widths.copy()

    @property
    def sum_of_bin_widths(self) -> float:
        """Get total time covered by bins (gaps excluded)."""
        return self._sum_of_bin_widths

    @property
    def min_bin_width(self) -> float:
        return self._min_bin_width

    @property
    def max_bin_width(self) -> float:
        return self._max_bin_width

    @property
    def avg_bin_width(self) -> float:
        return self._avg_bin_width

    @property
    def bin_width_is_constant(self) -> bool:
        return self._bin_width_is_constant

    def bin_width(self) -> float:
        """
        Get the common bin width.

        Returns
        -------
        float
            Width of the first bin.

        Raises
        ------
        NotConstantError
            If the bin width is not constant. Use ``bin_widths`` instead.
        """
        if not self._bin_width_is_constant:
            raise NotConstantError("Bin width is not constant. Use bin_widths instead")
        return float(self._bin_widths[0])

    def __repr__(self) -> str:
        return (
            f"BinGeometry(n_bins={self.n_bins}, "
            f"range=[{self._t_start:.3f}, {self._t_stop:.3f}] s, "
            f"constant_width={self._bin_width_is_constant})"
        )
