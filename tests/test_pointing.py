"""
Tests for PointingTrack.
"""

import numpy as np
import pytest
from lightflow import PointingTrack, TimeSeries
from lightflow.utils.exceptions import DimensionMismatchError, PointingTrackError


class TestPointingTrack:
    """Test PointingTrack creation and properties."""

    def test_properties(self, three_pointings):
        """Test columns and totals."""
        assert three_pointings.n_pointings == 3
        assert np.array_equal(three_pointings.dist_to_pointing_axis, [1.0, 2.5, 4.0])
        assert three_pointings.exposure_on_target == pytest.approx(2.65)
        assert three_pointings.livetime == pytest.approx(2.82)

    def test_livetime_without_durations(self):
        """Test livetime is None without durations."""
        track = PointingTrack([1.0], [2.0], [100.0], [0.5])
        assert track.livetime is None
        assert track.effective_pointing_durations is None

    def test_properties_return_copies(self, three_pointings):
        """Test returned arrays are independent."""
        ras = three_pointings.ras_of_pointings
        ras[0] = 0.0
        assert three_pointings.ras_of_pointings[0] == 83.0

    def test_mismatched_lengths(self):
        """Test columns of different lengths are rejected."""
        with pytest.raises(PointingTrackError, match="exposures_on_target"):
            PointingTrack([1.0, 2.0], [1.0, 2.0], [100.0], [0.5, 0.6])

    def test_mismatched_durations(self):
        """Test durations must match the number of pointings."""
        with pytest.raises(PointingTrackError, match="effective_pointing_durations"):
            PointingTrack([1.0], [2.0], [100.0], [0.5], effective_pointing_durations=[1.0, 2.0])

    def test_empty(self):
        """Test an empty track is rejected."""
        with pytest.raises(PointingTrackError, match="at least one"):
            PointingTrack([], [], [], [])


class TestPointingAttachment:
    """Test attaching a track to a TimeSeries."""

    def test_check_compatible(self, three_pointings):
        """Test compatibility check against the number of bins."""
        three_pointings.check_compatible(3)
        with pytest.raises(DimensionMismatchError):
            three_pointings.check_compatible(4)

    def test_wrong_size_rejected(self, contiguous_edges, three_pointings):
        """Test a track must have one pointing per bin."""
        with pytest.raises(DimensionMismatchError, match="pointings"):
            TimeSeries.from_counts(0.0, contiguous_edges, [1, 2, 3, 4], pointing=three_pointings)

    def test_attached_track(self, gapped_series, three_pointings):
        """Test exposure and livetime come from the track."""
        ts = gapped_series.with_pointing_track(three_pointings)
        assert ts.has_pointing_track
        assert ts.pointing is three_pointings
        assert ts.exposure_on_target == pytest.approx(2.65)
        assert ts.livetime == pytest.approx(2.82)
        assert not gapped_series.has_pointing_track
