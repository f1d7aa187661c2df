"""
Tests for IntensityModel.
"""

import numpy as np
import pytest
from lightflow.core.geometry import BinGeometry
from lightflow.core.intensity import IntensityModel
from lightflow.utils.diagnostics import DiagnosticLog
from lightflow.utils.exceptions import DimensionMismatchError


class TestIntensityCreation:
    """Test defining intensities from counts or rates."""

    def test_from_counts(self, uneven_edges):
        """Test rates are counts divided by widths."""
        geom = BinGeometry(0.0, uneven_edges)
        model = IntensityModel.from_counts(geom, [1, 4, 3, 3])
        assert np.allclose(model.bin_heights, [1, 4, 3, 3])
        assert np.allclose(model.rates, [1, 2, 6, 1])

    def test_from_rates(self, uneven_edges):
        """Test counts are rates times widths."""
        geom = BinGeometry(0.0, uneven_edges)
        model = IntensityModel.from_rates(geom, [1, 2, 6, 1])
        assert np.allclose(model.bin_heights, [1, 4, 3, 3])

    def test_counts_length_mismatch(self, gapped_edges):
        """Test wrong number of counts raises DimensionMismatchError."""
        geom = BinGeometry(0.0, gapped_edges)
        with pytest.raises(DimensionMismatchError, match="counts"):
            IntensityModel.from_counts(geom, [1, 2])

    def test_rates_length_mismatch(self, gapped_edges):
        """Test wrong number of rates raises DimensionMismatchError."""
        geom = BinGeometry(0.0, gapped_edges)
        with pytest.raises(DimensionMismatchError, match="rates"):
            IntensityModel.from_rates(geom, [1, 2, 3, 4])


class TestIntensityAggregates:
    """Test sums, extremes and means."""

    def test_sums_and_extremes(self, gapped_edges, simple_counts):
        """Test sums and min/max of heights and rates."""
        model = IntensityModel.from_counts(BinGeometry(0.0, gapped_edges), simple_counts)
        assert model.sum_of_bin_heights == 60.0
        assert model.sum_of_squared_bin_heights == 1400.0
        assert model.sum_of_rates == 60.0
        assert model.min_bin_height == 10.0
        assert model.max_bin_height == 30.0
        assert model.mean_bin_height == 20.0

    def test_bin_centres_at_extremes(self, gapped_edges, simple_counts):
        """Test bin centres of the lowest and highest bins."""
        model = IntensityModel.from_counts(BinGeometry(0.0, gapped_edges), simple_counts)
        assert model.bin_centre_at_min_bin_height == 0.5
        assert model.bin_centre_at_max_bin_height == 3.5

    def test_mean_rate_without_errors(self, uneven_edges):
        """Test mean rate is total counts over covered time."""
        model = IntensityModel.from_counts(BinGeometry(0.0, uneven_edges), [1, 4, 3, 3])
        assert model.mean_rate() == pytest.approx(11 / 6.5)

    def test_mean_rate_with_errors(self, uneven_edges):
        """Test mean rate is the arithmetic mean of rates when errors are set."""
        model = IntensityModel.from_counts(BinGeometry(0.0, uneven_edges), [1, 4, 3, 3])
        assert model.mean_rate(errors_are_set=True) == pytest.approx(2.5)


class TestNaNHandling:
    """Test NaN bins are excluded from aggregates."""

    def test_nan_excluded(self, gapped_edges):
        """Test one NaN bin."""
        model = IntensityModel.from_counts(BinGeometry(0.0, gapped_edges), [10, np.nan, 30])
        assert model.n_nans == 1
        assert model.n_non_nans == 2
        assert model.there_are_nans
        assert model.sum_of_bin_heights == 40.0
        assert model.mean_bin_height == 20.0
        assert np.array_equal(model.nan_mask, [False, True, False])

    def test_mean_rate_uses_all_widths(self, uneven_edges):
        """Test the width of a NaN bin stays in the mean-rate ontime."""
        model = IntensityModel.from_counts(BinGeometry(0.0, uneven_edges), [1, np.nan, 3, 3])
        assert model.mean_rate() == pytest.approx(7 / 6.5)

    def test_all_nan(self, gapped_edges):
        """Test every aggregate is NaN when every bin is NaN."""
        model = IntensityModel.from_counts(BinGeometry(0.0, gapped_edges), [np.nan] * 3)
        assert model.n_non_nans == 0
        assert model.sum_of_bin_heights == 0.0
        assert np.isnan(model.mean_bin_height)
        assert np.isnan(model.mean_rate())
        assert np.isnan(model.min_rate)
        assert np.isnan(model.max_bin_height)
        assert np.isnan(model.bin_centre_at_min_bin_height)

    def test_nan_event(self, gapped_edges):
        """Test nan_values is emitted as a warning."""
        log = DiagnosticLog()
        IntensityModel.from_counts(BinGeometry(0.0, gapped_edges), [10, np.nan, 30], log)
        assert log.codes() == ('nan_values',)
        assert log.events[0].context['n_nans'] == 1

    def test_no_event_without_nans(self, gapped_edges, simple_counts):
        """Test nothing is emitted for clean intensities."""
        log = DiagnosticLog()
        IntensityModel.from_counts(BinGeometry(0.0, gapped_edges), simple_counts, log)
        assert len(log) == 0
