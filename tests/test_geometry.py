"""
Tests for BinGeometry.
"""

import numpy as np
import pytest
from lightflow.core.geometry import BinGeometry
from lightflow.utils.diagnostics import DiagnosticLog
from lightflow.utils.exceptions import (
    DimensionMismatchError,
    GeometryError,
    InvalidGeometryError,
    NotConstantError,
)


class TestGeometryCreation:
    """Test BinGeometry creation and validation."""

    def test_n_bins_is_half_edges(self, gapped_edges):
        """Test number of bins is half the number of edges."""
        geom = BinGeometry(0.0, gapped_edges)
        assert geom.n_bins == len(gapped_edges) // 2

    def test_edges_rebased_to_zero(self):
        """Test edges are shifted so the first edge is zero."""
        geom = BinGeometry(10.0, [5, 6, 6, 7])
        assert np.array_equal(geom.bin_edges, [0, 1, 1, 2])
        assert geom.t_start == 10.0

    def test_left_and_right_edges(self, gapped_edges):
        """Test splitting flat edges into left and right edges."""
        geom = BinGeometry(0.0, gapped_edges)
        assert np.array_equal(geom.left_bin_edges, [0, 1, 3])
        assert np.array_equal(geom.right_bin_edges, [1, 2, 4])

    def test_empty_edges_rejected(self):
        """Test empty edges raise DimensionMismatchError."""
        with pytest.raises(DimensionMismatchError, match="at least one"):
            BinGeometry(0.0, [])

    def test_odd_edges_rejected(self):
        """Test odd number of edges raises DimensionMismatchError."""
        with pytest.raises(DimensionMismatchError, match="must be even"):
            BinGeometry(0.0, [0, 1, 2])

    def test_zero_width_rejected(self):
        """Test zero-width bin raises InvalidGeometryError."""
        with pytest.raises(InvalidGeometryError, match="non-positive width"):
            BinGeometry(0.0, [0, 1, 1, 1])

    def test_negative_width_rejected(self):
        """Test reversed edges raise InvalidGeometryError."""
        with pytest.raises(InvalidGeometryError, match="non-positive width"):
            BinGeometry(0.0, [0, 1, 3, 2])

    def test_overlap_rejected(self):
        """Test overlapping bins raise InvalidGeometryError."""
        with pytest.raises(InvalidGeometryError, match="time-ordered"):
            BinGeometry(0.0, [0, 2, 1, 3])

    def test_non_finite_rejected(self):
        """Test infinite or NaN edges raise InvalidGeometryError."""
        with pytest.raises(InvalidGeometryError, match="finite"):
            BinGeometry(0.0, [0, 1, 1, np.inf])
        with pytest.raises(InvalidGeometryError, match="finite"):
            BinGeometry(0.0, [0, np.nan])

    def test_errors_share_base(self):
        """Test geometry errors can be caught together."""
        with pytest.raises(GeometryError):
            BinGeometry(0.0, [0, 1, 2])
        with pytest.raises(GeometryError):
            BinGeometry(0.0, [0, 2, 1, 3])


class TestGeometryProperties:
    """Test derived bin properties."""

    def test_centres_widths(self, uneven_edges):
        """Test centres, widths and half-widths."""
        geom = BinGeometry(0.0, uneven_edges)
        assert np.allclose(geom.bin_widths, [1, 2, 0.5, 3])
        assert np.allclose(geom.half_bin_widths, [0.5, 1, 0.25, 1.5])
        assert np.allclose(geom.bin_centres, [0.5, 2, 3.25, 5.5])

    def test_times(self, gapped_edges):
        """Test duration, stop and mid times."""
        geom = BinGeometry(100.0, gapped_edges)
        assert geom.duration == 4.0
        assert geom.t_stop == 104.0
        assert geom.t_mid == 102.0

    def test_width_summary(self, uneven_edges):
        """Test sum, min, max and average bin widths."""
        geom = BinGeometry(0.0, uneven_edges)
        assert geom.sum_of_bin_widths == pytest.approx(6.5)
        assert geom.min_bin_width == 0.5
        assert geom.max_bin_width == 3.0
        assert geom.avg_bin_width == pytest.approx(6.5 / 4)

    def test_properties_return_copies(self, gapped_edges):
        """Test that modifying a returned array does not change the geometry."""
        geom = BinGeometry(0.0, gapped_edges)
        widths = geom.bin_widths
        widths[0] = 99.0
        assert geom.bin_widths[0] == 1.0

    def test_internal_arrays_read_only(self, gapped_edges):
        """Test internal arrays cannot be written."""
        geom = BinGeometry(0.0, gapped_edges)
        assert not geom._bin_edges.flags.writeable
        with pytest.raises(ValueError):
            geom._bin_centres[0] = 5.0

    def test_input_not_aliased(self):
        """Test that changing the input after construction has no effect."""
        edges = np.array([0.0, 1.0, 1.0, 2.0])
        geom = BinGeometry(0.0, edges)
        edges[3] = 10.0
        assert geom.duration == 2.0


class TestConstantWidth:
    """Test constant bin width detection."""

    def test_equal_widths_constant(self, contiguous_edges):
        """Test equal widths are constant."""
        geom = BinGeometry(0.0, contiguous_edges)
        assert geom.bin_width_is_constant
        assert geom.bin_width() == 1.0

    def test_unequal_widths_not_constant(self, uneven_edges):
        """Test unequal widths raise NotConstantError on bin_width()."""
        geom = BinGeometry(0.0, uneven_edges)
        assert not geom.bin_width_is_constant
        with pytest.raises(NotConstantError):
            geom.bin_width()

    def test_truncated_last_bin_ignored(self):
        """Test a shorter last bin does not break constant width."""
        geom = BinGeometry(0.0, [0, 1, 1, 2, 2, 3, 3, 3.5])
        assert geom.bin_width_is_constant
        assert geom.bin_width() == 1.0

    def test_single_bin_constant(self):
        """Test a single bin is constant."""
        geom = BinGeometry(0.0, [0, 2.5])
        assert geom.bin_width_is_constant
        assert geom.bin_width() == 2.5

    def test_two_bins_constant(self):
        """Test two bins always count as constant (one width left to compare)."""
        geom = BinGeometry(0.0, [0, 1, 1, 4])
        assert geom.bin_width_is_constant


class TestGeometryDiagnostics:
    """Test events emitted by BinGeometry."""

    def test_geometry_defined_event(self, gapped_edges):
        """Test geometry_defined is always emitted."""
        log = DiagnosticLog()
        BinGeometry(0.0, gapped_edges, log)
        assert log.codes() == ('geometry_defined',)
        assert log.events[0].context['n_bins'] == 3

    def test_not_constant_warning(self, uneven_edges):
        """Test bin_width_not_constant is emitted as a warning."""
        log = DiagnosticLog()
        BinGeometry(0.0, uneven_edges, log)
        assert 'bin_width_not_constant' in log.codes()

    def test_repr(self, gapped_edges):
        """Test string representation."""
        assert "n_bins=3" in repr(BinGeometry(0.0, gapped_edges))
