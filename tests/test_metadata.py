"""
Tests for ObservationMetadata.
"""

import logging
import math

import pytest
from lightflow import ObservationMetadata


class TestMetadataValues:
    """Test reading set fields."""

    def test_text_fields(self, full_metadata):
        """Test telescope, instrument and target name."""
        assert full_metadata.telescope == 'INTEGRAL'
        assert full_metadata.instrument == 'ISGRI'
        assert full_metadata.target_name == 'Crab'

    def test_pair_fields(self, full_metadata):
        """Test pairs and their derived components."""
        assert full_metadata.target_ra == 83.633
        assert full_metadata.target_dec == 22.014
        assert full_metadata.energy_range == (20.0, 40.0)
        assert full_metadata.energy_range_min == 20.0
        assert full_metadata.energy_range_max == 40.0
        assert full_metadata.date_obs == '2003-02-01'
        assert full_metadata.date_end == '2003-02-03'
        assert full_metadata.time_obs == '12:00:00'
        assert full_metadata.time_end == '18:30:00'

    def test_time_reference(self, full_metadata):
        """Test MJD reference and time errors."""
        assert full_metadata.mjdref == 51544.0
        assert full_metadata.time_errors == (1e-5, 2e-3)

    def test_is_set_flags(self, full_metadata):
        """Test every companion flag is True when set."""
        assert full_metadata.telescope_is_set
        assert full_metadata.target_ra_dec_are_set
        assert full_metadata.energy_range_is_set
        assert full_metadata.date_obs_end_are_set
        assert full_metadata.time_obs_end_are_set
        assert full_metadata.mjdref_is_set
        assert full_metadata.rel_time_error_is_set
        assert full_metadata.abs_time_error_is_set

    def test_zero_is_set(self):
        """Test zero is distinguishable from unset."""
        meta = ObservationMetadata(mjdref=0.0)
        assert meta.mjdref_is_set
        assert meta.mjdref == 0.0


class TestUnsetFields:
    """Test sentinels for unset fields."""

    def test_sentinels(self):
        """Test empty strings and NaN for unset fields."""
        meta = ObservationMetadata()
        assert meta.telescope == ''
        assert meta.date_obs_end == ('', '')
        assert math.isnan(meta.mjdref)
        assert math.isnan(meta.target_ra)
        assert math.isnan(meta.energy_range_max)
        assert not meta.telescope_is_set
        assert not meta.energy_range_is_set

    def test_unset_read_logs_warning(self, caplog):
        """Test reading an unset field logs a warning."""
        meta = ObservationMetadata()
        with caplog.at_level(logging.WARNING, logger='lightflow.core.metadata'):
            meta.telescope
        assert "Telescope is not defined: Returning empty string" in caplog.text

    def test_set_read_does_not_log(self, caplog, full_metadata):
        """Test reading a set field is silent."""
        with caplog.at_level(logging.WARNING, logger='lightflow.core.metadata'):
            full_metadata.telescope
        assert caplog.text == ''


class TestMetadataValidation:
    """Test metadata validation."""

    def test_energy_range_order(self):
        """Test minimum energy above maximum is rejected."""
        with pytest.raises(ValueError, match="energy_range"):
            ObservationMetadata(energy_range=(50.0, 20.0))

    def test_pair_length(self):
        """Test pairs must have two elements."""
        with pytest.raises(ValueError, match="exactly 2"):
            ObservationMetadata(target_ra_dec=(1.0, 2.0, 3.0))


class TestMetadataCopies:
    """Test replace, equality and export."""

    def test_replace(self, full_metadata):
        """Test replace returns an updated copy."""
        updated = full_metadata.replace(telescope='XMM', mjdref=None)
        assert updated.telescope == 'XMM'
        assert not updated.mjdref_is_set
        assert full_metadata.telescope == 'INTEGRAL'
        assert full_metadata.mjdref_is_set

    def test_replace_unknown_field(self):
        """Test unknown field names raise TypeError."""
        with pytest.raises(TypeError, match="Unknown"):
            ObservationMetadata().replace(detector='HPGe')

    def test_as_dict_only_set_fields(self):
        """Test as_dict leaves out unset fields."""
        meta = ObservationMetadata(telescope='Swift', energy_range=[15, 150])
        assert meta.as_dict() == {'telescope': 'Swift', 'energy_range': (15.0, 150.0)}

    def test_equality_and_hash(self):
        """Test equal metadata compare and hash equal."""
        a = ObservationMetadata(telescope='Swift', mjdref=51910.0)
        b = ObservationMetadata(mjdref=51910.0, telescope='Swift')
        assert a == b
        assert hash(a) == hash(b)
        assert a != ObservationMetadata(telescope='Swift')

    def test_repr(self):
        """Test string representation."""
        assert repr(ObservationMetadata(telescope='Swift')) == "ObservationMetadata(telescope='Swift')"
