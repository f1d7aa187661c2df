"""
Pytest configuration and fixtures for LightFlow tests.
"""

import numpy as np
import pytest
from lightflow import TimeSeries, ObservationMetadata, PointingTrack


# ============================================
# Fixtures for bin edges
# ============================================

@pytest.fixture
def contiguous_edges():
    """Fixture for four contiguous unit bins."""
    return np.array([0, 1, 1, 2, 2, 3, 3, 4], dtype=float)


@pytest.fixture
def gapped_edges():
    """Fixture for three unit bins with a one-second gap before the last."""
    return np.array([0, 1, 1, 2, 3, 4], dtype=float)


@pytest.fixture
def uneven_edges():
    """Fixture for bins of varying width."""
    return np.array([0, 1, 1, 3, 3, 3.5, 4, 7], dtype=float)


# ============================================
# Fixtures for TimeSeries
# ============================================

@pytest.fixture
def simple_counts():
    """Fixture for counts matching gapped_edges."""
    return np.array([10, 20, 30], dtype=float)


@pytest.fixture
def gapped_series(gapped_edges, simple_counts):
    """Fixture for the three-bin series with one gap."""
    return TimeSeries.from_counts(0.0, gapped_edges, simple_counts)


@pytest.fixture
def nan_series(gapped_edges):
    """Fixture for a series with one missing bin."""
    return TimeSeries.from_counts(0.0, gapped_edges, [10, np.nan, 30])


@pytest.fixture
def weighted_series():
    """Fixture for rates with errors on contiguous unit bins."""
    return TimeSeries.from_rates(0.0, [0, 1, 1, 2, 2, 3], [2, 4, 6], errors=[1, 1, 2])


@pytest.fixture
def random_series():
    """Fixture for a long Poisson light curve."""
    np.random.seed(42)
    n_bins = 100
    edges = np.repeat(np.arange(n_bins + 1, dtype=float), 2)[1:-1] * 10.0
    counts = np.random.poisson(lam=50, size=n_bins)
    return TimeSeries.from_counts(5.0e8, edges, counts)


# ============================================
# Fixtures for attributes and extensions
# ============================================

@pytest.fixture
def full_metadata():
    """Fixture for metadata with every field set."""
    return ObservationMetadata(
        telescope='INTEGRAL',
        instrument='ISGRI',
        target_name='Crab',
        target_ra_dec=(83.633, 22.014),
        energy_range=(20.0, 40.0),
        date_obs_end=('2003-02-01', '2003-02-03'),
        time_obs_end=('12:00:00', '18:30:00'),
        mjdref=51544.0,
        rel_time_error=1e-5,
        abs_time_error=2e-3,
    )


@pytest.fixture
def three_pointings():
    """Fixture for a pointing track with one pointing per bin of gapped_series."""
    return PointingTrack(
        ras_of_pointings=[83.0, 83.5, 84.0],
        decs_of_pointings=[22.0, 22.1, 22.2],
        exposures_on_target=[0.9, 0.8, 0.95],
        dist_to_pointing_axis=[1.0, 2.5, 4.0],
        effective_pointing_durations=[0.95, 0.9, 0.97],
    )
