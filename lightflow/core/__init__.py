"""Core classes for LightFlow."""

from lightflow.core.geometry import BinGeometry
from lightflow.core.gaps import GapModel
from lightflow.core.intensity import IntensityModel
from lightflow.core.uncertainty import ErrorModel
from lightflow.core.statistics import MomentStatistics
from lightflow.core.metadata import ObservationMetadata
from lightflow.core.pointing import PointingTrack
from lightflow.core.time_series import TimeSeries, from_counts, from_rates

__all__ = [
    "BinGeometry",
    "GapModel",
    "IntensityModel",
    "ErrorModel",
    "MomentStatistics",
    "ObservationMetadata",
    "PointingTrack",
    "TimeSeries",
    "from_counts",
    "from_rates",
]
