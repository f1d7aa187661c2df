"""
LightFlow: A Python library for binned astronomical light curves.
"""

import logging

from lightflow.core.time_series import TimeSeries, from_counts, from_rates
from lightflow.core.metadata import ObservationMetadata
from lightflow.core.pointing import PointingTrack
from lightflow.utils.exceptions import (
    LightFlowError,
    GeometryError,
    DimensionMismatchError,
    InvalidGeometryError,
    NotConstantError,
    ColumnCountMismatchError,
    PointingTrackError,
)


logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"
__all__ = [
    "TimeSeries",
    "from_counts",
    "from_rates",
    "ObservationMetadata",
    "PointingTrack",
    "LightFlowError",
    "GeometryError",
    "DimensionMismatchError",
    "InvalidGeometryError",
    "NotConstantError",
    "ColumnCountMismatchError",
    "PointingTrackError",
]
