"""Utility functions and classes for LightFlow."""

from lightflow.utils.exceptions import (
    LightFlowError,
    GeometryError,
    DimensionMismatchError,
    InvalidGeometryError,
    NotConstantError,
    ColumnCountMismatchError,
    PointingTrackError,
)
from lightflow.utils.diagnostics import DiagnosticEvent, DiagnosticLog

__all__ = [
    "LightFlowError",
    "GeometryError",
    "DimensionMismatchError",
    "InvalidGeometryError",
    "NotConstantError",
    "ColumnCountMismatchError",
    "PointingTrackError",
    "DiagnosticEvent",
    "DiagnosticLog",
]
