"""
Custom exceptions for LightFlow.
"""


class LightFlowError(Exception):
    """Base exception for all LightFlow errors."""
    pass


class GeometryError(LightFlowError):
    """Exception raised when bin edges cannot describe a valid time axis."""
    pass


class DimensionMismatchError(GeometryError):
    """Exception raised when edge, count, rate or error array lengths disagree."""
    pass


class InvalidGeometryError(GeometryError):
    """Exception raised for non-monotonic, overlapping or zero-width bins."""
    pass


class NotConstantError(LightFlowError):
    """Exception raised when a single bin width is requested but widths vary."""
    pass


class ColumnCountMismatchError(LightFlowError):
    """Exception raised when an extra table column does not match the number of bins."""
    pass


class PointingTrackError(LightFlowError):
    """Exception raised for errors in PointingTrack construction or use."""
    pass
