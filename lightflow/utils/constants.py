"""
Fixed tolerance policy for LightFlow.

The same constants are used by every component so that ``there_are_gaps``
and ``bin_width_is_constant`` never disagree between code paths.
"""

# Sample variance (ddof=1) of the bin widths, last bin excluded, below which
# the binning is treated as constant.
CONSTANT_WIDTH_VARIANCE_TOLERANCE = 1e-10

# A separation between two bins is a gap when it exceeds the floating-point
# spacing of GAP_SPACING_FACTOR times the edge that closes it.
GAP_SPACING_FACTOR = 2.0

TIME_UNIT = "s"
