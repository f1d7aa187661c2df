"""
Visualization tools for light curves.

Publication-quality plotting functions using matplotlib and seaborn.
"""

from lightflow.visualization.plotting import (
    plot_light_curve,
    plot_sampling_function,
)

__all__ = [
    'plot_light_curve',
    'plot_sampling_function',
]
