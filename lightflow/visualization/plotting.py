"""
Visualization tools for binned light curves.

This module provides publication-quality plotting functions for light
curves and their sampling functions using matplotlib and seaborn.
"""

from typing import Literal, Optional, Tuple
import numpy as np
import matplotlib.pyplot as plt
import seaborn as sns
from matplotlib.figure import Figure
from matplotlib.axes import Axes

from lightflow.core.time_series import TimeSeries


# Set seaborn style for publication-quality plots
sns.set_style("whitegrid")
sns.set_context("paper")


def _step_arrays(flat_edges: np.ndarray, values: np.ndarray, t_start: float) -> Tuple[np.ndarray, np.ndarray]:
    """
    Helper to turn (left, right) edge pairs into step-plot vertices.

    Each bin contributes its two edges at its own height, so gaps between
    bins show up as straight connectors instead of being hidden.
    """
    x = np.asarray(flat_edges, dtype=float) + t_start
    y = np.repeat(np.asarray(values, dtype=float), 2)
    return x, y


def plot_light_curve(
    time_series: TimeSeries,
    mode: Literal['rates', 'counts'] = 'rates',
    show_uncertainty: bool = True,
    show_gaps: bool = True,
    fig: Optional[Figure] = None,
    ax: Optional[Axes] = None,
    label: Optional[str] = None,
    color: Optional[str] = None,
    **kwargs
) -> Tuple[Figure, Axes]:
    """
    Plot a light curve as a function of time.

    Parameters
    ----------
    time_series : TimeSeries
        Light curve to plot.
    mode : {'rates', 'counts'}, optional
        What to plot on y-axis. Default is 'rates'.
    show_uncertainty : bool, optional
        Show error bars on rates (or the matching error on counts).
        Default is True.
    show_gaps : bool, optional
        Shade the gaps between bins. Default is True.
    fig : Figure, optional
        Existing figure to plot on. If None, create new figure.
    ax : Axes, optional
        Existing axes to plot on. If None, create new axes.
    label : str, optional
        Label for legend.
    color : str, optional
        Color for the plot.
    **kwargs
        Additional keyword arguments passed to matplotlib plot.

    Returns
    -------
    fig : Figure
        Matplotlib figure.
    ax : Axes
        Matplotlib axes.

    Examples
    --------
    >>> fig, ax = plot_light_curve(ts)
    >>> plt.show()

    >>> # Counts without gap shading
    >>> fig, ax = plot_light_curve(ts, mode='counts', show_gaps=False)
    """
    # Create figure if needed
    if fig is None or ax is None:
        fig, ax = plt.subplots(figsize=(12, 5))

    errors = time_series.errors_on_rates
    if mode == 'rates':
        y = time_series.rates
        uncertainty = errors
        ylabel = r'Rate (s$^{-1}$)'
    elif mode == 'counts':
        y = time_series.bin_heights
        uncertainty = errors * time_series.bin_widths
        ylabel = 'Counts'
    else:
        raise ValueError(f"Unknown mode: {mode}")

    x, y_steps = _step_arrays(time_series.bin_edges, y, time_series.t_start)
    lines = ax.plot(x, y_steps, label=label, color=color, linewidth=1.5, **kwargs)
    line_color = lines[0].get_color()

    if show_uncertainty:
        ax.errorbar(
            time_series.bin_centres + time_series.t_start, y,
            yerr=uncertainty, fmt='none', ecolor=line_color, alpha=0.6, linewidth=1
        )

    if show_gaps and time_series.n_gaps > 0:
        gap_edges = time_series.gap_edges + time_series.t_start
        for start, stop in zip(gap_edges[0::2], gap_edges[1::2]):
            ax.axvspan(start, stop, color='grey', alpha=0.2, linewidth=0)

    # Labels
    ax.set_xlabel(f'Time ({time_series.time_unit})', fontsize=12)
    ax.set_ylabel(ylabel, fontsize=12)
    ax.grid(True, alpha=0.3)

    fig.tight_layout()

    return fig, ax


def plot_sampling_function(
    time_series: TimeSeries,
    fig: Optional[Figure] = None,
    ax: Optional[Axes] = None,
    color: Optional[str] = None,
    **kwargs
) -> Tuple[Figure, Axes]:
    """
    Plot the sampling function (1 inside bins, 0 inside gaps).

    Parameters
    ----------
    time_series : TimeSeries
        Light curve whose sampling is plotted.
    fig : Figure, optional
        Existing figure to plot on.
    ax : Axes, optional
        Existing axes to plot on.
    color : str, optional
        Color for the plot.
    **kwargs
        Additional keyword arguments passed to matplotlib plot.

    Returns
    -------
    fig : Figure
        Matplotlib figure.
    ax : Axes
        Matplotlib axes.
    """
    if fig is None or ax is None:
        fig, ax = plt.subplots(figsize=(12, 3))

    x, y = _step_arrays(
        time_series.sampling_function_edges,
        time_series.sampling_function_values,
        time_series.t_start,
    )
    ax.plot(x, y, color=color, linewidth=1.5, **kwargs)

    ax.set_ylim(-0.1, 1.1)
    ax.set_yticks([0, 1])
    ax.set_xlabel(f'Time ({time_series.time_unit})', fontsize=12)
    ax.set_ylabel('Sampling', fontsize=12)
    ax.grid(True, alpha=0.3)

    fig.tight_layout()

    return fig, ax
