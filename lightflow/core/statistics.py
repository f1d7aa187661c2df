"""
Descriptive statistics over bin heights and rates.

All estimators are the usual unbiased sample versions and are computed over
non-NaN values only. Skewness and excess kurtosis use the bias-corrected
estimators from ``scipy.stats``.
"""

from dataclasses import dataclass
import math

import numpy as np
import numpy.typing as npt
from scipy import stats


@dataclass(frozen=True)
class MomentStatistics:
    """
    Summary of one series of values.

    Attributes
    ----------
    n : int
        Number of non-NaN values.
    sum : float
        Sum of values.
    sum_of_squares : float
        Sum of squared values.
    minimum, maximum : float
        Extremes of the values.
    mean : float
        Mean the deviations were measured from.
    variance : float
        Unbiased sample variance ``(n*S2 - S1**2) / (n*(n-1))``.
    mean_deviation : float
        ``(1/n) * sum(|x - mean|)``.
    skewness : float
        Bias-corrected sample skewness.
    kurtosis : float
        Bias-corrected sample excess kurtosis.
    """

    n: int
    sum: float
    sum_of_squares: float
    minimum: float
    maximum: float
    mean: float
    variance: float
    mean_deviation: float
    skewness: float
    kurtosis: float


def sample_variance(n: int, total: float, sum_of_squares: float) -> float:
    """
    Unbiased sample variance from running sums.

    Returns NaN when ``n < 2``.
    """
    if n < 2:
        return np.nan
    return (n * sum_of_squares - total * total) / (n * (n - 1))


def skewness_standard_error(n: int) -> float:
    """
    Standard error of the sample skewness for ``n`` values.

    ``sqrt(6n(n-1) / ((n-2)(n+1)(n+3)))``; NaN when ``n < 3``.
    """
    if n < 3:
        return np.nan
    return math.sqrt(6.0 * n * (n - 1) / ((n - 2) * (n + 1) * (n + 3)))


def kurtosis_standard_error(n: int) -> float:
    """
    Standard error of the sample excess kurtosis for ``n`` values.

    ``2 * SES * sqrt((n**2 - 1) / ((n-3)(n+5)))``; NaN when ``n < 4``.
    """
    if n < 4:
        return np.nan
    return 2.0 * skewness_standard_error(n) * math.sqrt((n * n - 1.0) / ((n - 3) * (n + 5)))


def compute_statistics(values: npt.ArrayLike, mean: float) -> MomentStatistics:
    """
    Compute moment statistics over the non-NaN entries of ``values``.

    Parameters
    ----------
    values : array-like
        Bin heights or rates; NaN entries are ignored.
    mean : float
        Mean to measure the mean deviation from. For rates this is the
        reported mean rate, which is not always the arithmetic mean.

    Returns
    -------
    MomentStatistics
        Summary with NaN for every estimator the sample size cannot support.
    """
    array = np.asarray(values, dtype=float)
    x = array[~np.isnan(array)]
    n = len(x)

    total = float(np.sum(x))
    sum_of_squares = float(np.sum(x ** 2))
    variance = sample_variance(n, total, sum_of_squares)

    if n > 0:
        minimum = float(np.min(x))
        maximum = float(np.max(x))
        mean_deviation = float(np.mean(np.abs(x - mean)))
    else:
        minimum = maximum = mean_deviation = np.nan

    # Higher moments are undefined for flat series
    has_spread = n > 1 and not np.isnan(variance) and variance > 0 and np.ptp(x) > 0
    skewness = float(stats.skew(x, bias=False)) if has_spread and n >= 3 else np.nan
    kurtosis = (
        float(stats.kurtosis(x, fisher=True, bias=False)) if has_spread and n >= 4 else np.nan
    )

    return MomentStatistics(
        n=n,
        sum=total,
        sum_of_squares=sum_of_squares,
        minimum=minimum,
        maximum=maximum,
        mean=float(mean),
        variance=float(variance),
        mean_deviation=mean_deviation,
        skewness=skewness,
        kurtosis=kurtosis,
    )
