"""
Basic usage examples for LightFlow.

This script demonstrates building light curves from counts and from rates,
reading their statistics, attaching metadata and a pointing track, and
plotting them.
"""

import logging

import matplotlib.pyplot as plt
import numpy as np
from lightflow import ObservationMetadata, PointingTrack, TimeSeries
from lightflow.visualization import plot_light_curve, plot_sampling_function

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

print("=" * 60)
print("LightFlow Basic Usage Examples")
print("=" * 60)

# ============================================
# Example 1: Light Curve from Counts
# ============================================
print("\n1. Light Curve from Counts")
print("-" * 60)

# 100 bins of 10 s, with an interruption after bin 60
np.random.seed(42)
lefts = np.arange(100) * 10.0
lefts[60:] += 250.0
edges = np.column_stack([lefts, lefts + 10.0]).ravel()
counts = np.random.poisson(lam=50, size=100).astype(float)

ts = TimeSeries.from_counts(t_start=2.5e8, flat_edges=edges, counts=counts)

print(f"Created: {ts}")
print(f"Bin width: {ts.bin_width()} {ts.time_unit}")
print(f"Duration: {ts.duration} s, ontime: {ts.ontime} s")
print(f"Gaps: {ts.n_gaps} (total {ts.sum_of_gaps} s)")
print(f"Mean rate: {ts.mean_rate:.3f} +/- {ts.error_on_mean_rate:.3f} counts/s")
print(f"Skewness: {ts.skewness_in_rates:.3f} +/- {ts.skewness_standard_error:.3f}")
print(f"Kurtosis: {ts.kurtosis_in_rates:.3f} +/- {ts.kurtosis_standard_error:.3f}")

# ============================================
# Example 2: Missing Bins
# ============================================
print("\n2. Missing Bins")
print("-" * 60)

counts_with_nans = counts.copy()
counts_with_nans[[10, 11, 12]] = np.nan
ts_nan = TimeSeries.from_counts(2.5e8, edges, counts_with_nans)

print(f"NaN bins: {ts_nan.n_nans}, valid bins: {ts_nan.n_non_nans}")
print(f"Sum of counts (NaN excluded): {ts_nan.sum_of_bin_heights:.0f}")

# ============================================
# Example 3: Rates with Errors
# ============================================
print("\n3. Rates with Errors")
print("-" * 60)

rates = ts.rates
errors = np.sqrt(ts.bin_heights) / ts.bin_widths
ts_weighted = TimeSeries.from_rates(ts.t_start, ts.bin_edges, rates, errors)

print(f"Mean rate: {ts_weighted.mean_rate:.3f}")
print(f"Weighted mean rate: {ts_weighted.weighted_mean_rate:.3f} "
      f"+/- {ts_weighted.error_on_weighted_mean_rate:.3f}")

# ============================================
# Example 4: Metadata and Pointing Track
# ============================================
print("\n4. Metadata and Pointing Track")
print("-" * 60)

metadata = ObservationMetadata(
    telescope='INTEGRAL',
    instrument='ISGRI',
    target_name='Crab',
    target_ra_dec=(83.633, 22.014),
    energy_range=(20.0, 40.0),
    mjdref=51544.0,
)
track = PointingTrack(
    ras_of_pointings=np.full(100, 83.5),
    decs_of_pointings=np.full(100, 22.0),
    exposures_on_target=np.full(100, 9.0),
    dist_to_pointing_axis=np.random.uniform(0.0, 8.0, size=100),
)
ts_full = ts_weighted.with_metadata(metadata).with_pointing_track(track)

print(f"Target: {ts_full.metadata.target_name} ({ts_full.metadata.telescope})")
print(f"Exposure on target: {ts_full.exposure_on_target} s")
table = ts_full.all_data_table()
print(f"All-data table columns: {list(table)}")

# ============================================
# Example 5: Construction Diagnostics
# ============================================
print("\n5. Construction Diagnostics")
print("-" * 60)

for event in ts_nan.diagnostics:
    print(f"{event.code}: {event.message}")

# ============================================
# Example 6: Plotting
# ============================================
print("\n6. Plotting")
print("-" * 60)

fig, ax = plot_light_curve(ts_nan, mode='rates')
fig2, ax2 = plot_sampling_function(ts_nan)
plt.show()

print("\n" + "=" * 60)
print("Examples complete")
print("=" * 60)
