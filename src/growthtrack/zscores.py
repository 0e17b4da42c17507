"""
Percentile Estimation for Infant Growth Measurements

This module converts weight, length/height and head circumference values to
age- and sex-specific percentiles against the WHO LMS reference series.

Pipeline per measurement:
1. Interpolate L, M, S linearly between the two reference points that
   bracket the age. Ages outside the table reuse the nearest boundary point
   (no extrapolation beyond the validated 0-24 month range).
2. Z-score via the LMS (Box-Cox normal) transformation.
3. Percentile via the Abramowitz & Stegun normal CDF approximation,
   clamped to [0.1, 99.9] and rounded to one decimal.

Any failure along the way (empty series, non-positive value, malformed
reference data) falls back to the median percentile, 50. Callers that need to
tell a true median from a fallback use estimate_percentile(), which reports
the fallback explicitly.

References:
- Cole, T.J. (1990). "The LMS method for constructing normalized growth standards."
  European Journal of Clinical Nutrition, 44(1), 45-60.
- Abramowitz, M. & Stegun, I.A. (1964). Handbook of Mathematical Functions, 26.2.17.
"""

from typing import Any, NamedTuple, Optional, Tuple
import logging
import math

import numpy as np
from numba import jit
from scipy import stats

from .config import (
    FALLBACK_PERCENTILE,
    L_ZERO_THRESHOLD,
    PERCENTILE_MAX,
    PERCENTILE_MIN,
)
from .reference import as_series, load_reference_table
from .units import round_half_up


@jit(nopython=True, cache=True)
def lms_zscore(
    X: np.ndarray, L: np.ndarray, M: np.ndarray, S: np.ndarray
) -> np.ndarray:
    """
    Calculate LMS z-scores over 1-D arrays.

    For L ≠ 0: z = ((X/M)^L - 1) / (L * S)
    For L ≈ 0: z = ln(X/M) / S

    Entries with non-finite inputs, X <= 0, M <= 0 or S <= 0 are outside the
    transform's domain and come back as NaN.

    Args:
        X: Observed values (kg/cm)
        L: Box-Cox power
        M: Median at age/sex
        S: Coefficient of variation at age/sex

    Returns:
        Z-scores (0 at the median)
    """
    n = X.shape[0]
    z = np.full(n, np.nan)
    for i in range(n):
        x = X[i]
        lam = L[i]
        mu = M[i]
        sigma = S[i]
        if not (
            math.isfinite(x)
            and math.isfinite(lam)
            and math.isfinite(mu)
            and math.isfinite(sigma)
        ):
            continue
        if x <= 0.0 or mu <= 0.0 or sigma <= 0.0:
            continue
        if abs(lam) < L_ZERO_THRESHOLD:
            z[i] = math.log(x / mu) / sigma
        else:
            z[i] = ((x / mu) ** lam - 1.0) / (lam * sigma)
    return z


@jit(nopython=True, cache=True)
def normal_cdf(z: float) -> float:
    """
    Standard normal CDF, Abramowitz & Stegun approximation (|error| < 7.5e-8).

    Fixed-coefficient rational polynomial; avoids a statistics dependency on
    the hot path.
    """
    t = 1.0 / (1.0 + 0.2316419 * abs(z))
    d = 0.3989423 * math.exp(-z * z / 2.0)
    prob = (
        d
        * t
        * (0.3193815 + t * (-0.3565638 + t * (1.781478 + t * (-1.821256 + t * 1.330274))))
    )
    if z > 0.0:
        prob = 1.0 - prob
    return prob


@jit(nopython=True, cache=True)
def normal_cdf_array(z: np.ndarray) -> np.ndarray:
    """Vectorized normal_cdf over a 1-D array."""
    out = np.empty(z.shape[0], dtype=np.float64)
    for i in range(z.shape[0]):
        out[i] = normal_cdf(z[i])
    return out


def zscore_to_percentile(z: float) -> float:
    """Convert a z-score to a percentile clamped to [0.1, 99.9], one decimal."""
    percentile = normal_cdf(float(z)) * 100.0
    return round_half_up(min(PERCENTILE_MAX, max(PERCENTILE_MIN, percentile)), 1)


def interpolate_lms(age_in_days: float, series: Any) -> Tuple[float, float, float]:
    """
    Interpolate L, M, S at an age from a reference series.

    Scans for the first adjacent pair of points bracketing the age and
    interpolates each parameter linearly. Ages at or below the first point, or
    at or above the last, use that boundary point unchanged.

    Args:
        age_in_days: Age at measurement (days); may be negative
        series: Reference series (see reference.as_series)

    Returns:
        Tuple of (L, M, S)

    Raises:
        ValueError: If the series is empty.
    """
    series = as_series(series)
    n = series.shape[0]
    if n == 0:
        raise ValueError("Reference series must not be empty")
    ages = series["age_in_days"]

    lower, upper = 0, n - 1
    for i in range(n - 1):
        if ages[i] <= age_in_days <= ages[i + 1]:
            lower, upper = i, i + 1
            break

    if age_in_days <= ages[0]:
        lower = upper = 0
    elif age_in_days >= ages[-1]:
        lower = upper = n - 1

    low, high = series[lower], series[upper]
    if lower == upper:
        return float(low["L"]), float(low["M"]), float(low["S"])

    ratio = (age_in_days - low["age_in_days"]) / (high["age_in_days"] - low["age_in_days"])
    L = low["L"] + ratio * (high["L"] - low["L"])
    M = low["M"] + ratio * (high["M"] - low["M"])
    S = low["S"] + ratio * (high["S"] - low["S"])
    return float(L), float(M), float(S)


def interpolate_lms_arrays(
    ages_in_days: np.ndarray, series: Any
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Vectorized interpolation of L, M, S at many ages.

    np.interp holds the boundary values flat outside the table, which is the
    same clamping rule as interpolate_lms().

    Raises:
        ValueError: If the series is empty.
    """
    series = as_series(series)
    if series.shape[0] == 0:
        raise ValueError("Reference series must not be empty")
    ages = np.asarray(ages_in_days, dtype=np.float64)
    ref_ages = series["age_in_days"]
    return (
        np.interp(ages, ref_ages, series["L"]),
        np.interp(ages, ref_ages, series["M"]),
        np.interp(ages, ref_ages, series["S"]),
    )


class PercentileResult(NamedTuple):
    """Percentile with its z-score, or the median fallback and why it was used."""

    percentile: float
    zscore: Optional[float] = None
    fallback: bool = False
    reason: Optional[str] = None


def _fallback(reason: str, measurement_type: Any, sex: Any) -> PercentileResult:
    logging.warning(
        f"Percentile for {sex}/{measurement_type} fell back to the median: {reason}"
    )
    return PercentileResult(FALLBACK_PERCENTILE, None, True, reason)


def estimate_percentile(
    value: float,
    age_in_days: float,
    measurement_type: str,
    sex: str,
    series: Any = None,
) -> PercentileResult:
    """
    Estimate the growth percentile of a measurement, reporting fallbacks.

    Never raises: every failure is reported as a fallback result carrying the
    median percentile and a reason.

    Args:
        value: Measurement in kg (weight) or cm (height, head)
        age_in_days: Age at measurement (days)
        measurement_type: 'weight', 'height' or 'head'
        sex: 'male' or 'female'
        series: Reference series to use; None selects the packaged WHO series
            for (sex, measurement_type)

    Returns:
        PercentileResult
    """
    try:
        if series is None:
            series = load_reference_table().series(sex, measurement_type)
        series = as_series(series)
        if series.shape[0] == 0:
            return _fallback("empty reference series", measurement_type, sex)

        value = float(value)
        if not math.isfinite(value) or value <= 0:
            return _fallback(
                f"value {value!r} is outside the LMS domain", measurement_type, sex
            )

        L, M, S = interpolate_lms(float(age_in_days), series)
        z = float(
            lms_zscore(
                np.array([value]), np.array([L]), np.array([M]), np.array([S])
            )[0]
        )
        if not math.isfinite(z):
            return _fallback(
                f"z-score undefined for L={L}, M={M}, S={S}", measurement_type, sex
            )
        return PercentileResult(zscore_to_percentile(z), z)

    except Exception as e:
        return _fallback(f"{type(e).__name__}: {e}", measurement_type, sex)


def calculate_percentile(
    value: float,
    age_in_days: float,
    measurement_type: str,
    sex: str,
    series: Any = None,
) -> float:
    """
    Calculate the growth percentile of a measurement.

    Returns a value in [0.1, 99.9], or exactly 50.0 when the computation
    fails (see estimate_percentile for the reason).
    """
    return estimate_percentile(value, age_in_days, measurement_type, sex, series).percentile


def calculate_percentiles(
    values: np.ndarray, ages_in_days: np.ndarray, series: Any
) -> np.ndarray:
    """
    Vectorized percentile calculation for many measurements of one series.

    Entries whose z-score is undefined (NaN value or age, value <= 0) get the
    median fallback, as does every entry when the series is empty.

    Args:
        values: Measurements in kg/cm
        ages_in_days: Ages at measurement (days), same length as values
        series: Reference series for one sex and measurement type

    Returns:
        Percentiles in [0.1, 99.9], one decimal

    Raises:
        ValueError: If values and ages_in_days differ in length.
    """
    values = np.asarray(values, dtype=np.float64).ravel()
    ages = np.asarray(ages_in_days, dtype=np.float64).ravel()
    if values.shape != ages.shape:
        raise ValueError("values and ages_in_days must have the same length")

    percentiles = np.full(values.shape[0], FALLBACK_PERCENTILE, dtype=np.float64)
    if values.size == 0:
        return percentiles

    series = as_series(series)
    if series.shape[0] == 0:
        logging.warning("Empty reference series - all percentiles set to the median")
        return percentiles

    L, M, S = interpolate_lms_arrays(ages, series)
    z = lms_zscore(values, L, M, S)
    valid = np.isfinite(z)
    if not np.all(valid):
        logging.warning(
            f"{int(np.sum(~valid))} measurement(s) outside the LMS domain - percentile set to the median"
        )

    pct = np.clip(normal_cdf_array(z[valid]) * 100.0, PERCENTILE_MIN, PERCENTILE_MAX)
    percentiles[valid] = np.floor(pct * 10.0 + 0.5) / 10.0
    return percentiles


def lms_value(L: Any, M: Any, S: Any, z: Any) -> np.ndarray:
    """
    Inverse LMS: the measurement value at z-score z.

    Formula: M * (1 + L*S*z)^(1/L), or M * exp(S*z) when L ≈ 0.
    """
    L, M, S, z = np.broadcast_arrays(
        *(np.asarray(a, dtype=np.float64) for a in (L, M, S, z))
    )
    near_zero = np.abs(L) < L_ZERO_THRESHOLD
    safe_L = np.where(near_zero, 1.0, L)
    with np.errstate(divide="ignore", invalid="ignore"):
        return np.where(
            near_zero, M * np.exp(S * z), M * np.power(1 + safe_L * S * z, 1 / safe_L)
        )


def percentile_curve(ages_in_days: Any, series: Any, percentile: float) -> np.ndarray:
    """
    Reference value of a given percentile at each age (chart curves).

    Raises:
        ValueError: If percentile is not strictly between 0 and 100, or the
            series is empty.
    """
    if not 0 < percentile < 100:
        raise ValueError("percentile must be between 0 and 100 (exclusive)")
    z = stats.norm.ppf(percentile / 100.0)
    L, M, S = interpolate_lms_arrays(ages_in_days, series)
    return lms_value(L, M, S, z)


def median_curve(ages_in_days: Any, series: Any) -> np.ndarray:
    """Interpolated reference median (M) at each age."""
    _, M, _ = interpolate_lms_arrays(ages_in_days, series)
    return M
