"""Seed-then-fold kernels shared by the moving-average style indicators.

Every recursive indicator here is computed in two explicit phases:

1. a *seed* taken from a plain average over the first full window, and
2. a *fold* that walks the remaining indices applying the recurrence.

The phases are exposed separately so each can be tested on its own.  All
functions take and return float64 numpy arrays, use NaN as the "not yet
computable" marker, never mutate their inputs and never raise on short input.
"""

from __future__ import annotations

import numpy as np


def as_float_array(values) -> np.ndarray:
    """Fresh float64 copy of ``values`` (list, Series or ndarray)."""
    return np.array(values, dtype=np.float64, copy=True).reshape(-1)


def sma(values, period: int) -> np.ndarray:
    """Simple moving average; NaN for indices ``< period - 1``."""
    x = as_float_array(values)
    n = len(x)
    out = np.full(n, np.nan, dtype=np.float64)
    if n < period:
        return out
    for i in range(period - 1, n):
        out[i] = np.sum(x[i - period + 1 : i + 1]) / period
    return out


# -- EMA ------------------------------------------------------------------

def ema_multiplier(period: int) -> float:
    return 2.0 / (period + 1)


def ema_seed(values, period: int) -> float:
    """SMA of the first ``period`` values, or NaN if there are not enough."""
    x = as_float_array(values)
    if len(x) < period:
        return np.nan
    return float(np.sum(x[:period]) / period)


def ema_fold(values, seed: float, start: int, period: int) -> np.ndarray:
    """Apply ``ema = (price - prev) * k + prev`` from ``start`` onwards.

    ``out[start]`` is the seed itself.  A NaN seed propagates to every later
    index instead of being recovered.
    """
    x = as_float_array(values)
    n = len(x)
    out = np.full(n, np.nan, dtype=np.float64)
    if start >= n:
        return out
    k = ema_multiplier(period)
    prev = seed
    out[start] = prev
    for i in range(start + 1, n):
        prev = (x[i] - prev) * k + prev
        out[i] = prev
    return out


def ema(values, period: int) -> np.ndarray:
    """Exponential moving average seeded by the SMA at ``period - 1``."""
    x = as_float_array(values)
    if len(x) < period:
        return np.full(len(x), np.nan, dtype=np.float64)
    return ema_fold(x, ema_seed(x, period), period - 1, period)


# -- Wilder ---------------------------------------------------------------

def wilder_seed(values, period: int) -> float:
    """Plain mean of the first ``period`` values (NaN if too short)."""
    x = as_float_array(values)
    if len(x) < period:
        return np.nan
    return float(np.mean(x[:period]))


def wilder_step(prev: float, value: float, period: int) -> float:
    """One Wilder update: ``(prev * (period - 1) + value) / period``."""
    return (prev * (period - 1) + value) / period


def wilder_fold(values, seed: float, period: int) -> np.ndarray:
    """Wilder-smooth ``values`` starting from ``seed``.

    Returns one averaged value per element of ``values``, i.e. the average
    *after* each element has been folded in.
    """
    x = as_float_array(values)
    out = np.empty(len(x), dtype=np.float64)
    prev = seed
    for i, value in enumerate(x):
        prev = wilder_step(prev, value, period)
        out[i] = prev
    return out
