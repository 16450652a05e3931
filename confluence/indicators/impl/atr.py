from dataclasses import dataclass

import numpy as np
import pandas as pd

from ..core.interfaces import require_columns
from ..core.smoothing import as_float_array, wilder_fold, wilder_seed


def true_range(high, low, close) -> np.ndarray:
    """True range per bar; index 0 has no previous close and is NaN."""
    h = as_float_array(high)
    l = as_float_array(low)
    c = as_float_array(close)
    n = len(h)
    tr = np.full(n, np.nan, dtype=np.float64)
    for i in range(1, n):
        tr[i] = max(
            h[i] - l[i],
            abs(h[i] - c[i - 1]),
            abs(l[i] - c[i - 1]),
        )
    return tr


def atr_values(high, low, close, period: int = 14) -> np.ndarray:
    """Wilder ATR, seeded at index ``period`` by the mean of ``tr[1..period]``."""
    tr = true_range(high, low, close)
    n = len(tr)
    out = np.full(n, np.nan, dtype=np.float64)
    if n <= period:
        return out

    seed = wilder_seed(tr[1:], period)
    out[period] = seed
    out[period + 1 :] = wilder_fold(tr[period + 1 :], seed, period)
    return out


@dataclass(frozen=True)
class ATR:
    period: int = 14

    @property
    def name(self) -> str:
        return f"atr_{self.period}"

    @property
    def lookback(self) -> int:
        return self.period + 1

    def compute(self, ohlcv: pd.DataFrame) -> pd.DataFrame:
        require_columns(ohlcv, ("high", "low", "close"))

        feature = atr_values(
            ohlcv["high"].to_numpy(),
            ohlcv["low"].to_numpy(),
            ohlcv["close"].to_numpy(),
            self.period,
        )
        return pd.DataFrame({self.name: feature}, index=ohlcv.index)
