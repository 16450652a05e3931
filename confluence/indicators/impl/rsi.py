from dataclasses import dataclass

import numpy as np
import pandas as pd

from ..core.interfaces import require_columns
from ..core.smoothing import as_float_array, wilder_fold, wilder_seed


def rsi_from_averages(avg_gain: float, avg_loss: float) -> float:
    if np.isnan(avg_gain) or np.isnan(avg_loss):
        return np.nan
    # rs is taken as 0 rather than infinity when there are no losses,
    # and that case is reported as RSI 100.
    if avg_loss > 0:
        rs = avg_gain / avg_loss
        return 100.0 - 100.0 / (1.0 + rs)
    return 100.0


def rsi_values(close, period: int = 14) -> np.ndarray:
    """Wilder RSI.  The first defined value is at index ``period``."""
    x = as_float_array(close)
    n = len(x)
    out = np.full(n, np.nan, dtype=np.float64)
    if n <= period:
        return out

    changes = np.diff(x)
    # a NaN change stays NaN in both legs
    gains = np.where(changes < 0, 0.0, changes)
    losses = np.where(changes > 0, 0.0, -changes)

    # Phase 1: seed from the first `period` changes
    seed_gain = wilder_seed(gains, period)
    seed_loss = wilder_seed(losses, period)
    out[period] = rsi_from_averages(seed_gain, seed_loss)

    # Phase 2: Wilder smoothing over the remaining changes
    avg_gains = wilder_fold(gains[period:], seed_gain, period)
    avg_losses = wilder_fold(losses[period:], seed_loss, period)
    for j, (g, l) in enumerate(zip(avg_gains, avg_losses)):
        out[period + 1 + j] = rsi_from_averages(g, l)

    return out


@dataclass(frozen=True)
class RSI:
    period: int = 14
    src: str = "close"

    @property
    def name(self) -> str:
        return f"rsi_{self.period}"

    @property
    def lookback(self) -> int:
        return self.period + 1

    def compute(self, ohlcv: pd.DataFrame) -> pd.DataFrame:
        require_columns(ohlcv, [self.src])

        feature = rsi_values(ohlcv[self.src].to_numpy(), self.period)
        return pd.DataFrame({self.name: feature}, index=ohlcv.index)
