from dataclasses import dataclass

import numpy as np
import pandas as pd

from ..core.interfaces import require_columns
from ..core.smoothing import as_float_array, ema


def macd_lines(
    close, fast: int = 12, slow: int = 26, signal: int = 9,
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """MACD line, signal line and histogram for a close-price array.

    The signal line is an EMA over the contiguous defined suffix of the MACD
    line, left-padded with NaN, so its warm-up counts from the first defined
    MACD value rather than from the start of the series.
    """
    x = as_float_array(close)
    n = len(x)

    ema_fast = ema(x, fast)
    ema_slow = ema(x, slow)
    macd_line = ema_fast - ema_slow  # NaN wherever either side is NaN

    defined = ~np.isnan(macd_line)
    signal_line = np.full(n, np.nan, dtype=np.float64)
    if defined.any():
        first = int(np.argmax(defined))
        signal_line[first:] = ema(macd_line[first:], signal)

    histogram = macd_line - signal_line
    return macd_line, signal_line, histogram


@dataclass(frozen=True)
class MACD:
    fast: int = 12
    slow: int = 26
    signal: int = 9
    src: str = "close"

    @property
    def name(self) -> str:
        return f"macd_{self.fast}_{self.slow}_{self.signal}"

    @property
    def columns(self) -> tuple[str, str, str]:
        return (f"{self.name}_line", f"{self.name}_signal", f"{self.name}_hist")

    @property
    def lookback(self) -> int:
        # signal line needs `signal` MACD values, the first of which lands at slow - 1
        return self.slow + self.signal - 1

    def compute(self, ohlcv: pd.DataFrame) -> pd.DataFrame:
        require_columns(ohlcv, [self.src])

        line, sig, hist = macd_lines(
            ohlcv[self.src].to_numpy(), self.fast, self.slow, self.signal,
        )
        line_col, signal_col, hist_col = self.columns
        return pd.DataFrame(
            {line_col: line, signal_col: sig, hist_col: hist},
            index=ohlcv.index,
        )
