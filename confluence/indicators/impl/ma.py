from dataclasses import dataclass

import pandas as pd

from ..core.interfaces import require_columns
from ..core.smoothing import ema, sma


@dataclass(frozen=True)
class SMA:
    period: int
    src: str = "close"

    @property
    def name(self) -> str:
        return f"sma_{self.period}_{self.src}"

    @property
    def lookback(self) -> int:
        return self.period

    def compute(self, ohlcv: pd.DataFrame) -> pd.DataFrame:
        """
        Computes the Simple Moving Average (SMA).

        Args:
            ohlcv: A DataFrame containing OHLCV data.

        Returns:
            A DataFrame with the computed SMA values.
        """
        require_columns(ohlcv, [self.src])

        feature = sma(ohlcv[self.src].to_numpy(), self.period)
        return pd.DataFrame({self.name: feature}, index=ohlcv.index)


@dataclass(frozen=True)
class EMA:
    """EMA seeded by the SMA of the first full window."""

    period: int
    src: str = "close"

    @property
    def name(self) -> str:
        return f"ema_{self.period}_{self.src}"

    @property
    def lookback(self) -> int:
        return self.period

    def compute(self, ohlcv: pd.DataFrame) -> pd.DataFrame:
        require_columns(ohlcv, [self.src])

        feature = ema(ohlcv[self.src].to_numpy(), self.period)
        return pd.DataFrame({self.name: feature}, index=ohlcv.index)
