"""Random-walk bar generator used offline and as the exchange fallback."""

from __future__ import annotations

import logging
import time
from typing import Optional

import numpy as np
import pandas as pd

from ._protocols import EXPECTED_COLS, interval_ms

log = logging.getLogger(__name__)

BASE_PRICES: dict[str, float] = {
    "BTC/USDT": 60000,
    "ETH/USDT": 3000,
    "SOL/USDT": 150,
    "DOGE/USDT": 0.15,
    "BNB/USDT": 600,
    "XRP/USDT": 0.5,
    "ADA/USDT": 0.45,
    "AVAX/USDT": 35,
    "LINK/USDT": 18,
    "DOT/USDT": 7,
}
DEFAULT_BASE_PRICE = 50000.0


class SyntheticSource:
    """Generate plausible-looking OHLCV bars ending at ``end_ms`` (or now).

    Parameters
    ----------
    seed : int | None
        Seed for the numpy ``Generator``; the same seed yields the same bars.
    end_ms : int | None
        Timestamp of the bar after the last generated one.  Defaults to now.
    """

    def __init__(self, seed: Optional[int] = None, end_ms: Optional[int] = None) -> None:
        self._rng = np.random.default_rng(seed)
        self._end_ms = end_ms

    def fetch(self, pair: str, interval: str, limit: int) -> pd.DataFrame:
        end_ms = self._end_ms if self._end_ms is not None else int(time.time() * 1000)
        return self.generate(pair, interval, limit, end_ms)

    def generate(self, pair: str, interval: str, count: int, end_ms: int) -> pd.DataFrame:
        """``count`` bars spaced by ``interval``, the last one ending before ``end_ms``."""
        rng = self._rng
        step = interval_ms(interval)
        base = BASE_PRICES.get(pair, DEFAULT_BASE_PRICE)

        last_close = base * (0.9 + rng.random() * 0.2)
        trend = 1 if rng.random() > 0.5 else -1

        rows = []
        for i in range(count):
            ts = end_ms - (count - i) * step

            if rng.random() < 0.05:
                trend *= -1

            volatility = 0.02 + rng.random() * 0.03
            change = (
                last_close * volatility * (rng.random() - 0.45)
                + last_close * 0.001 * trend
            )
            open_ = last_close
            close = open_ + change
            high = max(open_, close) * (1 + rng.random() * volatility / 2)
            low = min(open_, close) * (1 - rng.random() * volatility / 2)
            volume = 1000 + rng.random() * 5000

            rows.append((ts, open_, high, low, close, volume))
            last_close = close

        df = pd.DataFrame(rows, columns=EXPECTED_COLS)
        df["time"] = pd.to_datetime(df["time"], unit="ms", utc=True)
        log.debug("Generated %d synthetic %s bars for %s", count, interval, pair)
        return df
