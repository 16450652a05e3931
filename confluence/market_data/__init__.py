"""
confluence.market_data — bar sources feeding the confluence engine.

Usage::

    from confluence.market_data import build_source

    bars = build_source("binance").fetch("BTC/USDT", "1h", 300)
"""

from typing import Optional

from ._protocols import EXPECTED_COLS, DataSource, interval_ms
from ._synthetic import BASE_PRICES, SyntheticSource
from ._binance import BinanceSource


def build_source(kind: str, seed: Optional[int] = None) -> DataSource:
    """Return a data source by name (``binance`` or ``synthetic``)."""
    if kind == "synthetic":
        return SyntheticSource(seed=seed)
    if kind == "binance":
        return BinanceSource(fallback=SyntheticSource(seed=seed))
    raise ValueError(f"Unknown data source '{kind}'. Available: ['binance', 'synthetic']")


__all__ = [
    "EXPECTED_COLS",
    "DataSource",
    "interval_ms",
    "BASE_PRICES",
    "SyntheticSource",
    "BinanceSource",
    "build_source",
]
