import numpy as np
import pandas as pd
import pytest


def make_ohlcv(close, start="2024-01-01", freq="h", spread=0.005) -> pd.DataFrame:
    """OHLCV frame around a close path; high/low sit ``spread`` away from close."""
    close = np.asarray(close, dtype=np.float64)
    n = len(close)
    return pd.DataFrame({
        "time": pd.date_range(start, periods=n, freq=freq, tz="UTC"),
        "open": close,
        "high": close * (1 + spread),
        "low": close * (1 - spread),
        "close": close,
        "volume": np.ones(n) * 1000,
    })


@pytest.fixture
def random_ohlcv():
    rng = np.random.default_rng(42)
    close = 100 + rng.normal(0, 1, 300).cumsum()
    return make_ohlcv(close)


@pytest.fixture
def bullish_ohlcv():
    """Accelerating uptrend: EMA50 > EMA200, MACD rising above its signal, no losses."""
    i = np.arange(250)
    return make_ohlcv(100 + 0.001 * i ** 2)


@pytest.fixture
def bearish_ohlcv():
    """Mirror of ``bullish_ohlcv``: accelerating downtrend."""
    i = np.arange(250)
    return make_ohlcv(200 - 0.001 * i ** 2)


@pytest.fixture
def sideways_after_uptrend_ohlcv():
    """200 bars of uptrend, then 80 bars alternating +1/-1 so RSI settles near 50."""
    i = np.arange(200)
    trend = 100 + 0.001 * i ** 2
    tail = trend[-1] + (np.arange(1, 81) % 2)
    return make_ohlcv(np.concatenate([trend, tail]))


@pytest.fixture
def choppy_bullish_ohlcv():
    """Accelerating uptrend with a pull-back every third bar, so RSI sits below 100."""
    i = np.arange(250)
    return make_ohlcv(100 + 0.001 * i ** 2 + np.where(i % 3 == 0, -0.6, 0.3))


@pytest.fixture
def choppy_bearish_ohlcv():
    """Mirror of ``choppy_bullish_ohlcv``."""
    i = np.arange(250)
    return make_ohlcv(200 - 0.001 * i ** 2 - np.where(i % 3 == 0, -0.6, 0.3))
