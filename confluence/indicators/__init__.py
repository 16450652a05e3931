from .core.interfaces import Indicator, check_monotonic_definedness, validate_ohlcv
from .core.pipeline import FeaturePipeline
from .core.smoothing import ema, sma
from .impl.ma import SMA, EMA
from .impl.macd import MACD, macd_lines
from .impl.rsi import RSI, rsi_values
from .impl.atr import ATR, atr_values, true_range

__all__ = [
    "Indicator",
    "FeaturePipeline",
    "validate_ohlcv",
    "check_monotonic_definedness",
    "SMA",
    "EMA",
    "MACD",
    "RSI",
    "ATR",
    "sma",
    "ema",
    "macd_lines",
    "rsi_values",
    "atr_values",
    "true_range",
]
