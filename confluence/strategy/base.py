from __future__ import annotations

import time
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Sequence, Union

import numpy as np
import pandas as pd

BAR_COLUMNS: list[str] = ["time", "open", "high", "low", "close", "volume"]


@dataclass(frozen=True)
class PriceBar:
    """One OHLCV bar.  Series of bars are expected in ascending time order.

    ``time`` is a datetime or epoch milliseconds.
    """

    time: Union[datetime, int]
    open: float
    high: float
    low: float
    close: float
    volume: float


Bars = Union[pd.DataFrame, Sequence[PriceBar]]


def bars_to_frame(bars: Bars) -> pd.DataFrame:
    """Return an OHLCV DataFrame for either accepted bar representation.

    DataFrames are returned as a copy with a positional index; the caller's
    frame is never modified.  An empty input always carries the bar columns.
    Numeric ``time`` values are left as epoch milliseconds.
    """
    if isinstance(bars, pd.DataFrame):
        df = bars.reset_index(drop=True)
    else:
        df = pd.DataFrame([asdict(b) for b in bars], columns=BAR_COLUMNS)
        if not df.empty and not pd.api.types.is_numeric_dtype(df["time"]):
            df["time"] = pd.to_datetime(df["time"], utc=True)
    if df.empty:
        df = df.reindex(columns=list(dict.fromkeys([*BAR_COLUMNS, *df.columns])))
    return df


def epoch_ms(ts) -> int:
    """Epoch milliseconds for a datetime-like value (naive values are UTC).

    Plain numbers are taken to already be epoch milliseconds.
    """
    if isinstance(ts, (int, float, np.integer, np.floating)):
        return int(ts)
    ts = pd.Timestamp(ts)
    if ts.tzinfo is None:
        ts = ts.tz_localize("UTC")
    return int(ts.value // 1_000_000)


def now_ms() -> int:
    return int(time.time() * 1000)


def validate_features(features: dict[str, float], required: Sequence[str]) -> bool:
    """
    Helper function to validate required features exist and are not NaN.
    """
    for feature in required:
        if feature not in features:
            return False
        value = features[feature]
        if value is None or np.isnan(value):
            return False
    return True
