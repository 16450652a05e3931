"""Protocol definitions for bar-data sources."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

import pandas as pd

EXPECTED_COLS: list[str] = ["time", "open", "high", "low", "close", "volume"]

_UNIT_MS = {
    "m": 60 * 1000,
    "h": 60 * 60 * 1000,
    "d": 24 * 60 * 60 * 1000,
}


@runtime_checkable
class DataSource(Protocol):
    """Abstraction over any bar-data provider (exchange API, generator, mock).

    ``fetch`` returns ``limit`` bars in ascending time order with the
    :data:`EXPECTED_COLS` columns; ``time`` is ``datetime64[ns, UTC]``.
    """

    def fetch(self, pair: str, interval: str, limit: int) -> pd.DataFrame: ...


def interval_ms(interval: str) -> int:
    """Length of an ``"<n>m"``, ``"<n>h"`` or ``"<n>d"`` interval in ms.

    Anything unrecognised falls back to one hour.
    """
    unit = interval[-1:]
    try:
        value = int(interval[:-1])
    except ValueError:
        return _UNIT_MS["h"]
    if unit not in _UNIT_MS:
        return _UNIT_MS["h"]
    return value * _UNIT_MS[unit]
