"""Binance spot klines source with synthetic fallback."""

from __future__ import annotations

import logging
import time
from typing import Optional

import httpx
import pandas as pd

from ._protocols import EXPECTED_COLS, interval_ms
from ._synthetic import SyntheticSource

log = logging.getLogger(__name__)

KLINES_URL = "https://api.binance.com/api/v3/klines"


class BinanceSource:
    """Fetch the most recent ``limit`` klines for a pair.

    Any failure (HTTP error, transport error, malformed payload, empty
    response) is logged and answered with synthetic bars instead, so
    :meth:`fetch` always returns ``limit`` rows.  A short response is padded
    at the front with synthetic bars stepping back from the first real bar.
    """

    def __init__(
        self,
        client: Optional[httpx.Client] = None,
        fallback: Optional[SyntheticSource] = None,
        url: str = KLINES_URL,
        timeout: float = 10.0,
    ) -> None:
        self._client = client
        self._fallback = fallback or SyntheticSource()
        self._url = url
        self._timeout = timeout

    # -- DataSource interface ----------------------------------------------

    def fetch(self, pair: str, interval: str, limit: int) -> pd.DataFrame:
        step = interval_ms(interval)
        now = int(time.time() * 1000)
        params = {
            "symbol": pair.replace("/", ""),
            "interval": interval,
            "limit": limit,
            "startTime": now - limit * step,
        }

        try:
            raw = self._get(params)
            df = self._parse(raw)
        except (httpx.HTTPError, ValueError, TypeError, IndexError, KeyError) as exc:
            log.error("Error fetching Binance data for %s, falling back to synthetic: %s", pair, exc)
            return self._fallback.fetch(pair, interval, limit)

        if df.empty:
            log.warning("Binance returned no data for %s, falling back to synthetic.", pair)
            return self._fallback.fetch(pair, interval, limit)

        if len(df) < limit:
            missing = limit - len(df)
            log.warning(
                "Binance returned %d bars for %s, generating %d to fill the gap.",
                len(df), pair, missing,
            )
            first_ms = int(df["time"].iat[0].value // 1_000_000)
            filler = self._fallback.generate(pair, interval, missing, first_ms)
            df = pd.concat([filler, df], ignore_index=True)

        return df

    # -- Private helpers ---------------------------------------------------

    def _get(self, params: dict) -> list:
        if self._client is not None:
            resp = self._client.get(self._url, params=params, timeout=self._timeout)
        else:
            with httpx.Client() as client:
                resp = client.get(self._url, params=params, timeout=self._timeout)
        resp.raise_for_status()
        return resp.json()

    @staticmethod
    def _parse(raw: list) -> pd.DataFrame:
        if not isinstance(raw, list):
            raise ValueError(f"Unexpected klines payload: {type(raw).__name__}")
        rows = [
            (int(k[0]), float(k[1]), float(k[2]), float(k[3]), float(k[4]), float(k[5]))
            for k in raw
        ]
        df = pd.DataFrame(rows, columns=EXPECTED_COLS)
        df["time"] = pd.to_datetime(df["time"], unit="ms", utc=True)
        return df
