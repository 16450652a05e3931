"""Multi-indicator confluence engine: price bars in, one Signal out."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional, Sequence

import pandas as pd

from confluence.indicators import ATR, EMA, MACD, RSI, FeaturePipeline
from confluence.indicators.core.interfaces import require_columns
from .base import BAR_COLUMNS, Bars, bars_to_frame, epoch_ms, now_ms, validate_features
from .config import EngineConfig
from .signal import Direction, Signal

log = logging.getLogger(__name__)

NOT_ENOUGH_DATA = "Not enough data points to generate signals."
STILL_CALCULATING = "Indicators are still calculating."
NO_CONFLUENCE = "No high-confluence signal conditions met. Waiting for alignment."


@dataclass
class ConfluenceEngine:
    """EMA trend + price action + MACD momentum + RSI strength, all required.

    A BUY (or SELL) fires only when every one of its four conditions holds on
    the latest bar; anything less is a HOLD.
    """

    config: EngineConfig = field(default_factory=EngineConfig)
    _name: str = "confluence"

    @property
    def name(self) -> str:
        return self._name

    @property
    def ema_fast(self) -> EMA:
        return EMA(self.config.ema_fast_period)

    @property
    def ema_slow(self) -> EMA:
        return EMA(self.config.ema_slow_period)

    @property
    def macd(self) -> MACD:
        cfg = self.config
        return MACD(cfg.macd_fast_period, cfg.macd_slow_period, cfg.macd_signal_period)

    @property
    def rsi(self) -> RSI:
        return RSI(self.config.rsi_period)

    @property
    def atr(self) -> ATR:
        return ATR(self.config.atr_period)

    @property
    def pipeline(self) -> FeaturePipeline:
        return FeaturePipeline([self.ema_fast, self.ema_slow, self.macd, self.rsi, self.atr])

    @property
    def required_features(self) -> Sequence[str]:
        macd_line, macd_signal, _ = self.macd.columns
        return [
            "close",
            self.ema_fast.name,
            self.ema_slow.name,
            macd_line,
            macd_signal,
            self.rsi.name,
            self.atr.name,
        ]

    @property
    def warmup_bars(self) -> int:
        return self.config.min_bars

    # -- Public API --------------------------------------------------------

    def analyze(self, bars: Bars) -> Signal:
        """Evaluate the latest bar of ``bars`` and return a fresh Signal.

        Never raises for short or empty input; those produce a HOLD.  A
        non-empty frame without the bar columns is a caller error and raises
        ``ValueError``.
        """
        df = bars_to_frame(bars)
        require_columns(df, BAR_COLUMNS)
        n = len(df)

        current_price = float(df["close"].iloc[-1]) if n else 0.0
        timestamp = epoch_ms(df["time"].iloc[-1]) if n else now_ms()

        snapshot = self.pipeline.transform(df)

        if n < self.warmup_bars:
            log.debug("%d bars < %d required, holding", n, self.warmup_bars)
            return self._hold(timestamp, current_price, NOT_ENOUGH_DATA, snapshot)

        latest = snapshot.iloc[-1].to_dict()
        latest["close"] = current_price

        if not validate_features(latest, self.required_features):
            log.debug("Undefined indicator on last bar, holding")
            return self._hold(timestamp, current_price, STILL_CALCULATING, snapshot)

        signal = self._evaluate(latest, timestamp, current_price, snapshot)
        if signal is None:
            return self._hold(timestamp, current_price, NO_CONFLUENCE, snapshot)

        log.info(
            "%s @ %.8g  sl=%.8g  tp=%.8g",
            signal.direction.value, signal.entry_price, signal.stop_loss, signal.take_profit,
        )
        return signal

    # -- Private helpers ---------------------------------------------------

    def _evaluate(
        self,
        latest: dict[str, float],
        timestamp: int,
        price: float,
        snapshot: pd.DataFrame,
    ) -> Optional[Signal]:
        cfg = self.config
        macd_col, signal_col, _ = self.macd.columns
        ema_fast = latest[self.ema_fast.name]
        ema_slow = latest[self.ema_slow.name]
        macd = latest[macd_col]
        macd_signal = latest[signal_col]
        rsi = latest[self.rsi.name]
        atr = latest[self.atr.name]

        fast_p, slow_p = cfg.ema_fast_period, cfg.ema_slow_period
        stop_distance = atr * cfg.atr_multiplier

        is_uptrend = ema_fast > ema_slow
        is_price_bullish = price > ema_fast
        is_macd_bullish = macd > macd_signal and macd > 0
        is_rsi_bullish = rsi > cfg.rsi_buy_threshold

        if is_uptrend and is_price_bullish and is_macd_bullish and is_rsi_bullish:
            stop_loss = price - stop_distance
            take_profit = price + (price - stop_loss) * cfg.risk_reward_ratio
            reasoning = (
                f"Uptrend Confirmed: EMA ({fast_p}) is above EMA ({slow_p}).",
                f"Bullish Price Action: Price is trading above the EMA ({fast_p}).",
                "Bullish Momentum: MACD is positive and above its signal line.",
                f"Strong Momentum: RSI is above {cfg.rsi_buy_threshold:g}, "
                "indicating strong buying pressure.",
            )
            return self._trade(
                Direction.BUY, timestamp, price, stop_loss, take_profit, reasoning, snapshot,
            )

        is_downtrend = ema_fast < ema_slow
        is_price_bearish = price < ema_fast
        is_macd_bearish = macd < macd_signal and macd < 0
        is_rsi_bearish = rsi < cfg.rsi_sell_threshold

        if is_downtrend and is_price_bearish and is_macd_bearish and is_rsi_bearish:
            stop_loss = price + stop_distance
            take_profit = price - (stop_loss - price) * cfg.risk_reward_ratio
            reasoning = (
                f"Downtrend Confirmed: EMA ({fast_p}) is below EMA ({slow_p}).",
                f"Bearish Price Action: Price is trading below the EMA ({fast_p}).",
                "Bearish Momentum: MACD is negative and below its signal line.",
                f"Strong Momentum: RSI is below {cfg.rsi_sell_threshold:g}, "
                "indicating strong selling pressure.",
            )
            return self._trade(
                Direction.SELL, timestamp, price, stop_loss, take_profit, reasoning, snapshot,
            )

        return None

    @staticmethod
    def _trade(
        direction: Direction,
        timestamp: int,
        price: float,
        stop_loss: float,
        take_profit: float,
        reasoning: tuple[str, ...],
        snapshot: pd.DataFrame,
    ) -> Signal:
        return Signal(
            id=f"{direction.value}-{timestamp}",
            timestamp=timestamp,
            direction=direction,
            current_price=price,
            entry_price=price,
            stop_loss=float(stop_loss),
            take_profit=float(take_profit),
            reasoning=reasoning,
            indicator_data=snapshot,
        )

    @staticmethod
    def _hold(
        timestamp: int, price: float, reason: str, snapshot: pd.DataFrame,
    ) -> Signal:
        return Signal(
            id=f"{Direction.HOLD.value}-{timestamp}",
            timestamp=timestamp,
            direction=Direction.HOLD,
            current_price=price,
            reasoning=(reason,),
            indicator_data=snapshot,
        )


def analyze(bars: Bars, config: Optional[EngineConfig] = None) -> Signal:
    """Run a :class:`ConfluenceEngine` with ``config`` (defaults if omitted)."""
    return ConfluenceEngine(config or EngineConfig()).analyze(bars)
