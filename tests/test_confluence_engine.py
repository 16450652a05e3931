"""Decision-logic tests for the confluence engine."""

from __future__ import annotations

import time

import numpy as np
import pandas as pd
import pytest

from confluence.strategy import (
    ConfluenceEngine,
    Direction,
    EngineConfig,
    PriceBar,
    analyze,
)
from confluence.strategy.confluence import NO_CONFLUENCE, NOT_ENOUGH_DATA, STILL_CALCULATING


def _last_ms(df: pd.DataFrame) -> int:
    return int(df["time"].iloc[-1].timestamp() * 1000)


def _to_bars(df: pd.DataFrame) -> list[PriceBar]:
    return [
        PriceBar(
            time=row.time.to_pydatetime(),
            open=row.open,
            high=row.high,
            low=row.low,
            close=row.close,
            volume=row.volume,
        )
        for row in df.itertuples(index=False)
    ]


# ---------------------------------------------------------------------------
# Guards
# ---------------------------------------------------------------------------


class TestGuards:
    def test_short_series_holds(self, random_ohlcv):
        df = random_ohlcv.iloc[:50]
        signal = analyze(df)

        assert signal.direction is Direction.HOLD
        assert signal.reasoning == (NOT_ENOUGH_DATA,)
        assert signal.entry_price is None
        assert signal.stop_loss is None
        assert signal.take_profit is None
        assert signal.current_price == df["close"].iloc[-1]
        assert signal.id == f"HOLD-{_last_ms(df)}"
        # Snapshot still carried through, mostly undefined
        assert len(signal.indicator_data) == 50
        assert signal.indicator_data["ema_200_close"].isna().all()

    def test_199_bars_holds_200_bars_evaluates(self, random_ohlcv):
        assert analyze(random_ohlcv.iloc[:199]).reasoning == (NOT_ENOUGH_DATA,)
        assert analyze(random_ohlcv.iloc[:200]).reasoning != (NOT_ENOUGH_DATA,)

    def test_empty_series_holds(self):
        before = int(time.time() * 1000)
        signal = analyze([])
        after = int(time.time() * 1000)

        assert signal.direction is Direction.HOLD
        assert signal.current_price == 0.0
        assert before <= signal.timestamp <= after
        assert signal.reasoning == (NOT_ENOUGH_DATA,)

    def test_empty_frame_holds(self):
        signal = analyze(pd.DataFrame())

        assert signal.direction is Direction.HOLD
        assert signal.current_price == 0.0
        assert signal.reasoning == (NOT_ENOUGH_DATA,)
        assert signal.indicator_data.empty

    def test_frame_without_time_column_raises(self, bullish_ohlcv):
        df = bullish_ohlcv.rename(columns={"time": "timestamp"})
        with pytest.raises(ValueError, match="time"):
            analyze(df)

    def test_signal_line_still_warming_holds(self, bullish_ohlcv):
        # 250 bars but a signal line that needs 250 MACD values
        engine = ConfluenceEngine(EngineConfig(macd_signal_period=250))
        signal = engine.analyze(bullish_ohlcv)

        assert signal.direction is Direction.HOLD
        assert signal.reasoning == (STILL_CALCULATING,)
        assert signal.indicator_data["macd_12_26_250_signal"].isna().all()

    def test_undefined_latest_price_holds(self, bullish_ohlcv):
        df = bullish_ohlcv.copy()
        df.loc[df.index[-1], "close"] = np.nan
        signal = analyze(df)

        assert signal.direction is Direction.HOLD
        assert signal.reasoning == (STILL_CALCULATING,)


# ---------------------------------------------------------------------------
# BUY / SELL / HOLD rules
# ---------------------------------------------------------------------------


class TestBuy:
    def test_bullish_confluence(self, bullish_ohlcv):
        signal = analyze(bullish_ohlcv)
        latest = signal.indicator_data.iloc[-1]
        price = bullish_ohlcv["close"].iloc[-1]
        atr = latest["atr_14"]

        # Preconditions of the construction
        assert latest["ema_50_close"] > latest["ema_200_close"]
        assert price > latest["ema_50_close"]
        assert latest["macd_12_26_9_line"] > latest["macd_12_26_9_signal"] > 0
        assert latest["rsi_14"] > 55

        assert signal.direction is Direction.BUY
        assert signal.id == f"BUY-{_last_ms(bullish_ohlcv)}"
        assert signal.entry_price == price
        assert signal.stop_loss == pytest.approx(price - 2 * atr)
        assert signal.take_profit == pytest.approx(price + 1.5 * (price - signal.stop_loss))

    def test_reasoning_in_fixed_order(self, bullish_ohlcv):
        reasoning = analyze(bullish_ohlcv).reasoning
        assert len(reasoning) == 4
        assert reasoning[0].startswith("Uptrend Confirmed: EMA (50) is above EMA (200)")
        assert reasoning[1].startswith("Bullish Price Action")
        assert reasoning[2].startswith("Bullish Momentum")
        assert reasoning[3] == (
            "Strong Momentum: RSI is above 55, indicating strong buying pressure."
        )

    def test_configurable_risk_policy(self, bullish_ohlcv):
        cfg = EngineConfig(atr_multiplier=1.0, risk_reward_ratio=2.0)
        signal = ConfluenceEngine(cfg).analyze(bullish_ohlcv)
        price = signal.current_price
        atr = signal.indicator_data["atr_14"].iloc[-1]

        assert signal.direction is Direction.BUY
        assert signal.stop_loss == pytest.approx(price - atr)
        assert signal.take_profit == pytest.approx(price + 2 * atr)

    def test_single_failed_condition_blocks_buy(self, bullish_ohlcv):
        # RSI is 100 here; a threshold above that must not be loosened into an "or"
        cfg = EngineConfig(rsi_buy_threshold=101.0)
        signal = ConfluenceEngine(cfg).analyze(bullish_ohlcv)

        assert signal.direction is Direction.HOLD
        assert signal.reasoning == (NO_CONFLUENCE,)

    def test_mixed_gains_and_losses(self, choppy_bullish_ohlcv):
        signal = analyze(choppy_bullish_ohlcv)
        latest = signal.indicator_data.iloc[-1]
        price = choppy_bullish_ohlcv["close"].iloc[-1]

        assert 55 < latest["rsi_14"] < 100
        assert signal.direction is Direction.BUY
        assert [r.split(":")[0] for r in signal.reasoning] == [
            "Uptrend Confirmed", "Bullish Price Action", "Bullish Momentum", "Strong Momentum",
        ]
        assert signal.stop_loss == pytest.approx(price - 2 * latest["atr_14"])
        assert signal.stop_loss < signal.entry_price < signal.take_profit


class TestSell:
    def test_bearish_confluence(self, bearish_ohlcv):
        signal = analyze(bearish_ohlcv)
        latest = signal.indicator_data.iloc[-1]
        price = bearish_ohlcv["close"].iloc[-1]
        atr = latest["atr_14"]

        assert latest["ema_50_close"] < latest["ema_200_close"]
        assert price < latest["ema_50_close"]
        assert latest["macd_12_26_9_line"] < latest["macd_12_26_9_signal"] < 0
        assert latest["rsi_14"] < 45

        assert signal.direction is Direction.SELL
        assert signal.id == f"SELL-{_last_ms(bearish_ohlcv)}"
        assert signal.entry_price == price
        assert signal.stop_loss == pytest.approx(price + 2 * atr)
        assert signal.take_profit == pytest.approx(price - 1.5 * (signal.stop_loss - price))

    def test_reasoning_in_fixed_order(self, bearish_ohlcv):
        reasoning = analyze(bearish_ohlcv).reasoning
        assert len(reasoning) == 4
        assert reasoning[0].startswith("Downtrend Confirmed")
        assert reasoning[1].startswith("Bearish Price Action")
        assert reasoning[2].startswith("Bearish Momentum")
        assert reasoning[3].startswith("Strong Momentum: RSI is below 45")

    def test_mixed_gains_and_losses(self, choppy_bearish_ohlcv):
        signal = analyze(choppy_bearish_ohlcv)
        latest = signal.indicator_data.iloc[-1]
        price = choppy_bearish_ohlcv["close"].iloc[-1]

        assert 0 < latest["rsi_14"] < 45
        assert signal.direction is Direction.SELL
        assert [r.split(":")[0] for r in signal.reasoning] == [
            "Downtrend Confirmed", "Bearish Price Action", "Bearish Momentum", "Strong Momentum",
        ]
        assert signal.stop_loss == pytest.approx(price + 2 * latest["atr_14"])
        assert signal.take_profit < signal.entry_price < signal.stop_loss


class TestHold:
    def test_uptrend_with_neutral_rsi(self, sideways_after_uptrend_ohlcv):
        signal = analyze(sideways_after_uptrend_ohlcv)
        latest = signal.indicator_data.iloc[-1]

        assert latest["ema_50_close"] > latest["ema_200_close"]
        assert 45 < latest["rsi_14"] < 55

        assert signal.direction is Direction.HOLD
        assert signal.reasoning == (NO_CONFLUENCE,)
        assert signal.entry_price is None
        assert signal.stop_loss is None
        assert signal.take_profit is None


# ---------------------------------------------------------------------------
# Contract
# ---------------------------------------------------------------------------


class TestContract:
    def test_idempotent(self, random_ohlcv):
        s1 = analyze(random_ohlcv)
        s2 = analyze(random_ohlcv)
        assert s1 == s2
        pd.testing.assert_frame_equal(s1.indicator_data, s2.indicator_data)

    def test_price_bar_sequence_matches_frame(self, bullish_ohlcv):
        from_frame = analyze(bullish_ohlcv)
        from_bars = analyze(_to_bars(bullish_ohlcv))
        assert from_bars == from_frame

    def test_input_not_mutated(self, bullish_ohlcv):
        before = bullish_ohlcv.copy()
        analyze(bullish_ohlcv)
        pd.testing.assert_frame_equal(bullish_ohlcv, before)

    def test_epoch_ms_timestamps_accepted(self, bullish_ohlcv):
        df = bullish_ohlcv.copy()
        df["time"] = df["time"].map(lambda t: int(t.timestamp() * 1000))
        signal = analyze(df)
        assert signal.timestamp == _last_ms(bullish_ohlcv)
        assert signal.direction is Direction.BUY

    def test_price_bars_with_epoch_ms_times(self, bullish_ohlcv):
        bars = [
            PriceBar(
                time=int(row.time.timestamp() * 1000),
                open=row.open,
                high=row.high,
                low=row.low,
                close=row.close,
                volume=row.volume,
            )
            for row in bullish_ohlcv.itertuples(index=False)
        ]
        signal = analyze(bars)

        assert signal.timestamp == _last_ms(bullish_ohlcv)
        assert signal.id == f"BUY-{_last_ms(bullish_ohlcv)}"
        assert signal == analyze(bullish_ohlcv)

    def test_few_price_bars_with_epoch_ms_times(self):
        start = 1_700_000_000_000
        bars = [PriceBar(start + i * 3_600_000, 1.0, 1.1, 0.9, 1.0, 10.0) for i in range(3)]
        signal = analyze(bars)

        assert signal.direction is Direction.HOLD
        assert signal.timestamp == start + 2 * 3_600_000

    def test_warmup_follows_slow_ema(self):
        assert ConfluenceEngine().warmup_bars == 200
        assert ConfluenceEngine(EngineConfig(ema_fast_period=10, ema_slow_period=30)).warmup_bars == 30
        assert ConfluenceEngine().pipeline.max_lookback == 200

    def test_never_raises_on_short_inputs(self, random_ohlcv):
        for n in (0, 1, 2, 14, 15, 26, 34, 199):
            signal = analyze(random_ohlcv.iloc[:n])
            assert signal.direction is Direction.HOLD
            assert signal.reasoning
