"""Signal — output of the confluence engine, plus the caller-side tracking wrapper."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional, Tuple

import pandas as pd


class Direction(str, Enum):
    BUY = "BUY"
    SELL = "SELL"
    HOLD = "HOLD"


class SignalStatus(str, Enum):
    """Outcome lifecycle tracked by consumers; the engine never sets it."""

    ACTIVE = "ACTIVE"
    WIN = "WIN"
    LOSS = "LOSS"


@dataclass(frozen=True)
class Signal:
    """What the engine concluded for the latest bar of a series.

    Attributes
    ----------
    id : str
        ``"<DIRECTION>-<timestamp>"``.
    timestamp : int
        Epoch milliseconds of the latest bar.
    direction : Direction
        BUY, SELL or HOLD.
    current_price : float
        Latest close.
    entry_price, stop_loss, take_profit : float | None
        Trade levels; all three are ``None`` for HOLD.
    reasoning : tuple[str, ...]
        Human-readable audit trail, never empty.
    indicator_data : pd.DataFrame
        Full indicator snapshot for charting.  Not part of equality.
    """

    id: str
    timestamp: int
    direction: Direction
    current_price: float
    reasoning: Tuple[str, ...]
    entry_price: Optional[float] = None
    stop_loss: Optional[float] = None
    take_profit: Optional[float] = None
    indicator_data: pd.DataFrame = field(
        default_factory=pd.DataFrame, compare=False, repr=False,
    )

    def __post_init__(self) -> None:
        if not self.reasoning:
            raise ValueError("Signal reasoning must not be empty")
        levels = (self.entry_price, self.stop_loss, self.take_profit)
        if self.direction is Direction.HOLD:
            if any(v is not None for v in levels):
                raise ValueError("HOLD signals carry no entry/stop/target levels")
        elif any(v is None for v in levels):
            raise ValueError(f"{self.direction.value} signal requires entry/stop/target levels")

    def to_dict(self, include_indicators: bool = False) -> dict:
        out = {
            "id": self.id,
            "timestamp": self.timestamp,
            "direction": self.direction.value,
            "currentPrice": self.current_price,
            "entryPrice": self.entry_price,
            "stopLoss": self.stop_loss,
            "takeProfit": self.take_profit,
            "reasoning": list(self.reasoning),
        }
        if include_indicators:
            # NaN -> None so the result is valid JSON
            data = self.indicator_data.astype(object).where(
                self.indicator_data.notna(), None,
            )
            out["indicatorData"] = {col: data[col].tolist() for col in data.columns}
        return out


@dataclass(frozen=True)
class TrackedSignal:
    """A Signal annotated by the caller with instrument, timeframe and status."""

    signal: Signal
    pair: str
    timeframe: str
    status: SignalStatus = SignalStatus.ACTIVE

    @classmethod
    def from_signal(cls, signal: Signal, pair: str, timeframe: str) -> TrackedSignal:
        return cls(signal=signal, pair=pair, timeframe=timeframe)

    def with_status(self, status: SignalStatus) -> TrackedSignal:
        return replace(self, status=status)

    def to_dict(self, include_indicators: bool = False) -> dict:
        out = self.signal.to_dict(include_indicators=include_indicators)
        out.update(pair=self.pair, timeframe=self.timeframe, status=self.status.value)
        return out
