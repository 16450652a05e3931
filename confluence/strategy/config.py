"""Immutable policy settings for the confluence engine."""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path

import yaml


@dataclass(frozen=True)
class EngineConfig:
    """Indicator periods and risk policy read from the ``engine:`` YAML block."""

    ema_fast_period: int = 50
    ema_slow_period: int = 200
    macd_fast_period: int = 12
    macd_slow_period: int = 26
    macd_signal_period: int = 9
    rsi_period: int = 14
    atr_period: int = 14
    atr_multiplier: float = 2.0        # stop distance in ATRs
    risk_reward_ratio: float = 1.5     # target distance / stop distance
    rsi_buy_threshold: float = 55.0
    rsi_sell_threshold: float = 45.0

    def __post_init__(self) -> None:
        periods = {
            f.name: getattr(self, f.name) for f in fields(self) if f.name.endswith("_period")
        }
        for name, value in periods.items():
            if value < 1:
                raise ValueError(f"{name} must be >= 1, got {value}")
        if self.ema_fast_period >= self.ema_slow_period:
            raise ValueError("ema_fast_period must be smaller than ema_slow_period")
        if self.macd_fast_period >= self.macd_slow_period:
            raise ValueError("macd_fast_period must be smaller than macd_slow_period")
        if self.atr_multiplier <= 0:
            raise ValueError("atr_multiplier must be positive")
        if self.risk_reward_ratio <= 0:
            raise ValueError("risk_reward_ratio must be positive")
        if self.rsi_sell_threshold >= self.rsi_buy_threshold:
            raise ValueError("rsi_sell_threshold must be below rsi_buy_threshold")

    @property
    def min_bars(self) -> int:
        """Bars needed before rules are evaluated; the slow EMA dominates."""
        return self.ema_slow_period

    @classmethod
    def from_dict(cls, params: dict | None) -> EngineConfig:
        params = dict(params or {})
        known = {f.name for f in fields(cls)}
        unknown = set(params) - known
        if unknown:
            raise ValueError(
                f"Unknown engine config keys {sorted(unknown)}. "
                f"Valid: {sorted(known)}"
            )
        return cls(**params)

    @classmethod
    def from_yaml(cls, path: str | Path) -> EngineConfig:
        """Build a config from the ``engine`` block of a YAML file."""
        with open(path, "r", encoding="utf-8") as f:
            cfg = yaml.safe_load(f) or {}
        return cls.from_dict(cfg.get("engine"))
