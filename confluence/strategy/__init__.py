from .signal import Direction, Signal, SignalStatus, TrackedSignal
from .base import PriceBar, bars_to_frame, epoch_ms, validate_features
from .config import EngineConfig
from .confluence import ConfluenceEngine, analyze

__all__ = [
    "Direction",
    "Signal",
    "SignalStatus",
    "TrackedSignal",
    "PriceBar",
    "bars_to_frame",
    "epoch_ms",
    "validate_features",
    "EngineConfig",
    "ConfluenceEngine",
    "analyze",
]
