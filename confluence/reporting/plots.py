"""Chart rendering for a signal and the bars it was computed from."""

from __future__ import annotations

import logging
from pathlib import Path

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402
import pandas as pd  # noqa: E402

from confluence.strategy.signal import Direction, Signal  # noqa: E402

log = logging.getLogger(__name__)

_COLORS = {
    Direction.BUY: "#2e8b57",
    Direction.SELL: "#c0392b",
    Direction.HOLD: "#7f8c8d",
}


def plot_signal(bars: pd.DataFrame, signal: Signal, out_path: str | Path, title: str = "") -> None:
    """Plot close price with EMAs, MACD and RSI panels and save as PNG.

    Parameters
    ----------
    bars : pd.DataFrame
        Must contain ``time`` and ``close`` columns, aligned with
        ``signal.indicator_data``.
    signal : Signal
        Signal whose snapshot and trade levels are drawn.
    out_path : str | Path
        Destination file path (e.g. ``plots/BTC-USDT_1h.png``).
    """
    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)

    data = signal.indicator_data
    t = bars["time"]

    fig, (ax_price, ax_macd, ax_rsi) = plt.subplots(
        3, 1, figsize=(14, 9), sharex=True, gridspec_kw={"height_ratios": [3, 1, 1]},
    )

    ax_price.plot(t, bars["close"], linewidth=0.8, color="#d4af37", label="close")
    for col in [c for c in data.columns if c.startswith("ema_")]:
        ax_price.plot(t, data[col], linewidth=0.8, label=col)
    if signal.direction is not Direction.HOLD:
        ax_price.axhline(signal.entry_price, color=_COLORS[signal.direction], linewidth=0.8)
        ax_price.axhline(signal.stop_loss, color="#c0392b", linestyle="--", linewidth=0.8)
        ax_price.axhline(signal.take_profit, color="#2e8b57", linestyle="--", linewidth=0.8)
    ax_price.set_title(f"{title}  {signal.direction.value}".strip())
    ax_price.set_ylabel("Price")
    ax_price.legend(loc="upper left", fontsize=8)

    macd_cols = [c for c in data.columns if c.startswith("macd_")]
    for col in macd_cols:
        if col.endswith("_hist"):
            ax_macd.plot(t, data[col], linewidth=0.6, color="#95a5a6", label=col)
        else:
            ax_macd.plot(t, data[col], linewidth=0.8, label=col)
    ax_macd.axhline(0, color="black", linewidth=0.5)
    ax_macd.set_ylabel("MACD")

    for col in [c for c in data.columns if c.startswith("rsi_")]:
        ax_rsi.plot(t, data[col], linewidth=0.8, color="#8e44ad")
    ax_rsi.set_ylim(0, 100)
    ax_rsi.set_ylabel("RSI")
    ax_rsi.set_xlabel("Time")

    for ax in (ax_price, ax_macd, ax_rsi):
        ax.grid(True, alpha=0.3)
    fig.tight_layout()
    fig.savefig(out_path, dpi=100)
    plt.close(fig)

    log.info("Saved signal plot → %s", out_path)
