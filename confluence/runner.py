"""Analysis runner — orchestrates config → fetch → analyze → report."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Optional

import yaml

from confluence.market_data import DataSource, build_source
from confluence.strategy import ConfluenceEngine, EngineConfig, TrackedSignal

log = logging.getLogger(__name__)

# Repo root (one level up from confluence/runner.py)
_REPO_ROOT = Path(__file__).resolve().parent.parent
DEFAULT_CONFIG = _REPO_ROOT / "configs" / "default.yaml"


@dataclass(frozen=True)
class RunConfig:
    """Which pairs/timeframes to analyze and where the bars come from."""

    pairs: tuple[str, ...] = ("BTC/USDT",)
    timeframes: tuple[str, ...] = ("1h",)
    limit: int = 300
    source: str = "binance"
    seed: Optional[int] = None
    engine: EngineConfig = field(default_factory=EngineConfig)

    @classmethod
    def from_yaml(cls, path: str | Path) -> RunConfig:
        cfg_path = Path(path)
        if not cfg_path.is_absolute() and not cfg_path.exists():
            cfg_path = _REPO_ROOT / cfg_path

        with open(cfg_path, "r", encoding="utf-8") as f:
            cfg = yaml.safe_load(f) or {}

        defaults = cls()
        return cls(
            pairs=tuple(cfg.get("pairs", defaults.pairs)),
            timeframes=tuple(cfg.get("timeframes", defaults.timeframes)),
            limit=int(cfg.get("limit", defaults.limit)),
            source=cfg.get("source", defaults.source),
            seed=cfg.get("seed", defaults.seed),
            engine=EngineConfig.from_dict(cfg.get("engine")),
        )


def run_analysis(
    cfg: RunConfig,
    source: Optional[DataSource] = None,
    plot_dir: Optional[Path] = None,
) -> list[TrackedSignal]:
    """Analyze every pair × timeframe and return the annotated signals."""
    source = source or build_source(cfg.source, seed=cfg.seed)
    engine = ConfluenceEngine(cfg.engine)

    log.info("Pairs      : %s", ", ".join(cfg.pairs))
    log.info("Timeframes : %s", ", ".join(cfg.timeframes))
    log.info("Source     : %s (%d bars)", cfg.source, cfg.limit)

    results: list[TrackedSignal] = []
    for pair in cfg.pairs:
        for timeframe in cfg.timeframes:
            bars = source.fetch(pair, timeframe, cfg.limit)
            signal = engine.analyze(bars)
            tracked = TrackedSignal.from_signal(signal, pair, timeframe)
            results.append(tracked)

            log.info(
                "%-10s %-4s %-4s price=%.8g  %s",
                pair, timeframe, signal.direction.value,
                signal.current_price, signal.reasoning[0],
            )

            if plot_dir is not None:
                from confluence.reporting.plots import plot_signal

                fname = f"{pair.replace('/', '-')}_{timeframe}.png"
                plot_signal(bars, signal, plot_dir / fname, title=f"{pair} {timeframe}")

    return results


# -- Command-line interface ------------------------------------------------

def configure_logging() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s  %(levelname)-8s  %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )


def add_arguments(p: argparse.ArgumentParser) -> None:
    p.add_argument("--config", default=str(DEFAULT_CONFIG), help="YAML run config (default: %(default)s)")
    p.add_argument("--pair", action="append", help="Override pairs (repeatable)")
    p.add_argument("--timeframe", action="append", help="Override timeframes (repeatable)")
    p.add_argument("--source", choices=["binance", "synthetic"], help="Override data source")
    p.add_argument("--seed", type=int, default=None, help="Seed for synthetic bars")
    p.add_argument("--plot-dir", default=None, help="Write one chart per signal into this directory")
    p.add_argument("--json", action="store_true", help="Print one JSON object per signal to stdout")


def run(args: argparse.Namespace) -> int:
    """Load the config named by ``args``, apply overrides, run, emit signals."""
    cfg = RunConfig.from_yaml(args.config)
    overrides = {}
    if args.pair:
        overrides["pairs"] = tuple(args.pair)
    if args.timeframe:
        overrides["timeframes"] = tuple(args.timeframe)
    if args.source:
        overrides["source"] = args.source
    if args.seed is not None:
        overrides["seed"] = args.seed
    if overrides:
        cfg = replace(cfg, **overrides)

    plot_dir = Path(args.plot_dir) if args.plot_dir else None
    results = run_analysis(cfg, plot_dir=plot_dir)

    if args.json:
        for tracked in results:
            print(json.dumps(tracked.to_dict()))

    return 0


def main(argv: list[str] | None = None) -> int:
    """Stand-alone entry-point for the analyze command."""
    configure_logging()
    p = argparse.ArgumentParser(description="Generate confluence trading signals.")
    add_arguments(p)
    return run(p.parse_args(argv))
