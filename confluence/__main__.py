"""Unified entry point for the confluence package: ``python -m confluence <command>``."""

from __future__ import annotations

import argparse
import sys

from confluence import runner


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="confluence")
    commands = p.add_subparsers(dest="command", metavar="<command>", required=True)

    analyze = commands.add_parser("analyze", help="Fetch bars and print confluence signals")
    runner.add_arguments(analyze)
    analyze.set_defaults(handler=runner.run)

    return p


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    runner.configure_logging()
    return args.handler(args)


if __name__ == "__main__":
    sys.exit(main())
