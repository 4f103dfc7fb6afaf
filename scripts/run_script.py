#!/usr/bin/env python3
"""
CLI runner: load a CSV of OHLCV bars, run a TickScript indicator over it and
print (or export) the plotted series.

Usage:
  python scripts/run_script.py --csv path/to/data.csv --script indicator.tick
  python scripts/run_script.py --csv data.csv --example "Relative Strength Index" --param Length=21
  python scripts/run_script.py --script indicator.tick --validate-only

CSV requirements:
  - Must have columns: open, high, low, close, volume
  - A 'date' or 'timestamp' column, if present, is used as the bar timestamp
"""

from __future__ import annotations

import argparse
import sys

import pandas as pd
from loguru import logger

from tickscript.src.config import configure_logging, load_settings
from tickscript.src.context import OHLCV_COLUMNS
from tickscript.src.engine import TickScriptEngine
from tickscript.src.examples import EXAMPLES, get_example


def _parse_param(text: str):
    if "=" not in text:
        raise argparse.ArgumentTypeError(f"Expected NAME=VALUE, got {text!r}")
    name, raw = text.split("=", 1)
    try:
        value = float(raw)
    except ValueError:
        value = raw
    return name.strip(), value


def _load_bars(path: str) -> pd.DataFrame:
    df = pd.read_csv(path)
    df.rename(columns={c: c.lower() for c in df.columns}, inplace=True)
    if "date" in df.columns and "timestamp" not in df.columns:
        df.rename(columns={"date": "timestamp"}, inplace=True)
    return df


def _read_source(args) -> str:
    if args.source:
        return args.source
    if args.example:
        return get_example(args.example)
    with open(args.script, "r") as f:
        return f.read()


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Run or validate a TickScript indicator")
    parser.add_argument("--csv", help="Path to CSV with columns: date/timestamp (optional), open, high, low, close, volume")
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--script", help="Path to a TickScript source file")
    group.add_argument("--source", help="TickScript source text")
    group.add_argument("--example", help="Name of a bundled example script")
    parser.add_argument("--param", action="append", type=_parse_param, default=[], help="Script parameter NAME=VALUE (repeatable)")
    parser.add_argument("--config", help="YAML settings file (engine: section)")
    parser.add_argument("--validate-only", action="store_true", help="Only check the script syntax")
    parser.add_argument("--export", help="Path to export the plotted series as CSV (optional)")
    parser.add_argument("--list-examples", action="store_true", help="List bundled example scripts and exit")
    args = parser.parse_args(argv)

    if args.list_examples:
        for name in EXAMPLES:
            print(name)
        return 0

    if not (args.script or args.source or args.example):
        parser.error("one of --script, --source or --example is required")

    settings = load_settings(args.config)
    configure_logging(settings)
    engine = TickScriptEngine(settings)

    try:
        source = _read_source(args)
    except (OSError, KeyError) as e:
        print(f"ERROR: {e}")
        return 1

    validation = engine.validate(source)
    if not validation.is_valid:
        print("ERROR: script is invalid:", validation.error)
        return 2
    if args.validate_only:
        print("Script is valid.")
        return 0

    if not args.csv:
        parser.error("--csv is required unless --validate-only is given")

    bars = _load_bars(args.csv)
    missing = [c for c in OHLCV_COLUMNS if c not in bars.columns]
    if missing:
        print(f"ERROR: CSV is missing required columns: {missing}")
        return 1

    parameters = dict(args.param)
    logger.debug("Running script over {} bars with parameters {}", len(bars), parameters)
    result = engine.execute(engine.compile(source), bars, parameters)
    if not result.ok:
        print(f"ERROR: {result.error.kind}: {result.error}")
        return 2

    print(f"=== {result.title or 'Untitled'} ({result.short_title or '-'}) ===")
    print(f"Overlay: {result.overlay}")
    print(f"Bars: {len(result.series)}")
    output = pd.DataFrame({"timestamp": bars["timestamp"] if "timestamp" in bars.columns else bars.index, "value": result.series})
    print(output.tail(10).to_string(index=False))

    if args.export:
        output.to_csv(args.export, index=False)
        print(f"Series exported to {args.export}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
