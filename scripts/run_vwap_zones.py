#!/usr/bin/env python3
"""Compute VWAP zones for a candle CSV.

Usage:
    python -m scripts.run_vwap_zones --input data/candles.csv
    python -m scripts.run_vwap_zones --config config/default.yaml --zone-points 2.5
    python -m scripts.run_vwap_zones --input data/candles.csv --timezone America/New_York --plot results/zones.png
"""

import argparse
import dataclasses
import logging
import os
import sys
from pathlib import Path

import numpy as np
import pandas as pd

from vwap_zones.config import SESSION_KEY_MODES, VWAPZonesConfig, load_config, load_yaml
from vwap_zones.data.candles import load_candles, validate_candles
from vwap_zones.errors import VWAPZonesError
from vwap_zones.indicators.vwap_zones import compute_vwap_zones
from vwap_zones.report.chart import plot_vwap_zones


def setup_logging(logs_dir: str, level: str = "INFO") -> None:
    """Configure logging to console and file."""
    os.makedirs(logs_dir, exist_ok=True)
    log_file = os.path.join(logs_dir, "vwap_zones.log")

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    # Console handler — requested level
    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(logging.Formatter(
        "%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    ))
    root_logger.addHandler(console)

    # File handler — DEBUG level
    file_handler = logging.FileHandler(log_file)
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(
        "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    ))
    root_logger.addHandler(file_handler)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Compute session VWAP bands and zones")
    parser.add_argument("--config", default="config/default.yaml", help="Config file path")
    parser.add_argument("--input", default=None, help="Candle CSV (time, high, low, close, volume)")
    parser.add_argument("--output", default=None, help="Output CSV path")
    parser.add_argument("--band1-mult", type=float, default=None, help="Override band 1 multiplier")
    parser.add_argument("--band2-mult", type=float, default=None, help="Override band 2 multiplier")
    parser.add_argument("--zone-points", type=float, default=None, help="Override zone half-width")
    parser.add_argument("--session-key", choices=SESSION_KEY_MODES, default=None)
    parser.add_argument("--timezone", default=None, help="IANA timezone for session dates")
    parser.add_argument("--plot", default=None, help="Save chart PNG to this path")
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    args = parser.parse_args(argv)

    # Load config
    config_path = Path(args.config)
    raw = load_yaml(config_path) if config_path.exists() else {}

    setup_logging(raw.get("logs_dir", "logs"), args.log_level)
    logger = logging.getLogger(__name__)
    if not config_path.exists():
        logger.info("Config %s not found, using defaults", config_path)

    data_cfg = raw.get("data") or {}
    input_path = args.input or data_cfg.get("input")
    output_path = args.output or data_cfg.get("output", "results/vwap_zones.csv")
    if not input_path:
        parser.error("no input CSV given (--input or data.input in config)")

    overrides = {
        "band1_mult": args.band1_mult,
        "band2_mult": args.band2_mult,
        "zone_points": args.zone_points,
        "session_key": args.session_key,
        "timezone": args.timezone,
    }

    try:
        cfg = load_config(config_path) if config_path.exists() else VWAPZonesConfig()
        cfg = dataclasses.replace(cfg, **{k: v for k, v in overrides.items() if v is not None})
        df = load_candles(input_path)
    except (VWAPZonesError, OSError) as e:
        logger.error("%s", e)
        sys.exit(1)

    validation = validate_candles(df)
    logger.info("Date range: %s to %s", *validation["date_range"])
    if validation["duplicates"] > 0:
        logger.warning("%d duplicate timestamps", validation["duplicates"])

    zones = compute_vwap_zones(df, time_col="time", **cfg.to_dict())
    result = pd.concat([df, zones], axis=1)

    Path(output_path).parent.mkdir(parents=True, exist_ok=True)
    result.to_csv(output_path, index=False)

    valid = ~np.isnan(zones["vwap"].to_numpy())
    print(f"\n{'='*60}")
    print(f"  VWAP ZONES: {input_path}")
    print(f"{'='*60}")
    print(f"  Bars:            {len(df)}")
    print(f"  Bars with VWAP:  {int(valid.sum())}")
    print(f"  Band mults:      {cfg.band1_mult} / {cfg.band2_mult}")
    print(f"  Zone points:     {cfg.zone_points}")
    print(f"  Session key:     {cfg.session_key} ({cfg.timezone or 'local time'})")
    if valid.any():
        last = zones[valid].iloc[-1]
        print(f"  Last VWAP:       {last['vwap']:.5f}")
        print(f"  Last band 1:     {last['lb1']:.5f} .. {last['ub1']:.5f}")
        print(f"  Last band 2:     {last['lb2']:.5f} .. {last['ub2']:.5f}")
    print(f"  Output:          {output_path}")
    print(f"{'='*60}\n")

    if args.plot:
        plot_path = plot_vwap_zones(df, zones, args.plot, title=f"VWAP Zones - {Path(input_path).stem}")
        print(f"Chart saved to: {plot_path}")


if __name__ == "__main__":
    main()
