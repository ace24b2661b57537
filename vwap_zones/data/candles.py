"""Candle CSV loading and validation."""

import logging
from pathlib import Path
from typing import Union

import numpy as np
import pandas as pd

from vwap_zones.errors import InvalidBarError

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("time", "high", "low", "close", "volume")


def validate_candles(df: pd.DataFrame) -> dict:
    """Summarise a candle DataFrame.

    Returns:
        Dict with rows, date_range, duplicates, zero_volume, monotonic, valid
    """
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing or df.empty:
        return {
            "rows": len(df),
            "date_range": (None, None),
            "duplicates": 0,
            "zero_volume": 0,
            "negative_volume": 0,
            "monotonic": True,
            "missing_columns": missing,
            "valid": False,
        }

    times = df["time"]
    monotonic = bool(times.is_monotonic_increasing)
    negative_volume = int((df["volume"] < 0).sum())
    return {
        "rows": len(df),
        "date_range": (times.iloc[0], times.iloc[-1]),
        "duplicates": int(times.duplicated().sum()),
        "zero_volume": int((df["volume"] == 0).sum()),
        "negative_volume": negative_volume,
        "monotonic": monotonic,
        "missing_columns": [],
        "valid": monotonic and negative_volume == 0,
    }


def load_candles(path: Union[str, Path]) -> pd.DataFrame:
    """Load candles from CSV. Times are parsed as UTC.

    Bars must be in non-decreasing time order; session detection has no
    defence against out-of-order bars, so they are rejected here.
    """
    df = pd.read_csv(path)
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise InvalidBarError(f"{path}: missing columns {', '.join(missing)}")

    df["time"] = pd.to_datetime(df["time"], utc=True)

    if not df["time"].is_monotonic_increasing:
        raise InvalidBarError(f"{path}: bars are not in time order")
    values = df[["high", "low", "close", "volume"]].to_numpy(dtype=float)
    if not np.isfinite(values).all():
        raise InvalidBarError(f"{path}: missing or non-finite price or volume")
    if (df["volume"] < 0).any():
        raise InvalidBarError(f"{path}: negative volume")

    logger.info("Loaded %d candles from %s", len(df), path)
    return df.reset_index(drop=True)
