"""Session VWAP with two standard deviation bands and fixed-width zones.

VWAP = sum(typical_price * volume) / sum(volume)
Variance = sum(tp^2 * volume) / sum(volume) - VWAP^2

Sums reset at the first bar of every session (calendar day by default).
Each of the five lines (vwap, ub1, lb1, ub2, lb2) gets a zone of
+/- zone_points around it.
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np
import pandas as pd

from vwap_zones.config import VWAPZonesConfig
from vwap_zones.errors import InvalidBarError, ZeroVolumeError
from vwap_zones.indicators.session import SessionTracker
from vwap_zones.models import ZONE_COLUMNS, Bar, ZoneRecord

logger = logging.getLogger(__name__)


@dataclass
class SessionState:
    """Running sums for the current session. All three cover the same bars."""

    sum_pv: float = 0.0   # sum(tp * volume)
    sum_v: float = 0.0    # sum(volume)
    sum_pv2: float = 0.0  # sum(tp^2 * volume), for variance

    def reset(self) -> None:
        self.sum_pv = 0.0
        self.sum_v = 0.0
        self.sum_pv2 = 0.0

    def fold(self, tp: float, volume: float) -> None:
        self.sum_pv += tp * volume
        self.sum_v += volume
        self.sum_pv2 += tp * tp * volume

    def stats(self) -> Tuple[float, float]:
        """Return (vwap, stdev) for the session so far.

        Raises:
            ZeroVolumeError: if no volume has traded this session.
        """
        if self.sum_v == 0:
            raise ZeroVolumeError()
        vwap = self.sum_pv / self.sum_v
        # Float error can push E[X^2] - E[X]^2 slightly below zero
        variance = self.sum_pv2 / self.sum_v - vwap * vwap
        stdev = math.sqrt(max(variance, 0.0))
        return vwap, stdev


class VWAPZonesEngine:
    """Bar-by-bar VWAP zones for a single time series.

    One engine per series. Not safe to drive from more than one caller.
    """

    def __init__(
        self,
        band1_mult: float = 1.0,
        band2_mult: float = 2.0,
        zone_points: float = 5.0,
        session_key: str = "calendar_date",
        timezone: Optional[str] = None,
    ):
        self.config = VWAPZonesConfig(
            band1_mult=band1_mult,
            band2_mult=band2_mult,
            zone_points=zone_points,
            session_key=session_key,
            timezone=timezone,
        )
        self.tracker = SessionTracker(self.config.session_key, self.config.timezone)
        self.state = SessionState()

    @classmethod
    def from_config(cls, config: VWAPZonesConfig) -> "VWAPZonesEngine":
        return cls(**config.to_dict())

    def update(self, bar: Bar) -> ZoneRecord:
        """Fold one bar into the session and return its zone record.

        Raises:
            InvalidBarError: non-finite price or volume, or negative volume;
                state is left untouched.
            ZeroVolumeError: the session has no volume yet. The bar is still
                folded, so later bars with volume produce normal records.
        """
        for name in ("high", "low", "close", "volume"):
            value = getattr(bar, name)
            if not math.isfinite(value):
                raise InvalidBarError(f"{name} must be finite, got {value} at {bar.timestamp}")
        if bar.volume < 0:
            raise InvalidBarError(f"volume must be >= 0, got {bar.volume} at {bar.timestamp}")

        if self.tracker.check(bar.timestamp):
            self.state.reset()

        self.state.fold(bar.typical_price, bar.volume)

        try:
            vwap, stdev = self.state.stats()
        except ZeroVolumeError:
            raise ZeroVolumeError(
                f"session {self.tracker.last_key} has zero volume at {bar.timestamp}",
                timestamp=bar.timestamp,
                session_key=self.tracker.last_key,
            ) from None

        cfg = self.config
        band1 = stdev * cfg.band1_mult
        band2 = stdev * cfg.band2_mult
        return ZoneRecord.from_lines(
            vwap=vwap,
            ub1=vwap + band1,
            lb1=vwap - band1,
            ub2=vwap + band2,
            lb2=vwap - band2,
            zone_points=cfg.zone_points,
        )

    def reset(self) -> None:
        """Forget the current session entirely (start of a new series)."""
        self.tracker.reset()
        self.state.reset()


def compute_vwap_zones(
    df: pd.DataFrame,
    band1_mult: float = 1.0,
    band2_mult: float = 2.0,
    zone_points: float = 5.0,
    session_key: str = "calendar_date",
    timezone: Optional[str] = None,
    time_col: str = "time",
) -> pd.DataFrame:
    """Compute VWAP zones for a whole candle DataFrame.

    Args:
        df: DataFrame with columns: time, high, low, close, volume
        band1_mult: Stdev multiplier for band 1.
        band2_mult: Stdev multiplier for band 2.
        zone_points: Zone half-width around each line.
        session_key: "calendar_date" or "day_of_month".
        timezone: IANA zone for the session date. None = host local.
        time_col: Name of the timestamp column.

    Returns:
        DataFrame with the ZONE_COLUMNS, same index as `df`. Rows for bars
        where the session has no volume yet, or whose values are invalid
        (non-finite or negative volume), are NaN.
    """
    missing = [c for c in (time_col, "high", "low", "close", "volume") if c not in df.columns]
    if missing:
        raise InvalidBarError(f"Missing columns: {', '.join(missing)}")

    engine = VWAPZonesEngine(
        band1_mult=band1_mult,
        band2_mult=band2_mult,
        zone_points=zone_points,
        session_key=session_key,
        timezone=timezone,
    )

    n = len(df)
    out = np.full((n, len(ZONE_COLUMNS)), np.nan)

    times = df[time_col]
    if not pd.api.types.is_numeric_dtype(times):
        times = pd.to_datetime(times)
        if times.dt.tz is None:
            times = times.dt.tz_localize("UTC")
    times = times.tolist()
    high = df["high"].to_numpy(dtype=float)
    low = df["low"].to_numpy(dtype=float)
    close = df["close"].to_numpy(dtype=float)
    volume = df["volume"].to_numpy(dtype=float)

    zero_volume_bars = 0
    invalid_bars = 0
    for i in range(n):
        bar = Bar(timestamp=times[i], high=high[i], low=low[i], close=close[i], volume=volume[i])
        try:
            record = engine.update(bar)
        except ZeroVolumeError as e:
            logger.debug("No VWAP for bar %d: %s", i, e)
            zero_volume_bars += 1
            continue
        except InvalidBarError as e:
            logger.debug("Skipped bar %d: %s", i, e)
            invalid_bars += 1
            continue
        out[i] = [getattr(record, c) for c in ZONE_COLUMNS]

    if zero_volume_bars:
        logger.warning("%d of %d bars had no session volume; emitted NaN", zero_volume_bars, n)
    if invalid_bars:
        logger.warning("%d of %d bars had invalid price or volume; emitted NaN", invalid_bars, n)

    return pd.DataFrame(out, columns=list(ZONE_COLUMNS), index=df.index)
