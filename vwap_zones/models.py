"""Bar input and zone output records."""

from dataclasses import asdict, dataclass
from typing import Any, Mapping

ZONE_COLUMNS = (
    "vwap", "ub1", "lb1", "ub2", "lb2",
    "vwap_top", "vwap_bot",
    "ub1_top", "ub1_bot",
    "lb1_top", "lb1_bot",
    "ub2_top", "ub2_bot",
    "lb2_top", "lb2_bot",
)


@dataclass(frozen=True)
class Bar:
    """One OHLCV step from the data feed (open is not needed)."""

    timestamp: Any  # datetime, pd.Timestamp or epoch milliseconds
    high: float
    low: float
    close: float
    volume: float

    @property
    def typical_price(self) -> float:
        """HLC3 source price."""
        return (self.high + self.low + self.close) / 3.0

    @classmethod
    def from_row(cls, row: Mapping) -> "Bar":
        """Build a bar from a dict or DataFrame row.

        The time value is read from ``time`` and falls back to ``timestamp``.
        """
        ts = row["time"] if "time" in row else row["timestamp"]
        return cls(
            timestamp=ts,
            high=float(row["high"]),
            low=float(row["low"]),
            close=float(row["close"]),
            volume=float(row["volume"]),
        )


@dataclass(frozen=True)
class ZoneRecord:
    """VWAP, the two band pairs and a fixed-width zone around each line."""

    vwap: float
    ub1: float
    lb1: float
    ub2: float
    lb2: float
    vwap_top: float
    vwap_bot: float
    ub1_top: float
    ub1_bot: float
    lb1_top: float
    lb1_bot: float
    ub2_top: float
    ub2_bot: float
    lb2_top: float
    lb2_bot: float

    @classmethod
    def from_lines(
        cls,
        vwap: float,
        ub1: float,
        lb1: float,
        ub2: float,
        lb2: float,
        zone_points: float,
    ) -> "ZoneRecord":
        """Derive every zone edge as line +/- zone_points."""
        return cls(
            vwap=vwap, ub1=ub1, lb1=lb1, ub2=ub2, lb2=lb2,
            vwap_top=vwap + zone_points, vwap_bot=vwap - zone_points,
            ub1_top=ub1 + zone_points, ub1_bot=ub1 - zone_points,
            lb1_top=lb1 + zone_points, lb1_bot=lb1 - zone_points,
            ub2_top=ub2 + zone_points, ub2_bot=ub2 - zone_points,
            lb2_top=lb2 + zone_points, lb2_bot=lb2 - zone_points,
        )

    def to_dict(self) -> dict:
        """Fields in ZONE_COLUMNS order."""
        return asdict(self)
