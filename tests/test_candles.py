"""Tests for candle loading and validation."""

import pandas as pd
import pytest

from vwap_zones.data.candles import load_candles, validate_candles
from vwap_zones.errors import InvalidBarError


def write_csv(path, rows):
    pd.DataFrame(rows, columns=["time", "open", "high", "low", "close", "volume"]).to_csv(path, index=False)
    return path


class TestLoadCandles:
    def test_parses_utc_times(self, tmp_path):
        path = write_csv(tmp_path / "c.csv", [
            ["2025-01-06 14:30:00", 100, 101, 99, 100.5, 10],
            ["2025-01-06 14:35:00", 100.5, 102, 100, 101.5, 20],
        ])
        df = load_candles(path)
        assert len(df) == 2
        assert str(df["time"].dt.tz) == "UTC"
        assert df["time"].iloc[1] == pd.Timestamp("2025-01-06 14:35", tz="UTC")

    def test_out_of_order_rejected(self, tmp_path):
        path = write_csv(tmp_path / "c.csv", [
            ["2025-01-06 14:35:00", 100, 101, 99, 100.5, 10],
            ["2025-01-06 14:30:00", 100.5, 102, 100, 101.5, 20],
        ])
        with pytest.raises(InvalidBarError, match="time order"):
            load_candles(path)

    def test_negative_volume_rejected(self, tmp_path):
        path = write_csv(tmp_path / "c.csv", [["2025-01-06 14:30:00", 100, 101, 99, 100.5, -1]])
        with pytest.raises(InvalidBarError):
            load_candles(path)

    @pytest.mark.parametrize("column", ["high", "close", "volume"])
    def test_missing_values_rejected(self, tmp_path, column):
        rows = [
            ["2025-01-06 14:30:00", 100, 101, 99, 100.5, 10],
            ["2025-01-06 14:35:00", 100.5, 102, 100, 101.5, 20],
        ]
        index = {"high": 2, "close": 4, "volume": 5}[column]
        rows[1][index] = None
        path = write_csv(tmp_path / "c.csv", rows)
        with pytest.raises(InvalidBarError, match="non-finite"):
            load_candles(path)

    def test_missing_columns(self, tmp_path):
        path = tmp_path / "c.csv"
        pd.DataFrame({"time": ["2025-01-06"], "close": [1.0]}).to_csv(path, index=False)
        with pytest.raises(InvalidBarError, match="missing columns"):
            load_candles(path)


class TestValidateCandles:
    def test_summary(self):
        df = pd.DataFrame({
            "time": pd.to_datetime(["2025-01-06 14:30", "2025-01-06 14:30", "2025-01-06 14:35"], utc=True),
            "high": [1.0, 1.0, 1.0],
            "low": [1.0, 1.0, 1.0],
            "close": [1.0, 1.0, 1.0],
            "volume": [0.0, 5.0, 5.0],
        })
        v = validate_candles(df)
        assert v["rows"] == 3
        assert v["duplicates"] == 1
        assert v["zero_volume"] == 1
        assert v["monotonic"] is True
        assert v["valid"] is True

    def test_missing_columns_invalid(self):
        v = validate_candles(pd.DataFrame({"time": [1]}))
        assert v["valid"] is False
        assert "volume" in v["missing_columns"]
