"""Tests for session keys, the session tracker and timestamp normalisation."""

from datetime import datetime

import numpy as np
import pandas as pd
import pytest
import pytz

from vwap_zones.indicators.session import SessionTracker, session_key
from vwap_zones.utils.timezone_utils import to_session_tz


class TestToSessionTz:
    def test_naive_datetime_assumed_utc(self):
        dt = to_session_tz(datetime(2025, 1, 6, 23, 30), "UTC")
        assert dt.tzinfo is not None
        assert (dt.day, dt.hour) == (6, 23)

    def test_converts_to_named_zone(self):
        dt = to_session_tz(pd.Timestamp("2025-01-06 03:00", tz="UTC"), "America/New_York")
        assert (dt.month, dt.day, dt.hour) == (1, 5, 22)

    def test_epoch_milliseconds(self):
        dt = to_session_tz(1735689600000, "UTC")  # 2025-01-01 00:00 UTC
        assert (dt.year, dt.month, dt.day, dt.hour) == (2025, 1, 1, 0)

    def test_datetime64(self):
        dt = to_session_tz(np.datetime64("2025-01-06T12:00:00"), "Asia/Tokyo")
        assert (dt.day, dt.hour) == (6, 21)

    def test_local_zone_when_none(self):
        dt = to_session_tz(pd.Timestamp("2025-01-06 12:00", tz="UTC"))
        assert dt.tzinfo is not None
        assert dt == pytz.utc.localize(datetime(2025, 1, 6, 12, 0))

    def test_unsupported_type(self):
        with pytest.raises(TypeError):
            to_session_tz("2025-01-06")


class TestSessionKey:
    def test_calendar_date(self):
        ts = pd.Timestamp("2025-03-15 10:00", tz="UTC")
        assert session_key(ts, "calendar_date", "UTC") == (2025, 3, 15)

    def test_day_of_month(self):
        ts = pd.Timestamp("2025-03-15 10:00", tz="UTC")
        assert session_key(ts, "day_of_month", "UTC") == 15

    def test_unknown_mode(self):
        with pytest.raises(ValueError):
            session_key(pd.Timestamp("2025-03-15", tz="UTC"), "hourly", "UTC")


class TestSessionTracker:
    def test_first_bar_starts_session(self):
        tracker = SessionTracker(tz_name="UTC")
        assert tracker.last_key is None
        assert tracker.check(pd.Timestamp("2025-01-06 09:00", tz="UTC")) is True
        assert tracker.last_key == (2025, 1, 6)

    def test_same_session(self):
        tracker = SessionTracker(tz_name="UTC")
        tracker.check(pd.Timestamp("2025-01-06 09:00", tz="UTC"))
        assert tracker.check(pd.Timestamp("2025-01-06 17:00", tz="UTC")) is False

    def test_new_session(self):
        tracker = SessionTracker(tz_name="UTC")
        tracker.check(pd.Timestamp("2025-01-06 23:59", tz="UTC"))
        assert tracker.check(pd.Timestamp("2025-01-07 00:00", tz="UTC")) is True
        assert tracker.last_key == (2025, 1, 7)

    def test_legacy_mode_misses_month_gap(self):
        """Day-of-month keys cannot tell Jan 15 from Feb 15."""
        tracker = SessionTracker(mode="day_of_month", tz_name="UTC")
        tracker.check(pd.Timestamp("2025-01-15 12:00", tz="UTC"))
        assert tracker.check(pd.Timestamp("2025-02-15 12:00", tz="UTC")) is False

    def test_reset(self):
        tracker = SessionTracker(tz_name="UTC")
        ts = pd.Timestamp("2025-01-06 09:00", tz="UTC")
        tracker.check(ts)
        tracker.reset()
        assert tracker.check(ts) is True
