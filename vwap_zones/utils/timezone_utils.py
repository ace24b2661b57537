"""Timestamp normalisation for session detection."""

from datetime import datetime
from typing import Optional

import numpy as np
import pandas as pd
import pytz


def to_session_tz(ts, tz_name: Optional[str] = None) -> datetime:
    """Convert a bar timestamp to an aware datetime in the session time zone.

    Args:
        ts: datetime / pd.Timestamp / np.datetime64, or epoch milliseconds
            (int or float) as delivered by charting host clocks.
        tz_name: IANA zone name. None means the host's local time zone.

    Returns:
        Timezone-aware datetime.
    """
    if isinstance(ts, np.datetime64):
        ts = pd.Timestamp(ts)
    if isinstance(ts, pd.Timestamp):
        ts = ts.to_pydatetime()
    if isinstance(ts, (int, float, np.integer, np.floating)) and not isinstance(ts, bool):
        dt = datetime.fromtimestamp(float(ts) / 1000.0, tz=pytz.utc)
    elif isinstance(ts, datetime):
        dt = ts
        if dt.tzinfo is None:
            # Assume UTC if naive
            dt = pytz.utc.localize(dt)
    else:
        raise TypeError(f"Unsupported timestamp type: {type(ts).__name__}")

    if tz_name is None:
        return dt.astimezone()
    return dt.astimezone(pytz.timezone(tz_name))
