"""Session boundary detection for session-anchored indicators.

A session is a calendar day in the configured time zone. The legacy
"day_of_month" key only compares the day number, so two bars on the 15th of
different months look like the same session when nothing arrives in between.
"calendar_date" keys on (year, month, day) and is the default.
"""

import logging
from typing import Hashable, Optional

from vwap_zones.utils.timezone_utils import to_session_tz

logger = logging.getLogger(__name__)


def session_key(ts, mode: str = "calendar_date", tz_name: Optional[str] = None) -> Hashable:
    """Session identifier for a timestamp.

    Returns:
        (year, month, day) for "calendar_date", the day number for "day_of_month".
    """
    dt = to_session_tz(ts, tz_name)
    if mode == "calendar_date":
        return (dt.year, dt.month, dt.day)
    if mode == "day_of_month":
        return dt.day
    raise ValueError(f"Unknown session key mode: {mode!r}")


class SessionTracker:
    """Remembers the current session and flags transitions.

    Bars must arrive in non-decreasing time order; an out-of-order bar is
    simply compared against the last key.
    """

    def __init__(self, mode: str = "calendar_date", tz_name: Optional[str] = None):
        self.mode = mode
        self.tz_name = tz_name
        self.last_key: Optional[Hashable] = None

    def check(self, ts) -> bool:
        """Record the session of `ts`. True on the first bar or a session change."""
        key = session_key(ts, self.mode, self.tz_name)
        if self.last_key is not None and key == self.last_key:
            return False
        logger.debug("Session change %s -> %s", self.last_key, key)
        self.last_key = key
        return True

    def reset(self) -> None:
        self.last_key = None
