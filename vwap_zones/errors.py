"""Error types for the VWAP zones indicator."""

from typing import Any, Optional


class VWAPZonesError(Exception):
    """Base class for all indicator errors."""


class InvalidConfigurationError(VWAPZonesError, ValueError):
    """Raised at construction when a multiplier, zone width or option is invalid."""


class InvalidBarError(VWAPZonesError, ValueError):
    """Raised for bars the engine refuses to fold (e.g. negative volume).

    Raised before any session state is touched.
    """


class ZeroVolumeError(VWAPZonesError):
    """VWAP is undefined because the session has no volume yet.

    Attributes:
        timestamp: Timestamp of the bar that triggered the error.
        session_key: Session the bar belongs to.
    """

    def __init__(
        self,
        message: str = "session volume is zero, VWAP undefined",
        timestamp: Any = None,
        session_key: Optional[Any] = None,
    ):
        super().__init__(message)
        self.timestamp = timestamp
        self.session_key = session_key
