"""Indicator parameters: defaults, validation and YAML loading.

Parameter specs mirror the host charting platform's number inputs
(default, minimum, step). The minimum is a UI recommendation only; the hard
contract is that every multiplier and the zone width are positive and finite.
"""

import logging
import math
from dataclasses import dataclass, fields
from pathlib import Path
from typing import NamedTuple, Optional, Union

import pytz
import yaml

from vwap_zones.errors import InvalidConfigurationError

logger = logging.getLogger(__name__)

SESSION_KEY_MODES = ("calendar_date", "day_of_month")


class ParamSpec(NamedTuple):
    default: float
    minimum: float
    step: float


PARAM_SPECS = {
    "band1_mult": ParamSpec(1.0, 0.1, 0.1),
    "band2_mult": ParamSpec(2.0, 0.1, 0.1),
    "zone_points": ParamSpec(5.0, 0.1, 0.1),
}


@dataclass(frozen=True)
class VWAPZonesConfig:
    """Immutable indicator settings, validated once at construction.

    Attributes:
        band1_mult: Stdev multiplier for the inner band pair.
        band2_mult: Stdev multiplier for the outer band pair. Not required to
            exceed band1_mult; a smaller value just draws band 2 inside band 1.
        zone_points: Half-width of the shaded zone around every line, in
            price points.
        session_key: "calendar_date" resets on (year, month, day) changes.
            "day_of_month" reproduces the legacy day-number-only check.
        timezone: IANA zone used to derive the session date. None uses the
            host's local time zone.
    """

    band1_mult: float = PARAM_SPECS["band1_mult"].default
    band2_mult: float = PARAM_SPECS["band2_mult"].default
    zone_points: float = PARAM_SPECS["zone_points"].default
    session_key: str = "calendar_date"
    timezone: Optional[str] = None

    def __post_init__(self):
        for name, spec in PARAM_SPECS.items():
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise InvalidConfigurationError(f"{name} must be a number, got {value!r}")
            if not math.isfinite(value) or value <= 0:
                raise InvalidConfigurationError(f"{name} must be positive and finite, got {value}")
            if value < spec.minimum:
                logger.warning("%s=%s is below the recommended minimum %s", name, value, spec.minimum)

        if self.session_key not in SESSION_KEY_MODES:
            raise InvalidConfigurationError(
                f"session_key must be one of {SESSION_KEY_MODES}, got {self.session_key!r}"
            )

        if self.timezone is not None:
            try:
                pytz.timezone(self.timezone)
            except pytz.UnknownTimeZoneError:
                raise InvalidConfigurationError(f"Unknown timezone: {self.timezone!r}") from None

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "VWAPZonesConfig":
        """Build from a plain mapping (e.g. a YAML section). Missing keys take defaults."""
        data = dict(data or {})
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise InvalidConfigurationError(f"Unknown config keys: {', '.join(unknown)}")
        return cls(**data)

    def to_dict(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def load_yaml(path: Union[str, Path]) -> dict:
    """Read a YAML config file. An empty file gives an empty dict."""
    with open(path) as f:
        raw = yaml.safe_load(f) or {}
    if not isinstance(raw, dict):
        raise InvalidConfigurationError(f"{path}: expected a mapping at top level")
    return raw


def load_config(path: Union[str, Path], section: str = "vwap_zones") -> VWAPZonesConfig:
    """Load indicator settings from the given section of a YAML file."""
    raw = load_yaml(path)
    return VWAPZonesConfig.from_dict(raw.get(section))
