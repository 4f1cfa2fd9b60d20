"""ACWR zone classification and heatmap colouring.

Two independent outputs come from one ACWR value:

- the zone (Low / Normal / High) with its base colour,
- the alert intensity (low / medium / high) that drives pulsing emphasis and
  overrides the colour for the two strongest tiers.

An undefined ACWR (no chronic history) gets neither a zone nor an intensity.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from core.logging_config import get_logger

logger = get_logger(__name__)

ZONE_LOW = "Low"
ZONE_NORMAL = "Normal"
ZONE_HIGH = "High"
ZONES = (ZONE_LOW, ZONE_NORMAL, ZONE_HIGH)

ZONE_COLORS: dict[str, str] = {
    ZONE_LOW: "#22c55e",
    ZONE_NORMAL: "#fec15f",
    ZONE_HIGH: "#ef4444",
}
UNDEFINED_COLOR = "#d1d5db"

INTENSITY_LOW = "low"
INTENSITY_MEDIUM = "medium"
INTENSITY_HIGH = "high"

# Stronger colours replace the zone colour for the top two intensity tiers.
INTENSITY_COLOR_OVERRIDES: dict[str, str] = {
    INTENSITY_HIGH: "#DC2626",
    INTENSITY_MEDIUM: "#EA580C",
}

LOW_MAX = 0.8
NORMAL_MAX = 1.3
INTENSITY_LOW_MIN = 1.1
INTENSITY_HIGH_MIN = 1.5

GAUGE_MIN = 0.5
GAUGE_MAX = 2.0


@dataclass(frozen=True)
class ZoneResult:
    zone: str | None
    color: str            # base zone colour
    intensity: str | None
    display_color: str    # colour after intensity override


def _is_undefined(acwr: float | None) -> bool:
    return acwr is None or math.isnan(acwr)


def classify_zone(acwr: float | None) -> str | None:
    """Map an ACWR to Low/Normal/High; None for an undefined ratio."""
    if _is_undefined(acwr):
        return None
    if acwr < 0:
        logger.warning("negative_acwr", extra={"acwr": acwr})
        return ZONE_LOW
    if acwr <= LOW_MAX:
        return ZONE_LOW
    if acwr <= NORMAL_MAX:
        return ZONE_NORMAL
    return ZONE_HIGH


def alert_intensity(acwr: float | None) -> str | None:
    if _is_undefined(acwr):
        return None
    if acwr > INTENSITY_HIGH_MIN:
        return INTENSITY_HIGH
    if acwr > NORMAL_MAX:
        return INTENSITY_MEDIUM
    if acwr > INTENSITY_LOW_MIN:
        return INTENSITY_LOW
    return None


def zone_color(zone: str | None) -> str:
    return ZONE_COLORS.get(zone, UNDEFINED_COLOR) if zone else UNDEFINED_COLOR


def classify(acwr: float | None) -> ZoneResult:
    """Zone, base colour, alert intensity and final display colour for an ACWR."""
    zone = classify_zone(acwr)
    intensity = alert_intensity(acwr)
    color = zone_color(zone)
    return ZoneResult(
        zone=zone,
        color=color,
        intensity=intensity,
        display_color=INTENSITY_COLOR_OVERRIDES.get(intensity, color) if intensity else color,
    )


def gauge_percent(acwr: float | None) -> float | None:
    """Position of an ACWR on the 0.5-2.0 gauge as 0-100."""
    if _is_undefined(acwr):
        return None
    pct = (acwr - GAUGE_MIN) / (GAUGE_MAX - GAUGE_MIN) * 100
    return round(min(100.0, max(0.0, pct)), 1)
