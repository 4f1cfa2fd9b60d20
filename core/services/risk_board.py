"""Risk board flags: readiness and whole-body ACWR combined into red/amber/green.

Flags and ACWR zones are separate vocabularies. The per-muscle zone is
ACWR-only while the board flag also weighs readiness, so the two are linked
only through the explicit ``ZONE_TONE`` table below.
"""

from __future__ import annotations

from dataclasses import dataclass

from core.services.readiness import readiness_thresholds
from core.services.zones import ZONE_HIGH, ZONE_LOW, ZONE_NORMAL

FLAG_RED = "red"
FLAG_AMBER = "amber"
FLAG_GREEN = "green"

# Higher = more severe; board sorts descending.
FLAG_SEVERITY: dict[str, int] = {
    FLAG_RED: 3,
    FLAG_AMBER: 2,
    FLAG_GREEN: 1,
}

# Display tone for a per-muscle zone. Not used to derive board flags.
ZONE_TONE: dict[str, str] = {
    ZONE_LOW: FLAG_GREEN,
    ZONE_NORMAL: FLAG_AMBER,
    ZONE_HIGH: FLAG_RED,
}

@dataclass(frozen=True)
class RiskBoardRow:
    athlete_id: int
    name: str
    readiness: float | None
    acwr: float | None
    yesterday_activity_metric: float | None
    flag: str


def zone_tone(zone: str | None) -> str | None:
    return ZONE_TONE.get(zone) if zone else None


def combine_flag(readiness: float | None, acwr_zone: str | None) -> str:
    """Resolve the board flag; the first matching rule wins.

    1. High ACWR zone -> red, whatever the readiness.
    2. Unknown readiness or readiness below the amber cut-off (60) -> amber.
    3. Readiness at or above the green cut-off (80) with a Normal or Low zone -> green.
    4. Anything else (including an undefined zone) -> amber.
    """
    if acwr_zone == ZONE_HIGH:
        return FLAG_RED
    green_min, amber_min = readiness_thresholds()
    if readiness is None or readiness < amber_min:
        return FLAG_AMBER
    if readiness >= green_min and acwr_zone in (ZONE_NORMAL, ZONE_LOW):
        return FLAG_GREEN
    return FLAG_AMBER


def _sort_key(row: RiskBoardRow) -> tuple[int, int, float]:
    # Unknown readiness sorts ahead of known values within the same flag.
    known = 0 if row.readiness is None else 1
    return (-FLAG_SEVERITY[row.flag], known, row.readiness or 0.0)


def sort_rows(rows: list[RiskBoardRow]) -> list[RiskBoardRow]:
    """Severity descending, then readiness ascending; ties keep input order."""
    return sorted(rows, key=_sort_key)
