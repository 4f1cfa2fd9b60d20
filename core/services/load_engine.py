"""Training load & readiness risk engine.

Entry points for the two dashboards:

- ``compute_muscle_loads``: per-muscle acute/chronic load, ACWR and zone for
  one athlete (anatomical heatmap).
- ``compute_risk_board``: one flagged row per athlete (risk board table).

Every function here is pure: it receives all samples and configuration and
returns new values, so athletes, muscles and days can be computed in parallel
without coordination. Negative samples are reported back in ``rejected``
rather than raised.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Iterable

import pandas as pd

from core.logging_config import get_logger
from core.services.readiness import ReadinessInputs, readiness_score, readiness_value
from core.services.risk_board import RiskBoardRow, combine_flag, sort_rows
from core.services.training_load import (
    LoadSample,
    WindowConfig,
    compute_acwr,
    group_by_muscle,
    partition_samples,
    whole_body_samples,
    window_sums,
)
from core.services.zones import classify

logger = get_logger(__name__)


@dataclass(frozen=True)
class MuscleLoadResult:
    muscle_key: str
    acute: float
    chronic: float
    acwr: float | None
    zone: str | None
    color: str
    intensity: str | None
    display_color: str


@dataclass
class MuscleLoadReport:
    results: list[MuscleLoadResult]
    rejected: list[LoadSample] = field(default_factory=list)


@dataclass(frozen=True)
class AthleteLoadInputs:
    """Everything the risk board needs for one athlete; empty means no data."""
    athlete_id: int
    name: str
    samples: tuple[LoadSample, ...] = ()
    readiness: ReadinessInputs | None = None
    activity_metric: float | None = None


@dataclass
class RiskBoardReport:
    rows: list[RiskBoardRow]
    rejected: list[LoadSample] = field(default_factory=list)


@dataclass(frozen=True)
class AcwrPoint:
    day: date
    acute: float
    chronic: float
    acwr: float | None
    zone: str | None


def muscle_load_result(muscle_key: str, samples: list[LoadSample], as_of: datetime, config: WindowConfig) -> MuscleLoadResult:
    acute, chronic = window_sums(samples, as_of, config)
    acwr = compute_acwr(acute, chronic)
    zone = classify(acwr)
    return MuscleLoadResult(
        muscle_key=muscle_key,
        acute=acute,
        chronic=chronic,
        acwr=acwr,
        zone=zone.zone,
        color=zone.color,
        intensity=zone.intensity,
        display_color=zone.display_color,
    )


def compute_muscle_loads(samples: Iterable[LoadSample], as_of: datetime, config: WindowConfig) -> MuscleLoadReport:
    """Per-muscle results for one athlete's samples, ordered by muscle key."""
    valid, rejected = partition_samples(samples)
    groups = group_by_muscle(valid)
    results = [muscle_load_result(key, groups[key], as_of, config) for key in sorted(groups)]
    logger.debug(
        "muscle_loads_computed",
        extra={"muscles": len(results), "as_of": as_of.isoformat(), "acute_days": config.acute_days},
    )
    return MuscleLoadReport(results=results, rejected=rejected)


def whole_body_acwr(samples: Iterable[LoadSample], as_of: datetime, config: WindowConfig) -> float | None:
    acute, chronic = window_sums(whole_body_samples(samples), as_of, config)
    return compute_acwr(acute, chronic)


def risk_board_row(athlete: AthleteLoadInputs, samples: list[LoadSample], as_of: datetime, config: WindowConfig) -> RiskBoardRow:
    acwr = whole_body_acwr(samples, as_of, config)
    score = readiness_score(athlete.readiness) if athlete.readiness is not None else None
    readiness = readiness_value(score)
    return RiskBoardRow(
        athlete_id=athlete.athlete_id,
        name=athlete.name,
        readiness=readiness,
        acwr=acwr,
        yesterday_activity_metric=athlete.activity_metric,
        flag=combine_flag(readiness, classify(acwr).zone),
    )


def compute_risk_board(athletes: Iterable[AthleteLoadInputs], as_of: datetime, config: WindowConfig) -> RiskBoardReport:
    """One row per athlete, sorted for the board.

    Athletes with no samples and no readiness still get a row: readiness and
    ACWR are None and the flag resolves to amber.
    """
    rows: list[RiskBoardRow] = []
    rejected: list[LoadSample] = []
    for athlete in athletes:
        valid, bad = partition_samples(athlete.samples)
        rejected.extend(bad)
        rows.append(risk_board_row(athlete, valid, as_of, config))
    return RiskBoardReport(rows=sort_rows(rows), rejected=rejected)


def acwr_trend(samples: Iterable[LoadSample], start: date, end: date, config: WindowConfig) -> list[AcwrPoint]:
    """Daily whole-body acute/chronic/ACWR series from ``start`` to ``end``.

    Loads are totalled per calendar day; day D's acute window covers the
    ``acute_days`` calendar days ending on D (likewise for chronic).
    """
    if end < start:
        return []
    body = [s for s in whole_body_samples(samples) if s.load_value >= 0]
    days = pd.date_range(start - timedelta(days=config.chronic_days - 1), end, freq="D")

    if body:
        frame = pd.DataFrame(
            {
                "day": [pd.Timestamp(s.timestamp.date()) for s in body],
                "load": [float(s.load_value) for s in body],
            }
        )
        daily = frame.groupby("day")["load"].sum()
    else:
        daily = pd.Series(dtype=float)
    daily = daily.reindex(days, fill_value=0.0)

    acute = daily.rolling(config.acute_days, min_periods=1).sum()
    chronic = daily.rolling(config.chronic_days, min_periods=1).sum()

    points: list[AcwrPoint] = []
    for ts in pd.date_range(start, end, freq="D"):
        a = round(float(acute[ts]), 2)
        c = round(float(chronic[ts]), 2)
        ratio = compute_acwr(a, c)
        points.append(AcwrPoint(day=ts.date(), acute=a, chronic=c, acwr=ratio, zone=classify(ratio).zone))
    return points
