"""Database adapter that gathers engine inputs for an athlete as of an instant.

Only samples inside the chronic window and not newer than ``as_of`` are read,
so a historical ``as_of`` reproduces the same result after new samples land.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Iterable

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from core.models import ActivityMetric, Athlete, LoadSampleRecord, ReadinessCheckIn
from core.services.load_engine import AthleteLoadInputs
from core.services.readiness import ReadinessInputs
from core.services.training_load import LoadSample, WindowConfig


def _to_sample(row: LoadSampleRecord) -> LoadSample:
    return LoadSample(
        athlete_id=row.athlete_id,
        timestamp=row.recorded_at,
        load_value=float(row.load_value),
        muscle_key=row.muscle_key,
    )


def load_samples(
    s: Session,
    athlete_id: int,
    since: datetime,
    until: datetime,
    whole_body: bool | None = None,
) -> list[LoadSample]:
    """Samples recorded in ``[since, until]``; ``whole_body`` filters by sample kind."""
    stmt = select(LoadSampleRecord).where(
        LoadSampleRecord.athlete_id == athlete_id,
        LoadSampleRecord.recorded_at >= since,
        LoadSampleRecord.recorded_at <= until,
    )
    if whole_body is True:
        stmt = stmt.where(LoadSampleRecord.muscle_key.is_(None))
    elif whole_body is False:
        stmt = stmt.where(LoadSampleRecord.muscle_key.is_not(None))
    rows = s.execute(stmt.order_by(LoadSampleRecord.recorded_at, LoadSampleRecord.id)).scalars().all()
    return [_to_sample(r) for r in rows]


def window_samples(s: Session, athlete_id: int, as_of: datetime, config: WindowConfig, whole_body: bool | None = None) -> list[LoadSample]:
    return load_samples(s, athlete_id, as_of - config.chronic, as_of, whole_body=whole_body)


def readiness_inputs_for_day(s: Session, athlete_id: int, day: date) -> ReadinessInputs | None:
    row = s.execute(
        select(ReadinessCheckIn).where(ReadinessCheckIn.athlete_id == athlete_id, ReadinessCheckIn.day == day)
    ).scalar_one_or_none()
    if row is None:
        return None
    return ReadinessInputs(
        hrv=row.hrv,
        sleep_score=row.sleep_score,
        prior_load=row.prior_load,
        resting_hr=row.resting_hr,
        wellness_score=row.wellness_score,
    )


def activity_metric_for_day(s: Session, athlete_id: int, day: date) -> float | None:
    return s.execute(
        select(func.sum(ActivityMetric.hsr_m)).where(ActivityMetric.athlete_id == athlete_id, ActivityMetric.day == day)
    ).scalar_one_or_none()


def athlete_exists(s: Session, athlete_id: int) -> bool:
    return s.execute(select(Athlete.id).where(Athlete.id == athlete_id)).scalar_one_or_none() is not None


def collect_board_inputs(s: Session, athlete_ids: Iterable[int], as_of: datetime, config: WindowConfig) -> list[AthleteLoadInputs]:
    """Engine inputs for each requested athlete, in request order.

    Unknown athlete ids still produce an (empty) entry so the board shows a row.
    """
    ids = list(dict.fromkeys(athlete_ids))
    names = {
        a.id: a.display_name
        for a in s.execute(select(Athlete).where(Athlete.id.in_(ids))).scalars().all()
    } if ids else {}
    yesterday = as_of.date() - timedelta(days=1)

    inputs: list[AthleteLoadInputs] = []
    for athlete_id in ids:
        inputs.append(
            AthleteLoadInputs(
                athlete_id=athlete_id,
                name=names.get(athlete_id, f"Athlete {athlete_id}"),
                samples=tuple(window_samples(s, athlete_id, as_of, config, whole_body=True)),
                readiness=readiness_inputs_for_day(s, athlete_id, as_of.date()),
                activity_metric=activity_metric_for_day(s, athlete_id, yesterday),
            )
        )
    return inputs
