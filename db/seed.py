"""Demo squad seeder for local dashboards.

Creates a handful of athletes with up to 28 days of whole-body and per-muscle load,
today's readiness inputs and yesterday's high-speed running. One athlete
has only eight days of history so their ACWR lands in the Normal zone.

Run with:  python -m db.seed
"""
from __future__ import annotations

from datetime import date, datetime, time, timedelta

from sqlalchemy import select
from sqlalchemy.orm import Session

from core.db import Base, get_engine, session_scope
from core.logging_config import get_logger, setup_logging
from core.models import ActivityMetric, Athlete, LoadSampleRecord, ReadinessCheckIn

logger = get_logger(__name__)

MUSCLES = ("quadriceps", "hamstrings", "calves", "gluteus_maximus", "rectus_femoris")

# name, daily load, days of history, readiness inputs
DEMO_SQUAD: list[tuple[str, str, float, int, dict[str, float | None]]] = [
    ("Ava", "Stone", 40.0, 28, {"hrv": 90, "sleep_score": 85, "prior_load": 20, "resting_hr": 15, "wellness_score": 90}),
    ("Ben", "Okafor", 40.0, 8, {"hrv": 80, "sleep_score": 80, "prior_load": 40, "resting_hr": 30, "wellness_score": 80}),
    ("Chen", "Li", 35.0, 28, {"hrv": 40, "sleep_score": 50, "prior_load": 70, "resting_hr": 60, "wellness_score": 45}),
    ("Dana", "Ruiz", 30.0, 28, {"hrv": None, "sleep_score": None, "prior_load": None, "resting_hr": None, "wellness_score": None}),
]


def seed_demo(s: Session, today: date) -> list[int]:
    """Insert the demo squad; returns athlete ids. Idempotent on athlete names."""
    ids: list[int] = []
    for first, last, load, history_days, readiness in DEMO_SQUAD:
        athlete = s.execute(
            select(Athlete).where(Athlete.first_name == first, Athlete.last_name == last)
        ).scalar_one_or_none()
        if athlete is not None:
            ids.append(athlete.id)
            continue
        athlete = Athlete(first_name=first, last_name=last)
        s.add(athlete)
        s.flush()
        ids.append(athlete.id)

        for offset in range(history_days):
            day = today - timedelta(days=offset)
            stamp = datetime.combine(day, time(hour=7))
            s.add(LoadSampleRecord(athlete_id=athlete.id, recorded_at=stamp, load_value=load))
            for idx, muscle in enumerate(MUSCLES):
                s.add(
                    LoadSampleRecord(
                        athlete_id=athlete.id,
                        muscle_key=muscle,
                        recorded_at=stamp,
                        load_value=round(load * (0.5 + idx * 0.1), 2),
                    )
                )

        s.add(ReadinessCheckIn(athlete_id=athlete.id, day=today, **readiness))
        s.add(ActivityMetric(athlete_id=athlete.id, day=today - timedelta(days=1), hsr_m=150.0 + 50.0 * len(ids)))

    logger.info("demo_squad_seeded", extra={"athlete_ids": ids})
    return ids


def main() -> None:
    setup_logging()
    Base.metadata.create_all(bind=get_engine())
    with session_scope() as s:
        seed_demo(s, date.today())


if __name__ == "__main__":
    main()
