from __future__ import annotations

import datetime as dt

from sqlalchemy import (
    CheckConstraint,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class Athlete(Base):
    __tablename__ = "athletes"
    id: Mapped[int] = mapped_column(primary_key=True)
    first_name: Mapped[str] = mapped_column(String(80))
    last_name: Mapped[str] = mapped_column(String(80))
    status: Mapped[str] = mapped_column(String(16), default="active")
    created_at: Mapped[dt.datetime] = mapped_column(DateTime, default=dt.datetime.utcnow)

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class LoadSampleRecord(Base):
    """Append-only load sample; muscle_key is NULL for whole-body load."""

    __tablename__ = "load_samples"
    __table_args__ = (
        CheckConstraint("load_value >= 0", name="ck_load_samples_non_negative"),
        Index("ix_load_samples_athlete_recorded", "athlete_id", "recorded_at"),
    )
    id: Mapped[int] = mapped_column(primary_key=True)
    athlete_id: Mapped[int] = mapped_column(ForeignKey("athletes.id"), index=True)
    muscle_key: Mapped[str | None] = mapped_column(String(80))
    recorded_at: Mapped[dt.datetime] = mapped_column(DateTime)
    load_value: Mapped[float] = mapped_column(Float)
    source: Mapped[str] = mapped_column(String(40), default="session")
    created_at: Mapped[dt.datetime] = mapped_column(DateTime, default=dt.datetime.utcnow)


class ReadinessCheckIn(Base):
    """Daily readiness inputs, each already normalised to 0-100 (NULL = unknown)."""

    __tablename__ = "readiness_checkins"
    __table_args__ = (UniqueConstraint("athlete_id", "day", name="uq_readiness_checkins_athlete_day"),)
    id: Mapped[int] = mapped_column(primary_key=True)
    athlete_id: Mapped[int] = mapped_column(ForeignKey("athletes.id"), index=True)
    day: Mapped[dt.date] = mapped_column(Date)
    hrv: Mapped[float | None] = mapped_column(Float)
    sleep_score: Mapped[float | None] = mapped_column(Float)
    prior_load: Mapped[float | None] = mapped_column(Float)
    resting_hr: Mapped[float | None] = mapped_column(Float)
    wellness_score: Mapped[float | None] = mapped_column(Float)


class ActivityMetric(Base):
    """Daily supplementary activity metric (high-speed running distance, metres)."""

    __tablename__ = "activity_metrics"
    __table_args__ = (UniqueConstraint("athlete_id", "day", name="uq_activity_metrics_athlete_day"),)
    id: Mapped[int] = mapped_column(primary_key=True)
    athlete_id: Mapped[int] = mapped_column(ForeignKey("athletes.id"), index=True)
    day: Mapped[dt.date] = mapped_column(Date)
    hsr_m: Mapped[float] = mapped_column(Float, default=0.0)
