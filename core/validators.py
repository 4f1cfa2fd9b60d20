"""Pydantic validation models for all data entry points."""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from core.services.muscle_keys import normalize_muscle_id


class LoadSampleInput(BaseModel):
    athlete_id: int = Field(gt=0)
    recorded_at: datetime
    load_value: float = Field(ge=0)
    muscle_key: Optional[str] = Field(default=None, min_length=1, max_length=80)
    source: str = Field(default="session", max_length=40)

    @field_validator("muscle_key")
    @classmethod
    def canonical_muscle_key(cls, v):
        if v is None:
            return v
        key = normalize_muscle_id(v.strip())
        if not key:
            raise ValueError("muscle_key must not be blank")
        return key


class LoadSampleBatchInput(BaseModel):
    samples: list[LoadSampleInput] = Field(min_length=1, max_length=5000)


class ReadinessCheckInInput(BaseModel):
    athlete_id: int = Field(gt=0)
    day: date
    hrv: Optional[float] = Field(default=None, ge=0, le=100)
    sleep_score: Optional[float] = Field(default=None, ge=0, le=100)
    prior_load: Optional[float] = Field(default=None, ge=0, le=100)
    resting_hr: Optional[float] = Field(default=None, ge=0, le=100)
    wellness_score: Optional[float] = Field(default=None, ge=0, le=100)


class ActivityMetricInput(BaseModel):
    athlete_id: int = Field(gt=0)
    day: date
    hsr_m: float = Field(ge=0)


class RiskBoardRequest(BaseModel):
    athlete_ids: list[int] = Field(min_length=1, max_length=500)
    as_of: Optional[datetime] = None

    @field_validator("athlete_ids")
    @classmethod
    def positive_ids(cls, v):
        if any(i <= 0 for i in v):
            raise ValueError("athlete_ids must be positive")
        return v


class MuscleMapRequest(BaseModel):
    region_ids: list[str] = Field(min_length=1, max_length=200)
    window_days: Optional[int] = Field(default=None, ge=1, le=90)
    as_of: Optional[datetime] = None
