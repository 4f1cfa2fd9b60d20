from __future__ import annotations

from datetime import date as dt_date
from datetime import datetime as dt_datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class HealthResponse(BaseModel):
    status: str
    message: str
    cache_backend: str
    query_count: int
    slow_queries: int


class LoadSampleOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    athlete_id: int
    muscle_key: Optional[str] = None
    recorded_at: dt_datetime
    load_value: float
    source: str


class LoadSampleBatchResponse(BaseModel):
    created: int
    items: list[LoadSampleOut]


class ReadinessCheckInOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    athlete_id: int
    day: dt_date
    hrv: Optional[float] = None
    sleep_score: Optional[float] = None
    prior_load: Optional[float] = None
    resting_hr: Optional[float] = None
    wellness_score: Optional[float] = None


class ActivityMetricOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    athlete_id: int
    day: dt_date
    hsr_m: float


class RejectedSampleOut(BaseModel):
    athlete_id: int
    recorded_at: dt_datetime
    load_value: float
    muscle_key: Optional[str] = None


class MuscleLoadOut(BaseModel):
    muscle_key: str
    label: str
    acute: float
    chronic: float
    acwr: Optional[float] = None
    zone: Optional[str] = None
    tone: Optional[str] = None
    color: str
    intensity: Optional[str] = None
    display_color: str


class MuscleLoadsResponse(BaseModel):
    athlete_id: int
    as_of: dt_datetime
    acute_days: int
    chronic_days: int
    items: list[MuscleLoadOut]
    rejected: list[RejectedSampleOut]


class MuscleMapResponse(BaseModel):
    athlete_id: int
    as_of: dt_datetime
    regions: dict[str, MuscleLoadOut]
    unmatched: list[str]
    unused: list[str]


class AcwrPointOut(BaseModel):
    day: dt_date
    acute: float
    chronic: float
    acwr: Optional[float] = None
    zone: Optional[str] = None


class AcwrTrendResponse(BaseModel):
    athlete_id: int
    acute_days: int
    chronic_days: int
    latest_acwr: Optional[float] = None
    gauge_percent: Optional[float] = None
    series: list[AcwrPointOut]


class RiskBoardRowOut(BaseModel):
    athlete_id: int
    name: str
    readiness: Optional[float] = None
    readiness_badge: Optional[str] = None
    acwr: Optional[float] = None
    yesterday_activity_metric: Optional[float] = None
    flag: str


class RiskBoardResponse(BaseModel):
    as_of: dt_datetime
    rows: list[RiskBoardRowOut]
    rejected: list[RejectedSampleOut]
