import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from anyio import from_thread
from fastapi import APIRouter, HTTPException, Query, Request, Response, status
from fastapi.concurrency import run_in_threadpool
from fastapi_cache import FastAPICache
from fastapi_cache.decorator import cache
from sqlalchemy import select

from api.ratelimit import limiter
from api.schemas import (
    AcwrPointOut,
    AcwrTrendResponse,
    ActivityMetricOut,
    HealthResponse,
    LoadSampleBatchResponse,
    LoadSampleOut,
    MuscleLoadOut,
    MuscleLoadsResponse,
    MuscleMapResponse,
    ReadinessCheckInOut,
    RejectedSampleOut,
    RiskBoardResponse,
    RiskBoardRowOut,
)
from core.config import get_settings
from core.db import get_query_stats, session_scope
from core.errors import WindowConfigError
from core.models import ActivityMetric, Athlete, LoadSampleRecord, ReadinessCheckIn
from core.services.load_engine import MuscleLoadResult, acwr_trend, compute_muscle_loads, compute_risk_board
from core.services.load_sources import athlete_exists, collect_board_inputs, load_samples, window_samples
from core.services.muscle_keys import pretty_name, reconcile
from core.services.readiness import readiness_badge
from core.services.risk_board import zone_tone
from core.services.training_load import LoadSample, WindowConfig
from core.services.zones import gauge_percent
from core.validators import ActivityMetricInput, LoadSampleBatchInput, MuscleMapRequest, ReadinessCheckInInput, RiskBoardRequest

logger = logging.getLogger(__name__)
settings = get_settings()
router = APIRouter(prefix="/api/v1")

# Cached read models derived from stored load samples.
READ_MODEL_NAMESPACES = ("muscle-loads", "acwr-trend")


def _naive_utc(value: Optional[datetime]) -> datetime:
    """Stored timestamps are naive UTC; align request instants with them."""
    if value is None:
        return datetime.utcnow()
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def _window_config(window_days: int | None = None) -> WindowConfig:
    try:
        return settings.window_config(window_days)
    except WindowConfigError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc


def _invalidate_read_models() -> None:
    """Drop cached muscle-load and trend responses. Called from sync routes on the worker thread."""
    for namespace in READ_MODEL_NAMESPACES:
        from_thread.run(FastAPICache.clear, namespace)
    logger.info("read_models_invalidated", extra={"namespaces": list(READ_MODEL_NAMESPACES)})


def _require_athlete(s, athlete_id: int) -> None:
    if not athlete_exists(s, athlete_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Athlete not found")


def _muscle_out(result: MuscleLoadResult) -> MuscleLoadOut:
    return MuscleLoadOut(
        muscle_key=result.muscle_key,
        label=pretty_name(result.muscle_key),
        acute=round(result.acute, 2),
        chronic=round(result.chronic, 2),
        acwr=round(result.acwr, 3) if result.acwr is not None else None,
        zone=result.zone,
        tone=zone_tone(result.zone),
        color=result.color,
        intensity=result.intensity,
        display_color=result.display_color,
    )


def _rejected_out(samples: list[LoadSample]) -> list[RejectedSampleOut]:
    return [
        RejectedSampleOut(athlete_id=r.athlete_id, recorded_at=r.timestamp, load_value=r.load_value, muscle_key=r.muscle_key)
        for r in samples
    ]


@router.get("/health", response_model=HealthResponse, tags=["system"])
def health(request: Request):
    stats = get_query_stats()
    if stats.total < 5:
        state, message = "OK", f"Warmup ({stats.total} queries)"
    elif stats.slow > 10:
        state, message = "WARN", "Slow query threshold exceeded"
    else:
        state, message = "OK", "Nominal"
    return HealthResponse(
        status=state,
        message=message,
        cache_backend=getattr(request.app.state, "cache_backend", "none"),
        query_count=stats.total,
        slow_queries=stats.slow,
    )


@router.post("/load-samples", response_model=LoadSampleBatchResponse, status_code=201, tags=["load"])
@limiter.limit(settings.ingest_rate_limit)
def create_load_samples(request: Request, response: Response, body: LoadSampleBatchInput):
    del request, response
    athlete_ids = {item.athlete_id for item in body.samples}
    with session_scope() as s:
        known = set(s.execute(select(Athlete.id).where(Athlete.id.in_(athlete_ids))).scalars().all())
        missing = sorted(athlete_ids - known)
        if missing:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Unknown athlete ids: {missing}")
        rows = [
            LoadSampleRecord(
                athlete_id=item.athlete_id,
                muscle_key=item.muscle_key,
                recorded_at=_naive_utc(item.recorded_at),
                load_value=item.load_value,
                source=item.source,
            )
            for item in body.samples
        ]
        s.add_all(rows)
        s.flush()
        logger.info("load_samples_persisted", extra={"count": len(rows), "athlete_ids": sorted(athlete_ids)})
        out = LoadSampleBatchResponse(created=len(rows), items=[LoadSampleOut.model_validate(r) for r in rows])
    _invalidate_read_models()
    return out


@router.post("/readiness", response_model=ReadinessCheckInOut, status_code=201, tags=["readiness"])
def upsert_readiness(body: ReadinessCheckInInput):
    with session_scope() as s:
        _require_athlete(s, body.athlete_id)
        row = s.execute(
            select(ReadinessCheckIn).where(ReadinessCheckIn.athlete_id == body.athlete_id, ReadinessCheckIn.day == body.day)
        ).scalar_one_or_none()
        if row is None:
            row = ReadinessCheckIn(athlete_id=body.athlete_id, day=body.day)
            s.add(row)
        for name in ("hrv", "sleep_score", "prior_load", "resting_hr", "wellness_score"):
            setattr(row, name, getattr(body, name))
        s.flush()
        return ReadinessCheckInOut.model_validate(row)


@router.post("/activity-metrics", response_model=ActivityMetricOut, status_code=201, tags=["readiness"])
def upsert_activity_metric(body: ActivityMetricInput):
    with session_scope() as s:
        _require_athlete(s, body.athlete_id)
        row = s.execute(
            select(ActivityMetric).where(ActivityMetric.athlete_id == body.athlete_id, ActivityMetric.day == body.day)
        ).scalar_one_or_none()
        if row is None:
            row = ActivityMetric(athlete_id=body.athlete_id, day=body.day)
            s.add(row)
        row.hsr_m = body.hsr_m
        s.flush()
        return ActivityMetricOut.model_validate(row)


def _muscle_loads_model(athlete_id: int, window_days: int, instant: datetime):
    config = _window_config(window_days)
    with session_scope() as s:
        _require_athlete(s, athlete_id)
        samples = window_samples(s, athlete_id, instant, config, whole_body=False)
    report = compute_muscle_loads(samples, instant, config)
    return MuscleLoadsResponse(
        athlete_id=athlete_id,
        as_of=instant,
        acute_days=config.acute_days,
        chronic_days=config.chronic_days,
        items=[_muscle_out(r) for r in report.results],
        rejected=_rejected_out(report.rejected),
    )


_cached_muscle_loads = cache(expire=settings.cache_ttl_seconds, namespace="muscle-loads")(_muscle_loads_model)


@router.get("/athletes/{athlete_id}/muscle-loads", response_model=MuscleLoadsResponse, tags=["load"])
async def get_muscle_loads(
    athlete_id: int,
    window_days: int = Query(settings.acute_days, ge=1, le=90),
    as_of: Optional[datetime] = None,
):
    # only pinned instants are cached; "now" moves between calls
    if as_of is None:
        return await run_in_threadpool(_muscle_loads_model, athlete_id, window_days, _naive_utc(None))
    return await _cached_muscle_loads(athlete_id=athlete_id, window_days=window_days, instant=_naive_utc(as_of))


@router.post("/athletes/{athlete_id}/muscle-map", response_model=MuscleMapResponse, tags=["load"])
def map_muscle_regions(athlete_id: int, body: MuscleMapRequest):
    config = _window_config(body.window_days)
    instant = _naive_utc(body.as_of)
    with session_scope() as s:
        _require_athlete(s, athlete_id)
        samples = window_samples(s, athlete_id, instant, config, whole_body=False)
    report = compute_muscle_loads(samples, instant, config)
    recon = reconcile(report.results, body.region_ids)
    return MuscleMapResponse(
        athlete_id=athlete_id,
        as_of=instant,
        regions={key: _muscle_out(result) for key, result in recon.lookup.items()},
        unmatched=recon.unmatched,
        unused=recon.unused,
    )


def _acwr_trend_model(athlete_id: int, days: int, instant: datetime):
    config = _window_config()
    end = instant.date()
    start = end - timedelta(days=days - 1)
    since = datetime.combine(start - timedelta(days=config.chronic_days - 1), datetime.min.time())
    with session_scope() as s:
        _require_athlete(s, athlete_id)
        samples = load_samples(s, athlete_id, since, instant, whole_body=True)
    series = acwr_trend(samples, start, end, config)
    latest = series[-1].acwr if series else None
    return AcwrTrendResponse(
        athlete_id=athlete_id,
        acute_days=config.acute_days,
        chronic_days=config.chronic_days,
        latest_acwr=round(latest, 3) if latest is not None else None,
        gauge_percent=gauge_percent(latest),
        series=[
            AcwrPointOut(
                day=p.day,
                acute=p.acute,
                chronic=p.chronic,
                acwr=round(p.acwr, 3) if p.acwr is not None else None,
                zone=p.zone,
            )
            for p in series
        ],
    )


_cached_acwr_trend = cache(expire=settings.cache_ttl_seconds, namespace="acwr-trend")(_acwr_trend_model)


@router.get("/athletes/{athlete_id}/acwr-trend", response_model=AcwrTrendResponse, tags=["load"])
async def get_acwr_trend(
    athlete_id: int,
    days: int = Query(28, ge=1, le=365),
    as_of: Optional[datetime] = None,
):
    if as_of is None:
        return await run_in_threadpool(_acwr_trend_model, athlete_id, days, _naive_utc(None))
    return await _cached_acwr_trend(athlete_id=athlete_id, days=days, instant=_naive_utc(as_of))


@router.post("/risk-board", response_model=RiskBoardResponse, tags=["risk-board"])
@limiter.limit(settings.board_rate_limit)
def post_risk_board(request: Request, response: Response, body: RiskBoardRequest):
    del request, response
    config = _window_config()
    instant = _naive_utc(body.as_of)
    with session_scope() as s:
        inputs = collect_board_inputs(s, body.athlete_ids, instant, config)
    report = compute_risk_board(inputs, instant, config)
    logger.info(
        "risk_board_computed",
        extra={"athletes": len(report.rows), "red": sum(1 for r in report.rows if r.flag == "red")},
    )
    return RiskBoardResponse(
        as_of=instant,
        rows=[
            RiskBoardRowOut(
                athlete_id=r.athlete_id,
                name=r.name,
                readiness=r.readiness,
                readiness_badge=readiness_badge(r.readiness),
                acwr=round(r.acwr, 3) if r.acwr is not None else None,
                yesterday_activity_metric=r.yesterday_activity_metric,
                flag=r.flag,
            )
            for r in report.rows
        ],
        rejected=_rejected_out(report.rejected),
    )
