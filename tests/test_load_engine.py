"""Tests for the engine entry points: muscle loads, risk board and ACWR trend."""

from __future__ import annotations

from datetime import date, datetime, timedelta

from core.services.load_engine import (
    AthleteLoadInputs,
    acwr_trend,
    compute_muscle_loads,
    compute_risk_board,
    whole_body_acwr,
)
from core.services.muscle_keys import reconcile
from core.services.readiness import ReadinessInputs
from core.services.training_load import LoadSample, WindowConfig

AS_OF = datetime(2026, 3, 1, 12, 0, 0)
DEFAULT = WindowConfig()


def _s(days_ago: float, load: float, muscle: str | None = None, athlete_id: int = 1) -> LoadSample:
    return LoadSample(athlete_id=athlete_id, timestamp=AS_OF - timedelta(days=days_ago), load_value=load, muscle_key=muscle)


def _acute_900_chronic_1200(muscle: str | None = None, athlete_id: int = 1) -> list[LoadSample]:
    # 900 inside the acute window, a further 300 only in the chronic window
    return [
        _s(1, 500, muscle, athlete_id),
        _s(3, 400, muscle, athlete_id),
        _s(14, 300, muscle, athlete_id),
    ]


def _readiness_85() -> ReadinessInputs:
    return ReadinessInputs(hrv=85, sleep_score=85, prior_load=15, resting_hr=15, wellness_score=85)


# ── compute_muscle_loads ─────────────────────────────────────────────────

def test_end_to_end_muscle_scenario():
    report = compute_muscle_loads(_acute_900_chronic_1200("quadriceps"), AS_OF, DEFAULT)
    assert len(report.results) == 1
    result = report.results[0]
    assert result.muscle_key == "quadriceps"
    assert (result.acute, result.chronic) == (900.0, 1200.0)
    assert result.acwr == 0.75
    assert result.zone == "Low"
    assert result.color == "#22c55e"
    assert result.display_color == "#22c55e"
    assert result.intensity is None


def test_muscle_results_sorted_and_whole_body_ignored():
    samples = [_s(1, 10, "quadriceps"), _s(1, 20, "Calves"), _s(2, 300)]
    report = compute_muscle_loads(samples, AS_OF, DEFAULT)
    assert [r.muscle_key for r in report.results] == ["calves", "quadriceps"]


def test_muscle_without_chronic_history_is_undefined():
    samples = [_s(40, 100, "calves")]
    result = compute_muscle_loads(samples, AS_OF, DEFAULT).results[0]
    assert result.acwr is None
    assert result.zone is None
    assert result.color == "#d1d5db"


def test_negative_samples_rejected_not_raised():
    samples = [_s(1, 100, "calves"), _s(2, -50, "calves"), _s(20, 100, "calves")]
    report = compute_muscle_loads(samples, AS_OF, DEFAULT)
    assert [r.load_value for r in report.rejected] == [-50]
    assert report.results[0].acute == 100.0
    assert report.results[0].chronic == 200.0


def test_muscle_loads_idempotent():
    samples = _acute_900_chronic_1200("quadriceps") + [_s(5, 70, "calves")]
    first = compute_muscle_loads(samples, AS_OF, DEFAULT)
    second = compute_muscle_loads(list(reversed(samples)), AS_OF, DEFAULT)
    assert first.results == second.results


def test_muscle_loads_reconcile_with_diagram_ids():
    report = compute_muscle_loads(_acute_900_chronic_1200("rectus_femoris"), AS_OF, DEFAULT)
    recon = reconcile(report.results, ["Rectus-Femoris", "Biceps"])
    assert recon.get("Rectus-Femoris").acwr == 0.75
    assert recon.unmatched == ["Biceps"]


def test_custom_window_config():
    cfg = WindowConfig.from_acute(3)
    samples = [_s(1, 10, "calves"), _s(5, 30, "calves"), _s(11, 60, "calves"), _s(13, 500, "calves")]
    result = compute_muscle_loads(samples, AS_OF, cfg).results[0]
    assert (result.acute, result.chronic) == (10.0, 100.0)


# ── compute_risk_board ───────────────────────────────────────────────────

def test_end_to_end_board_green():
    athlete = AthleteLoadInputs(
        athlete_id=1,
        name="Ava Stone",
        samples=tuple(_acute_900_chronic_1200()),
        readiness=_readiness_85(),
        activity_metric=320.0,
    )
    row = compute_risk_board([athlete], AS_OF, DEFAULT).rows[0]
    assert row.readiness == 85.0
    assert row.acwr == 0.75
    assert row.yesterday_activity_metric == 320.0
    assert row.flag == "green"


def test_athlete_without_data_gets_amber_row():
    report = compute_risk_board([AthleteLoadInputs(athlete_id=9, name="Nobody")], AS_OF, DEFAULT)
    assert len(report.rows) == 1
    row = report.rows[0]
    assert row.readiness is None
    assert row.acwr is None
    assert row.flag == "amber"


def test_board_uses_whole_body_samples_only():
    athlete = AthleteLoadInputs(
        athlete_id=1,
        name="A",
        samples=tuple(_acute_900_chronic_1200("quadriceps")),
        readiness=_readiness_85(),
    )
    row = compute_risk_board([athlete], AS_OF, DEFAULT).rows[0]
    assert row.acwr is None
    assert row.flag == "amber"


def test_board_rows_sorted_by_severity_then_readiness():
    low = ReadinessInputs(hrv=40, sleep_score=40, prior_load=60, resting_hr=60, wellness_score=40)
    athletes = [
        AthleteLoadInputs(athlete_id=1, name="Green", samples=tuple(_acute_900_chronic_1200(athlete_id=1)), readiness=_readiness_85()),
        AthleteLoadInputs(athlete_id=2, name="Tired", samples=tuple(_acute_900_chronic_1200(athlete_id=2)), readiness=low),
        AthleteLoadInputs(athlete_id=3, name="Empty"),
    ]
    rows = compute_risk_board(athletes, AS_OF, DEFAULT).rows
    assert [r.athlete_id for r in rows] == [3, 2, 1]
    assert [r.flag for r in rows] == ["amber", "amber", "green"]


def test_board_reports_rejected_samples():
    athlete = AthleteLoadInputs(athlete_id=1, name="A", samples=(_s(1, -1), _s(2, 10)))
    report = compute_risk_board([athlete], AS_OF, DEFAULT)
    assert len(report.rejected) == 1
    assert report.rows[0].acwr == 1.0


def test_whole_body_acwr_undefined_without_history():
    assert whole_body_acwr([], AS_OF, DEFAULT) is None


# ── acwr_trend ───────────────────────────────────────────────────────────

def test_acwr_trend_daily_series():
    end = AS_OF.date()
    samples = [_s(d, 10.0) for d in range(0, 28)]
    series = acwr_trend(samples, end - timedelta(days=2), end, DEFAULT)
    assert [p.day for p in series] == [end - timedelta(days=2), end - timedelta(days=1), end]
    latest = series[-1]
    assert latest.acute == 70.0
    assert latest.chronic == 280.0
    assert latest.acwr == 0.25
    assert latest.zone == "Low"


def test_acwr_trend_without_samples_is_undefined():
    end = date(2026, 3, 1)
    series = acwr_trend([], end - timedelta(days=1), end, DEFAULT)
    assert len(series) == 2
    assert all(p.acwr is None and p.zone is None for p in series)


def test_acwr_trend_empty_range():
    assert acwr_trend([], date(2026, 3, 2), date(2026, 3, 1), DEFAULT) == []


def test_acwr_trend_ignores_muscle_and_negative_samples():
    end = AS_OF.date()
    samples = [_s(0, 10.0), _s(0, 500.0, "calves"), _s(1, -40.0)]
    latest = acwr_trend(samples, end, end, DEFAULT)[-1]
    assert latest.acute == 10.0
    assert latest.chronic == 10.0
