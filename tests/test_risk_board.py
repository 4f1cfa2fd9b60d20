"""Tests for risk board flag combination and ordering."""

from __future__ import annotations

from core.config import get_settings
from core.services.risk_board import (
    FLAG_SEVERITY,
    ZONE_TONE,
    RiskBoardRow,
    combine_flag,
    sort_rows,
    zone_tone,
)


def _row(athlete_id: int, flag: str, readiness: float | None) -> RiskBoardRow:
    return RiskBoardRow(
        athlete_id=athlete_id,
        name=f"A{athlete_id}",
        readiness=readiness,
        acwr=None,
        yesterday_activity_metric=None,
        flag=flag,
    )


class TestCombineFlag:
    def test_high_zone_always_red(self):
        assert combine_flag(100.0, "High") == "red"
        assert combine_flag(None, "High") == "red"
        assert combine_flag(10.0, "High") == "red"

    def test_unknown_readiness_is_amber(self):
        assert combine_flag(None, "Low") == "amber"
        assert combine_flag(None, "Normal") == "amber"
        assert combine_flag(None, None) == "amber"

    def test_low_readiness_is_amber(self):
        assert combine_flag(59.9, "Low") == "amber"

    def test_green_requires_high_readiness_and_defined_zone(self):
        assert combine_flag(80.0, "Low") == "green"
        assert combine_flag(95.0, "Normal") == "green"

    def test_undefined_zone_never_green(self):
        assert combine_flag(95.0, None) == "amber"

    def test_middle_readiness_is_amber(self):
        assert combine_flag(60.0, "Low") == "amber"
        assert combine_flag(79.9, "Normal") == "amber"


class TestSortRows:
    def test_severity_descending(self):
        rows = [_row(1, "green", 90), _row(2, "red", 90), _row(3, "amber", 90)]
        assert [r.flag for r in sort_rows(rows)] == ["red", "amber", "green"]

    def test_readiness_ascending_within_flag(self):
        rows = [_row(1, "amber", 75), _row(2, "amber", 40), _row(3, "amber", 65)]
        assert [r.athlete_id for r in sort_rows(rows)] == [2, 3, 1]

    def test_stable_on_full_ties(self):
        rows = [_row(1, "red", 50), _row(2, "amber", 90), _row(3, "red", 50)]
        ordered = sort_rows(rows)
        assert [r.athlete_id for r in ordered] == [1, 3, 2]

    def test_unknown_readiness_first_within_flag(self):
        rows = [_row(1, "amber", 30), _row(2, "amber", None), _row(3, "red", 90)]
        assert [r.athlete_id for r in sort_rows(rows)] == [3, 2, 1]

    def test_does_not_mutate_input(self):
        rows = [_row(1, "green", 90), _row(2, "red", 50)]
        sort_rows(rows)
        assert [r.athlete_id for r in rows] == [1, 2]


def test_flag_severity_order():
    assert FLAG_SEVERITY["red"] > FLAG_SEVERITY["amber"] > FLAG_SEVERITY["green"]


def test_zone_tone_mapping_is_explicit():
    assert ZONE_TONE == {"Low": "green", "Normal": "amber", "High": "red"}
    assert zone_tone(None) is None


def test_flag_uses_configured_readiness_cut_offs(monkeypatch):
    monkeypatch.setenv("READINESS_GREEN_MIN", "90")
    monkeypatch.setenv("READINESS_AMBER_MIN", "70")
    get_settings.cache_clear()
    try:
        assert combine_flag(85.0, "Normal") == "amber"
        assert combine_flag(92.0, "Low") == "green"
        assert combine_flag(65.0, "Low") == "amber"
    finally:
        get_settings.cache_clear()
