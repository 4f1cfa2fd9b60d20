"""Tests for the database adapter feeding the engine, using the demo squad."""

from __future__ import annotations

from datetime import date, datetime, timedelta

from core.services.load_engine import compute_muscle_loads, compute_risk_board
from core.services.load_sources import (
    activity_metric_for_day,
    athlete_exists,
    collect_board_inputs,
    readiness_inputs_for_day,
    window_samples,
)
from core.services.training_load import WindowConfig

TODAY = date(2026, 3, 1)
AS_OF = datetime(2026, 3, 1, 12, 0)
DEFAULT = WindowConfig()


def _seed():
    from core.db import session_scope
    from db.seed import seed_demo

    with session_scope() as s:
        return seed_demo(s, TODAY)


def test_seed_is_idempotent(sqlite_db):
    first = _seed()
    second = _seed()
    assert first == second
    assert len(first) == 4


def test_window_samples_split_by_kind(sqlite_db):
    from core.db import session_scope

    ava = _seed()[0]
    with session_scope() as s:
        body = window_samples(s, ava, AS_OF, DEFAULT, whole_body=True)
        muscles = window_samples(s, ava, AS_OF, DEFAULT, whole_body=False)
    assert len(body) == 28
    assert all(x.muscle_key is None for x in body)
    assert {x.muscle_key for x in muscles} == {"quadriceps", "hamstrings", "calves", "gluteus_maximus", "rectus_femoris"}


def test_window_samples_respect_as_of(sqlite_db):
    from core.db import session_scope

    ava = _seed()[0]
    earlier = AS_OF - timedelta(days=10)
    with session_scope() as s:
        body = window_samples(s, ava, earlier, DEFAULT, whole_body=True)
    assert body
    assert max(x.timestamp for x in body) <= earlier


def test_muscle_loads_from_database(sqlite_db):
    from core.db import session_scope

    ben = _seed()[1]
    with session_scope() as s:
        samples = window_samples(s, ben, AS_OF, DEFAULT, whole_body=False)
    results = {r.muscle_key: r for r in compute_muscle_loads(samples, AS_OF, DEFAULT).results}
    # eight days of history: seven in the acute window, eight in the chronic window
    assert results["quadriceps"].acwr == 0.875
    assert results["quadriceps"].zone == "Normal"


def test_readiness_and_activity_lookups(sqlite_db):
    from core.db import session_scope

    ids = _seed()
    with session_scope() as s:
        assert readiness_inputs_for_day(s, ids[0], TODAY).hrv == 90
        assert readiness_inputs_for_day(s, ids[0], TODAY - timedelta(days=1)) is None
        assert activity_metric_for_day(s, ids[0], TODAY - timedelta(days=1)) == 200.0
        assert activity_metric_for_day(s, ids[0], TODAY) is None
        assert athlete_exists(s, ids[0])
        assert not athlete_exists(s, 999)


def test_board_from_database(sqlite_db):
    from core.db import session_scope

    ava, ben, chen, dana = _seed()
    with session_scope() as s:
        inputs = collect_board_inputs(s, [ava, ben, chen, dana, 999, ava], AS_OF, DEFAULT)
    assert [i.athlete_id for i in inputs] == [ava, ben, chen, dana, 999]
    assert inputs[-1].name == "Athlete 999"

    rows = compute_risk_board(inputs, AS_OF, DEFAULT).rows
    by_id = {r.athlete_id: r for r in rows}
    assert by_id[ava].flag == "green"
    assert by_id[ava].readiness == 86.25
    assert by_id[ava].acwr == 0.25
    assert by_id[ben].flag == "amber"
    assert by_id[dana].readiness is None
    assert by_id[999].acwr is None and by_id[999].flag == "amber"
    assert rows[-1].athlete_id == ava
