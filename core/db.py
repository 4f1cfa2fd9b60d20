from __future__ import annotations

import time
from collections import deque
from contextlib import contextmanager
from dataclasses import dataclass
from functools import lru_cache
from typing import Iterator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, sessionmaker

from core.config import database_url
from core.models import Base

__all__ = ["Base", "get_engine", "get_session_factory", "session_scope", "get_query_stats", "reset_engine"]

SLOW_QUERY_MS = 250.0
_QUERY_WINDOW = 1000


@dataclass
class QueryStats:
    total: int = 0
    slow: int = 0
    p50_ms: float = 0.0
    p95_ms: float = 0.0


_query_samples: deque[float] = deque(maxlen=_QUERY_WINDOW)


def _engine_kwargs(url: str) -> dict:
    if make_url(url).get_backend_name() == "sqlite":
        # sync routes run on the threadpool
        return {"connect_args": {"check_same_thread": False}}
    return {"pool_pre_ping": True}


@lru_cache(maxsize=1)
def get_engine() -> Engine:
    url = database_url()
    engine = create_engine(url, **_engine_kwargs(url))

    @event.listens_for(engine, "before_cursor_execute")
    def _start_timer(conn, cursor, statement, parameters, context, executemany):
        context._query_start_time = time.perf_counter()

    @event.listens_for(engine, "after_cursor_execute")
    def _record_elapsed(conn, cursor, statement, parameters, context, executemany):
        _query_samples.append((time.perf_counter() - context._query_start_time) * 1000)

    return engine


@lru_cache(maxsize=1)
def get_session_factory() -> sessionmaker[Session]:
    # rows are read after the session closes when building read models
    return sessionmaker(bind=get_engine(), autoflush=False, expire_on_commit=False)


def reset_engine() -> None:
    """Drop the cached engine and session factory, e.g. after DATABASE_URL changes."""
    get_session_factory.cache_clear()
    get_engine.cache_clear()
    _query_samples.clear()


@contextmanager
def session_scope() -> Iterator[Session]:
    """Unit of work: commit on success, roll back and re-raise on error."""
    session = get_session_factory()()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def get_query_stats() -> QueryStats:
    """Latency summary over the most recent queries, used by the health probe."""
    if not _query_samples:
        return QueryStats()
    ordered = sorted(_query_samples)
    return QueryStats(
        total=len(ordered),
        slow=sum(1 for ms in ordered if ms > SLOW_QUERY_MS),
        p50_ms=round(ordered[int(len(ordered) * 0.5)], 2),
        p95_ms=round(ordered[int(len(ordered) * 0.95)], 2),
    )
