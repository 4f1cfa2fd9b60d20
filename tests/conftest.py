from __future__ import annotations

import pytest


def reset_runtime_caches() -> None:
    import core.db as db_mod
    from core.config import get_settings

    get_settings.cache_clear()
    db_mod.reset_engine()


@pytest.fixture
def sqlite_db(tmp_path, monkeypatch):
    """Point DATABASE_URL at a fresh SQLite file with the schema created."""
    db_path = tmp_path / "engine_test.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite+pysqlite:///{db_path}")
    monkeypatch.setenv("APP_ENV", "test")
    reset_runtime_caches()

    from core.db import Base, get_engine

    Base.metadata.create_all(bind=get_engine())
    yield db_path
    get_engine().dispose()
    reset_runtime_caches()
