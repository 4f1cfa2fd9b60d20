"""Run the load/readiness API locally.

Creates the schema if needed, optionally seeds the demo squad
(SEED_DEMO=1) and serves the FastAPI app with uvicorn.

Run with:  python3 serve.py
"""

from __future__ import annotations

import os

import uvicorn

from core.config import get_settings

API_PORT = int(os.getenv("API_PORT", "8000"))


def main() -> None:
    from core.db import Base, get_engine

    Base.metadata.create_all(bind=get_engine())
    if os.getenv("SEED_DEMO", "").lower() in {"1", "true", "yes"}:
        from db.seed import main as seed_main

        seed_main()

    from api.main import app

    settings = get_settings()
    uvicorn.run(
        app,
        host=os.getenv("API_HOST", "127.0.0.1"),
        port=API_PORT,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
