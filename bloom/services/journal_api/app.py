# -*- coding: utf-8 -*-
"""
Bloom Journal API
-----------------
- GET  /healthz              : health check
- GET  /feelings/taxonomy    : feelings wheel
- POST /feelings/analytics   : analytics over client-supplied records
- /journal/*                 : reflections CRUD + analytics over stored entries
- /calendar/*                : HRT calendar days + streak
- GET  /resources            : support directory
Notes:
- Analytics are recomputed from the stored entries on every request; the engine
  only keeps an exact-match copy of the last snapshot.
- Reflection text is stored but never logged.
"""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from bloom.services.analysis_engine import FeelingsAnalyticsEngine
from bloom.services.journal_api.api_calendar import register_calendar_routes
from bloom.services.journal_api.api_feelings_analytics import build_engine_from_env, register_feelings_routes
from bloom.services.journal_api.api_journal import register_journal_routes
from bloom.services.journal_api.api_resources import register_resources_routes
from bloom.services.journal_api.kv_store import KeyValueStore, build_store_from_env

APP_NAME = os.getenv("BLOOM_APP_NAME", "Bloom Journal")
PORT = int(os.getenv("BLOOM_PORT", "8765"))
HOST = os.getenv("BLOOM_HOST", "0.0.0.0")
# For release, set BLOOM_CORS_ORIGINS to a comma-separated list of allowed origins.
ALLOWED_ORIGINS_RAW = os.getenv("BLOOM_CORS_ORIGINS", "*")
ALLOWED_ORIGINS = [o.strip() for o in ALLOWED_ORIGINS_RAW.split(",") if o.strip()] if ALLOWED_ORIGINS_RAW else ["*"]

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger("bloom")


def create_app(
    store: Optional[KeyValueStore] = None,
    engine: Optional[FeelingsAnalyticsEngine] = None,
) -> FastAPI:
    store = store if store is not None else build_store_from_env()
    engine = engine if engine is not None else build_engine_from_env()

    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
        yield
        await store.aclose()

    app = FastAPI(title=APP_NAME, version="1.0.0", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS or ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_feelings_routes(app, engine)
    register_journal_routes(app, store, engine)
    register_calendar_routes(app, store, engine)
    register_resources_routes(app)

    @app.get("/healthz")
    async def healthz() -> Dict[str, Any]:
        return {"status": "ok", "store": store.name}

    logger.info("app ready: store=%s recent_window=%d", store.name, engine.config.recent_window)
    return app


app = create_app()


# ---------- Entrypoint ----------
if __name__ == "__main__":
    import uvicorn
    uvicorn.run("bloom.services.journal_api.app:app", host=HOST, port=PORT, log_level="info")
