from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text

from lumiere.api.v1.router import api_router
from lumiere.core.config import settings
from lumiere.core.logging import configure_logging
from lumiere.db.base import Base
from lumiere.db.session import engine
from lumiere.middleware.request_context import RequestContextMiddleware

configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="Lumière Stylist API", version="0.1.0")
app.add_middleware(RequestContextMiddleware)
cors_origins = {
    settings.base_dashboard_url.rstrip("/"),
    "http://localhost:5173",
    "http://127.0.0.1:5173",
}
extra_origins = [
    origin.strip().rstrip("/")
    for origin in settings.cors_extra_origins.split(",")
    if origin.strip()
]
cors_origins.update(extra_origins)
app.add_middleware(
    CORSMiddleware,
    allow_origins=sorted(cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(api_router)


@app.on_event("startup")
def startup() -> None:
    Base.metadata.create_all(bind=engine)
    logger.info("startup_complete env=%s", settings.app_env)


@app.get("/healthz")
def healthz() -> dict:
    return {"status": "ok"}


@app.get("/readyz")
def readyz() -> dict:
    db_ok = False
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        db_ok = True
    except Exception:
        logger.exception("readyz_db_check_failed")
    return {"ready": db_ok, "db": db_ok}


def run() -> None:
    import uvicorn

    uvicorn.run("lumiere.main:app", host=settings.api_host, port=settings.api_port)
