"""FastAPI application entrypoint."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from bakery.api.v1.api import api_router
from bakery.core.config import settings
from bakery.db import session as db_session
from bakery.db.base import Base
from bakery.db.migrations import ensure_sqlite_schema
from bakery.db.seed import ensure_delivery_settings_seed
from bakery.utils.time import TimezoneUnavailableError, business_tz

logger = logging.getLogger(__name__)

app = FastAPI(title=settings.app_name, debug=settings.debug)
app.include_router(api_router, prefix="/api/v1")


@app.exception_handler(TimezoneUnavailableError)
def timezone_unavailable_handler(request: Request, exc: TimezoneUnavailableError) -> JSONResponse:
    logger.exception("Business timezone unavailable while serving %s", request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "Business timezone unavailable"})


@app.on_event("startup")
def startup() -> None:
    try:
        business_tz(settings.business_timezone)
    except TimezoneUnavailableError:
        logger.exception("[BOOTSTRAP] Business timezone %s cannot be resolved.", settings.business_timezone)
    Base.metadata.create_all(bind=db_session.engine)
    ensure_sqlite_schema(db_session.engine)
    with db_session.SessionLocal() as session:
        try:
            created = ensure_delivery_settings_seed(session)
            logger.info("[BOOTSTRAP] delivery schedules seeded: %s", created)
        except Exception:
            logger.exception("[BOOTSTRAP] Seed/bootstrap failed; continuing startup.")


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
