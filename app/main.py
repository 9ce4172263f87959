"""FastAPI Heartbeat. Lean."""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

import os
import logging
from datetime import datetime, timezone
from typing import Any, Dict
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from app.core.config import get_settings
from app.common.errors import WorkflowError
from app.common.schemas import ErrorResponse
from app.features.students.endpoints import router as student_router
from app.features.groups.endpoints import router as groups_router
from app.features.lecturers.endpoints import router as lecturers_router
from app.features.proposals.endpoints import router as coordinator_proposals_router
from app.features.exams.endpoints import router as coordinator_exams_router
from app.features.roles.endpoints import router as kaprodi_router
from app.features.periods.endpoints import router as periods_router
from app.features.stats.endpoints import router as stats_router

_settings = get_settings()
app = FastAPI(title=_settings.app_name)
_START_TIME = datetime.now(timezone.utc)

logging.basicConfig(
    level=logging.DEBUG if _settings.debug else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)


# ------------------------
# CORS Setup
# ------------------------
_FRONTEND_ORIGINS = [o.strip().rstrip("/") for o in _settings.allow_origins.split(",") if o.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=_FRONTEND_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ------------------------
# Custom Middlewares
# ------------------------
@app.middleware("http")
async def timing_middleware(request: Request, call_next):
    from time import perf_counter

    t0 = perf_counter()
    resp = await call_next(request)
    dt = int((perf_counter() - t0) * 1000)
    logging.getLogger("request").info("%s %s %dms %s", request.method, request.url.path, dt, resp.status_code)
    return resp


@app.middleware("http")
async def request_id_middleware(request: Request, call_next):
    import uuid

    incoming = request.headers.get("X-Request-Id") or request.headers.get("X-Request-ID")
    req_id = incoming or str(uuid.uuid4())
    request.state.request_id = req_id
    logger = logging.getLogger("request")
    logger.info("request.start", extra={"request_id": req_id, "path": request.url.path, "method": request.method})
    response = await call_next(request)
    response.headers["X-Request-Id"] = req_id
    logger.info("request.end", extra={"request_id": req_id, "path": request.url.path, "status_code": response.status_code})
    return response


# ------------------------
# Errors
# ------------------------
@app.exception_handler(WorkflowError)
async def workflow_error_handler(request: Request, exc: WorkflowError):
    body = ErrorResponse(
        error_code=exc.code,
        message=exc.message,
        details=exc.details or None,
        timestamp=datetime.now(timezone.utc),
    )
    if exc.status_code >= 500:
        logging.getLogger("request").error(
            "request.failed path=%s code=%s request_id=%s",
            request.url.path, exc.code, getattr(request.state, "request_id", None),
        )
    return JSONResponse(status_code=exc.status_code, content=body.model_dump(mode="json"))


# ------------------------
# Routers
# ------------------------
app.include_router(student_router)
app.include_router(groups_router)
app.include_router(lecturers_router)
app.include_router(coordinator_proposals_router)
app.include_router(coordinator_exams_router)
app.include_router(kaprodi_router)
app.include_router(periods_router)
app.include_router(stats_router)


# ------------------------
# Meta endpoints
# ------------------------
@app.get("/", tags=["meta"], summary="API Root")
async def root():
    return {
        "name": _settings.app_name,
        "status": "ok",
        "docs": "/docs",
        "redoc": "/redoc",
        "health": "/healthz"
    }


@app.get("/healthz", tags=["meta"], summary="Liveness / readiness probe")
def healthz() -> Dict[str, Any]:
    import time
    from app.db.session import engine

    now = datetime.now(timezone.utc)
    uptime_seconds = (now - _START_TIME).total_seconds()
    db_status: str = "unknown"
    db_latency_ms: float | None = None

    try:
        start = time.perf_counter()
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        db_latency_ms = round((time.perf_counter() - start) * 1000, 2)
        db_status = "ok"
    except SQLAlchemyError as e:
        db_status = f"error:{type(e).__name__}"

    route_count = len(app.routes)
    tags = sorted({t for r in app.routes for t in getattr(r, "tags", [])})

    return {
        "status": "ok" if db_status == "ok" else "degraded",
        "time_utc": now.isoformat(),
        "uptime_seconds": round(uptime_seconds, 2),
        "version": os.getenv("APP_VERSION", "dev"),
        "environment": "debug" if _settings.debug else "prod",
        "components": {
            "database": (
                {"status": db_status, "latency_ms": db_latency_ms}
                if db_status == "ok"
                else {"status": db_status}
            ),
        },
        "counts": {"routes": route_count},
        "tags": tags,
    }
