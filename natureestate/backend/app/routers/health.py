# backend/app/routers/health.py
from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

log = logging.getLogger("natureestate.health")

router = APIRouter(tags=["health"])


@router.get("/health")
def health(request: Request):
    ts = datetime.now(timezone.utc).isoformat()
    version = request.app.state.settings.app_version
    try:
        request.app.state.db.ping()
    except SQLAlchemyError:
        log.exception("health check failed")
        return JSONResponse(
            status_code=503,
            content={"status": "unhealthy", "database": "disconnected", "timestamp": ts, "version": version},
        )
    return {"status": "healthy", "database": "connected", "timestamp": ts, "version": version}
