# backend/app/main.py
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import Settings
from .db import Database
from .errors import register_error_handlers
from .logging_config import configure_logging
from .middleware.request_id import RequestIDMiddleware
from .middleware.structured_logging import StructuredLoggingMiddleware

from .routers.health import router as health_router
from .routers.auth import router as auth_router
from .routers.users import router as users_router
from .routers.properties import router as properties_router
from .routers.inquiries import router as inquiries_router
from .routers.saved_properties import router as saved_properties_router
from .routers.saved_searches import router as saved_searches_router
from .routers.notifications import router as notifications_router
from .routers.search_history import router as search_history_router
from .routers.dashboard import router as dashboard_router

log = logging.getLogger("natureestate")


def _cors_origins(settings: Settings) -> list[str]:
    val = settings.cors_allow_origins
    if isinstance(val, str):
        v = val.strip()
        return ["*"] if v == "*" else [x.strip() for x in v.split(",") if x.strip()]
    if isinstance(val, list) and val:
        return val
    return ["*"]


@asynccontextmanager
async def lifespan(app: FastAPI):
    log.info("startup version=%s env=%s", app.version, app.state.settings.app_env)
    try:
        yield
    finally:
        app.state.db.dispose()


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or Settings()
    configure_logging()

    database = Database.from_settings(settings)
    if settings.auto_create_schema:
        database.create_all()

    app = FastAPI(
        title="NatureEstate API",
        version=settings.app_version,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.db = database

    # last added runs first: request id must be set before the request log line
    app.add_middleware(StructuredLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=_cors_origins(settings),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    # Core
    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(users_router)

    # Listings + buyer activity
    app.include_router(properties_router)
    app.include_router(inquiries_router)
    app.include_router(saved_properties_router)
    app.include_router(saved_searches_router)
    app.include_router(notifications_router)
    app.include_router(search_history_router)

    app.include_router(dashboard_router)
    return app


app = create_app()
