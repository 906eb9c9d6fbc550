"""
FastAPI app entry point aggregating per-domain routers under endeavors/routes.
Run as `uvicorn endeavors.api:app`.
"""
from __future__ import annotations

import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .db import apply_schema, get_conn
from .logs import LogContext, configure_logging, ensure_log_schema
from .services.config_svc import ensure_default_config


app = FastAPI(title="higher-endeavors-api", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        o.strip()
        for o in os.environ.get("HE_CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000").split(",")
        if o.strip()
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
def on_startup():
    configure_logging()
    ensure_log_schema()
    try:
        with get_conn() as conn:
            apply_schema(conn)
    except Exception as e:
        LogContext("STARTUP").write("ERROR", f"apply_schema_failed: {e}")
        raise
    ensure_default_config()


# Include routers (split by feature area)
from .routes import base as base_routes
from .routes import settings as settings_routes
from .routes import logs as logs_routes
from .routes import catalog as catalog_routes
from .routes import programs as programs_routes
from .routes import cme as cme_routes
from .routes import analysis as analysis_routes
from .routes import structural_balance as structural_balance_routes
from .routes import health as health_routes
from .routes import user_settings as user_settings_routes
from .routes import site as site_routes

app.include_router(base_routes.router)
app.include_router(settings_routes.router)
app.include_router(logs_routes.router)
app.include_router(catalog_routes.router)
app.include_router(programs_routes.router)
app.include_router(cme_routes.router)
app.include_router(analysis_routes.router)
app.include_router(structural_balance_routes.router)
app.include_router(health_routes.router)
app.include_router(user_settings_routes.router)
app.include_router(site_routes.router)
