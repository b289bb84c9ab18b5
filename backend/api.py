# -*- coding: utf-8 -*-
"""
Nutri-Web API

REST backend for users, products, nutrition plans, appointments and orders,
persisted in a Google Sheets spreadsheet.
"""

from __future__ import annotations

import logging
import os

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from .app_db import init_app_db
from .appointments.api import router as appointments_router
from .auth.api import router as users_router
from .config import settings
from .orders.api import router as orders_router
from .plans.api import router as plans_router
from .products.api import router as products_router
from .sheets.errors import NotFound, SchemaError, StorageUnavailable, UniquenessViolation

logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Nutri-Web",
    description="Nutrition plans, appointments and shop backed by Google Sheets",
    version="1.0.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _init_sheets() -> None:
    if not settings.init_sheets:
        return
    try:
        init_app_db()
    except (StorageUnavailable, SchemaError) as exc:
        # Requests will surface the same failure as 503/500; don't block startup.
        logger.warning("Sheet initialization skipped: %s", exc)


@app.on_event("startup")
def _startup_init_sheets() -> None:
    _init_sheets()


# The memory backend has no remote side; make sure its sheets exist even when
# lifespan events are not triggered (e.g. some test clients).
if settings.sheets_backend == "memory":
    _init_sheets()


# ---- Record store errors -> HTTP ----

@app.exception_handler(NotFound)
async def _not_found(request: Request, exc: NotFound):
    return JSONResponse(status_code=404, content={"detail": "Record not found"})


@app.exception_handler(UniquenessViolation)
async def _conflict(request: Request, exc: UniquenessViolation):
    return JSONResponse(status_code=409, content={"detail": exc.detail})


@app.exception_handler(SchemaError)
async def _schema_error(request: Request, exc: SchemaError):
    logger.error("Schema error on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


@app.exception_handler(StorageUnavailable)
async def _storage_unavailable(request: Request, exc: StorageUnavailable):
    logger.error("Storage unavailable on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=503, content={"detail": "Storage temporarily unavailable"})


app.include_router(users_router)
app.include_router(products_router)
app.include_router(plans_router)
app.include_router(appointments_router)
app.include_router(orders_router)


@app.get("/api/health")
def health() -> dict:
    return {"ok": True, "backend": settings.sheets_backend}


@app.get("/", include_in_schema=False)
def root() -> PlainTextResponse:
    return PlainTextResponse("Nutri-Web server running on Google Sheets")


def run() -> None:
    """Console entry point (used by pyproject [project.scripts])."""
    import uvicorn

    host = os.environ.get("NUTRI_HOST") or os.environ.get("HOST") or "127.0.0.1"
    port_raw = os.environ.get("NUTRI_PORT") or os.environ.get("PORT") or "5000"
    try:
        port = int(port_raw)
    except ValueError:
        port = 5000

    uvicorn.run("backend.api:app", host=host, port=port, reload=False)
