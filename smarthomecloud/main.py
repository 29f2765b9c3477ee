"""FastAPI application entry point."""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

from smarthomecloud.config import get_settings
from smarthomecloud.db.engine import async_session_factory, create_all
from smarthomecloud.api.router import api_router
from smarthomecloud.services.device_monitor import run_device_monitor

_settings = get_settings()

logging.basicConfig(
    level=_settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await create_all()

    monitor_task = None
    if _settings.device_monitor.enabled:
        monitor_task = asyncio.create_task(
            run_device_monitor(async_session_factory, _settings.device_monitor)
        )
    yield
    if monitor_task:
        monitor_task.cancel()


app = FastAPI(
    title="SmartHomeCloud",
    description="Role-based monitoring of houses, IoT devices, surveillance feeds and AI-flagged safety alerts.",
    version="0.3.0",
    lifespan=lifespan,
)


@app.exception_handler(IntegrityError)
async def integrity_error_handler(request: Request, exc: IntegrityError):
    logger.warning("Integrity error on %s %s: %s", request.method, request.url.path, exc.orig)
    return JSONResponse(status_code=409, content={"detail": "Conflicts with an existing record"})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


app.include_router(api_router)


@app.get("/")
async def root():
    return {"name": "SmartHomeCloud", "version": app.version}
