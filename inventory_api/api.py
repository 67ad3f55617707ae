"""
FastAPI app entry point aggregating routers under inventory_api/routes.
Run with `python -m inventory_api` or `uvicorn inventory_api.api:app`.
"""
from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from . import __version__
from .config import get_settings
from .db import ensure_schema
from .logs import configure_logging

logger = logging.getLogger(__name__)

app = FastAPI(title="inventory-api", version=__version__)


@app.on_event("startup")
def on_startup():
    settings = get_settings()
    configure_logging(settings["log_level"])
    ensure_schema()
    logger.info("inventory-api started, db=%s", settings["db_path"])


@app.on_event("shutdown")
def on_shutdown():
    logger.info("inventory-api stopped")


@app.exception_handler(RequestValidationError)
async def invalid_request_handler(request: Request, exc: RequestValidationError):
    # 与其它错误保持同样的 {"error": ...} 结构，统一返回 400
    errors = "; ".join(
        f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg')}" for err in exc.errors()
    )
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": f"invalid request: {errors}"})


# Include routers
from .routes import base as base_routes
from .routes import inventories as inventory_routes
from .routes import logs as logs_routes

app.include_router(base_routes.router)
app.include_router(inventory_routes.router)
app.include_router(logs_routes.router)
