"""
FastAPI application entry point for the content backend.
"""

from __future__ import annotations

import logging
import time

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from enclosures_backend.config import get_settings
from enclosures_backend.media import UploadError
from enclosures_backend.routes import router
from enclosures_backend.store import UniqueConstraintError

logger = logging.getLogger(__name__)


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={
                "detail": "Validation error",
                "errors": jsonable_encoder(exc.errors()),
            },
        )

    @app.exception_handler(UniqueConstraintError)
    async def unique_conflict(request: Request, exc: UniqueConstraintError):
        return JSONResponse(status_code=409, content={"detail": str(exc)})

    @app.exception_handler(UploadError)
    async def upload_error(request: Request, exc: UploadError):
        return JSONResponse(status_code=exc.status_code, content={"detail": str(exc)})

    @app.exception_handler(Exception)
    async def unexpected_error(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500, content={"detail": "Internal server error"}
        )


def create_app() -> FastAPI:
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = FastAPI(title="Enclosures Backend (FastAPI)", version="0.1.0")
    _register_error_handlers(app)

    @app.middleware("http")
    async def log_api_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        if request.url.path.startswith(settings.api_prefix):
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.info(
                "%s %s %s in %.0fms",
                request.method,
                request.url.path,
                response.status_code,
                elapsed_ms,
            )
        return response

    app.include_router(router, prefix=settings.api_prefix)
    app.mount(
        settings.uploads_url_path,
        StaticFiles(directory=settings.uploads_dir, check_dir=False),
        name="uploads",
    )
    return app


app = create_app()
