from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from core import db
from core.config import Settings, cors_allow_origins, load_settings
from core.errors import Cancelled, InvalidParameter, NotFound, ProvinceApiError, StoreError
from provinces import router as provinces_router
from provinces.repository import ProvinceRepository
from provinces.service import ProvinceService

logger = logging.getLogger("api")


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def _error_body(error: str, message: str) -> dict:
    return {"error": error, "message": message}


async def _handle_invalid_parameter(_: Request, exc: InvalidParameter) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_body("invalid parameter", exc.message),
    )


async def _handle_not_found(_: Request, exc: NotFound) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content=_error_body("requested item not found", exc.message),
    )


async def _handle_cancelled(request: Request, exc: Cancelled) -> JSONResponse:
    logger.warning("request_cancelled path=%s reason=%s", request.url.path, exc.reason)
    return JSONResponse(
        status_code=status.HTTP_504_GATEWAY_TIMEOUT,
        content=_error_body("request timed out", "the request did not complete in time"),
    )


async def _handle_internal(request: Request, exc: Exception) -> JSONResponse:
    # Never leak the cause; log it instead.
    cause = exc.cause if isinstance(exc, StoreError) else exc
    logger.error("request_failed path=%s", request.url.path, exc_info=cause)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body("internal server error", "something went wrong"),
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Build the API.

    Settings are loaded from the environment at startup when not given, so
    importing this module never requires a database.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        cfg = settings or load_settings()
        pool = await db.create_pool(cfg)
        repository = ProvinceRepository(pool, query_timeout=cfg.query_timeout_s)
        app.state.province_service = ProvinceService(repository)
        try:
            yield
        finally:
            await db.close_pool(pool)

    app = FastAPI(lifespan=lifespan)

    origins = settings.cors_allow_origins if settings is not None else cors_allow_origins()
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(origins),
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            logger.info(
                "request method=%s path=%s status=%s duration_ms=%.1f",
                request.method,
                request.url.path,
                status_code,
                (time.perf_counter() - started) * 1000.0,
            )

    app.add_exception_handler(InvalidParameter, _handle_invalid_parameter)
    app.add_exception_handler(NotFound, _handle_not_found)
    app.add_exception_handler(Cancelled, _handle_cancelled)
    app.add_exception_handler(ProvinceApiError, _handle_internal)
    app.add_exception_handler(Exception, _handle_internal)

    app.include_router(provinces_router.router, tags=["provinces"])

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok"}

    @app.get("/")
    def root() -> dict:
        return {"message": "province reference api"}

    return app


app = create_app()


def run() -> None:
    settings = load_settings()
    configure_logging(settings.log_level)
    # uvicorn handles SIGINT/SIGTERM and drains in-flight requests.
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        timeout_graceful_shutdown=settings.shutdown_timeout_s,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
