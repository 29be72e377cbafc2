"""FastAPI application factory."""

from __future__ import annotations

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from siteintel_shared.config import settings
from siteintel_shared.errors import SiteIntelError
from siteintel_pipeline.utils.logging import configure_logging

from siteintel_api import __version__
from siteintel_api.middleware.logging import LoggingMiddleware
from siteintel_api.responses import siteintel_error_response
from siteintel_api.routers.health import router as health_router
from siteintel_api.routers.v1 import v1_router

logger = structlog.get_logger()


async def handle_siteintel_error(request: Request, exc: SiteIntelError) -> JSONResponse:
    log = logger.bind(path=request.url.path, error_code=exc.error_code, stage=exc.stage)
    if exc.http_status >= 500:
        log.error("request_error", error=exc.message, details=exc.details)
    else:
        log.info("request_rejected", error=exc.message)
    return siteintel_error_response(exc)


def create_app() -> FastAPI:
    configure_logging()

    app = FastAPI(
        title="siteintel API",
        description="Real-estate site economics and document extraction API",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(LoggingMiddleware)

    app.add_exception_handler(SiteIntelError, handle_siteintel_error)

    # Routers
    app.include_router(health_router)
    app.include_router(v1_router)

    logger.info("app_created", cors_origins=settings.cors_origins_list)
    return app


app = create_app()
