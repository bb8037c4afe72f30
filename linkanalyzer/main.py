"""
LinkAnalyzer - Main Application Entry Point
FastAPI application exposing single, bulk and export analysis endpoints.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from linkanalyzer.api.v1.routes import analyze, health
from linkanalyzer.core.config import get_settings
from linkanalyzer.core.errors import AnalyzerError
from linkanalyzer.core.logging import configure_logging

logger = structlog.get_logger(__name__)
settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """Manage application lifecycle: startup and shutdown."""
    configure_logging()
    logger.info("Starting LinkAnalyzer", version=settings.APP_VERSION, env=settings.ENV)
    yield
    logger.info("Application shutdown complete")


def create_application() -> FastAPI:
    app = FastAPI(
        title="LinkAnalyzer API",
        description="Fetches web pages and scores their on-page SEO.",
        version=settings.APP_VERSION,
        debug=settings.DEBUG,
        docs_url="/docs" if settings.ENV != "production" else None,
        redoc_url="/redoc" if settings.ENV != "production" else None,
        lifespan=lifespan,
    )

    # Middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=1000)

    # Routers
    app.include_router(health.router, prefix="/health", tags=["Health"])
    app.include_router(analyze.router, prefix="/api/analyze", tags=["Analysis"])

    @app.exception_handler(AnalyzerError)
    async def analyzer_exception_handler(request: Request, exc: AnalyzerError) -> JSONResponse:
        logger.warning("Analysis failed", path=request.url.path, code=exc.code, error=exc.user_message)
        return JSONResponse(status_code=exc.status_code, content={"error": exc.user_message})

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        message = analyze.validation_message(list(exc.errors()))
        logger.info("Rejected request body", path=request.url.path, error=message)
        return JSONResponse(status_code=400, content={"error": message})

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error("Unhandled exception", path=request.url.path, error=str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error", "request_id": request.headers.get("x-request-id")},
        )

    return app


app = create_application()
