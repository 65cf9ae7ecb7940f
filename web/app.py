"""
FastAPI application for the property onboarding API.

Production deployment configuration via environment variables.
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exception_handlers import http_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.onboarding import get_property_repository
from utils.config import Config
from utils.logging import setup_logging
from web.property_routes import router as property_router


logger = logging.getLogger(__name__)

APP_VERSION = "0.1.0"


def create_app(config: Optional[Config] = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    config = config or Config.load()
    setup_logging(config.log_level, config.log_format)

    app = FastAPI(
        title="Property Onboarding",
        description="Onboarding and completion tracking for WEG and MV properties",
        version=APP_VERSION,
        debug=config.debug,
    )

    # ==========================================================================
    # Healthcheck endpoints: no dependencies, no IO.
    # ==========================================================================
    @app.get("/", include_in_schema=False)
    def root():
        """Root healthcheck."""
        return {"status": "ok"}

    @app.get("/health", include_in_schema=False)
    def health():
        """Secondary health endpoint."""
        return {"status": "healthy", "version": APP_VERSION}

    if config.allowed_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.allowed_origins,
            allow_credentials=True,
            allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
            allow_headers=["*"],
        )

    # ==========================================================================
    # Error handlers
    # ==========================================================================
    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        """Malformed request bodies are client errors (400, not 422)."""
        logger.warning("Rejected %s %s: invalid request body", request.method, request.url.path)
        return JSONResponse(
            status_code=400,
            content={"detail": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(StarletteHTTPException)
    async def logged_http_exception_handler(request: Request, exc: StarletteHTTPException):
        if 400 <= exc.status_code < 500:
            logger.warning(
                "%s %s -> %d: %s", request.method, request.url.path, exc.status_code, exc.detail
            )
        return await http_exception_handler(request, exc)

    # Store is created (and optionally seeded) before the first request
    repository = get_property_repository(seed=config.seed_data)
    logger.info("Serving %d properties", repository.count())

    app.include_router(property_router)

    return app


# Create app instance for uvicorn
app = create_app()
