"""
FastAPI application entrypoint for the GKP auth relay.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.api.pages import router as pages_router
from app.api.routes import router as api_router
from app.core.config import get_settings
from app.core.errors import RelayError
from app.core.logging import configure_logging

logger = logging.getLogger(__name__)


async def _relay_error_handler(request: Request, exc: RelayError) -> JSONResponse:
    logger.info("%s on %s: %s", type(exc).__name__, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": exc.message},
    )


def create_app() -> FastAPI:
    """Factory for the FastAPI application."""
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="GKP Auth Relay",
        version="0.1.0",
        description=(
            "Google OAuth2 sign-in relay that hands a composed credential bundle "
            "to the GKP backend."
        ),
    )
    app.add_exception_handler(RelayError, _relay_error_handler)
    app.include_router(api_router, prefix="/api")
    app.include_router(pages_router)
    return app


app = create_app()

__all__ = ["app", "create_app"]
