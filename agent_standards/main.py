"""FastAPI application factory and global exception handling."""

from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.requests import Request
from starlette.responses import JSONResponse

from agent_standards import __version__ as app_version
from agent_standards.api.routes import router
from agent_standards.config import Settings, get_settings
from agent_standards.profiles.errors import (
    ConfigError,
    CyclicInheritanceError,
    InheritanceDepthError,
    NotFoundError,
    ReadError,
    StandardsError,
)
from agent_standards.profiles.loader import ProfileRegistry, set_profile_registry

logger = logging.getLogger(__name__)


def _error_payload(exc: StandardsError, registry: ProfileRegistry) -> tuple[int, dict]:
    content: dict[str, Any] = {"details": str(exc), "profile": exc.profile}
    if isinstance(exc, NotFoundError):
        content["error"] = "profile_not_found"
        content["available"] = registry.get_available_names()
        return 404, content
    if isinstance(exc, (CyclicInheritanceError, InheritanceDepthError)):
        content["error"] = "cyclic_inheritance"
        content["chain"] = list(exc.chain)
        return 409, content
    if isinstance(exc, ConfigError):
        content["error"] = "invalid_profile_config"
        content["path"] = str(exc.path) if exc.path else None
        return 422, content
    if isinstance(exc, ReadError):
        content["error"] = "unreadable_standard"
        content["path"] = str(exc.path) if exc.path else None
        return 500, content
    content["error"] = "standards_error"
    return 500, content


def create_application(settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure the FastAPI application instance."""
    settings = settings or get_settings()
    logging.getLogger("agent_standards").setLevel(settings.log_level)

    registry = ProfileRegistry(settings)
    set_profile_registry(registry)

    app = FastAPI(
        title=settings.app_name,
        description="Resolves inherited standards profiles for coding agents.",
        version=app_version,
    )
    app.state.registry = registry

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content={"error": "validation_error", "details": exc.errors()},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        detail = exc.detail
        if isinstance(detail, dict) and "error" in detail:
            payload = detail
        else:
            payload = {"error": "http_error", "details": detail}
        return JSONResponse(status_code=exc.status_code, content=payload)

    @app.exception_handler(StandardsError)
    async def standards_exception_handler(
        request: Request, exc: StandardsError
    ) -> JSONResponse:
        status_code, payload = _error_payload(exc, registry)
        if status_code >= 500:
            logger.error(f"Profile resolution failed: {exc}")
        else:
            logger.warning(f"Profile resolution failed: {exc}")
        return JSONResponse(status_code=status_code, content=payload)

    @app.get("/healthz", tags=["health"])
    async def healthz() -> dict[str, Any]:
        return {
            "status": "ok",
            "version": app_version,
            "profiles_root": str(settings.profiles_root),
            "profiles_loaded": registry.is_loaded(),
        }

    app.include_router(router)
    return app


app = create_application()
