"""
FastAPI application entry point.
"""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, NoReturn

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from openphone_mcp.config import Settings, get_settings
from openphone_mcp.mcp.router import build_server_info
from openphone_mcp.mcp.router import router as mcp_router
from openphone_mcp.mcp.schemas import HealthResponse
from openphone_mcp.openphone.client import OpenPhoneClient
from openphone_mcp.shared.exceptions import AdapterError, UpstreamError
from openphone_mcp.shared.logging import StructuredFormatter, get_logger, setup_logging
from openphone_mcp.shared.middleware import correlation_id_middleware
from openphone_mcp.tools.router import router as tools_router
from openphone_mcp.webhooks.router import router as webhooks_router

logger = get_logger(__name__)

_MISSING_ERROR_TYPES = {"missing", "string_too_short"}
_REQUEST_LOCATIONS = {"body", "query", "path", "header"}


def error_envelope(status_code: int, error: str, message: str) -> JSONResponse:
    """The one error shape every endpoint returns."""
    return JSONResponse(status_code=status_code, content={"error": error, "message": message})


def _failure_title(request: Request, default: str) -> str:
    return getattr(request.state, "failure_title", None) or default


def _describe_validation_errors(errors: list[dict[str, Any]]) -> tuple[str, str]:
    fields: list[str] = []
    details: list[str] = []
    all_missing = True
    for error in errors:
        loc = list(error.get("loc", ()))
        if loc and loc[0] in _REQUEST_LOCATIONS:
            loc = loc[1:]
        field = ".".join(str(part) for part in loc) or "body"
        if field not in fields:
            fields.append(field)
        details.append(f"{field}: {error.get('msg')}")
        if error.get("type") not in _MISSING_ERROR_TYPES and error.get("input") is not None:
            all_missing = False

    prefix = "Missing required parameters" if all_missing else "Invalid request parameters"
    return f"{prefix}: {', '.join(fields)}", "; ".join(details)


def register_exception_handlers(app: FastAPI) -> None:
    """Map every failure to ``{"error", "message"}``."""

    @app.exception_handler(AdapterError)
    async def _adapter_error(request: Request, exc: AdapterError) -> JSONResponse:
        if isinstance(exc, UpstreamError):
            error = _failure_title(request, exc.error)
            logger.error(
                error,
                extra={
                    "path": request.url.path,
                    "upstream_status": exc.upstream_status,
                    "error": exc.message,
                },
            )
        else:
            error = exc.error
            logger.info(
                "Request rejected",
                extra={"path": request.url.path, "error": exc.message},
            )
        return error_envelope(exc.status_code, error, exc.message)

    @app.exception_handler(RequestValidationError)
    async def _request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
        error, message = _describe_validation_errors(list(exc.errors()))
        logger.info("Request validation failed", extra={"path": request.url.path, "error": error})
        return error_envelope(status.HTTP_400_BAD_REQUEST, error, message)

    @app.exception_handler(StarletteHTTPException)
    async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return error_envelope(
            exc.status_code,
            str(exc.detail),
            f"Cannot {request.method} {request.url.path}",
        )

    @app.exception_handler(Exception)
    async def _unhandled(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error", extra={"path": request.url.path})
        return error_envelope(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            _failure_title(request, "Internal server error"),
            str(exc) or exc.__class__.__name__,
        )


def registered_endpoints(app: FastAPI) -> list[str]:
    """``"METHOD /path"`` for every operation in the app's OpenAPI schema."""
    return [
        f"{method.upper()} {path}"
        for path, operations in app.openapi()["paths"].items()
        for method in operations
    ]


def _log_endpoints(app: FastAPI, settings: Settings) -> None:
    endpoints = registered_endpoints(app)
    logger.info(
        "OpenPhone MCP Server running",
        extra={
            "server_url": f"http://localhost:{settings.port}",
            "health_check": f"http://localhost:{settings.port}/health",
            "endpoints": endpoints,
        },
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    settings: Settings = app.state.settings
    setup_logging(settings)
    _log_endpoints(app, settings)

    yield

    logger.info("Shutting down application")
    await app.state.openphone.close()
    logger.info("Application shutdown complete")


def create_app(
    settings: Settings | None = None,
    openphone_client: OpenPhoneClient | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Raises pydantic.ValidationError if no settings are given and
    OPENPHONE_API_KEY is missing from the environment.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="OpenPhone MCP Server",
        description="MCP server for OpenPhone API integration",
        version=settings.app_version,
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )
    app.state.settings = settings
    app.state.openphone = openphone_client or OpenPhoneClient(settings)

    register_exception_handlers(app)

    app.middleware("http")(correlation_id_middleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(mcp_router)
    app.include_router(tools_router)
    app.include_router(webhooks_router)

    @app.get("/health", response_model=HealthResponse)
    async def health_check() -> HealthResponse:
        return HealthResponse(status="healthy", server=build_server_info(settings))

    return app


def _exit_on_config_error(exc: ValidationError) -> NoReturn:
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(StructuredFormatter())
    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(logging.ERROR)

    missing = [".".join(str(p) for p in err["loc"]).upper() for err in exc.errors()]
    logger.error(
        "Invalid configuration; OPENPHONE_API_KEY environment variable is required",
        extra={"invalid_settings": missing},
    )
    raise SystemExit(1)


def run() -> None:
    """Console entry point: load settings, then serve until interrupted."""
    try:
        settings = get_settings()
    except ValidationError as exc:
        _exit_on_config_error(exc)

    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    run()
