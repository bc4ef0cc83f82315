"""Global exception handlers producing the shared error body."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..exceptions import CustomerIdentityError
from ..schemas.errors import ErrorResponse

logger = logging.getLogger(__name__)


def _respond(body: ErrorResponse, headers: dict[str, str] | None = None) -> JSONResponse:
    return JSONResponse(status_code=body.status, content=body.model_dump(mode="json"), headers=headers)


def _field_name(location: tuple) -> str:
    parts = [str(part) for part in location if part not in ("body", "query", "path")]
    return ".".join(parts) or "body"


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(CustomerIdentityError)
    async def customer_identity_error_handler(request: Request, exc: CustomerIdentityError) -> JSONResponse:
        logger.warning("%s on %s: %s", type(exc).__name__, request.url.path, exc.message)
        return _respond(ErrorResponse.build(exc.status_code, exc.message, exc.details))

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        details = [f"{_field_name(error['loc'])}: {error['msg']}" for error in exc.errors()]
        return _respond(ErrorResponse.build(400, "Validation failed", details))

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        message = exc.detail if isinstance(exc.detail, str) else "Request failed"
        return _respond(ErrorResponse.build(exc.status_code, message), headers=getattr(exc, "headers", None))

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"Unexpected error handling {request.method} {request.url.path}")
        return _respond(
            ErrorResponse.build(500, "An unexpected error occurred", ["An internal error occurred."])
        )
