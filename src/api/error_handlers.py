# This file defines the failure taxonomy and consistent API error payloads.
# It exists so every endpoint returns the same error shape with request trace fields.
# Services raise typed failures and the handlers map each kind to one status code.
# Unexpected failures are logged with their traceback and reported with a generic message.

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

logger = logging.getLogger(__name__)


class APIError(Exception):
    """Domain error type with structured API details."""

    def __init__(
        self,
        *,
        status_code: int,
        error_code: str,
        message: str,
        details: Any | None = None,
    ) -> None:
        self.status_code = status_code
        self.error_code = error_code
        self.message = message
        self.details = details
        super().__init__(message)


class NotFoundError(APIError):
    """The identifier does not resolve to a stored record."""

    def __init__(self, message: str, *, details: Any | None = None) -> None:
        super().__init__(status_code=404, error_code="NOT_FOUND", message=message, details=details)


class ConflictError(APIError):
    """A uniqueness rule would be violated."""

    def __init__(self, message: str, *, details: Any | None = None) -> None:
        super().__init__(status_code=409, error_code="CONFLICT", message=message, details=details)


class ValidationFailedError(APIError):
    """Malformed identifier, invalid field, or broken cross-reference."""

    def __init__(self, message: str, *, details: Any | None = None) -> None:
        super().__init__(
            status_code=400,
            error_code="VALIDATION_ERROR",
            message=message,
            details=details,
        )


def _request_id(request: Request) -> str:
    return str(getattr(request.state, "request_id", "unknown"))


def _error_body(
    *,
    request: Request,
    status_code: int,
    error_code: str,
    message: str,
    details: Any | None = None,
) -> dict[str, Any]:
    body: dict[str, Any] = {
        "statusCode": status_code,
        "timestamp": datetime.now(tz=UTC).isoformat(),
        "path": request.url.path,
        "message": message,
        "errorCode": error_code,
        "requestId": _request_id(request),
    }
    if details is not None:
        body["details"] = jsonable_encoder(details)
    return body


def _log_client_error(request: Request, status_code: int, message: str) -> None:
    logger.warning(
        "Request %s %s failed with %s: %s",
        request.method,
        request.url.path,
        status_code,
        message,
    )


def _validation_details(exc: RequestValidationError) -> list[dict[str, Any]]:
    return [
        {
            "field": ".".join(str(part) for part in error.get("loc", ())),
            "message": error.get("msg", ""),
            "type": error.get("type", ""),
        }
        for error in exc.errors()
    ]


def register_error_handlers(app: FastAPI) -> None:
    """Register global exception handlers."""

    @app.exception_handler(APIError)
    async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
        _log_client_error(request, exc.status_code, exc.message)
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(
                request=request,
                status_code=exc.status_code,
                error_code=exc.error_code,
                message=exc.message,
                details=exc.details,
            ),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        _log_client_error(request, 400, "Validation failed")
        return JSONResponse(
            status_code=400,
            content=_error_body(
                request=request,
                status_code=400,
                error_code="VALIDATION_ERROR",
                message="Validation failed",
                details=_validation_details(exc),
            ),
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        _log_client_error(request, exc.status_code, str(exc.detail))
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(
                request=request,
                status_code=exc.status_code,
                error_code="HTTP_ERROR",
                message=str(exc.detail),
            ),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "Unhandled error on %s %s",
            request.method,
            request.url.path,
            exc_info=exc,
        )
        return JSONResponse(
            status_code=500,
            content=_error_body(
                request=request,
                status_code=500,
                error_code="INTERNAL_SERVER_ERROR",
                message="Internal server error",
            ),
        )
