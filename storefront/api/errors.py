"""Exception handlers.

Translate domain exceptions, request validation failures and routing
errors into the single error body:

    {"success": false, "message": ..., "error": {"kind", "message", "details"},
     "request_id": ...}
"""

from typing import Any

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from storefront.domain.exceptions import (
    ConflictError,
    DomainError,
    NotFoundError,
    StoreError,
    UnauthorizedError,
    ValidationError,
)

logger = structlog.get_logger()

# First match wins, so subclasses must precede their bases
ERROR_CLASSES: list[tuple[type[DomainError], int, str]] = [
    (ValidationError, status.HTTP_400_BAD_REQUEST, "validation_error"),
    (UnauthorizedError, status.HTTP_401_UNAUTHORIZED, "unauthorized"),
    (NotFoundError, status.HTTP_404_NOT_FOUND, "not_found"),
    (ConflictError, status.HTTP_409_CONFLICT, "conflict"),
    (StoreError, status.HTTP_500_INTERNAL_SERVER_ERROR, "internal_error"),
]


def classify(exc: DomainError) -> tuple[int, str]:
    """Map a domain exception to (status code, error kind)."""
    for error_class, status_code, kind in ERROR_CLASSES:
        if isinstance(exc, error_class):
            return status_code, kind
    return status.HTTP_500_INTERNAL_SERVER_ERROR, "internal_error"


def error_response(
    request: Request,
    status_code: int,
    kind: str,
    message: str,
    details: Any = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Build the standard error response."""
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "message": message,
            "error": {"kind": kind, "message": message, "details": details or None},
            "request_id": getattr(request.state, "request_id", None),
        },
        headers=headers,
    )


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    """Handle domain exceptions raised by services."""
    status_code, kind = classify(exc)

    if status_code < 500:
        logger.info(
            "Request rejected",
            path=request.url.path,
            kind=kind,
            message=exc.message,
        )

    headers = {"WWW-Authenticate": "Bearer"} if kind == "unauthorized" else None
    # Store errors are logged where they are raised; never echo the driver error
    details = None if kind == "internal_error" else exc.details
    return error_response(request, status_code, kind, exc.message, details, headers)


async def request_validation_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """Handle malformed request bodies and parameters as validation errors."""
    problems = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        problems.append({"field": location or None, "message": err.get("msg", "Invalid value")})

    summary = "; ".join(
        f"{p['field']}: {p['message']}" if p["field"] else p["message"] for p in problems
    )
    message = f"Invalid request: {summary}" if summary else "Invalid request"

    logger.info("Request validation failed", path=request.url.path, problems=problems)
    return error_response(
        request,
        status.HTTP_400_BAD_REQUEST,
        "validation_error",
        message,
        problems,
    )


async def http_exception_handler(
    request: Request,
    exc: StarletteHTTPException,
) -> JSONResponse:
    """Handle routing errors (unknown path, wrong method) with the same format."""
    kinds = {
        status.HTTP_404_NOT_FOUND: "not_found",
        status.HTTP_405_METHOD_NOT_ALLOWED: "method_not_allowed",
    }
    return error_response(
        request,
        exc.status_code,
        kinds.get(exc.status_code, "error"),
        str(exc.detail),
        headers=getattr(exc, "headers", None),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install all exception handlers on the application."""
    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
