from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from restaurant_api.core.errors import CatalogError, InternalServiceError, ParseError, ValidationError

logger = logging.getLogger(__name__)
ERRORS_PREFIX = "[ERRORS]"
GENERIC_ERROR_MESSAGE = "Internal server error"


def _error_response(exc: CatalogError) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    message = GENERIC_ERROR_MESSAGE if exc.status_code >= 500 else exc.message
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": message, "reason": exc.reason},
        headers=headers,
    )


def _request_validation_to_catalog_error(exc: RequestValidationError) -> CatalogError:
    errors = exc.errors()
    for error in errors:
        if error.get("type") == "json_invalid":
            detail = (error.get("ctx") or {}).get("error", "malformed body")
            return ParseError(f"Invalid JSON format: {detail}")

    parts = []
    for error in errors:
        loc = [str(item) for item in error.get("loc", ()) if item != "body"]
        field = ".".join(loc) or "body"
        parts.append(f"{field}: {error.get('msg')}")
    return ValidationError("; ".join(parts))


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(CatalogError)
    async def catalog_error_handler(request: Request, exc: CatalogError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error(
                "%s %s %s failed: %s",
                ERRORS_PREFIX,
                request.method,
                request.url.path,
                exc.message,
                exc_info=exc.__cause__ or exc,
            )
        else:
            logger.warning(
                "%s %s %s refused: %s",
                ERRORS_PREFIX,
                request.method,
                request.url.path,
                exc.message,
                extra={"reason": exc.reason, "status_code": exc.status_code},
            )
        return _error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        error = _request_validation_to_catalog_error(exc)
        logger.warning(
            "%s %s %s invalid request: %s",
            ERRORS_PREFIX,
            request.method,
            request.url.path,
            error.message,
            extra={"reason": error.reason, "status_code": error.status_code},
        )
        return _error_response(error)

    @app.exception_handler(SQLAlchemyError)
    async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
        logger.error(
            "%s %s %s database error",
            ERRORS_PREFIX,
            request.method,
            request.url.path,
            exc_info=exc,
        )
        return _error_response(InternalServiceError(GENERIC_ERROR_MESSAGE))

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        message = "Endpoint not found" if exc.status_code == 404 else str(exc.detail)
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": message, "reason": "http_error"},
            headers=getattr(exc, "headers", None),
        )
