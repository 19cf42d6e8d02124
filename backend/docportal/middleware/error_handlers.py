"""Tradução das exceções do domínio em respostas HTTP."""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from docportal.exceptions import DependencyError, PortalError, ValidationError

logger = logging.getLogger(__name__)


def _error_response(exc: PortalError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "code": exc.code},
    )


def first_validation_message(exc: RequestValidationError) -> tuple[str, str | None]:
    errors = exc.errors()
    if not errors:
        return ValidationError.default_message, None
    first = errors[0]
    loc = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path")]
    ctx_error = (first.get("ctx") or {}).get("error")
    message = str(ctx_error) if ctx_error else first.get("msg", ValidationError.default_message)
    return message, ".".join(loc) or None


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(PortalError)
    async def portal_error_handler(request: Request, exc: PortalError):
        if isinstance(exc, DependencyError):
            logger.error("dependency failure on %s %s: %s", request.method, request.url.path, exc.detail)
        return _error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        message, field = first_validation_message(exc)
        return _error_response(ValidationError(message, field=field))

    @app.exception_handler(SQLAlchemyError)
    async def database_error_handler(request: Request, exc: SQLAlchemyError):
        logger.error("database error on %s %s", request.method, request.url.path, exc_info=exc)
        return _error_response(DependencyError(str(exc)))
