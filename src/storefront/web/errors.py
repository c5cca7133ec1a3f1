"""Exception handlers that render every failure as `{"error": message}`."""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError, ValidationError
from sqlalchemy.exc import InterfaceError, OperationalError
from starlette.exceptions import HTTPException as StarletteHTTPException

from storefront.shared.errors import AccessDenied

logger = structlog.get_logger(__name__)


def error_response(status_code: int, message: str, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


def flatten_messages(messages) -> str:
    """Turn protean's `{field: [message, ...]}` into one readable line."""
    if isinstance(messages, dict):
        parts = []
        for value in messages.values():
            parts.extend(value if isinstance(value, list | tuple) else [value])
        return "; ".join(str(part) for part in parts)
    if isinstance(messages, list | tuple):
        return "; ".join(str(part) for part in messages)
    return str(messages)


async def handle_validation_error(request: Request, exc: ValidationError) -> JSONResponse:
    return error_response(400, flatten_messages(exc.messages))


async def handle_not_found(request: Request, exc: ObjectNotFoundError) -> JSONResponse:
    return error_response(404, flatten_messages(exc.messages))


async def handle_access_denied(request: Request, exc: AccessDenied) -> JSONResponse:
    return error_response(403, "Forbidden")


async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if not errors:
        return error_response(400, "Invalid request")
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path"))
    message = first.get("msg", "Invalid value")
    return error_response(400, f"{location}: {message}" if location else message)


async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return error_response(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))


async def handle_datastore_unavailable(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Datastore unavailable", path=request.url.path, error=str(exc))
    return error_response(503, "Database unavailable")


async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error", path=request.url.path, method=request.method)
    return error_response(500, "Internal server error")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ValidationError, handle_validation_error)
    app.add_exception_handler(ObjectNotFoundError, handle_not_found)
    app.add_exception_handler(AccessDenied, handle_access_denied)
    app.add_exception_handler(RequestValidationError, handle_request_validation)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    for exc_class in (OperationalError, InterfaceError, ConnectionError):
        app.add_exception_handler(exc_class, handle_datastore_unavailable)
    app.add_exception_handler(Exception, handle_unexpected)
