"""
    Centralized exception handling for the FastAPI application.
"""
from typing import Dict, Type
from fastapi import Request
from starlette.exceptions import HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
import logging

log = logging.getLogger(__name__)

class APIException(Exception):
    """Base class for API exceptions."""
    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(self.detail)

    @property
    def status_code(self) -> int:
        return status_for(type(self))

class ValidationError(APIException):
    """Missing or invalid client input."""

class FileTooLargeError(ValidationError):
    """Uploaded file exceeds the configured size limit."""
    def __init__(self, detail: str = "File too large"):
        super().__init__(detail)

class UploadError(APIException):
    """Exception for object store write failures."""

class PersistenceError(APIException):
    """Exception for metadata store read/write failures."""

class ConnectivityError(APIException):
    """Startup diagnostic failure. Logged, never fatal."""

ERROR_STATUS: Dict[Type[APIException], int] = {
    ValidationError: 400,
    FileTooLargeError: 413,
    UploadError: 500,
    PersistenceError: 500,
    ConnectivityError: 503,
}

def status_for(exc_type: Type[BaseException]) -> int:
    """Resolves the HTTP status for an exception class, walking its MRO."""
    for klass in exc_type.__mro__:
        if klass in ERROR_STATUS:
            return ERROR_STATUS[klass]
    return 500

def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})

async def api_exception_handler(request: Request, exc: APIException):
    """Handles API exceptions."""
    status_code = exc.status_code
    if status_code >= 500:
        log.error("API Exception: %s", exc.detail, exc_info=exc)
    else:
        log.warning("API Exception: %s", exc.detail)
    return error_response(status_code, exc.detail)

async def http_exception_handler(request: Request, exc: HTTPException):
    """Handles FastAPI HTTP exceptions."""
    log.warning("HTTP Exception: %s", exc.detail)
    return error_response(exc.status_code, str(exc.detail))

async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Handles malformed requests rejected by FastAPI before reaching a route."""
    errors = exc.errors()
    message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
    log.warning("Request validation failed: %s", message)
    return error_response(ERROR_STATUS[ValidationError], message)

async def generic_exception_handler(request: Request, exc: Exception):
    """Handles all other exceptions."""
    log.error("Unhandled Exception: %s", exc, exc_info=exc)
    return error_response(500, "An unexpected error occurred.")

def add_exception_handlers(app):
    """Adds exception handlers to the FastAPI app."""
    app.add_exception_handler(APIException, api_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
