"""
Error taxonomy and FastAPI exception handlers.

Every failure the API reports is one of the `ServiceError` subclasses below.
Each carries its HTTP status and a client-safe message; storage causes stay
in the logs (chained via `raise ... from exc`) and never reach the response.

All error bodies have the shape `{"error": <message>}`.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class ServiceError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class MissingCredential(ServiceError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Missing or invalid Authorization header"


class InvalidCredential(ServiceError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid token"


class EmptyBatch(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "detections must be a non-empty array"


class MalformedBatch(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "each detection must be an object"


class InsertFailed(ServiceError):
    default_message = "Failed to insert detections batch"

    def __init__(self, message: str | None = None, *, index: int | None = None):
        # Zero-based position of the record the store rejected, if known.
        self.index = index
        super().__init__(message)


class QueryFailed(ServiceError):
    pass


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


async def handle_service_error(request: Request, exc: ServiceError) -> JSONResponse:
    if exc.status_code >= 500:
        # The operation boundary already logged the cause with its context.
        logger.warning(
            "request_failed method=%s path=%s status=%s error=%s",
            request.method,
            request.url.path,
            exc.status_code,
            type(exc).__name__,
        )
    else:
        logger.info(
            "request_rejected method=%s path=%s status=%s error=%s",
            request.method,
            request.url.path,
            exc.status_code,
            type(exc).__name__,
        )
    return error_response(exc.status_code, exc.message)


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info("request_malformed method=%s path=%s", request.method, request.url.path)
    return error_response(status.HTTP_400_BAD_REQUEST, "Malformed request body")


async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return error_response(exc.status_code, str(exc.detail))


async def handle_unexpected_exception(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "request_crashed method=%s path=%s exception_type=%s",
        request.method,
        request.url.path,
        type(exc).__name__,
        exc_info=exc,
    )
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, ServiceError.default_message)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ServiceError, handle_service_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(Exception, handle_unexpected_exception)
