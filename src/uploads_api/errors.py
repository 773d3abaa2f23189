"""Error types raised by the upload handlers and the handlers that render them."""

import logging
from typing import Union

import pydantic
from fastapi.exceptions import RequestValidationError
from fastapi import Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class UploadsApiError(Exception):
    """Base class for errors that end the current request with a status code."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MissingParameter(UploadsApiError):
    status_code = status.HTTP_400_BAD_REQUEST


class NoFilesProvided(UploadsApiError):
    status_code = status.HTTP_400_BAD_REQUEST


class NotFound(UploadsApiError):
    status_code = status.HTTP_404_NOT_FOUND


class StorageFailure(UploadsApiError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


async def handle_uploads_api_error(request: Request, exc: UploadsApiError) -> JSONResponse:
    if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected ({exc.status_code}): {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.message},
    )


async def handle_pydantic_validation_errors(
    request: Request, exc: Union[pydantic.ValidationError, RequestValidationError]
) -> JSONResponse:
    errors = exc.errors()
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "message": "Request validation failed",
            "errors": [{"msg": error["msg"], "loc": list(error["loc"])} for error in errors],
        },
    )


async def handle_broad_exceptions(request: Request, call_next):
    """Handle any exception that goes unhandled by a more specific exception handler."""
    try:
        return await call_next(request)
    except Exception:
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": "Internal server error"},
        )
