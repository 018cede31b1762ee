"""Error types raised by the store and the handlers that turn them into HTTP responses."""

import logging

from fastapi import Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Base class for every failure surfaced by a store or the request decoding."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UnknownFileTypeError(StorageError):
    """The sniffer could not classify the uploaded bytes. Nothing was written."""

    status_code = status.HTTP_415_UNSUPPORTED_MEDIA_TYPE

    def __init__(self, message: str = "unknown file type"):
        super().__init__(message)


class InvalidKeyError(StorageError):
    """The key is not a syntactically valid identifier for the backend."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, key: str):
        super().__init__(f"invalid key: {key!r}")
        self.key = key


class NotFoundError(StorageError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, key: str):
        super().__init__(f"file not found: {key}")
        self.key = key


class DecodeError(StorageError):
    """A multipart body or one of its text fields could not be decoded."""

    status_code = status.HTTP_400_BAD_REQUEST


class BackendError(StorageError):
    """The blob store or the document store driver reported a failure."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


async def handle_storage_errors(request: Request, exc: StorageError) -> JSONResponse:
    """Render a store error with the status its kind maps to."""
    if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    else:
        logger.info("%s %s rejected: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


async def handle_broad_exceptions(request: Request, call_next):
    """Handle any exception that propagates during the request."""
    try:
        return await call_next(request)
    except Exception as err:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": str(err) or "Internal server error"},
        )
