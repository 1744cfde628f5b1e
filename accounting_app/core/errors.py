import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from fastapi import FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError


logger = logging.getLogger(__name__)


class AccountingError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.__class__.__name__)
        self.message = message


class ValidationError(AccountingError):
    """Malformed or missing required input."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFound(AccountingError):
    status_code = status.HTTP_404_NOT_FOUND


class DuplicateNameError(AccountingError):
    """A category name collided with the unique constraint."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str = "Category name already exists"):
        super().__init__(message)


class DatastoreError(AccountingError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


@contextmanager
def datastore_errors(message: str) -> Iterator[None]:
    """Turn any SQLAlchemy failure inside the block into a ``DatastoreError``."""
    try:
        yield
    except SQLAlchemyError as exc:
        logger.exception("%s: %s", message, exc)
        raise DatastoreError(message) from exc


def error_response(exc: AccountingError) -> Response:
    if exc.message is None:
        return Response(status_code=exc.status_code)
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AccountingError)
    async def handle_accounting_error(request: Request, exc: AccountingError):
        return error_response(exc)

    # Bad JSON, wrong field types and the like are plain 400s
    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        logger.debug("Rejected request to %s: %s", request.url.path, exc.errors())
        return Response(status_code=status.HTTP_400_BAD_REQUEST)

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": "Internal server error"},
        )
