"""Domain errors raised by the service layer and their HTTP mapping."""
import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class GardenClubError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthorized(GardenClubError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Not authenticated"


class Forbidden(GardenClubError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Forbidden"


class NotFound(GardenClubError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class ValidationError(GardenClubError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class Conflict(GardenClubError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Conflict"


class StoreError(GardenClubError):
    default_message = "A storage error occurred"


async def _domain_error_handler(request: Request, exc: GardenClubError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, Unauthorized) else None
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message}, headers=headers)


async def _store_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("Store failure during %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": StoreError.default_message},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(GardenClubError, _domain_error_handler)
    app.add_exception_handler(SQLAlchemyError, _store_error_handler)
