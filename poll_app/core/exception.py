from fastapi import Request, status
from starlette.exceptions import HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
import logging
import traceback
import uuid
from typing import Optional

from poll_app.core.constants import ErrorMessages

logger = logging.getLogger(__name__)


# =============================================================================
# Domain errors
# =============================================================================

class PollAppError(Exception):
    """Base class for errors that map directly onto an HTTP status."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = ErrorMessages.INTERNAL_ERROR

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class BadRequestError(PollAppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = ErrorMessages.INVALID_REQUEST_BODY


class InvalidOptionError(BadRequestError):
    """The option does not exist or does not belong to the poll."""
    default_message = ErrorMessages.INVALID_OPTION


class UnauthorizedError(PollAppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = ErrorMessages.INVALID_TOKEN


class ForbiddenError(PollAppError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Forbidden"


class NotFoundError(PollAppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class InvalidPollError(NotFoundError):
    default_message = ErrorMessages.POLL_NOT_FOUND


class ConflictError(PollAppError):
    status_code = status.HTTP_409_CONFLICT
    default_message = ErrorMessages.DUPLICATE_USER


class StorageError(PollAppError):
    """A transaction failed; none of its writes are visible."""
    default_message = ErrorMessages.DATABASE_ERROR


# =============================================================================
# Exception handlers
# =============================================================================

def _request_id() -> str:
    return str(uuid.uuid4())[:8]


def _client_ip(request: Request) -> str:
    return request.client.host if request.client else "unknown"


async def poll_app_exception_handler(request: Request, exc: PollAppError):
    """Render domain errors as ``{"error": message}``."""
    request_id = _request_id()

    if exc.status_code >= 500:
        logger.error(
            f"Server error [ID: {request_id}] - "
            f"Status: {exc.status_code} - "
            f"Path: {request.url.path} - "
            f"Error: {exc.message}"
        )
    else:
        logger.warning(
            f"Client error [ID: {request_id}] - "
            f"Status: {exc.status_code} - "
            f"Path: {request.url.path} - "
            f"IP: {_client_ip(request)} - "
            f"Error: {exc.message}"
        )

    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == status.HTTP_401_UNAUTHORIZED else None
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message}, headers=headers)


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Malformed bodies and failed field validation are client errors (400).

    The first problem becomes the error message; all of them are listed
    under ``details``.
    """
    request_id = _request_id()
    errors = exc.errors()

    logger.warning(
        f"Validation error [ID: {request_id}] - "
        f"Path: {request.url.path} - "
        f"IP: {_client_ip(request)} - "
        f"Errors: {len(errors)}"
    )

    details = [
        {
            "loc": [str(part) for part in error.get("loc", ())],
            "msg": error.get("msg", ""),
        }
        for error in errors
    ]
    message = ErrorMessages.INVALID_REQUEST_BODY
    if details:
        field = ".".join(part for part in details[0]["loc"] if part != "body")
        message = f"{field}: {details[0]['msg']}" if field else details[0]["msg"]

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": message, "details": details},
    )


async def http_exception_handler(request: Request, exc: HTTPException):
    request_id = _request_id()

    if exc.status_code >= 500:
        logger.error(f"Server error [ID: {request_id}] - Status: {exc.status_code} - Path: {request.url.path} - Detail: {exc.detail}")
    elif exc.status_code >= 400:
        logger.warning(f"Client error [ID: {request_id}] - Status: {exc.status_code} - Path: {request.url.path} - IP: {_client_ip(request)}")

    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def database_exception_handler(request: Request, exc: SQLAlchemyError):
    request_id = _request_id()

    logger.error(
        f"Database error [ID: {request_id}] - "
        f"Path: {request.url.path} - "
        f"Error: {str(exc)} - "
        f"Type: {type(exc).__name__}"
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": ErrorMessages.DATABASE_ERROR},
    )


async def general_exception_handler(request: Request, exc: Exception):
    """Catch-all for unexpected errors."""
    request_id = _request_id()
    tb_str = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))

    logger.critical(
        f"Unexpected error [ID: {request_id}] - "
        f"Path: {request.url.path} - "
        f"Error: {str(exc)} - "
        f"Type: {type(exc).__name__} - "
        f"Traceback: {tb_str}"
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": ErrorMessages.INTERNAL_ERROR},
    )
