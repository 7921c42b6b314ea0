# ============================================================================
# FILE: app/core/errors.py
# Error taxonomy shared by every route, plus the FastAPI handlers that
# translate it into {"message": ...} responses
# ============================================================================
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"


class AppError(Exception):
    """Base class for errors that map to a fixed client response"""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = INTERNAL_ERROR_MESSAGE

    def __init__(self, message: str = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid request"


class ConflictError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Username or email already exists"


class InvalidCredentialsError(AppError):
    """Unknown username and wrong password both end up here"""

    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Invalid credentials"


class NotAuthenticatedError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Not authenticated"


class InvalidTokenError(NotAuthenticatedError):
    """Bad signature or malformed token"""


class ExpiredTokenError(NotAuthenticatedError):
    """Token signature is fine but its expiry has passed"""


class UserNotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "User not found"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Not found"


class UpstreamError(AppError):
    status_code = status.HTTP_502_BAD_GATEWAY
    message = "Metadata service unavailable"


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    # Token failures share one public message; keep the reason server side
    if isinstance(exc, NotAuthenticatedError):
        logger.debug(f"Rejected {request.method} {request.url.path}: {type(exc).__name__}")
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": NotAuthenticatedError.message},
        )
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info(f"Invalid request body for {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": "Invalid request body"},
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": INTERNAL_ERROR_MESSAGE},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
