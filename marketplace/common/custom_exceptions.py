from contextlib import contextmanager
from typing import Any, Optional
from fastapi import FastAPI, HTTPException, Request,status
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import SQLAlchemyError
from marketplace.common.utils import build_error, json_error
from marketplace.common.constants import request_id_ctx
from marketplace.common.logging_setup import get_logger

logger = get_logger("marketplace.errors")


class MarketplaceError(Exception):
    """Base for errors the seller api reports to its callers."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "SERVER_ERROR"

    def __init__(self, message: str = "", details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class Unauthenticated(MarketplaceError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "UNAUTHENTICATED"


class NotFound(MarketplaceError):
    """Absent rows and rows owned by someone else are reported the same way."""
    status_code = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"


class InvalidInput(MarketplaceError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "INVALID_INPUT"


class Conflict(MarketplaceError):
    status_code = status.HTTP_409_CONFLICT
    code = "CONFLICT"


class StorageFailure(MarketplaceError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "STORAGE_FAILURE"


@contextmanager
def storage_errors(operation: str, **context):
    """Log database errors with the operation context and re-raise them as StorageFailure."""
    try:
        yield
    except SQLAlchemyError as exc:
        logger.error(
            "storage.failed",
            extra={"operation": operation, "error_type": type(exc).__name__, **context},
            exc_info=exc,
        )
        raise StorageFailure("internal storage error") from exc


async def marketplace_error_handler(request: Request, exc: MarketplaceError):
    rid = request_id_ctx.get(None)

    if exc.status_code >= 500:
        # details of storage errors stay in the logs
        body = {"message": "Internal Server Error"}
    else:
        body = {"message": exc.message}
        if exc.details is not None:
            body["details"] = exc.details

    payload = build_error(code=exc.code, details=body, request_id=rid)
    return json_error(payload, status_code=exc.status_code)


async def storage_exception_handler(request: Request, exc: SQLAlchemyError):
    rid = request_id_ctx.get(None)
    seller = getattr(request.state, "seller_id", None)

    logger.error(
        "storage.unhandled",
        extra={
            "path": request.url.path,
            "method": request.method,
            "seller_id": seller,
            "request_id": rid,
        },
        exc_info=exc,
    )
    payload = build_error(code=StorageFailure.code, details={"message": "Internal Server Error"}, request_id=rid)
    return json_error(payload, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


async def fallback_handler(request: Request, exc: Exception):

    rid = request_id_ctx.get(None)
    body = {"message": "Internal Server Error"}

    logger.error(
        "unexpected.exception",
        extra={
            "path": request.url.path,
            "method": request.method,
            "request_id": rid,
        },
        exc_info=exc,
    )

    payload = build_error(code="SERVER_ERROR", details=body, request_id=rid)
    return json_error(payload, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    rid = request_id_ctx.get(None)
    logger.warning(
        "request.validation_failed",
        extra={
            "errors": exc.errors(),
            "path": request.url.path,
            "request_id": rid,
        },
    )

    fields = [".".join(str(p) for p in err.get("loc", ())) for err in exc.errors()]
    payload = build_error(code=InvalidInput.code, details={"message":"invalid request","fields":fields}, request_id=rid)
    return json_error(payload, status_code=status.HTTP_400_BAD_REQUEST)


async def http_exception_handler(request: Request, exc: HTTPException):

    rid = request_id_ctx.get(None)

    error_code = f"HTTP_{exc.status_code}"
    payload = build_error(code=error_code, details={"message":exc.detail}, request_id=rid)
    return json_error(payload, status_code=exc.status_code, headers=getattr(exc, "headers", None))


def register_all_exceptions(app: FastAPI):

    app.add_exception_handler(
        Exception, # catch all unidentified/unhandled exceptions
        fallback_handler
    )

    app.add_exception_handler(
        SQLAlchemyError,
        storage_exception_handler
    )

    app.add_exception_handler(
        MarketplaceError,
        marketplace_error_handler
    )

    app.add_exception_handler(
        RequestValidationError,
        validation_exception_handler
    )

    app.add_exception_handler(
        HTTPException,
        http_exception_handler
    )
