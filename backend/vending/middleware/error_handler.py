"""
Global error handling middleware.

WHAT: Translate vending exceptions to HTTP responses
WHY: Consistent error bodies with proper status codes
HOW: FastAPI exception handlers for custom exceptions
"""

from datetime import datetime

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..utils.exceptions import (
    VendingException,
    OfferNotFoundError,
    ShopConfigNotFoundError,
    DuplicateOfferError,
    IndexOutOfRangeError,
    InvalidPriceError,
    InvalidCountError,
    MalformedCartLineError,
    ShopConfigFormatError,
    PersistenceError,
    PriceSourceError,
    BotProcessError,
)
from ..utils.logger import get_logger

logger = get_logger(__name__)


async def validation_error_handler(request: Request, exc: RequestValidationError):
    """
    Handle FastAPI RequestValidationError.
    
    WHAT: Request validation failed
    WHY: Invalid request payload
    HOW: Return 400 with field errors
    """
    logger.warning(f"Validation error: {exc.errors()}")
    
    # Clean up error details to be JSON serializable
    cleaned_errors = []
    for error in exc.errors():
        cleaned_error = {
            "type": error.get("type"),
            "loc": error.get("loc"),
            "msg": error.get("msg"),
            "input": error.get("input")
        }
        if "ctx" in error:
            cleaned_error["ctx"] = {
                k: str(v) if isinstance(v, Exception) else v
                for k, v in error["ctx"].items()
            }
        cleaned_errors.append(cleaned_error)
    
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": "VALIDATION_ERROR",
            "message": "Request validation failed",
            "details": cleaned_errors,
            "timestamp": datetime.now().isoformat()
        }
    )


def status_for(exc: VendingException) -> int:
    """HTTP status code for a vending exception."""
    if isinstance(exc, (OfferNotFoundError, ShopConfigNotFoundError)):
        return status.HTTP_404_NOT_FOUND
    if isinstance(exc, DuplicateOfferError):
        return status.HTTP_409_CONFLICT
    if isinstance(exc, (IndexOutOfRangeError, InvalidPriceError, InvalidCountError,
                        MalformedCartLineError, ShopConfigFormatError)):
        return status.HTTP_422_UNPROCESSABLE_ENTITY
    if isinstance(exc, (PriceSourceError, BotProcessError)):
        return status.HTTP_503_SERVICE_UNAVAILABLE
    if isinstance(exc, PersistenceError):
        return status.HTTP_500_INTERNAL_SERVER_ERROR
    return status.HTTP_400_BAD_REQUEST


async def vending_exception_handler(request: Request, exc: VendingException):
    """
    Handle VendingException and subclasses.
    
    WHAT: Domain error raised by an endpoint
    WHY: Failures stay scoped to the request; the session keeps running
    HOW: Return status code by exception type with code/message/details body
    """
    status_code = status_for(exc)
    if status_code >= 500:
        logger.error(f"Vending error: {exc.code} - {exc.message}")
    else:
        logger.warning(f"Vending error: {exc.code} - {exc.message}")
    return JSONResponse(
        status_code=status_code,
        content={
            "error": exc.code,
            "message": exc.message,
            "details": exc.details,
            "timestamp": datetime.now().isoformat()
        }
    )


def register_exception_handlers(app):
    """
    Register all exception handlers with FastAPI app.
    
    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(VendingException, vending_exception_handler)
    
    logger.info("Exception handlers registered")
