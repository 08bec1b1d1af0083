from fastapi import Request, HTTPException, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
import logging

from app.core.error_codes import (
    VALIDATION_ERROR,
    NOT_FOUND_ERROR,
    FORBIDDEN_ERROR,
    SELF_REFERENCE,
    DUPLICATE_REQUEST,
)

logger = logging.getLogger("uvicorn.error")

class CustomHTTPException(Exception):
    """A custom HTTPException that we can use for additional context."""
    def __init__(self, status_code: int, detail: str, error_code: str = None, headers: dict = None):
        self.status_code = status_code
        self.detail = detail
        self.error_code = error_code
        self.headers = headers
        super().__init__(detail)  # Initialize the base Exception with the detail message


class ValidationError(CustomHTTPException):
    """Missing or malformed input"""
    def __init__(self, detail: str = "Invalid input"):
        super().__init__(status.HTTP_422_UNPROCESSABLE_ENTITY, detail, VALIDATION_ERROR)


class SelfReferenceError(CustomHTTPException):
    """The actor targeted themselves"""
    def __init__(self, detail: str = "You cannot target yourself"):
        super().__init__(status.HTTP_400_BAD_REQUEST, detail, SELF_REFERENCE)


class DuplicateRequestError(CustomHTTPException):
    """A relationship between the two users already exists"""
    def __init__(self, detail: str = "Friend request already exists"):
        super().__init__(status.HTTP_400_BAD_REQUEST, detail, DUPLICATE_REQUEST)


class ForbiddenError(CustomHTTPException):
    """The actor has no permission over the row"""
    def __init__(self, detail: str = "You do not have permission to perform this action"):
        super().__init__(status.HTTP_403_FORBIDDEN, detail, FORBIDDEN_ERROR)


class NotFoundError(CustomHTTPException):
    """Referenced row or user is absent"""
    def __init__(self, detail: str = "Resource not found"):
        super().__init__(status.HTTP_404_NOT_FOUND, detail, NOT_FOUND_ERROR)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handle validation errors and return a structured JSON response."""
    logger.error(f"Validation error on {request.url}: {exc.errors()}")

    errors = exc.errors()
    # Sanitize un-serializable objects in ctx
    for error in errors:
        ctx = error.get("ctx")
        if ctx and isinstance(ctx.get("error"), Exception):
            ctx["error"] = str(ctx["error"])

    return JSONResponse(
        status_code=422,
        content={
            "detail": errors,
            "message": "Validation failed. Please check your request data.",
            "error_code": VALIDATION_ERROR,
        },
    )

async def http_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Custom HTTP exception handler for better error responses."""
    if isinstance(exc, CustomHTTPException):
        logger.error(f"Custom HTTP error on {request.url}: {exc.detail}")
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "detail": exc.detail,
                "error_code": exc.error_code
            },
            headers=exc.headers or {},
        )
    elif isinstance(exc, HTTPException):
        logger.error(f"HTTP error on {request.url}: {exc.detail}")
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail},
            headers=exc.headers or {},
        )

    logger.error(f"Unexpected error on {request.url}: {str(exc)}")
    return JSONResponse(
        status_code=500,
        content={"detail": "An unexpected error occurred"},
    )
