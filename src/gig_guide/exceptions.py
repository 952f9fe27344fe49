"""
Domain exceptions and exception handlers with request ID support
Standardized error response format: { message, code, status_code, request_id, details? }
"""
import logging
from typing import Optional, Dict, Any

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .logging_config import get_request_id

logger = logging.getLogger(__name__)


class GigGuideError(Exception):
    """Base class for errors raised by the service layer"""

    status_code = status.HTTP_400_BAD_REQUEST
    code = "BAD_REQUEST"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class InvalidInputError(GigGuideError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "INVALID_INPUT"


class NotFoundError(GigGuideError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"


class PermissionDeniedError(GigGuideError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "PERMISSION_DENIED"


class ConflictError(GigGuideError):
    status_code = status.HTTP_409_CONFLICT
    code = "CONFLICT"


class InvalidTransitionError(ConflictError):
    """Raised when a purchased feature is moved to a state its current state cannot reach"""

    code = "INVALID_TRANSITION"


ERROR_CODE_MAP = {
    400: "BAD_REQUEST",
    401: "AUTH_ERROR",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "CONFLICT",
    413: "REQUEST_TOO_LARGE",
    422: "VALIDATION_ERROR",
    500: "INTERNAL_ERROR",
    503: "SERVICE_UNAVAILABLE",
}


class ErrorResponse:
    """
    Standard error response format

    Schema: { message, code, status_code, request_id, details? }
    """

    @staticmethod
    def create(
        message: str,
        code: str,
        status_code: int,
        request_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> dict:
        """
        Create standardized error response

        Args:
            message: Human-readable error message
            code: Error code (e.g., "VALIDATION_ERROR", "NOT_FOUND")
            status_code: HTTP status code
            request_id: Request ID from context (auto-fetched if None)
            details: Optional additional error details

        Returns:
            Dictionary with error details
        """
        if request_id is None:
            request_id = get_request_id()

        response = {
            "message": message,
            "code": code,
            "status_code": status_code,
            "request_id": request_id,
        }
        if details:
            response["details"] = details
        return response


async def gig_guide_exception_handler(request: Request, exc: GigGuideError) -> JSONResponse:
    """Map domain exceptions onto their HTTP status"""
    request_id = get_request_id()

    logger.info(
        f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}"
    )

    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse.create(
            message=exc.message,
            code=exc.code,
            status_code=exc.status_code,
            request_id=request_id,
            details=exc.details,
        ),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Handle HTTP exceptions with request ID"""
    request_id = get_request_id()
    error_code = ERROR_CODE_MAP.get(exc.status_code, "HTTP_ERROR")

    detail = exc.detail
    error_details = None
    if isinstance(detail, dict):
        error_message = detail.get("message", str(detail))
        error_code = detail.get("code", error_code)
        error_details = {k: v for k, v in detail.items() if k not in ["message", "code"]}
    else:
        error_message = str(detail) if detail else f"HTTP {exc.status_code} error"

    logger.warning(f"HTTP {exc.status_code}: {error_message} ({request.url.path})")

    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse.create(
            message=error_message,
            code=error_code,
            status_code=exc.status_code,
            request_id=request_id,
            details=error_details,
        ),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handle request validation errors with field-level details"""
    request_id = get_request_id()

    errors = []
    for err in exc.errors():
        field = ".".join(str(part) for part in err.get("loc", []) if part != "body")
        errors.append({
            "field": field,
            "message": err.get("msg", "Invalid value"),
            "type": err.get("type", "value_error"),
        })

    summary = "; ".join(f"{e['field']}: {e['message']}" for e in errors)
    logger.warning(f"Validation error on {request.url.path}: {summary}")

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=ErrorResponse.create(
            message=f"Validation error: {summary}" if summary else "Validation error",
            code="VALIDATION_ERROR",
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            request_id=request_id,
            details={"errors": errors},
        ),
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions; internals are only exposed in dev"""
    from .config import config

    request_id = get_request_id()

    error_message = "Internal server error"
    error_details = None
    if config.is_dev:
        error_message = f"Internal server error: {exc}"
        error_details = {"exception_type": type(exc).__name__}

    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse.create(
            message=error_message,
            code="INTERNAL_ERROR",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            request_id=request_id,
            details=error_details,
        ),
    )
