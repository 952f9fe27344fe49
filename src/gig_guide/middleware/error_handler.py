"""
Database error handling
Sanitizes SQLAlchemy errors so SQL, paths and connection strings never reach a client
"""
import logging
import re
from typing import Any, Dict

from fastapi import Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError

from ..exceptions import ErrorResponse
from ..logging_config import get_request_id

logger = logging.getLogger(__name__)


class ErrorSanitizer:
    """
    Sanitizes error text before it is placed in an API response

    - Removes file paths
    - Hides SQL statements and connection strings
    - Truncates long messages
    """

    PATH_PATTERN = re.compile(r'(?:[A-Z]:\\|(?<![\w.])/)[^\s\'"<>|]+')
    SQL_PATTERN = re.compile(r'\b(SELECT|INSERT|UPDATE|DELETE|CREATE|DROP|ALTER)\s+.*', re.IGNORECASE)
    CONNECTION_PATTERN = re.compile(r'(postgresql|postgres|sqlite|mysql)(\+\w+)?://[^\s\'"<>]+')
    EMAIL_PATTERN = re.compile(r'\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b')

    MAX_LENGTH = 500

    @classmethod
    def sanitize_message(cls, message: str) -> str:
        if not message:
            return "An error occurred"

        message = cls.CONNECTION_PATTERN.sub('[REDACTED_CONNECTION]', message)
        message = cls.SQL_PATTERN.sub('SQL statement [REDACTED]', message)
        message = cls.PATH_PATTERN.sub('[REDACTED_PATH]', message)
        message = cls.EMAIL_PATTERN.sub('[REDACTED_EMAIL]', message)

        if len(message) > cls.MAX_LENGTH:
            message = message[:cls.MAX_LENGTH] + "... [truncated]"
        return message

    @classmethod
    def sanitize_details(cls, details: Dict[str, Any]) -> Dict[str, Any]:
        """Drop credential-like keys and sanitize nested string values"""
        if not details:
            return {}

        sanitized = {}
        for key, value in details.items():
            if key.lower() in ['password', 'token', 'secret', 'api_key', 'connection_string']:
                continue
            if isinstance(value, str):
                sanitized[key] = cls.sanitize_message(value)
            elif isinstance(value, dict):
                sanitized[key] = cls.sanitize_details(value)
            elif isinstance(value, (list, tuple)):
                sanitized[key] = [
                    cls.sanitize_message(item) if isinstance(item, str) else item
                    for item in value
                ]
            else:
                sanitized[key] = value
        return sanitized


async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """
    Handle database errors without leaking SQL, schema or connection details

    Unique and foreign-key violations surface as 409 so a duplicate contact
    e-mail or favorite reads as a conflict rather than a server fault.
    """
    request_id = get_request_id()

    if isinstance(exc, IntegrityError):
        logger.warning(
            f"Integrity error on {request.method} {request.url.path}: "
            f"{ErrorSanitizer.sanitize_message(str(exc.orig))}"
        )
        status_code = status.HTTP_409_CONFLICT
        error_message = "The record conflicts with existing data."
        error_code = "DATABASE_CONSTRAINT_ERROR"
    elif isinstance(exc, OperationalError):
        logger.error(f"Database connection error on {request.url.path}", exc_info=True)
        status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        error_message = "Database connection error. Please try again later."
        error_code = "DATABASE_CONNECTION_ERROR"
    else:
        logger.error(f"Database error on {request.url.path}: {type(exc).__name__}", exc_info=True)
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
        error_message = "A database error occurred. Please try again later."
        error_code = "DATABASE_ERROR"

    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse.create(
            message=error_message,
            code=error_code,
            status_code=status_code,
            request_id=request_id,
            details={"error_type": type(exc).__name__},
        ),
    )
