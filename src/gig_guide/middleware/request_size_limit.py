"""
Request Size Limit Middleware
Rejects oversized bodies from their Content-Length before they are read
"""
import logging
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from ..exceptions import ErrorResponse
from ..logging_config import get_request_id

logger = logging.getLogger(__name__)


class RequestSizeLimitMiddleware(BaseHTTPMiddleware):
    """
    Enforce request body size limits

    Multipart uploads (gallery images, posters, profile pictures) get the
    larger upload limit; JSON bodies get the request limit.

    Usage:
        app.add_middleware(
            RequestSizeLimitMiddleware,
            max_request_bytes=2 * 1024 * 1024,
            max_upload_bytes=10 * 1024 * 1024,
        )
    """

    def __init__(self, app, max_request_bytes: int = 2_097_152, max_upload_bytes: int = 10_485_760):
        super().__init__(app)
        self.max_request_bytes = max_request_bytes
        self.max_upload_bytes = max_upload_bytes

        logger.info(
            f"✓ Request size limits: "
            f"max_request={get_human_readable_size(self.max_request_bytes)}, "
            f"max_upload={get_human_readable_size(self.max_upload_bytes)}"
        )

    async def dispatch(self, request: Request, call_next: Callable):
        if request.method in ["GET", "HEAD", "OPTIONS"]:
            return await call_next(request)

        content_length = request.headers.get("content-length")
        if content_length is None:
            return await call_next(request)

        try:
            size = int(content_length)
        except ValueError:
            return JSONResponse(
                status_code=400,
                content=ErrorResponse.create(
                    message="Invalid Content-Length header",
                    code="INVALID_CONTENT_LENGTH",
                    status_code=400,
                    request_id=get_request_id(),
                ),
            )

        content_type = request.headers.get("content-type", "").lower()
        max_size = self.max_upload_bytes if "multipart/form-data" in content_type else self.max_request_bytes

        if size > max_size:
            logger.warning(
                f"Request size limit exceeded: {get_human_readable_size(size)} > "
                f"{get_human_readable_size(max_size)} (path: {request.url.path}, method: {request.method})"
            )
            return JSONResponse(
                status_code=413,
                content=ErrorResponse.create(
                    message=(
                        f"Request body too large. Maximum allowed size is "
                        f"{get_human_readable_size(max_size)}, but received {get_human_readable_size(size)}."
                    ),
                    code="REQUEST_TOO_LARGE",
                    status_code=413,
                    request_id=get_request_id(),
                    details={"max_size_bytes": max_size, "received_bytes": size},
                ),
            )

        return await call_next(request)


def get_human_readable_size(bytes_size: int) -> str:
    """Convert bytes to a human-readable size, e.g. "1.5MB" """
    if bytes_size < 1024:
        return f"{bytes_size}B"
    elif bytes_size < 1024 * 1024:
        return f"{bytes_size / 1024:.1f}KB"
    elif bytes_size < 1024 * 1024 * 1024:
        return f"{bytes_size / (1024 * 1024):.1f}MB"
    return f"{bytes_size / (1024 * 1024 * 1024):.1f}GB"
