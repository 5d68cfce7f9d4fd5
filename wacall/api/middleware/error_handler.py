"""
Global error handling middleware.

Catches anything the routes let escape, logs it with the traceback and
answers with a structured JSON 500.
"""

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from wacall.core.logging.logger import get_logger


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Global error handling middleware with context-aware logging."""

    async def dispatch(self, request: Request, call_next) -> Response:
        try:
            return await call_next(request)

        except HTTPException as http_exc:
            logger = get_logger(__name__)
            logger.warning(
                f"HTTP {http_exc.status_code} - {request.method} {request.url.path} - "
                f"Detail: {http_exc.detail}"
            )
            raise

        except Exception as exc:
            logger = get_logger(__name__)
            logger.error(
                f"Unhandled exception in {request.method} {request.url.path}: {exc}",
                exc_info=True,
            )
            return JSONResponse(
                status_code=500,
                content={
                    "status": "error",
                    "error_type": type(exc).__name__,
                    "path": request.url.path,
                },
            )
