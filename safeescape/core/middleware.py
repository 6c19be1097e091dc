"""
@file middleware.py
@brief Middleware for provider failures and request logging

@details
- Maps ProviderError escaping the route layer to 503
- Converts any other unhandled error into a safe 500 response
- Logs method, path, status and latency for every request

@author SafeEscape Project
@date 2025-12-18
@version 1.0
@license AGPL-3.0
"""

import logging
import time

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from safeescape.core.exceptions import ProviderError

logger = logging.getLogger(__name__)


class ProviderErrorMiddleware(BaseHTTPMiddleware):
    """
    @brief Catch provider errors and return proper status messages
    """

    async def dispatch(self, request: Request, call_next):
        """
        @brief Process request and catch provider errors

        @param request The HTTP request
        @param call_next The next middleware/route handler
        @return Response or error response
        """
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except ProviderError as e:
            logger.error(f"Provider error handling {request.method} {request.url.path}: {e}")
            return JSONResponse(
                status_code=503,
                content={
                    "success": False,
                    "error": "Service unavailable",
                    "message": "Map provider is unavailable. Please try again shortly."
                }
            )
        except Exception as e:
            logger.exception(f"Unexpected error handling {request.method} {request.url.path}: {e}")
            return JSONResponse(
                status_code=500,
                content={
                    "success": False,
                    "error": "Internal server error",
                    "message": "An unexpected error occurred. Please try again later."
                }
            )

        elapsed_ms = int((time.perf_counter() - started) * 1000)
        logger.info(f"{request.method} {request.url.path} -> {response.status_code} ({elapsed_ms} ms)")
        return response
