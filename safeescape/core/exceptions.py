"""
@file exceptions.py
@brief Error taxonomy and centralized exception handlers
@details
Defines the planner errors raised by the service layer and the FastAPI
handlers that turn them, HTTP exceptions, validation errors and unexpected
server errors into consistent JSON responses.

- ValidationError: bad location or disaster type, rejected before network calls
- ProviderError: geo provider or advisory service failure, timeout or bad payload
- NoSafeZoneError: no usable evacuation plan could be produced

@author SafeEscape Project
@date 2025-12-18
@version 1.0
@license AGPL-3.0
"""

import logging
from typing import Optional

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

logger = logging.getLogger(__name__)


class SafeEscapeError(Exception):
    """Base class for all planner errors."""


class ValidationError(SafeEscapeError):
    """Request input is out of range or unknown."""


class ProviderError(SafeEscapeError):
    """An external provider failed, timed out or returned a malformed payload."""


class NoSafeZoneError(SafeEscapeError):
    """
    @brief Terminal planning failure
    @details Carries the underlying cause when one exists.
    """

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


async def http_exception_handler(request: Request, exc: HTTPException):
    """
    @brief Custom HTTP exception handler
    @details Provides consistent error responses across the API.
    """
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "error": str(exc.detail),
            "status_code": exc.status_code,
            "message": f"Request failed with HTTP {exc.status_code}"
        }
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    @brief Request body/query validation handler
    """
    return JSONResponse(
        status_code=422,
        content={
            "success": False,
            "error": "Validation error",
            "details": exc.errors(),
            "message": "Request validation failed. Check parameters and try again."
        }
    )


async def planner_validation_handler(request: Request, exc: ValidationError):
    return JSONResponse(
        status_code=400,
        content={"success": False, "error": str(exc)}
    )


async def no_safe_zone_handler(request: Request, exc: NoSafeZoneError):
    """
    @brief No plan could be produced by either planning path
    """
    logger.error(f"No safe zone for {request.url.path}: {exc} (cause: {exc.cause!r})")
    return JSONResponse(
        status_code=404,
        content={
            "success": False,
            "error": "No safe locations found",
            "message": str(exc)
        }
    )


async def provider_error_handler(request: Request, exc: ProviderError):
    logger.warning(f"Provider failure handling {request.url.path}: {exc}")
    return JSONResponse(
        status_code=503,
        content={
            "success": False,
            "error": "Service unavailable",
            "message": "Map provider is unavailable. Please try again shortly."
        }
    )


async def general_exception_handler(request: Request, exc: Exception):
    """
    @brief Catch-all exception handler
    @details
    Logs full error for debugging while returning safe message to client.
    """
    logger.exception(f"Unexpected error handling {request.url}: {exc}")

    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "Internal server error",
            "message": "An unexpected error occurred. Please try again later.",
        }
    )
