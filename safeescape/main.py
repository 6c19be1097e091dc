"""
@file main.py
@brief FastAPI application factory and root endpoint.
@details
Initializes the SafeEscape FastAPI application with:
- Logging configuration
- Redis cache connection and evacuation service construction
- Middleware setup (CORS, provider error handling)
- Router registration (Evacuation, Health)
- Planner exception handlers

@author SafeEscape Project
@date 2025-12-18
@version 1.0
@license AGPL-3.0
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException

# Internal modules
from safeescape.api import routes
from safeescape.api.endpoints import health
from safeescape.core import exceptions
from safeescape.core.cache import cache
from safeescape.core.config import get_settings
from safeescape.core.logging import setup_logging
from safeescape.core.middleware import ProviderErrorMiddleware
from safeescape.services.evacuation import EvacuationService

# Configure logging
logger = setup_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    @brief Application lifecycle manager
    @details
    Startup connects Redis and builds the evacuation service from the
    environment; shutdown closes Redis.
    """
    logger.info("=" * 60)
    logger.info("Starting SafeEscape API...")
    logger.info("=" * 60)

    settings = get_settings()
    if not settings.google_maps_api_key:
        logger.warning("⚠ GOOGLE_MAPS_API_KEY not set - evacuation endpoints will fail")

    await cache.connect(settings.redis_url)
    app.state.evacuation_service = EvacuationService.from_settings(settings, cache)
    logger.info("✓ Evacuation service ready")

    yield

    await cache.close()
    logger.info("SafeEscape API shutdown completed")


## @brief FastAPI application instance
app = FastAPI(
    title="SafeEscape API - Evacuation Route Planning",
    lifespan=lifespan,
    docs_url="/api/docs",
    redoc_url=None
)

# --------------------------------------------------------------------------
# Middleware
# --------------------------------------------------------------------------

# CORS
# Production Note: Restrict allow_origins in production
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(ProviderErrorMiddleware)


# --------------------------------------------------------------------------
# Routers
# --------------------------------------------------------------------------

app.include_router(health.router)
app.include_router(routes.router)


# --------------------------------------------------------------------------
# Exception Handlers
# --------------------------------------------------------------------------

app.add_exception_handler(HTTPException, exceptions.http_exception_handler)
app.add_exception_handler(RequestValidationError, exceptions.validation_exception_handler)
app.add_exception_handler(exceptions.ValidationError, exceptions.planner_validation_handler)
app.add_exception_handler(exceptions.NoSafeZoneError, exceptions.no_safe_zone_handler)
app.add_exception_handler(exceptions.ProviderError, exceptions.provider_error_handler)
app.add_exception_handler(Exception, exceptions.general_exception_handler)


@app.get("/")
def read_root():
    """
    @brief Service summary and endpoint index
    """
    return {
        "name": "SafeEscape API",
        "description": "Evacuation route optimization and safe-zone selection",
        "endpoints": [
            "POST /evacuation/optimize",
            "GET /evacuation/basic-route",
            "GET /evacuation/safe-locations",
            "GET /evacuation/disaster-types",
            "GET /health",
        ],
        "docs": "/api/docs",
    }
