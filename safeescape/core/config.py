"""
@file config.py
@brief Environment-driven application settings

@details
Reads provider credentials, timeouts and limits from environment variables.
Settings are resolved once per process by get_settings(); tests build their
own Settings instances directly.

@author SafeEscape Project
@date 2025-12-18
@version 1.0
@license AGPL-3.0
"""

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional


def _float_env(key: str, default: float) -> float:
    val = os.getenv(key)
    if val is None or val == "":
        return default
    try:
        return max(0.1, float(val))
    except ValueError:
        return default


def _int_env(key: str, default: int) -> int:
    val = os.getenv(key)
    if val is None or val == "":
        return default
    try:
        return max(1, int(val))
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    google_maps_api_key: Optional[str] = None
    gemini_api_key: Optional[str] = None
    gemini_model: str = "gemini-1.5-pro"
    ## @brief Seconds allowed for the advisory path before falling back
    advisory_timeout_s: float = 5.0
    ## @brief Seconds allowed for each geo provider call
    geo_timeout_s: float = 5.0
    max_safe_zones: int = 3
    places_cache_ttl_s: int = 300
    redis_url: str = "redis://localhost:6379/0"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    @brief Load settings from the environment
    """
    return Settings(
        google_maps_api_key=os.getenv("GOOGLE_MAPS_API_KEY") or None,
        gemini_api_key=os.getenv("GEMINI_API_KEY") or None,
        gemini_model=os.getenv("GEMINI_MODEL", "gemini-1.5-pro"),
        advisory_timeout_s=_float_env("ADVISORY_TIMEOUT_S", 5.0),
        geo_timeout_s=_float_env("GEO_TIMEOUT_S", 5.0),
        max_safe_zones=_int_env("MAX_SAFE_ZONES", 3),
        places_cache_ttl_s=_int_env("PLACES_CACHE_TTL_S", 300),
        redis_url=os.getenv("REDIS_URL", "redis://localhost:6379/0"),
    )
