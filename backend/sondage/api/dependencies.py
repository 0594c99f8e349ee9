"""
Dependencies for FastAPI application.

This module provides dependency functions and shared objects for the API
routes: database session management, the rate limiter and the pipeline
configuration cache.
"""
from slowapi import Limiter
from slowapi.util import get_remote_address

from sondage.core.config import settings
from sondage.core.database import get_db
from sondage.services.config_cache import ConfigCache

# Initialize rate limiter
limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)

# Banned words, corrections and toggles, refreshed every PIPELINE_CONFIG_TTL seconds
config_cache = ConfigCache(ttl=settings.PIPELINE_CONFIG_TTL)

__all__ = ['get_db', 'limiter', 'config_cache']
