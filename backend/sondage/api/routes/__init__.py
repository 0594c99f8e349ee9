"""
Routes package for the sondage application.

This package contains API route definitions for all endpoints.
"""

from . import survey_routes
from . import admin_routes
from . import health
