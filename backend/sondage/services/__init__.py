"""
Service modules for the sondage application.

This package contains the answer pipeline, the export service and the
database-backed services used by the API routes.
"""
