"""
Health check routes for the application.

This module provides endpoints for monitoring the application's health and status.
"""
from typing import Dict, Any
from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.orm import Session
from ..dependencies import get_db, config_cache
from ...core.config import settings

router = APIRouter(prefix="/api", tags=["health"])

@router.get("/health")
async def health_check(db: Session = Depends(get_db)) -> Dict[str, Any]:
    """
    Health check endpoint that verifies the application's status.
    
    Args:
        db: Database session dependency
        
    Returns:
        Dict[str, Any]: Health status information including database connectivity
    """
    try:
        # Test database connection
        db.execute(text("SELECT 1"))
        db_status = "healthy"
    except Exception as e:
        db_status = f"unhealthy: {str(e)}"
    
    return {
        "status": "ok",
        "version": settings.VERSION,
        "environment": settings.ENVIRONMENT,
        "database": db_status,
        "config_cache": config_cache.health_check(),
    }
