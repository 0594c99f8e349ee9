"""
Configuration module for the sondage application.

This module defines application settings and environment-specific configurations
using Pydantic for validation and type checking.
"""
import os
import logging
from enum import Enum
from typing import List, Optional, Any

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class EnvironmentType(str, Enum):
    """
    Environment types for the application.
    
    Enum for different deployment environments.
    """
    LOCAL = "local"
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class Settings(BaseSettings):
    """
    Application settings.
    
    This class defines all configuration settings for the application,
    loaded from environment variables.
    """
    # Environment Configuration
    ENVIRONMENT: EnvironmentType = EnvironmentType.DEVELOPMENT
    
    # API Configuration
    PROJECT_NAME: str = "Sondage API"
    VERSION: str = "1.0.0"
    DEBUG: bool = True
    
    # CORS Configuration
    BACKEND_CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:8000"]
    
    # Database Configuration
    DATABASE_URL: str = "sqlite:///./survey.db"
    
    # If using PostgreSQL on Render, convert the URL if needed
    @field_validator("DATABASE_URL", mode="before")
    @classmethod
    def assemble_db_connection(cls, v: Optional[str]) -> Any:
        if isinstance(v, str) and v.startswith("postgres://"):
            return v.replace("postgres://", "postgresql://", 1)
        return v
    
    # Logging Configuration
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    
    # Session settings
    SECRET_KEY: str = "change-me-in-production"
    ADMIN_PASSWORD: str = "clubsecret2026"
    
    # Survey settings
    ANSWER_THRESHOLD: int = 100
    ANSWER_MIN_LENGTH: int = 2
    ANSWER_MAX_LENGTH: int = 50
    RAW_ANSWER_MAX_LENGTH: int = 200
    MAX_RESPONSE_TIME: int = 30
    
    # Seconds before banned words, corrections and toggles are reloaded
    PIPELINE_CONFIG_TTL: int = 30
    
    # Rate Limiting
    RATE_LIMIT_ENABLED: bool = True
    ANSWER_RATE_LIMIT: str = "75/minute"
    
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="allow"  # Allow extra fields in environment variables
    )


# Create settings instance
settings = Settings()

# Update DEBUG based on environment if not explicitly set
if os.getenv("DEBUG") is None:
    settings.DEBUG = settings.ENVIRONMENT in [EnvironmentType.LOCAL, EnvironmentType.DEVELOPMENT]

# Get logger for this module
logger = logging.getLogger(__name__)
logger.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
