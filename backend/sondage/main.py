"""
Main application module for the sondage backend.

This module configures and starts the FastAPI application, including middleware,
exception handlers, and route registration.
"""
import logging
from typing import Dict, Any
from pathlib import Path
from dotenv import load_dotenv

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.sessions import SessionMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

# Load environment variables from backend/.env
backend_dir = Path(__file__).parent.parent
env_path = backend_dir / '.env'
load_dotenv(dotenv_path=env_path)

from .api.routes.survey_routes import router as survey_router
from .api.routes.admin_routes import router as admin_router, auth_router as admin_auth_router
from .api.routes.health import router as health_router
from .api.dependencies import limiter
from .api.models import ErrorResponse
from .core.init_db import init_db
from .core.config import settings

# Set up logging
# Create logs directory if it doesn't exist
logs_dir = backend_dir / 'logs'
logs_dir.mkdir(exist_ok=True)

# Configure logging to write to both file and console
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format=settings.LOG_FORMAT,
    handlers=[
        logging.FileHandler(logs_dir / 'app.log'),
        logging.StreamHandler()
    ]
)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Anonymous party-game survey with answer cleaning and fuzzy deduplication",
    version=settings.VERSION,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    debug=False  # Disable debug mode in production
)

# Add rate limiter to app state
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Add session middleware
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.SECRET_KEY,
    session_cookie="sondage_session",
    max_age=24 * 60 * 60,
)


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Global exception handler for all unhandled exceptions.
    
    Args:
        request: The request that caused the exception
        exc: The exception that was raised
    
    Returns:
        JSONResponse: A JSON response with error details
    """
    logger.error(f"Unhandled exception: {str(exc)}", exc_info=True)
    
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            message="An unexpected error occurred",
            details=str(exc) if settings.DEBUG else None,
        ).model_dump(),
    )


@app.get("/", include_in_schema=False)
async def root() -> Dict[str, Any]:
    """
    Root endpoint that provides basic API information.
    
    Returns:
        Dict[str, Any]: API information
    """
    return {
        "message": f"Welcome to {settings.PROJECT_NAME}",
        "docs_url": "/api/docs",
        "health_check": "/api/health"
    }


# Register routes
app.include_router(health_router)
app.include_router(survey_router)
app.include_router(admin_auth_router)
app.include_router(admin_router)


@app.on_event("startup")
async def startup_event() -> None:
    """
    Execute startup tasks for the application.
    
    Performs initialization tasks when the application starts.
    """
    logger.info(f"Starting {settings.PROJECT_NAME} v{settings.VERSION}")
    logger.info(f"Environment: {settings.ENVIRONMENT.value}")
    logger.info(f"Answer threshold: {settings.ANSWER_THRESHOLD}, rate limit: {settings.ANSWER_RATE_LIMIT}")
    
    # Initialize database
    init_db()


@app.on_event("shutdown")
async def shutdown_event() -> None:
    """
    Execute shutdown tasks for the application.
    
    Performs cleanup tasks when the application shuts down.
    """
    logger.info(f"Shutting down {settings.PROJECT_NAME}")
