"""
Pytest configuration file for the sondage application.

This module defines fixtures and configuration for pytest tests.
"""
import os
import sys
import logging
from typing import Generator, TYPE_CHECKING
from pathlib import Path

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

# Test settings must be in place before the application is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["ADMIN_PASSWORD"] = "test-password"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["ENVIRONMENT"] = "local"

from sondage.main import app as main_app
from sondage.core.database import Base, SessionLocal, engine
from sondage.core.init_db import init_db
from sondage.api.dependencies import config_cache, limiter

if TYPE_CHECKING:
    from sqlalchemy.orm import Session


# Configure logging for tests
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

ADMIN_PASSWORD = "test-password"


@pytest.fixture
def app() -> FastAPI:
    """
    FastAPI test application.
    
    Returns:
        FastAPI: Application instance for testing
    """
    limiter.enabled = False
    return main_app


@pytest.fixture
def fresh_db() -> None:
    """
    Recreate and reseed the in-memory database.
    
    Also drops the cached pipeline configuration so each test sees the seed
    banned words and corrections.
    """
    Base.metadata.drop_all(bind=engine)
    init_db()
    config_cache.invalidate()


@pytest.fixture
def db_session(fresh_db: None) -> Generator["Session", None, None]:
    """
    Database session on a freshly seeded database.
    
    Yields:
        Session: SQLAlchemy session
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client(app: FastAPI, fresh_db: None) -> Generator[TestClient, None, None]:
    """
    TestClient fixture.
    
    Provides a FastAPI TestClient for testing API endpoints, with startup
    events run.
    
    Args:
        app: FastAPI application fixture
        fresh_db: Database reset fixture
        
    Yields:
        TestClient: FastAPI test client
    """
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def admin_client(client: TestClient) -> TestClient:
    """
    TestClient holding an admin session.
    
    Args:
        client: TestClient fixture
        
    Returns:
        TestClient: Logged-in test client
    """
    response = client.post("/api/admin/login", json={"password": ADMIN_PASSWORD})
    assert response.status_code == 200
    return client


@pytest.fixture
def question_id(admin_client: TestClient) -> int:
    """
    Id of the first seeded question.
    
    Args:
        admin_client: Logged-in test client
        
    Returns:
        int: Question identifier
    """
    questions = admin_client.get("/api/admin/questions").json()
    return min(q["id"] for q in questions)
