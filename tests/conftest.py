"""
Pytest configuration and shared fixtures.
"""

import pytest
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.db.models import Base
from app.schemas.project import Project
from app.storage import MemoryProjectStore, get_project_store


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow")
    config.addinivalue_line("markers", "integration: marks integration tests")


@pytest.fixture(scope="session")
def anyio_backend():
    """Backend for async tests."""
    return "asyncio"


# Create a shared test database engine
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"
test_engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


@pytest.fixture(autouse=True)
def setup_database():
    """Create tables before each test and drop after."""
    Base.metadata.create_all(bind=test_engine)
    yield
    Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def sql_session_factory():
    """Session factory bound to the in-memory test database."""
    return TestingSessionLocal


@pytest.fixture
def memory_store():
    return MemoryProjectStore()


@pytest.fixture(autouse=True)
def override_project_store(memory_store):
    """Route API requests to a fresh in-memory store for each test."""
    app.dependency_overrides[get_project_store] = lambda: memory_store
    yield
    app.dependency_overrides.pop(get_project_store, None)


@pytest.fixture
def default_project():
    """Project with the default assumptions."""
    return Project()
