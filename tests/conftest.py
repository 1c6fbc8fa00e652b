"""
Pytest configuration and fixtures.
"""

import os
import sys
from pathlib import Path

import pytest

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# Set test environment
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "false")
os.environ.setdefault("STORAGE_BACKEND", "memory")

from fastapi.testclient import TestClient

from api.server import create_app
from core.config import Settings
from core.storage.memory import InMemoryProductRepository
from manager.storage_manager import StorageManager


@pytest.fixture
def memory_settings():
    """Settings for an in-memory service that never waits between retries."""
    return Settings(
        storage_backend="memory",
        db_connect_attempts=2,
        db_connect_retry_delay_seconds=0,
        debug=False,
    )


@pytest.fixture
def repository():
    """Empty in-memory product repository."""
    return InMemoryProductRepository()


@pytest.fixture
def client(memory_settings, repository):
    """Test client backed by a fresh in-memory repository."""
    manager = StorageManager(repository=repository, app_settings=memory_settings)
    app = create_app(app_settings=memory_settings, storage_manager=manager)
    with TestClient(app) as test_client:
        yield test_client
