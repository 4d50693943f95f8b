# 1. Standard Library
from collections.abc import Generator
from typing import Any

# 2. Third-Party Libraries
import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session

# 3. Application Layers
from intellisource.api.main import create_app
from intellisource.api.routes import get_ai_service
from intellisource.data_access.database import Database
from intellisource.services.ai_service import AIService


# --- Setup: Isolated Testing Environment ---

@pytest.fixture(name="database")
def database_fixture() -> Generator[Database, Any, None]:
    """A clean, in-memory SQLite store for every test."""
    database = Database("sqlite://")
    database.connect(max_retries=1)
    yield database
    database.dispose()


@pytest.fixture(name="session")
def session_fixture(database: Database) -> Generator[Session, Any, None]:
    with database.session() as session:
        yield session


@pytest.fixture(name="client")
def client_fixture() -> Generator[TestClient, Any, None]:
    """Runs the real lifespan against a private in-memory store.

    The hosted chat model is replaced by an AIService without an API key,
    which always answers with the fallback reply.
    """
    app = create_app(Database("sqlite://"))
    app.dependency_overrides[get_ai_service] = lambda: AIService(api_key="")
    with TestClient(app) as client:
        yield client
