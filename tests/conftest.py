# conftest.py

import os
import pytest
from unittest.mock import MagicMock
from fastapi.testclient import TestClient

from skill_system.models import Trick

# --- Environment Configuration ---

def pytest_configure(config):
    """
    Forcefully sets the correct environment variables for the entire test session.
    This overrides any variables from the CI runner, ensuring consistency.
    """
    os.environ["NEO4J_URI"] = "neo4j://localhost:7687"
    os.environ["NEO4J_USERNAME"] = "neo4j"
    os.environ["NEO4J_PASSWORD"] = "testpassword"


# --- Sample Data ---

@pytest.fixture
def chain_tricks():
    """Safety Roll -> Kong Vault -> Double Kong, linked by name."""
    return [
        Trick("t1", "Safety Roll", []),
        Trick("t2", "Kong Vault", ["Safety Roll"]),
        Trick("t3", "Double Kong", ["Kong Vault"]),
    ]


# --- Mocks and Fixtures ---

@pytest.fixture
def mock_graph_db():
    """
    Overrides the Neo4j driver dependency with a mock.
    `with driver.session() as session` yields the returned mock session, so tests
    configure session.execute_read / execute_write side effects directly.
    """
    from api.main import app
    from api.database import get_graph_db_driver

    mock_driver = MagicMock()
    mock_session = MagicMock()
    mock_driver.session.return_value.__enter__.return_value = mock_session

    app.dependency_overrides[get_graph_db_driver] = lambda: mock_driver
    yield mock_driver, mock_session
    app.dependency_overrides.pop(get_graph_db_driver, None)


@pytest.fixture
def client():
    from api.main import app
    return TestClient(app)
