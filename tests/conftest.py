"""
pytest configuration and fixtures for Quote Service tests
"""

import pytest
from pathlib import Path
from unittest.mock import Mock
import sys

from fastapi.testclient import TestClient

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from api.app import create_app
from database.operations import DatabaseOperations
from utils.config_manager import UnifiedConfigManager


@pytest.fixture
def test_dsn(tmp_path):
    """Per-test SQLite database file"""
    return f"sqlite+aiosqlite:///{tmp_path / 'quotes.db'}"


@pytest.fixture
async def db_ops(test_dsn):
    """Initialized storage gateway backed by a fresh database"""
    ops = DatabaseOperations(dsn=test_dsn)
    await ops.initialize()
    yield ops
    await ops.close()


@pytest.fixture
def app(test_dsn):
    """FastAPI application with an injected storage gateway"""
    return create_app(DatabaseOperations(dsn=test_dsn))


@pytest.fixture
def client(app):
    """Test client; entering it runs the lifespan, which creates the tables"""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def mock_db_ops():
    """Storage gateway mock for route-level tests"""
    from unittest.mock import AsyncMock

    mock = Mock(spec=DatabaseOperations)
    mock.initialize = AsyncMock()
    mock.close = AsyncMock()
    mock.ping = AsyncMock()
    mock.add_category = AsyncMock(return_value=1)
    mock.get_categories = AsyncMock(return_value=[])
    mock.add_author = AsyncMock(return_value=1)
    mock.get_authors = AsyncMock(return_value=[])
    mock.add_quote = AsyncMock(return_value=1)
    mock.get_quotes = AsyncMock(return_value=[])
    return mock


@pytest.fixture
def mock_client(mock_db_ops):
    """Test client wired to the mocked gateway"""
    with TestClient(create_app(mock_db_ops)) as test_client:
        yield test_client


@pytest.fixture
def config_dir(tmp_path):
    """Configuration directory with a single JSON file"""
    directory = tmp_path / "config"
    directory.mkdir()
    (directory / "config.json").write_text(
        '{"database_config": {"dsn": "sqlite+aiosqlite:///from-file.db"},'
        ' "api_config": {"port": 9090}}',
        encoding="utf-8"
    )
    return directory


@pytest.fixture
def make_config_manager(config_dir):
    """Factory for config managers with an isolated environment"""
    def _make(environ=None, directory=None):
        return UnifiedConfigManager(
            config_dir=str(directory or config_dir),
            env_file=None,
            environ=environ or {}
        )
    return _make


# Pytest configuration
def pytest_configure(config):
    """Configure pytest"""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )
