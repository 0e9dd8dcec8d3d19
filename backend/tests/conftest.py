"""
Shared Test Fixtures and Configuration

This module provides pytest fixtures used across unit tests.
"""

import os
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Generator
from unittest.mock import AsyncMock, MagicMock

import pytest
from dotenv import load_dotenv

# Use litellm's bundled model cost map so importing it does not fetch over the
# network (its background retry thread can deadlock imports during collection)
os.environ.setdefault("LITELLM_LOCAL_MODEL_COST_MAP", "True")

# Add the backend directory to the path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

# Load .env file from project root BEFORE any fixtures run
_project_root = Path(__file__).parent.parent.parent
_env_file = _project_root / ".env"
if _env_file.exists():
    load_dotenv(_env_file)
else:
    _backend_env = Path(__file__).parent.parent / ".env"
    if _backend_env.exists():
        load_dotenv(_backend_env)

# Settings are read when app modules are first imported (at collection),
# so values that shape module-level objects are set here rather than in a
# fixture.
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["ADMIN_API_KEY"] = ""


# ============================================================================
# Environment Configuration
# ============================================================================


@pytest.fixture(scope="session", autouse=True)
def setup_test_environment() -> Generator[None, None, None]:
    """
    Set up test environment variables before any tests run.

    This ensures tests run with predictable configuration, overriding
    any values from .env files to ensure test isolation.
    """
    original_env = os.environ.copy()

    test_env = {
        "POSTGRES_HOST": os.environ.get("POSTGRES_HOST", "localhost"),
        "POSTGRES_PORT": os.environ.get("POSTGRES_PORT", "5432"),
        "POSTGRES_USER": os.environ.get("POSTGRES_TEST_USER", "testuser"),
        "POSTGRES_PASSWORD": os.environ.get("POSTGRES_TEST_PASSWORD", "testpass"),
        "POSTGRES_DB": os.environ.get("POSTGRES_TEST_DB", "testdb"),
        "OPENAI_API_KEY": os.environ.get("OPENAI_API_KEY", "test-api-key"),
        "RATE_LIMIT_ENABLED": "false",
        "DEBUG": "true",
    }
    os.environ.update(test_env)

    yield

    os.environ.clear()
    os.environ.update(original_env)


# ============================================================================
# Sample Configuration Data
# ============================================================================


@pytest.fixture
def sample_yaml_config() -> dict[str, Any]:
    """
    Provide a sample YAML configuration for testing.

    This matches the structure of config/default.yaml.
    """
    return {
        "app": {"name": "Test LinguaLearn"},
        "database": {
            "pool_size": 3,
            "max_overflow": 5,
            "pool_timeout": 10,
        },
        "cors": {"allow_origins": ["http://localhost:5173"]},
        "speech": {
            "default_locale": "en-US",
            "locales": {"Spanish": "es-ES", "Hindi": "hi-IN"},
        },
    }


# ============================================================================
# Mock Fixtures
# ============================================================================


@pytest.fixture
def mock_db_session() -> MagicMock:
    """
    Create a mock database session for unit testing.
    """
    mock = MagicMock()
    mock.execute = AsyncMock()
    mock.get = AsyncMock(return_value=None)
    mock.add = MagicMock()
    mock.delete = AsyncMock()
    mock.flush = AsyncMock()
    mock.refresh = AsyncMock()
    mock.commit = AsyncMock()
    mock.rollback = AsyncMock()
    mock.close = AsyncMock()
    return mock


def make_result(
    scalar_one_or_none: Any = None,
    scalar: Any = None,
    scalars: list | None = None,
    rows: list | None = None,
    one: Any = None,
) -> MagicMock:
    """
    Build a mock SQLAlchemy Result.

    Each keyword configures the matching accessor:
    result.scalar_one_or_none(), result.scalar(), result.scalars().all(),
    result.all() and result.one().
    """
    result = MagicMock()
    result.scalar_one_or_none.return_value = scalar_one_or_none
    result.scalar.return_value = scalar
    result.scalars.return_value.all.return_value = scalars or []
    result.all.return_value = rows or []
    result.one.return_value = one
    result.one_or_none.return_value = one
    return result


@pytest.fixture
def result_factory():
    """Expose make_result as a fixture."""
    return make_result


@pytest.fixture
def now_utc() -> datetime:
    """A fixed, timezone-aware reference time."""
    return datetime(2024, 3, 10, 9, 30, tzinfo=timezone.utc)
