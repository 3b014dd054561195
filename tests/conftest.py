import os
import pytest

# Store original environment variables to restore after tests
_original_env = {}

_TEST_VARS = ['POSTGRES_USER', 'POSTGRES_PASSWORD', 'POSTGRES_HOST', 'POSTGRES_PORT', 'POSTGRES_DB', 'CATALOG_ENV']


def _setup_test_env():
    """Set up environment variables the service reads at import time"""
    for var in _TEST_VARS:
        if var in os.environ:
            _original_env[var] = os.environ[var]

    if not os.getenv("DATABASE_URL"):
        os.environ.setdefault("POSTGRES_USER", "testuser")
        os.environ.setdefault("POSTGRES_PASSWORD", "testpass")
        os.environ.setdefault("POSTGRES_HOST", "localhost")
        os.environ.setdefault("POSTGRES_PORT", "5432")
        os.environ.setdefault("POSTGRES_DB", "testdb")
    os.environ.setdefault("CATALOG_ENV", "testing")


def _restore_env():
    """Restore original environment variables after tests"""
    for var in _TEST_VARS:
        if var not in _original_env and var in os.environ:
            del os.environ[var]
    for var, value in _original_env.items():
        os.environ[var] = value
    _original_env.clear()


_setup_test_env()


@pytest.fixture(scope="session", autouse=True)
def _restore_test_env():
    """Restore original environment variables after all tests complete"""
    yield
    _restore_env()
