"""
Shared pytest fixtures for eater tests.

This module provides common fixtures including:
- InMemoryRedis: async Redis double that reads back what it writes
- Credential store, session manager and authorizer wired over it
- Mock backend app for HTTP-level tests
"""

import fnmatch
from typing import Dict, List, Optional, Set

import httpx
import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from eater.modules.api.mock_backend import MockBackend, create_mock_backend_app
from eater.modules.auth import DemoAuthenticator
from eater.modules.credentials import CredentialCipher, CredentialStore
from eater.modules.request import AuthorizedRequestBuilder
from eater.modules.session import SessionManager

TEST_NAMESPACE = "com.eater.test"


# =============================================================================
# Redis Double
# =============================================================================

class InMemoryPipeline:
    """Buffers commands and applies them together on execute()."""

    def __init__(self, redis: "InMemoryRedis"):
        self._redis = redis
        self._commands: List[tuple] = []

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        self._commands = []
        return False

    def delete(self, *keys):
        self._commands.append(("delete", keys))
        return self

    def set(self, key, value):
        self._commands.append(("set", (key, value)))
        return self

    async def execute(self):
        self._redis._maybe_fail("execute")
        results = []
        for name, args in self._commands:
            if name == "delete":
                results.append(self._redis._delete(*args))
            else:
                self._redis.storage[args[0]] = args[1]
                results.append(True)
        self._redis.transactions += 1
        self._commands = []
        return results


class InMemoryRedis:
    """
    Async Redis double with in-memory storage.

    Operations listed in ``fail_ops`` raise a Redis ConnectionError, which
    lets tests simulate a storage medium that is unavailable.
    """

    def __init__(self):
        self.storage: Dict[str, str] = {}
        self.fail_ops: Set[str] = set()
        self.transactions = 0

    def _maybe_fail(self, op: str):
        if op in self.fail_ops:
            raise RedisConnectionError(f"simulated failure in {op}")

    def _delete(self, *keys) -> int:
        count = 0
        for key in keys:
            if key in self.storage:
                del self.storage[key]
                count += 1
        return count

    async def get(self, key) -> Optional[str]:
        self._maybe_fail("get")
        return self.storage.get(key)

    async def set(self, key, value, *args, **kwargs):
        self._maybe_fail("set")
        self.storage[key] = value
        return True

    async def delete(self, *keys) -> int:
        self._maybe_fail("delete")
        return self._delete(*keys)

    async def exists(self, *keys) -> int:
        self._maybe_fail("exists")
        return sum(1 for k in keys if k in self.storage)

    async def scan_iter(self, match: str = "*"):
        self._maybe_fail("scan_iter")
        for key in list(self.storage):
            if fnmatch.fnmatchcase(key, match):
                yield key

    def pipeline(self, transaction: bool = True) -> InMemoryPipeline:
        return InMemoryPipeline(self)


# =============================================================================
# Session Stack Fixtures
# =============================================================================

@pytest.fixture
def redis_double():
    """In-memory async Redis client."""
    return InMemoryRedis()


@pytest.fixture
def cipher():
    """Cipher with a fresh key per test."""
    return CredentialCipher(CredentialCipher.generate_key())


@pytest.fixture
def store(redis_double, cipher):
    """Credential store over the Redis double."""
    return CredentialStore(redis_double, cipher, namespace=TEST_NAMESPACE)


@pytest.fixture
def authenticator():
    """Demo authenticator without network delay."""
    return DemoAuthenticator(network_delay=0)


@pytest.fixture
def session_manager(store, authenticator):
    """Session manager using the demo authenticator."""
    return SessionManager(store, authenticator, min_secret_length=6)


@pytest.fixture
def authorizer(session_manager):
    """Request builder bound to the session manager."""
    return AuthorizedRequestBuilder(session_manager)


# =============================================================================
# Mock Backend Fixtures
# =============================================================================

@pytest.fixture
def mock_backend():
    """In-memory backend state, exposed for assertions."""
    return MockBackend(secret="test-secret")


@pytest.fixture
def backend_transport(mock_backend):
    """httpx transport routing requests into the mock backend app."""
    return httpx.ASGITransport(app=create_mock_backend_app(mock_backend))


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: Tests requiring a running Redis"
    )
