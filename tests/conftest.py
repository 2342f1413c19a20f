"""
Shared pytest fixtures for qdrant-harness tests.

Provides mock manager handles and an in-memory resolver so the harness can be
exercised without a running Qdrant server.
"""

from typing import Dict
from unittest.mock import Mock

import pytest

from qdrant_harness.config.loader import default_loader
from qdrant_harness.storage.manager import QdrantManager
from qdrant_harness.testing.registry import ManagerResolver


class StaticResolver(ManagerResolver):
    """Resolver handing out pre-built manager handles"""

    def __init__(self, managers: Dict[str, Mock]):
        self.managers = managers
        self.get_calls = []

    def has(self, service_name: str) -> bool:
        return service_name in {self.service_name(name) for name in self.managers}

    def get(self, service_name: str) -> Mock:
        self.get_calls.append(service_name)
        return self.managers[service_name[len(self.service_prefix):]]


def make_manager(name: str = "default", version: str = "1.12.4") -> Mock:
    """Create a mock manager handle reporting the given backend version"""
    manager = Mock(spec=QdrantManager)
    manager.name = name
    manager.get_version_number.return_value = version
    return manager


@pytest.fixture
def manager():
    return make_manager()


@pytest.fixture
def resolver(manager):
    return StaticResolver({"default": manager})


@pytest.fixture
def manager_factory():
    return make_manager


@pytest.fixture
def resolver_factory():
    return StaticResolver


@pytest.fixture(autouse=True)
def reset_default_loader(monkeypatch):
    """Isolate settings loading from the environment and between tests"""
    for var in ("QDRANT_HARNESS_CONFIG", "QDRANT_HARNESS_MANAGERS", "QDRANT_HARNESS_RETRIES",
                "QDRANT_HARNESS_URL", "PYTEST_XDIST_WORKER"):
        monkeypatch.delenv(var, raising=False)
    default_loader.configure(None)
    yield
    default_loader.configure(None)
