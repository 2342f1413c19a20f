"""
qdrant-harness: integration test harness for Qdrant-backed code.

Provisions fresh, fixture-populated collections around each test and
retries tests whose failures come from the backend.
"""

__version__ = "1.0.0"

from .errors import BackendError, ConfigurationError, FailureKind, HarnessError
from .storage import QdrantManager
from .testing import QdrantTestCase, ManagerRegistry, RetryingExecutor

__all__ = [
    "BackendError",
    "ConfigurationError",
    "FailureKind",
    "HarnessError",
    "QdrantManager",
    "QdrantTestCase",
    "ManagerRegistry",
    "RetryingExecutor"
]
