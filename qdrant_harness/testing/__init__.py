"""
Test orchestration for qdrant-harness.

Manager registry, fixture loading, version gating and the retrying executor.
"""

from .executor import Attempt, RetryingExecutor, run_with_retries
from .fixtures import populate
from .registry import ManagerRegistry, ManagerResolver, SettingsManagerResolver
from .testcase import QdrantTestCase
from .version_gate import check_version, should_skip

__all__ = [
    "Attempt",
    "RetryingExecutor",
    "run_with_retries",
    "populate",
    "ManagerRegistry",
    "ManagerResolver",
    "SettingsManagerResolver",
    "QdrantTestCase",
    "check_version",
    "should_skip"
]
