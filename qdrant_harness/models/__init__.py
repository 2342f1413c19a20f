"""
Data models for qdrant-harness

Pydantic models for configuration and version rules.
"""

from .config import HarnessSettings, ManagerConfig
from .rules import Comparator, VersionRule

__all__ = [
    # Configuration
    "HarnessSettings",
    "ManagerConfig",

    # Version rules
    "Comparator",
    "VersionRule"
]
