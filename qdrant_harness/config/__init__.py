"""
Configuration management for qdrant-harness

Handles loading, environment overrides, and template-based collection names.
"""

from .loader import ConfigurationLoader, default_loader, get_settings
from .defaults import DEFAULT_SETTINGS

__all__ = ["ConfigurationLoader", "default_loader", "get_settings", "DEFAULT_SETTINGS"]
