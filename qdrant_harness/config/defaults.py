"""
Default configuration values for qdrant-harness.

Centralized defaults that can be overridden by environment variables or config files.
"""

import copy
from typing import Any, Dict

from ..models.config import DEFAULT_COLLECTION, DEFAULT_RETRIES, SERVICE_PREFIX

DEFAULT_CONFIG_FILE = "qdrant-harness.json"
CONFIG_FILE_ENV_VAR = "QDRANT_HARNESS_CONFIG"

# Global default settings
DEFAULT_SETTINGS: Dict[str, Any] = {
    "url": "http://localhost:6333",
    "api_key": None,
    "timeout": 30.0,
    "retries": DEFAULT_RETRIES,
    "service_prefix": SERVICE_PREFIX,
    "vector_size": 4,
    "distance": "dot",
    "bulk_size": 100,
    "log_level": "INFO",
    "managers": {
        "default": {
            "collection": f"{DEFAULT_COLLECTION}-${{worker}}"
        }
    }
}

# Environment variable mappings applied on top of config files
ENV_VAR_MAPPING = {
    'QDRANT_HARNESS_URL': 'url',
    'QDRANT_HARNESS_API_KEY': 'api_key',
    'QDRANT_HARNESS_TIMEOUT': 'timeout',
    'QDRANT_HARNESS_RETRIES': 'retries',
    'QDRANT_HARNESS_SERVICE_PREFIX': 'service_prefix',
    'QDRANT_HARNESS_VECTOR_SIZE': 'vector_size',
    'QDRANT_HARNESS_DISTANCE': 'distance',
    'QDRANT_HARNESS_BULK_SIZE': 'bulk_size',
    'QDRANT_HARNESS_LOG_LEVEL': 'log_level',
}


def get_default_settings() -> Dict[str, Any]:
    """Get a deep copy of the default settings template"""
    return copy.deepcopy(DEFAULT_SETTINGS)
