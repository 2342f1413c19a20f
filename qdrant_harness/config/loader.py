"""
Configuration loading with template support.

Settings come from an optional JSON file layered over the defaults, then
environment variable overrides, then template substitution so collection
names can be made unique per test worker.
"""

import json
import logging
import os
from pathlib import Path
from string import Template
from typing import Any, Dict, Optional, Union

from pydantic import ValidationError

from .defaults import (
    CONFIG_FILE_ENV_VAR, DEFAULT_CONFIG_FILE, ENV_VAR_MAPPING, get_default_settings
)
from ..errors import ConfigurationError
from ..models.config import HarnessSettings

logger = logging.getLogger(__name__)

MANAGERS_ENV_VAR = "QDRANT_HARNESS_MANAGERS"


class ConfigurationLoader:
    """Load and cache harness settings"""

    def __init__(self, config_file: Optional[Union[str, Path]] = None):
        self.config_file = Path(config_file) if config_file else None
        self._settings: Optional[HarnessSettings] = None

    def configure(self, config_file: Optional[Union[str, Path]]) -> None:
        """Point the loader at a settings file and drop cached settings"""
        self.config_file = Path(config_file) if config_file else None
        self._settings = None

    def find_config_file(self) -> Optional[Path]:
        """Locate the settings file: explicit path, environment, then working directory"""
        if self.config_file is not None:
            return self.config_file

        env_path = os.getenv(CONFIG_FILE_ENV_VAR)
        if env_path:
            return Path(env_path)

        candidate = Path.cwd() / DEFAULT_CONFIG_FILE
        return candidate if candidate.exists() else None

    def load(self, reload: bool = False) -> HarnessSettings:
        """Load settings, using the cached instance unless ``reload`` is set"""
        if self._settings is not None and not reload:
            return self._settings

        data = get_default_settings()

        config_file = self.find_config_file()
        if config_file is not None:
            data.update(self._load_file(config_file))

        data = self._apply_env_overrides(data)
        data = self._substitute_template_vars(data, self.template_substitutions())

        try:
            self._settings = HarnessSettings(**data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid qdrant-harness settings: {e}") from e

        logger.debug(
            f"Loaded settings from {config_file or 'defaults'}: "
            f"{len(self._settings.managers)} managers, retries={self._settings.retries}"
        )
        return self._settings

    def _load_file(self, config_file: Path) -> Dict[str, Any]:
        """Read a JSON settings file"""
        if not config_file.exists():
            raise ConfigurationError(f"Settings file does not exist: {config_file}")

        try:
            with open(config_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Failed to parse settings file {config_file}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"Settings file {config_file} must contain a JSON object")
        return data

    @staticmethod
    def template_substitutions() -> Dict[str, str]:
        """Values available to ``${...}`` placeholders"""
        return {
            'worker': os.getenv('PYTEST_XDIST_WORKER', 'main'),
            'pid': str(os.getpid())
        }

    def _substitute_template_vars(self, data: Any, substitutions: Dict[str, str]) -> Any:
        """Recursively substitute template variables in configuration"""
        if isinstance(data, dict):
            return {
                key: self._substitute_template_vars(value, substitutions)
                for key, value in data.items()
            }
        elif isinstance(data, list):
            return [
                self._substitute_template_vars(item, substitutions)
                for item in data
            ]
        elif isinstance(data, str):
            return Template(data).safe_substitute(substitutions)
        else:
            return data

    def _apply_env_overrides(self, config_data: Dict[str, Any]) -> Dict[str, Any]:
        """Apply environment variable overrides to configuration"""
        for env_var, key in ENV_VAR_MAPPING.items():
            env_value = os.getenv(env_var)
            if env_value is not None:
                config_data[key] = env_value

        managers = os.getenv(MANAGERS_ENV_VAR)
        if managers:
            try:
                config_data['managers'] = json.loads(managers)
            except json.JSONDecodeError as e:
                raise ConfigurationError(f"{MANAGERS_ENV_VAR} is not valid JSON: {e}") from e

        return config_data


default_loader = ConfigurationLoader()


def get_settings(reload: bool = False) -> HarnessSettings:
    """Load settings through the process-wide loader"""
    return default_loader.load(reload=reload)
