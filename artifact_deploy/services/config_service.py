"""Configuration management service"""

import logging
import os
from pathlib import Path
from typing import Optional, Union

import yaml

from ..api.exceptions import ConfigError, ConfigNotFoundError
from ..constants import PROJECT_CONFIG_FILE
from ..models.config import DeployConfig

logger = logging.getLogger(__name__)


def find_project_root(start_path: Optional[Path] = None) -> Optional[Path]:
    """
    Find the nearest directory containing the project config file

    Args:
        start_path: Directory to start from (defaults to cwd)

    Returns:
        Project root or None if not found
    """
    current = Path(start_path or Path.cwd()).resolve()

    for candidate in [current, *current.parents]:
        if (candidate / PROJECT_CONFIG_FILE).is_file():
            return candidate

    return None


class ConfigService:
    """Loads the project configuration into a read-only snapshot"""

    def __init__(self, config_path: Union[str, Path]):
        """Initialize config service

        Args:
            config_path: Path to the YAML configuration file
        """
        self.config_path = Path(config_path)
        self._config: Optional[DeployConfig] = None

    @classmethod
    def discover(cls, start_path: Optional[Path] = None) -> 'ConfigService':
        """Create a service for the config file found above start_path"""
        root = find_project_root(start_path)
        if root is None:
            raise ConfigNotFoundError(
                f"No {PROJECT_CONFIG_FILE} found in {Path(start_path or Path.cwd()).resolve()} "
                "or any parent directory"
            )
        return cls(root / PROJECT_CONFIG_FILE)

    @property
    def config(self) -> DeployConfig:
        """Get current configuration (lazy load)"""
        if self._config is None:
            self.load_config()
        return self._config

    def load_config(self) -> DeployConfig:
        """Load configuration from file

        Returns:
            Loaded configuration

        Raises:
            ConfigError: If the file is missing or is not valid YAML
        """
        if not self.config_path.is_file():
            raise ConfigNotFoundError(f"Configuration file not found: {self.config_path}")

        with open(self.config_path, 'r', encoding='utf-8') as f:
            content = f.read()

        # Simple environment variable expansion
        content = os.path.expandvars(content)

        try:
            data = yaml.safe_load(content) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {self.config_path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Configuration in {self.config_path} must be a mapping")

        try:
            self._config = DeployConfig.from_dict(data, base_dir=self.config_path.parent)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid configuration in {self.config_path}: {e}") from e

        logger.debug("Loaded configuration from %s", self.config_path)
        return self._config
