"""
Configuration management for sqlbackup
"""

import os
import yaml
from pathlib import Path
from typing import Dict, Any, Optional
import logging

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = 'SQLBACKUP_CONFIG'
CONFIG_RELATIVE_PATH = Path('config') / 'sqlbackup.yaml'


class Config:
    """Central configuration loaded from YAML with built-in defaults."""

    def __init__(self, config_path: Optional[Path] = None):
        """Initialize configuration from YAML file.

        Args:
            config_path: Path to configuration file. If None, the
                SQLBACKUP_CONFIG environment variable is used, then the first
                config/sqlbackup.yaml found walking up from the working directory.
        """
        if config_path is None and os.environ.get(CONFIG_ENV_VAR):
            config_path = Path(os.environ[CONFIG_ENV_VAR])

        if config_path is None:
            current = Path.cwd()
            while current != current.parent:
                if (current / CONFIG_RELATIVE_PATH).exists():
                    config_path = current / CONFIG_RELATIVE_PATH
                    break
                current = current.parent

            if config_path is None:
                config_path = CONFIG_RELATIVE_PATH

        self.config_path = Path(config_path)
        self._config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from YAML file, merged over the defaults."""
        config = self._default_config()
        try:
            if self.config_path.exists():
                with open(self.config_path, 'r') as f:
                    loaded = yaml.safe_load(f) or {}
                self._merge(config, loaded)
            else:
                logger.debug(f"Config file not found: {self.config_path}, using defaults")
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Error loading config {self.config_path}: {e}")
        return config

    @staticmethod
    def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> None:
        """Recursively merge override into base."""
        for key, value in override.items():
            if isinstance(value, dict) and isinstance(base.get(key), dict):
                Config._merge(base[key], value)
            else:
                base[key] = value

    def _default_config(self) -> Dict[str, Any]:
        """Return default configuration."""
        return {
            'database': {
                'odbc_driver': 'ODBC Driver 18 for SQL Server',
                'connect_timeout': 30,
                'echo': False
            },
            'backup': {
                'file_suffix': '.db.bak'
            },
            'logging': {
                'level': 'INFO',
                'log_file': 'logs/sqlbackup.log',
                'max_log_size_mb': 10,
                'backup_count': 3
            }
        }

    @property
    def odbc_driver(self) -> str:
        """ODBC driver used when a connection string names none."""
        return self.get('database.odbc_driver', 'ODBC Driver 18 for SQL Server')

    @property
    def connect_timeout(self) -> int:
        return int(self.get('database.connect_timeout', 30))

    @property
    def backup_file_suffix(self) -> str:
        """Suffix of per-database files created in a /DIR location."""
        return self.get('backup.file_suffix', '.db.bak')

    @property
    def log_level(self) -> str:
        return str(self.get('logging.level', 'INFO')).upper()

    @property
    def log_file(self) -> Path:
        return Path(self.get('logging.log_file', 'logs/sqlbackup.log'))

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value by dot-separated key.

        Args:
            key: Dot-separated configuration key (e.g., 'logging.level')
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        keys = key.split('.')
        value = self._config

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value
