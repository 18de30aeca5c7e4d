"""
Configuration management for the signage core.
Loads settings from a YAML file layered over built-in defaults.
"""

import copy
import os
import yaml
from pathlib import Path
from typing import Any, Dict, Optional


DEFAULTS: Dict[str, Any] = {
    'storage': {
        'data_dir': 'data',
        'config_key': 'HARDY_SIGNAGE_DATA',
    },
    'cache': {
        'prefix': 'hardy_cache_',
        'fetch_timeout': 8,
        'default_ttl': 300,
    },
    'logs': {
        'system_key': 'HARDY_SYSTEM_LOGS',
        'system_max': 50,
        'login_key': 'admin_login_log',
        'login_max': 200,
    },
    'documents': {
        'max_pdf_pages': 15,
    },
}


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Merge override into a copy of base, recursing into nested dicts."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class Config:
    """Manages application configuration from YAML files."""

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize configuration.

        Args:
            config_path: Path to config file. If None, uses config/default_config.yaml
                when it exists and the built-in defaults otherwise
        """
        self._explicit = config_path is not None
        if config_path is None:
            project_root = Path(__file__).parent.parent.parent
            config_path = project_root / "config" / "default_config.yaml"

        self.config_path = Path(config_path)
        self._config: Dict[str, Any] = {}
        self.load()

    def load(self) -> None:
        """Load configuration from YAML file."""
        loaded: Dict[str, Any] = {}
        if self.config_path.exists():
            with open(self.config_path, 'r') as f:
                loaded = yaml.safe_load(f) or {}
        elif self._explicit:
            raise FileNotFoundError(f"Config file not found: {self.config_path}")

        self._config = _deep_merge(DEFAULTS, loaded)

        # Apply environment variable overrides
        self._apply_env_overrides()

    def _apply_env_overrides(self) -> None:
        """Override config values from environment variables."""
        if 'SIGNAGE_DATA_DIR' in os.environ:
            self._config['storage']['data_dir'] = os.environ['SIGNAGE_DATA_DIR']

        if 'SIGNAGE_FETCH_TIMEOUT' in os.environ:
            self._config['cache']['fetch_timeout'] = float(os.environ['SIGNAGE_FETCH_TIMEOUT'])

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value using dot notation.

        Args:
            key: Configuration key (e.g., 'cache.fetch_timeout')
            default: Default value if key not found

        Returns:
            Configuration value or default

        Example:
            >>> config = Config()
            >>> config.get('logs.system_max')
            50
        """
        keys = key.split('.')
        value = self._config

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def set(self, key: str, value: Any) -> None:
        """
        Set configuration value using dot notation.

        Args:
            key: Configuration key (e.g., 'storage.data_dir')
            value: Value to set
        """
        keys = key.split('.')
        config = self._config

        for k in keys[:-1]:
            if k not in config:
                config[k] = {}
            config = config[k]

        config[keys[-1]] = value

    def save(self, path: Optional[str] = None) -> None:
        """
        Save configuration to YAML file.

        Args:
            path: Path to save to. If None, uses original config_path
        """
        save_path = Path(path) if path else self.config_path
        save_path.parent.mkdir(parents=True, exist_ok=True)

        with open(save_path, 'w') as f:
            yaml.dump(self._config, f, default_flow_style=False, indent=2)

    @property
    def data_dir(self) -> str:
        """Get directory backing the durable key-value store."""
        return self.get('storage.data_dir', 'data')

    @property
    def config_key(self) -> str:
        """Get storage key of the persisted configuration blob."""
        return self.get('storage.config_key', 'HARDY_SIGNAGE_DATA')

    @property
    def cache_prefix(self) -> str:
        """Get namespace prefix for remote cache entries."""
        return self.get('cache.prefix', 'hardy_cache_')

    @property
    def fetch_timeout(self) -> float:
        """Get network timeout for remote fetches, in seconds."""
        return float(self.get('cache.fetch_timeout', 8))

    @property
    def default_ttl(self) -> int:
        """Get default cache TTL, in seconds."""
        return int(self.get('cache.default_ttl', 300))

    @property
    def system_log_key(self) -> str:
        return self.get('logs.system_key', 'HARDY_SYSTEM_LOGS')

    @property
    def system_log_max(self) -> int:
        return int(self.get('logs.system_max', 50))

    @property
    def login_log_key(self) -> str:
        return self.get('logs.login_key', 'admin_login_log')

    @property
    def login_log_max(self) -> int:
        return int(self.get('logs.login_max', 200))

    @property
    def max_pdf_pages(self) -> int:
        """Get the page limit for imported documents."""
        return int(self.get('documents.max_pdf_pages', 15))

    def __repr__(self) -> str:
        """String representation."""
        return f"Config(path={self.config_path})"


# Global config instance (can be imported by other modules)
_global_config: Optional[Config] = None


def get_config(config_path: Optional[str] = None) -> Config:
    """
    Get the global configuration instance.

    Args:
        config_path: Path to config file (only used on first call)

    Returns:
        Config instance
    """
    global _global_config

    if _global_config is None:
        _global_config = Config(config_path)

    return _global_config
