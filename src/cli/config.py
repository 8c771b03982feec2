"""Configuration loading and validation.

Settings come from three layers, later ones winning:
1. SyncSettings defaults
2. An optional YAML file (``.notion-sync/config.yaml`` unless given)
3. Environment variables, including a .env file loaded with python-dotenv

Config file structure (all keys optional):
    database_id: "0f1d..."
    page_size: 100
    request_timeout_ms: 10000
    posts_per_page: 10
    max_retries: 2
    max_workers: 10
    image_dir: "public/notion"
    image_width: 1200
    snapshot_dir: "tmp"
    save_snapshots: false
    notion_version: "2022-06-28"

The integration token is read from NOTION_TOKEN only; it is never stored
in the YAML file.
"""

import logging
import os
from dataclasses import fields
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

from src.cli.errors import ConfigError, ConfigNotFoundError
from src.cli.models import SyncSettings

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = '.notion-sync/config.yaml'

# Environment variable -> settings field
ENV_OVERRIDES = {
    'NOTION_TOKEN': 'notion_token',
    'DATABASE_ID': 'database_id',
    'REQUEST_TIMEOUT_MS': 'request_timeout_ms',
    'NUMBER_OF_POSTS_PER_PAGE': 'posts_per_page',
}

_INT_FIELDS = {'page_size', 'request_timeout_ms', 'posts_per_page', 'max_retries', 'max_workers', 'image_width'}
_BOOL_FIELDS = {'save_snapshots'}
_FILE_FIELDS = {f.name for f in fields(SyncSettings)} - {'notion_token'}


class ConfigLoader:
    """Builds SyncSettings from YAML and the environment."""

    @classmethod
    def load(cls, config_path: Optional[str] = None) -> SyncSettings:
        """Load settings.

        Args:
            config_path: YAML file to read. When None the default path is used
                if it exists; an explicit path must exist.

        Returns:
            Validated SyncSettings

        Raises:
            ConfigNotFoundError: If an explicit config_path does not exist
            ConfigError: If the file or environment holds invalid values
        """
        load_dotenv()

        values: Dict[str, Any] = {}
        if config_path is not None:
            if not os.path.exists(config_path):
                raise ConfigNotFoundError(config_path)
            values.update(cls._read_yaml(config_path))
        elif os.path.exists(DEFAULT_CONFIG_PATH):
            values.update(cls._read_yaml(DEFAULT_CONFIG_PATH))

        for env_name, field_name in ENV_OVERRIDES.items():
            env_value = os.getenv(env_name)
            if env_value:
                values[field_name] = env_value.strip()

        return cls._parse_settings(values)

    @classmethod
    def _read_yaml(cls, config_path: str) -> Dict[str, Any]:
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                content = f.read()
        except OSError as e:
            raise ConfigError(f"Cannot read {config_path}: {e}")

        try:
            config_dict = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML syntax: {str(e)}")

        if config_dict is None:
            return {}

        if not isinstance(config_dict, dict):
            raise ConfigError(
                f"Configuration must be a YAML dictionary, got {type(config_dict).__name__}"
            )

        unknown = set(config_dict) - _FILE_FIELDS
        if unknown:
            raise ConfigError(f"Unknown option(s): {', '.join(sorted(unknown))}")

        logger.debug(f"Loaded configuration from {config_path}")
        return config_dict

    @classmethod
    def _parse_settings(cls, values: Dict[str, Any]) -> SyncSettings:
        parsed: Dict[str, Any] = {}

        for name, value in values.items():
            if value is None:
                parsed[name] = None
            elif name in _INT_FIELDS:
                parsed[name] = cls._parse_int(name, value)
            elif name in _BOOL_FIELDS:
                if not isinstance(value, bool):
                    raise ConfigError(f"must be true or false, got {value!r}", name)
                parsed[name] = value
            else:
                if not isinstance(value, str) or not value.strip():
                    raise ConfigError(f"must be a non-empty string, got {value!r}", name)
                parsed[name] = value.strip()

        settings = SyncSettings(**parsed)

        if not 1 <= settings.page_size <= 100:
            raise ConfigError(f"must be between 1 and 100, got {settings.page_size}", 'page_size')
        for name in ('request_timeout_ms', 'posts_per_page', 'max_workers'):
            if getattr(settings, name) < 1:
                raise ConfigError(f"must be positive, got {getattr(settings, name)}", name)
        if settings.max_retries < 0:
            raise ConfigError(f"cannot be negative, got {settings.max_retries}", 'max_retries')
        if settings.image_width is not None and settings.image_width < 1:
            raise ConfigError(f"must be positive, got {settings.image_width}", 'image_width')
        if settings.save_snapshots and not settings.snapshot_dir:
            raise ConfigError("requires snapshot_dir", 'save_snapshots')

        return settings

    @staticmethod
    def _parse_int(name: str, value: Any) -> int:
        if isinstance(value, bool):
            raise ConfigError(f"must be an integer, got {value!r}", name)
        try:
            return int(value)
        except (TypeError, ValueError):
            raise ConfigError(f"must be an integer, got {value!r}", name)
