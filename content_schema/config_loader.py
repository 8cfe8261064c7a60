"""
Configuration loading utilities for the content schema model.

This module provides functionality to load and validate the schema model
configuration (defaults for new fields, id format, field-type registry and
logging) with fallback to built-in defaults.
"""

import yaml
from pathlib import Path
from typing import Dict, Any, Optional
import logging
from copy import deepcopy

from .exceptions import ConfigurationLoadError

logger = logging.getLogger(__name__)

CONFIG_FILE = Path("config.yaml")


def deep_merge(base_dict: Dict[str, Any], update_dict: Dict[str, Any]) -> Dict[str, Any]:
    """
    Deep merge two dictionaries, with update_dict taking precedence.

    Args:
        base_dict: Base dictionary (defaults)
        update_dict: Dictionary to merge in (user config)

    Returns:
        Merged dictionary
    """
    result = deepcopy(base_dict)

    for key, value in update_dict.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = deepcopy(value)

    return result


def get_default_config() -> Dict[str, Any]:
    """
    Get default configuration.

    Returns:
        Dictionary with default configuration
    """
    return {
        'app': {
            'name': 'Content Schema Model',
            'version': '1.0.0',
            'debug': False
        },
        'schema': {
            'default_type': 'string',
            'default_group_title': 'Main',
            'id_prefix': 'new',
            'id_groups': 5
        },
        'field_types': [
            {'type': 'string', 'label': 'Text', 'options': {}},
            {'type': 'text', 'label': 'Long text', 'options': {'rows': 4}},
            {'type': 'number', 'label': 'Number', 'options': {'min': None, 'max': None}},
            {'type': 'boolean', 'label': 'Boolean', 'options': {'default': False}},
            {'type': 'date', 'label': 'Date', 'options': {'format': 'YYYY-MM-DD'}},
            {'type': 'select', 'label': 'Select', 'options': {'items': [], 'multiple': False}},
            {'type': 'group', 'label': 'Field group', 'options': {}},
            {'type': 'repeater', 'label': 'Repeater', 'options': {'min': 0, 'max': None}}
        ],
        'logging': {
            'level': 'INFO',
            'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        }
    }


def load_config(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load the schema model configuration.

    Args:
        config_path: Optional path to config file (defaults to config.yaml)

    Returns:
        Complete configuration dictionary. Any problem reading the file is
        logged and the defaults are returned instead.
    """
    if config_path is None:
        config_path = CONFIG_FILE

    default_config = get_default_config()

    if not config_path.exists():
        logger.warning(f"Configuration file not found: {config_path}")
        logger.info("Using default configuration")
        return default_config

    try:
        user_config = read_config_file(config_path)
    except ConfigurationLoadError as e:
        logger.error(e.message)
        logger.info("Using default configuration")
        return default_config

    if user_config is None:
        logger.warning(f"Configuration file is empty: {config_path}")
        return default_config

    if not isinstance(user_config, dict):
        logger.error(f"Configuration file is not a valid dictionary: {config_path}")
        logger.info("Using default configuration")
        return default_config

    config = deep_merge(default_config, user_config)

    logger.info(f"Successfully loaded configuration from {config_path}")
    return config


def read_config_file(config_path: Path) -> Any:
    """
    Read and parse a YAML configuration file without applying defaults.

    Raises:
        ConfigurationLoadError: If the file cannot be read or parsed
    """
    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            return yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationLoadError(config_path, e,
                                     f"YAML parsing error in {config_path}: {e}") from e
    except (IOError, OSError) as e:
        raise ConfigurationLoadError(config_path, e,
                                     f"Failed to read configuration file {config_path}: {e}") from e


def validate_config(config: Dict[str, Any]) -> bool:
    """
    Validate configuration structure and required fields.

    Args:
        config: Configuration dictionary to validate

    Returns:
        True if configuration is valid, False otherwise
    """
    required_sections = ['app', 'schema', 'field_types', 'logging']

    for section in required_sections:
        if section not in config:
            logger.warning(f"Missing required configuration section: {section}")
            return False

    schema = config.get('schema', {})
    if not isinstance(schema, dict):
        logger.warning("schema section must be a mapping")
        return False

    for key in ('default_type', 'default_group_title', 'id_prefix'):
        value = schema.get(key)
        if not isinstance(value, str) or not value:
            logger.warning(f"schema.{key} must be a non-empty string")
            return False

    try:
        id_groups = int(schema.get('id_groups', 0))
    except (ValueError, TypeError):
        logger.warning("schema.id_groups must be a valid integer")
        return False
    if id_groups <= 0:
        logger.warning("schema.id_groups must be positive")
        return False

    field_types = config.get('field_types')
    if not isinstance(field_types, list):
        logger.warning("field_types must be a list")
        return False

    for entry in field_types:
        if not isinstance(entry, dict) or not entry.get('type'):
            logger.warning(f"Invalid field type entry: {entry!r}")
            return False
        if 'options' in entry and not isinstance(entry['options'], dict):
            logger.warning(f"Field type options must be a mapping: {entry.get('type')}")
            return False

    app = config.get('app', {})
    if 'name' not in app or 'version' not in app:
        logger.warning("Missing required app configuration (name or version)")
        return False

    return True


def get_config_value(config: Dict[str, Any], section: str, key: str, default: Any = None) -> Any:
    """
    Get a specific configuration value.

    Args:
        config: Configuration dictionary
        section: Configuration section (e.g., 'schema', 'logging')
        key: Configuration key within section
        default: Default value if not found

    Returns:
        Configuration value or default
    """
    section_values = config.get(section, {})
    if not isinstance(section_values, dict):
        return default
    return section_values.get(key, default)


def save_config(config: Dict[str, Any], config_path: Optional[Path] = None) -> bool:
    """
    Save configuration to YAML file.

    Args:
        config: Configuration dictionary to save
        config_path: Optional path to save to (defaults to config.yaml)

    Returns:
        True if save was successful, False otherwise
    """
    if config_path is None:
        config_path = CONFIG_FILE

    try:
        with open(config_path, 'w', encoding='utf-8') as f:
            yaml.dump(config, f, default_flow_style=False, indent=2, sort_keys=False)

        logger.info(f"Configuration saved to {config_path}")
        return True

    except (IOError, OSError, yaml.YAMLError) as e:
        logger.error(f"Failed to save configuration to {config_path}: {e}")
        return False
