"""
Logging setup driven by the ``logging`` section of the configuration.
"""

import logging
from typing import Any, Dict, Optional

from .config_loader import get_config_value

DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def get_logging_level(level_str: Optional[str]) -> int:
    """Map string logging level to logging constant."""
    level_map = {
        'DEBUG': logging.DEBUG,
        'INFO': logging.INFO,
        'WARNING': logging.WARNING,
        'ERROR': logging.ERROR,
        'CRITICAL': logging.CRITICAL
    }
    if not isinstance(level_str, str):
        return logging.INFO
    return level_map.get(level_str.upper(), logging.INFO)


def configure_logging(config: Dict[str, Any]) -> int:
    """
    Configure root logging from config.

    Args:
        config: Configuration dictionary with an optional logging section

    Returns:
        The logging level that was applied
    """
    level_str = get_config_value(config, 'logging', 'level', 'INFO')
    log_format = get_config_value(config, 'logging', 'format', DEFAULT_FORMAT)
    level = get_logging_level(level_str)

    logging.basicConfig(level=level, format=log_format)
    logger = logging.getLogger(__name__)
    logger.info(f"Logging configured to level: {level_str}")
    return level
