"""
Schema model settings.

Typed view over the ``schema`` section of the configuration: the defaults
applied to newly added fields and the shape of generated field ids.
"""

from dataclasses import dataclass
from typing import Any, Dict
import logging

logger = logging.getLogger(__name__)

DEFAULT_TYPE = "string"
DEFAULT_GROUP_TITLE = "Main"
DEFAULT_ID_PREFIX = "new"
DEFAULT_ID_GROUPS = 5


@dataclass(frozen=True)
class SchemaSettings:
    """
    Defaults used by the schema when creating fields.

    Attributes:
        default_type: Type given to fields added without one; also the only
            type eligible for automatic primary selection
        default_group_title: Group used by ``Schema.add`` when no group title
            is given, and the informational ``group`` of new fields
        id_prefix: Fixed prefix of generated field ids
        id_groups: Number of random numeric blocks in generated field ids
    """
    default_type: str = DEFAULT_TYPE
    default_group_title: str = DEFAULT_GROUP_TITLE
    id_prefix: str = DEFAULT_ID_PREFIX
    id_groups: int = DEFAULT_ID_GROUPS

    @classmethod
    def from_config(cls, config: dict) -> 'SchemaSettings':
        """
        Create SchemaSettings from configuration dictionary.

        Args:
            config: Configuration dictionary containing a schema section

        Returns:
            SchemaSettings instance with values from config or defaults

        Example:
            config = {'schema': {'default_group_title': 'General'}}
            settings = SchemaSettings.from_config(config)
        """
        schema = config.get('schema') or {}

        try:
            id_groups = int(schema.get('id_groups', DEFAULT_ID_GROUPS))
        except (ValueError, TypeError):
            logger.warning(f"Invalid schema.id_groups {schema.get('id_groups')!r}, using {DEFAULT_ID_GROUPS}")
            id_groups = DEFAULT_ID_GROUPS
        if id_groups <= 0:
            logger.warning(f"schema.id_groups must be positive, using {DEFAULT_ID_GROUPS}")
            id_groups = DEFAULT_ID_GROUPS

        return cls(
            default_type=schema.get('default_type') or DEFAULT_TYPE,
            default_group_title=schema.get('default_group_title') or DEFAULT_GROUP_TITLE,
            id_prefix=schema.get('id_prefix') or DEFAULT_ID_PREFIX,
            id_groups=id_groups
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert settings back to the configuration section shape."""
        return {
            'default_type': self.default_type,
            'default_group_title': self.default_group_title,
            'id_prefix': self.id_prefix,
            'id_groups': self.id_groups
        }
