"""
Editable in-memory model of a content-type schema: groups of fields, nested
fields, a single primary field, and the operations an editor performs on them.
"""

from .schema_model import Schema, SchemaField, SchemaGroup
from .schema_settings import SchemaSettings, DEFAULT_TYPE, DEFAULT_GROUP_TITLE
from .snapshots import FieldDescriptor, SchemaSnapshot
from .field_types import FieldTypeRegistry, FieldTypeDefinition, get_default_registry, set_default_registry
from .exceptions import SchemaModelError, ConfigurationLoadError, SnapshotLoadError, FieldTypeRegistryError

__all__ = [
    "Schema",
    "SchemaField",
    "SchemaGroup",
    "SchemaSettings",
    "DEFAULT_TYPE",
    "DEFAULT_GROUP_TITLE",
    "FieldDescriptor",
    "SchemaSnapshot",
    "FieldTypeRegistry",
    "FieldTypeDefinition",
    "get_default_registry",
    "set_default_registry",
    "SchemaModelError",
    "ConfigurationLoadError",
    "SnapshotLoadError",
    "FieldTypeRegistryError",
]
