"""
Field type registry for the content schema model.

Maps a field ``type`` string to its definition (label and default options).
The schema model only consults it to derive ``SchemaField.default_options``;
everything else about a type (editor widgets, validation) lives outside
this package.
"""

from copy import deepcopy
from dataclasses import dataclass, field
from typing import Dict, Any, List, Optional, Iterable
import logging

from .config_loader import get_default_config
from .exceptions import FieldTypeRegistryError

logger = logging.getLogger(__name__)


@dataclass
class FieldTypeDefinition:
    """A single registered field type."""
    type: str
    label: str = ""
    options: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> 'FieldTypeDefinition':
        """
        Build a definition from a configuration entry.

        Raises:
            FieldTypeRegistryError: If the entry is not a mapping, has no type,
                or carries non-mapping options
        """
        if not isinstance(data, dict):
            raise FieldTypeRegistryError(data, "entry must be a mapping")

        type_name = data.get('type')
        if not isinstance(type_name, str) or not type_name:
            raise FieldTypeRegistryError(data, "missing 'type'")

        options = data.get('options')
        if options is None:
            options = {}
        if not isinstance(options, dict):
            raise FieldTypeRegistryError(data, "'options' must be a mapping")

        return cls(type=type_name, label=data.get('label') or type_name, options=dict(options))


class FieldTypeRegistry:
    """Ordered collection of field type definitions, looked up by type."""

    def __init__(self, definitions: Optional[Iterable[FieldTypeDefinition]] = None):
        self._definitions: List[FieldTypeDefinition] = list(definitions or [])

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> 'FieldTypeRegistry':
        """
        Create a registry from the ``field_types`` list of a configuration.

        Raises:
            FieldTypeRegistryError: If any entry is malformed
        """
        entries = config.get('field_types') or []
        registry = cls(FieldTypeDefinition.from_dict(entry) for entry in entries)
        logger.debug(f"Loaded field type registry with {len(registry)} types: {registry.types()}")
        return registry

    def __len__(self) -> int:
        return len(self._definitions)

    def __contains__(self, type_name: str) -> bool:
        return self.find(type_name) is not None

    def types(self) -> List[str]:
        return [definition.type for definition in self._definitions]

    def register(self, definition: FieldTypeDefinition) -> None:
        """Add a definition; the first definition registered for a type wins on lookup."""
        self._definitions.append(definition)

    def find(self, type_name: str) -> Optional[FieldTypeDefinition]:
        """Return the first definition matching type_name, or None."""
        for definition in self._definitions:
            if definition.type == type_name:
                return definition
        return None

    def default_options(self, type_name: str) -> Dict[str, Any]:
        """
        Get the default options for a field type.

        Returns:
            A copy of the registered options, or an empty dict when the type
            is not registered
        """
        definition = self.find(type_name)
        if definition is None:
            return {}
        return deepcopy(definition.options)


_default_registry: Optional[FieldTypeRegistry] = None


def get_default_registry() -> FieldTypeRegistry:
    """Registry used by schemas created without an explicit one."""
    global _default_registry

    if _default_registry is None:
        _default_registry = FieldTypeRegistry.from_config(get_default_config())
    return _default_registry


def set_default_registry(registry: Optional[FieldTypeRegistry]) -> None:
    """Replace the default registry; None resets it to the built-in types."""
    global _default_registry
    _default_registry = registry
