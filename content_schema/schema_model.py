"""
Editable content-type schema model.

A ``Schema`` owns an ordered list of ``SchemaGroup`` objects, each owning an
ordered list of top-level ``SchemaField`` objects, which may own nested
fields in turn. Every node keeps a link to its owner so that ownership
questions (``is_leaf``, which list to reorder in) are answered from the tree
itself. All editing goes through ``Schema``; lookup misses are reported by
returning None or doing nothing, never by raising.
"""

from copy import deepcopy
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Mapping, Optional, Set, Union
import logging

from pydantic import ValidationError

from .exceptions import SnapshotLoadError, log_error_with_context
from .field_types import FieldTypeRegistry, get_default_registry
from .id_generator import generate_field_id
from .schema_settings import SchemaSettings, DEFAULT_GROUP_TITLE
from .snapshots import (
    FieldDescriptor,
    FieldSnapshot,
    SchemaSnapshot,
    collect_snapshot_ids,
)

logger = logging.getLogger(__name__)


def _index_of(nodes: List[Any], node: Any) -> int:
    """Position of node in nodes, compared by identity."""
    for index, candidate in enumerate(nodes):
        if candidate is node:
            return index
    raise ValueError(f"{node!r} is not owned by this list")


@dataclass(eq=False)
class SchemaField:
    """
    A single field definition.

    Attributes:
        id: Opaque unique id, fixed at creation
        type: Type tag selecting the field's editor and semantics
        name: Machine name
        title: Human readable title
        description: Optional help text
        primary: Whether this is the display field of the content type
        schema_id: Id of the owning content type
        options: Type specific configuration, never interpreted here
        group: Informational group title; not kept in sync with the group
            that actually owns the field
        fields: Nested fields owned by this field
    """
    id: str
    type: str
    name: str
    title: str
    description: Optional[str] = None
    primary: bool = False
    schema_id: Optional[str] = None
    options: Dict[str, Any] = field(default_factory=dict)
    group: str = DEFAULT_GROUP_TITLE
    fields: List['SchemaField'] = field(default_factory=list)
    _parent: Any = field(default=None, init=False, repr=False)
    _alive: bool = field(default=True, init=False, repr=False)

    def __post_init__(self):
        if self.fields is None:
            self.fields = []
        if self.options is None:
            self.options = {}
        for child in self.fields:
            child._parent = self

    @property
    def parent(self) -> Optional[Union['SchemaField', 'SchemaGroup']]:
        """Owning field or group; None once detached or destroyed."""
        return self._parent

    @property
    def is_alive(self) -> bool:
        return self._alive

    def ancestors(self) -> Iterator[Any]:
        node = self._parent
        while node is not None:
            yield node
            node = getattr(node, '_parent', None)

    @property
    def is_leaf(self) -> bool:
        """True when no ancestor is a field, i.e. this is a top-level field."""
        return not any(isinstance(node, SchemaField) for node in self.ancestors())

    @property
    def default_options(self) -> Dict[str, Any]:
        """Options registered for this field's type, or {} for unknown types."""
        registry = None
        for node in self.ancestors():
            if isinstance(node, Schema):
                registry = node.registry
        if registry is None:
            registry = get_default_registry()
        return registry.default_options(self.type)

    def update(self, name: str, title: str, description: Optional[str], type: str,
               options: Dict[str, Any]) -> None:
        """Replace the editable attributes in one step."""
        self.name = name
        self.title = title
        self.description = description
        self.type = type
        self.options = options

    def set_display(self, is_display: bool) -> None:
        """Set ``primary`` on this field only; use ``Schema.set_display`` to keep a single primary."""
        self.primary = is_display

    def walk(self) -> Iterator['SchemaField']:
        """Yield this field and its whole subtree, depth first."""
        yield self
        for child in self.fields:
            yield from child.walk()

    def to_snapshot(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'type': self.type,
            'name': self.name,
            'title': self.title,
            'description': self.description,
            'primary': self.primary,
            'schemaId': self.schema_id,
            'options': deepcopy(self.options),
            'group': self.group,
            'fields': [child.to_snapshot() for child in self.fields]
        }

    def _destroy(self) -> None:
        for child in self.fields:
            child._destroy()
        self._parent = None
        self._alive = False


@dataclass(eq=False)
class SchemaGroup:
    """A titled, ordered list of top-level fields."""
    title: str
    fields: List[SchemaField] = field(default_factory=list)
    _parent: Any = field(default=None, init=False, repr=False)
    _alive: bool = field(default=True, init=False, repr=False)

    def __post_init__(self):
        if self.fields is None:
            self.fields = []
        for child in self.fields:
            child._parent = self

    @property
    def is_alive(self) -> bool:
        return self._alive

    def to_snapshot(self) -> Dict[str, Any]:
        return {
            'title': self.title,
            'fields': [child.to_snapshot() for child in self.fields]
        }

    def _destroy(self) -> None:
        for child in self.fields:
            child._destroy()
        self._parent = None
        self._alive = False


class Schema:
    """
    Root of the editable schema and the only place mutations happen.

    Fields and groups are created through ``add`` and ``add_group`` and
    released through ``remove`` and ``remove_group``. ``has_changed`` is a
    manual dirty flag: no operation here sets it.
    """

    def __init__(self, groups: Optional[List[SchemaGroup]] = None, has_changed: bool = False,
                 content_type_id: Optional[str] = None, settings: Optional[SchemaSettings] = None,
                 registry: Optional[FieldTypeRegistry] = None):
        self.groups: List[SchemaGroup] = list(groups or [])
        self.has_changed = has_changed
        self.content_type_id = content_type_id
        self.settings = settings or SchemaSettings()
        self.registry = registry if registry is not None else get_default_registry()
        self._issued_ids: Set[str] = set()

        for group in self.groups:
            group._parent = self
            for top_level in group.fields:
                self._issued_ids.update(node.id for node in top_level.walk())

    @classmethod
    def from_snapshot(cls, data: Union[SchemaSnapshot, Mapping[str, Any]],
                      content_type_id: Optional[str] = None,
                      settings: Optional[SchemaSettings] = None,
                      registry: Optional[FieldTypeRegistry] = None) -> 'Schema':
        """
        Build a schema from raw snapshot data.

        Args:
            data: Snapshot mapping (``groups``/``hasChanged``) or SchemaSnapshot
            content_type_id: Id of the owning content type
            settings: Defaults for new fields; built-in defaults when omitted
            registry: Field type registry; the default registry when omitted

        Returns:
            A new Schema with parent links wired through the whole tree

        Raises:
            SnapshotLoadError: If the data does not validate or repeats a field id
        """
        settings = settings or SchemaSettings()

        if isinstance(data, SchemaSnapshot):
            snapshot = data
        else:
            try:
                snapshot = SchemaSnapshot.model_validate(data)
            except ValidationError as e:
                error = SnapshotLoadError(e, errors=e.errors())
                log_error_with_context(error, "schema snapshot load")
                raise error from e

        ids = collect_snapshot_ids(snapshot)
        duplicates = sorted({field_id for field_id in ids if ids.count(field_id) > 1})
        if duplicates:
            problem = ValueError(f"duplicate field ids: {', '.join(duplicates)}")
            error = SnapshotLoadError(problem).with_context(duplicate_ids=duplicates)
            log_error_with_context(error, "schema snapshot load")
            raise error

        titles = [group.title.lower() for group in snapshot.groups]
        duplicate_titles = sorted({group.title for group in snapshot.groups
                                   if titles.count(group.title.lower()) > 1})
        if duplicate_titles:
            problem = ValueError(f"duplicate group titles: {', '.join(duplicate_titles)}")
            error = SnapshotLoadError(problem).with_context(duplicate_group_titles=duplicate_titles)
            log_error_with_context(error, "schema snapshot load")
            raise error

        def build_field(field_snapshot: FieldSnapshot) -> SchemaField:
            return SchemaField(
                id=field_snapshot.id,
                type=field_snapshot.type,
                name=field_snapshot.name,
                title=field_snapshot.title,
                description=field_snapshot.description,
                primary=field_snapshot.primary,
                schema_id=field_snapshot.schema_id,
                options=deepcopy(field_snapshot.options),
                group=field_snapshot.group or settings.default_group_title,
                fields=[build_field(child) for child in field_snapshot.fields]
            )

        groups = [
            SchemaGroup(title=group.title, fields=[build_field(f) for f in group.fields])
            for group in snapshot.groups
        ]

        schema = cls(groups=groups, has_changed=snapshot.has_changed,
                     content_type_id=content_type_id, settings=settings, registry=registry)
        logger.info(f"Loaded schema with {len(schema.groups)} groups and {len(ids)} fields")
        return schema

    def to_snapshot(self) -> Dict[str, Any]:
        return {
            'groups': [group.to_snapshot() for group in self.groups],
            'hasChanged': self.has_changed
        }

    @property
    def fields(self) -> List[SchemaField]:
        """
        Flattened view of the schema.

        Each top-level field of each group, followed immediately by its
        direct nested fields. Recomputed on every access.
        """
        flattened: List[SchemaField] = []
        for group in self.groups:
            for top_level in group.fields:
                flattened.append(top_level)
                flattened.extend(top_level.fields)
        return flattened

    def field_ids(self) -> List[str]:
        return [f.id for f in self.fields]

    def get_field(self, field_id: Optional[str]) -> Optional[SchemaField]:
        """Look up a field by id in the flattened view."""
        for candidate in self.fields:
            if candidate.id == field_id:
                return candidate
        return None

    def get_group(self, title: str) -> Optional[SchemaGroup]:
        """Look up a group by exact title."""
        for group in self.groups:
            if group.title == title:
                return group
        return None

    @property
    def primary_field(self) -> Optional[SchemaField]:
        for candidate in self.fields:
            if candidate.primary:
                return candidate
        return None

    def set_has_changed(self, has_changed: bool) -> None:
        self.has_changed = has_changed

    def add(self, descriptor: Union[FieldDescriptor, Mapping[str, Any]], position: int,
            group_title: Optional[str] = None,
            parent_field_id: Optional[str] = None) -> Optional[SchemaField]:
        """
        Create a field and insert it at ``position``.

        The target list is the nested list of ``parent_field_id`` when given,
        otherwise the top-level list of the group titled ``group_title``
        (the configured default group when omitted). Positions past the end
        append.

        Args:
            descriptor: name, title and description, optionally group and type
            position: Index in the target list
            group_title: Title of the target group
            parent_field_id: Id of the field to nest the new field under

        Returns:
            The new field, or None if the target could not be resolved (in
            which case nothing was changed)

        Raises:
            pydantic.ValidationError: If descriptor lacks name, title or description
        """
        if not isinstance(descriptor, FieldDescriptor):
            descriptor = FieldDescriptor.model_validate(descriptor)
        if group_title is None:
            group_title = self.settings.default_group_title

        owner: Optional[Union[SchemaField, SchemaGroup]]
        if parent_field_id:
            owner = self.get_field(parent_field_id)
            if owner is None:
                logger.debug(f"add: parent field {parent_field_id} not found")
                return None
        else:
            owner = self.get_group(group_title)
            if owner is None:
                logger.debug(f"add: group {group_title!r} not found")
                return None

        field_type = descriptor.type or self.settings.default_type
        new_field = SchemaField(
            id=generate_field_id(self._issued_ids, self.settings.id_prefix, self.settings.id_groups),
            type=field_type,
            name=descriptor.name,
            title=descriptor.title,
            description=descriptor.description,
            primary=field_type == self.settings.default_type and self.primary_field is None,
            schema_id=self.content_type_id,
            options={},
            group=descriptor.group or self.settings.default_group_title,
            fields=[]
        )
        self._issued_ids.add(new_field.id)

        owner.fields.insert(position, new_field)
        new_field._parent = owner
        logger.debug(f"add: created {new_field.type} field {new_field.id} ({new_field.name}) "
                     f"at position {position} primary={new_field.primary}")
        return new_field

    def move(self, field_id: str, position: int) -> None:
        """
        Move a field to ``position`` within the list that already owns it.

        The field keeps its owner (group or parent field); only its index
        among its siblings changes. Unknown ids are ignored.
        """
        node = self.get_field(field_id)
        if node is None:
            logger.debug(f"move: field {field_id} not found")
            return

        siblings = node.parent.fields
        del siblings[_index_of(siblings, node)]
        siblings.insert(position, node)
        logger.debug(f"move: field {field_id} moved to position {position}")

    def remove(self, node: SchemaField) -> None:
        """
        Destroy a field and every field nested under it.

        The field must still be part of this schema; removing a field twice
        is a caller error.
        """
        owner = node.parent
        del owner.fields[_index_of(owner.fields, node)]
        removed = sum(1 for _ in node.walk())
        node._destroy()
        logger.debug(f"remove: destroyed field {node.id} and {removed - 1} nested fields")

    def set_display(self, node: SchemaField) -> None:
        """Make node the only primary field."""
        for candidate in self.fields:
            candidate.set_display(False)
        node.set_display(True)
        logger.debug(f"set_display: primary field is now {node.id}")

    def add_group(self, title: str) -> None:
        """Append an empty group unless a group with this title exists (case-insensitive)."""
        if any(group.title.lower() == title.lower() for group in self.groups):
            logger.debug(f"add_group: group {title!r} already exists")
            return

        group = SchemaGroup(title=title, fields=[])
        group._parent = self
        self.groups.append(group)
        logger.debug(f"add_group: added group {title!r}")

    def remove_group(self, title: str) -> None:
        """Destroy the group with exactly this title and all of its fields."""
        group = self.get_group(title)
        if group is None:
            logger.debug(f"remove_group: group {title!r} not found")
            return

        del self.groups[_index_of(self.groups, group)]
        group._destroy()
        logger.debug(f"remove_group: removed group {title!r}")
