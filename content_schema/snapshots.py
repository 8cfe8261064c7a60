"""
Pydantic models for raw schema data.

Snapshots are the plain-data form of a schema as it arrives from (or is
handed to) an external store. They are validated and normalized here before
``Schema.from_snapshot`` builds the live, editable tree from them.
"""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator
import logging

logger = logging.getLogger(__name__)


class FieldDescriptor(BaseModel):
    """Input accepted by ``Schema.add`` when creating a field."""
    model_config = ConfigDict(extra='ignore')

    name: str
    title: str
    description: Optional[str]
    group: Optional[str] = None
    type: Optional[str] = None


class FieldSnapshot(BaseModel):
    """Raw data for one field, including its nested fields."""
    model_config = ConfigDict(extra='ignore', populate_by_name=True)

    id: str
    type: str
    name: str
    title: str
    description: Optional[str] = None
    primary: bool = False
    schema_id: Optional[str] = Field(default=None, alias='schemaId')
    options: Dict[str, Any] = Field(default_factory=dict)
    group: Optional[str] = None
    fields: List['FieldSnapshot'] = Field(default_factory=list)

    @field_validator('fields', mode='before')
    @classmethod
    def normalize_fields(cls, v):
        # Stored snapshots may carry null for fields without children.
        if v is None:
            return []
        return v

    @field_validator('options', mode='before')
    @classmethod
    def normalize_options(cls, v):
        if v is None:
            return {}
        return v


class GroupSnapshot(BaseModel):
    """Raw data for one group."""
    model_config = ConfigDict(extra='ignore')

    title: str
    fields: List[FieldSnapshot] = Field(default_factory=list)

    @field_validator('fields', mode='before')
    @classmethod
    def normalize_fields(cls, v):
        if v is None:
            return []
        return v


class SchemaSnapshot(BaseModel):
    """Raw data for a whole schema."""
    model_config = ConfigDict(extra='ignore', populate_by_name=True)

    groups: List[GroupSnapshot] = Field(default_factory=list)
    has_changed: bool = Field(default=False, alias='hasChanged')

    @field_validator('groups', mode='before')
    @classmethod
    def normalize_groups(cls, v):
        if v is None:
            return []
        return v


def collect_snapshot_ids(snapshot: SchemaSnapshot) -> List[str]:
    """Return every field id in a snapshot, at any depth, in document order."""
    ids: List[str] = []

    def visit(fields: List[FieldSnapshot]) -> None:
        for field_snapshot in fields:
            ids.append(field_snapshot.id)
            visit(field_snapshot.fields)

    for group in snapshot.groups:
        visit(group.fields)
    return ids
