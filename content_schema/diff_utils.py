"""
Difference calculation between two schema snapshots.

Snapshots are compared in a keyed form (fields indexed by id, groups by
title) so that edits, moves, additions and removals show up at stable
DeepDiff paths instead of as list index shuffles.
"""

from typing import Dict, Any, List, Optional, Set
from deepdiff import DeepDiff
import logging
import re

logger = logging.getLogger(__name__)

CHANGE_TYPES = [
    'values_changed',
    'dictionary_item_added',
    'dictionary_item_removed',
    'iterable_item_added',
    'iterable_item_removed',
    'type_changes'
]

FIELD_PATH_PATTERN = re.compile(r"root\['fields'\]\['([^']+)'\]")

FIELD_ATTRIBUTES = ('type', 'name', 'title', 'description', 'primary', 'schemaId', 'options', 'group')


def _keyed_snapshot(snapshot: Dict[str, Any]) -> Dict[str, Any]:
    """
    Re-shape a snapshot so every field is addressed by id.

    ``hasChanged`` is left out: it is bookkeeping, not schema content.
    """
    groups: Dict[str, Any] = {}
    fields: Dict[str, Any] = {}

    def visit(field_list: Optional[List[Dict[str, Any]]], owner: str) -> List[str]:
        ids = []
        for position, raw in enumerate(field_list or []):
            field_id = raw.get('id')
            ids.append(field_id)
            entry = {attribute: raw.get(attribute) for attribute in FIELD_ATTRIBUTES}
            entry['owner'] = owner
            entry['position'] = position
            entry['children'] = visit(raw.get('fields'), f"field:{field_id}")
            fields[field_id] = entry
        return ids

    for position, group in enumerate(snapshot.get('groups') or []):
        title = group.get('title')
        groups[title] = {
            'position': position,
            'fields': visit(group.get('fields'), f"group:{title}")
        }

    return {'groups': groups, 'fields': fields}


def calculate_diff(before: Dict[str, Any], after: Dict[str, Any]) -> Dict[str, Any]:
    """
    Calculate the differences between two schema snapshots.

    Args:
        before: Snapshot taken earlier (``Schema.to_snapshot()``)
        after: Snapshot taken later

    Returns:
        DeepDiff result as a dictionary keyed by change type, for example
        ``values_changed`` with old/new values or ``dictionary_item_added``
        for fields that only exist in ``after``
    """
    diff = DeepDiff(_keyed_snapshot(before), _keyed_snapshot(after), verbose_level=2)
    result = diff.to_dict()
    logger.debug(f"Calculated schema diff with change types: {sorted(result.keys())}")
    return result


def has_changes(diff: Dict[str, Any]) -> bool:
    """
    Check if there are any changes in the diff.

    Args:
        diff: Diff dictionary from calculate_diff

    Returns:
        True if there are changes, False otherwise
    """
    if not diff:
        return False

    return any(change_type in diff and diff[change_type] for change_type in CHANGE_TYPES)


def get_change_summary(diff: Dict[str, Any]) -> Dict[str, int]:
    """
    Get a summary of changes by type.

    Args:
        diff: Diff dictionary from calculate_diff

    Returns:
        Dictionary with change counts by type
    """
    summary = {
        'modified': len(diff.get('values_changed', {})),
        'added': len(diff.get('dictionary_item_added', {})) + len(diff.get('iterable_item_added', {})),
        'removed': len(diff.get('dictionary_item_removed', {})) + len(diff.get('iterable_item_removed', {})),
        'type_changed': len(diff.get('type_changes', {})),
    }
    summary['total'] = sum(summary.values())
    return summary


def get_changed_field_ids(diff: Dict[str, Any]) -> Set[str]:
    """
    Ids of the fields touched by a diff.

    Includes fields that were added, removed or edited, and every field
    whose index among its siblings changed, whether by a move or because a
    sibling was inserted or removed before it. A reorder of nested fields
    also reports the owning field, whose ``children`` order changed.
    """
    changed: Set[str] = set()
    for change_type in CHANGE_TYPES:
        for path in diff.get(change_type, {}) or {}:
            match = FIELD_PATH_PATTERN.match(str(path))
            if match:
                changed.add(match.group(1))
    return changed
