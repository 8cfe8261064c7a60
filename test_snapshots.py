"""
Unit tests for snapshot loading and dumping.
"""

import pytest

from content_schema.schema_model import Schema
from content_schema.schema_settings import SchemaSettings
from content_schema.snapshots import FieldDescriptor, SchemaSnapshot, collect_snapshot_ids
from content_schema.exceptions import SnapshotLoadError
from test_fixtures import SnapshotFixtures, blog_post_snapshot, blog_post_schema


class TestSnapshotModels:
    """Test cases for the pydantic snapshot models."""

    def test_null_fields_normalized(self):
        """Test that null nested field lists become empty lists."""
        snapshot = SchemaSnapshot.model_validate({
            'groups': [{'title': 'Main', 'fields': [SnapshotFixtures.field('a', 'a', fields=None)]}]
        })

        assert snapshot.groups[0].fields[0].fields == []

    def test_missing_optional_keys_defaulted(self):
        """Test minimal field data is accepted."""
        snapshot = SchemaSnapshot.model_validate({
            'groups': [{'title': 'Main', 'fields': [
                {'id': 'a', 'type': 'string', 'name': 'a', 'title': 'A'}
            ]}]
        })
        field = snapshot.groups[0].fields[0]

        assert field.primary is False
        assert field.options == {}
        assert field.description is None
        assert field.schema_id is None

    def test_schema_id_accepts_both_spellings(self):
        """Test schemaId and schema_id both populate schema_id."""
        data = {'id': 'a', 'type': 'string', 'name': 'a', 'title': 'A'}
        wire = SchemaSnapshot.model_validate({'groups': [{'title': 'M', 'fields': [dict(data, schemaId='ct')]}]})
        python = SchemaSnapshot.model_validate({'groups': [{'title': 'M', 'fields': [dict(data, schema_id='ct')]}]})

        assert wire.groups[0].fields[0].schema_id == 'ct'
        assert python.groups[0].fields[0].schema_id == 'ct'

    def test_unknown_keys_ignored(self):
        """Test extra keys such as __typename are dropped."""
        snapshot = SchemaSnapshot.model_validate({
            'groups': [{'title': 'Main', 'fields': [
                {'id': 'a', 'type': 'string', 'name': 'a', 'title': 'A', '__typename': 'SchemaField'}
            ]}]
        })

        assert snapshot.groups[0].fields[0].id == 'a'

    def test_collect_snapshot_ids_any_depth(self, blog_post_snapshot):
        """Test id collection includes nested fields."""
        snapshot = SchemaSnapshot.model_validate(blog_post_snapshot)

        assert collect_snapshot_ids(snapshot) == [
            'f-title', 'f-body', 'f-author', 'f-author-name', 'f-author-email', 'f-slug'
        ]

    def test_descriptor_optional_keys(self):
        """Test descriptor group and type are optional."""
        desc = FieldDescriptor.model_validate({'name': 'a', 'title': 'A', 'description': None})

        assert desc.group is None
        assert desc.type is None


class TestFromSnapshot:
    """Test cases for Schema.from_snapshot."""

    def test_from_snapshot_builds_tree(self, blog_post_schema):
        """Test groups and nested ownership are wired up."""
        author = blog_post_schema.get_field('f-author')

        assert [g.title for g in blog_post_schema.groups] == ['Main', 'SEO']
        assert author.parent is blog_post_schema.get_group('Main')
        assert all(child.parent is author for child in author.fields)

    def test_from_snapshot_sets_flags(self):
        """Test hasChanged is loaded."""
        schema = Schema.from_snapshot({'groups': [], 'hasChanged': True})

        assert schema.has_changed is True

    def test_from_snapshot_none_groups(self):
        """Test null groups load as an empty schema."""
        schema = Schema.from_snapshot({'groups': None})

        assert schema.groups == []

    def test_missing_group_attribute_uses_default_group(self):
        """Test fields without a group attribute get the default group title."""
        schema = Schema.from_snapshot(
            {'groups': [{'title': 'Main', 'fields': [
                {'id': 'a', 'type': 'string', 'name': 'a', 'title': 'A'}
            ]}]},
            settings=SchemaSettings(default_group_title='General')
        )

        assert schema.get_field('a').group == 'General'

    def test_invalid_snapshot_raises(self):
        """Test validation errors are wrapped."""
        with pytest.raises(SnapshotLoadError) as exc_info:
            Schema.from_snapshot({'groups': [{'fields': []}]})

        details = exc_info.value.get_full_details()
        assert details['error_type'] == 'SnapshotLoadError'
        assert details['context']['error_count'] == 1
        assert details['context']['locations'] == ['groups.0.title']

    def test_duplicate_ids_rejected(self):
        """Test duplicate ids anywhere in the tree are rejected."""
        field = SnapshotFixtures.field
        data = {'groups': [
            {'title': 'A', 'fields': [field('x', 'x', fields=[field('y', 'y')])]},
            {'title': 'B', 'fields': [field('y', 'other')]}
        ]}

        with pytest.raises(SnapshotLoadError) as exc_info:
            Schema.from_snapshot(data)

        assert exc_info.value.context['duplicate_ids'] == ['y']

    @pytest.mark.parametrize("titles, expected", [
        (['Main', 'main'], ['Main', 'main']),
        (['Main', 'SEO', 'Main'], ['Main']),
    ])
    def test_duplicate_group_titles_rejected(self, titles, expected):
        """Test group titles that clash ignoring case are rejected."""
        data = {'groups': [{'title': title, 'fields': []} for title in titles]}

        with pytest.raises(SnapshotLoadError) as exc_info:
            Schema.from_snapshot(data)

        assert exc_info.value.context['duplicate_group_titles'] == expected

    def test_loaded_ids_are_never_issued(self, blog_post_schema, monkeypatch):
        """Test ids present in the snapshot count as taken."""
        seen = []

        def fake_generate(existing_ids, prefix, groups):
            seen.append(set(existing_ids))
            return 'new-1'

        monkeypatch.setattr('content_schema.schema_model.generate_field_id', fake_generate)
        blog_post_schema.add({'name': 'x', 'title': 'X', 'description': ''}, 0, 'Main')

        assert {'f-title', 'f-author-email', 'f-slug'} <= seen[0]

    def test_round_trip_preserves_snapshot(self, blog_post_snapshot):
        """Test to_snapshot reproduces normalized input."""
        schema = Schema.from_snapshot(blog_post_snapshot)

        dumped = schema.to_snapshot()

        assert dumped['groups'][0]['fields'][0]['fields'] == []
        assert dumped['groups'][0]['fields'][2]['fields'][1]['id'] == 'f-author-email'
        assert dumped['hasChanged'] is False
        assert Schema.from_snapshot(dumped).to_snapshot() == dumped

    def test_to_snapshot_copies_options(self):
        """Test dumped options are independent of the live field."""
        schema = Schema.from_snapshot({'groups': [{'title': 'M', 'fields': [
            SnapshotFixtures.field('a', 'a', options={'items': ['x']})
        ]}]})

        dumped = schema.to_snapshot()
        dumped['groups'][0]['fields'][0]['options']['items'].append('y')

        assert schema.get_field('a').options == {'items': ['x']}
