"""
Unit tests for schema_settings module.
"""

from content_schema.schema_settings import SchemaSettings
from content_schema.config_loader import get_default_config
from test_fixtures import ConfigurationFixtures


class TestSchemaSettings:
    """Test cases for SchemaSettings."""

    def test_defaults(self):
        settings = SchemaSettings()

        assert settings.default_type == 'string'
        assert settings.default_group_title == 'Main'
        assert settings.id_prefix == 'new'
        assert settings.id_groups == 5

    def test_from_default_config_matches_defaults(self):
        """Test the default configuration and the dataclass defaults agree."""
        assert SchemaSettings.from_config(get_default_config()) == SchemaSettings()

    def test_from_config_custom(self):
        settings = SchemaSettings.from_config(ConfigurationFixtures.get_custom_config())

        assert settings.default_type == 'text'
        assert settings.default_group_title == 'General'
        assert settings.id_prefix == 'fld'
        assert settings.id_groups == 2

    def test_from_config_missing_section(self):
        assert SchemaSettings.from_config({}) == SchemaSettings()

    def test_from_config_invalid_id_groups(self):
        """Test unusable id_groups fall back to the default."""
        assert SchemaSettings.from_config({'schema': {'id_groups': 'x'}}).id_groups == 5
        assert SchemaSettings.from_config({'schema': {'id_groups': -1}}).id_groups == 5

    def test_to_dict(self):
        assert SchemaSettings().to_dict() == get_default_config()['schema']
