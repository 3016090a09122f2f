"""Tests for template rendering."""

import pytest

from schemasync.core.exceptions import ConfigError
from schemasync.models.templates import render_templates


class TestTemplateRendering:
    """Tests for template rendering functionality."""

    def test_project_name_template(self):
        """Test {{ project.name }} template."""
        project_dict = {
            "name": "blog",
            "store": {"type": "memory", "database_id": "{{ project.name }}_db"},
        }
        result = render_templates(project_dict)
        assert result["store"]["database_id"] == "blog_db"

    def test_env_var_template(self, monkeypatch):
        """Test {{ env_var('KEY') }} template."""
        monkeypatch.setenv("TEST_ENDPOINT", "https://appwrite.example.com/v1")
        project_dict = {
            "name": "test",
            "store": {"endpoint": "{{ env_var('TEST_ENDPOINT') }}"},
        }
        result = render_templates(project_dict)
        assert result["store"]["endpoint"] == "https://appwrite.example.com/v1"

    def test_env_var_missing(self, monkeypatch):
        """Test that missing env_var raises error."""
        monkeypatch.delenv("MISSING_VAR", raising=False)
        project_dict = {"name": "test", "store": {"api_key": "{{ env_var('MISSING_VAR') }}"}}
        with pytest.raises(ConfigError) as exc_info:
            render_templates(project_dict)
        assert "MISSING_VAR" in str(exc_info.value)

    def test_var_template(self):
        """Test {{ var('KEY') }} template with CLI vars."""
        project_dict = {"name": "test", "store": {"database_id": "{{ var('DB') }}"}}
        result = render_templates(project_dict, {"DB": "staging"})
        assert result["store"]["database_id"] == "staging"

    def test_var_missing(self):
        """Test that missing var raises error."""
        project_dict = {"name": "test", "store": {"database_id": "{{ var('DB') }}"}}
        with pytest.raises(ConfigError) as exc_info:
            render_templates(project_dict, {})
        assert "DB" in str(exc_info.value)

    def test_multiple_templates_in_string(self, monkeypatch):
        """Test multiple templates in a single string."""
        monkeypatch.setenv("HOST", "appwrite.example.com")
        project_dict = {
            "name": "test",
            "store": {"endpoint": "https://{{ env_var('HOST') }}/{{ var('VERSION') }}"},
        }
        result = render_templates(project_dict, {"VERSION": "v1"})
        assert result["store"]["endpoint"] == "https://appwrite.example.com/v1"

    def test_templates_in_tables(self):
        """Test templates inside nested lists of tables."""
        project_dict = {
            "name": "test",
            "tables": [
                {
                    "name": "{{ var('PREFIX') }}_users",
                    "schema": {"email": {"type": "string", "size": 100}},
                }
            ],
        }
        result = render_templates(project_dict, {"PREFIX": "app"})
        assert result["tables"][0]["name"] == "app_users"
        assert result["tables"][0]["schema"]["email"]["size"] == 100

    def test_unknown_function(self):
        """Test that unknown template functions raise error."""
        with pytest.raises(ConfigError) as exc_info:
            render_templates({"name": "test", "x": "{{ secret('KEY') }}"})
        assert "Unknown function: secret" in str(exc_info.value)

    def test_no_templates(self):
        """Test project with no templates."""
        project_dict = {"name": "test", "store": {"type": "memory", "database_id": "main"}}
        assert render_templates(project_dict) == project_dict
