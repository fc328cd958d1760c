"""
Tests for the catalog-backed metadata service.
"""

import pytest

from table_modeler.platform.catalog import CatalogMetadataService
from table_modeler.platform.service import MetadataServiceError


class TestCatalogMetadataService:
    """Tests for CatalogMetadataService."""

    def test_resolve_table(self, service):
        assert service.resolve_table("incident").table == "incident"
        assert service.resolve_table("nope") is None
        assert service.resolve_table("") is None

    def test_inherited_columns(self, service):
        """Test ancestor columns are visible and report their declaring table."""
        handle = service.resolve_table("incident")
        service.initialize_template(handle)

        columns = service.list_columns(handle)

        assert "caller_id" in columns
        assert "priority" in columns
        assert service.get_column_metadata(handle, "priority").declaring_table == "task"
        assert service.get_column_metadata(handle, "caller_id").declaring_table == "incident"

    def test_shadowed_column(self):
        """Test a child re-declaring a column becomes its declaring table."""
        service = CatalogMetadataService.from_dict({
            "base": {"label": "Base", "columns": {"name": {"label": "Name", "max_length": 40}}},
            "child": {
                "label": "Child",
                "extends": "base",
                "columns": {"name": {"label": "Full name", "max_length": 100}},
            },
        })
        handle = service.resolve_table("child")

        meta = service.get_column_metadata(handle, "name")

        assert meta.declaring_table == "child"
        assert meta.label == "Full name"
        assert meta.max_length == 100

    def test_choices_are_raw_values(self, service):
        handle = service.resolve_table("incident")

        meta = service.get_column_metadata(handle, "state")

        assert meta.choices == ("1", "2", "-5", "7")

    def test_display_label_matches_string_form(self, service):
        handle = service.resolve_table("incident")
        service.initialize_template(handle)

        service.set_field_value(handle, "state", -5)

        assert service.get_display_label(handle, "state") == "Pending"

    def test_assigning_discriminator_retargets_handle(self, service):
        """Test the platform hazard the builder must avoid."""
        handle = service.resolve_table("incident")
        service.initialize_template(handle)

        service.set_field_value(handle, "sys_class_name", "change_request")

        assert handle.effective_table == "change_request"
        assert service.get_class_display_label(handle) == "Change Request"
        assert "caller_id" not in service.list_columns(handle)

    def test_display_field(self, service):
        handle = service.resolve_table("incident")

        assert service.get_display_field_name(handle) == "number"
        assert service.get_display_field_name(service.resolve_table("user")) == "name"

    def test_display_field_fallback(self):
        service = CatalogMetadataService.from_dict({
            "widget": {"label": "Widget", "columns": {"sys_id": {}, "name": {}}},
            "bare": {"label": "Bare", "columns": {}},
        })

        assert service.get_display_field_name(service.resolve_table("widget")) == "name"
        assert service.get_display_field_name(service.resolve_table("bare")) == "sys_id"

    def test_unknown_column(self, service):
        handle = service.resolve_table("user")

        with pytest.raises(MetadataServiceError):
            service.get_column_metadata(handle, "priority")

    def test_inheritance_cycle(self):
        service = CatalogMetadataService.from_dict({
            "a": {"extends": "b"},
            "b": {"extends": "a"},
        })
        handle = service.resolve_table("a")

        with pytest.raises(MetadataServiceError):
            service.list_columns(handle)

    def test_from_file(self, tmp_path):
        path = tmp_path / "catalog.yaml"
        path.write_text(
            "tables:\n"
            "  user:\n"
            "    label: User\n"
            "    columns:\n"
            "      name: {label: Name, type: string, max_length: 151}\n",
            encoding="utf-8",
        )

        service = CatalogMetadataService.from_file(path)

        assert service.tables["user"].columns["name"].max_length == 151

    def test_from_file_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            CatalogMetadataService.from_file(tmp_path / "missing.yaml")
