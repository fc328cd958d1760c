"""
Shared fixtures: a small task/incident hierarchy with users.
"""

import pytest
import yaml

from table_modeler.core.schema import ColumnClassifier, TableModelBuilder
from table_modeler.platform import CatalogMetadataService


PRIORITY_CHOICES = [
    {"value": 1, "label": "1 - Critical"},
    {"value": 2, "label": "2 - High"},
    {"value": 3, "label": "3 - Moderate"},
    {"value": 4, "label": "4 - Low"},
    {"value": 5, "label": "5 - Planning"},
]


CATALOG = {
    "tables": {
        "task": {
            "label": "Task",
            "display_field": "number",
            "columns": {
                "sys_id": {
                    "label": "Sys ID", "type": "GUID", "max_length": 32,
                    "auto_generated": True,
                },
                "sys_class_name": {
                    "label": "Task type", "type": "sys_class_name", "max_length": 80,
                    "choices": [
                        {"value": "task", "label": "Task"},
                        {"value": "incident", "label": "Incident"},
                        {"value": "change_request", "label": "Change Request"},
                    ],
                },
                "sys_created_on": {
                    "label": "Created", "type": "glide_date_time", "max_length": 40,
                    "auto_generated": True,
                },
                "number": {"label": "Number", "type": "string", "max_length": 40},
                "short_description": {
                    "label": "Short description", "type": "string", "max_length": 160,
                    "mandatory": True,
                },
                "priority": {
                    "label": "Priority", "type": "integer", "default": 4,
                    "choices": PRIORITY_CHOICES,
                },
                "state": {
                    "label": "State", "type": "integer", "default": 1,
                    "choices": [
                        {"value": "1", "label": "New"},
                        {"value": "2", "label": "In Progress"},
                        {"value": "-5", "label": "Pending"},
                        {"value": "7", "label": "Closed"},
                    ],
                },
                "assigned_to": {
                    "label": "Assigned to", "type": "reference", "max_length": 32,
                    "reference": "user",
                },
                "business_duration": {
                    "label": "Business duration", "type": "glide_duration",
                    "virtual": True,
                },
            },
        },
        "incident": {
            "label": "Incident",
            "extends": "task",
            "columns": {
                "caller_id": {
                    "label": "Caller", "type": "reference", "max_length": 32,
                    "reference": "user", "mandatory": True,
                },
                "category": {
                    "label": "Category", "type": "string", "max_length": 40,
                    "default": "inquiry",
                    "choices": [
                        {"value": "inquiry", "label": "Inquiry / Help"},
                        {"value": "software", "label": "Software"},
                        {"value": "hardware", "label": "Hardware"},
                    ],
                },
            },
        },
        "change_request": {
            "label": "Change Request",
            "extends": "task",
            "columns": {
                "risk": {"label": "Risk", "type": "integer"},
            },
        },
        "user": {
            "label": "User",
            "display_field": "name",
            "columns": {
                "sys_id": {"label": "Sys ID", "type": "GUID", "max_length": 32, "auto_generated": True},
                "name": {"label": "Name", "type": "string", "max_length": 151},
                "user_name": {"label": "User ID", "type": "string", "max_length": 100},
                "active": {"label": "Active", "type": "boolean", "default": True},
            },
        },
    },
}


INCIDENT_COLUMNS = [
    "assigned_to",
    "business_duration",
    "caller_id",
    "category",
    "number",
    "priority",
    "short_description",
    "state",
    "sys_class_name",
    "sys_created_on",
    "sys_id",
]


@pytest.fixture
def catalog() -> dict:
    return CATALOG


@pytest.fixture
def service() -> CatalogMetadataService:
    return CatalogMetadataService.from_dict(CATALOG)


@pytest.fixture
def classifier() -> ColumnClassifier:
    return ColumnClassifier()


@pytest.fixture
def builder(service, classifier) -> TableModelBuilder:
    return TableModelBuilder(service, classifier=classifier)


@pytest.fixture
def incident_columns() -> list[str]:
    return list(INCIDENT_COLUMNS)


@pytest.fixture
def catalog_file(tmp_path):
    """The shared catalog written out as YAML."""
    path = tmp_path / "catalog.yaml"
    path.write_text(yaml.safe_dump(CATALOG, sort_keys=False), encoding="utf-8")
    return path
