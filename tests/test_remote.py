"""
Tests for the remote metadata service and the read-only client.
"""

import xmlrpc.client
from unittest.mock import MagicMock

import pytest

from table_modeler.core.schema import ColumnClassifier, ColumnKind, TableModelBuilder
from table_modeler.platform.client import (
    PlatformAPIError,
    PlatformClient,
    SafeTimeoutTransport,
    TimeoutTransport,
)
from table_modeler.platform.remote import RemoteMetadataService
from table_modeler.platform.service import MetadataServiceError


# Tables the user may not read
DENIED = {"res.partner.bank"}

MODELS = {
    "res.partner": "Contact",
    "res.country": "Country",
    "res.users": "User",
    "res.partner.bank": "Bank Accounts",
}

FIELDS = {
    "res.partner": {
        "id": {"string": "ID", "type": "integer", "store": True},
        "name": {"string": "Name", "type": "char", "required": True, "store": True},
        "type": {
            "string": "Address Type",
            "type": "selection",
            "store": True,
            "selection": [["contact", "Contact"], ["invoice", "Invoice Address"]],
        },
        "country_id": {
            "string": "Country",
            "type": "many2one",
            "relation": "res.country",
            "store": True,
        },
        "email_formatted": {"string": "Formatted Email", "type": "char", "store": False},
    },
    "res.users": {
        "partner_id": {"string": "Related Partner", "type": "many2one", "relation": "res.partner"},
        "name": {"string": "Name", "type": "char", "related": "partner_id.name", "store": True},
        "login": {"string": "Login", "type": "char", "size": 64, "store": True},
    },
    "res.country": {
        "name": {"string": "Country Name", "type": "char", "store": True},
        "code": {"string": "Country Code", "type": "char", "size": 2, "store": True},
    },
}


def search_read(model, domain, fields=None, **kwargs):
    assert model == "ir.model"
    name = domain[0][2]
    if name in MODELS:
        return [{"model": name, "name": MODELS[name]}]
    return []


@pytest.fixture
def client():
    client = MagicMock(spec=PlatformClient)
    client.search_read.side_effect = search_read
    client.fields_get.side_effect = lambda model, attributes=None: FIELDS[model]
    client.default_get.side_effect = lambda model, fields: {"type": "contact"} if model == "res.partner" else {}
    client.check_access_rights.side_effect = (
        lambda model, operation, raise_exception=False: model not in DENIED
    )
    return client


@pytest.fixture
def remote(client):
    return RemoteMetadataService(client)


class TestRemoteMetadataService:
    """Tests for RemoteMetadataService."""

    def test_resolve_table(self, remote):
        handle = remote.resolve_table("res.partner")

        assert handle.table == "res.partner"
        assert remote.get_class_display_label(handle) == "Contact"
        assert remote.resolve_table("res.nothing") is None

    def test_unreadable_table_does_not_resolve(self, remote, client):
        assert remote.resolve_table("res.partner.bank") is None
        client.check_access_rights.assert_called_with(
            "res.partner.bank", "read", raise_exception=False
        )

    def test_initialize_template_uses_defaults(self, remote, client):
        handle = remote.resolve_table("res.partner")

        remote.initialize_template(handle)

        assert handle.values == {"type": "contact"}
        client.default_get.assert_called_once()

    def test_many2one_is_reference(self, remote):
        handle = remote.resolve_table("res.partner")

        meta = remote.get_column_metadata(handle, "country_id")

        assert meta.internal_type == "reference"
        assert meta.reference_table == "res.country"

    def test_selection_choices(self, remote):
        handle = remote.resolve_table("res.partner")
        remote.initialize_template(handle)

        meta = remote.get_column_metadata(handle, "type")
        remote.set_field_value(handle, "type", "invoice")

        assert meta.choices == ("contact", "invoice")
        assert remote.get_display_label(handle, "type") == "Invoice Address"

    def test_flags(self, remote):
        handle = remote.resolve_table("res.partner")

        assert remote.get_column_metadata(handle, "id").auto_generated is True
        assert remote.get_column_metadata(handle, "email_formatted").virtual is True
        assert remote.get_column_metadata(handle, "name").mandatory is True

    def test_delegated_field_declaring_table(self, client):
        """Test fields delegated through a parent link report the parent table."""
        remote = RemoteMetadataService(client)
        handle = remote.resolve_table("res.users")

        assert remote.get_column_metadata(handle, "name").declaring_table == "res.partner"
        assert remote.get_column_metadata(handle, "login").declaring_table == "res.users"

    def test_fields_fetched_once(self, remote, client):
        handle = remote.resolve_table("res.partner")

        remote.list_columns(handle)
        remote.get_column_metadata(handle, "name")
        remote.get_display_field_name(handle)

        assert client.fields_get.call_count == 1

    def test_unknown_column(self, remote):
        handle = remote.resolve_table("res.partner")

        with pytest.raises(MetadataServiceError):
            remote.get_column_metadata(handle, "missing")

    def test_build_over_remote(self, remote, client):
        """Test a full build never calls anything that writes."""
        builder = TableModelBuilder(remote, classifier=ColumnClassifier(discriminator_column=None))

        model = builder.build("res.partner").unwrap()

        assert model.label == "Contact"
        assert model.names == ["country_id", "email_formatted", "id", "name", "type"]
        country = model.get_column("country_id")
        assert country.reference_detail.to_dict() == {
            "label": "Country",
            "target_table": "res.country",
            "display_field": "name",
        }
        address_type = model.get_column("type")
        assert address_type.kind == ColumnKind.ENUMERATED
        assert [e.label for e in address_type.choice_entries] == ["Contact", "Invoice Address"]

        called = {name for name, _, _ in client.mock_calls}
        assert called <= {"search_read", "fields_get", "default_get", "check_access_rights"}


class TestPlatformClient:
    """Tests for the read-only guard of PlatformClient."""

    @pytest.fixture
    def platform_client(self):
        client = PlatformClient(url="https://example.com/", db="test", username="u", password="p")
        client._uid = 2
        client._models = MagicMock()
        return client

    def test_url_normalized(self, platform_client):
        assert platform_client.url == "https://example.com"

    @pytest.mark.parametrize("url, transport_type", [
        ("https://example.com", SafeTimeoutTransport),
        ("http://localhost:8069", TimeoutTransport),
    ])
    def test_timeout_reaches_connections(self, url, transport_type):
        client = PlatformClient(url=url, db="test", username="u", password="p", timeout=30)

        for proxy in (client._common, client._models):
            transport = proxy("transport")
            assert isinstance(transport, transport_type)
            assert transport.make_connection("example.com").timeout == 30

    @pytest.mark.parametrize("method", ["create", "write", "unlink"])
    def test_write_methods_refused(self, platform_client, method):
        with pytest.raises(PlatformAPIError):
            platform_client.execute("res.partner", method, {"name": "x"})

        platform_client._models.execute_kw.assert_not_called()

    @pytest.mark.parametrize("method", ["read", "search", "name_search"])
    def test_unused_read_methods_refused(self, platform_client, method):
        with pytest.raises(PlatformAPIError):
            platform_client.execute("res.partner", method, [])

    def test_check_access_rights(self, platform_client):
        platform_client._models.execute_kw.return_value = False

        assert platform_client.check_access_rights("res.partner", "read") is False
        platform_client._models.execute_kw.assert_called_once_with(
            "test", 2, "p", "res.partner", "check_access_rights", ["read"],
            {"raise_exception": False},
        )

    def test_fields_get(self, platform_client):
        platform_client._models.execute_kw.return_value = {"name": {"type": "char"}}

        result = platform_client.fields_get("res.partner", attributes=["type"])

        assert result == {"name": {"type": "char"}}
        platform_client._models.execute_kw.assert_called_once_with(
            "test", 2, "p", "res.partner", "fields_get", [], {"attributes": ["type"]}
        )

    def test_fault_becomes_api_error(self, platform_client):
        platform_client._models.execute_kw.side_effect = xmlrpc.client.Fault(1, "Access Denied")

        with pytest.raises(PlatformAPIError) as exc_info:
            platform_client.default_get("res.partner", ["name"])

        assert exc_info.value.fault_code == 1
