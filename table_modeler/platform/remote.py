"""
Remote Metadata Service

MetadataService implemented over the read-only XML-RPC client.
Uses only calls an ordinary user may make: the model registry, access
checks, fields_get and default_get. Values assigned while probing stay on the local template.
"""

from typing import Any

from table_modeler.platform.client import PlatformClient
from table_modeler.platform.service import (
    ColumnMetadata,
    MetadataService,
    MetadataServiceError,
    TableHandle,
)


MODEL_REGISTRY = "ir.model"

# Fields to request from fields_get
FIELD_ATTRIBUTES = [
    "string",
    "type",
    "size",
    "required",
    "store",
    "relation",
    "selection",
    "related",
]

# Columns whose values the platform supplies
AUTO_GENERATED_FIELDS = frozenset({
    "id",
    "create_uid",
    "create_date",
    "write_uid",
    "write_date",
    "__last_update",
    "display_name",
})

# Platform type -> internal type tag
TYPE_ALIASES = {
    "many2one": "reference",
}


class RemoteMetadataService(MetadataService):
    """
    Schema metadata read from a live platform.

    Example:
        >>> client = PlatformClient(url, db, user, password)
        >>> client.authenticate()
        >>> service = RemoteMetadataService(client)
        >>> handle = service.resolve_table("res.partner")
    """

    def __init__(self, client: PlatformClient):
        self.client = client

    def resolve_table(self, name: str) -> TableHandle | None:
        if not name:
            return None

        rows = self.client.search_read(
            MODEL_REGISTRY,
            [("model", "=", name)],
            ["name", "model"],
            limit=1,
        )
        if not rows:
            return None

        # A table the caller cannot read is not valid for them
        if not self.client.check_access_rights(name, "read", raise_exception=False):
            return None

        handle = TableHandle(table=name)
        handle.schema["label"] = rows[0].get("name") or name
        return handle

    def initialize_template(self, handle: TableHandle) -> None:
        fields = self._fields(handle)
        defaults = self.client.default_get(handle.effective_table, list(fields))
        handle.values = dict(defaults or {})
        handle.initialized = True

    def list_columns(self, handle: TableHandle) -> list[str]:
        return list(self._fields(handle))

    def get_column_metadata(self, handle: TableHandle, name: str) -> ColumnMetadata:
        fields = self._fields(handle)
        info = self._field(handle, name)

        field_type = info.get("type", "unknown")
        selection = info.get("selection")
        choices: tuple[Any, ...] = ()
        if isinstance(selection, list):
            choices = tuple(option[0] for option in selection)

        return ColumnMetadata(
            label=info.get("string") or name,
            internal_type=TYPE_ALIASES.get(field_type, field_type),
            max_length=int(info.get("size") or 0),
            mandatory=bool(info.get("required", False)),
            auto_generated=name in AUTO_GENERATED_FIELDS,
            virtual=not info.get("store", True),
            declaring_table=self._declaring_table(handle, name, info, fields),
            reference_table=info.get("relation") if field_type == "many2one" else None,
            choices=choices,
        )

    def set_field_value(self, handle: TableHandle, name: str, value: Any) -> None:
        self._field(handle, name)
        handle.values[name] = value

    def get_display_label(self, handle: TableHandle, name: str) -> str:
        info = self._field(handle, name)
        value = handle.values.get(name)

        # False is the platform's empty value
        if value is None or (value is False and info.get("type") != "boolean"):
            return ""

        selection = info.get("selection")
        if isinstance(selection, list):
            for option_value, option_label in selection:
                if str(option_value) == str(value):
                    return option_label

        # many2one values read back as [id, display_name]
        if isinstance(value, (list, tuple)) and len(value) == 2:
            return str(value[1])

        return str(value)

    def get_class_display_label(self, handle: TableHandle) -> str:
        return handle.schema.get("label") or handle.effective_table

    def get_display_field_name(self, handle: TableHandle) -> str:
        return "name" if "name" in self._fields(handle) else "display_name"

    # -------------------------------------------------------------------------
    # Internal Methods
    # -------------------------------------------------------------------------

    def _fields(self, handle: TableHandle) -> dict[str, dict[str, Any]]:
        """Field descriptions, fetched once per handle."""
        if "fields" not in handle.schema:
            handle.schema["fields"] = self.client.fields_get(
                handle.effective_table,
                attributes=FIELD_ATTRIBUTES,
            )
        return handle.schema["fields"]

    def _field(self, handle: TableHandle, name: str) -> dict[str, Any]:
        fields = self._fields(handle)
        if name not in fields:
            raise MetadataServiceError(
                f"Column '{name}' does not exist on table '{handle.effective_table}'"
            )
        return fields[name]

    def _declaring_table(
        self,
        handle: TableHandle,
        name: str,
        info: dict[str, Any],
        fields: dict[str, dict[str, Any]],
    ) -> str:
        """
        Table a field is declared on.

        Delegated fields come back as related fields of the form
        "<parent_fk>.<name>"; those live on the parent's table.
        """
        related = info.get("related")
        if isinstance(related, (list, tuple)):
            related = ".".join(related)

        if isinstance(related, str):
            parts = related.split(".")
            if len(parts) == 2 and parts[1] == name:
                parent = fields.get(parts[0], {})
                if parent.get("type") == "many2one" and parent.get("relation"):
                    return parent["relation"]

        return handle.effective_table
