"""
Catalog Metadata Service

MetadataService backed by a declarative table catalog (dict or YAML file).
Used for offline inspection and for tests.

Catalog format:

    tables:
      task:
        label: Task
        display_field: number
        columns:
          number: {label: Number, type: string, max_length: 40}
          priority:
            label: Priority
            type: integer
            default: 4
            choices:
              - {value: 1, label: "1 - Critical"}
      incident:
        label: Incident
        extends: task
        columns: {...}
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from table_modeler.platform.service import (
    ColumnMetadata,
    MetadataService,
    MetadataServiceError,
    TableHandle,
)


# Fallback display fields, in order of preference
DISPLAY_FIELD_CANDIDATES = ("name", "number", "sys_id")


@dataclass(frozen=True)
class CatalogColumn:
    """A column declared on a catalog table."""

    name: str
    label: str
    type: str = "string"
    max_length: int = 0
    mandatory: bool = False
    auto_generated: bool = False
    virtual: bool = False
    default: Any = None
    reference: str | None = None
    choices: tuple[tuple[Any, str], ...] = ()    # ((value, label), ...)

    @classmethod
    def from_dict(cls, name: str, data: dict[str, Any]) -> "CatalogColumn":
        choices = []
        for choice in data.get("choices") or []:
            if isinstance(choice, dict):
                choices.append((choice["value"], str(choice.get("label", choice["value"]))))
            else:
                value, label = choice
                choices.append((value, str(label)))

        return cls(
            name=name,
            label=data.get("label", name),
            type=data.get("type", "string"),
            max_length=int(data.get("max_length", 0) or 0),
            mandatory=bool(data.get("mandatory", False)),
            auto_generated=bool(data.get("auto_generated", False)),
            virtual=bool(data.get("virtual", False)),
            default=data.get("default"),
            reference=data.get("reference"),
            choices=tuple(choices),
        )


@dataclass
class CatalogTable:
    """A table declared in the catalog."""

    name: str
    label: str
    extends: str | None = None
    display_field: str | None = None
    columns: dict[str, CatalogColumn] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, name: str, data: dict[str, Any]) -> "CatalogTable":
        columns = {
            col_name: CatalogColumn.from_dict(col_name, col_data or {})
            for col_name, col_data in (data.get("columns") or {}).items()
        }
        return cls(
            name=name,
            label=data.get("label", name),
            extends=data.get("extends"),
            display_field=data.get("display_field"),
            columns=columns,
        )


class CatalogMetadataService(MetadataService):
    """
    In-memory platform with table inheritance.

    Columns of ancestor tables are visible on their descendants; a table
    re-declaring a column shadows the ancestor's definition. Assigning the
    discriminator column on a handle re-targets it to the named table, as
    the real platform does.

    Example:
        >>> service = CatalogMetadataService.from_file("catalog.yaml")
        >>> handle = service.resolve_table("incident")
        >>> service.initialize_template(handle)
        >>> service.list_columns(handle)
    """

    def __init__(
        self,
        tables: dict[str, CatalogTable],
        discriminator_column: str | None = "sys_class_name",
    ):
        self.tables = tables
        self.discriminator_column = discriminator_column

    @classmethod
    def from_dict(
        cls,
        data: dict[str, Any],
        discriminator_column: str | None = "sys_class_name",
    ) -> "CatalogMetadataService":
        """Create from a catalog dictionary."""
        tables_data = data.get("tables", data)
        if not isinstance(tables_data, dict):
            raise ValueError("Catalog must map table names to table definitions")

        tables = {
            name: CatalogTable.from_dict(name, table_data or {})
            for name, table_data in tables_data.items()
        }
        return cls(tables, discriminator_column=discriminator_column)

    @classmethod
    def from_file(
        cls,
        path: str | Path,
        discriminator_column: str | None = "sys_class_name",
    ) -> "CatalogMetadataService":
        """Load a catalog from a YAML (or JSON) file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Catalog file not found: {path}")

        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except yaml.YAMLError as e:
            raise ValueError(f"Failed to parse catalog: {e}") from e

        if not isinstance(data, dict):
            raise ValueError("Catalog must be a dictionary")

        return cls.from_dict(data, discriminator_column=discriminator_column)

    # -------------------------------------------------------------------------
    # MetadataService
    # -------------------------------------------------------------------------

    def resolve_table(self, name: str) -> TableHandle | None:
        if not name or name not in self.tables:
            return None
        return TableHandle(table=name)

    def initialize_template(self, handle: TableHandle) -> None:
        columns = self._columns(handle.effective_table)
        handle.values = {
            name: column.default
            for name, (column, _) in columns.items()
            if column.default is not None
        }
        if self.discriminator_column and self.discriminator_column in columns:
            handle.values[self.discriminator_column] = handle.effective_table
        handle.initialized = True

    def list_columns(self, handle: TableHandle) -> list[str]:
        return list(self._columns(handle.effective_table))

    def get_column_metadata(self, handle: TableHandle, name: str) -> ColumnMetadata:
        column, declaring_table = self._column(handle, name)
        return ColumnMetadata(
            label=column.label,
            internal_type=column.type,
            max_length=column.max_length,
            mandatory=column.mandatory,
            auto_generated=column.auto_generated,
            virtual=column.virtual,
            declaring_table=declaring_table,
            reference_table=column.reference,
            choices=tuple(value for value, _ in column.choices),
        )

    def set_field_value(self, handle: TableHandle, name: str, value: Any) -> None:
        self._column(handle, name)
        handle.values[name] = value

        # Changing the class indicator changes what the handle describes
        if name == self.discriminator_column and str(value) in self.tables:
            handle.effective_table = str(value)

    def get_display_label(self, handle: TableHandle, name: str) -> str:
        column, _ = self._column(handle, name)
        value = handle.values.get(name)
        if value is None:
            return ""

        for choice_value, choice_label in column.choices:
            if str(choice_value) == str(value):
                return choice_label

        if name == self.discriminator_column and str(value) in self.tables:
            return self.tables[str(value)].label

        if isinstance(value, bool):
            return "true" if value else "false"

        return str(value)

    def get_class_display_label(self, handle: TableHandle) -> str:
        return self._table(handle.effective_table).label

    def get_display_field_name(self, handle: TableHandle) -> str:
        for table in self._lineage(handle.effective_table):
            if table.display_field:
                return table.display_field

        columns = self._columns(handle.effective_table)
        for candidate in DISPLAY_FIELD_CANDIDATES:
            if candidate in columns:
                return candidate
        return DISPLAY_FIELD_CANDIDATES[-1]

    # -------------------------------------------------------------------------
    # Internal Methods
    # -------------------------------------------------------------------------

    def _table(self, name: str) -> CatalogTable:
        try:
            return self.tables[name]
        except KeyError:
            raise MetadataServiceError(f"Unknown table '{name}'") from None

    def _lineage(self, name: str) -> list[CatalogTable]:
        """Table followed by its ancestors, nearest first."""
        lineage: list[CatalogTable] = []
        seen: set[str] = set()
        current: str | None = name

        while current:
            if current in seen:
                raise MetadataServiceError(f"Inheritance cycle at table '{current}'")
            seen.add(current)
            table = self._table(current)
            lineage.append(table)
            current = table.extends

        return lineage

    def _columns(self, name: str) -> dict[str, tuple[CatalogColumn, str]]:
        """Visible columns mapped to (definition, declaring table)."""
        columns: dict[str, tuple[CatalogColumn, str]] = {}
        for table in reversed(self._lineage(name)):
            for col_name, column in table.columns.items():
                columns[col_name] = (column, table.name)
        return columns

    def _column(self, handle: TableHandle, name: str) -> tuple[CatalogColumn, str]:
        columns = self._columns(handle.effective_table)
        if name not in columns:
            raise MetadataServiceError(
                f"Column '{name}' does not exist on table '{handle.effective_table}'"
            )
        return columns[name]
