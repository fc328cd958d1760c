"""
Scratch Records

Non-persisted template instances of a table, used only to read metadata
and render values as display labels. A scratch record has no save
operation; it is constructed, probed and discarded.
"""

from typing import Any, Callable

from table_modeler.core.schema.errors import (
    ProtectedColumnError,
    ScratchRecordClosedError,
)
from table_modeler.platform.service import ColumnMetadata, MetadataService, TableHandle


class ScratchRecord:
    """
    Throwaway, initialized instance of a table.

    Use as a context manager so the template is discarded after probing:

        >>> with provisioner.provision("incident") as scratch:
        ...     scratch.render("priority", 1)
        '1 - Critical'
    """

    def __init__(
        self,
        service: MetadataService,
        handle: TableHandle,
        is_protected: Callable[[str, ColumnMetadata], bool] | None = None,
    ):
        self._service = service
        self._handle: TableHandle | None = handle
        self._is_protected = is_protected
        self.table_name = handle.table

    def __enter__(self) -> "ScratchRecord":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.discard()

    def __repr__(self) -> str:
        state = "closed" if self.closed else "open"
        return f"ScratchRecord({self.table_name}, {state})"

    @property
    def closed(self) -> bool:
        return self._handle is None

    @property
    def handle(self) -> TableHandle:
        if self._handle is None:
            raise ScratchRecordClosedError(
                f"Scratch record for '{self.table_name}' was discarded",
                table=self.table_name,
            )
        return self._handle

    @property
    def class_label(self) -> str:
        """Display label of the record's table."""
        return self._service.get_class_display_label(self.handle)

    @property
    def display_field(self) -> str:
        return self._service.get_display_field_name(self.handle)

    def column_names(self) -> list[str]:
        """All column names the record exposes, own and inherited."""
        return self._service.list_columns(self.handle)

    def metadata(self, name: str) -> ColumnMetadata:
        return self._service.get_column_metadata(self.handle, name)

    def render(self, name: str, value: Any) -> str:
        """
        Assign a value to a column and return its display label.

        Raises:
            ProtectedColumnError: If the column must never be assigned
        """
        if self._is_protected is not None and self._is_protected(name, self.metadata(name)):
            raise ProtectedColumnError(
                f"Column '{name}' on '{self.table_name}' cannot be probed by assignment",
                table=self.table_name,
                column=name,
            )
        handle = self.handle
        self._service.set_field_value(handle, name, value)
        return self._service.get_display_label(handle, name)

    def discard(self) -> None:
        """Drop the template values. The record cannot be used afterwards."""
        if self._handle is not None:
            self._handle.values.clear()
            self._handle = None


class ScratchProvisioner:
    """
    Provides scratch records bound to named tables.

    Provisioning validates the table and initializes its template values
    without ever writing a row.
    """

    def __init__(
        self,
        service: MetadataService,
        is_protected: Callable[[str, ColumnMetadata], bool] | None = None,
    ):
        """
        Initialize provisioner.

        Args:
            service: Platform metadata service
            is_protected: Predicate for columns scratch records refuse to assign
        """
        self.service = service
        self.is_protected = is_protected

    def provision(self, table_name: str | None) -> ScratchRecord | None:
        """
        Get an initialized scratch record for a table.

        Returns:
            ScratchRecord, or None if the name is empty or does not resolve
        """
        if not table_name or not table_name.strip():
            return None

        handle = self.service.resolve_table(table_name.strip())
        if handle is None:
            return None

        self.service.initialize_template(handle)
        return ScratchRecord(self.service, handle, is_protected=self.is_protected)
