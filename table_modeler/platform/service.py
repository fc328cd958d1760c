"""
Metadata Service Interface

The schema/metadata capability a platform offers to unprivileged callers.
Implementations only read: there is no create, write or delete here.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any


class MetadataServiceError(Exception):
    """Raised when the platform cannot answer a metadata request."""
    pass


@dataclass
class TableHandle:
    """
    In-memory binding to a table's schema.

    Holds template values only; nothing in here is ever persisted.
    """

    table: str                                    # Table the handle was resolved for
    effective_table: str = ""                     # Table the handle currently describes
    values: dict[str, Any] = field(default_factory=dict)
    initialized: bool = False
    schema: dict[str, Any] = field(default_factory=dict, repr=False)  # Implementation cache

    def __post_init__(self) -> None:
        if not self.effective_table:
            self.effective_table = self.table


@dataclass(frozen=True)
class ColumnMetadata:
    """Raw metadata of a single column as reported by the platform."""

    label: str
    internal_type: str
    max_length: int = 0
    mandatory: bool = False
    auto_generated: bool = False
    virtual: bool = False
    declaring_table: str = ""
    reference_table: str | None = None
    choices: tuple[Any, ...] = ()                 # Raw values, declaration order


class MetadataService(ABC):
    """
    Read-only access to table schemas.

    Every operation works on a TableHandle obtained from resolve_table.
    """

    @abstractmethod
    def resolve_table(self, name: str) -> TableHandle | None:
        """Bind to a table's schema, or None if the table is not valid."""

    @abstractmethod
    def initialize_template(self, handle: TableHandle) -> None:
        """Populate default values on the handle without persisting."""

    @abstractmethod
    def list_columns(self, handle: TableHandle) -> list[str]:
        """All column names, own and inherited."""

    @abstractmethod
    def get_column_metadata(self, handle: TableHandle, name: str) -> ColumnMetadata:
        """Metadata for a single column."""

    @abstractmethod
    def set_field_value(self, handle: TableHandle, name: str, value: Any) -> None:
        """Assign a value on the in-memory template."""

    @abstractmethod
    def get_display_label(self, handle: TableHandle, name: str) -> str:
        """Render the current value of a column as its display string."""

    @abstractmethod
    def get_class_display_label(self, handle: TableHandle) -> str:
        """Human label of the handle's effective table."""

    @abstractmethod
    def get_display_field_name(self, handle: TableHandle) -> str:
        """Field conventionally used to show a record of this table."""
