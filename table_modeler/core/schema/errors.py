"""
Table Model Errors

Failure taxonomy for table model builds.
"""

from enum import Enum


class FailureKind(Enum):
    """Why a build produced no model."""

    INVALID_INPUT = "invalid_input"
    UNRESOLVABLE_TABLE = "unresolvable_table"
    METADATA_FAULT = "metadata_fault"


class TableModelError(Exception):
    """Base class for table model build errors."""

    kind: FailureKind = FailureKind.METADATA_FAULT

    def __init__(self, message: str, table: str | None = None, column: str | None = None):
        super().__init__(message)
        self.table = table
        self.column = column


class InvalidInputError(TableModelError):
    """Raised when the table name is missing or empty."""

    kind = FailureKind.INVALID_INPUT


class UnresolvableTableError(TableModelError):
    """Raised when a table name does not bind to a schema."""

    kind = FailureKind.UNRESOLVABLE_TABLE


class MetadataFaultError(TableModelError):
    """Raised when reading metadata or rendering a label fails."""

    kind = FailureKind.METADATA_FAULT


class ScratchRecordClosedError(TableModelError):
    """Raised when a discarded scratch record is used again."""
    pass


class ProtectedColumnError(TableModelError):
    """Raised when assigning a column that must never be probed."""
    pass
