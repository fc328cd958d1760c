"""
Core table model building.
"""

from table_modeler.core.logger import BuildLogger, BuildSummary, AuditEntry
from table_modeler.core.schema import (
    ColumnKind,
    ColumnDescriptor,
    TableModel,
    FailureKind,
    BuildResult,
    TableModelBuilder,
    build_table_model,
)


__all__ = [
    "BuildLogger",
    "BuildSummary",
    "AuditEntry",
    "ColumnKind",
    "ColumnDescriptor",
    "TableModel",
    "FailureKind",
    "BuildResult",
    "TableModelBuilder",
    "build_table_model",
]
