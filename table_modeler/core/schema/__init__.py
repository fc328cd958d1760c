"""
Table Model Module

Safe, read-only discovery of a table's columns and their semantic detail.
"""

from table_modeler.core.schema.models import (
    ColumnKind,
    ReferenceDetail,
    ChoiceEntry,
    ColumnDescriptor,
    TableModel,
)
from table_modeler.core.schema.errors import (
    FailureKind,
    TableModelError,
    InvalidInputError,
    UnresolvableTableError,
    MetadataFaultError,
    ScratchRecordClosedError,
    ProtectedColumnError,
)
from table_modeler.core.schema.scratch import ScratchRecord, ScratchProvisioner
from table_modeler.core.schema.classifier import ColumnClassifier
from table_modeler.core.schema.resolver import DetailResolver
from table_modeler.core.schema.builder import (
    BuildFailure,
    BuildResult,
    TableModelBuilder,
    build_table_model,
)

__all__ = [
    "ColumnKind",
    "ReferenceDetail",
    "ChoiceEntry",
    "ColumnDescriptor",
    "TableModel",
    "FailureKind",
    "TableModelError",
    "InvalidInputError",
    "UnresolvableTableError",
    "MetadataFaultError",
    "ScratchRecordClosedError",
    "ProtectedColumnError",
    "ScratchRecord",
    "ScratchProvisioner",
    "ColumnClassifier",
    "DetailResolver",
    "BuildFailure",
    "BuildResult",
    "TableModelBuilder",
    "build_table_model",
]
