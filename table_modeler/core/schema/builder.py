"""
Table Model Builder

Assembles a TableModel for a named table:
provision a scratch record, enumerate and classify its columns, resolve
each column's detail.
"""

import time
from dataclasses import dataclass
from datetime import datetime

from table_modeler.core.logger import AuditEntry, BuildLogger
from table_modeler.core.schema.classifier import ColumnClassifier
from table_modeler.core.schema.errors import (
    FailureKind,
    InvalidInputError,
    MetadataFaultError,
    TableModelError,
    UnresolvableTableError,
)
from table_modeler.core.schema.models import ColumnDescriptor, TableModel
from table_modeler.core.schema.resolver import DetailResolver
from table_modeler.core.schema.scratch import ScratchProvisioner, ScratchRecord
from table_modeler.platform.service import MetadataService


ERROR_TYPES = {
    FailureKind.INVALID_INPUT: InvalidInputError,
    FailureKind.UNRESOLVABLE_TABLE: UnresolvableTableError,
    FailureKind.METADATA_FAULT: MetadataFaultError,
}


@dataclass(frozen=True)
class BuildFailure:
    """Why a build produced no model."""

    kind: FailureKind
    table: str | None
    message: str
    column: str | None = None

    def to_error(self) -> TableModelError:
        return ERROR_TYPES[self.kind](self.message, table=self.table, column=self.column)


@dataclass(frozen=True)
class BuildResult:
    """Either a complete TableModel or a typed failure. Never both."""

    model: TableModel | None = None
    failure: BuildFailure | None = None

    @property
    def ok(self) -> bool:
        return self.model is not None

    @property
    def diagnostic(self) -> str | None:
        """Failure description, or None on success."""
        if self.failure is None:
            return None
        return f"{self.failure.kind.value}: {self.failure.message}"

    def unwrap(self) -> TableModel:
        """
        Get the model.

        Raises:
            TableModelError: The subclass matching the failure kind
        """
        if self.model is None:
            if self.failure is None:
                raise MetadataFaultError("Build produced neither a model nor a failure")
            raise self.failure.to_error()
        return self.model


class TableModelBuilder:
    """
    Builds table models from live schema metadata.

    Each build provisions its own scratch records and discards them before
    returning; builds share no state. Any fault is caught once here and
    reported as a BuildResult failure; partial models are never returned.

    Example:
        >>> builder = TableModelBuilder(service)
        >>> result = builder.build("incident")
        >>> if result.ok:
        ...     for column in result.model:
        ...         print(column.name, column.kind.value)
    """

    def __init__(
        self,
        service: MetadataService,
        classifier: ColumnClassifier | None = None,
        logger: BuildLogger | None = None,
    ):
        """
        Initialize builder.

        Args:
            service: Platform metadata service
            classifier: Optional ColumnClassifier instance
            logger: Optional BuildLogger for console output and audit
        """
        self.service = service
        self.classifier = classifier or ColumnClassifier()
        self.logger = logger
        self.provisioner = ScratchProvisioner(
            service,
            is_protected=self.classifier.is_discriminator,
        )
        self.resolver = DetailResolver(self.provisioner, self.classifier)

    def build(self, table_name: str | None) -> BuildResult:
        """
        Build the model of a table.

        Args:
            table_name: Name of the table to describe

        Returns:
            BuildResult holding the model, or the failure kind and message
        """
        name = table_name.strip() if isinstance(table_name, str) else ""

        if self.logger:
            self.logger.start_build(name or "<empty>")

        try:
            if not name:
                raise InvalidInputError("Table name is required", table=table_name)

            scratch = self.provisioner.provision(name)
            if scratch is None:
                raise UnresolvableTableError(f"Table '{name}' does not exist", table=name)

            with scratch:
                model = TableModel(
                    table=name,
                    label=scratch.class_label,
                    columns=self._describe_columns(scratch),
                )
            result = BuildResult(model=model)

        except TableModelError as e:
            result = BuildResult(failure=BuildFailure(
                kind=e.kind,
                table=e.table or name or None,
                message=str(e),
                column=e.column,
            ))
        except Exception as e:
            result = BuildResult(failure=BuildFailure(
                kind=FailureKind.METADATA_FAULT,
                table=name,
                message=f"Unexpected error while building '{name}': {e}",
            ))

        if self.logger:
            self._finish_audit(result)

        return result

    def _finish_audit(self, result: BuildResult) -> None:
        """Close the audit trail; an unwritable audit never fails the build."""
        try:
            if result.failure:
                self.logger.log_failure(result.failure.kind.value, result.failure.message)
            self.logger.end_build()
        except OSError as e:
            self.logger.log_error(f"Failed to write audit files: {e}")

    def _describe_columns(self, scratch: ScratchRecord) -> list[ColumnDescriptor]:
        descriptors: list[ColumnDescriptor] = []

        for name in self.classifier.enumerate_columns(scratch):
            started = time.perf_counter()
            try:
                descriptor = self.resolver.describe(scratch, name)
            except TableModelError as e:
                self._audit(scratch, name, "unknown", started, error=str(e))
                raise

            self._audit(scratch, name, descriptor.kind.value, started)
            descriptors.append(descriptor)

        return descriptors

    def _audit(
        self,
        scratch: ScratchRecord,
        column: str,
        kind: str,
        started: float,
        error: str | None = None,
    ) -> None:
        if not self.logger:
            return
        self.logger.log_column(AuditEntry(
            timestamp=datetime.now().isoformat(),
            table=scratch.table_name,
            column=column,
            kind=kind,
            success=error is None,
            error_message=error,
            duration_ms=(time.perf_counter() - started) * 1000,
        ))


def build_table_model(
    service: MetadataService,
    table_name: str | None,
    classifier: ColumnClassifier | None = None,
    logger: BuildLogger | None = None,
) -> BuildResult:
    """Build the model of a table in one call."""
    return TableModelBuilder(service, classifier=classifier, logger=logger).build(table_name)
