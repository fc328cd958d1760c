"""
Detail Resolver

Resolves the extra detail of a classified column (reference target or
ordered choice entries) and assembles its ColumnDescriptor.
"""

from table_modeler.core.schema.classifier import ColumnClassifier
from table_modeler.core.schema.errors import MetadataFaultError, TableModelError
from table_modeler.core.schema.models import (
    ChoiceEntry,
    ColumnDescriptor,
    ColumnKind,
    ReferenceDetail,
)
from table_modeler.core.schema.scratch import ScratchProvisioner, ScratchRecord
from table_modeler.platform.service import ColumnMetadata


class DetailResolver:
    """
    Builds one ColumnDescriptor per column of a scratch record.

    Reference targets are read from a second scratch record bound to the
    target table. Choice labels are read by assigning each declared value
    to the scratch column and rendering it. The discriminator column is
    never assigned; it gets a single entry naming the requested table.
    """

    def __init__(self, provisioner: ScratchProvisioner, classifier: ColumnClassifier):
        self.provisioner = provisioner
        self.classifier = classifier

    def describe(self, scratch: ScratchRecord, name: str) -> ColumnDescriptor:
        """
        Describe a single column.

        Raises:
            MetadataFaultError: If any metadata read or label render fails
        """
        try:
            metadata = scratch.metadata(name)
            kind = self.classifier.classify(name, metadata)
            reference, choices = self.resolve(scratch, name, metadata, kind)
        except TableModelError as e:
            if e.column is None:
                e.column = name
            raise
        except Exception as e:
            raise MetadataFaultError(
                f"Failed to describe column '{name}' of '{scratch.table_name}': {e}",
                table=scratch.table_name,
                column=name,
            ) from e

        return ColumnDescriptor(
            name=name,
            label=metadata.label,
            internal_type=metadata.internal_type,
            max_length=metadata.max_length,
            mandatory=metadata.mandatory,
            inherited=metadata.declaring_table != scratch.table_name,
            auto_generated=metadata.auto_generated,
            virtual=metadata.virtual,
            kind=kind,
            declaring_table=metadata.declaring_table,
            reference_detail=reference,
            choice_entries=choices,
        )

    def resolve(
        self,
        scratch: ScratchRecord,
        name: str,
        metadata: ColumnMetadata,
        kind: ColumnKind,
    ) -> tuple[ReferenceDetail | None, tuple[ChoiceEntry, ...]]:
        """Resolve (reference_detail, choice_entries) for a classified column."""
        if kind == ColumnKind.REFERENCE:
            return self._resolve_reference(scratch, name, metadata), ()

        if kind == ColumnKind.DISCRIMINATOR:
            return None, (self._discriminator_entry(scratch),)

        if kind == ColumnKind.ENUMERATED:
            return None, self._resolve_choices(scratch, name, metadata)

        return None, ()

    def _resolve_reference(
        self,
        scratch: ScratchRecord,
        name: str,
        metadata: ColumnMetadata,
    ) -> ReferenceDetail:
        target = metadata.reference_table
        if not target:
            raise MetadataFaultError(
                f"Reference column '{name}' of '{scratch.table_name}' has no target table",
                table=scratch.table_name,
                column=name,
            )

        target_scratch = self.provisioner.provision(target)
        if target_scratch is None:
            raise MetadataFaultError(
                f"Reference target '{target}' of column '{name}' does not resolve",
                table=scratch.table_name,
                column=name,
            )

        with target_scratch:
            return ReferenceDetail(
                label=target_scratch.class_label,
                target_table=target,
                display_field=target_scratch.display_field,
            )

    def _resolve_choices(
        self,
        scratch: ScratchRecord,
        name: str,
        metadata: ColumnMetadata,
    ) -> tuple[ChoiceEntry, ...]:
        entries: list[ChoiceEntry] = []
        for order, raw in enumerate(metadata.choices, start=1):
            value = self.classifier.coerce_choice(metadata, raw)
            label = scratch.render(name, value)
            entries.append(ChoiceEntry(label=label, value=value, order=order))
        return tuple(entries)

    def _discriminator_entry(self, scratch: ScratchRecord) -> ChoiceEntry:
        return ChoiceEntry(label=scratch.class_label, value=scratch.table_name, order=1)
