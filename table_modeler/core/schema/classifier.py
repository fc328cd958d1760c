"""
Column Classifier

Deterministic classification of table columns.
Decides whether a column is plain, a reference, an enumeration or the
table's discriminator.
"""

from typing import Any, Callable

from table_modeler.core.schema.models import ColumnKind
from table_modeler.core.schema.scratch import ScratchRecord
from table_modeler.platform.service import ColumnMetadata


# Class-indicator column of an inheritance hierarchy
DEFAULT_DISCRIMINATOR_COLUMN = "sys_class_name"

# Internal types that link to another table
REFERENCE_TYPES = frozenset({"reference"})

# Internal types whose choice values are numeric
INTEGER_TYPES = frozenset({"integer", "longint"})


DiscriminatorPredicate = Callable[[str, ColumnMetadata | None], bool]


class ColumnClassifier:
    """
    Classifies columns by their metadata.

    Classification precedence:

       1. REFERENCE      internal type is a reference type
       2. DISCRIMINATOR  the hierarchy's class-indicator column
       3. ENUMERATED     declares a non-empty set of choices
       4. PLAIN          everything else

    A reference column that also declares choices stays a reference.
    """

    def __init__(
        self,
        discriminator_column: str | None = DEFAULT_DISCRIMINATOR_COLUMN,
        is_discriminator: DiscriminatorPredicate | None = None,
        reference_types: frozenset[str] | set[str] = REFERENCE_TYPES,
        integer_types: frozenset[str] | set[str] = INTEGER_TYPES,
    ):
        """
        Initialize classifier.

        Args:
            discriminator_column: Name of the class-indicator column,
                or None to disable discriminator handling
            is_discriminator: Custom predicate overriding the name match
            reference_types: Internal types treated as references
            integer_types: Internal types whose choices are coerced to int
        """
        self.discriminator_column = discriminator_column
        self._predicate = is_discriminator
        self.reference_types = frozenset(reference_types)
        self.integer_types = frozenset(integer_types)

    def enumerate_columns(self, scratch: ScratchRecord) -> list[str]:
        """Column names of a scratch record, unique and sorted."""
        return sorted(set(scratch.column_names()))

    def is_discriminator(self, name: str, metadata: ColumnMetadata | None = None) -> bool:
        """Check if a column is the discriminator column."""
        if self._predicate is not None:
            return self._predicate(name, metadata)
        return self.discriminator_column is not None and name == self.discriminator_column

    def is_reference(self, metadata: ColumnMetadata) -> bool:
        return metadata.internal_type in self.reference_types

    def is_integer(self, metadata: ColumnMetadata) -> bool:
        return metadata.internal_type in self.integer_types

    def classify(self, name: str, metadata: ColumnMetadata) -> ColumnKind:
        """Classify a single column."""
        if self.is_reference(metadata):
            return ColumnKind.REFERENCE

        if self.is_discriminator(name, metadata):
            return ColumnKind.DISCRIMINATOR

        if metadata.choices:
            return ColumnKind.ENUMERATED

        return ColumnKind.PLAIN

    def coerce_choice(self, metadata: ColumnMetadata, raw: Any) -> Any:
        """
        Convert a declared choice value to the column's scalar type.

        Raises:
            ValueError: If an integer column declares a non-numeric choice
        """
        if self.is_integer(metadata):
            if isinstance(raw, bool):
                raise ValueError(f"Invalid integer choice value: {raw!r}")
            if isinstance(raw, int):
                return raw
            return int(str(raw).strip())
        return str(raw)
