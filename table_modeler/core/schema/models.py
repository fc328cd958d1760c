"""
Table Model Data Structures

Typed dataclasses describing the columns of a platform table.
"""

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator


class ColumnKind(Enum):
    """How a column was classified during enumeration."""

    PLAIN = "plain"                  # Scalar column, no extra detail
    REFERENCE = "reference"          # Points at a row in another table
    ENUMERATED = "enumerated"        # Closed set of choice values
    DISCRIMINATOR = "discriminator"  # Class-indicator column of the hierarchy


@dataclass(frozen=True)
class ReferenceDetail:
    """Target of a reference column."""

    label: str              # Class display label of the target table
    target_table: str       # Target table name
    display_field: str      # Field used to show a target record

    def to_dict(self) -> dict[str, Any]:
        return {
            "label": self.label,
            "target_table": self.target_table,
            "display_field": self.display_field,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ReferenceDetail":
        return cls(
            label=data["label"],
            target_table=data["target_table"],
            display_field=data["display_field"],
        )


@dataclass(frozen=True)
class ChoiceEntry:
    """One valid value of an enumerated column."""

    label: str
    value: Any
    order: int              # 1-based declaration order

    def to_dict(self) -> dict[str, Any]:
        return {"label": self.label, "value": self.value, "order": self.order}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ChoiceEntry":
        return cls(label=data["label"], value=data["value"], order=data["order"])


@dataclass(frozen=True)
class ColumnDescriptor:
    """
    Complete description of a single table column.

    A descriptor carries either reference detail or choice entries,
    never both. Plain columns carry neither.
    """

    # Identity
    name: str                                     # Column name
    label: str                                    # Human-readable label

    # Type information
    internal_type: str                            # Platform type tag
    max_length: int = 0                           # Declared storage length

    # Constraints
    mandatory: bool = False
    inherited: bool = False                       # Declared on an ancestor table
    auto_generated: bool = False                  # Supplied by the platform
    virtual: bool = False                         # Computed, not stored

    # Classification
    kind: ColumnKind = ColumnKind.PLAIN
    declaring_table: str = ""

    # Resolved detail
    reference_detail: ReferenceDetail | None = None
    choice_entries: tuple[ChoiceEntry, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if self.reference_detail is not None and self.choice_entries:
            raise ValueError(
                f"Column '{self.name}' cannot carry both reference detail and choice entries"
            )

    def __repr__(self) -> str:
        return (
            f"ColumnDescriptor({self.name}, "
            f"type={self.internal_type}, kind={self.kind.value})"
        )

    @property
    def is_reference(self) -> bool:
        return self.reference_detail is not None

    @property
    def has_choices(self) -> bool:
        return bool(self.choice_entries)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "name": self.name,
            "label": self.label,
            "internal_type": self.internal_type,
            "max_length": self.max_length,
            "mandatory": self.mandatory,
            "inherited": self.inherited,
            "auto_generated": self.auto_generated,
            "virtual": self.virtual,
            "kind": self.kind.value,
            "declaring_table": self.declaring_table,
            "reference_detail": (
                self.reference_detail.to_dict() if self.reference_detail else None
            ),
            "choice_entries": [entry.to_dict() for entry in self.choice_entries],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ColumnDescriptor":
        """Create from dictionary."""
        reference = data.get("reference_detail")
        return cls(
            name=data["name"],
            label=data["label"],
            internal_type=data["internal_type"],
            max_length=data.get("max_length", 0),
            mandatory=data.get("mandatory", False),
            inherited=data.get("inherited", False),
            auto_generated=data.get("auto_generated", False),
            virtual=data.get("virtual", False),
            kind=ColumnKind(data.get("kind", "plain")),
            declaring_table=data.get("declaring_table", ""),
            reference_detail=ReferenceDetail.from_dict(reference) if reference else None,
            choice_entries=tuple(
                ChoiceEntry.from_dict(entry) for entry in data.get("choice_entries", [])
            ),
        )


@dataclass
class TableModel:
    """
    Read-only snapshot of a table's columns.

    Columns are kept sorted by name; duplicate names are rejected.
    """

    table: str                                    # Requested table name
    label: str                                    # Class display label
    columns: list[ColumnDescriptor] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.columns = sorted(self.columns, key=lambda c: c.name)
        seen: set[str] = set()
        for column in self.columns:
            if column.name in seen:
                raise ValueError(f"Duplicate column '{column.name}' in table '{self.table}'")
            seen.add(column.name)

    def __iter__(self) -> Iterator[ColumnDescriptor]:
        return iter(self.columns)

    def __len__(self) -> int:
        return len(self.columns)

    @property
    def names(self) -> list[str]:
        return [c.name for c in self.columns]

    @property
    def reference_columns(self) -> list[ColumnDescriptor]:
        """Get all reference columns."""
        return [c for c in self.columns if c.is_reference]

    @property
    def choice_columns(self) -> list[ColumnDescriptor]:
        """Get all columns with choice entries (discriminator included)."""
        return [c for c in self.columns if c.has_choices]

    def get_column(self, name: str) -> ColumnDescriptor | None:
        """Get column by name."""
        for column in self.columns:
            if column.name == name:
                return column
        return None

    def to_list(self) -> list[dict[str, Any]]:
        """Plain ordered list of column records."""
        return [c.to_dict() for c in self.columns]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "table": self.table,
            "label": self.label,
            "columns": self.to_list(),
        }

    def to_json(self, indent: int | None = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TableModel":
        """Create from dictionary."""
        return cls(
            table=data["table"],
            label=data.get("label", data["table"]),
            columns=[ColumnDescriptor.from_dict(c) for c in data.get("columns", [])],
        )
