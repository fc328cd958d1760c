"""
API Request/Response Models

Pydantic models for FastAPI endpoints.
"""

from typing import Any

from pydantic import BaseModel


# ============================================================================
# Table Model
# ============================================================================

class ReferenceDetailResponse(BaseModel):
    """Target of a reference column."""
    label: str
    target_table: str
    display_field: str


class ChoiceEntryResponse(BaseModel):
    """One valid value of an enumerated column."""
    label: str
    value: Any
    order: int


class ColumnResponse(BaseModel):
    """Single column description."""
    name: str
    label: str
    internal_type: str
    max_length: int = 0
    mandatory: bool = False
    inherited: bool = False
    auto_generated: bool = False
    virtual: bool = False
    kind: str = "plain"
    declaring_table: str = ""
    reference_detail: ReferenceDetailResponse | None = None
    choice_entries: list[ChoiceEntryResponse] = []


class TableModelResponse(BaseModel):
    """Response for /tables/{table}/model endpoint."""
    success: bool
    table: str | None = None
    label: str | None = None
    columns: list[ColumnResponse] = []
    failure_kind: str | None = None
    error: str | None = None
