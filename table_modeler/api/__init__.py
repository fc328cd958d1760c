"""
REST API Module

FastAPI-based REST API for the table modeler.
"""

from table_modeler.api.main import app
from table_modeler.api.models import (
    ColumnResponse,
    TableModelResponse,
)

__all__ = [
    "app",
    "ColumnResponse",
    "TableModelResponse",
]
