"""
FastAPI Main Application

REST API for the Table Modeler.
"""

import os
from functools import lru_cache

from fastapi import Depends, FastAPI, HTTPException

from table_modeler import __version__
from table_modeler.api.models import ColumnResponse, TableModelResponse
from table_modeler.config import (
    CONFIG_ENV_VAR,
    ConfigLoader,
    ModelerConfig,
    create_classifier,
    create_metadata_service,
)
from table_modeler.core.schema import ColumnClassifier, TableModelBuilder
from table_modeler.platform import MetadataService



# ============================================================================
# App Configuration
# ============================================================================

app = FastAPI(
    title="Table Modeler API",
    description="Describe platform tables without elevated access",
    version=__version__,
)


@lru_cache(maxsize=1)
def get_config() -> ModelerConfig:
    """Configuration named by the TABLE_MODELER_CONFIG environment variable."""
    config_path = os.environ.get(CONFIG_ENV_VAR)
    if not config_path:
        raise HTTPException(status_code=503, detail=f"{CONFIG_ENV_VAR} is not set")
    try:
        return ConfigLoader().load(config_path)
    except (FileNotFoundError, ValueError) as e:
        raise HTTPException(status_code=503, detail=str(e)) from e


def get_metadata_service(config: ModelerConfig = Depends(get_config)) -> MetadataService:
    try:
        return create_metadata_service(config)
    except Exception as e:
        raise HTTPException(status_code=503, detail=f"Metadata service unavailable: {e}") from e


def get_classifier(config: ModelerConfig = Depends(get_config)) -> ColumnClassifier:
    return create_classifier(config)


# ============================================================================
# Health & Info
# ============================================================================

@app.get("/")
def root():
    """API root - health check."""
    return {"status": "ok", "service": "Table Modeler API"}


@app.get("/health")
def health():
    """Health check endpoint."""
    return {"status": "healthy"}


# ============================================================================
# Table Models
# ============================================================================

@app.get("/tables/{table}/model", response_model=TableModelResponse)
def get_table_model(
    table: str,
    service: MetadataService = Depends(get_metadata_service),
    classifier: ColumnClassifier = Depends(get_classifier),
):
    """
    Describe every column of a table.

    Failures are reported in the body with their kind
    (invalid_input, unresolvable_table, metadata_fault).
    """
    result = TableModelBuilder(service, classifier=classifier).build(table)

    if not result.ok:
        return TableModelResponse(
            success=False,
            table=table,
            failure_kind=result.failure.kind.value,
            error=result.failure.message,
        )

    model = result.model
    return TableModelResponse(
        success=True,
        table=model.table,
        label=model.label,
        columns=[ColumnResponse.model_validate(column) for column in model.to_list()],
    )
