"""
Configuration management for the table modeler.
"""

from table_modeler.config.loader import (
    CONFIG_ENV_VAR,
    ConfigLoader,
    ModelerConfig,
    PlatformConfig,
    BuilderConfig,
    LoggingConfig,
)
from table_modeler.config.factory import (
    create_client,
    create_classifier,
    create_logger,
    create_metadata_service,
)

__all__ = [
    "CONFIG_ENV_VAR",
    "ConfigLoader",
    "ModelerConfig",
    "PlatformConfig",
    "BuilderConfig",
    "LoggingConfig",
    "create_client",
    "create_classifier",
    "create_logger",
    "create_metadata_service",
]
