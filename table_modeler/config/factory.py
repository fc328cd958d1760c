"""
Component Factory

Builds metadata services, classifiers and loggers from configuration.
"""

from table_modeler.config.loader import ModelerConfig
from table_modeler.core.logger import BuildLogger
from table_modeler.core.schema.classifier import ColumnClassifier
from table_modeler.platform import (
    CatalogMetadataService,
    MetadataService,
    PlatformClient,
    RemoteMetadataService,
)


def create_client(config: ModelerConfig) -> PlatformClient:
    """Create and authenticate a platform client."""
    if config.platform is None:
        raise ValueError("No platform connection configured")

    client = PlatformClient(
        url=config.platform.url,
        db=config.platform.database,
        username=config.platform.username,
        password=config.platform.password,
        timeout=config.platform.timeout,
        retry_attempts=config.platform.retry_attempts,
        retry_delay=config.platform.retry_delay,
    )
    client.authenticate()
    return client


def create_metadata_service(config: ModelerConfig) -> MetadataService:
    """Catalog-backed service if a catalog is configured, remote otherwise."""
    if config.catalog:
        return CatalogMetadataService.from_file(
            config.catalog,
            discriminator_column=config.builder.discriminator_column,
        )
    return RemoteMetadataService(create_client(config))


def create_classifier(config: ModelerConfig) -> ColumnClassifier:
    return ColumnClassifier(
        discriminator_column=config.builder.discriminator_column,
        reference_types=set(config.builder.reference_types),
        integer_types=set(config.builder.integer_types),
    )


def create_logger(config: ModelerConfig, console_output: bool | None = None) -> BuildLogger:
    return BuildLogger(
        output_dir=config.logging.output_dir,
        console_output=(
            config.logging.console_output if console_output is None else console_output
        ),
        level=config.logging.level,
        export_json=config.logging.export_json,
        export_csv=config.logging.export_csv,
    )
