"""
Platform metadata services and API client.
"""

from table_modeler.platform.service import (
    ColumnMetadata,
    MetadataService,
    MetadataServiceError,
    TableHandle,
)
from table_modeler.platform.catalog import CatalogMetadataService
from table_modeler.platform.client import (
    PlatformClient,
    PlatformConnectionError,
    PlatformAPIError,
    PlatformAuthenticationError,
)
from table_modeler.platform.remote import RemoteMetadataService

__all__ = [
    "ColumnMetadata",
    "MetadataService",
    "MetadataServiceError",
    "TableHandle",
    "CatalogMetadataService",
    "PlatformClient",
    "PlatformConnectionError",
    "PlatformAPIError",
    "PlatformAuthenticationError",
    "RemoteMetadataService",
]
