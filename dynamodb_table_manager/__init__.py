"""
DynamoDB Table Manager

Provisions the DynamoDB tables declared by pydantic entity models, waits
for them to become active before the application serves traffic, and
optionally deletes them on shutdown. Also ships thin read/write APIs for
the stored entities.
"""

from .bootstrap import bootstrap, build_manager
from .config import AppConfig, DynamoDBConfig, EntityScanConfig
from .core import (
    TableAdminClient,
    TableGateway,
    TableStatus,
    create_dynamodb_resource,
    create_table_gateway,
)
from .exceptions import (
    ConflictError,
    ConnectionError,
    DynamoDBTableError,
    ItemNotFoundError,
    NotFoundError,
    RetryableError,
    TableActivationCancelledError,
    TableActivationTimeoutError,
    TableDeletionError,
    TableInitializationError,
    TableLifecycleError,
    TableQueryError,
    ValidationError,
)
from .handlers import ProductReadApi, ProductWriteApi
from .lifecycle import ActivationPoller, SchemaRegistry, TableLifecycleManager, table_exists
from .logging_setup import configure_logging
from .models import AutoAttribute, DynamoDBMixin, EntitySchema, GSIDefinition, Product, TableMeta

__version__ = "1.0.0"
__all__ = [
    # Configuration
    "AppConfig",
    "DynamoDBConfig",
    "EntityScanConfig",
    "configure_logging",

    # Exceptions
    "ConflictError",
    "ConnectionError",
    "DynamoDBTableError",
    "ItemNotFoundError",
    "NotFoundError",
    "RetryableError",
    "ValidationError",
    "TableActivationCancelledError",
    "TableActivationTimeoutError",
    "TableDeletionError",
    "TableInitializationError",
    "TableLifecycleError",
    "TableQueryError",

    # Entity declaration
    "AutoAttribute",
    "DynamoDBMixin",
    "EntitySchema",
    "GSIDefinition",
    "TableMeta",
    "Product",

    # Storage access
    "TableAdminClient",
    "TableGateway",
    "TableStatus",
    "create_dynamodb_resource",
    "create_table_gateway",

    # Lifecycle
    "ActivationPoller",
    "SchemaRegistry",
    "TableLifecycleManager",
    "table_exists",
    "bootstrap",
    "build_manager",

    # Entity APIs
    "ProductReadApi",
    "ProductWriteApi",
]
