"""
Storage access for DynamoDB.

- TableGateway: item-level operations on one table
- TableAdminClient: create/describe/delete of tables
"""

from .table_admin import TableAdminClient, TableStatus
from .table_gateway import (
    TableGateway,
    create_dynamodb_resource,
    create_table_gateway,
    map_dynamodb_error,
)

__all__ = [
    "TableAdminClient",
    "TableGateway",
    "TableStatus",
    "create_dynamodb_resource",
    "create_table_gateway",
    "map_dynamodb_error",
]
