from .base import AutoAttribute, DynamoDBMixin, GSIDefinition, TableMeta, is_entity
from .domain_models import Product
from .schema import (
    BILLING_PAY_PER_REQUEST,
    BILLING_PROVISIONED,
    EntitySchema,
    dynamodb_scalar_type,
)

__all__ = [
    # Declaration
    "AutoAttribute",
    "DynamoDBMixin",
    "GSIDefinition",
    "TableMeta",
    "is_entity",

    # Resolved schemas
    "EntitySchema",
    "dynamodb_scalar_type",
    "BILLING_PAY_PER_REQUEST",
    "BILLING_PROVISIONED",

    # Entities
    "Product",
]
