"""
Domain entities backed by managed tables.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .base import AutoAttribute, DynamoDBMixin, TableMeta


class Product(DynamoDBMixin, BaseModel):
    """Catalogue product with stock tracking and optimistic locking."""

    id: Optional[str] = Field(None, description="Generated product identifier")
    name: str = Field(..., description="Product name")
    description: Optional[str] = Field(None, description="Free-text description")
    price: Decimal = Field(..., ge=0, description="Unit price")
    category: str = Field(..., description="Catalogue category")
    stock_quantity: int = Field(default=0, ge=0, description="Units in stock")

    # Auto-managed
    version: Optional[int] = Field(None, description="Optimistic-lock version")
    retry_count: Optional[int] = Field(None, description="Monotonic retry counter")
    created_at: Optional[datetime] = Field(None, description="Creation timestamp")
    updated_at: Optional[datetime] = Field(None, description="Last update timestamp")

    model_config = ConfigDict(
        validate_assignment=True
    )

    class Meta(TableMeta):
        table_name = "product"
        partition_key = "id"
        auto_attributes = {
            "id": AutoAttribute.GENERATED_ID,
            "version": AutoAttribute.VERSION,
            "retry_count": AutoAttribute.COUNTER,
            "created_at": AutoAttribute.CREATED_TIMESTAMP,
            "updated_at": AutoAttribute.UPDATED_TIMESTAMP,
        }
