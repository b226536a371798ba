"""Entities used by registry, schema and bootstrap tests."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from dynamodb_table_manager.models import AutoAttribute, DynamoDBMixin, GSIDefinition, TableMeta


class Customer(DynamoDBMixin, BaseModel):
    customer_id: Optional[str] = None
    email: str
    version: Optional[int] = None

    class Meta(TableMeta):
        partition_key = "customer_id"
        auto_attributes = {
            "customer_id": AutoAttribute.GENERATED_ID,
            "version": AutoAttribute.VERSION,
        }


class OrderLine(DynamoDBMixin, BaseModel):
    order_id: str
    line_number: int
    sku: str
    placed_at: datetime
    quantity: int = 1

    class Meta(TableMeta):
        table_name = "order_lines"
        partition_key = "order_id"
        sort_key = "line_number"
        gsis = [
            GSIDefinition(
                name="SkuIndex",
                partition_key="sku",
                sort_key="placed_at"
            ),
            GSIDefinition(
                name="OrderSkuIndex",
                partition_key="order_id",
                sort_key="sku",
                projection=["quantity"]
            ),
        ]


class NotAnEntity(BaseModel):
    value: str
