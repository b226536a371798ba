"""
Product Read API

Key lookups plus the filtered scans used by the catalogue: by category,
by price range and by low stock.
"""

import logging
from decimal import Decimal
from typing import List, Optional, Union

from boto3.dynamodb.conditions import Attr

from ...config import DynamoDBConfig
from ...core import create_table_gateway
from ...models import EntitySchema, Product

logger = logging.getLogger(__name__)

Number = Union[int, float, Decimal]


def _to_decimal(value: Number) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value))


class ProductReadApi:
    """Read-only API for products."""

    def __init__(self, config: DynamoDBConfig, dynamodb=None):
        self.config = config
        self.schema = EntitySchema.from_model(Product)
        self.gateway = create_table_gateway(config, self.schema.name, dynamodb=dynamodb)

    def get_by_id(self, product_id: str, consistent_read: bool = False) -> Optional[Product]:
        logger.info(f"Finding product by id: {product_id}")
        item = self.gateway.get_item(self.schema.key_for(product_id), consistent_read=consistent_read)
        return Product.from_dynamodb_item(item) if item else None

    def list_all(self) -> List[Product]:
        logger.info("Finding all products")
        return self._scan()

    def find_by_category(self, category: str) -> List[Product]:
        logger.info(f"Finding products by category: {category}")
        return self._scan(Attr('category').eq(category))

    def find_by_price_range(self, min_price: Number, max_price: Number) -> List[Product]:
        """Products priced between ``min_price`` and ``max_price`` inclusive."""
        logger.info(f"Finding products by price range: {min_price} - {max_price}")
        if _to_decimal(min_price) > _to_decimal(max_price):
            return []
        return self._scan(Attr('price').between(_to_decimal(min_price), _to_decimal(max_price)))

    def find_low_stock(self, threshold: int) -> List[Product]:
        """Products whose stock is at or below ``threshold``."""
        logger.info(f"Finding low stock products below threshold: {threshold}")
        return self._scan(Attr('stock_quantity').lte(threshold))

    def _scan(self, filter_expression=None) -> List[Product]:
        items = self.gateway.scan_all(filter_expression=filter_expression)
        return [Product.from_dynamodb_item(item) for item in items]
