"""
Product Write API

Every write after the first is guarded by the optimistic-lock version:
``update`` only succeeds when the stored version still equals the version
the caller loaded, and bumps it by one. A stale write raises ConflictError.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from boto3.dynamodb.conditions import Attr

from ...config import DynamoDBConfig
from ...core import create_table_gateway
from ...exceptions import ConflictError, ValidationError
from ...models import EntitySchema, Product

logger = logging.getLogger(__name__)


class ProductWriteApi:
    """Write-only API for products."""

    def __init__(self, config: DynamoDBConfig, dynamodb=None):
        self.config = config
        self.schema = EntitySchema.from_model(Product)
        self.gateway = create_table_gateway(config, self.schema.name, dynamodb=dynamodb)

    def save(self, product: Product) -> Product:
        """
        Insert a new product.

        Fills the generated id, timestamps, version (1) and retry counter (0).

        Raises:
            ConflictError: A product with the same id already exists
        """
        product = product.model_copy(deep=True)
        product.apply_auto_attributes()
        logger.info(f"Saving product: {product.id} ({product.name})")
        self.gateway.put_item(
            product.to_dynamodb_item(),
            condition_expression=Attr('id').not_exists(),
            resource_id=product.id
        )
        return product

    def update(self, product: Product) -> Product:
        """
        Replace a product, checking its version.

        Args:
            product: Product as previously loaded, carrying its current version

        Returns:
            The stored product with the incremented version

        Raises:
            ValidationError: The product has no id or version
            ConflictError: The stored version differs (concurrent update)
        """
        if not product.id or product.version is None:
            raise ValidationError("Product must have an id and a version to be updated; load it first")

        expected_version = product.version
        updated = product.model_copy(deep=True)
        updated.version = expected_version + 1
        updated.updated_at = datetime.now(timezone.utc)

        logger.info(f"Updating product: {updated.id} (version {expected_version} -> {updated.version})")
        self.gateway.put_item(
            updated.to_dynamodb_item(),
            condition_expression=Attr('version').eq(expected_version),
            resource_id=updated.id
        )
        return updated

    def delete_by_id(self, product_id: str) -> bool:
        """Delete a product. Returns False when it did not exist."""
        logger.info(f"Deleting product by id: {product_id}")
        deleted = self.gateway.delete_item(self.schema.key_for(product_id), return_values='ALL_OLD')
        return bool(deleted)

    def update_stock(self, product_id: str, quantity: int) -> Optional[Product]:
        """Set the stock quantity. Returns None when the product does not exist."""
        if quantity < 0:
            raise ValidationError(f"Stock quantity cannot be negative: {quantity}")
        logger.info(f"Updating stock for product id: {product_id} with quantity: {quantity}")

        item = self.gateway.get_item(self.schema.key_for(product_id), consistent_read=True)
        if not item:
            return None
        product = Product.from_dynamodb_item(item)
        product.stock_quantity = quantity
        return self.update(product)

    def increment_retry_count(self, product_id: str) -> Optional[Product]:
        """Atomically add one to the retry counter. Returns None when the product does not exist."""
        logger.info(f"Incrementing retry count for product id: {product_id}")
        try:
            attributes = self.gateway.update_item(
                key=self.schema.key_for(product_id),
                update_expression=(
                    "SET #retry = if_not_exists(#retry, :zero) + :one, "
                    "#version = if_not_exists(#version, :zero) + :one, "
                    "#updated = :now"
                ),
                expression_attribute_names={
                    '#retry': 'retry_count',
                    '#version': 'version',
                    '#updated': 'updated_at',
                },
                expression_attribute_values={
                    ':zero': 0,
                    ':one': 1,
                    ':now': datetime.now(timezone.utc).isoformat(),
                },
                condition_expression=Attr('id').exists(),
                return_values='ALL_NEW'
            )
        except ConflictError:
            logger.info(f"Product {product_id} not found, retry count unchanged")
            return None
        return Product.from_dynamodb_item(attributes)
