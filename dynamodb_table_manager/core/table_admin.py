"""
Table-level DynamoDB operations: create, describe, delete.
"""

import logging
from enum import Enum
from typing import Any, Dict, Optional

from botocore.exceptions import ClientError

from ..config import DynamoDBConfig
from ..exceptions import NotFoundError
from ..models.schema import BILLING_PAY_PER_REQUEST, EntitySchema
from .table_gateway import create_dynamodb_resource, map_dynamodb_error

logger = logging.getLogger(__name__)


class TableStatus(str, Enum):
    """Remote table states reported by DescribeTable."""
    CREATING = "CREATING"
    UPDATING = "UPDATING"
    DELETING = "DELETING"
    ACTIVE = "ACTIVE"
    INACCESSIBLE_ENCRYPTION_CREDENTIALS = "INACCESSIBLE_ENCRYPTION_CREDENTIALS"
    ARCHIVING = "ARCHIVING"
    ARCHIVED = "ARCHIVED"
    NOT_FOUND = "NOT_FOUND"

    @classmethod
    def parse(cls, value: Optional[str]) -> 'TableStatus':
        try:
            return cls(value)
        except ValueError:
            raise ValueError(f"Unknown table status: {value!r}") from None


class TableAdminClient:
    """
    Table administration on top of the low-level boto3 client.

    Every botocore ClientError is mapped to a domain exception; a missing
    table surfaces as ``NotFoundError``.
    """

    def __init__(
        self,
        config: Optional[DynamoDBConfig] = None,
        dynamodb=None,
        billing_mode: str = BILLING_PAY_PER_REQUEST
    ):
        """Initialize the admin client.

        Args:
            config: DynamoDB configuration (used when no resource is supplied)
            dynamodb: Optional pre-built boto3 resource to share
            billing_mode: Billing mode for tables created by this client
        """
        if config is None and dynamodb is None:
            raise ValueError("TableAdminClient needs a config or a DynamoDB resource")
        self.config = config
        self.billing_mode = billing_mode
        self._dynamodb = dynamodb

    @property
    def dynamodb(self):
        if self._dynamodb is None:
            self._dynamodb = create_dynamodb_resource(self.config)
        return self._dynamodb

    @property
    def client(self):
        return self.dynamodb.meta.client

    def create_table(self, table_name: str, schema: EntitySchema) -> Dict[str, Any]:
        """Issue CreateTable for ``schema`` under the physical name ``table_name``.

        Returns:
            The TableDescription from the response
        """
        params = schema.create_table_params(table_name, billing_mode=self.billing_mode)
        try:
            response = self.client.create_table(**params)
        except ClientError as e:
            raise map_dynamodb_error(e, "CreateTable", table_name) from e
        logger.debug(f"CreateTable issued for {table_name}")
        return response.get('TableDescription', {})

    def describe_table(self, table_name: str) -> Dict[str, Any]:
        """Describe a table.

        Raises:
            NotFoundError: If the table does not exist
        """
        try:
            response = self.client.describe_table(TableName=table_name)
        except ClientError as e:
            raise map_dynamodb_error(e, "DescribeTable", table_name) from e
        return response['Table']

    def get_table_status(self, table_name: str) -> TableStatus:
        """Current status of a table; NOT_FOUND when it does not exist."""
        try:
            description = self.describe_table(table_name)
        except NotFoundError:
            return TableStatus.NOT_FOUND
        return TableStatus.parse(description.get('TableStatus'))

    def delete_table(self, table_name: str) -> None:
        try:
            self.client.delete_table(TableName=table_name)
        except ClientError as e:
            raise map_dynamodb_error(e, "DeleteTable", table_name) from e
        logger.debug(f"DeleteTable issued for {table_name}")
