"""
Thin DynamoDB Table Gateway

Lightweight wrapper around the boto3 Table resource used by the product
read/write APIs. It exposes item-level operations only; table creation and
deletion belong to ``TableAdminClient``.

The gateway focuses on:
- Creating boto3 resource and Table handles
- Mapping botocore ClientErrors to domain exceptions
- Paginated scans with optional filter expressions
"""

import logging
from typing import Any, Dict, List, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import ClientError

from ..config import DynamoDBConfig
from ..exceptions import (
    ConnectionError,
    ConflictError,
    ItemNotFoundError,
    NotFoundError,
    ValidationError,
    RetryableError
)

logger = logging.getLogger(__name__)


def map_dynamodb_error(
    error: ClientError,
    operation: str,
    table_name: str,
    resource_id: Optional[str] = None
) -> Exception:
    """Map DynamoDB ClientError to domain-specific exceptions.

    Args:
        error: The boto3 ClientError
        operation: The operation that failed (e.g., "GetItem", "DescribeTable")
        table_name: The DynamoDB table name
        resource_id: Optional resource identifier for context

    Returns:
        Appropriate domain exception
    """
    error_code = error.response.get('Error', {}).get('Code', 'Unknown')
    error_message = error.response.get('Error', {}).get('Message', str(error))

    context = f"{operation} on {table_name}"
    if resource_id:
        context += f" (resource: {resource_id})"

    full_message = f"{context}: {error_message}"

    if error_code == 'ConditionalCheckFailedException':
        return ConflictError(f"Conditional check failed - {full_message}", resource_id, original_error=error)

    elif error_code == 'ResourceNotFoundException':
        if resource_id:
            return ItemNotFoundError(table_name, {'resource_id': resource_id}, original_error=error)
        return NotFoundError(f"Table not found - {full_message}", 'table', table_name, original_error=error)

    elif error_code == 'ValidationException':
        return ValidationError(f"Validation failed - {full_message}", original_error=error)

    elif error_code in ['ResourceInUseException', 'TableAlreadyExistsException']:
        return ConflictError(f"Resource in use - {full_message}", resource_id or table_name, original_error=error)

    elif error_code == 'LimitExceededException':
        return RetryableError(f"DynamoDB limit exceeded - {full_message}", original_error=error)

    elif error_code in [
        'ProvisionedThroughputExceededException', 'RequestLimitExceeded',
        'ThrottlingException', 'TooManyRequestsException'
    ]:
        return RetryableError(f"Throttling - {full_message}", original_error=error)

    elif error_code in [
        'InternalServerError', 'ServiceUnavailable', 'ServiceUnavailableException',
        'RequestTimeoutException'
    ]:
        return RetryableError(f"Service unavailable - {full_message}", original_error=error)

    elif error_code in ['TransactionConflictException']:
        return ConflictError(f"Transaction conflict - {full_message}", resource_id, original_error=error)

    elif error_code in [
        'UnrecognizedClientException', 'AccessDeniedException',
        'ExpiredTokenException', 'InvalidSignatureException'
    ]:
        return ConnectionError(f"Authentication/authorization failed - {full_message}", original_error=error)

    logger.warning(f"Unknown DynamoDB error code '{error_code}' mapped to ConnectionError")
    return ConnectionError(f"DynamoDB operation failed - {full_message}", original_error=error)


def create_dynamodb_resource(config: DynamoDBConfig):
    """Create a boto3 DynamoDB resource from configuration.

    Raises:
        ConnectionError: If the session or resource cannot be created
    """
    try:
        session = boto3.Session(
            aws_access_key_id=config.aws_access_key_id,
            aws_secret_access_key=config.aws_secret_access_key,
            region_name=config.region_name
        )

        resource_kwargs = {
            'region_name': config.region_name,
            'config': Config(
                retries={'max_attempts': config.retries},
                max_pool_connections=config.max_pool_connections,
                read_timeout=config.timeout_seconds,
                connect_timeout=config.timeout_seconds
            )
        }
        if config.endpoint_url:
            resource_kwargs['endpoint_url'] = config.endpoint_url

        return session.resource('dynamodb', **resource_kwargs)
    except Exception as e:
        logger.error(f"Failed to create DynamoDB resource: {e}")
        raise ConnectionError(f"Failed to connect to DynamoDB: {e}", e) from e


class TableGateway:
    """
    Thin gateway for item operations on one table.

    Designed to be used by the read/write APIs rather than directly by clients.
    """

    def __init__(self, config: DynamoDBConfig, table_name: str, dynamodb=None):
        """Initialize table gateway.

        Args:
            config: DynamoDB configuration
            table_name: Physical table name
            dynamodb: Optional pre-built boto3 resource to share
        """
        self.config = config
        self.table_name = table_name
        self._dynamodb = dynamodb
        self._table = None

    @property
    def dynamodb(self):
        """Lazy initialization of DynamoDB resource."""
        if self._dynamodb is None:
            self._dynamodb = create_dynamodb_resource(self.config)
        return self._dynamodb

    @property
    def table(self):
        """boto3 Table resource for this gateway."""
        if self._table is None:
            try:
                self._table = self.dynamodb.Table(self.table_name)
            except Exception as e:
                logger.error(f"Failed to access table '{self.table_name}': {e}")
                raise ConnectionError(f"Failed to access table '{self.table_name}': {e}", e) from e
        return self._table

    def get_item(self, key: Dict[str, Any], consistent_read: bool = False) -> Optional[Dict[str, Any]]:
        """
        Fetch one item by primary key.

        Returns:
            The raw item, or None if absent
        """
        try:
            response = self.table.get_item(Key=key, ConsistentRead=consistent_read)
        except ClientError as e:
            raise map_dynamodb_error(e, "GetItem", self.table_name) from e
        return response.get('Item')

    def put_item(self, item: Dict[str, Any], condition_expression=None, resource_id: Optional[str] = None) -> None:
        """
        Put item into the table.

        Example:
            gateway.put_item(
                item={'id': 'p-1', 'name': 'Laptop'},
                condition_expression=Attr('id').not_exists()
            )
        """
        try:
            put_kwargs = {'Item': item}
            if condition_expression is not None:
                put_kwargs['ConditionExpression'] = condition_expression

            self.table.put_item(**put_kwargs)
            logger.info(f"Put item in {self.table_name}: {resource_id or item}")
        except ClientError as e:
            raise map_dynamodb_error(e, "PutItem", self.table_name, resource_id) from e

    def update_item(
        self,
        key: Dict[str, Any],
        update_expression: str,
        expression_attribute_values: Optional[Dict[str, Any]] = None,
        expression_attribute_names: Optional[Dict[str, str]] = None,
        condition_expression=None,
        return_values: str = 'NONE'
    ) -> Optional[Dict[str, Any]]:
        """
        Update item in the table.

        Returns:
            Updated attributes if return_values != 'NONE'
        """
        try:
            update_kwargs = {
                'Key': key,
                'UpdateExpression': update_expression,
                'ReturnValues': return_values
            }

            if expression_attribute_values:
                update_kwargs['ExpressionAttributeValues'] = expression_attribute_values
            if expression_attribute_names:
                update_kwargs['ExpressionAttributeNames'] = expression_attribute_names
            if condition_expression is not None:
                update_kwargs['ConditionExpression'] = condition_expression

            response = self.table.update_item(**update_kwargs)
            logger.info(f"Updated item in {self.table_name}: {key}")

            return response.get('Attributes') if return_values != 'NONE' else None

        except ClientError as e:
            resource_id = next(iter(key.values()), None)
            raise map_dynamodb_error(e, "UpdateItem", self.table_name, str(resource_id)) from e

    def delete_item(
        self,
        key: Dict[str, Any],
        condition_expression=None,
        return_values: str = 'NONE'
    ) -> Optional[Dict[str, Any]]:
        """
        Delete item from the table.

        Returns:
            Deleted attributes if return_values != 'NONE'
        """
        try:
            delete_kwargs = {
                'Key': key,
                'ReturnValues': return_values
            }

            if condition_expression is not None:
                delete_kwargs['ConditionExpression'] = condition_expression

            response = self.table.delete_item(**delete_kwargs)
            logger.info(f"Deleted item from {self.table_name}: {key}")

            return response.get('Attributes') if return_values != 'NONE' else None

        except ClientError as e:
            resource_id = next(iter(key.values()), None)
            raise map_dynamodb_error(e, "DeleteItem", self.table_name, str(resource_id)) from e

    def scan_all(self, filter_expression=None, **kwargs) -> List[Dict[str, Any]]:
        """
        Scan the whole table, following LastEvaluatedKey.

        Scans read every item; prefer key lookups where the access pattern allows.

        Args:
            filter_expression: Optional boto3 condition applied server-side
            **kwargs: Extra boto3 scan parameters

        Returns:
            All matching items
        """
        scan_kwargs = dict(kwargs)
        if filter_expression is not None:
            scan_kwargs['FilterExpression'] = filter_expression

        items: List[Dict[str, Any]] = []
        try:
            while True:
                response = self.table.scan(**scan_kwargs)
                items.extend(response.get('Items', []))
                last_key = response.get('LastEvaluatedKey')
                if not last_key:
                    break
                scan_kwargs['ExclusiveStartKey'] = last_key
        except ClientError as e:
            raise map_dynamodb_error(e, "Scan", self.table_name) from e

        logger.debug(f"Scan on {self.table_name} returned {len(items)} items")
        return items


def create_table_gateway(config: DynamoDBConfig, table_name: str, dynamodb=None) -> TableGateway:
    """
    Factory function to create a TableGateway instance.

    Args:
        config: DynamoDB configuration
        table_name: Logical table name (prefixed via config.get_table_name())
        dynamodb: Optional shared boto3 resource

    Returns:
        Configured TableGateway instance
    """
    full_table_name = config.get_table_name(table_name)
    return TableGateway(config, full_table_name, dynamodb=dynamodb)
