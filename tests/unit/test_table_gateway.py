"""
Tests for TableGateway and DynamoDB error mapping (core/table_gateway.py).
"""

import pytest
from unittest.mock import Mock, patch
from botocore.exceptions import ClientError

from dynamodb_table_manager.config import DynamoDBConfig
from dynamodb_table_manager.core.table_gateway import (
    TableGateway,
    create_dynamodb_resource,
    create_table_gateway,
    map_dynamodb_error,
)
from dynamodb_table_manager.exceptions import (
    ConflictError,
    ConnectionError,
    ItemNotFoundError,
    NotFoundError,
    RetryableError,
    ValidationError,
)


def client_error(code: str, operation: str = "DescribeTable", message: str = "Test error") -> ClientError:
    return ClientError(
        error_response={'Error': {'Code': code, 'Message': message}},
        operation_name=operation
    )


@pytest.fixture
def mock_config():
    """Mock configuration for testing."""
    return DynamoDBConfig(
        region_name="us-east-1",
        table_prefix="test",
        environment="dev",
        aws_access_key_id="fake_key",
        aws_secret_access_key="fake_secret"
    )


@pytest.fixture
def mock_table():
    """Mock DynamoDB table resource."""
    table = Mock()
    table.get_item.return_value = {}
    table.scan.return_value = {'Items': []}
    table.put_item.return_value = None
    table.update_item.return_value = {'Attributes': {}}
    table.delete_item.return_value = {'Attributes': {}}
    return table


class TestErrorMapping:
    """map_dynamodb_error translation table."""

    def test_missing_table_is_not_found(self):
        error = map_dynamodb_error(client_error('ResourceNotFoundException'), "DescribeTable", "t1")

        assert isinstance(error, NotFoundError)
        assert error.resource_type == "table"
        assert error.resource_name == "t1"

    def test_missing_item_with_resource_id(self):
        error = map_dynamodb_error(client_error('ResourceNotFoundException'), "GetItem", "t1", "p-1")
        assert isinstance(error, ItemNotFoundError)

    @pytest.mark.parametrize("code,expected", [
        ('ConditionalCheckFailedException', ConflictError),
        ('ResourceInUseException', ConflictError),
        ('ValidationException', ValidationError),
        ('ProvisionedThroughputExceededException', RetryableError),
        ('ThrottlingException', RetryableError),
        ('InternalServerError', RetryableError),
        ('LimitExceededException', RetryableError),
        ('AccessDeniedException', ConnectionError),
        ('SomethingNew', ConnectionError),
    ])
    def test_codes(self, code, expected):
        error = map_dynamodb_error(client_error(code), "Op", "t1")

        assert isinstance(error, expected)
        assert "Op on t1" in error.message

    def test_original_error_is_kept(self):
        original = client_error('ValidationException')
        error = map_dynamodb_error(original, "Op", "t1")
        assert error.original_error is original


class TestResourceCreation:

    def test_session_and_endpoint(self, mock_config):
        mock_config.endpoint_url = "http://localhost:4566"
        with patch('boto3.Session') as mock_session_class:
            mock_session = Mock()
            mock_session_class.return_value = mock_session

            resource = create_dynamodb_resource(mock_config)

            assert resource is mock_session.resource.return_value
            mock_session_class.assert_called_once_with(
                aws_access_key_id="fake_key",
                aws_secret_access_key="fake_secret",
                region_name="us-east-1"
            )
            args, kwargs = mock_session.resource.call_args
            assert args == ('dynamodb',)
            assert kwargs['endpoint_url'] == "http://localhost:4566"
            assert kwargs['region_name'] == "us-east-1"

    def test_connection_error(self, mock_config):
        with patch('boto3.Session') as mock_session_class:
            mock_session_class.side_effect = Exception("Connection failed")

            with pytest.raises(ConnectionError, match="Failed to connect to DynamoDB"):
                create_dynamodb_resource(mock_config)


class TestTableGateway:
    """Test TableGateway class."""

    def test_initialization(self, mock_config):
        gateway = TableGateway(mock_config, "test_table")

        assert gateway.config == mock_config
        assert gateway.table_name == "test_table"
        assert gateway._dynamodb is None
        assert gateway._table is None

    def test_dynamodb_property_reuses_instance(self, mock_config):
        with patch('boto3.Session') as mock_session_class:
            gateway = TableGateway(mock_config, "test_table")

            assert gateway.dynamodb is gateway.dynamodb
            mock_session_class.assert_called_once()

    def test_shared_resource(self, mock_config):
        resource = Mock()
        gateway = TableGateway(mock_config, "test_table", dynamodb=resource)

        assert gateway.table is resource.Table.return_value
        resource.Table.assert_called_once_with("test_table")

    def test_table_access_error(self, mock_config):
        resource = Mock()
        resource.Table.side_effect = Exception("Table access failed")
        gateway = TableGateway(mock_config, "test_table", dynamodb=resource)

        with pytest.raises(ConnectionError, match="Failed to access table"):
            _ = gateway.table

    def test_get_item(self, mock_config, mock_table):
        mock_table.get_item.return_value = {'Item': {'id': 'p-1'}}
        with patch.object(TableGateway, 'table', mock_table):
            gateway = TableGateway(mock_config, "test_table")

            assert gateway.get_item({'id': 'p-1'}) == {'id': 'p-1'}
            mock_table.get_item.assert_called_once_with(Key={'id': 'p-1'}, ConsistentRead=False)

    def test_get_missing_item(self, mock_config, mock_table):
        with patch.object(TableGateway, 'table', mock_table):
            gateway = TableGateway(mock_config, "test_table")
            assert gateway.get_item({'id': 'nope'}) is None

    def test_put_item_with_condition(self, mock_config, mock_table):
        with patch.object(TableGateway, 'table', mock_table):
            gateway = TableGateway(mock_config, "test_table")
            gateway.put_item({'id': 'p-1'}, condition_expression="cond")

            mock_table.put_item.assert_called_once_with(Item={'id': 'p-1'}, ConditionExpression="cond")

    def test_put_item_conflict(self, mock_config, mock_table):
        mock_table.put_item.side_effect = client_error('ConditionalCheckFailedException', 'PutItem')
        with patch.object(TableGateway, 'table', mock_table):
            gateway = TableGateway(mock_config, "test_table")

            with pytest.raises(ConflictError) as exc_info:
                gateway.put_item({'id': 'p-1'}, condition_expression="cond", resource_id='p-1')

            assert exc_info.value.resource_id == 'p-1'

    def test_update_item_returns_attributes(self, mock_config, mock_table):
        mock_table.update_item.return_value = {'Attributes': {'id': 'p-1', 'stock_quantity': 3}}
        with patch.object(TableGateway, 'table', mock_table):
            gateway = TableGateway(mock_config, "test_table")

            result = gateway.update_item(
                key={'id': 'p-1'},
                update_expression="SET #s = :s",
                expression_attribute_values={':s': 3},
                expression_attribute_names={'#s': 'stock_quantity'},
                return_values='ALL_NEW'
            )

            assert result == {'id': 'p-1', 'stock_quantity': 3}
            kwargs = mock_table.update_item.call_args[1]
            assert kwargs['UpdateExpression'] == "SET #s = :s"
            assert 'ConditionExpression' not in kwargs

    def test_delete_item(self, mock_config, mock_table):
        mock_table.delete_item.return_value = {'Attributes': {'id': 'p-1'}}
        with patch.object(TableGateway, 'table', mock_table):
            gateway = TableGateway(mock_config, "test_table")

            assert gateway.delete_item({'id': 'p-1'}, return_values='ALL_OLD') == {'id': 'p-1'}
            assert gateway.delete_item({'id': 'p-1'}) is None

    def test_scan_all_follows_pagination(self, mock_config, mock_table):
        mock_table.scan.side_effect = [
            {'Items': [{'id': '1'}, {'id': '2'}], 'LastEvaluatedKey': {'id': '2'}},
            {'Items': [{'id': '3'}]},
        ]
        with patch.object(TableGateway, 'table', mock_table):
            gateway = TableGateway(mock_config, "test_table")

            items = gateway.scan_all(filter_expression="flt")

            assert [i['id'] for i in items] == ['1', '2', '3']
            first, second = mock_table.scan.call_args_list
            assert first[1] == {'FilterExpression': "flt"}
            assert second[1] == {'FilterExpression': "flt", 'ExclusiveStartKey': {'id': '2'}}

    def test_scan_error_mapping(self, mock_config, mock_table):
        mock_table.scan.side_effect = client_error('ResourceNotFoundException', 'Scan')
        with patch.object(TableGateway, 'table', mock_table):
            gateway = TableGateway(mock_config, "test_table")

            with pytest.raises(NotFoundError):
                gateway.scan_all()


def test_create_table_gateway_prefixes_name(mock_config):
    gateway = create_table_gateway(mock_config, "product")
    assert gateway.table_name == "test_dev_product"
