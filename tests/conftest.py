"""
Shared fixtures: configuration objects, a moto-backed DynamoDB resource
and the product table.
"""

import sys
from pathlib import Path

# Add repository root to path so dynamodb_table_manager and tests.helpers import
sys.path.insert(0, str(Path(__file__).parent.parent))

import boto3
import pytest
from moto import mock_aws

from dynamodb_table_manager.config import AppConfig, DynamoDBConfig, EntityScanConfig
from dynamodb_table_manager.core import TableAdminClient
from dynamodb_table_manager.models import EntitySchema, Product


@pytest.fixture(autouse=True)
def aws_credentials(monkeypatch):
    """Fake credentials so nothing ever reaches a real AWS account."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")
    monkeypatch.delenv("DYNAMODB_ENDPOINT_URL", raising=False)
    monkeypatch.delenv("DYNAMODB_TABLE_PREFIX", raising=False)
    monkeypatch.delenv("DYNAMODB_ENTITY_PACKAGES", raising=False)
    monkeypatch.delenv("DYNAMODB_DDL_ENABLED", raising=False)
    monkeypatch.delenv("ENVIRONMENT", raising=False)


@pytest.fixture
def mock_dynamodb_config():
    """DynamoDB configuration for mocked testing."""
    return DynamoDBConfig(
        aws_access_key_id="test_key",
        aws_secret_access_key="test_secret",
        region_name="us-east-1",
        endpoint_url=None,  # Use default AWS endpoint for moto
        environment="test",
        table_prefix="test"
    )


@pytest.fixture
def entity_config():
    return EntityScanConfig(
        packages={"dynamodb_table_manager.models"},
        ddl_enabled=False,
        max_wait_attempts=5,
        wait_interval_seconds=0
    )


@pytest.fixture
def app_config(mock_dynamodb_config, entity_config):
    return AppConfig(dynamodb=mock_dynamodb_config, entity=entity_config)


@pytest.fixture
def mock_dynamodb_resource():
    """Mock DynamoDB resource."""
    with mock_aws():
        yield boto3.resource('dynamodb', region_name='us-east-1')


@pytest.fixture
def admin_client(mock_dynamodb_config, mock_dynamodb_resource):
    return TableAdminClient(mock_dynamodb_config, dynamodb=mock_dynamodb_resource)


@pytest.fixture
def product_schema():
    return EntitySchema.from_model(Product)


@pytest.fixture
def product_table(mock_dynamodb_config, admin_client, product_schema):
    """Create the product table (test_test_product) in moto."""
    table_name = mock_dynamodb_config.get_table_name(product_schema.name)
    admin_client.create_table(table_name, product_schema)
    return table_name
