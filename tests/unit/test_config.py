import os
from pathlib import Path
from unittest.mock import patch

import pytest

from dynamodb_table_manager.config import AppConfig, DynamoDBConfig, EntityScanConfig


class TestDynamoDBConfig:
    """Test cases for DynamoDBConfig."""

    def test_default_config(self):
        with patch.dict(os.environ, {"AWS_REGION": "us-west-2"}):
            config = DynamoDBConfig()

            assert config.region_name == "us-west-2"
            assert config.max_pool_connections == 50
            assert config.retries == 3
            assert config.timeout_seconds == 30.0
            assert config.environment == "dev"
            assert config.endpoint_url is None

    def test_config_from_env_vars(self):
        env_vars = {
            "AWS_ACCESS_KEY_ID": "test_key",
            "AWS_SECRET_ACCESS_KEY": "test_secret",
            "AWS_REGION": "eu-west-1",
            "DYNAMODB_ENDPOINT_URL": "http://localhost:4566",
            "DYNAMODB_TABLE_PREFIX": "shop",
            "DYNAMODB_DEBUG_LOGGING": "true",
            "ENVIRONMENT": "staging"
        }

        with patch.dict(os.environ, env_vars):
            config = DynamoDBConfig.from_env()

            assert config.aws_access_key_id == "test_key"
            assert config.aws_secret_access_key == "test_secret"
            assert config.region_name == "eu-west-1"
            assert config.endpoint_url == "http://localhost:4566"
            assert config.table_prefix == "shop"
            assert config.environment == "staging"
            assert config.enable_debug_logging is True

    def test_table_name_generation(self):
        config = DynamoDBConfig(table_prefix="myapp", environment="dev")
        assert config.get_table_name("product") == "myapp_dev_product"

    def test_table_name_generation_prod(self):
        config = DynamoDBConfig(table_prefix="myapp", environment="prod")
        assert config.get_table_name("product") == "myapp_product"

    def test_table_name_generation_no_prefix(self):
        config = DynamoDBConfig(environment="dev")
        assert config.get_table_name("product") == "dev_product"

    def test_local_development_config(self):
        config = DynamoDBConfig.for_local_development()

        assert config.endpoint_url == "http://localhost:4566"
        assert config.region_name == "eu-west-1"
        assert config.environment == "dev"
        assert config.enable_debug_logging is True

    def test_environment_validation(self):
        with pytest.raises(ValueError, match="Environment must be one of"):
            DynamoDBConfig(environment="invalid")

    def test_environment_validation_on_assignment(self):
        config = DynamoDBConfig(environment="dev")
        with pytest.raises(ValueError, match="Environment must be one of"):
            config.environment = "qa"

    def test_region_validation(self):
        with pytest.raises(ValueError, match="AWS region name is required"):
            DynamoDBConfig(region_name="")


class TestEntityScanConfig:
    """Entity scanning and lifecycle settings."""

    def test_defaults(self):
        config = EntityScanConfig(packages={"app.domain"})

        assert config.packages == {"app.domain"}
        assert config.ddl_enabled is False
        assert config.max_wait_attempts == 60
        assert config.wait_interval_seconds == 2.0
        assert config.max_workers == 1

    def test_empty_packages_fail_fast(self):
        with pytest.raises(ValueError, match="At least one package must be specified"):
            EntityScanConfig(packages=set())

    def test_missing_packages_fail_fast(self):
        with pytest.raises(ValueError, match="At least one package must be specified"):
            EntityScanConfig()

    def test_blank_package_names_are_ignored(self):
        with pytest.raises(ValueError, match="At least one package must be specified"):
            EntityScanConfig(packages=["  ", ""])

    def test_without_scanning_allows_empty_packages(self):
        with patch.dict(os.environ, {"DYNAMODB_DDL_ENABLED": "true"}):
            config = EntityScanConfig.without_scanning(max_workers=2)

        assert config.packages == set()
        assert config.ddl_enabled is True
        assert config.max_workers == 2
        assert config.max_wait_attempts == 60

    def test_without_scanning_still_validates_other_fields(self):
        with pytest.raises(ValueError):
            EntityScanConfig.without_scanning(max_wait_attempts=0)

    def test_comma_separated_packages(self):
        config = EntityScanConfig(packages="app.domain, app.audit")
        assert config.packages == {"app.domain", "app.audit"}

    def test_packages_and_flag_from_env(self):
        env_vars = {
            "DYNAMODB_ENTITY_PACKAGES": "app.domain,app.audit",
            "DYNAMODB_DDL_ENABLED": "true"
        }
        with patch.dict(os.environ, env_vars):
            config = EntityScanConfig()

        assert config.packages == {"app.domain", "app.audit"}
        assert config.ddl_enabled is True

    @pytest.mark.parametrize("field,value", [
        ("max_wait_attempts", 0),
        ("wait_interval_seconds", -1),
        ("max_workers", 0),
    ])
    def test_bounds(self, field, value):
        with pytest.raises(ValueError):
            EntityScanConfig(packages={"app.domain"}, **{field: value})


class TestAppConfigFromToml:
    """TOML loading in the layout of application.toml."""

    def test_from_toml(self, tmp_path, monkeypatch):
        monkeypatch.setenv("DYNAMODB_REGION", "eu-west-3")
        config_file = tmp_path / "application.toml"
        config_file.write_text(
            "[dynamodb]\n"
            "region = \"${DYNAMODB_REGION:eu-west-1}\"\n"
            "endpoint = \"${DYNAMODB_ENDPOINT:http://localhost:4566}\"\n"
            "table-prefix = \"shop\"\n"
            "environment = \"test\"\n"
            "\n"
            "[dynamodb.credentials]\n"
            "access-key = \"${DYNAMODB_ACCESS_KEY:noop}\"\n"
            "secret-key = \"${DYNAMODB_SECRET_KEY:noop}\"\n"
            "\n"
            "[dynamodb.entity]\n"
            "ddl-enabled = true\n"
            "max-wait-attempts = 10\n"
            "wait-interval-seconds = 0.5\n"
            "packages = [\"app.domain\"]\n"
        )

        config = AppConfig.from_toml(config_file)

        assert config.dynamodb.region_name == "eu-west-3"
        assert config.dynamodb.endpoint_url == "http://localhost:4566"
        assert config.dynamodb.aws_access_key_id == "noop"
        assert config.dynamodb.table_prefix == "shop"
        assert config.dynamodb.environment == "test"
        assert config.entity.ddl_enabled is True
        assert config.entity.max_wait_attempts == 10
        assert config.entity.wait_interval_seconds == 0.5
        assert config.entity.packages == {"app.domain"}

    def test_empty_placeholder_falls_back_to_defaults(self, tmp_path):
        config_file = tmp_path / "application.toml"
        config_file.write_text(
            "[dynamodb]\n"
            "endpoint = \"${DYNAMODB_ENDPOINT:}\"\n"
            "\n"
            "[dynamodb.entity]\n"
            "packages = [\"app.domain\"]\n"
        )

        config = AppConfig.from_toml(config_file)

        assert config.dynamodb.endpoint_url is None
        assert config.entity.ddl_enabled is False

    def test_toml_without_packages_fails(self, tmp_path):
        config_file = tmp_path / "application.toml"
        config_file.write_text("[dynamodb.entity]\nddl-enabled = false\n")

        with pytest.raises(ValueError, match="At least one package must be specified"):
            AppConfig.from_toml(config_file)

    def test_shipped_sample_file(self):
        sample = Path(__file__).resolve().parents[2] / "application.toml"

        config = AppConfig.from_toml(sample)

        assert config.entity.packages == {"dynamodb_table_manager.models"}
        assert config.entity.ddl_enabled is False
