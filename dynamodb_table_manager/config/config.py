import os
import re
import tomllib
from pathlib import Path
from typing import Any, Dict, Optional, Set, Union

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

# Load environment variables from .env file if it exists
load_dotenv()

VALID_ENVIRONMENTS = ['dev', 'staging', 'test', 'prod']

# ${VAR} or ${VAR:default}
_PLACEHOLDER = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)(?::([^}]*))?\}")


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def _env_set(name: str) -> Set[str]:
    raw = os.getenv(name, "")
    return {part.strip() for part in raw.split(",") if part.strip()}


class DynamoDBConfig(BaseModel):
    """Configuration for DynamoDB connection and operations."""

    aws_access_key_id: Optional[str] = Field(
        default_factory=lambda: os.getenv("AWS_ACCESS_KEY_ID"),
        description="AWS access key ID"
    )

    aws_secret_access_key: Optional[str] = Field(
        default_factory=lambda: os.getenv("AWS_SECRET_ACCESS_KEY"),
        description="AWS secret access key"
    )

    region_name: str = Field(
        default_factory=lambda: os.getenv("AWS_REGION", "us-east-1"),
        description="AWS region name"
    )

    endpoint_url: Optional[str] = Field(
        default_factory=lambda: os.getenv("DYNAMODB_ENDPOINT_URL"),
        description="DynamoDB endpoint URL (LocalStack or DynamoDB Local)"
    )

    table_prefix: str = Field(
        default_factory=lambda: os.getenv("DYNAMODB_TABLE_PREFIX", ""),
        description="Prefix to add to all table names"
    )

    # Connection settings
    max_pool_connections: int = Field(
        default=50,
        description="Maximum number of connections in the connection pool"
    )

    retries: int = Field(
        default=3,
        description="Number of retry attempts for failed requests"
    )

    timeout_seconds: float = Field(
        default=30.0,
        description="Request timeout in seconds"
    )

    environment: str = Field(
        default_factory=lambda: os.getenv("ENVIRONMENT", "dev"),
        description="Current environment (dev, staging, test, prod)"
    )

    enable_debug_logging: bool = Field(
        default_factory=lambda: _env_flag("DYNAMODB_DEBUG_LOGGING"),
        description="Enable debug logging for DynamoDB operations"
    )

    @field_validator('region_name')
    @classmethod
    def validate_region(cls, v):
        """Validate AWS region name."""
        if not v:
            raise ValueError("AWS region name is required")
        return v

    @field_validator('environment')
    @classmethod
    def validate_environment(cls, v):
        """Validate environment value."""
        if v not in VALID_ENVIRONMENTS:
            raise ValueError(f"Environment must be one of: {VALID_ENVIRONMENTS}")
        return v

    def get_table_name(self, base_name: str) -> str:
        """Get the full table name with prefix and environment.

        Args:
            base_name: Logical table name

        Returns:
            Physical table name, e.g. ``myapp_dev_product``
        """
        parts = []

        if self.table_prefix:
            parts.append(self.table_prefix)

        if self.environment != "prod":
            parts.append(self.environment)

        parts.append(base_name)

        return "_".join(parts)

    @classmethod
    def from_env(cls) -> 'DynamoDBConfig':
        return cls()

    @classmethod
    def for_local_development(cls) -> 'DynamoDBConfig':
        """Create configuration for a LocalStack DynamoDB endpoint.

        Returns:
            DynamoDBConfig instance configured for local development
        """
        return cls(
            aws_access_key_id="noop",
            aws_secret_access_key="noop",
            region_name="eu-west-1",
            endpoint_url="http://localhost:4566",
            environment="dev",
            enable_debug_logging=True
        )

    model_config = ConfigDict(
        validate_assignment=True,
        validate_default=True,
        use_enum_values=True
    )


class EntityScanConfig(BaseModel):
    """Entity discovery and table lifecycle settings."""

    packages: Set[str] = Field(
        default_factory=lambda: _env_set("DYNAMODB_ENTITY_PACKAGES"),
        description="Modules or packages to scan for entity schemas"
    )

    ddl_enabled: bool = Field(
        default_factory=lambda: _env_flag("DYNAMODB_DDL_ENABLED"),
        description="Delete managed tables on shutdown. Defaults to false for safety."
    )

    max_wait_attempts: int = Field(
        default=60,
        ge=1,
        description="Maximum number of status checks while waiting for a table to become active"
    )

    wait_interval_seconds: float = Field(
        default=2.0,
        ge=0,
        description="Delay between table status checks"
    )

    max_workers: int = Field(
        default=1,
        ge=1,
        description="Number of tables initialized concurrently (1 means sequential)"
    )

    @field_validator('packages', mode='before')
    @classmethod
    def normalize_packages(cls, v):
        """Accept a comma separated string as well as any iterable."""
        if v is None:
            return set()
        if isinstance(v, str):
            v = v.split(",")
        return {str(p).strip() for p in v if str(p).strip()}

    @field_validator('packages')
    @classmethod
    def validate_packages(cls, v, info: ValidationInfo):
        scanning = (info.context or {}).get('scanning', True)
        if not v and scanning:
            raise ValueError("At least one package must be specified for entity scanning")
        return v

    @classmethod
    def without_scanning(cls, **values) -> 'EntityScanConfig':
        """Settings for a registry built from an explicit entity list.

        ``packages`` may be empty; every other field is validated as usual
        and falls back to its default or environment value.
        """
        return cls.model_validate(values, context={'scanning': False})

    model_config = ConfigDict(
        validate_assignment=True,
        validate_default=True
    )


class AppConfig(BaseModel):
    """Top-level configuration: connection settings plus entity settings."""

    dynamodb: DynamoDBConfig = Field(default_factory=DynamoDBConfig)
    entity: EntityScanConfig = Field(default_factory=EntityScanConfig)

    @classmethod
    def from_toml(cls, path: Union[str, Path]) -> 'AppConfig':
        """Load configuration from a TOML file.

        Expected layout::

            [dynamodb]
            region = "${DYNAMODB_REGION:eu-west-1}"
            endpoint = "${DYNAMODB_ENDPOINT:}"
            table-prefix = "myapp"
            environment = "dev"

            [dynamodb.credentials]
            access-key = "${DYNAMODB_ACCESS_KEY:}"
            secret-key = "${DYNAMODB_SECRET_KEY:}"

            [dynamodb.entity]
            ddl-enabled = false
            packages = ["myapp.domain"]

        ``${VAR:default}`` placeholders are expanded from the environment.
        Keys that are absent fall back to the environment defaults.
        """
        with Path(path).open("rb") as handle:
            raw = tomllib.load(handle)
        return cls.from_mapping(_expand_placeholders(raw))

    @classmethod
    def from_mapping(cls, data: Dict[str, Any]) -> 'AppConfig':
        section = data.get("dynamodb") or {}
        credentials = section.get("credentials") or {}
        entity = section.get("entity") or {}

        connection = _drop_empty({
            "region_name": section.get("region"),
            "endpoint_url": section.get("endpoint"),
            "aws_access_key_id": credentials.get("access-key"),
            "aws_secret_access_key": credentials.get("secret-key"),
            "table_prefix": section.get("table-prefix"),
            "environment": section.get("environment"),
            "retries": section.get("retries"),
            "timeout_seconds": section.get("timeout-seconds"),
            "max_pool_connections": section.get("max-pool-connections"),
            "enable_debug_logging": section.get("debug-logging"),
        })
        scan = _drop_empty({
            "packages": entity.get("packages"),
            "ddl_enabled": entity.get("ddl-enabled"),
            "max_wait_attempts": entity.get("max-wait-attempts"),
            "wait_interval_seconds": entity.get("wait-interval-seconds"),
            "max_workers": entity.get("max-workers"),
        })
        return cls(
            dynamodb=DynamoDBConfig(**connection),
            entity=EntityScanConfig(**scan),
        )


def _expand_placeholders(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: _expand_placeholders(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_expand_placeholders(v) for v in value]
    if isinstance(value, str):
        return _PLACEHOLDER.sub(lambda m: os.getenv(m.group(1), m.group(2) or ""), value)
    return value


def _drop_empty(values: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in values.items() if v is not None and v != ""}
