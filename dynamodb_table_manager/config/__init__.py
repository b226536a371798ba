from .config import AppConfig, DynamoDBConfig, EntityScanConfig

__all__ = [
    "AppConfig",
    "DynamoDBConfig",
    "EntityScanConfig",
]
