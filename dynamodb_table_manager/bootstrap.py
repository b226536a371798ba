"""
Startup wiring: configuration -> registry -> lifecycle manager.
"""

import logging
import threading
from typing import Iterable, Optional, Type

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from .config import AppConfig, EntityScanConfig
from .core import TableAdminClient, create_dynamodb_resource
from .exceptions import ValidationError
from .lifecycle import SchemaRegistry, TableLifecycleManager
from .logging_setup import configure_logging

logger = logging.getLogger(__name__)


def build_manager(
    app_config: AppConfig,
    entities: Optional[Iterable[Type[BaseModel]]] = None,
    dynamodb=None,
    stop_event: Optional[threading.Event] = None
) -> TableLifecycleManager:
    """Wire a TableLifecycleManager without touching any table.

    Args:
        app_config: Loaded configuration
        entities: Explicit entity classes; when None the configured
            packages are scanned
        dynamodb: Optional pre-built boto3 resource
        stop_event: Event that aborts activation polling when set
    """
    resource = dynamodb if dynamodb is not None else create_dynamodb_resource(app_config.dynamodb)
    if entities is not None:
        registry = SchemaRegistry.from_entities(entities, app_config.dynamodb)
    else:
        registry = SchemaRegistry.from_packages(app_config.entity.packages, app_config.dynamodb)

    admin = TableAdminClient(app_config.dynamodb, dynamodb=resource)
    return TableLifecycleManager.from_config(admin, registry, app_config.entity, stop_event=stop_event)


def bootstrap(
    app_config: Optional[AppConfig] = None,
    entities: Optional[Iterable[Type[BaseModel]]] = None,
    dynamodb=None,
    stop_event: Optional[threading.Event] = None
) -> TableLifecycleManager:
    """Run the startup hook: build the manager and initialize every table.

    The caller owns the returned manager and must call ``shutdown()`` on
    graceful shutdown.

    When ``app_config`` is omitted it is read from the environment. With an
    explicit ``entities`` list no scan packages are required.

    Raises:
        ValidationError: If the environment configuration is invalid
        TableInitializationError: If any declared table is not usable
    """
    if app_config is None:
        app_config = _default_config(scanning=entities is None)
    configure_logging(app_config.dynamodb.enable_debug_logging)

    manager = build_manager(app_config, entities=entities, dynamodb=dynamodb, stop_event=stop_event)
    logger.info(f"Initializing {len(manager.registry)} tables (ddl_enabled={manager.ddl_enabled})")
    manager.initialize()
    return manager


def _default_config(scanning: bool) -> AppConfig:
    try:
        entity = EntityScanConfig() if scanning else EntityScanConfig.without_scanning()
        return AppConfig(entity=entity)
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid configuration: {e}", original_error=e) from e
