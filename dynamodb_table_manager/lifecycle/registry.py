"""
Schema registry: physical table name -> resolved EntitySchema.
"""

import importlib
import inspect
import logging
import pkgutil
from collections.abc import Mapping
from typing import Dict, Iterable, Iterator, List, Optional, Type

from pydantic import BaseModel

from ..config import DynamoDBConfig
from ..exceptions import ValidationError
from ..models.base import is_entity
from ..models.schema import EntitySchema

logger = logging.getLogger(__name__)


class SchemaRegistry(Mapping):
    """Read-only mapping of physical table names to entity schemas.

    Built once at startup. Iteration order is registration order.
    """

    def __init__(self, schemas: Optional[Dict[str, EntitySchema]] = None):
        self._schemas: Dict[str, EntitySchema] = dict(schemas or {})

    def __getitem__(self, table_name: str) -> EntitySchema:
        return self._schemas[table_name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._schemas)

    def __len__(self) -> int:
        return len(self._schemas)

    def __repr__(self) -> str:
        return f"SchemaRegistry({list(self._schemas)!r})"

    def schema_for(self, entity_class: Type[BaseModel]) -> EntitySchema:
        """Look up the schema registered for an entity class."""
        for schema in self._schemas.values():
            if schema.entity_class is entity_class:
                return schema
        raise KeyError(f"No table registered for {entity_class.__name__}")

    def table_name_for(self, entity_class: Type[BaseModel]) -> str:
        for table_name, schema in self._schemas.items():
            if schema.entity_class is entity_class:
                return table_name
        raise KeyError(f"No table registered for {entity_class.__name__}")

    @classmethod
    def from_entities(
        cls,
        entity_classes: Iterable[Type[BaseModel]],
        config: Optional[DynamoDBConfig] = None
    ) -> 'SchemaRegistry':
        """Build a registry from an explicit list of entity classes.

        Args:
            entity_classes: Pydantic models declaring Meta(TableMeta)
            config: When given, logical names are expanded with
                ``config.get_table_name`` (prefix and environment)

        Raises:
            ValidationError: If an entity is invalid or two entities map to
                the same table name
        """
        schemas: Dict[str, EntitySchema] = {}
        for entity_class in entity_classes:
            schema = EntitySchema.from_model(entity_class)
            table_name = config.get_table_name(schema.name) if config else schema.name
            existing = schemas.get(table_name)
            if existing is not None:
                if existing.entity_class is entity_class:
                    continue
                raise ValidationError(
                    f"Duplicate table name '{table_name}' declared by "
                    f"{existing.entity_class.__name__} and {entity_class.__name__}"
                )
            schemas[table_name] = schema
            logger.debug(f"Registered {entity_class.__name__} as table {table_name}")

        logger.info(f"Schema registry built with {len(schemas)} tables")
        return cls(schemas)

    @classmethod
    def from_packages(
        cls,
        packages: Iterable[str],
        config: Optional[DynamoDBConfig] = None
    ) -> 'SchemaRegistry':
        """Build a registry by importing modules and collecting their entities.

        Packages are walked recursively. Only classes defined in a visited
        module are collected, so re-exports are not counted twice.

        Raises:
            ValidationError: If ``packages`` is empty or a module cannot be imported
        """
        packages = sorted(set(packages))
        if not packages:
            raise ValidationError("At least one package must be specified for entity scanning")
        return cls.from_entities(discover_entities(packages), config)


def discover_entities(packages: Iterable[str]) -> List[Type[BaseModel]]:
    """Import ``packages`` and return the entity classes they define."""
    found: List[Type[BaseModel]] = []
    seen = set()
    for module in _iter_modules(packages):
        members = inspect.getmembers(module, is_entity)
        for _, entity_class in sorted(members, key=lambda m: m[0]):
            if entity_class.__module__ != module.__name__ or entity_class in seen:
                continue
            seen.add(entity_class)
            found.append(entity_class)
    return found


def _iter_modules(packages: Iterable[str]):
    for package_name in packages:
        module = _import(package_name)
        yield module
        if hasattr(module, '__path__'):
            for info in pkgutil.walk_packages(module.__path__, prefix=f"{module.__name__}."):
                yield _import(info.name)


def _import(name: str):
    try:
        return importlib.import_module(name)
    except ImportError as e:
        raise ValidationError(f"Cannot import entity package '{name}': {e}", original_error=e) from e
