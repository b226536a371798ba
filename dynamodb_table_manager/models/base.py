"""
Entity declaration building blocks.

An entity is a pydantic model with an inner ``Meta`` class derived from
``TableMeta``. The Meta class is the single source of truth for the table
layout: table name, partition/sort keys, secondary indexes and which
attributes are managed automatically on write.

```python
class Product(DynamoDBMixin, BaseModel):
    id: Optional[str] = None
    version: Optional[int] = None

    class Meta(TableMeta):
        partition_key = "id"
        auto_attributes = {
            "id": AutoAttribute.GENERATED_ID,
            "version": AutoAttribute.VERSION,
        }
```
"""

import logging
import uuid
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel

logger = logging.getLogger(__name__)


class AutoAttribute(str, Enum):
    """Attributes whose values are maintained by the write path, not the caller."""
    GENERATED_ID = "generated_id"
    CREATED_TIMESTAMP = "created_timestamp"
    UPDATED_TIMESTAMP = "updated_timestamp"
    VERSION = "version"
    COUNTER = "counter"


class GSIDefinition:
    """Defines a Global Secondary Index for DynamoDB."""
    def __init__(
        self,
        name: str,
        partition_key: str,
        sort_key: Optional[str] = None,
        projection: Optional[List[str]] = None
    ):
        self.name = name
        self.partition_key = partition_key
        self.sort_key = sort_key
        self.projection = projection  # None means ALL attributes

    def __repr__(self) -> str:
        return f"GSIDefinition(name={self.name!r}, partition_key={self.partition_key!r}, sort_key={self.sort_key!r})"


class TableMeta:
    """Base class for table metadata definitions.

    ``table_name`` may be left unset, in which case the lower-cased entity
    class name is used.
    """
    table_name: Optional[str] = None
    partition_key: str
    sort_key: Optional[str] = None
    gsis: List[GSIDefinition] = []
    auto_attributes: Dict[str, AutoAttribute] = {}


def is_entity(candidate: Any) -> bool:
    """True if ``candidate`` is a pydantic model class declaring a TableMeta."""
    if not isinstance(candidate, type) or not issubclass(candidate, BaseModel):
        return False
    meta = getattr(candidate, 'Meta', None)
    return isinstance(meta, type) and issubclass(meta, TableMeta)


class DynamoDBMixin(BaseModel):
    """
    Mixin providing DynamoDB serialization and auto-attribute handling.

    - datetime -> ISO string
    - float -> Decimal (boto3 rejects floats)
    - Enum -> value
    - None values are dropped
    """

    def to_dynamodb_item(self) -> Dict[str, Any]:
        def convert_for_dynamodb(obj):
            if isinstance(obj, dict):
                return {k: convert_for_dynamodb(v) for k, v in obj.items()}
            elif isinstance(obj, list):
                return [convert_for_dynamodb(list_item) for list_item in obj]
            elif isinstance(obj, datetime):
                return obj.isoformat()
            elif isinstance(obj, Enum):
                return obj.value
            elif isinstance(obj, bool):
                return obj
            elif isinstance(obj, float):
                return Decimal(str(obj))
            return obj

        return convert_for_dynamodb(self.model_dump(exclude_none=True))

    @classmethod
    def from_dynamodb_item(cls, item: Dict[str, Any]):
        """Create a model instance from a DynamoDB item.

        Raises:
            ValidationError: If item data is invalid for the model
        """
        try:
            return cls(**item)
        except Exception as e:
            logger.error(f"Failed to convert DynamoDB item to {cls.__name__}: {e}")
            from ..exceptions import ValidationError
            raise ValidationError(f"Failed to convert DynamoDB item to {cls.__name__}: {e}", original_error=e) from e

    def apply_auto_attributes(self, now: Optional[datetime] = None):
        """Fill auto-managed attributes for a first write.

        Generated ids, creation timestamps, versions and counters are only
        set when missing; the update timestamp is always refreshed.
        """
        meta = getattr(type(self), 'Meta', None)
        auto = getattr(meta, 'auto_attributes', None) or {}
        now = now or datetime.now(timezone.utc)

        for attr, kind in auto.items():
            current = getattr(self, attr, None)
            if kind == AutoAttribute.GENERATED_ID and current is None:
                setattr(self, attr, str(uuid.uuid4()))
            elif kind == AutoAttribute.CREATED_TIMESTAMP and current is None:
                setattr(self, attr, now)
            elif kind == AutoAttribute.UPDATED_TIMESTAMP:
                setattr(self, attr, now)
            elif kind == AutoAttribute.VERSION and current is None:
                setattr(self, attr, 1)
            elif kind == AutoAttribute.COUNTER and current is None:
                setattr(self, attr, 0)
        return self
