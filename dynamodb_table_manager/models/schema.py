"""
Resolved table schemas.

``EntitySchema.from_model`` reads an entity's Meta class once and produces
an immutable description of the physical table: key schema, attribute
definitions and index layout. Everything that talks to DynamoDB works from
this value rather than from the entity class.
"""

import logging
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional, Type, Union, get_args, get_origin

from pydantic import BaseModel, ConfigDict

from ..exceptions import ValidationError
from .base import AutoAttribute, GSIDefinition, is_entity

logger = logging.getLogger(__name__)

BILLING_PAY_PER_REQUEST = "PAY_PER_REQUEST"
BILLING_PROVISIONED = "PROVISIONED"

# Auto attributes that may never serve as a key.
_NON_KEY_AUTO = {
    AutoAttribute.UPDATED_TIMESTAMP,
    AutoAttribute.VERSION,
    AutoAttribute.COUNTER,
}


def dynamodb_scalar_type(annotation: Any) -> str:
    """Map a field annotation to a DynamoDB key attribute type (S, N or B).

    Raises:
        ValueError: If the annotation cannot be used as a key attribute
    """
    origin = get_origin(annotation)
    if origin is Union:
        args = [arg for arg in get_args(annotation) if arg is not type(None)]
        if len(args) != 1:
            raise ValueError(f"Ambiguous key annotation: {annotation}")
        annotation = args[0]

    if isinstance(annotation, type):
        if issubclass(annotation, bool):
            raise ValueError("Boolean attributes cannot be used as keys")
        if issubclass(annotation, (str, datetime, Enum)):
            return "S"
        if issubclass(annotation, (int, float, Decimal)):
            return "N"
        if issubclass(annotation, (bytes, bytearray)):
            return "B"
    raise ValueError(f"Unsupported key annotation: {annotation}")


class EntitySchema(BaseModel):
    """Attribute layout of one logical table."""

    name: str
    entity_class: Type[BaseModel]
    partition_key: str
    sort_key: Optional[str] = None
    key_types: Dict[str, str]
    gsis: List[GSIDefinition] = []
    auto_attributes: Dict[str, AutoAttribute] = {}
    data_attributes: List[str] = []

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        frozen=True
    )

    @classmethod
    def from_model(cls, model_class: Type[BaseModel], table_name: Optional[str] = None) -> 'EntitySchema':
        """Resolve the schema of an entity class.

        Args:
            model_class: Pydantic model with a ``Meta(TableMeta)`` class
            table_name: Explicit logical name, overriding Meta.table_name

        Returns:
            EntitySchema for the entity

        Raises:
            ValidationError: If the Meta declaration is incomplete or inconsistent
        """
        if not is_entity(model_class):
            raise ValidationError(
                f"{getattr(model_class, '__name__', model_class)!r} is not an entity: "
                f"it must be a pydantic model with a Meta(TableMeta) class"
            )

        meta = model_class.Meta
        fields = model_class.model_fields
        entity_name = model_class.__name__

        partition_key = getattr(meta, 'partition_key', None)
        if isinstance(partition_key, (list, tuple, set)):
            raise ValidationError(f"{entity_name}.Meta must declare exactly one partition_key, got {partition_key}")
        if not partition_key:
            raise ValidationError(f"{entity_name}.Meta must define partition_key")

        sort_key = getattr(meta, 'sort_key', None)
        gsis = list(getattr(meta, 'gsis', None) or [])
        auto_attributes = dict(getattr(meta, 'auto_attributes', None) or {})

        for attr in auto_attributes:
            if attr not in fields:
                raise ValidationError(f"{entity_name}.Meta auto attribute '{attr}' is not a model field")

        key_names = [partition_key]
        if sort_key:
            key_names.append(sort_key)
        for gsi in gsis:
            key_names.append(gsi.partition_key)
            if gsi.sort_key:
                key_names.append(gsi.sort_key)

        key_types: Dict[str, str] = {}
        for attr in key_names:
            if attr in key_types:
                continue
            if attr not in fields:
                raise ValidationError(f"{entity_name}.Meta key attribute '{attr}' is not a model field")
            if auto_attributes.get(attr) in _NON_KEY_AUTO:
                raise ValidationError(f"{entity_name}.{attr} is auto-managed and cannot be part of a key")
            try:
                key_types[attr] = dynamodb_scalar_type(fields[attr].annotation)
            except ValueError as e:
                raise ValidationError(f"{entity_name}.{attr}: {e}", original_error=e) from e

        name = table_name or getattr(meta, 'table_name', None) or entity_name.lower()
        data_attributes = [f for f in fields if f not in key_types and f not in auto_attributes]

        return cls(
            name=name,
            entity_class=model_class,
            partition_key=partition_key,
            sort_key=sort_key,
            key_types=key_types,
            gsis=gsis,
            auto_attributes=auto_attributes,
            data_attributes=data_attributes,
        )

    def key_schema(self) -> List[Dict[str, str]]:
        schema = [{'AttributeName': self.partition_key, 'KeyType': 'HASH'}]
        if self.sort_key:
            schema.append({'AttributeName': self.sort_key, 'KeyType': 'RANGE'})
        return schema

    def attribute_definitions(self) -> List[Dict[str, str]]:
        return [
            {'AttributeName': attr, 'AttributeType': attr_type}
            for attr, attr_type in self.key_types.items()
        ]

    def key_for(self, partition_value: Any, sort_value: Any = None) -> Dict[str, Any]:
        key = {self.partition_key: partition_value}
        if self.sort_key:
            if sort_value is None:
                raise ValidationError(f"Table '{self.name}' requires a value for sort key '{self.sort_key}'")
            key[self.sort_key] = sort_value
        return key

    def create_table_params(
        self,
        table_name: str,
        billing_mode: str = BILLING_PAY_PER_REQUEST,
        read_capacity: int = 5,
        write_capacity: int = 5
    ) -> Dict[str, Any]:
        """Build the boto3 ``create_table`` keyword arguments.

        Args:
            table_name: Physical table name
            billing_mode: PAY_PER_REQUEST or PROVISIONED
            read_capacity: Read capacity units (PROVISIONED only)
            write_capacity: Write capacity units (PROVISIONED only)
        """
        if billing_mode not in (BILLING_PAY_PER_REQUEST, BILLING_PROVISIONED):
            raise ValidationError(f"Unsupported billing mode: {billing_mode}")

        throughput = {'ReadCapacityUnits': read_capacity, 'WriteCapacityUnits': write_capacity}
        params: Dict[str, Any] = {
            'TableName': table_name,
            'KeySchema': self.key_schema(),
            'AttributeDefinitions': self.attribute_definitions(),
            'BillingMode': billing_mode,
        }
        if billing_mode == BILLING_PROVISIONED:
            params['ProvisionedThroughput'] = throughput

        if self.gsis:
            indexes = []
            for gsi in self.gsis:
                key_schema = [{'AttributeName': gsi.partition_key, 'KeyType': 'HASH'}]
                if gsi.sort_key:
                    key_schema.append({'AttributeName': gsi.sort_key, 'KeyType': 'RANGE'})
                if gsi.projection is None:
                    projection = {'ProjectionType': 'ALL'}
                else:
                    projection = {'ProjectionType': 'INCLUDE', 'NonKeyAttributes': list(gsi.projection)}
                index = {
                    'IndexName': gsi.name,
                    'KeySchema': key_schema,
                    'Projection': projection,
                }
                if billing_mode == BILLING_PROVISIONED:
                    index['ProvisionedThroughput'] = dict(throughput)
                indexes.append(index)
            params['GlobalSecondaryIndexes'] = indexes

        return params
