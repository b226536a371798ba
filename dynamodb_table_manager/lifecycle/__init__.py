"""
Table lifecycle: schema registry, existence/activation probes and the
manager that ties them together.
"""

from .manager import TableLifecycleManager
from .probes import MAX_WAIT_ATTEMPTS, WAIT_INTERVAL_SECONDS, ActivationPoller, table_exists
from .registry import SchemaRegistry, discover_entities

__all__ = [
    "ActivationPoller",
    "MAX_WAIT_ATTEMPTS",
    "SchemaRegistry",
    "TableLifecycleManager",
    "WAIT_INTERVAL_SECONDS",
    "discover_entities",
    "table_exists",
]
