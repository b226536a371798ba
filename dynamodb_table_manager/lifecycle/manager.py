"""
Table Lifecycle Manager

Ensures that every registered schema has an ACTIVE table before the
application reports ready, and optionally deletes those tables on shutdown.

Startup is all-or-nothing: a table that cannot be created or verified
raises ``TableInitializationError``. Teardown is best effort: failures are
logged and the remaining tables are still attempted.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Mapping, Optional, Type, Union

from pydantic import BaseModel

from ..config import EntityScanConfig
from ..core.table_admin import TableAdminClient
from ..exceptions import TableDeletionError, TableInitializationError
from ..models.schema import EntitySchema
from .probes import MAX_WAIT_ATTEMPTS, WAIT_INTERVAL_SECONDS, ActivationPoller, table_exists

logger = logging.getLogger(__name__)

SchemaSource = Union[EntitySchema, Type[BaseModel]]


class TableLifecycleManager:
    """
    Owns the set of managed tables.

    ``initialize()`` runs once at startup and blocks until every table is
    ACTIVE. ``shutdown()`` runs once at orderly shutdown and deletes the
    managed tables only when ``ddl_enabled`` is True.

    Usage:
        with TableLifecycleManager(admin, registry) as manager:
            serve()
    """

    def __init__(
        self,
        admin: TableAdminClient,
        registry: Mapping[str, SchemaSource],
        ddl_enabled: bool = False,
        max_wait_attempts: int = MAX_WAIT_ATTEMPTS,
        wait_interval_seconds: float = WAIT_INTERVAL_SECONDS,
        max_workers: int = 1,
        stop_event: Optional[threading.Event] = None
    ):
        """Initialize the manager.

        Args:
            admin: Table administration client
            registry: Physical table name -> EntitySchema (or entity class)
            ddl_enabled: Delete managed tables on shutdown
            max_wait_attempts: Status checks per table before timing out
            wait_interval_seconds: Delay between status checks
            max_workers: Tables initialized concurrently (1 means sequential)
            stop_event: Event that aborts activation polling when set
        """
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self.admin = admin
        self.registry = registry
        self._ddl_enabled = bool(ddl_enabled)
        self.max_workers = max_workers
        self._stop_event = stop_event or threading.Event()
        self.poller = ActivationPoller(
            admin,
            max_attempts=max_wait_attempts,
            interval_seconds=wait_interval_seconds,
            stop_event=self._stop_event
        )
        self._managed: Dict[str, EntitySchema] = {}
        self._lock = threading.Lock()
        self._ready = False
        self._shut_down = False

    @classmethod
    def from_config(
        cls,
        admin: TableAdminClient,
        registry: Mapping[str, SchemaSource],
        entity_config: EntityScanConfig,
        stop_event: Optional[threading.Event] = None
    ) -> 'TableLifecycleManager':
        return cls(
            admin,
            registry,
            ddl_enabled=entity_config.ddl_enabled,
            max_wait_attempts=entity_config.max_wait_attempts,
            wait_interval_seconds=entity_config.wait_interval_seconds,
            max_workers=entity_config.max_workers,
            stop_event=stop_event
        )

    @property
    def ddl_enabled(self) -> bool:
        return self._ddl_enabled

    @property
    def is_ready(self) -> bool:
        """True once every registered table has been created or verified."""
        return self._ready

    @property
    def managed_tables(self) -> Dict[str, EntitySchema]:
        """Snapshot of the managed tables."""
        with self._lock:
            return dict(self._managed)

    def request_stop(self) -> None:
        """Abort any activation poll in progress."""
        self._stop_event.set()

    # -------------------------------------------------------------------------
    # Initialization
    # -------------------------------------------------------------------------

    def initialize(self) -> Dict[str, EntitySchema]:
        """Create missing tables and wait for them to become active.

        Tables that already exist are tracked without being re-created or
        re-polled.

        Calling it again after ``shutdown()`` starts a new cycle: the stop
        signal raised by the previous shutdown is cleared and the next
        ``shutdown()`` tears down again.

        Returns:
            The managed tables

        Raises:
            TableInitializationError: If any table could not be created or verified
        """
        if self._shut_down:
            logger.info("Re-initializing tables after a previous shutdown")
            self._stop_event.clear()
            self._shut_down = False

        self._ready = False
        entries = list(self.registry.items())

        if self.max_workers > 1 and len(entries) > 1:
            self._initialize_concurrently(entries)
        else:
            for table_name, source in entries:
                self._ensure_table(table_name, source)

        self._ready = True
        logger.info(f"Initialized {len(self._managed)} DynamoDB tables")
        return self.managed_tables

    def _initialize_concurrently(self, entries) -> None:
        workers = min(self.max_workers, len(entries))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="table-init") as executor:
            futures = [
                executor.submit(self._ensure_table, table_name, source)
                for table_name, source in entries
            ]
        # All futures are done once the executor exits.
        failures = [f.exception() for f in futures if f.exception() is not None]
        if failures:
            if len(failures) > 1:
                summary = ", ".join(f"{f.table_name} ({f.root_cause})" for f in failures)
                logger.error(f"{len(failures)} of {len(entries)} tables failed to initialize: {summary}")
            raise failures[0]

    def _ensure_table(self, table_name: str, source: SchemaSource) -> None:
        try:
            schema = self._resolve_schema(source)
            if not table_exists(self.admin, table_name):
                logger.info(f"Creating DynamoDB table: {table_name}")
                self.admin.create_table(table_name, schema)
                self.poller.wait_until_active(table_name)
                logger.info(f"Successfully created DynamoDB table: {table_name}")
            else:
                logger.info(f"Table {table_name} already exists, tracking for management")

            with self._lock:
                self._managed[table_name] = schema
        except Exception as e:
            logger.error(f"Failed to create/verify table {table_name}: {e}", exc_info=True)
            raise TableInitializationError(table_name, original_error=e) from e

    @staticmethod
    def _resolve_schema(source: SchemaSource) -> EntitySchema:
        if isinstance(source, EntitySchema):
            return source
        return EntitySchema.from_model(source)

    # -------------------------------------------------------------------------
    # Teardown
    # -------------------------------------------------------------------------

    def shutdown(self) -> List[TableDeletionError]:
        """Delete managed tables if DDL operations are enabled.

        Never raises. Each table is attempted independently.

        Returns:
            The deletion failures, empty when everything succeeded or DDL is disabled
        """
        if self._shut_down:
            logger.debug("Shutdown already ran, nothing to do")
            return []
        self._shut_down = True
        self._ready = False
        self._stop_event.set()

        if not self._ddl_enabled:
            logger.info("DDL operations are disabled. Skipping table deletion.")
            return []

        failures: List[TableDeletionError] = []
        for table_name in self.managed_tables:
            try:
                if table_exists(self.admin, table_name):
                    logger.info(f"Deleting DynamoDB table: {table_name}")
                    self.admin.delete_table(table_name)
                    logger.info(f"Successfully deleted DynamoDB table: {table_name}")
                with self._lock:
                    self._managed.pop(table_name, None)
            except Exception as e:
                failure = TableDeletionError(table_name, original_error=e)
                logger.warning(f"Failed to delete table {table_name}: {e}")
                failures.append(failure)
        return failures

    def __enter__(self) -> 'TableLifecycleManager':
        self.initialize()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.shutdown()
        return False
