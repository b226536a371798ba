"""
Existence probe and activation poller.

Both only read remote state through ``TableAdminClient``; neither mutates
anything.
"""

import logging
import threading
from typing import Optional

from ..core.table_admin import TableAdminClient, TableStatus
from ..exceptions import (
    NotFoundError,
    TableActivationCancelledError,
    TableActivationTimeoutError,
    TableQueryError,
)

logger = logging.getLogger(__name__)

MAX_WAIT_ATTEMPTS = 60
WAIT_INTERVAL_SECONDS = 2.0


def table_exists(admin: TableAdminClient, table_name: str) -> bool:
    """Check whether a table exists, in any status.

    Returns:
        False only when DescribeTable reports the table as not found

    Raises:
        ValueError: If ``table_name`` is empty
        TableQueryError: For any other failure of the describe call
    """
    if not table_name:
        raise ValueError("table_name must be a non-empty string")
    try:
        admin.describe_table(table_name)
        return True
    except NotFoundError:
        return False
    except Exception as e:
        raise TableQueryError(f"Failed to describe table {table_name}: {e}", table_name, original_error=e) from e


class ActivationPoller:
    """
    Blocks until a table reports ACTIVE or the attempt budget runs out.

    Each attempt queries the status once. Attempts that fail with a query
    error are logged and count against the same budget. After every
    attempt that does not observe ACTIVE the poller waits
    ``interval_seconds`` on ``stop_event``, so the worst case is
    ``max_attempts * interval_seconds`` and a stop request ends the wait
    immediately.
    """

    def __init__(
        self,
        admin: TableAdminClient,
        max_attempts: int = MAX_WAIT_ATTEMPTS,
        interval_seconds: float = WAIT_INTERVAL_SECONDS,
        stop_event: Optional[threading.Event] = None
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if interval_seconds < 0:
            raise ValueError("interval_seconds cannot be negative")
        self.admin = admin
        self.max_attempts = max_attempts
        self.interval_seconds = interval_seconds
        self.stop_event = stop_event or threading.Event()

    def wait_until_active(self, table_name: str) -> int:
        """Poll ``table_name`` until it is ACTIVE.

        Returns:
            Number of attempts used (1 when the first check saw ACTIVE)

        Raises:
            TableActivationTimeoutError: If ACTIVE was never observed
            TableActivationCancelledError: If a stop was requested mid-poll
        """
        logger.info(f"Waiting for table {table_name} to become active...")
        last_status = None

        for attempt in range(1, self.max_attempts + 1):
            if self.stop_event.is_set():
                raise TableActivationCancelledError(table_name, attempt - 1)

            try:
                status = self.admin.get_table_status(table_name)
            except Exception as e:
                logger.warning(
                    f"Error while waiting for table {table_name} "
                    f"(attempt {attempt}/{self.max_attempts}): {e}"
                )
            else:
                if status == TableStatus.ACTIVE:
                    logger.info(f"Table {table_name} is now active")
                    return attempt
                last_status = status.value
                logger.debug(
                    f"Table {table_name} status: {status.value}, waiting... "
                    f"(attempt {attempt}/{self.max_attempts})"
                )

            if self.stop_event.wait(self.interval_seconds):
                raise TableActivationCancelledError(table_name, attempt)

        raise TableActivationTimeoutError(table_name, self.max_attempts, self.interval_seconds, last_status)
