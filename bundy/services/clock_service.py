"""
Clock service for handling clock in/out business logic.
"""
import logging
from dataclasses import dataclass
from typing import Callable, Optional

from .status_service import derive_statuses, next_direction
from ..utils.errors import CooldownActiveError, TransientStoreError
from ..utils.timezone import utcnow

logger = logging.getLogger(__name__)

RETRY_MESSAGE = "Failed to clock in/out. Please try again."
WAIT_MESSAGE = "Please wait..."


@dataclass
class ClockResult:
    """Result of a clock action"""
    success: bool
    action: str
    employee: object
    entry: Optional[object] = None
    error: Optional[str] = None
    retryable: bool = False


class ClockService:
    """Handles clock in/out business logic"""

    def __init__(self, store, state_service=None, now: Callable = utcnow):
        """
        Initialize clock service.

        Args:
            store: event store to append entries to
            state_service: optional StateService holding the kiosk's optimistic view;
                without one the current status is read from the store
            now: clock returning the current aware instant
        """
        self.store = store
        self.state = state_service
        self.now = now

    def clock_in_out(self, employee) -> ClockResult:
        """
        Write the opposite of the employee's current status.

        Returns:
            ClockResult with action details. Failures are reported, not raised.
        """
        started = self.begin(employee)
        if isinstance(started, ClockResult):
            return started
        return self.finish(employee, started)

    def begin(self, employee):
        """
        First half of a toggle: decide the direction and, with a state
        service, show it optimistically before anything is written.

        Returns:
            The direction to write, or a failed ClockResult.
        """
        try:
            if self.state:
                return self.state.begin_toggle(employee.id)
            entries = self.store.query(employee_ids=[employee.id], order='desc')
            return next_direction(derive_statuses([employee], entries)[employee.id])
        except CooldownActiveError:
            return ClockResult(success=False, action='', employee=employee, error=WAIT_MESSAGE)
        except TransientStoreError as e:
            logger.error(f"Could not read status for {employee.name}: {e}")
            return ClockResult(success=False, action='', employee=employee,
                               error=RETRY_MESSAGE, retryable=True)

    def finish(self, employee, action: str) -> ClockResult:
        """Second half of a toggle: append the entry, then confirm or revert."""
        try:
            entry = self.store.insert(employee.id, action, self.now())
        except TransientStoreError as e:
            logger.error(f"Error performing clock action for {employee.name}: {e}")
            if self.state:
                self.state.revert_toggle(employee.id, RETRY_MESSAGE)
            return ClockResult(success=False, action=action, employee=employee,
                               error=RETRY_MESSAGE, retryable=True)

        if self.state:
            self.state.confirm_toggle(employee.id, entry.created_at)
        logger.info(f"Clocked {action.upper()} - {employee.name}")
        return ClockResult(success=True, action=action, employee=employee, entry=entry)
