"""
Client-visible clock state for the kiosk.

Each employee card shows a status built from the last confirmed status, an
optional optimistic override while a write is in flight, and a cooldown that
blocks rapid repeat toggles.
"""
import time
import logging
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from .status_service import EmployeeStatus
from ..data.records import DIRECTION_IN, DIRECTION_OUT
from ..utils.errors import CooldownActiveError

logger = logging.getLogger(__name__)

IDLE = 'idle'
OPTIMISTIC_PENDING = 'optimistic_pending'
REVERTING = 'reverting'


@dataclass
class ToggleView:
    """View state of one employee card"""
    confirmed: str = DIRECTION_OUT
    last_entry_at: Optional[object] = None
    override: Optional[str] = None
    phase: str = IDLE
    cooldown_until: float = 0.0
    error: Optional[str] = None

    @property
    def displayed(self) -> str:
        return self.override or self.confirmed


class StateService:
    """Manages optimistic toggle state and cooldowns per employee"""

    def __init__(self, cooldown_seconds: float = 2.0, monotonic: Callable[[], float] = time.monotonic):
        self.cooldown_seconds = cooldown_seconds
        self._monotonic = monotonic
        self._views: Dict[int, ToggleView] = {}

    def view(self, employee_id: int) -> ToggleView:
        return self._views.setdefault(employee_id, ToggleView())

    def refresh(self, statuses: Dict[int, EmployeeStatus]):
        """Replace confirmed statuses after a re-fetch of the log"""
        for employee_id, status in statuses.items():
            view = self.view(employee_id)
            view.confirmed = status.status
            view.last_entry_at = status.last_entry_at
            if view.phase == REVERTING:
                view.phase = IDLE
                view.error = None
        for employee_id in list(self._views):
            if employee_id not in statuses and self._views[employee_id].phase != OPTIMISTIC_PENDING:
                del self._views[employee_id]

    def displayed_status(self, employee_id: int) -> str:
        return self.view(employee_id).displayed

    def is_cooling_down(self, employee_id: int) -> bool:
        return self._monotonic() < self.view(employee_id).cooldown_until

    def can_toggle(self, employee_id: int) -> bool:
        view = self.view(employee_id)
        return view.phase != OPTIMISTIC_PENDING and not self.is_cooling_down(employee_id)

    def begin_toggle(self, employee_id: int) -> str:
        """
        Start a toggle and show the opposite status immediately.

        Returns:
            The direction to write.

        Raises:
            CooldownActiveError: a write is in flight or the cooldown has not expired
        """
        if not self.can_toggle(employee_id):
            logger.debug(f"Toggle suppressed for employee {employee_id}")
            raise CooldownActiveError(f"Toggle for employee {employee_id} is cooling down")
        view = self.view(employee_id)
        direction = DIRECTION_OUT if view.displayed == DIRECTION_IN else DIRECTION_IN
        view.override = direction
        view.phase = OPTIMISTIC_PENDING
        view.error = None
        return direction

    def confirm_toggle(self, employee_id: int, created_at=None):
        """The write succeeded: the override becomes the confirmed status."""
        view = self.view(employee_id)
        if view.override is not None:
            view.confirmed = view.override
        if created_at is not None:
            view.last_entry_at = created_at
        view.override = None
        view.phase = IDLE
        view.cooldown_until = self._monotonic() + self.cooldown_seconds

    def revert_toggle(self, employee_id: int, error: str):
        """The write failed: drop the override and keep the error until the next refresh."""
        view = self.view(employee_id)
        view.override = None
        view.phase = REVERTING
        view.error = error
        logger.warning(f"Reverted optimistic status for employee {employee_id}: {error}")
