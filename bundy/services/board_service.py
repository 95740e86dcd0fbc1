"""
Kiosk status board: which employees to show and how each card reads.
"""
from dataclasses import dataclass
from typing import List, Optional

from .state_service import OPTIMISTIC_PENDING
from ..data.records import DIRECTION_IN
from ..utils.timezone import format_last_action, local_date


@dataclass(frozen=True)
class BoardRow:
    employee: object
    status: str
    last_action: str
    busy: bool = False
    cooling_down: bool = False
    error: Optional[str] = None

    @property
    def status_label(self) -> str:
        return 'Clocked In' if self.status == DIRECTION_IN else 'Clocked Out'

    @property
    def button_label(self) -> str:
        if self.busy:
            return 'Processing...'
        if self.cooling_down:
            return 'Please wait...'
        return 'Clock Out' if self.status == DIRECTION_IN else 'Clock In'


def filter_employees(employees, search: str = '') -> list:
    """Case-insensitive substring match on the employee name"""
    term = (search or '').strip().lower()
    if not term:
        return list(employees)
    return [e for e in employees if term in e.name.lower()]


def search_summary(shown: int, total: int, search: str = '') -> str:
    if not (search or '').strip():
        return ''
    return f"Showing {shown} of {total} employees"


def build_board(employees, state_service, tz, now, search: str = '') -> List[BoardRow]:
    """Rows for the visible employees, using the state service's displayed status."""
    rows = []
    for employee in filter_employees(employees, search):
        view = state_service.view(employee.id)
        rows.append(BoardRow(
            employee=employee,
            status=view.displayed,
            last_action=format_last_action(view.last_entry_at, now, tz),
            busy=view.phase == OPTIMISTIC_PENDING,
            cooling_down=state_service.is_cooling_down(employee.id),
            error=view.error,
        ))
    return rows


class LocalDayTracker:
    """Remembers the last local date seen so the board can be redrawn after midnight"""

    def __init__(self):
        self.current = None

    def changed(self, now, tz) -> bool:
        today = local_date(now, tz)
        if today == self.current:
            return False
        first = self.current is None
        self.current = today
        return not first
