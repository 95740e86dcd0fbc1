"""
Status derivation from the time entry log.

A status is never stored: it is recomputed from whatever snapshot of the log
the caller passes in.
"""
import datetime
import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Optional

from ..data.records import DIRECTION_IN, DIRECTION_OUT

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmployeeStatus:
    """Derived clock state of one employee"""
    status: str
    last_entry_at: Optional[datetime.datetime] = None

    @property
    def is_in(self) -> bool:
        return self.status == DIRECTION_IN


def _entry_sort_key(entry):
    # Equal timestamps resolve to the later insertion
    return (entry.created_at, entry.id)


def derive_statuses(employees: Iterable, entries: Iterable) -> Dict[int, EmployeeStatus]:
    """
    Derive current status for every employee.

    Args:
        employees: objects with an ``id``
        entries: time entries with ``employee_id``, ``direction``, ``created_at`` and ``id``

    Returns:
        Mapping of employee id to EmployeeStatus. Employees without entries are
        'out' with no last entry.
    """
    latest = {}
    for entry in entries:
        current = latest.get(entry.employee_id)
        if current is None or _entry_sort_key(entry) > _entry_sort_key(current):
            latest[entry.employee_id] = entry

    statuses = {}
    for employee in employees:
        entry = latest.get(employee.id)
        if entry is None:
            statuses[employee.id] = EmployeeStatus(DIRECTION_OUT, None)
        else:
            statuses[employee.id] = EmployeeStatus(entry.direction, entry.created_at)
    return statuses


def next_direction(status: EmployeeStatus) -> str:
    """Direction a toggle writes for an employee currently in status"""
    return DIRECTION_OUT if status.is_in else DIRECTION_IN


def load_statuses(directory, store, employees=None) -> Dict[int, EmployeeStatus]:
    """Fetch active employees (unless given) and their entries, then derive statuses."""
    if employees is None:
        employees = directory.list_employees(active_only=True)
    entries = store.query(employee_ids=[e.id for e in employees], order='desc')
    logger.debug(f"Derived statuses for {len(employees)} employees from {len(entries)} entries")
    return derive_statuses(employees, entries)
