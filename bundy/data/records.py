"""
Plain value objects handed from the data layer to the services.

Services never see peewee model instances, so they can be exercised with
hand-built records.
"""
import datetime
from dataclasses import dataclass
from typing import Optional

DIRECTION_IN = 'in'
DIRECTION_OUT = 'out'
DIRECTIONS = (DIRECTION_IN, DIRECTION_OUT)


@dataclass(frozen=True)
class EmployeeRecord:
    id: int
    name: str
    active: bool = True
    deleted_at: Optional[datetime.datetime] = None
    org_id: Optional[str] = None

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None


@dataclass(frozen=True)
class TimeEntryRecord:
    """One immutable clock event. created_at is an aware UTC instant."""
    id: int
    employee_id: int
    direction: str
    created_at: datetime.datetime
