import datetime

import pytz

from bundy.data.records import TimeEntryRecord
from bundy.utils.errors import TransientStoreError

SYDNEY = pytz.timezone("Australia/Sydney")


def at(year, month, day, hour=0, minute=0, second=0, tz=SYDNEY):
    """Aware UTC instant for a wall-clock time in tz"""
    local = tz.localize(datetime.datetime(year, month, day, hour, minute, second))
    return local.astimezone(pytz.UTC)


class FakeStore:
    def __init__(self, entries=None, fail_insert_for=(), fail_query=False):
        self.entries = list(entries or [])
        self.fail_insert_for = set(fail_insert_for)
        self.fail_query = fail_query
        self.insert_calls = []

    def insert(self, employee_id, direction, created_at=None):
        self.insert_calls.append((employee_id, direction, created_at))
        if employee_id in self.fail_insert_for:
            raise TransientStoreError(f"insert failed for {employee_id}")
        entry = TimeEntryRecord(
            id=len(self.entries) + 1000,
            employee_id=employee_id,
            direction=direction,
            created_at=created_at,
        )
        self.entries.append(entry)
        return entry

    def query(self, employee_ids=None, start=None, end=None, order='desc'):
        if self.fail_query:
            raise TransientStoreError("query failed")
        result = [
            e for e in self.entries
            if (employee_ids is None or e.employee_id in employee_ids)
            and (start is None or e.created_at >= start)
            and (end is None or e.created_at <= end)
        ]
        return sorted(result, key=lambda e: (e.created_at, e.id), reverse=(order == 'desc'))


class FakeDirectory:
    def __init__(self, employees, fail=False):
        self.employees = list(employees)
        self.fail = fail

    def list_employees(self, active_only=True):
        if self.fail:
            raise TransientStoreError("directory unavailable")
        return [e for e in self.employees if not active_only or (e.active and e.deleted_at is None)]


class FakeFlagStore:
    def __init__(self, values=None, fail_set=False, fail_get=False):
        self.values = dict(values or {})
        self.fail_set = fail_set
        self.fail_get = fail_get
        self.set_calls = []

    def get(self, key):
        if self.fail_get:
            raise TransientStoreError("flag read failed")
        return self.values.get(key)

    def set(self, key, value):
        self.set_calls.append((key, value))
        if self.fail_set:
            raise TransientStoreError("flag write failed")
        self.values[key] = value


class FakeMonotonic:
    def __init__(self, start=100.0):
        self.value = start

    def __call__(self):
        return self.value

    def advance(self, seconds):
        self.value += seconds
