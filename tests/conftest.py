import pytest

from bundy.data.database import initialize_db, close_db
from bundy.data.records import EmployeeRecord, TimeEntryRecord


class EntryFactory:
    def __init__(self):
        self._next_id = 1

    def __call__(self, employee_id, direction, created_at):
        entry = TimeEntryRecord(id=self._next_id, employee_id=employee_id,
                                direction=direction, created_at=created_at)
        self._next_id += 1
        return entry


@pytest.fixture
def make_entry():
    return EntryFactory()


@pytest.fixture
def employees():
    return [
        EmployeeRecord(id=1, name="Alice Smith"),
        EmployeeRecord(id=2, name="bob jones"),
        EmployeeRecord(id=3, name="Carol White"),
    ]


@pytest.fixture
def memory_db():
    initialize_db(":memory:")
    yield
    close_db()
