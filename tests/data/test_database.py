import datetime

import pytest
import pytz

from bundy.data.database import Employee, EmployeeDirectory, EventStore, FlagStore, TimeEntry
from bundy.utils.errors import TransientStoreError, ValidationError

from tests.helpers import at


def add_employee(name, org_id='org-1', **kwargs):
    return Employee.create(name=name, org_id=org_id, **kwargs)


def test_insert_returns_aware_utc_record(memory_db):
    alice = add_employee("Alice")
    stamp = at(2024, 1, 5, 9)

    entry = EventStore().insert(alice.id, 'in', stamp)

    assert entry.employee_id == alice.id
    assert entry.direction == 'in'
    assert entry.created_at == stamp
    assert entry.created_at.tzinfo is not None


def test_insert_rejects_unknown_direction(memory_db):
    alice = add_employee("Alice")

    with pytest.raises(ValidationError):
        EventStore().insert(alice.id, 'sideways')


def test_query_orders_and_filters(memory_db):
    store = EventStore()
    alice, bob = add_employee("Alice"), add_employee("Bob")
    store.insert(alice.id, 'in', at(2024, 1, 5, 9))
    store.insert(alice.id, 'out', at(2024, 1, 5, 17))
    store.insert(bob.id, 'in', at(2024, 1, 6, 9))

    desc = store.query(employee_ids=[alice.id])
    asc = store.query(employee_ids=[alice.id], order='asc')
    ranged = store.query(start=at(2024, 1, 5, 12), end=at(2024, 1, 6, 9))

    assert [e.direction for e in desc] == ['out', 'in']
    assert [e.direction for e in asc] == ['in', 'out']
    assert [(e.employee_id, e.direction) for e in ranged] == [(bob.id, 'in'), (alice.id, 'out')]


def test_query_with_empty_employee_set_returns_nothing(memory_db):
    alice = add_employee("Alice")
    EventStore().insert(alice.id, 'in')

    assert EventStore().query(employee_ids=[]) == []


def test_query_ties_broken_by_insertion_order(memory_db):
    store = EventStore()
    alice = add_employee("Alice")
    stamp = at(2024, 1, 5, 9)
    first = store.insert(alice.id, 'in', stamp)
    second = store.insert(alice.id, 'out', stamp)

    assert [e.id for e in store.query(order='desc')] == [second.id, first.id]


def test_naive_instants_are_treated_as_utc(memory_db):
    alice = add_employee("Alice")

    entry = EventStore().insert(alice.id, 'in', datetime.datetime(2024, 1, 5, 9))

    assert entry.created_at == datetime.datetime(2024, 1, 5, 9, tzinfo=pytz.UTC)
    assert TimeEntry.get_by_id(entry.id).created_at == entry.created_at


def test_directory_scopes_and_filters(memory_db):
    add_employee("Zed")
    add_employee("Amy")
    add_employee("Inactive", active=False)
    add_employee("Deleted", deleted_at=at(2024, 1, 1))
    add_employee("Elsewhere", org_id='org-2')
    directory = EmployeeDirectory('org-1')

    assert [e.name for e in directory.list_employees()] == ['Amy', 'Zed']
    assert len(directory.list_employees(active_only=False)) == 4


def test_directory_get_employee_respects_org(memory_db):
    other = add_employee("Elsewhere", org_id='org-2')

    assert EmployeeDirectory('org-1').get_employee(other.id) is None
    assert EmployeeDirectory('org-2').get_employee(other.id).name == "Elsewhere"


def test_flag_store_round_trip(memory_db):
    flags = FlagStore()

    assert flags.get('auto_clockout.last_fired_date') is None
    flags.set('auto_clockout.last_fired_date', '2024-03-04')
    flags.set('auto_clockout.last_fired_date', '2024-03-05')

    assert flags.get('auto_clockout.last_fired_date') == '2024-03-05'


def test_store_errors_become_transient(memory_db):
    TimeEntry.drop_table()

    with pytest.raises(TransientStoreError):
        EventStore().query()
