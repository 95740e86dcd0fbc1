from bundy.data.records import EmployeeRecord
from bundy.services.status_service import EmployeeStatus, derive_statuses, load_statuses, next_direction

from tests.helpers import FakeDirectory, FakeStore, at


def test_last_entry_out_means_out(make_entry):
    employee = EmployeeRecord(id=1, name="A")
    entries = [make_entry(1, 'in', at(2024, 1, 5, 9)), make_entry(1, 'out', at(2024, 1, 5, 17))]

    status = derive_statuses([employee], entries)[1]

    assert status.status == 'out'
    assert status.last_entry_at == at(2024, 1, 5, 17)


def test_single_in_entry_means_in(make_entry):
    employee = EmployeeRecord(id=1, name="A")

    status = derive_statuses([employee], [make_entry(1, 'in', at(2024, 1, 5, 9))])[1]

    assert status.status == 'in'
    assert status.is_in


def test_no_entries_defaults_to_out():
    statuses = derive_statuses([EmployeeRecord(id=7, name="A")], [])

    assert statuses[7] == EmployeeStatus('out', None)


def test_entry_order_in_input_does_not_matter(make_entry):
    employee = EmployeeRecord(id=1, name="A")
    later = make_entry(1, 'out', at(2024, 1, 5, 17))
    earlier = make_entry(1, 'in', at(2024, 1, 5, 9))

    assert derive_statuses([employee], [later, earlier])[1].status == 'out'
    assert derive_statuses([employee], [earlier, later])[1].status == 'out'


def test_equal_timestamps_resolve_to_highest_id(make_entry):
    employee = EmployeeRecord(id=1, name="A")
    stamp = at(2024, 1, 5, 9)
    first = make_entry(1, 'in', stamp)
    second = make_entry(1, 'out', stamp)

    assert derive_statuses([employee], [second, first])[1].status == 'out'
    assert derive_statuses([employee], [first, second])[1].status == 'out'


def test_entries_of_other_employees_are_ignored(make_entry, employees):
    entries = [make_entry(2, 'in', at(2024, 1, 5, 9)), make_entry(99, 'in', at(2024, 1, 5, 9))]

    statuses = derive_statuses(employees, entries)

    assert statuses[1].status == 'out'
    assert statuses[2].status == 'in'
    assert 99 not in statuses


def test_derivation_is_repeatable(make_entry, employees):
    entries = [
        make_entry(1, 'in', at(2024, 1, 5, 9)),
        make_entry(3, 'in', at(2024, 1, 5, 10)),
        make_entry(3, 'out', at(2024, 1, 5, 12)),
    ]

    assert derive_statuses(employees, entries) == derive_statuses(employees, entries)


def test_next_direction_flips_status():
    assert next_direction(EmployeeStatus('in')) == 'out'
    assert next_direction(EmployeeStatus('out')) == 'in'


def test_load_statuses_reads_directory_and_store(make_entry, employees):
    store = FakeStore([make_entry(1, 'in', at(2024, 1, 5, 9))])

    statuses = load_statuses(FakeDirectory(employees), store)

    assert set(statuses) == {1, 2, 3}
    assert statuses[1].is_in
