from bundy.data.records import EmployeeRecord
from bundy.services.board_service import LocalDayTracker, build_board, filter_employees, search_summary
from bundy.services.state_service import StateService
from bundy.services.status_service import EmployeeStatus

from tests.helpers import SYDNEY, FakeMonotonic, at

STAFF = [EmployeeRecord(id=1, name="Alice Smith"), EmployeeRecord(id=2, name="Bob Jones")]


def test_search_is_case_insensitive_substring():
    assert [e.id for e in filter_employees(STAFF, 'SMI')] == [1]
    assert filter_employees(STAFF, '  ') == STAFF


def test_search_summary():
    assert search_summary(1, 2, 'ali') == 'Showing 1 of 2 employees'
    assert search_summary(2, 2, '') == ''


def test_board_rows_reflect_state():
    state = StateService(monotonic=FakeMonotonic())
    state.refresh({1: EmployeeStatus('in', at(2024, 1, 5, 9)), 2: EmployeeStatus('out')})
    state.begin_toggle(2)

    rows = build_board(STAFF, state, SYDNEY, at(2024, 1, 5, 12))

    assert rows[0].status_label == 'Clocked In'
    assert rows[0].button_label == 'Clock Out'
    assert rows[0].last_action == 'Last action: 9:00 am'
    assert rows[1].status == 'in'
    assert rows[1].button_label == 'Processing...'


def test_day_tracker_flags_local_midnight_only():
    tracker = LocalDayTracker()

    assert not tracker.changed(at(2024, 1, 5, 23, 59, 59), SYDNEY)
    assert not tracker.changed(at(2024, 1, 5, 23, 59, 59), SYDNEY)
    assert tracker.changed(at(2024, 1, 6, 0, 0, 1), SYDNEY)
    assert not tracker.changed(at(2024, 1, 6, 9), SYDNEY)


def test_last_action_label_changes_after_midnight():
    state = StateService(monotonic=FakeMonotonic())
    state.refresh({1: EmployeeStatus('in', at(2024, 1, 5, 9, 15))})

    before = build_board(STAFF[:1], state, SYDNEY, at(2024, 1, 5, 23, 59))
    after = build_board(STAFF[:1], state, SYDNEY, at(2024, 1, 6, 0, 1))

    assert before[0].last_action != after[0].last_action
