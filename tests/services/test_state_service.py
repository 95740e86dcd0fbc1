import pytest

from bundy.services.state_service import IDLE, OPTIMISTIC_PENDING, REVERTING, StateService
from bundy.services.status_service import EmployeeStatus
from bundy.utils.errors import CooldownActiveError

from tests.helpers import FakeMonotonic


def make_service(cooldown=2.0):
    clock = FakeMonotonic()
    return StateService(cooldown_seconds=cooldown, monotonic=clock), clock


def test_begin_toggle_shows_opposite_status_immediately():
    service, _ = make_service()
    service.refresh({1: EmployeeStatus('out')})

    direction = service.begin_toggle(1)

    assert direction == 'in'
    assert service.displayed_status(1) == 'in'
    assert service.view(1).phase == OPTIMISTIC_PENDING


def test_confirm_starts_cooldown():
    service, clock = make_service()
    service.begin_toggle(1)
    service.confirm_toggle(1)

    assert service.view(1).confirmed == 'in'
    assert service.view(1).phase == IDLE
    with pytest.raises(CooldownActiveError):
        service.begin_toggle(1)

    clock.advance(2.0)
    assert service.begin_toggle(1) == 'out'


def test_second_toggle_while_pending_is_rejected():
    service, _ = make_service()
    service.begin_toggle(1)

    assert not service.can_toggle(1)
    with pytest.raises(CooldownActiveError):
        service.begin_toggle(1)


def test_revert_falls_back_to_confirmed_status():
    service, _ = make_service()
    service.refresh({1: EmployeeStatus('in')})
    service.begin_toggle(1)

    service.revert_toggle(1, "Failed")

    view = service.view(1)
    assert view.displayed == 'in'
    assert view.phase == REVERTING
    assert view.error == "Failed"
    assert service.can_toggle(1)


def test_refresh_clears_reverting_state():
    service, _ = make_service()
    service.begin_toggle(1)
    service.revert_toggle(1, "Failed")

    service.refresh({1: EmployeeStatus('out')})

    assert service.view(1).phase == IDLE
    assert service.view(1).error is None


def test_refresh_keeps_pending_override():
    service, _ = make_service()
    service.refresh({1: EmployeeStatus('out')})
    service.begin_toggle(1)

    service.refresh({1: EmployeeStatus('out')})

    assert service.displayed_status(1) == 'in'


def test_refresh_drops_employees_no_longer_listed():
    service, _ = make_service()
    service.refresh({1: EmployeeStatus('in'), 2: EmployeeStatus('out')})

    service.refresh({2: EmployeeStatus('out')})

    assert service.displayed_status(1) == 'out'
