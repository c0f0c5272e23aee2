"""
Burglar Routine Tests

The burglar rings, waits a bounded time, and decides in the notify callback.
"""

import threading
import time

from rendezvous.house.house import House
from rendezvous.scenarios.burglar import burglar_visit, check_burglable
from rendezvous.sync.group import WaitResult


def test_check_burglable_reports_empty_house(fast_config):
    house = House(name="empty", config=fast_config)
    house.lock()
    decided = threading.Event()
    verdict = []

    def _callback(burglable):
        verdict.append(burglable)
        decided.set()

    report = check_burglable(house, _callback, config=fast_config)

    assert report.wait_result is WaitResult.COMPLETED
    assert decided.wait(2.0)
    assert verdict == [True]


def test_check_burglable_reports_occupied_house(fast_config):
    house = House(name="occupied", config=fast_config)
    decided = threading.Event()
    verdict = []

    def _callback(burglable):
        verdict.append(burglable)
        decided.set()

    check_burglable(house, _callback, config=fast_config)

    assert decided.wait(2.0)
    assert verdict == [False]


def test_visit_to_locked_house_trips_the_alarm(fast_config):
    """My house: window opened, house locked, burglar climbs in, alarm sounds."""
    house = House(name="my-house", config=fast_config)
    house.open_window()
    house.lock()

    report = burglar_visit(house, config=fast_config)

    assert report.burglable is True
    assert report.broke_in is True
    assert report.alarm_triggered is True
    assert house.alarm_alerts == 1


def test_visit_to_occupied_house_leaves_quickly(fast_config):
    house = House(name="someone-home", config=fast_config)

    report = burglar_visit(house, config=fast_config)

    assert report.burglable is False
    assert report.broke_in is False
    assert report.alarm_triggered is False
    assert house.windows_closed is True


def test_visit_decision_waits_for_late_answer(fast_config):
    """A slow occupant still counts: the decision is made once the ring resolves."""
    house = House(name="slow-owner", response_delay=0.2, config=fast_config)

    report = burglar_visit(house, timeout=0.05, config=fast_config)

    assert report.wait_result is WaitResult.TIMED_OUT
    assert report.burglable is False
    assert report.broke_in is False


def test_unarmed_house_broken_into_quietly(fast_config, caplog):
    """Locked house with the alarm switched off: the burglar gets in unnoticed."""
    house = House(name="forgetful", config=fast_config)
    house.lock()
    house._alarm_system().deactivate()

    with caplog.at_level("WARNING"):
        report = burglar_visit(house, config=fast_config)

    assert report.broke_in is True
    assert report.alarm_triggered is False
    assert any("without tripping an alarm" in r.getMessage() for r in caplog.records)


def test_visit_walks_away_when_no_decision_comes(fast_config, caplog):
    """
    INVARIANT: the burglar never waits forever for a decision; he reports an undecided visit.
    """
    house = House(name="very-slow-owner", response_delay=1.0, config=fast_config)

    start = time.monotonic()
    with caplog.at_level("WARNING"):
        report = burglar_visit(house, timeout=0.02, config=fast_config, decision_timeout=0.05)
    elapsed = time.monotonic() - start

    assert elapsed < 0.5
    assert report.decided is False
    assert report.broke_in is False
    assert report.wait_result is WaitResult.TIMED_OUT
    assert any("walking away" in r.getMessage() for r in caplog.records)
