"""
Doorbell Rendezvous Tests

The coordinator rings, waits (bounded), and a notify callback sees the
resolved DoorbellEvent whether or not the wait timed out.
"""

import threading

from rendezvous.house.doorbell import DoorbellEvent, ring_and_wait
from rendezvous.house.house import House
from rendezvous.sync.group import RendezvousGroup, WaitResult


def _capture():
    resolved = threading.Event()
    seen = {}

    def _on_resolved(event):
        seen["event"] = event
        resolved.set()

    return resolved, seen, _on_resolved


def test_doorbell_event_defaults():
    event = DoorbellEvent()
    assert event.answered is False
    assert event.answered_at is None

    event.mark_answered()
    assert event.answered is True
    assert event.answered_at is not None


def test_occupied_house_answers_before_timeout(fast_config):
    house = House(name="home", config=fast_config)
    resolved, seen, on_resolved = _capture()

    report = ring_and_wait(house, on_resolved=on_resolved, config=fast_config)

    assert report.wait_result is WaitResult.COMPLETED
    assert report.answered is True
    assert report.house == "home"
    assert resolved.wait(2.0)
    assert seen["event"].answered is True


def test_locked_house_resolves_unanswered(fast_config):
    house = House(name="away", config=fast_config)
    house.lock()
    resolved, seen, on_resolved = _capture()

    report = ring_and_wait(house, on_resolved=on_resolved, config=fast_config)

    assert report.wait_result is WaitResult.COMPLETED
    assert report.answered is False
    assert resolved.wait(2.0)
    assert seen["event"].answered is False


def test_slow_occupant_times_out_then_callback_sees_late_answer(fast_config):
    """
    Timeout releases the coordinator but does not cancel the ring: the notify
    callback still fires when the occupant finally answers.
    """
    house = House(name="slow", response_delay=0.3, config=fast_config)
    group = RendezvousGroup(name="observed")
    resolved, seen, on_resolved = _capture()

    report = ring_and_wait(house, timeout=0.05, on_resolved=on_resolved,
                           config=fast_config, group=group)

    assert report.wait_result is WaitResult.TIMED_OUT
    assert report.answered is False
    assert report.elapsed_seconds < 0.3
    assert group.pending_count == 1

    assert resolved.wait(2.0), "Late answer never reached the notify callback"
    assert seen["event"].answered is True
    assert group.rounds_completed == 1


def test_default_timeout_comes_from_config(fast_config):
    house = House(name="cfg", response_delay=1.0, config=fast_config)

    report = ring_and_wait(house, config=fast_config)

    # 5 units * 10ms
    assert report.wait_result is WaitResult.TIMED_OUT
    assert 0.04 <= report.elapsed_seconds < 0.5


def test_report_serializes(fast_config):
    house = House(name="json", config=fast_config)
    report = ring_and_wait(house, config=fast_config)
    data = report.model_dump(mode="json")
    assert data["wait_result"] == "completed"
    assert data["answered"] is True
