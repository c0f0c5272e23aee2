"""
House & Alarm State Transition Tests

INVARIANTS:
1. The alarm system boots on first use, never at construction
2. Concurrent first use boots exactly one alarm
3. lock() closes everything before arming; unlock() disarms
4. Opening a window sounds an armed alarm, and only an armed one
"""

import threading
import time

import pytest

from rendezvous.house import house as house_module
from rendezvous.house.alarm import AlarmSystem
from rendezvous.house.house import DailyRoutine, House


@pytest.fixture
def house(fast_config):
    return House(name="test-house", config=fast_config)


def test_alarm_not_booted_at_construction(house):
    assert house.alarm_booted is False
    assert house.alarm_alerts == 0


def test_checking_alarm_state_boots_it(house):
    assert house.alarm_active is False
    assert house.alarm_booted is True


def test_open_window_first_boots_alarm_but_does_not_sound(house):
    """Matches the morning routine: airing out the house boots the alarm lazily."""
    house.open_window()

    assert house.windows_closed is False
    assert house.alarm_booted is True
    assert house.alarm_alerts == 0


def test_lock_closes_windows_and_arms(house):
    house.open_window()
    house.lock()

    assert house.locked is True
    assert house.windows_closed is True
    assert house.alarm_active is True


def test_open_window_on_locked_house_sounds_alarm(house, caplog):
    house.lock()

    with caplog.at_level("CRITICAL"):
        house.open_window()

    assert house.alarm_alerts == 1
    assert any("BREAK IN ALERT" in r.getMessage() for r in caplog.records)


def test_unlock_disarms(house):
    house.lock()
    house.unlock()

    assert house.locked is False
    assert house.alarm_active is False

    house.open_window()
    assert house.alarm_alerts == 0


def test_concurrent_first_use_boots_one_alarm(fast_config, monkeypatch):
    """
    INVARIANT: lazy initialization is guarded; racing threads share one alarm.
    """
    boots = []
    real_init = AlarmSystem.__init__

    def _counting_init(self, boot_delay=1.0):
        boots.append(threading.current_thread().name)
        real_init(self, boot_delay=0.05)

    monkeypatch.setattr(house_module.AlarmSystem, "__init__", _counting_init)
    house = House(name="racy", config=fast_config)

    barrier = threading.Barrier(8)

    def _touch():
        barrier.wait()
        _ = house.alarm_active

    threads = [threading.Thread(target=_touch) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(5.0)

    assert len(boots) == 1, f"Alarm booted {len(boots)} times: {boots}"


def test_ring_unlocked_house_is_answered(house):
    replies = []
    assert house.ring_doorbell(reply=lambda: replies.append(True)) is True
    assert replies == [True]


def test_ring_locked_house_is_not_answered(house):
    house.lock()
    replies = []
    assert house.ring_doorbell(reply=lambda: replies.append(True)) is False
    assert replies == []


def test_ring_without_reply_block(house):
    assert house.ring_doorbell() is True


def test_explicit_delays_override_config(fast_config):
    h = House(name="slow", response_delay=0.2, alarm_boot_delay=0.0, config=fast_config)
    assert h.response_delay == 0.2


def test_daily_routine_drives_a_house(house):
    def _morning(routine: DailyRoutine) -> None:
        routine.open_window()
        routine.lock()

    _morning(house)
    assert house.locked is True
    assert house.windows_closed is True
    assert house.alarm_alerts == 0


def test_slow_alarm_boot_does_not_block_state_readers(fast_config):
    """
    INVARIANT: the first alarm boot happens outside the state lock, so
    locked / windows_closed (and ringing the bell) stay responsive meanwhile.
    """
    house = House(name="slow-boot", alarm_boot_delay=0.4, config=fast_config)
    opener = threading.Thread(target=house.open_window, daemon=True)
    opener.start()
    time.sleep(0.05)

    start = time.monotonic()
    assert house.locked is False
    _ = house.windows_closed
    assert house.ring_doorbell() is True
    elapsed = time.monotonic() - start

    assert elapsed < 0.2
    opener.join(2.0)
    assert house.windows_closed is False
    assert house.alarm_booted is True
