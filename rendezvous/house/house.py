"""
House - doors, windows, a doorbell and a lazily booted alarm.

DESIGN:
Every state change goes through an explicit method that performs the side
effect and the mutation together:

    lock()        -> close all windows and doors, mark locked, arm the alarm
    unlock()      -> mark unlocked, disarm the alarm
    open_window() -> mark a window open, sound the alarm if armed

The alarm system is built the first time it is needed. Construction is
guarded by a lock so two threads touching a fresh house boot exactly one
alarm. Note that merely asking whether the alarm is active counts as
needing it. The boot happens before the state lock is taken, so a slow
first boot never stalls readers of `locked` or `windows_closed`.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Optional, Protocol

from rendezvous.base.config import PlaygroundConfig, get_config
from rendezvous.house.alarm import AlarmSystem

logger = logging.getLogger(__name__)


class DailyRoutine(Protocol):
    """The slice of a house its owner needs day to day."""

    def lock(self) -> None: ...

    def unlock(self) -> None: ...

    def open_window(self) -> None: ...


class House:
    """A house that can be locked, aired out and rung at."""

    def __init__(
        self,
        name: str = "house",
        response_delay: Optional[float] = None,
        alarm_boot_delay: Optional[float] = None,
        config: Optional[PlaygroundConfig] = None,
    ):
        cfg = config or get_config()
        self.name = name
        # How long whoever is home takes to reach the door
        self.response_delay = cfg.response_delay if response_delay is None else response_delay
        self.alarm_boot_delay = cfg.alarm_boot_delay if alarm_boot_delay is None else alarm_boot_delay

        self._state_lock = threading.RLock()
        self._locked = False
        self._windows_closed = True

        self._alarm: Optional[AlarmSystem] = None
        self._alarm_init_lock = threading.Lock()

        logger.info(f"[House:{self.name}] House is set up")

    # ------------------------------------------------------------------
    # Alarm (initialized on first use)
    # ------------------------------------------------------------------

    @property
    def alarm_booted(self) -> bool:
        """True once the alarm system exists. Does not trigger a boot."""
        return self._alarm is not None

    def _alarm_system(self) -> AlarmSystem:
        if self._alarm is None:
            with self._alarm_init_lock:
                if self._alarm is None:
                    self._alarm = AlarmSystem(boot_delay=self.alarm_boot_delay)
        return self._alarm

    @property
    def alarm_active(self) -> bool:
        return self._alarm_system().active

    @property
    def alarm_alerts(self) -> int:
        return self._alarm.alerts if self._alarm is not None else 0

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def locked(self) -> bool:
        with self._state_lock:
            return self._locked

    @property
    def windows_closed(self) -> bool:
        with self._state_lock:
            return self._windows_closed

    def lock(self) -> None:
        alarm = self._alarm_system()
        with self._state_lock:
            self._close_all_windows_and_doors()
            self._locked = True
            alarm.activate()
        logger.info(f"[House:{self.name}] locked the house")

    def unlock(self) -> None:
        alarm = self._alarm_system()
        with self._state_lock:
            self._locked = False
            alarm.deactivate()
        logger.info(f"[House:{self.name}] unlocked the house")

    def open_window(self) -> None:
        logger.info(f"[House:{self.name}] opening a window")
        alarm = self._alarm_system()
        with self._state_lock:
            self._windows_closed = False
            if alarm.active:
                alarm.sound_break_in()

    def _close_all_windows_and_doors(self) -> None:
        self._windows_closed = True
        logger.info(f"[House:{self.name}] locked all doors and windows")

    # ------------------------------------------------------------------
    # Doorbell
    # ------------------------------------------------------------------

    def ring_doorbell(self, reply: Optional[Callable[[], None]] = None) -> bool:
        """
        Ring the bell and, if someone is home, let them answer.

        Nobody answers a locked house. Otherwise the occupant takes
        `response_delay` seconds to reach the door and then calls `reply`.
        Runs on the caller's thread.

        Returns:
            True if the door was answered
        """
        logger.info(f"[House:{self.name}] 🔔 RING RING")
        if self.locked:
            return False
        if self.response_delay > 0:
            time.sleep(self.response_delay)
        if reply is not None:
            reply()
        return True
