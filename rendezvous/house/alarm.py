"""Module alarm: the house's alarm system."""
#
# PURPOSE:
# A deliberately slow-to-boot alarm. The House creates it on first use, so
# the boot delay shows up the first time anyone looks at the alarm state, not
# when the house is built.
#
# STATE TRANSITIONS:
#   inactive --activate()--> active --deactivate()--> inactive
#   sound_break_in() only counts an alert; callers check `active` first.
#

import logging
import threading
import time

logger = logging.getLogger(__name__)


class AlarmSystem:
    """Alarm with explicit activate/deactivate transitions."""

    def __init__(self, boot_delay: float = 1.0):
        logger.info("[Alarm] 🛡 Alarm system is booting...")
        time.sleep(boot_delay)
        self._lock = threading.Lock()
        self._active = False
        self._alerts = 0
        logger.info("[Alarm] 🛡 Alarm system is ready to go")

    @property
    def active(self) -> bool:
        with self._lock:
            return self._active

    @property
    def alerts(self) -> int:
        """How many break-in alerts have sounded since boot."""
        with self._lock:
            return self._alerts

    def activate(self) -> None:
        with self._lock:
            self._active = True
        logger.info("[Alarm] 🛡 Alarm activated")

    def deactivate(self) -> None:
        with self._lock:
            self._active = False
        logger.warning("[Alarm] ⚠️ Alarm deactivated")

    def sound_break_in(self) -> None:
        with self._lock:
            self._alerts += 1
        logger.critical("[Alarm] 🚨 BREAK IN ALERT 🚨")
