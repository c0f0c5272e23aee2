"""Module burglar: ring the bell, and if nobody answers, climb in through a window."""
#
# PURPOSE:
# The burglar reuses one routine for every house he finds: ring, wait a
# bounded time for an answer, then decide. The decision runs in the
# RendezvousGroup's notify callback, i.e. on another thread, once the ring
# has resolved.
#

from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

from pydantic import BaseModel

from rendezvous.base.config import PlaygroundConfig
from rendezvous.house.doorbell import DoorbellEvent, DoorbellReport, ring_and_wait
from rendezvous.house.house import House
from rendezvous.sync.group import WaitResult

logger = logging.getLogger(__name__)

# Extra seconds granted to the decision beyond the walk to the door and the alarm boot
DECISION_SLACK = 1.0


class BurglarReport(BaseModel):
    house: str
    burglable: bool
    broke_in: bool
    alarm_triggered: bool
    wait_result: WaitResult
    decided: bool = True


def check_burglable(
    house: House,
    callback: Callable[[bool], None],
    timeout: Optional[float] = None,
    config: Optional[PlaygroundConfig] = None,
) -> DoorbellReport:
    """
    Ring at `house` and hand `burglable` (nobody answered) to `callback`.

    callback runs off the calling thread once the ring has resolved.
    """
    def _decide(event: DoorbellEvent) -> None:
        callback(not event.answered)

    return ring_and_wait(house, timeout=timeout, on_resolved=_decide, config=config)


def burglar_visit(
    house: House,
    timeout: Optional[float] = None,
    config: Optional[PlaygroundConfig] = None,
    decision_timeout: Optional[float] = None,
) -> BurglarReport:
    """
    Run the full routine and block until the burglar has made up his mind.

    If nobody answered, he opens a window. An armed alarm sounds.

    The decision only comes once the occupant (if any) reaches the door, so
    after the doorbell wait the burglar gives it `decision_timeout` more
    seconds. By default that is the house's response delay plus its alarm
    boot delay plus DECISION_SLACK. If it still has not come, he walks away
    and the report says `decided=False`.
    """
    if decision_timeout is None:
        decision_timeout = house.response_delay + house.alarm_boot_delay + DECISION_SLACK
    decided = threading.Event()
    walked_away = threading.Event()
    outcome = {"burglable": False, "broke_in": False}
    alerts_before = house.alarm_alerts

    def _act(burglable: bool) -> None:
        try:
            if walked_away.is_set():
                return
            outcome["burglable"] = burglable
            if not burglable:
                logger.info(f"[Burglar] Someone is home at {house.name}, leaving quickly")
                return
            house.open_window()
            outcome["broke_in"] = True
        finally:
            decided.set()

    report = check_burglable(house, _act, timeout=timeout, config=config)
    made_up = decided.wait(decision_timeout)
    if not made_up:
        walked_away.set()
        logger.warning(
            f"[Burglar] No decision about {house.name} after {decision_timeout:.2f}s, walking away"
        )

    alarm_triggered = house.alarm_alerts > alerts_before
    if outcome["broke_in"] and not alarm_triggered:
        logger.warning(f"[Burglar] Got into {house.name} without tripping an alarm")

    return BurglarReport(
        house=house.name,
        burglable=outcome["burglable"],
        broke_in=outcome["broke_in"],
        alarm_triggered=alarm_triggered,
        wait_result=report.wait_result,
        decided=made_up,
    )
