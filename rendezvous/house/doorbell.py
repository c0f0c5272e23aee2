"""
Doorbell ring coordinated through a RendezvousGroup.

FLOW:
1. Coordinator creates a group and enters it once
2. A worker rings the bell; if the door is answered the reply marks the
   DoorbellEvent as answered. The worker leaves once the ring resolves.
3. Coordinator waits up to `timeout`
4. Coordinator registers `on_resolved` via notify(). It runs once the worker
   has left, which for a slow occupant can be well after the wait timed out.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

from pydantic import BaseModel

from rendezvous.base.config import PlaygroundConfig, get_config
from rendezvous.house.house import House
from rendezvous.sync.group import RendezvousGroup, WaitResult
from rendezvous.utils.dispatch import run_detached

logger = logging.getLogger(__name__)


@dataclass
class DoorbellEvent:
    """One ring. Written by the responder, read by the coordinator."""
    answered: bool = False
    answered_at: Optional[float] = None

    def mark_answered(self) -> None:
        self.answered_at = time.monotonic()
        self.answered = True


class DoorbellReport(BaseModel):
    house: str
    answered: bool
    wait_result: WaitResult
    elapsed_seconds: float


def ring_and_wait(
    house: House,
    timeout: Optional[float] = None,
    on_resolved: Optional[Callable[[DoorbellEvent], None]] = None,
    config: Optional[PlaygroundConfig] = None,
    group: Optional[RendezvousGroup] = None,
) -> DoorbellReport:
    """
    Ring `house` and wait up to `timeout` seconds for the ring to resolve.

    Args:
        house: The house to ring at (passed explicitly, never a global)
        timeout: Seconds to wait; defaults to the configured doorbell timeout
        on_resolved: Called with the DoorbellEvent once the ring has resolved,
            off the coordinator's thread
        config: Optional config override
        group: Optional pre-built group (tests use this to observe the round)

    Returns:
        DoorbellReport. `answered` is the state when wait() returned; a late
        answer after a timeout only reaches on_resolved.
    """
    cfg = config or get_config()
    wait_timeout = cfg.doorbell_timeout if timeout is None else timeout
    group = group or RendezvousGroup(name=f"doorbell-{house.name}")
    event = DoorbellEvent()

    def _ring():
        try:
            house.ring_doorbell(reply=event.mark_answered)
        finally:
            group.leave()

    started = time.monotonic()
    group.enter()
    run_detached(_ring, name=f"ring-{house.name}")
    result = group.wait(timeout=wait_timeout)
    elapsed = time.monotonic() - started

    # Read once, right after the wait, so the report matches what the coordinator saw
    answered = event.answered

    if on_resolved is not None:
        group.notify(lambda: on_resolved(event))

    logger.info(
        f"[Doorbell:{house.name}] {result.value} after {elapsed:.2f}s "
        f"({'answered' if answered else 'no answer yet'})"
    )
    return DoorbellReport(
        house=house.name,
        answered=answered,
        wait_result=result,
        elapsed_seconds=round(elapsed, 4),
    )

