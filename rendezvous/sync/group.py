"""
RendezvousGroup - a counting join with a bounded wait.

PURPOSE:
Lets a coordinator start N units of work on other threads and then either
block until all of them report back (wait) or be told when they have
(notify). Each unit brackets itself with enter() / leave().

USAGE:
    from rendezvous.sync.group import RendezvousGroup, WaitResult

    group = RendezvousGroup(name="doorbell")
    group.enter()
    run_detached(do_work_then_leave, group)

    if group.wait(timeout=5.0) is WaitResult.TIMED_OUT:
        ...  # work is still running; it will still leave() later

    group.notify(lambda: print("all done"))

ROUNDS:
A round ends every time the pending count drops back to zero. Callbacks
registered during a round fire once, at the end of that round, and are then
forgotten. A callback registered while the count is already zero fires
straight away.

THREAD SAFETY:
- One lock guards the counter and the callback slot
- A Condition built on that same lock wakes waiters
- Callbacks are dispatched after the lock is released, never on the
  thread that called leave()/notify()
- One worker runs a round's callbacks back to back, so they finish in
  registration order
"""

from __future__ import annotations

import asyncio
import logging
import math
import threading
from collections import deque
from concurrent.futures import Executor
from contextlib import contextmanager
from enum import Enum
from itertools import count
from typing import Any, Callable, Deque, Iterator, List, Optional

from pydantic import BaseModel, ConfigDict

from rendezvous.errors import NotifyRejectedError, invalid_timeout, unbalanced_leave
from rendezvous.utils.dispatch import dispatch

logger = logging.getLogger(__name__)

Callback = Callable[[], Any]

_group_ids = count(1)


class WaitResult(str, Enum):
    """Outcome of RendezvousGroup.wait(). A timeout is a normal outcome, not an error."""
    COMPLETED = "completed"
    TIMED_OUT = "timed_out"


class NotifyPolicy(str, Enum):
    """
    What notify() does when a callback is already waiting for the current round.

    QUEUE: keep both, fire in registration order
    REPLACE: drop the earlier one, keep the newest
    REJECT: raise NotifyRejectedError
    """
    QUEUE = "queue"
    REPLACE = "replace"
    REJECT = "reject"


class GroupSnapshot(BaseModel):
    """Point-in-time view of a group, safe to hand to other threads or serialize."""
    model_config = ConfigDict(frozen=True)

    name: str
    pending_count: int
    rounds_completed: int
    callbacks_pending: int
    policy: NotifyPolicy


class RendezvousGroup:
    """
    Counting join primitive.

    Invariants:
    - pending_count never goes below zero; an unmatched leave() raises
      UnbalancedLeaveError and leaves the count untouched
    - every callback passed to notify() runs exactly once
    - a callback registered while work is pending runs only after the
      count has returned to zero
    """

    def __init__(
        self,
        name: Optional[str] = None,
        policy: NotifyPolicy = NotifyPolicy.QUEUE,
        executor: Optional[Executor] = None,
    ):
        self.name = name or f"group-{next(_group_ids)}"
        self.policy = NotifyPolicy(policy)
        self._executor = executor

        self._lock = threading.Lock()
        self._drained = threading.Condition(self._lock)
        self._pending = 0
        self._rounds = 0
        self._callbacks: Deque[Callback] = deque()

    def __repr__(self) -> str:
        return f"RendezvousGroup(name={self.name!r}, pending={self._pending}, rounds={self._rounds})"

    # ------------------------------------------------------------------
    # Counting
    # ------------------------------------------------------------------

    def enter(self) -> None:
        """Mark one more unit of work as outstanding."""
        with self._lock:
            self._pending += 1
            pending = self._pending
        logger.debug(f"[Group:{self.name}] enter -> pending={pending}")

    def leave(self) -> None:
        """
        Mark one outstanding unit of work as finished.

        When this brings the count to zero the round ends: waiters wake up
        and every registered callback is dispatched.

        Raises:
            UnbalancedLeaveError: If nothing is pending (a double release)
        """
        with self._lock:
            if self._pending == 0:
                error = unbalanced_leave(self.name)
                logger.error(f"[Group:{self.name}] {error}")
                raise error

            self._pending -= 1
            pending = self._pending
            rounds = self._rounds
            ready: List[Callback] = []
            if pending == 0:
                self._rounds += 1
                rounds = self._rounds
                ready = list(self._callbacks)
                self._callbacks.clear()
                self._drained.notify_all()

        logger.debug(f"[Group:{self.name}] leave -> pending={pending}")
        if pending == 0:
            logger.debug(f"[Group:{self.name}] round {rounds} complete, {len(ready)} callback(s)")
            self._fire(ready)

    @contextmanager
    def track(self) -> Iterator["RendezvousGroup"]:
        """Bracket a block with enter()/leave(). Leaves even if the block raises."""
        self.enter()
        try:
            yield self
        finally:
            self.leave()

    def run(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> None:
        """
        Enter, run fn on a worker, and leave once fn returns or raises.

        The worker is the group's executor when one was given, otherwise a
        detached daemon thread. A raising fn is logged and still leaves.
        If the worker cannot be scheduled at all, the group leaves again and
        the scheduling error propagates.
        """
        self.enter()

        def _unit():
            try:
                fn(*args, **kwargs)
            finally:
                self.leave()

        try:
            dispatch(_unit, executor=self._executor, name=f"{self.name}-worker")
        except BaseException:
            # The unit never started, so nothing else will release it
            self.leave()
            raise

    # ------------------------------------------------------------------
    # Waiting
    # ------------------------------------------------------------------

    def wait(self, timeout: Optional[float] = None) -> WaitResult:
        """
        Block until nothing is pending or `timeout` seconds have passed.

        Args:
            timeout: Seconds to wait. None (or anything beyond
                threading.TIMEOUT_MAX, including infinity) waits forever;
                zero or negative polls.

        Returns:
            WaitResult.COMPLETED or WaitResult.TIMED_OUT. Outstanding work is
            never cancelled; it may still leave() after a timeout.

        Raises:
            RendezvousError: If timeout is not a number or is NaN (GROUP_003)
        """
        if timeout is not None:
            if isinstance(timeout, bool) or not isinstance(timeout, (int, float)):
                raise invalid_timeout(timeout)
            if math.isnan(timeout):
                raise invalid_timeout(timeout)
            if timeout > threading.TIMEOUT_MAX:
                timeout = None
            else:
                timeout = max(0.0, float(timeout))

        with self._lock:
            drained = self._drained.wait_for(lambda: self._pending == 0, timeout=timeout)
            pending = self._pending

        if drained:
            return WaitResult.COMPLETED
        logger.info(f"[Group:{self.name}] wait timed out after {timeout}s with {pending} pending")
        return WaitResult.TIMED_OUT

    async def wait_async(self, timeout: Optional[float] = None) -> WaitResult:
        """Awaitable wait() that parks a worker thread instead of the event loop."""
        return await asyncio.to_thread(self.wait, timeout)

    # ------------------------------------------------------------------
    # Completion callbacks
    # ------------------------------------------------------------------

    def notify(self, callback: Callback) -> None:
        """
        Register a one-shot callback for the end of the current round.

        If nothing is pending the callback is dispatched immediately. It never
        runs on the calling thread.

        Raises:
            NotifyRejectedError: Under NotifyPolicy.REJECT, if a callback is
                already waiting for this round
        """
        if not callable(callback):
            raise TypeError(f"notify() expects a callable, got {type(callback).__name__}")

        with self._lock:
            if self._pending == 0:
                ready = [callback]
            else:
                ready = []
                if self._callbacks and self.policy is NotifyPolicy.REJECT:
                    raise NotifyRejectedError(
                        message=f"Group '{self.name}' already has a pending completion callback",
                        details={"group": self.name, "pending_count": self._pending},
                    )
                if self.policy is NotifyPolicy.REPLACE:
                    if self._callbacks:
                        logger.debug(f"[Group:{self.name}] replacing pending callback")
                    self._callbacks.clear()
                self._callbacks.append(callback)

        self._fire(ready)

    def _fire(self, callbacks: List[Callback]) -> None:
        """Run a round's callbacks in registration order on one worker."""
        if callbacks:
            dispatch(self._run_callbacks, callbacks, executor=self._executor, name=f"{self.name}-notify")

    def _run_callbacks(self, callbacks: List[Callback]) -> None:
        for callback in callbacks:
            try:
                callback()
            except Exception as e:
                logger.error(f"[Group:{self.name}] Error in completion callback: {e}", exc_info=e)

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------

    @property
    def pending_count(self) -> int:
        with self._lock:
            return self._pending

    @property
    def rounds_completed(self) -> int:
        with self._lock:
            return self._rounds

    @property
    def callbacks_pending(self) -> int:
        with self._lock:
            return len(self._callbacks)

    def snapshot(self) -> GroupSnapshot:
        with self._lock:
            return GroupSnapshot(
                name=self.name,
                pending_count=self._pending,
                rounds_completed=self._rounds,
                callbacks_pending=len(self._callbacks),
                policy=self.policy,
            )
