"""
Orchard watch - several workers, one rendezvous.

PURPOSE:
Each picked apple is watched by its own worker thread. A worker enters the
shared group, looks at its apple a few times while the color fades, then
throws the apple away (leaves). The notify callback fires once, after the
last apple is gone.

COLOR MODEL:
Colors are RGB triples in [0, 1]. A picked apple keeps its hue and
saturation; brightness (HSV value) falls linearly from the color at pick
time to black over `fade_seconds`.
"""

from __future__ import annotations

import colorsys
import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from pydantic import BaseModel

from rendezvous.base.config import PlaygroundConfig, get_config
from rendezvous.sync.group import RendezvousGroup, WaitResult

logger = logging.getLogger(__name__)

RGB = Tuple[float, float, float]

RED: RGB = (1.0, 0.0, 0.0)
GREEN: RGB = (0.0, 1.0, 0.0)
BLUE: RGB = (0.0, 0.0, 1.0)


@dataclass
class Apple:
    name: str
    color: Optional[RGB] = None      # color at pick time; None = still on the tree
    picked_at: Optional[float] = None  # time.time() of picking
    fade_seconds: float = 20.0

    @classmethod
    def picked(cls, name: str, color: RGB, fade_seconds: float = 20.0,
               now: Optional[float] = None) -> "Apple":
        """Find and pick an apple in one go."""
        return cls(name=name, color=color,
                   picked_at=time.time() if now is None else now,
                   fade_seconds=fade_seconds)

    @property
    def is_picked(self) -> bool:
        return self.color is not None and self.picked_at is not None

    def pick(self, color: RGB, now: Optional[float] = None) -> "Apple":
        """Return a picked copy. The original apple stays on the tree."""
        return Apple(name=self.name, color=color,
                     picked_at=time.time() if now is None else now,
                     fade_seconds=self.fade_seconds)

    def time_since_picked(self, now: Optional[float] = None) -> Optional[float]:
        if not self.is_picked:
            return None
        return (time.time() if now is None else now) - self.picked_at

    def color_at(self, now: Optional[float] = None) -> Optional[RGB]:
        """Current color, or None for an apple nobody has picked yet."""
        elapsed = self.time_since_picked(now)
        if elapsed is None:
            return None

        factor = min(1.0, max(0.0, 1.0 - elapsed / self.fade_seconds))
        hue, saturation, brightness = colorsys.rgb_to_hsv(*self.color)
        return colorsys.hsv_to_rgb(hue, saturation, brightness * factor)


class AppleSample(BaseModel):
    elapsed_seconds: float
    color: RGB


class OrchardReport(BaseModel):
    wait_result: WaitResult
    samples: Dict[str, List[AppleSample]]
    rounds_completed: int


@dataclass
class _Watchlog:
    lock: threading.Lock = field(default_factory=threading.Lock)
    samples: Dict[str, List[AppleSample]] = field(default_factory=dict)

    def record(self, apple: Apple) -> None:
        now = time.time()
        sample = AppleSample(elapsed_seconds=round(apple.time_since_picked(now), 4),
                             color=apple.color_at(now))
        with self.lock:
            self.samples.setdefault(apple.name, []).append(sample)


def watch_apples(
    apples: Sequence[Apple],
    ticks: Optional[int] = None,
    interval: Optional[float] = None,
    on_all_discarded: Optional[Callable[[], None]] = None,
    timeout: Optional[float] = None,
    config: Optional[PlaygroundConfig] = None,
) -> OrchardReport:
    """
    Watch every apple on its own worker, then wait for all of them to be thrown away.

    Args:
        apples: Picked apples to watch (unpicked ones are skipped with a warning)
        ticks: Looks per apple; defaults to the configured orchard ticks
        interval: Seconds between looks; defaults to the configured interval
        on_all_discarded: notify() callback for the end of the round
        timeout: Bound on the coordinator's wait; None waits for every watcher
        config: Optional config override
    """
    cfg = config or get_config()
    ticks = cfg.orchard.ticks if ticks is None else ticks
    interval = cfg.orchard_interval if interval is None else interval

    group = RendezvousGroup(name="orchard")
    watchlog = _Watchlog()

    def _watch(apple: Apple) -> None:
        for tick in range(ticks):
            if tick:
                time.sleep(interval)
            watchlog.record(apple)
        logger.info(f"[Orchard] threw away {apple.name}")

    if on_all_discarded is not None:
        # Hold the round open until every watcher has entered
        group.enter()

    for apple in apples:
        if not apple.is_picked:
            logger.warning(f"[Orchard] {apple.name} has not been picked, nothing to watch")
            continue
        group.run(_watch, apple)

    if on_all_discarded is not None:
        group.notify(on_all_discarded)
        group.leave()

    result = group.wait(timeout=timeout)
    with watchlog.lock:
        samples = {name: list(entries) for name, entries in watchlog.samples.items()}

    return OrchardReport(
        wait_result=result,
        samples=samples,
        rounds_completed=group.rounds_completed,
    )
