"""Pytest configuration for the rendezvous playground."""
import os

import pytest

from rendezvous.base.config import (
    AlarmConfig,
    DoorbellConfig,
    OrchardConfig,
    PlaygroundConfig,
    set_config,
)


def pytest_configure():
    # Keep any scenario that falls back to get_config() fast.
    os.environ.setdefault("RENDEZVOUS_TIME_UNIT", "0.01")


@pytest.fixture
def fast_config():
    """1 time unit = 10ms, no alarm boot delay; installed as the global config."""
    cfg = PlaygroundConfig(
        time_unit=0.01,
        doorbell=DoorbellConfig(timeout_units=5.0, response_delay_units=0.0),
        alarm=AlarmConfig(boot_delay_units=0.0),
        orchard=OrchardConfig(fade_seconds=20.0, ticks=2, interval_units=1.0),
    )
    set_config(cfg)
    yield cfg
    set_config(None)
