"""Rendezvous: a counting join primitive and the small scenarios that exercise it."""
#
# PURPOSE:
# Top-level package. The interesting piece lives in sync/group.py; everything
# under house/ and scenarios/ is a worked example built on top of it.
#
# WHAT'S IN THIS PACKAGE:
# - base/: configuration and logging setup
# - errors.py: structured error taxonomy
# - sync/: RendezvousGroup (enter / leave / wait / notify)
# - utils/: detached callback dispatch
# - house/: House, AlarmSystem and the doorbell ring
# - scenarios/: burglar check and apple watching
#

from rendezvous.errors import (
    ErrorCode,
    RendezvousError,
    UnbalancedLeaveError,
    NotifyRejectedError,
    ConfigError,
)
from rendezvous.sync.group import RendezvousGroup, WaitResult, NotifyPolicy, GroupSnapshot

__all__ = [
    "ErrorCode",
    "RendezvousError",
    "UnbalancedLeaveError",
    "NotifyRejectedError",
    "ConfigError",
    "RendezvousGroup",
    "WaitResult",
    "NotifyPolicy",
    "GroupSnapshot",
]

__version__ = "0.1.0"
