"""Module __init__: synchronization primitives."""
#
# KEY MODULES:
# - **group.py**: RendezvousGroup, the counting join (enter / leave / wait / notify)
#

from rendezvous.sync.group import RendezvousGroup, WaitResult, NotifyPolicy, GroupSnapshot

__all__ = ["RendezvousGroup", "WaitResult", "NotifyPolicy", "GroupSnapshot"]
