"""Module __init__: scenarios built on RendezvousGroup."""
#
# KEY MODULES:
# - **burglar.py**: ring, wait, decide (single unit of work)
# - **orchard.py**: one watcher per apple, one callback when all are gone
#
