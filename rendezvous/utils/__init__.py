"""Module __init__: small helpers shared across the package."""
#
# KEY MODULES:
# - **dispatch.py**: run a callback off the caller's thread without losing its exceptions
#
