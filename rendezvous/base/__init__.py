"""Module __init__: foundational pieces shared by every other package."""
#
# WHAT'S IN THIS MODULE:
# - config.py: time unit scaling, scenario knobs, logging setup
#
