"""Module __init__: the house used by the doorbell and burglar scenarios."""
#
# WHAT'S IN THIS MODULE:
# - alarm.py: AlarmSystem (slow boot, activate / deactivate / sound)
# - house.py: House and the DailyRoutine protocol
# - doorbell.py: ring_and_wait, the RendezvousGroup-coordinated ring
#
