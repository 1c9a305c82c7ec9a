"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
One leave unit is one business day.
"""

DEFAULT_PTO_UNITS = 10
DEFAULT_SICK_UNITS = 5

DEFAULT_CUTOFF_TIME = "17:30"
LATE_CLOCK_IN_OFFSET_MINUTES = 1
# When the daily auto clock-out job fires (HH:MM).
DEFAULT_RUN_AT = "23:59"

AUTO_CLOCK_OUT_EVENT = "AUTO_CLOCK_OUT"

DEFAULT_HISTORY_LIMIT = 200
