"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

# Prior "late" entries tolerated per subject before the next one becomes an absence.
LATE_CONVERSION_THRESHOLD = 4
TARDINESS_REMARK = "[Auto-converted] {ordinal} late for this subject - marked as absent"
REMARK_SEPARATOR = " | "

PASSING_GRADE = 75
MIN_ATTENDANCE_PERCENTAGE = 75
HONOR_ROLL_MIN_AVERAGE = 90
MIN_GRADE = 0
MAX_GRADE = 100

HALF_DAY_WEIGHT = 0.5
HIGH_ATTENDANCE_RATE = 90
LOW_ATTENDANCE_RATE = 75
