"""Shared application constants.

Centralizes repeat values used across tracking and statistics logic so we can
document and adjust them in one place.
"""

# Mean earth radius in meters (haversine)
EARTH_RADIUS_M = 6371000.0

# GPS fixes with a worse horizontal accuracy than this are dropped (meters)
DEFAULT_MAX_ACCURACY_M = 50.0

# Trailing window for step moving averages (days)
MOVING_AVERAGE_WINDOW = 7

# Bounds accepted by the trends endpoint (days)
TRENDS_MIN_DAYS = 7
TRENDS_MAX_DAYS = 365
TRENDS_DEFAULT_DAYS = 30

# Upper bound for a single day's step count accepted from a device
MAX_DAILY_STEPS = 100000

# Rough estimators: 0.04 kcal per step for a 70 kg walker, 0.762 m stride
CALORIES_PER_STEP = 0.04
REFERENCE_WEIGHT_KG = 70.0
STEP_LENGTH_M = 0.762

# Habit tracker activity levels: steps below each bound map to levels 1..3,
# anything at or above the last bound is level 4. Zero steps is level 0.
ACTIVITY_LEVEL_BOUNDS = [5000, 7500, 10000]

# Days covered by the habit tracker and the summary windows
HABIT_TRACKER_DAYS = 365
SUMMARY_WINDOWS = {"week": 7, "month": 30}
